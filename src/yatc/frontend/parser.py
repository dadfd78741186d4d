"""
yatc Recursive Descent Parser
=============================

This module implements the parser for the yatc toy language. It pulls
tokens from the lexer through a TokenCursor and builds the Abstract
Syntax Tree (AST) defined in yatc.frontend.ast.

Grammar (Simplified EBNF)
-------------------------
program         ::= (function | extern | ';')*
function        ::= 'func' func_decl block
extern          ::= 'extern' func_decl ';'
func_decl       ::= IDENTIFIER '(' params? ')' (':' type)?
params          ::= param (',' param)* ','?
param           ::= IDENTIFIER ':' type
type            ::= IDENTIFIER
                  | '*' type                    (rejected)
                  | '[' type ']'                (rejected)
                  | '[' type ';' NUMBER ']'     (rejected)

block           ::= '{' statement* '}'
statement       ::= block | if_stmt | while_stmt | var_decl
                  | return_stmt | expr_stmt | ';'
if_stmt         ::= 'if' expression block ('else' block)?
while_stmt      ::= 'while' expression block
var_decl        ::= 'var' IDENTIFIER ':' type ('=' expression)? ';'
return_stmt     ::= 'return' expression? ';'
expr_stmt       ::= expression ';'

Expression Tiers (lowest to highest binding)
--------------------------------------------
assignment      =               right-associative
logical_or      ||              inert
logical_and     &&              inert
bitwise_or      |
bitwise_xor     ^
bitwise_and     &
equality        == !=
relational      < > <= >=
shift           << >>           inert
additive        + -
multiplicative  * / %
unary           - ~             (! & * rejected)
primary         IDENTIFIER, call, NUMBER, '(' expression ')'

Tier Routing
------------
Each tier parses its operands with the tier named in TIER_ROUTES. The
chain is the grammar as written, which means assignment descends
straight into bitwise_or and relational straight into additive.
Nothing routes into logical_or, logical_and or shift, so '||', '&&',
'<<' and '>>' are never consumed by the normal chain. An expression
such as `a && b;` stops after `a` and the statement then fails on the
'&&' where it expected ';'.

The inert tiers can still be entered by name with Parser.parse_tier().
When they meet their own operator they raise UnsupportedFeatureError.

Nesting Depth
-------------
Parentheses, calls, unary operators and blocks recurse, about one Python
frame per tier for each level of parentheses. Input that exhausts the
interpreter stack is reported as NestingTooDeepError at the last token
the parser saw.

Example Usage
-------------
>>> from yatc.frontend.parser import parse_source
>>> program = parse_source("extern gcd(a: i64, b: i64): i64;", "gcd.toy")
>>> program.declarations[0].name
'gcd'
"""

from functools import partial
from typing import Callable, Iterable, Optional, TypeVar

from yatc.errors import SourceLocation
from yatc.frontend.cursor import TokenCursor
from yatc.frontend.errors import (
    MalformedDeclarationError,
    NestingTooDeepError,
    UnsupportedFeatureError,
)
from yatc.frontend.lexer import Lexer, Token, TokenType, split_lines
from yatc.frontend.ast import (
    ProgramNode,
    Declaration,
    FunctionNode,
    ExternNode,
    ParameterNode,
    NamedType,
    Statement,
    BlockStatement,
    IfStatement,
    WhileStatement,
    VariableDeclaration,
    ReturnStatement,
    ExpressionStatement,
    EmptyStatement,
    Expression,
    AssignmentExpression,
    BinaryExpression,
    BinaryOperator,
    UnaryExpression,
    UnaryOperator,
    CallExpression,
    IdentifierExpression,
    NumberLiteral,
)


# =============================================================================
# Expression Tier Tables
# =============================================================================

# Tier name -> tier that parses its operands
TIER_ROUTES: dict[str, str] = {
    "assignment": "bitwise_or",
    "logical_or": "logical_and",
    "logical_and": "bitwise_or",
    "bitwise_or": "bitwise_xor",
    "bitwise_xor": "bitwise_and",
    "bitwise_and": "equality",
    "equality": "relational",
    "relational": "additive",
    "shift": "additive",
    "additive": "multiplicative",
    "multiplicative": "unary",
}

# Left-associative binary tiers and the operators each one folds
BINARY_TIERS: dict[str, dict[TokenType, BinaryOperator]] = {
    "bitwise_or": {TokenType.PIPE: BinaryOperator.BITWISE_OR},
    "bitwise_xor": {TokenType.CARET: BinaryOperator.BITWISE_XOR},
    "bitwise_and": {TokenType.AMPERSAND: BinaryOperator.BITWISE_AND},
    "equality": {
        TokenType.EQ: BinaryOperator.EQUAL,
        TokenType.NE: BinaryOperator.NOT_EQUAL,
    },
    "relational": {
        TokenType.LT: BinaryOperator.LESS,
        TokenType.LE: BinaryOperator.LESS_EQ,
        TokenType.GT: BinaryOperator.GREATER,
        TokenType.GE: BinaryOperator.GREATER_EQ,
    },
    "additive": {
        TokenType.PLUS: BinaryOperator.ADD,
        TokenType.MINUS: BinaryOperator.SUBTRACT,
    },
    "multiplicative": {
        TokenType.STAR: BinaryOperator.MULTIPLY,
        TokenType.SLASH: BinaryOperator.DIVIDE,
        TokenType.PERCENT: BinaryOperator.MODULO,
    },
}

# Tiers defined by the grammar but never reached from the chain. Each
# maps its operators to the feature name reported when one is met.
INERT_TIERS: dict[str, dict[TokenType, str]] = {
    "logical_or": {TokenType.OR: "logical or operator '||'"},
    "logical_and": {TokenType.AND: "logical and operator '&&'"},
    "shift": {
        TokenType.LSHIFT: "shift operator '<<'",
        TokenType.RSHIFT: "shift operator '>>'",
    },
}

UNARY_OPERATORS: dict[TokenType, UnaryOperator] = {
    TokenType.MINUS: UnaryOperator.NEGATE,
    TokenType.TILDE: UnaryOperator.BITWISE_NOT,
}

# Unary operators the grammar accepts but the toolchain cannot compile
UNSUPPORTED_UNARY: dict[TokenType, str] = {
    TokenType.NOT: "logical not operator '!'",
    TokenType.AMPERSAND: "address-of operator '&'",
    TokenType.STAR: "dereference operator '*'",
}

EXPRESSION_TIERS = (
    ("assignment",)
    + tuple(INERT_TIERS)
    + tuple(BINARY_TIERS)
    + ("unary", "primary")
)

T = TypeVar("T")


class Parser:
    """
    Recursive descent parser for yatc.

    Parses a token stream into an AST. The parser is fail-fast: the
    first error is raised to the caller and parsing stops.

    Usage:
        lexer = Lexer(source, filename)
        parser = Parser(lexer.tokenize(), filename, split_lines(source))
        ast = parser.parse()

    Attributes:
        filename: Name of the source file
        cursor: Lookahead buffer over the token stream
        allow_stray_semicolons: Skip bare ';' between declarations
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        allow_stray_semicolons: bool = True,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token iterable, normally Lexer.tokenize()
            filename: Source filename for error messages
            source_lines: Source text lines for error context
            allow_stray_semicolons: Skip bare ';' at the top level
        """
        self.filename = filename
        self.cursor = TokenCursor(tokens, source_lines)
        self.allow_stray_semicolons = allow_stray_semicolons

        # Tier name -> bound parser. Tiers call each other through this
        # table so one nesting level costs one Python frame per tier.
        self._tier_parsers: dict[str, Callable[[], Expression]] = {
            "assignment": self._parse_assignment,
            "unary": self._parse_unary,
            "primary": self._parse_primary,
        }
        for name in BINARY_TIERS:
            self._tier_parsers[name] = partial(self._parse_binary_tier, name)
        for name in INERT_TIERS:
            self._tier_parsers[name] = partial(self._parse_inert_tier, name)

    # =========================================================================
    # Main Entry Point
    # =========================================================================

    def parse(self) -> ProgramNode:
        """
        Parse the entire program.

        Returns:
            ProgramNode with every declaration in source order

        Raises:
            LexError: If the token stream reaches an invalid character
            ParseError: On the first syntax error
        """
        return self._guarded(self._parse_program)

    def _parse_program(self) -> ProgramNode:
        declarations: list[Declaration] = []

        while not self.cursor.at_end():
            if self.allow_stray_semicolons and self.cursor.match(TokenType.SEMICOLON):
                continue
            declarations.append(self._parse_declaration())

        return ProgramNode(
            tuple(declarations),
            location=SourceLocation(self.filename, 1, 1),
        )

    def _source_line(self, token: Token) -> Optional[str]:
        return self.cursor.source_line(token.line)

    def _unsupported(self, feature: str, token: Token,
                     alternative: Optional[str] = None) -> UnsupportedFeatureError:
        return UnsupportedFeatureError(
            feature,
            location=token.location,
            source_line=self._source_line(token),
            alternative=alternative,
        )

    def _guarded(self, parse: Callable[[], T]) -> T:
        """
        Run a parse method, reporting stack exhaustion as a ParseError.

        The except clause runs once the stack has unwound, so building
        the error is safe here.
        """
        try:
            return parse()
        except RecursionError:
            token = self.cursor.last_seen()
            raise NestingTooDeepError(
                location=token.location if token else None,
                source_line=self._source_line(token) if token else None,
            ) from None

    # =========================================================================
    # Declaration Parsing
    # =========================================================================

    def parse_declaration(self) -> Declaration:
        """Parse one top-level 'func' or 'extern' declaration."""
        return self._guarded(self._parse_declaration)

    def _parse_declaration(self) -> Declaration:
        if self.cursor.check(TokenType.FUNC):
            return self._parse_function()
        if self.cursor.check(TokenType.EXTERN):
            return self._parse_extern()
        raise self.cursor.unexpected(("'func'", "'extern'"))

    def _parse_function(self) -> FunctionNode:
        """
        Parse a function definition.

        Grammar: 'func' IDENTIFIER '(' params? ')' (':' type)? block
        """
        func_token = self.cursor.advance()
        name_token, parameters, return_type = self._parse_signature()
        name = name_token.lexeme

        if not self.cursor.check(TokenType.LBRACE, TokenType.EOF):
            after = self.cursor.peek()
            raise MalformedDeclarationError(
                name,
                f"function '{name}' has no body",
                location=after.location,
                hint="use 'extern' to declare a function defined elsewhere",
                source_line=self._source_line(after),
            )

        body = self._parse_block("function body")
        return FunctionNode(
            name, parameters, return_type, body, location=func_token.location
        )

    def _parse_extern(self) -> ExternNode:
        """
        Parse an extern declaration.

        Grammar: 'extern' IDENTIFIER '(' params? ')' (':' type)? ';'
        """
        extern_token = self.cursor.advance()
        name_token, parameters, return_type = self._parse_signature()
        name = name_token.lexeme

        if self.cursor.check(TokenType.LBRACE):
            brace = self.cursor.peek()
            raise MalformedDeclarationError(
                name,
                f"extern declaration '{name}' has a body",
                location=brace.location,
                hint="use 'func' to define a function",
                source_line=self._source_line(brace),
            )

        self.cursor.expect(TokenType.SEMICOLON, "';'", "extern declaration")
        return ExternNode(name, parameters, return_type, location=extern_token.location)

    def _parse_signature(
        self,
    ) -> tuple[Token, tuple[ParameterNode, ...], Optional[NamedType]]:
        """
        Parse the part shared by functions and externs.

        Returns:
            (name token, parameters, return type or None)
        """
        name_token = self.cursor.expect(TokenType.IDENTIFIER, "function name")
        self.cursor.expect(TokenType.LPAREN, "'('", "parameter list")
        parameters = self._parse_parameter_list()

        return_type = None
        if self.cursor.match(TokenType.COLON):
            return_type = self._parse_type()

        return name_token, parameters, return_type

    def _parse_parameter_list(self) -> tuple[ParameterNode, ...]:
        """Parse parameters up to and including ')'. A trailing comma is allowed."""
        parameters: list[ParameterNode] = []

        while not self.cursor.check(TokenType.RPAREN):
            if self.cursor.at_end():
                raise self.cursor.unexpected(("')'",), "parameter list")
            parameters.append(self._parse_parameter())
            if not self.cursor.match(TokenType.COMMA):
                break

        self.cursor.expect(TokenType.RPAREN, "')'", "parameter list")
        return tuple(parameters)

    def _parse_parameter(self) -> ParameterNode:
        """Parse a single 'name: type' parameter."""
        name_token = self.cursor.expect(
            TokenType.IDENTIFIER, "parameter name", "parameter list"
        )
        name = name_token.lexeme

        if not self.cursor.check(TokenType.COLON):
            if self.cursor.at_end():
                raise self.cursor.unexpected(("':'",), "parameter list")
            raise MalformedDeclarationError(
                name,
                f"parameter '{name}' has no type",
                location=name_token.location,
                hint=f"declare it as '{name}: <type>'",
                source_line=self._source_line(name_token),
            )
        self.cursor.advance()

        return ParameterNode(name, self._parse_type(), location=name_token.location)

    # =========================================================================
    # Type Parsing
    # =========================================================================

    def _parse_type(self) -> NamedType:
        """
        Parse a type annotation.

        Pointer and array shapes are consumed in full, so a malformed
        shape is reported as a syntax error, and then refused.

        Raises:
            UnsupportedFeatureError: For '*T', '[T]' and '[T; N]'
        """
        start = self.cursor.peek()
        feature = self._parse_type_shape()
        if feature is not None:
            raise self._unsupported(feature, start)
        return NamedType(start.lexeme, location=start.location)

    def _parse_type_shape(self) -> Optional[str]:
        """Consume one type. Returns None for a named type, else the feature name."""
        if self.cursor.match(TokenType.STAR):
            self._parse_type_shape()
            return "pointer types"

        if self.cursor.match(TokenType.LBRACKET):
            self._parse_type_shape()
            if self.cursor.match(TokenType.SEMICOLON):
                self.cursor.expect(TokenType.NUMBER, "array size", "array type")
                self.cursor.expect(TokenType.RBRACKET, "']'", "array type")
                return "sized array types"
            self.cursor.expect(TokenType.RBRACKET, "']'", "array type")
            return "array types"

        self.cursor.expect(TokenType.IDENTIFIER, "type name")
        return None

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def parse_statement(self) -> Statement:
        """Parse a single statement."""
        return self._guarded(self._parse_statement)

    def _parse_statement(self) -> Statement:
        token = self.cursor.peek()

        match token.type:
            case TokenType.LBRACE:
                return self._parse_block()
            case TokenType.IF:
                return self._parse_if()
            case TokenType.WHILE:
                return self._parse_while()
            case TokenType.VAR:
                return self._parse_var()
            case TokenType.RETURN:
                return self._parse_return()
            case TokenType.SEMICOLON:
                self.cursor.advance()
                return EmptyStatement(location=token.location)

        return self._parse_expression_statement()

    def _parse_block(self, construct: str = "block") -> BlockStatement:
        """
        Parse a block statement: '{' statement* '}'

        Args:
            construct: Name used if the input ends before the closing brace
        """
        open_brace = self.cursor.expect(TokenType.LBRACE, "'{'", construct)
        statements: list[Statement] = []

        while not self.cursor.check(TokenType.RBRACE):
            if self.cursor.at_end():
                raise self.cursor.unexpected(("'}'",), construct)
            statements.append(self._parse_statement())

        self.cursor.advance()
        return BlockStatement(tuple(statements), location=open_brace.location)

    def _parse_if(self) -> IfStatement:
        """Parse: 'if' expression block ('else' block)?"""
        if_token = self.cursor.advance()
        condition = self._parse_assignment()
        then_branch = self._parse_block()

        else_branch = None
        if self.cursor.match(TokenType.ELSE):
            else_branch = self._parse_block()

        return IfStatement(condition, then_branch, else_branch, location=if_token.location)

    def _parse_while(self) -> WhileStatement:
        """Parse: 'while' expression block"""
        while_token = self.cursor.advance()
        condition = self._parse_assignment()
        body = self._parse_block()
        return WhileStatement(condition, body, location=while_token.location)

    def _parse_var(self) -> VariableDeclaration:
        """
        Parse a local variable declaration.

        Grammar: 'var' IDENTIFIER ':' type ('=' expression)? ';'

        A declaration without initializer is accepted. Whether the
        variable needs one is for later passes to decide.
        """
        var_token = self.cursor.advance()
        name_token = self.cursor.expect(TokenType.IDENTIFIER, "variable name")
        self.cursor.expect(TokenType.COLON, "':'")
        var_type = self._parse_type()

        initializer = None
        if self.cursor.match(TokenType.ASSIGN):
            initializer = self._parse_assignment()

        self.cursor.expect(TokenType.SEMICOLON, "';'")
        return VariableDeclaration(
            name_token.lexeme, var_type, initializer, location=var_token.location
        )

    def _parse_return(self) -> ReturnStatement:
        """Parse: 'return' expression? ';'"""
        return_token = self.cursor.advance()

        value = None
        if not self.cursor.check(TokenType.SEMICOLON):
            value = self._parse_assignment()

        self.cursor.expect(TokenType.SEMICOLON, "';'")
        return ReturnStatement(value, location=return_token.location)

    def _parse_expression_statement(self) -> ExpressionStatement:
        expression = self._parse_assignment()
        self.cursor.expect(TokenType.SEMICOLON, "';'")
        return ExpressionStatement(expression, location=expression.location)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def parse_expression(self) -> Expression:
        """Parse a full expression, starting at the assignment tier."""
        return self._guarded(self._parse_assignment)

    def parse_tier(self, name: str) -> Expression:
        """
        Parse an expression starting at the named precedence tier.

        Args:
            name: One of EXPRESSION_TIERS

        Raises:
            ValueError: If the tier name is unknown
        """
        parser = self._tier_parsers.get(name)
        if parser is None:
            raise ValueError(f"unknown expression tier: {name!r}")
        return self._guarded(parser)

    def _parse_assignment(self) -> Expression:
        """
        Parse assignment expression (right-associative).

        The target is whatever the operand tier produces. It is not
        checked for being assignable here.
        """
        target = self._tier_parsers[TIER_ROUTES["assignment"]]()

        if self.cursor.match(TokenType.ASSIGN):
            value = self._parse_assignment()
            return AssignmentExpression(target, value, location=target.location)

        return target

    def _parse_binary_tier(self, name: str) -> Expression:
        """
        Parse one left-associative binary tier.

        Parses an operand from the routed tier, then folds every
        operator of this tier into a BinaryExpression.
        """
        operators = BINARY_TIERS[name]
        operand = self._tier_parsers[TIER_ROUTES[name]]

        expr = operand()

        while self.cursor.peek().type in operators:
            op_token = self.cursor.advance()
            right = operand()
            expr = BinaryExpression(
                operators[op_token.type], expr, right, location=expr.location
            )

        return expr

    def _parse_inert_tier(self, name: str) -> Expression:
        """Parse an inert tier, refusing its own operators."""
        expr = self._tier_parsers[TIER_ROUTES[name]]()

        token = self.cursor.peek()
        feature = INERT_TIERS[name].get(token.type)
        if feature is not None:
            raise self._unsupported(feature, token)

        return expr

    def _parse_unary(self) -> Expression:
        """
        Parse prefix unary expression (right-associative).

        '-' and '~' nest, so '- - 5' is NEGATE(NEGATE(5)). '!', '&' and
        '*' are refused at the operator token.
        """
        token = self.cursor.peek()

        if token.type in UNARY_OPERATORS:
            self.cursor.advance()
            operand = self._parse_unary()
            return UnaryExpression(
                UNARY_OPERATORS[token.type], operand, location=token.location
            )

        if token.type in UNSUPPORTED_UNARY:
            raise self._unsupported(UNSUPPORTED_UNARY[token.type], token)

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """
        Parse primary expression.

        Primary expressions are:
        - Identifiers (variables)
        - Function calls
        - Number literals
        - Parenthesized expressions, returned without a wrapper node
        """
        token = self.cursor.peek()

        if token.type == TokenType.IDENTIFIER:
            self.cursor.advance()
            if self.cursor.check(TokenType.LPAREN):
                return self._parse_call(token)
            return IdentifierExpression(token.lexeme, location=token.location)

        if token.type == TokenType.NUMBER:
            self.cursor.advance()
            try:
                value = int(token.lexeme)
            except ValueError:
                # Beyond the interpreter's int conversion limit
                raise self._unsupported(
                    f"integer literal of {len(token.lexeme)} digits", token
                ) from None
            return NumberLiteral(value, location=token.location)

        if token.type == TokenType.LPAREN:
            self.cursor.advance()
            expr = self._parse_assignment()
            self.cursor.expect(TokenType.RPAREN, "')'", "parenthesized expression")
            return expr

        raise self.cursor.unexpected(("expression",))

    def _parse_call(self, name_token: Token) -> CallExpression:
        """Parse the argument list of a call. A trailing comma is allowed."""
        self.cursor.advance()
        arguments: list[Expression] = []

        while not self.cursor.check(TokenType.RPAREN):
            if self.cursor.at_end():
                raise self.cursor.unexpected(("')'",), "argument list")
            arguments.append(self._parse_assignment())
            if not self.cursor.match(TokenType.COMMA):
                break

        self.cursor.expect(TokenType.RPAREN, "')'", "argument list")
        return CallExpression(
            name_token.lexeme, tuple(arguments), location=name_token.location
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def _make_parser(source: str, filename: str) -> Parser:
    lexer = Lexer(source, filename)
    return Parser(lexer.tokenize(), filename, split_lines(source))


def parse_source(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Parse yatc source code into an AST.

    This is a convenience function that combines lexing and parsing.

    Args:
        source: The source code
        filename: Source filename for error messages

    Returns:
        The root ProgramNode of the AST

    Raises:
        FrontendError: If lexing or parsing fails
    """
    return _make_parser(source, filename).parse()


def parse_expression(source: str, filename: str = "<input>") -> Expression:
    """Parse a single expression that must span the whole input."""
    parser = _make_parser(source, filename)
    expr = parser.parse_expression()
    parser.cursor.expect(TokenType.EOF, "end of input")
    return expr


def parse_statement(source: str, filename: str = "<input>") -> Statement:
    """Parse a single statement that must span the whole input."""
    parser = _make_parser(source, filename)
    stmt = parser.parse_statement()
    parser.cursor.expect(TokenType.EOF, "end of input")
    return stmt
