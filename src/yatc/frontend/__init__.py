"""
yatc Front End
==============

This package turns yatc source text into an Abstract Syntax Tree:

    Source → Lexer → TokenCursor → Parser → ProgramNode

- A lexer producing a lazy, restartable token stream
- A one-token lookahead cursor shared by every parsing layer
- A recursive descent parser with a table-driven expression chain
- Immutable AST nodes for the downstream code generator

Usage
-----
>>> from yatc.frontend import parse_source
>>> program = parse_source('''
... extern gcd(a: i64, b: i64): i64;
... func main(): i64 { return gcd(12, 18); }
... ''')
>>> [d.name for d in program.declarations]
['gcd', 'main']

Language Subset
---------------
Supported:
- 'func' definitions and 'extern' declarations with typed parameters
- 'var' declarations, if/else, while, return, expression statements
- Operators: = | ^ & == != < <= > >= + - * / % and unary - ~

Recognized but rejected:
- Pointer and array types (*T, [T], [T; N])
- Unary '!', '&' and '*'
- '||', '&&', '<<' and '>>' (never reached by the expression chain)
"""

from yatc.frontend.driver import Frontend, FrontendOptions, ParseResult
from yatc.frontend.errors import (
    FrontendError,
    LexError,
    InvalidCharacterError,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
    UnsupportedFeatureError,
    MalformedDeclarationError,
    NestingTooDeepError,
)
from yatc.frontend.lexer import Lexer, Token, TokenType, KEYWORDS, tokenize, split_lines
from yatc.frontend.cursor import TokenCursor
from yatc.frontend.parser import (
    Parser,
    TIER_ROUTES,
    BINARY_TIERS,
    INERT_TIERS,
    parse_source,
    parse_expression,
    parse_statement,
)
from yatc.frontend.ast import (
    ASTNode,
    ASTVisitor,
    ASTPrinter,
    ProgramNode,
    FunctionNode,
    ExternNode,
    ParameterNode,
    NamedType,
    BlockStatement,
    IfStatement,
    WhileStatement,
    VariableDeclaration,
    ReturnStatement,
    ExpressionStatement,
    EmptyStatement,
    AssignmentExpression,
    BinaryExpression,
    BinaryOperator,
    UnaryExpression,
    UnaryOperator,
    CallExpression,
    IdentifierExpression,
    NumberLiteral,
)

__all__ = [
    # Driver
    "Frontend",
    "FrontendOptions",
    "ParseResult",
    # Errors
    "FrontendError",
    "LexError",
    "InvalidCharacterError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "UnsupportedFeatureError",
    "MalformedDeclarationError",
    "NestingTooDeepError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "KEYWORDS",
    "tokenize",
    "split_lines",
    # Parser
    "TokenCursor",
    "Parser",
    "TIER_ROUTES",
    "BINARY_TIERS",
    "INERT_TIERS",
    "parse_source",
    "parse_expression",
    "parse_statement",
    # AST
    "ASTNode",
    "ASTVisitor",
    "ASTPrinter",
    "ProgramNode",
    "FunctionNode",
    "ExternNode",
    "ParameterNode",
    "NamedType",
    "BlockStatement",
    "IfStatement",
    "WhileStatement",
    "VariableDeclaration",
    "ReturnStatement",
    "ExpressionStatement",
    "EmptyStatement",
    "AssignmentExpression",
    "BinaryExpression",
    "BinaryOperator",
    "UnaryExpression",
    "UnaryOperator",
    "CallExpression",
    "IdentifierExpression",
    "NumberLiteral",
]
