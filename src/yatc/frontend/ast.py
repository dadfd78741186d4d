"""
yatc Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the AST node types produced by the yatc parser and
consumed by the code generator.

Node Kinds
----------
ASTNode (base)
├── ProgramNode - root node, ordered declarations
├── Declarations
│   ├── FunctionNode - 'func' definition with a body
│   ├── ExternNode - 'extern' declaration, no body
│   └── ParameterNode - (name, type) pair
├── NamedType - a type written as a plain identifier
├── Statements
│   ├── BlockStatement - { ... }
│   ├── IfStatement - if/else, both branches are blocks
│   ├── WhileStatement - while loop
│   ├── VariableDeclaration - var name: type (= init)?;
│   ├── ReturnStatement - return expr?;
│   ├── ExpressionStatement - expr;
│   └── EmptyStatement - ;
└── Expressions
    ├── AssignmentExpression - target = value (right-associative)
    ├── BinaryExpression - left op right
    ├── UnaryExpression - op operand
    ├── CallExpression - name(args...)
    ├── IdentifierExpression - variable reference
    └── NumberLiteral - integer constant

Design Notes
------------
- Every node kind is its own frozen dataclass. The class is the tag, so
  a consumer can walk the tree with a `match` statement or ASTVisitor.
- Child sequences are tuples and nodes never change after parsing.
- Each node stores its source location as a keyword-only field that is
  left out of equality and repr. Two trees with the same shape compare
  equal whatever text they were parsed from.
- Parentheses are not kept: `(a + b)` is just the BinaryExpression.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional

from yatc.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for all expression nodes."""


@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for all statement nodes."""


@dataclass(frozen=True)
class Declaration(ASTNode):
    """Base class for top-level declarations."""


# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class NamedType(ASTNode):
    """
    A type written as an identifier, such as `i64`.

    The parser does not know the type catalog. The name is kept exactly
    as written and the code generator resolves it.

    Pointer and array type syntax is rejected during parsing, so it
    never reaches the AST.
    """
    name: str

    def __str__(self) -> str:
        return self.name


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """Binary operators, valued by their source spelling."""
    # Bitwise
    BITWISE_OR = "|"
    BITWISE_XOR = "^"
    BITWISE_AND = "&"

    # Comparison
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS = "<"
    LESS_EQ = "<="
    GREATER = ">"
    GREATER_EQ = ">="

    # Arithmetic
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"


class UnaryOperator(Enum):
    """Implemented unary operators, valued by their source spelling."""
    NEGATE = "-"
    BITWISE_NOT = "~"


@dataclass(frozen=True)
class AssignmentExpression(Expression):
    """
    Assignment expression (target = value).

    Attributes:
        target: The assignment target
        value: The value to assign
    """
    target: Expression
    value: Expression


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator
    left: Expression
    right: Expression


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Prefix unary operation expression (op operand).

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    """
    Function call expression.

    Attributes:
        function_name: Name of the function to call
        arguments: Argument expressions in source order
    """
    function_name: str
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class IdentifierExpression(Expression):
    """Variable reference expression."""
    name: str


@dataclass(frozen=True)
class NumberLiteral(Expression):
    """Integer literal expression."""
    value: int


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class BlockStatement(Statement):
    """
    Block statement enclosed in braces.

    Attributes:
        statements: Statements in the block, in source order
    """
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class IfStatement(Statement):
    """
    If statement with optional else block.

    Both branches are always blocks, so there is no dangling-else case.

    Attributes:
        condition: The condition expression
        then_branch: Block executed if the condition is true
        else_branch: Optional block executed otherwise
    """
    condition: Expression
    then_branch: BlockStatement
    else_branch: Optional[BlockStatement] = None


@dataclass(frozen=True)
class WhileStatement(Statement):
    """
    While loop statement.

    Attributes:
        condition: Loop condition
        body: Loop body block
    """
    condition: Expression
    body: BlockStatement


@dataclass(frozen=True)
class VariableDeclaration(Statement):
    """
    Local variable declaration.

    Represents declarations like:
        var x: i64;
        var y: i64 = 10;

    Attributes:
        name: Variable name
        var_type: The declared type
        initializer: Optional initialization expression
    """
    name: str
    var_type: NamedType
    initializer: Optional[Expression] = None


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """Return statement with optional value."""
    value: Optional[Expression] = None


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """
    Expression used as a statement (followed by semicolon).

    Common for function calls and assignments:
        print(x);
        x = 5;
    """
    expression: Expression


@dataclass(frozen=True)
class EmptyStatement(Statement):
    """A bare ';'."""


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass(frozen=True)
class ParameterNode(ASTNode):
    """
    Function parameter.

    Attributes:
        name: Parameter name
        param_type: The declared type
    """
    name: str
    param_type: NamedType


@dataclass(frozen=True)
class FunctionNode(Declaration):
    """
    Function definition.

    Attributes:
        name: Function name
        parameters: Parameters in declaration order
        return_type: The return type, None when not annotated
        body: The function body
    """
    name: str
    parameters: tuple[ParameterNode, ...]
    return_type: Optional[NamedType]
    body: BlockStatement


@dataclass(frozen=True)
class ExternNode(Declaration):
    """
    External function declaration.

    The function is defined outside the program (for example in C) and
    the code generator resolves it to a native symbol.

    Attributes:
        name: Function name
        parameters: Parameters in declaration order
        return_type: The return type, None when not annotated
    """
    name: str
    parameters: tuple[ParameterNode, ...]
    return_type: Optional[NamedType]


@dataclass(frozen=True)
class ProgramNode(ASTNode):
    """
    Root node of the AST.

    Attributes:
        declarations: Functions and externs in source order
    """
    declarations: tuple[Declaration, ...] = ()

    @property
    def functions(self) -> tuple[FunctionNode, ...]:
        """Function definitions, in source order."""
        return tuple(d for d in self.declarations if isinstance(d, FunctionNode))

    @property
    def externs(self) -> tuple[ExternNode, ...]:
        """Extern declarations, in source order."""
        return tuple(d for d in self.declarations if isinstance(d, ExternNode))


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node's class name. Subclasses override visit_*
    methods for the node types they care about. Anything without an
    override is handled by generic_visit, which visits the children.

    Usage:
        class CallCollector(ASTVisitor):
            def __init__(self):
                self.calls = []

            def visit_CallExpression(self, node):
                self.calls.append(node.function_name)
                self.generic_visit(node)

        collector = CallCollector()
        collector.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by node type)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes in field order."""
        for node_field in fields(node):
            value = getattr(node, node_field.name)
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces a human-readable, indented dump of the tree. Expressions
    are printed fully parenthesized so grouping is visible.

    Usage:
        printer = ASTPrinter()
        output = printer.print(ast)
        print(output)
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _signature(self, node: FunctionNode | ExternNode) -> str:
        params = ", ".join(f"{p.name}: {p.param_type}" for p in node.parameters)
        ret = f": {node.return_type}" if node.return_type else ""
        return f"{node.name}({params}){ret}"

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self._indent()
        for decl in node.declarations:
            self.visit(decl)
        self._dedent()

    def visit_FunctionNode(self, node: FunctionNode):
        self._emit(f"Function: {self._signature(node)}")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_ExternNode(self, node: ExternNode):
        self._emit(f"Extern: {self._signature(node)}")

    def visit_BlockStatement(self, node: BlockStatement):
        self._emit("Block")
        self._indent()
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_IfStatement(self, node: IfStatement):
        self._emit(f"If {self._expr_str(node.condition)}")
        self._indent()
        self._emit("Then:")
        self._indent()
        self.visit(node.then_branch)
        self._dedent()
        if node.else_branch is not None:
            self._emit("Else:")
            self._indent()
            self.visit(node.else_branch)
            self._dedent()
        self._dedent()

    def visit_WhileStatement(self, node: WhileStatement):
        self._emit(f"While {self._expr_str(node.condition)}")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        init = ""
        if node.initializer is not None:
            init = f" = {self._expr_str(node.initializer)}"
        self._emit(f"Var {node.name}: {node.var_type}{init}")

    def visit_ReturnStatement(self, node: ReturnStatement):
        if node.value is not None:
            self._emit(f"Return {self._expr_str(node.value)}")
        else:
            self._emit("Return")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def visit_EmptyStatement(self, node: EmptyStatement):
        self._emit("Empty")

    def _expr_str(self, expr: Expression) -> str:
        """Convert expression to a fully parenthesized string."""
        match expr:
            case NumberLiteral(value):
                return str(value)
            case IdentifierExpression(name):
                return name
            case BinaryExpression(operator, left, right):
                return f"({self._expr_str(left)} {operator.value} {self._expr_str(right)})"
            case UnaryExpression(operator, operand):
                return f"({operator.value}{self._expr_str(operand)})"
            case AssignmentExpression(target, value):
                return f"({self._expr_str(target)} = {self._expr_str(value)})"
            case CallExpression(function_name, arguments):
                args = ", ".join(self._expr_str(a) for a in arguments)
                return f"{function_name}({args})"
        return f"<{type(expr).__name__}>"
