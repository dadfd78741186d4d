# =============================================================================
# test_declarations.py - Declaration and Program Parser Tests
# =============================================================================
# Tests for 'func' and 'extern' declarations and whole programs.
#
# Test coverage includes:
#   - Signatures: parameters, trailing comma, optional return type
#   - Body rules: 'func' needs a body, 'extern' must not have one
#   - Top-level ';' skipping and declaration order
#   - Fail-fast behaviour with the lazy token stream
# =============================================================================

import pytest
from yatc.frontend.lexer import Lexer
from yatc.frontend.parser import Parser, parse_source
from yatc.frontend.ast import (
    EmptyStatement,
    ExternNode,
    FunctionNode,
    IdentifierExpression,
    IfStatement,
    NamedType,
    NumberLiteral,
    ParameterNode,
    ProgramNode,
    ReturnStatement,
    VariableDeclaration,
    WhileStatement,
)
from yatc.frontend.errors import (
    InvalidCharacterError,
    MalformedDeclarationError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
    UnsupportedFeatureError,
)


I64 = NamedType("i64")

GCD_PROGRAM = """\
# Euclid's algorithm
extern print(n: i64);

func gcd(a: i64, b: i64): i64 {
    while b != 0 {
        var t: i64 = b;
        b = a % b;
        a = t;
    }
    return a;
}

func main() {
    print(gcd(12, 18));
}
"""


# =============================================================================
# Extern Declaration Tests
# =============================================================================

class TestExtern:
    """extern declarations."""

    def test_extern_gcd(self):
        program = parse_source("extern gcd(a: i64, b: i64): i64;")
        assert program.declarations == (
            ExternNode(
                "gcd",
                (ParameterNode("a", I64), ParameterNode("b", I64)),
                I64,
            ),
        )

    def test_extern_without_return_type(self):
        decl = parse_source("extern log(n: i64);").declarations[0]
        assert decl.return_type is None

    def test_extern_without_parameters(self):
        decl = parse_source("extern now(): i64;").declarations[0]
        assert decl.parameters == ()

    def test_extern_with_body(self):
        with pytest.raises(MalformedDeclarationError) as exc_info:
            parse_source("extern f() { }")
        err = exc_info.value
        assert err.name == "f"
        assert "'func'" in err.hint

    def test_extern_missing_semicolon(self):
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            parse_source("extern f()")
        assert exc_info.value.construct == "extern declaration"


# =============================================================================
# Function Definition Tests
# =============================================================================

class TestFunction:
    """func definitions."""

    def test_if_else_body(self):
        program = parse_source(
            "func f(): i64 { if x { return 1; } else { return 0; } }"
        )
        func = program.declarations[0]
        assert isinstance(func, FunctionNode)
        assert func.return_type == I64
        assert len(func.body.statements) == 1

        stmt = func.body.statements[0]
        assert isinstance(stmt, IfStatement)
        assert stmt.then_branch.statements == (ReturnStatement(NumberLiteral(1)),)
        assert stmt.else_branch.statements == (ReturnStatement(NumberLiteral(0)),)

    def test_trailing_comma_and_empty_statement(self):
        func = parse_source("func f(a: i64,): i64 { ; return a; }").declarations[0]
        assert func.parameters == (ParameterNode("a", I64),)
        assert func.body.statements == (
            EmptyStatement(),
            ReturnStatement(IdentifierExpression("a")),
        )

    def test_missing_return_type_is_none(self):
        func = parse_source("func main() { }").declarations[0]
        assert func.return_type is None
        assert func.body.statements == ()

    def test_function_without_body(self):
        with pytest.raises(MalformedDeclarationError) as exc_info:
            parse_source("func f(a: i64): i64;")
        err = exc_info.value
        assert err.name == "f"
        assert "'extern'" in err.hint

    def test_function_followed_by_extern(self):
        """Anything but a body after the signature is a malformed function."""
        with pytest.raises(MalformedDeclarationError) as exc_info:
            parse_source("func f(): i64 extern g();")
        err = exc_info.value
        assert err.name == "f"
        assert err.location.column == 15
        assert "has no body" in str(err)

    def test_unterminated_body(self):
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            parse_source("func f() { ")
        assert exc_info.value.construct == "function body"

    def test_unterminated_nested_block(self):
        with pytest.raises(UnexpectedEndOfInputError):
            parse_source("func f() { while x { ")

    def test_missing_function_name(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("func (a: i64) { }")
        assert exc_info.value.expected == ("function name",)


# =============================================================================
# Parameter Tests
# =============================================================================

class TestParameters:
    """Parameter lists."""

    def test_parameter_without_type(self):
        with pytest.raises(MalformedDeclarationError) as exc_info:
            parse_source("func f(a) { }")
        assert exc_info.value.name == "a"
        assert exc_info.value.message == "parameter 'a' has no type"

    def test_unterminated_parameter_list(self):
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            parse_source("func f(a: i64")
        assert exc_info.value.construct == "parameter list"

    def test_input_ends_after_parameter_name(self):
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            parse_source("func f(a")
        assert exc_info.value.construct == "parameter list"

    def test_double_trailing_comma(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source("func f(a: i64,,) { }")

    def test_pointer_parameter(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            parse_source("func f(p: *i64) { }")
        assert exc_info.value.feature == "pointer types"

    def test_array_return_type(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            parse_source("extern f(): [i64; 4];")
        assert exc_info.value.feature == "sized array types"


# =============================================================================
# Program Tests
# =============================================================================

class TestProgram:
    """Whole programs."""

    def test_empty_program(self):
        assert parse_source("") == ProgramNode(())

    def test_declaration_order_preserved(self):
        program = parse_source("extern a(); func b() { } extern c();")
        assert [d.name for d in program.declarations] == ["a", "b", "c"]
        assert [f.name for f in program.functions] == ["b"]
        assert [e.name for e in program.externs] == ["a", "c"]

    def test_stray_semicolons_skipped(self):
        program = parse_source(";; extern f(); ;")
        assert len(program.declarations) == 1

    def test_stray_semicolons_rejected_when_disabled(self):
        parser = Parser(Lexer("; extern f();").tokenize(), allow_stray_semicolons=False)
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parser.parse()
        assert exc_info.value.found == ";"
        assert exc_info.value.expected == ("'func'", "'extern'")

    def test_statement_at_top_level(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("var x: i64;")
        assert exc_info.value.found == "var"
        assert exc_info.value.expected == ("'func'", "'extern'")

    def test_gcd_program(self):
        program = parse_source(GCD_PROGRAM, "gcd.toy")
        extern, gcd, main = program.declarations

        assert extern == ExternNode("print", (ParameterNode("n", I64),), None)
        assert gcd.name == "gcd"
        assert (gcd.location.line, gcd.location.column) == (4, 1)
        assert gcd.location.filename == "gcd.toy"

        loop, ret = gcd.body.statements
        assert isinstance(loop, WhileStatement)
        assert isinstance(loop.body.statements[0], VariableDeclaration)
        assert ret == ReturnStatement(IdentifierExpression("a"))

        assert main.return_type is None

    def test_same_source_parses_equal(self):
        """Trees compare by shape; locations do not take part."""
        assert parse_source(GCD_PROGRAM, "a.toy") == parse_source(GCD_PROGRAM, "b.toy")
        assert parse_source("extern f();") == parse_source("\n\n   extern   f ( ) ;")


# =============================================================================
# Fail-Fast Tests
# =============================================================================

class TestFailFast:
    """The first error ends the parse."""

    def test_lex_error_mid_parse(self):
        with pytest.raises(InvalidCharacterError) as exc_info:
            parse_source("func f() { x = 1 @ 2; }")
        assert exc_info.value.location.column == 18

    def test_parse_error_before_bad_character(self):
        """Characters after the first syntax error are never lexed."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("func f() { return ) } $")
        assert exc_info.value.found == ")"
