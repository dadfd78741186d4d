# =============================================================================
# test_expressions.py - Expression Parser Tests
# =============================================================================
# Tests for the precedence-climbing expression parser.
#
# Test coverage includes:
#   - Precedence across every reachable binary tier
#   - Left associativity of binary tiers, right associativity of '='
#   - Unary '-' and '~', rejection of '!', '&' and '*'
#   - Calls, parentheses and literals
#   - Tier routing: '||', '&&', '<<' and '>>' are never reached
# =============================================================================

import sys

import pytest
from yatc.frontend.lexer import Lexer, split_lines
from yatc.frontend.parser import (
    Parser,
    TIER_ROUTES,
    BINARY_TIERS,
    INERT_TIERS,
    parse_expression,
    parse_statement,
)
from yatc.frontend.ast import (
    AssignmentExpression,
    BinaryExpression,
    BinaryOperator as Op,
    UnaryExpression,
    UnaryOperator,
    CallExpression,
    IdentifierExpression,
    NumberLiteral,
)
from yatc.frontend.errors import (
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
    UnsupportedFeatureError,
    NestingTooDeepError,
    ParseError,
)


# =============================================================================
# Helper Functions
# =============================================================================

def num(value: int) -> NumberLiteral:
    return NumberLiteral(value)


def ident(name: str) -> IdentifierExpression:
    return IdentifierExpression(name)


def binary(op: Op, left, right) -> BinaryExpression:
    return BinaryExpression(op, left, right)


def tier_parser(source: str) -> Parser:
    return Parser(Lexer(source).tokenize(), source_lines=split_lines(source))


# =============================================================================
# Precedence Tests
# =============================================================================

class TestPrecedence:
    """Tighter tiers group first."""

    def test_multiplication_over_addition(self):
        assert parse_expression("1 + 2 * 3") == binary(
            Op.ADD, num(1), binary(Op.MULTIPLY, num(2), num(3))
        )

    def test_bitwise_chain(self):
        """'&' binds tighter than '^', which binds tighter than '|'."""
        assert parse_expression("1 | 2 ^ 3 & 4") == binary(
            Op.BITWISE_OR,
            num(1),
            binary(Op.BITWISE_XOR, num(2), binary(Op.BITWISE_AND, num(3), num(4))),
        )

    def test_relational_over_equality(self):
        assert parse_expression("a == b < c") == binary(
            Op.EQUAL, ident("a"), binary(Op.LESS, ident("b"), ident("c"))
        )

    def test_equality_over_bitwise_and(self):
        assert parse_expression("a & b != c") == binary(
            Op.BITWISE_AND, ident("a"), binary(Op.NOT_EQUAL, ident("b"), ident("c"))
        )

    def test_additive_over_relational(self):
        assert parse_expression("a + 1 >= b - 1") == binary(
            Op.GREATER_EQ,
            binary(Op.ADD, ident("a"), num(1)),
            binary(Op.SUBTRACT, ident("b"), num(1)),
        )

    def test_unary_over_multiplicative(self):
        assert parse_expression("-a * b") == binary(
            Op.MULTIPLY, UnaryExpression(UnaryOperator.NEGATE, ident("a")), ident("b")
        )

    def test_parentheses_override(self):
        """Parentheses group without leaving a node behind."""
        assert parse_expression("(1 + 2) * 3") == binary(
            Op.MULTIPLY, binary(Op.ADD, num(1), num(2)), num(3)
        )

    def test_redundant_parentheses_flattened(self):
        assert parse_expression("((x))") == ident("x")

    @pytest.mark.parametrize("source, op", [
        ("a % b", Op.MODULO),
        ("a / b", Op.DIVIDE),
        ("a > b", Op.GREATER),
        ("a <= b", Op.LESS_EQ),
    ])
    def test_operator_mapping(self, source, op):
        assert parse_expression(source) == binary(op, ident("a"), ident("b"))


# =============================================================================
# Associativity Tests
# =============================================================================

class TestAssociativity:
    """Binary tiers fold left; assignment and unary nest right."""

    def test_subtraction_is_left_associative(self):
        assert parse_expression("8 - 3 - 2") == binary(
            Op.SUBTRACT, binary(Op.SUBTRACT, num(8), num(3)), num(2)
        )

    def test_division_is_left_associative(self):
        assert parse_expression("a / b / c") == binary(
            Op.DIVIDE, binary(Op.DIVIDE, ident("a"), ident("b")), ident("c")
        )

    def test_equality_is_left_associative(self):
        assert parse_expression("a == b == c") == binary(
            Op.EQUAL, binary(Op.EQUAL, ident("a"), ident("b")), ident("c")
        )

    def test_assignment_is_right_associative(self):
        assert parse_expression("a = b = c") == AssignmentExpression(
            ident("a"), AssignmentExpression(ident("b"), ident("c"))
        )

    def test_assignment_binds_loosest(self):
        assert parse_expression("x = a | b") == AssignmentExpression(
            ident("x"), binary(Op.BITWISE_OR, ident("a"), ident("b"))
        )

    def test_assignment_target_not_checked(self):
        """Any operand-tier expression is accepted as a target."""
        assert parse_expression("1 = 2") == AssignmentExpression(num(1), num(2))
        assert parse_expression("a + b = c") == AssignmentExpression(
            binary(Op.ADD, ident("a"), ident("b")), ident("c")
        )


# =============================================================================
# Unary Operator Tests
# =============================================================================

class TestUnary:
    """Prefix operators."""

    def test_double_negation(self):
        assert parse_expression("- - 5") == UnaryExpression(
            UnaryOperator.NEGATE, UnaryExpression(UnaryOperator.NEGATE, num(5))
        )

    def test_bitwise_not(self):
        assert parse_expression("~-x") == UnaryExpression(
            UnaryOperator.BITWISE_NOT, UnaryExpression(UnaryOperator.NEGATE, ident("x"))
        )

    @pytest.mark.parametrize("source, symbol", [
        ("!x", "'!'"),
        ("&x", "'&'"),
        ("*x", "'*'"),
    ])
    def test_unsupported_unary(self, source, symbol):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            parse_expression(source)
        assert symbol in exc_info.value.feature
        assert exc_info.value.location.column == 1

    @pytest.mark.parametrize("source", ["!x;", "&x;", "*x;"])
    def test_unsupported_unary_statement(self, source):
        with pytest.raises(UnsupportedFeatureError):
            parse_statement(source)

    def test_dereference_after_multiply(self):
        """In 'a * *b' the second '*' is a unary operator and is refused."""
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            parse_expression("a * *b")
        assert exc_info.value.feature == "dereference operator '*'"
        assert exc_info.value.location.column == 5

    def test_not_inside_negation(self):
        with pytest.raises(UnsupportedFeatureError):
            parse_expression("-!x")


# =============================================================================
# Primary Expression Tests
# =============================================================================

class TestPrimary:
    """Identifiers, literals and calls."""

    def test_number_value(self):
        assert parse_expression("1234") == num(1234)

    def test_large_number_kept_exact(self):
        """No range check is made on literals."""
        value = 123456789012345678901234567890
        assert parse_expression(str(value)) == num(value)

    @pytest.mark.skipif(
        not hasattr(sys, "get_int_max_str_digits"),
        reason="interpreter has no int conversion limit",
    )
    def test_literal_past_conversion_limit(self):
        """A literal too long for int() is a parse error, not ValueError."""
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            parse_statement("x = " + "9" * 5000 + ";")
        err = exc_info.value
        assert "5000 digits" in err.feature
        assert (err.location.line, err.location.column) == (1, 5)

    def test_call_without_arguments(self):
        assert parse_expression("f()") == CallExpression("f", ())

    def test_call_with_arguments(self):
        assert parse_expression("gcd(a, b + 1)") == CallExpression(
            "gcd", (ident("a"), binary(Op.ADD, ident("b"), num(1)))
        )

    def test_call_trailing_comma(self):
        assert parse_expression("f(1, 2,)") == CallExpression("f", (num(1), num(2)))

    def test_nested_calls(self):
        assert parse_expression("f(g(x))") == CallExpression(
            "f", (CallExpression("g", (ident("x"),)),)
        )

    def test_assignment_as_argument(self):
        assert parse_expression("f(a = 1)") == CallExpression(
            "f", (AssignmentExpression(ident("a"), num(1)),)
        )

    def test_locations(self):
        expr = parse_expression("a +\n  b")
        assert (expr.location.line, expr.location.column) == (1, 1)
        assert (expr.right.location.line, expr.right.location.column) == (2, 3)


# =============================================================================
# Error Tests
# =============================================================================

class TestExpressionErrors:
    """Malformed expressions."""

    def test_missing_operand(self):
        with pytest.raises(UnexpectedEndOfInputError):
            parse_expression("1 +")

    def test_unexpected_leading_token(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_expression(")")
        assert exc_info.value.found == ")"
        assert exc_info.value.expected == ("expression",)

    def test_unclosed_parenthesis(self):
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            parse_expression("(1 + 2")
        assert exc_info.value.construct == "parenthesized expression"

    def test_unclosed_argument_list(self):
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            parse_expression("f(1, 2")
        assert exc_info.value.construct == "argument list"

    def test_argument_list_ends_after_comma(self):
        with pytest.raises(UnexpectedEndOfInputError) as exc_info:
            parse_expression("f(1,")
        assert exc_info.value.construct == "argument list"

    def test_missing_comma_between_arguments(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_expression("f(a b)")
        assert exc_info.value.found == "b"

    def test_trailing_tokens(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_expression("a b")
        assert exc_info.value.expected == ("end of input",)


# =============================================================================
# Nesting Depth Tests
# =============================================================================

class TestNestingDepth:
    """Deep nesting is reported as a ParseError instead of RecursionError."""

    def test_moderate_parentheses(self):
        assert parse_expression("(" * 20 + "1" + ")" * 20) == num(1)

    def test_deep_parentheses(self):
        with pytest.raises(NestingTooDeepError) as exc_info:
            parse_expression("(" * 300 + "1" + ")" * 300)
        err = exc_info.value
        assert isinstance(err, ParseError)
        assert err.location.line == 1
        assert "nested too deeply" in str(err)

    def test_deep_calls(self):
        with pytest.raises(NestingTooDeepError):
            parse_expression("f(" * 300 + "1" + ")" * 300)

    def test_deep_negation(self):
        with pytest.raises(NestingTooDeepError):
            parse_expression("-" * 5000 + "1")

    def test_deep_blocks(self):
        with pytest.raises(NestingTooDeepError):
            parse_statement("{" * 1000 + "}" * 1000)

    def test_deep_tier(self):
        with pytest.raises(NestingTooDeepError):
            tier_parser("(" * 300 + "1" + ")" * 300).parse_tier("additive")


# =============================================================================
# Tier Routing Tests
# =============================================================================

class TestTierRouting:
    """
    The chain follows the grammar as written: assignment descends into
    bitwise_or and relational into additive, so the logical and shift
    tiers are never entered.
    """

    def test_routes_skip_inert_tiers(self):
        assert TIER_ROUTES["assignment"] == "bitwise_or"
        assert TIER_ROUTES["relational"] == "additive"
        for tier, target in TIER_ROUTES.items():
            if tier not in INERT_TIERS:
                assert target not in INERT_TIERS

    def test_every_binary_tier_is_routed(self):
        for tier in BINARY_TIERS:
            assert tier in TIER_ROUTES

    @pytest.mark.parametrize("op", ["&&", "||", "<<", ">>"])
    def test_operator_not_consumed_in_statement(self, op):
        """The expression stops before the operator; ';' is then missing."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_statement(f"a {op} b;")
        assert exc_info.value.found == op
        assert exc_info.value.expected == ("';'",)

    @pytest.mark.parametrize("op", ["&&", "||", "<<", ">>"])
    def test_operator_not_consumed_in_expression(self, op):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_expression(f"a {op} b")
        assert exc_info.value.found == op

    def test_logical_or_tier_rejects_operator(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            tier_parser("a || b").parse_tier("logical_or")
        assert exc_info.value.feature == "logical or operator '||'"
        assert exc_info.value.location.column == 3

    def test_logical_or_tier_reaches_logical_and(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            tier_parser("a && b").parse_tier("logical_or")
        assert exc_info.value.feature == "logical and operator '&&'"

    @pytest.mark.parametrize("source, feature", [
        ("a << 1", "shift operator '<<'"),
        ("a >> 1", "shift operator '>>'"),
    ])
    def test_shift_tier_rejects_operator(self, source, feature):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            tier_parser(source).parse_tier("shift")
        assert exc_info.value.feature == feature

    def test_inert_tier_passes_through_operands(self):
        """Without its own operator an inert tier returns its operand."""
        assert tier_parser("a + 1").parse_tier("shift") == binary(
            Op.ADD, ident("a"), num(1)
        )
        assert tier_parser("a | b").parse_tier("logical_or") == binary(
            Op.BITWISE_OR, ident("a"), ident("b")
        )

    def test_primary_tier(self):
        assert tier_parser("a + b").parse_tier("primary") == ident("a")

    def test_unknown_tier(self):
        with pytest.raises(ValueError):
            tier_parser("a").parse_tier("ternary")
