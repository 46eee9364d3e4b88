"""
Tests for the expression parser.
"""

import pytest

from nano.errors import NanoSyntaxError, UnexpectedEndOfInputError
from nano.template.expression import ExpressionParser, parse_expression
from nano.template.nodes import (
    ArrayExpression,
    BinaryExpression,
    BooleanLiteral,
    CallExpression,
    ConditionalExpression,
    Identifier,
    ImportArgument,
    LogicalExpression,
    MemberExpression,
    NodeType,
    NullLiteral,
    NumericLiteral,
    StringLiteral,
    UnaryExpression,
)


def ident(name):
    return Identifier(name=name)


def num(value):
    return NumericLiteral(value=value)


class TestLiterals:

    def test_literals(self):
        assert parse_expression("true") == BooleanLiteral(value=True)
        assert parse_expression("false") == BooleanLiteral(value=False)
        assert parse_expression("null") == NullLiteral()
        assert parse_expression("'text'") == StringLiteral(value="text")
        assert parse_expression('"text"') == StringLiteral(value="text")

    def test_numbers(self):
        """Integers stay int, decimals become float"""
        assert parse_expression("42") == num(42)
        result = parse_expression("1.5")
        assert isinstance(result.value, float)
        assert result.value == 1.5

    def test_array(self):
        result = parse_expression("[1, 'a', x]")
        assert result == ArrayExpression(elements=(num(1), StringLiteral(value="a"), ident("x")))

    def test_empty_array(self):
        assert parse_expression("[]") == ArrayExpression(elements=())


class TestPrecedence:

    def test_multiplication_binds_tighter(self):
        assert parse_expression("1 + 2 * 3") == BinaryExpression(
            operator="+",
            left=num(1),
            right=BinaryExpression(operator="*", left=num(2), right=num(3)),
        )

    def test_parentheses(self):
        assert parse_expression("(1 + 2) * 3") == BinaryExpression(
            operator="*",
            left=BinaryExpression(operator="+", left=num(1), right=num(2)),
            right=num(3),
        )

    def test_left_associativity(self):
        assert parse_expression("a - b - c") == BinaryExpression(
            operator="-",
            left=BinaryExpression(operator="-", left=ident("a"), right=ident("b")),
            right=ident("c"),
        )

    def test_and_binds_tighter_than_or(self):
        assert parse_expression("a || b && c") == LogicalExpression(
            operator="||",
            left=ident("a"),
            right=LogicalExpression(operator="&&", left=ident("b"), right=ident("c")),
        )

    def test_equality_below_arithmetic(self):
        result = parse_expression("2 + 2 == 4")
        assert result.get_type() == NodeType.BINARY_EXPRESSION
        assert result.operator == "=="
        assert result.left.operator == "+"

    def test_relational_below_additive(self):
        result = parse_expression("a + 1 < b")
        assert result.operator == "<"
        assert result.left.operator == "+"

    def test_ternary_is_right_associative(self):
        assert parse_expression("a ? b : c ? d : e") == ConditionalExpression(
            test=ident("a"),
            consequent=ident("b"),
            alternate=ConditionalExpression(test=ident("c"), consequent=ident("d"), alternate=ident("e")),
        )

    def test_ternary_over_equality(self):
        result = parse_expression("2 + 2 == 4 ? 'Yes' : 'No'")
        assert isinstance(result, ConditionalExpression)
        assert result.test.operator == "=="

    def test_nested_unary(self):
        assert parse_expression("-!x") == UnaryExpression(
            operator="-",
            argument=UnaryExpression(operator="!", argument=ident("x")),
        )


class TestMemberAndCall:

    def test_dot_access(self):
        assert parse_expression("a.b") == MemberExpression(object=ident("a"), property=ident("b"))

    def test_bracket_access(self):
        assert parse_expression("a['b']") == MemberExpression(
            object=ident("a"), property=StringLiteral(value="b"), computed=True
        )

    def test_mixed_chain(self):
        """Dot, bracket and call suffixes interleave left to right"""
        result = parse_expression("a.b()[c].d(e)")

        assert result == CallExpression(
            callee=MemberExpression(
                object=MemberExpression(
                    object=CallExpression(callee=MemberExpression(object=ident("a"), property=ident("b"))),
                    property=ident("c"),
                    computed=True,
                ),
                property=ident("d"),
            ),
            arguments=(ident("e"),),
        )

    def test_chained_calls(self):
        assert parse_expression("f()()") == CallExpression(callee=CallExpression(callee=ident("f")))

    def test_call_arguments_are_full_expressions(self):
        result = parse_expression("f(a + 1, b ? c : d)")
        assert len(result.arguments) == 2
        assert result.arguments[0].operator == "+"
        assert isinstance(result.arguments[1], ConditionalExpression)


class TestStatements:

    def test_if_statement(self):
        assert ExpressionParser("if a").if_statement().test == ident("a")

    def test_else_if_statement(self):
        assert ExpressionParser("else if a > 1").if_statement().test.operator == ">"

    def test_for_single_identifier(self):
        statement = ExpressionParser("for item in items").for_statement()
        assert statement.identifiers == ("item",)
        assert statement.iterator == ident("items")

    def test_for_two_identifiers(self):
        statement = ExpressionParser("for v, i in [10, 20]").for_statement()
        assert statement.identifiers == ("v", "i")
        assert isinstance(statement.iterator, ArrayExpression)

    def test_for_too_many_identifiers(self):
        with pytest.raises(NanoSyntaxError, match="Too many loop identifiers"):
            ExpressionParser("for a, b, c in x").for_statement()

    def test_import_statement(self):
        statement = ExpressionParser("import 'a.html' with (x: 1, y: z.w)").import_statement()
        assert statement.path == StringLiteral(value="a.html")
        assert statement.arguments == (
            ImportArgument(key="x", value=num(1)),
            ImportArgument(key="y", value=MemberExpression(object=ident("z"), property=ident("w"))),
        )

    def test_import_without_arguments(self):
        statement = ExpressionParser("import name + '.html'").import_statement()
        assert statement.arguments == ()
        assert statement.path.operator == "+"

    def test_switch_and_case(self):
        assert ExpressionParser("switch kind").switch_statement().discriminant == ident("kind")
        assert ExpressionParser("case 'a'").case_statement().test == StringLiteral(value="a")


class TestErrors:

    def test_incomplete_binary(self):
        with pytest.raises(UnexpectedEndOfInputError, match=r"Unexpected end of input in tag \{2 \+\} \(line 1\)"):
            parse_expression("2 +")

    def test_trailing_tokens(self):
        with pytest.raises(NanoSyntaxError, match="Unexpected token b"):
            parse_expression("a b")

    def test_unexpected_token_in_primary(self):
        with pytest.raises(NanoSyntaxError, match=r"Unexpected token \)"):
            parse_expression(")")

    def test_unclosed_parenthesis(self):
        with pytest.raises(UnexpectedEndOfInputError):
            parse_expression("(1 + 2")

    def test_missing_colon(self):
        with pytest.raises(NanoSyntaxError, match="Unexpected token b"):
            parse_expression("a ? 1 b")

    def test_error_line_includes_offset(self):
        with pytest.raises(NanoSyntaxError) as exc_info:
            parse_expression("a\nb", line_offset=2)
        assert exc_info.value.line == 4
