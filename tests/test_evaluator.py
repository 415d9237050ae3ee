"""Tests for govar_core.evaluator."""

import pytest

from govar_core import (
    FALSE,
    TRUE,
    Empty,
    Environment,
    GovarParseError,
    Kind,
    VChar,
    VFloat,
    VInt,
    VString,
    evaluate,
    evaluate_expression,
)
from govar_core.evaluator import OPERATOR_TABLES
from govar_core.nodes import Call, Ident, Selector
from govar_core.values import to_float32


def _one(source: str):
    results = evaluate(f"var x = {source}")
    assert len(results) == 1
    return results[0]


class TestIntegers:
    def test_arithmetic(self):
        assert evaluate("var a, b = 10 + 5, 5 - 10") == [VInt(15), VInt(-5)]

    def test_mixed_operators(self):
        assert evaluate("var a, b, c = 5 * -5, 5 / 5, 10 % 5") == [
            VInt(-25),
            VInt(1),
            VInt(0),
        ]

    def test_parentheses(self):
        assert _one("5 * (1 + 3)") == VInt(20)

    @pytest.mark.parametrize(
        "a, b, quotient, remainder",
        [
            (7, 2, 3, 1),
            (-7, 2, -3, -1),
            (7, -2, -3, 1),
            (-7, -2, 3, -1),
            (0, 5, 0, 0),
            (9, 3, 3, 0),
        ],
    )
    def test_division_truncates(self, a, b, quotient, remainder):
        assert _one(f"{a} / {b}") == VInt(quotient)
        assert _one(f"{a} % {b}") == VInt(remainder)

    def test_division_by_zero_is_no_value(self):
        assert _one("1 / 0") is Empty

    def test_remainder_by_zero_is_no_value(self):
        assert _one("1 % 0") is Empty

    def test_overflow_wraps(self):
        assert _one("9223372036854775807 + 1") == VInt(-(2**63))

    def test_literal_too_large_is_no_value(self):
        assert _one("9223372036854775808") is Empty

    @pytest.mark.parametrize("text", ["0x10", "0b1", "0o7", "1_000"])
    def test_non_decimal_literal_is_no_value(self, text):
        assert _one(text) is Empty

    def test_comparisons(self):
        assert evaluate("var a, b, c, d = 1 < 2, 1 > 2, 2 <= 2, 1 >= 2") == [
            TRUE,
            FALSE,
            TRUE,
            FALSE,
        ]


class TestFloats:
    def test_mixed_arithmetic(self):
        assert evaluate("var a, b, c, d = 5.5 + 2, 4 - 2.0, 6 * 0.0, 3 / 2.0") == [
            VFloat(7.5),
            VFloat(2.0),
            VFloat(0.0),
            VFloat(1.5),
        ]

    def test_integer_promoted_on_either_side(self):
        assert evaluate("var a, b = 5.0 / 2, 4 * 2.0") == [VFloat(2.5), VFloat(8.0)]

    def test_single_precision(self):
        assert _one("0.1") == VFloat(to_float32(0.1))
        assert _one("0.1 + 0.2") == VFloat(to_float32(to_float32(0.1) + to_float32(0.2)))

    def test_division_by_zero_is_no_value(self):
        assert _one("1.0 / 0.0") is Empty
        assert _one("1.0 / 0") is Empty

    def test_remainder_not_defined(self):
        assert _one("5.0 % 2.0") is Empty

    def test_literal_out_of_range_is_no_value(self):
        assert _one("1e39") is Empty
        assert _one("3.5e38") is Empty
        assert _one("-3.5e38") is Empty

    def test_comparison(self):
        assert _one("1.5 < 2") is TRUE


class TestStrings:
    def test_literal_strips_quotes(self):
        assert _one('"go"') == VString("go")

    def test_raw_literal(self):
        assert _one("`a\\b`") == VString("a\\b")

    def test_concatenation(self):
        assert _one('"hello, " + "world"') == VString("hello, world")

    def test_concatenation_associative(self):
        left, right = evaluate('var l, r = ("a" + "b") + "c", "a" + ("b" + "c")')
        assert left == right == VString("abc")

    @pytest.mark.parametrize("op", ["-", "*", "/", "%"])
    def test_arithmetic_not_defined(self, op):
        assert _one(f'"a" {op} "b"') is Empty

    def test_comparison(self):
        assert _one('"abc" < "abd"') is TRUE


class TestCharacters:
    def test_literal(self):
        assert _one("'a'") == VChar(ord("a"))

    def test_code_point_arithmetic(self):
        results = evaluate(
            "var a, b, c, d, e = 'a' + 'a', 'b' - 'b', 'c' * 'c', 'd' / 'd', 'e' % 'e'"
        )
        assert results == [
            VChar(ord("a") * 2),
            VChar(0),
            VChar(ord("c") ** 2),
            VChar(1),
            VChar(0),
        ]

    def test_division_by_zero_is_no_value(self):
        assert _one("'a' / '\\x00'") is Empty

    @pytest.mark.parametrize(
        "literal, code",
        [("'\\n'", 10), ("'\\''", 39), ("'\\\\'", 92), ("'\\x41'", 65), ("'\\u00e9'", 0xE9), ("'\\101'", 65)],
    )
    def test_escapes(self, literal, code):
        assert _one(literal) == VChar(code)

    @pytest.mark.parametrize("literal", ["'\\x'", "'\\u'", "'\\U'"])
    def test_escape_without_digits_is_no_value(self, literal):
        assert _one(literal) is Empty

    @pytest.mark.parametrize("literal", ["'\\UFFFFFFFF'", "'\\U00110000'", "'\\ud800'", "'\\777'"])
    def test_escape_outside_rune_range_is_no_value(self, literal):
        assert _one(literal) is Empty

    def test_largest_escapes(self):
        assert _one("'\\U0010FFFF'") == VChar(0x10FFFF)
        assert _one("'\\377'") == VChar(255)

    def test_comparison(self):
        assert _one("'a' < 'b'") is TRUE


class TestBooleans:
    def test_not(self):
        assert _one("!true") is FALSE
        assert _one("!false") is TRUE

    def test_not_is_self_inverse(self):
        assert _one("!!true") is TRUE
        assert _one("!!false") is FALSE

    def test_not_on_other_kind_is_no_value(self):
        assert _one("!1") is Empty

    def test_no_binary_operators(self):
        assert _one("true < false") is Empty


class TestEqualOperands:
    @pytest.mark.parametrize("literal", ["3", "1.5", '"s"', "'c'"])
    def test_reflexive_comparisons(self, literal):
        results = evaluate(
            f"var a, b, c, d = {literal} <= {literal}, {literal} >= {literal}, "
            f"{literal} < {literal}, {literal} > {literal}"
        )
        assert results == [TRUE, TRUE, FALSE, FALSE]


class TestNoValue:
    @pytest.mark.parametrize(
        "source",
        [
            '1 + "a"',
            "'a' + 1",
            "1.5 + 'a'",
            "true + 1",
            "1 == 1",
            "1 && 2",
            "-2.5",
            "-'a'",
            "^1",
            "undefined",
            "undefined + 1",
            "f(1)",
            "fmt.Sprint",
            "nil",
        ],
    )
    def test_unevaluable(self, source):
        assert _one(source) is Empty

    def test_failure_is_local_to_its_slot(self):
        assert evaluate("var a, b, c = 1, 1 / 0, 3") == [VInt(1), Empty, VInt(3)]

    def test_later_declarations_continue(self):
        assert evaluate("var a = 1 / 0; var b = 2") == [Empty, VInt(2)]


class TestBinding:
    def test_names_bound_in_order(self):
        env = Environment()
        evaluate("var a = 2; var b = a * 3", env)
        assert env.get("b") == VInt(6)

    def test_grouped_declaration(self):
        assert evaluate("var ( a = 1; b = a + 1 )") == [VInt(1), VInt(2)]

    def test_const(self):
        assert evaluate("const c = 'z'") == [VChar(ord("z"))]

    def test_bindings_persist_across_calls(self):
        env = Environment()
        evaluate("var a = 20", env)
        assert evaluate("var b = a / 4", env) == [VInt(5)]

    def test_failed_slot_binds_no_value(self):
        env = Environment()
        evaluate("var a = 1; var a = 1 / 0", env)
        assert env.lookup("a") == (Empty, True)

    def test_protected_builtins(self):
        env = Environment()
        assert evaluate("var true = 1", env) == [VInt(1)]
        assert env.get("true") is TRUE
        assert evaluate("var x = !true", env) == [FALSE]

    def test_negation_does_not_mutate_binding(self):
        env = Environment()
        evaluate("var a = 5; var b = -a", env)
        assert env.get("a") == VInt(5)
        assert env.get("b") == VInt(-5)

    def test_fresh_environment_per_call_by_default(self):
        evaluate("var leaked = 1")
        assert evaluate("var x = leaked") == [Empty]

    def test_parse_error_binds_nothing(self):
        env = Environment()
        with pytest.raises(GovarParseError):
            evaluate("var a = 1; var", env)
        assert "a" not in env


class TestPositionalPairing:
    def test_missing_initializer_is_no_value(self):
        assert evaluate("var a, b = 1") == [VInt(1), Empty]

    def test_surplus_initializers_ignored(self):
        assert evaluate("var a = 1, 2") == [VInt(1)]


class TestZeroValues:
    @pytest.mark.parametrize(
        "type_name, zero",
        [
            ("int", VInt(0)),
            ("string", VString("")),
            ("byte", VChar(ord("0"))),
            ("rune", VChar(ord("0"))),
            ("float32", VFloat(0.0)),
        ],
    )
    def test_zero_value(self, type_name, zero):
        assert evaluate(f"var a {type_name}") == [zero]

    def test_every_name_gets_a_zero(self):
        assert evaluate("var a, b int") == [VInt(0), VInt(0)]

    @pytest.mark.parametrize("type_expr", ["float64", "bool", "[]int", "*int"])
    def test_unknown_type_is_no_value(self, type_expr):
        assert evaluate(f"var a {type_expr}") == [Empty]

    def test_explicit_value_wins_over_type(self):
        assert evaluate("var a int = 10") == [VInt(10)]


class TestFunctions:
    def test_func_contributes_nothing(self):
        assert evaluate("func f(a int) int { return a }") == []

    def test_func_then_var(self):
        assert evaluate("func f() {}; var a = 1") == [VInt(1)]


class TestOperatorTables:
    def test_every_kind_has_a_table(self):
        assert set(OPERATOR_TABLES) == set(Kind)

    def test_evaluate_expression_unknown_shape(self):
        env = Environment()
        assert evaluate_expression(Call(Ident("f")), env) is Empty
        assert evaluate_expression(Selector(Ident("a"), "b"), env) is Empty
        assert evaluate_expression(None, env) is Empty
