"""
RPN 公式引擎测试
"""

import math

import pytest

from core.formula import (
    ChannelFormulas,
    TokenKind,
    available_functions,
    classify_token,
    describe,
    evaluate,
    evaluate_for_channel,
    to_infix,
    validate,
)
from presets import PresetManager


@pytest.mark.parametrize("literal", ["0", "3", "-2.5", "1e3", ".5", "42.125"])
def test_literal_evaluates_to_its_value(literal):
    assert evaluate(literal, {}) == float(literal)


def test_basic_arithmetic():
    assert evaluate("3 4 +", {}) == 7
    assert evaluate("2 3 ^", {}) == 8
    assert evaluate("2 3 pow", {}) == 8
    assert evaluate("3 4 *", {}) == 12


def test_binary_operand_order():
    assert evaluate("5 2 -", {}) == 3
    assert evaluate("1 2 /", {}) == 0.5
    assert evaluate("7 3 %", {}) == 1
    assert evaluate("-7 3 %", {}) == -1
    assert evaluate("2 10 ^", {}) == 1024


def test_variables():
    assert evaluate("x y +", {"x": 0.5, "y": 0.25}) == 0.75
    assert evaluate("t 2 *", {"x": 0, "y": 0, "t": 1.5}) == 3


def test_variable_missing_from_binding_stops_evaluation():
    assert evaluate("x 1 +", {}) == 0
    assert evaluate("1 x +", {}) == 1


def test_division_by_zero_is_infinite_and_saturates():
    result = evaluate("1 0 /", {})
    assert result == math.inf
    assert evaluate_for_channel("1 0 /", {}) == 255
    assert evaluate("0 1 - 0 /", {}) == -math.inf
    assert math.isnan(evaluate("0 0 /", {}))


def test_insufficient_operands_returns_zero():
    assert evaluate("+", {}) == 0
    assert evaluate("sin", {}) == 0
    assert evaluate("1 + 2", {}) == 0


def test_unknown_token_stops_processing():
    assert evaluate("3 4 + foo 100", {}) == 7
    assert evaluate("foo 3 4 +", {}) == 0


def test_remaining_values_return_top_of_stack():
    assert evaluate("1 2", {}) == 2
    assert evaluate("1 2 3 +", {}) == 5


@pytest.mark.parametrize("formula", ["", "   ", "\t\n"])
def test_blank_formula_is_zero(formula):
    assert evaluate(formula, {}) == 0


def test_non_finite_literals_are_unknown_tokens():
    assert evaluate("inf", {}) == 0
    assert evaluate("1 nan +", {}) == 1
    assert classify_token("inf") is TokenKind.UNKNOWN
    assert evaluate("1e999", {}) == 0


@pytest.mark.parametrize(
    "literal, value",
    [("1_0", 1.0), ("3abc", 3.0), ("2x", 2.0), ("1e", 1.0), ("1.2.3", 1.2), ("-.5e1", -5.0), ("0x10", 0.0)],
)
def test_literal_uses_leading_decimal_prefix(literal, value):
    assert evaluate(literal, {}) == value
    assert classify_token(literal) is TokenKind.NUMBER
    assert validate(literal).valid


@pytest.mark.parametrize("token", ["٣", "３", "٣ 1 +", "_1", "e5", "."])
def test_non_ascii_digits_and_malformed_numbers_are_unknown(token):
    assert classify_token(token.split()[0]) is TokenKind.UNKNOWN
    assert evaluate(token, {}) == 0
    assert not validate(token).valid


def test_half_turn_trigonometry():
    assert evaluate("0.5 sin", {}) == pytest.approx(1.0)
    assert evaluate("1 cos", {}) == pytest.approx(-1.0)
    assert evaluate("0.25 tan", {}) == pytest.approx(1.0)
    assert evaluate("1 asin", {}) == pytest.approx(0.5)
    assert evaluate("-1 acos", {}) == pytest.approx(1.0)
    assert evaluate("1 atan", {}) == pytest.approx(0.25)


def test_plain_unary_functions():
    assert evaluate("9 sqrt", {}) == 3
    assert evaluate("0 exp", {}) == 1
    assert evaluate("-2 abs", {}) == 2


def test_domain_errors_become_nan_and_map_to_zero():
    assert math.isnan(evaluate("-1 sqrt", {}))
    assert math.isnan(evaluate("2 asin", {}))
    assert math.isnan(evaluate("-8 0.5 ^", {}))
    assert evaluate_for_channel("-1 sqrt", {}) == 0


def test_overflow_becomes_infinity():
    assert evaluate("1000 exp", {}) == math.inf
    assert evaluate("10 400 pow", {}) == math.inf


def test_evaluate_is_idempotent():
    binding = {"x": 0.3, "y": 0.7, "t": 12.25}
    formula = "t x 10 * + sin 0.5 * 0.5 +"
    assert evaluate(formula, binding) == evaluate(formula, binding)


def test_validate_reports_arity_error_at_position():
    result = validate("+")
    assert not result.valid
    assert result.errors == ["Token 1 ('+'): Binary operator requires two operands"]
    assert result.stack_depth == 0


def test_validate_continues_after_arity_error():
    result = validate("1 + 2 sin")
    assert result.errors == ["Token 2 ('+'): Binary operator requires two operands"]
    assert result.stack_depth == 2

    result = validate("sin cos")
    assert result.errors == [
        "Token 1 ('sin'): Unary function requires one operand",
        "Token 2 ('cos'): Unary function requires one operand",
    ]


def test_validate_halts_at_unknown_token():
    result = validate("foo +")
    assert result.errors == ["Token 1 ('foo'): Unknown token"]

    result = validate("x 1 + bar baz")
    assert result.errors == ["Token 4 ('bar'): Unknown token"]
    assert result.stack_depth == 1


def test_validate_accepts_well_formed_formulas():
    result = validate("x y + t *")
    assert result.valid
    assert result.errors == []
    assert result.stack_depth == 1

    assert validate("1 2").stack_depth == 2
    assert validate("").valid
    assert validate("").stack_depth == 0


def test_valid_preset_formulas_evaluate_to_numbers():
    manager = PresetManager()
    binding = {"x": -0.5, "y": 0.25, "t": 3.7}
    for name in manager.list_presets():
        for formula in manager.get(name).channels().values():
            assert validate(formula).valid
            value = evaluate(formula, binding)
            assert math.isfinite(value)
            assert 0 <= evaluate_for_channel(formula, binding) <= 255


DEGENERATE_OPERANDS = [
    "0",
    "-0",
    "-1",
    "-2.5",
    "0.5",
    "1e308",
    "-1e308",
    "1e-308",
    "x",
    "y",
    "t",
    "1e308 10 *",
    "-1e308 10 *",
    "0 0 /",
]
DEGENERATE_BINDING = {"x": 1e308, "y": math.nan, "t": -math.inf}


@pytest.mark.parametrize("operator", available_functions()["unary"])
@pytest.mark.parametrize("operand", DEGENERATE_OPERANDS)
def test_unary_operators_never_raise_on_degenerate_operands(operator, operand):
    formula = f"{operand} {operator}"
    assert validate(formula).valid
    assert isinstance(evaluate(formula, DEGENERATE_BINDING), float)
    assert 0 <= evaluate_for_channel(formula, DEGENERATE_BINDING) <= 255
    assert to_infix(formula).startswith(f"{operator}(")


@pytest.mark.parametrize("operator", available_functions()["binary"])
@pytest.mark.parametrize("left", DEGENERATE_OPERANDS)
@pytest.mark.parametrize("right", DEGENERATE_OPERANDS)
def test_binary_operators_never_raise_on_degenerate_operands(operator, left, right):
    formula = f"{left} {right} {operator}"
    assert validate(formula).valid
    assert isinstance(evaluate(formula, DEGENERATE_BINDING), float)
    assert 0 <= evaluate_for_channel(formula, DEGENERATE_BINDING) <= 255
    assert not to_infix(formula).startswith("Error")


def test_to_infix():
    assert to_infix("3 4 +") == "(3 + 4)"
    assert to_infix("2 3 pow") == "pow(2, 3)"
    assert to_infix("2 3 ^") == "pow(2, 3)"
    assert to_infix("x sin") == "sin(x)"
    assert to_infix("t x + sin 0.5 *") == "(sin((t + x)) * 0.5)"


def test_to_infix_errors_and_partial_input():
    assert to_infix("+") == "Error: + needs two operands"
    assert to_infix("sin") == "Error: sin needs one operand"
    assert to_infix("3 4 + foo 5") == "(3 + 4)"
    assert to_infix("") == ""
    assert to_infix("foo") == ""


def test_classify_token():
    assert classify_token("1.5") is TokenKind.NUMBER
    assert classify_token("t") is TokenKind.VARIABLE
    assert classify_token("pow") is TokenKind.OPERATOR
    assert classify_token("z") is TokenKind.UNKNOWN


def test_available_functions():
    functions = available_functions()
    assert functions["unary"] == ["cos", "sin", "tan", "acos", "asin", "atan", "sqrt", "exp", "abs"]
    assert functions["binary"] == ["+", "-", "*", "/", "%", "^", "pow"]
    assert functions["variables"] == ["x", "y", "t"]


def test_describe():
    assert describe("sin")["arity"] == 1
    assert describe("pow")["arity"] == 2
    assert describe("x") is None
    assert describe("foo") is None


def test_channel_formulas_validate_each_channel():
    results = ChannelFormulas(red="x", green="+", blue="").validate()
    assert results["red"].valid
    assert not results["green"].valid
    assert results["blue"].valid
