"""Tests for formula parsing and evaluation."""

from __future__ import annotations

import math

import pytest

from minisheet.formulas import (
    Formula,
    FormulaError,
    FormulaFunctionError,
    FormulaParseError,
    Op,
    compile_formula,
    evaluate,
    parse_formula,
)


# ────────────────────────────────────────────────────────────────
# Parser: binary cell operations
# ────────────────────────────────────────────────────────────────


class TestBinaryParse:
    def test_subtraction(self) -> None:
        formula = parse_formula("A1-C2")
        assert formula == Formula(op=Op.SUB, args=("A1", "C2"))
        assert str(formula) == "op: -, args: A1,C2"

    @pytest.mark.parametrize(
        "text, op",
        [("A1+B1", Op.ADD), ("A1-B1", Op.SUB), ("A1*B1", Op.MUL), ("A1/B1", Op.DIV)],
    )
    def test_each_operator(self, text: str, op: Op) -> None:
        formula = parse_formula(text)
        assert formula is not None
        assert formula.op is op
        assert formula.args == ("A1", "B1")

    def test_whitespace_around_operator(self) -> None:
        assert parse_formula("A1 + B1") == Formula(op=Op.ADD, args=("A1", "B1"))
        assert parse_formula("AA10\t*  ZZ99") == Formula(op=Op.MUL, args=("AA10", "ZZ99"))

    def test_formula_is_immutable(self) -> None:
        formula = parse_formula("A1+B1")
        with pytest.raises(Exception):
            formula.op = Op.SUB  # type: ignore[misc]


# ────────────────────────────────────────────────────────────────
# Parser: range function calls
# ────────────────────────────────────────────────────────────────


class TestRangeCallParse:
    def test_sum(self) -> None:
        formula = parse_formula("sum(A1:B2)")
        assert formula == Formula(op=Op.SUM, args=("A1", "B1", "A2", "B2"))

    def test_avg(self) -> None:
        formula = parse_formula("avg(C1:C3)")
        assert formula is not None
        assert formula.op is Op.AVG
        assert formula.args == ("C1", "C2", "C3")

    def test_unknown_function_is_parse_failure(self) -> None:
        assert parse_formula("max(A1:B2)") is None
        with pytest.raises(FormulaFunctionError) as exc_info:
            compile_formula("max(A1:B2)")
        assert exc_info.value.func_name == "max"

    def test_unknown_function_error_is_parse_error(self) -> None:
        with pytest.raises(FormulaParseError, match="Unknown function"):
            compile_formula("median(A1:A9)")

    def test_range_outside_grid_is_parse_failure(self) -> None:
        assert parse_formula("sum(A1:ZZ99999999)") is None
        with pytest.raises(FormulaParseError, match="outside the 100x100 grid"):
            compile_formula("avg(CW1:A1)")

    def test_full_grid_range(self) -> None:
        formula = parse_formula("sum(A1:CV100)")
        assert formula is not None
        assert len(formula.args) == 10_000
        assert formula.args[-1] == "CV100"


# ────────────────────────────────────────────────────────────────
# Parser: rejected text
# ────────────────────────────────────────────────────────────────


class TestParseFailures:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "A1 +",
            "A1",
            "A1+B1+C1",
            "1+2",
            "A1+2",
            "A01+B1",
            "a1+b1",
            "AAA1+B1",
            " A1+B1",
            "A1+B1 ",
            "A1 % B1",
            "SUM(A1:B2)",
            "sum(A1)",
            "sum(A1,B2)",
            "sum( A1:B2 )",
            "sum(A1:B2) + C1",
            "sum(sum(A1:B2))",
            "(A1+B1)",
        ],
    )
    def test_returns_none(self, text: str) -> None:
        assert parse_formula(text) is None

    @pytest.mark.parametrize("text", ["A1 +", "1+2", ""])
    def test_compile_raises_parse_error(self, text: str) -> None:
        with pytest.raises(FormulaParseError, match="Formula parse error"):
            compile_formula(text)

    def test_parse_error_is_formula_error(self) -> None:
        with pytest.raises(FormulaError):
            compile_formula("A1 +")


# ────────────────────────────────────────────────────────────────
# Evaluator
# ────────────────────────────────────────────────────────────────


def _f(op: Op, n: int) -> Formula:
    return Formula(op=op, args=tuple(f"A{i + 1}" for i in range(n)))


class TestEvaluate:
    def test_arithmetic(self) -> None:
        assert evaluate(_f(Op.ADD, 2), [2.0, 3.0]) == 5.0
        assert evaluate(_f(Op.SUB, 2), [2.0, 3.0]) == -1.0
        assert evaluate(_f(Op.MUL, 2), [2.0, 3.0]) == 6.0
        assert evaluate(_f(Op.DIV, 2), [3.0, 2.0]) == 1.5

    def test_zero_is_a_value(self) -> None:
        assert evaluate(_f(Op.MUL, 2), [0.0, 7.0]) == 0.0

    @pytest.mark.parametrize("values", [[None, 1.0], [1.0, None], [1.0, math.nan], ["x", None]])
    def test_absent_operand_is_nan(self, values: list) -> None:
        assert math.isnan(evaluate(_f(Op.ADD, 2), values))

    @pytest.mark.parametrize("op", [Op.SUB, Op.MUL, Op.DIV])
    def test_text_operand_is_nan(self, op: Op) -> None:
        assert math.isnan(evaluate(_f(op, 2), ["x", 1.0]))
        assert math.isnan(evaluate(_f(op, 2), [1.0, "x"]))

    @pytest.mark.parametrize(
        "values, joined",
        [(["foo", "bar"], "foobar"), (["foo", 1.0], "foo1"), ([2.5, "x"], "2.5x"), (["", "a"], "a")],
    )
    def test_add_joins_text(self, values: list, joined: str) -> None:
        assert evaluate(_f(Op.ADD, 2), values) == joined

    def test_division_by_zero_is_nan(self) -> None:
        assert math.isnan(evaluate(_f(Op.DIV, 2), [1.0, 0.0]))

    def test_sum_treats_absent_and_text_as_zero(self) -> None:
        assert evaluate(_f(Op.SUM, 4), [1.0, None, "x", 2.5]) == 3.5

    def test_sum_of_nothing_is_zero(self) -> None:
        assert evaluate(_f(Op.SUM, 3), [None, None, None]) == 0.0

    def test_avg_divides_by_range_size(self) -> None:
        assert evaluate(_f(Op.AVG, 4), [2.0, None, 4.0, None]) == 1.5

    def test_value_count_must_match_args(self) -> None:
        with pytest.raises(FormulaError, match="expects 2 values"):
            evaluate(_f(Op.ADD, 2), [1.0])
