"""Apply a parsed Formula to the resolved values of its argument cells.

Resolved values are ``None`` (absent), ``float`` (numeric) or ``str``
(text).  Absent is not zero: only the operations below decide how an
absent argument counts.

- ``+`` with a text operand joins the display forms of both operands
  (``"foo" + 1`` is ``"foo1"``).
- ``+ - * /``: otherwise an absent or non-numeric operand makes the result
  NaN.  Division by zero is NaN as well.
- ``sum``: absent and non-numeric arguments count as 0.
- ``avg``: the ``sum`` result divided by the number of cells in the range,
  not the number of numeric ones.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

from minisheet.formulas.errors import FormulaError
from minisheet.formulas.formula import Formula, Op

Value = Union[float, str, None]


def _number(value: Value) -> float | None:
    """Return *value* as a float, or None for absent, text or NaN."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and not math.isnan(value):
        return float(value)
    return None


def format_value(value: Value) -> str | None:
    """Display string for a resolved value, or None when it shows as ``#NA``."""
    if value is None:
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value == int(value):
            return str(int(value))
        return f"{value:.10g}"
    return str(value)


def _concat(a: Value, b: Value) -> Value:
    left, right = format_value(a), format_value(b)
    if left is None or right is None:
        return math.nan
    return left + right


def evaluate(formula: Formula, values: Sequence[Value]) -> Value:
    """Evaluate *formula* given its arguments' resolved values (same order as ``formula.args``)."""
    if len(values) != len(formula.args):
        raise FormulaError(
            f"{formula.op.value} expects {len(formula.args)} values, got {len(values)}"
        )

    op = formula.op
    if op in (Op.ADD, Op.SUB, Op.MUL, Op.DIV):
        if op is Op.ADD and (isinstance(values[0], str) or isinstance(values[1], str)):
            return _concat(values[0], values[1])
        left, right = _number(values[0]), _number(values[1])
        if left is None or right is None:
            return math.nan
        if op is Op.ADD:
            return left + right
        if op is Op.SUB:
            return left - right
        if op is Op.MUL:
            return left * right
        if right == 0:
            return math.nan
        return left / right

    if op in (Op.SUM, Op.AVG):
        total = 0.0
        for v in values:
            n = _number(v)
            if n is not None:
                total += n
        if op is Op.SUM:
            return total
        return total / len(values) if values else math.nan

    raise FormulaError(f"Unknown operation: {op!r}")
