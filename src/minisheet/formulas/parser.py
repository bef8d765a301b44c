"""Lark-based parser for the two supported formula forms.

The body after ``=`` must be exactly one of:

- a binary cell operation: ``A1+B2``, ``A1 * C3`` (``+ - * /``)
- a range function call: ``sum(A1:B4)``, ``avg(C1:C9)``

There is no precedence, nesting, or literal operand.
"""

from __future__ import annotations

import logging

from lark import Lark, Tree
from lark.exceptions import LarkError, UnexpectedInput

from minisheet.addressing import NUM_COLS, NUM_ROWS, in_grid
from minisheet.formulas.errors import FormulaFunctionError, FormulaParseError
from minisheet.formulas.formula import RANGE_FUNCTIONS, Formula, Op
from minisheet.ranges import expand_range

logger = logging.getLogger(__name__)

# LALR(1) grammar.  Whitespace is only allowed around a binary operator.
GRAMMAR = r"""
?start: binary_op
    | range_call

binary_op: CELL_REF _WS? OPERATOR _WS? CELL_REF
range_call: FUNC_NAME "(" CELL_REF ":" CELL_REF ")"

// Same shape as an address name: 1-2 letters, row without leading zero
CELL_REF: /[A-Z]{1,2}[1-9][0-9]*/

OPERATOR: "+" | "-" | "*" | "/"

// Function names start lowercase, so they never collide with CELL_REF
FUNC_NAME: /[a-z]\w*/

_WS: /[ \t\f\r\n]+/
"""

_parser = Lark(GRAMMAR, parser="lalr", start="start")

_FUNCTIONS: dict[str, Op] = {op.value: op for op in RANGE_FUNCTIONS}


def compile_formula(text: str) -> Formula:
    """Parse a formula body (everything after the leading ``=``).

    Args:
        text: The formula body, e.g. ``"A1 + B1"`` or ``"sum(A1:B2)"``.

    Returns:
        The parsed Formula.

    Raises:
        FormulaFunctionError: If a range call names an unsupported function.
        FormulaParseError: If the text matches neither form, or a range
            reaches outside the grid.
    """
    try:
        tree = _parser.parse(text)
    except UnexpectedInput as exc:
        raise FormulaParseError(_describe(exc), position=getattr(exc, "column", None)) from exc
    except LarkError as exc:
        raise FormulaParseError(str(exc)) from exc
    return _build(tree)


def parse_formula(text: str) -> Formula | None:
    """Parse a formula body, returning ``None`` when it is not a formula.

    Never raises for malformed text.
    """
    try:
        return compile_formula(text)
    except FormulaParseError as exc:
        logger.debug("formula %r rejected: %s", text, exc)
        return None


def _build(tree: Tree) -> Formula:
    if tree.data == "binary_op":
        left, op, right = tree.children
        return Formula(op=Op(str(op)), args=(str(left), str(right)))

    func_name, start, end = tree.children
    op = _FUNCTIONS.get(str(func_name))
    if op is None:
        raise FormulaFunctionError(str(func_name))
    if not (in_grid(str(start)) and in_grid(str(end))):
        raise FormulaParseError(f"range {start}:{end} is outside the {NUM_ROWS}x{NUM_COLS} grid")
    return Formula(op=op, args=tuple(expand_range(str(start), str(end))))


def _describe(exc: UnexpectedInput) -> str:
    token = getattr(exc, "token", None)
    if token is not None and token.type == "$END":
        return "unexpected end of formula"
    char = getattr(exc, "char", None)
    if char is not None:
        return f"unexpected character {char!r}"
    if token is not None:
        return f"unexpected {token!s}"
    return "unrecognised formula"
