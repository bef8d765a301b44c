"""Formula parsing and evaluation.

Public API::

    from minisheet.formulas import parse_formula, compile_formula, evaluate
"""

from minisheet.formulas.errors import (
    CellCycleError,
    FormulaError,
    FormulaFunctionError,
    FormulaParseError,
)
from minisheet.formulas.evaluator import Value, evaluate, format_value
from minisheet.formulas.formula import Formula, Op
from minisheet.formulas.parser import compile_formula, parse_formula

__all__ = [
    "CellCycleError",
    "Formula",
    "FormulaError",
    "FormulaFunctionError",
    "FormulaParseError",
    "Op",
    "Value",
    "compile_formula",
    "evaluate",
    "format_value",
    "parse_formula",
]
