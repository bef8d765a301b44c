"""A single spreadsheet cell: raw input, literal value or formula, and formats."""

from __future__ import annotations

import logging
import math

from minisheet.formulas.errors import FormulaParseError
from minisheet.formulas.evaluator import Value
from minisheet.formulas.formula import Formula
from minisheet.formulas.parser import compile_formula

logger = logging.getLogger(__name__)

ERROR_MARKER = "#Error"


def coerce_literal(text: str) -> Value:
    """Interpret non-formula input: absent, a finite number, or text verbatim."""
    if not text.strip():
        return None
    # float() accepts digit separators; "1_000" stays text
    if "_" in text:
        return text
    try:
        number = float(text)
    except ValueError:
        return text
    # "nan", "inf" and friends stay text
    if not math.isfinite(number):
        return text
    return number


class Cell:
    """One cell of a Sheet.

    ``set()`` replaces ``input``, ``value``, ``formula`` and ``parse_error``
    together, so a stale mix (an old formula next to a new literal) is never
    observable.  ``formats`` is presentation metadata and survives ``set()``.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.input: str | None = None
        self.value: Value = None
        self.formula: Formula | None = None
        self.parse_error: str | None = None
        self.error: FormulaParseError | None = None
        self.formats: set[str] = set()

    def set(self, text: str) -> Cell:
        """Replace the cell's content with *text*.  Returns self for chaining."""
        value: Value = None
        formula: Formula | None = None
        parse_error: str | None = None
        error: FormulaParseError | None = None

        if text.startswith("="):
            try:
                formula = compile_formula(text[1:])
            except FormulaParseError as exc:
                parse_error = ERROR_MARKER
                error = exc
        else:
            value = coerce_literal(text)

        self.input = text
        self.value = value
        self.formula = formula
        self.parse_error = parse_error
        self.error = error
        logger.debug("set %s to %r", self.name, text)
        return self

    def toggle_format(self, tag: str) -> bool:
        """Flip *tag* in the format set.  Returns True if the tag is now set."""
        if tag in self.formats:
            self.formats.discard(tag)
            return False
        self.formats.add(tag)
        return True

    @property
    def is_formula(self) -> bool:
        return self.formula is not None

    def __repr__(self) -> str:
        return f"Cell({self.name!r}, input={self.input!r})"
