"""On-demand memoized cell resolution with cycle detection.

A cell is resolved only when referenced, and the result is cached until
the owning Sheet invalidates the cache (on any edit).  Cycles raise
:class:`CellCycleError` showing the cycle path instead of recursing.
"""

from __future__ import annotations

import logging
from typing import Protocol

from minisheet.cells import Cell
from minisheet.formulas.errors import CellCycleError
from minisheet.formulas.evaluator import Value, evaluate, format_value
from minisheet.formulas.formula import Formula
from minisheet.logging.events import CELL_CYCLE, EventType, emit_warning

logger = logging.getLogger(__name__)

NA_MARKER = "#NA"
CYCLE_MARKER = "#CYCLE"


class CellSource(Protocol):
    """Anything that can look up a stored cell by name without creating it."""

    def get(self, name: str) -> Cell | None:
        ...


class Resolver:
    """Memoized evaluator over the cells of one CellSource.

    Usage::

        resolver = Resolver(sheet)
        value = resolver.resolve("C1")
        text = resolver.render("C1")
    """

    def __init__(self, cells: CellSource) -> None:
        self._cells = cells
        self._cache: dict[str, Value] = {}
        self._in_progress: set[str] = set()
        self._eval_stack: list[str] = []

    def resolve(self, name: str) -> Value:
        """Resolve a cell's effective value.

        Dependencies are walked with an explicit work stack, so the depth of
        a dependency chain is bounded only by the number of cells.

        Returns:
            ``None`` for a missing cell, an empty cell or a parse error;
            otherwise the literal value or the formula result.

        Raises:
            CellCycleError: If *name* depends on itself.
        """
        pending, value = self._lookup(name)
        if pending is None:
            return value

        # One frame per formula cell being evaluated: (name, formula, resolved args)
        frames: list[tuple[str, Formula, list[Value]]] = []
        self._enter(name, pending, frames)
        try:
            while frames:
                current, formula, values = frames[-1]
                if len(values) < len(formula.args):
                    arg = formula.args[len(values)]
                    pending, value = self._lookup(arg)
                    if pending is None:
                        values.append(value)
                    elif arg in self._in_progress:
                        cycle_start = self._eval_stack.index(arg)
                        raise CellCycleError(self._eval_stack[cycle_start:] + [arg])
                    else:
                        self._enter(arg, pending, frames)
                    continue

                result = evaluate(formula, values)
                logger.debug("resolved %s = %r", current, result)
                self._cache[current] = result
                frames.pop()
                self._eval_stack.pop()
                self._in_progress.discard(current)
                if frames:
                    frames[-1][2].append(result)
        finally:
            self._in_progress.clear()
            self._eval_stack.clear()
        return self._cache[name]

    def render(self, name: str) -> str:
        """Display string for a cell.

        Precedence: the cell's parse error, then ``#CYCLE`` for a circular
        reference, then the formatted value, else ``#NA``.
        """
        cell = self._cells.get(name)
        if cell is not None and cell.parse_error:
            return cell.parse_error
        try:
            value = self.resolve(name)
        except CellCycleError as exc:
            emit_warning(
                EventType.cycle_detected,
                str(exc),
                {"address": name, "cycle_path": exc.cycle_path},
                error_code=CELL_CYCLE,
            )
            return CYCLE_MARKER
        text = format_value(value)
        return NA_MARKER if text is None else text

    def invalidate(self) -> None:
        """Clear all cached values.

        Call this when cells have been edited and need re-evaluation.
        """
        self._cache.clear()
        self._in_progress.clear()
        self._eval_stack.clear()

    def is_cached(self, name: str) -> bool:
        return name in self._cache

    def _lookup(self, name: str) -> tuple[Formula | None, Value]:
        """Return ``(None, value)`` when *name* needs no evaluation, else its pending formula."""
        if name in self._cache:
            return None, self._cache[name]
        cell = self._cells.get(name)
        if cell is None:
            return None, None
        if cell.formula is None:
            self._cache[name] = cell.value
            return None, cell.value
        return cell.formula, None

    def _enter(self, name: str, formula: Formula, frames: list[tuple[str, Formula, list[Value]]]) -> None:
        self._in_progress.add(name)
        self._eval_stack.append(name)
        frames.append((name, formula, []))
