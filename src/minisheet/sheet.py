"""Cell store and the interface consumed by a grid UI.

The Sheet owns cell lifecycle (lazy creation, explicit clearing) and one
:class:`~minisheet.resolution.Resolver` whose cache is invalidated on every
edit.  None of the interface methods raise: bad formulas become a cell's
``#Error``, bad addresses are logged and ignored.
"""

from __future__ import annotations

from typing import Iterator

from minisheet.addressing import (
    NUM_COLS,
    NUM_ROWS,
    InvalidAddressError,
    in_grid,
    name_to_address,
    parse_address,
)
from minisheet.cells import Cell
from minisheet.formulas.errors import FormulaFunctionError
from minisheet.formulas.evaluator import Value
from minisheet.logging.events import (
    ADDRESS_INVALID,
    ADDRESS_OUT_OF_GRID,
    FORMULA_PARSE_ERROR,
    FORMULA_UNKNOWN_FUNCTION,
    EventType,
    emit_info,
    emit_warning,
)
from minisheet.resolution import NA_MARKER, Resolver

FORMAT_TAGS = frozenset({"bold", "italic", "underline"})


class Sheet:
    """Mapping of cell name -> Cell, plus resolution and display.

    Usage::

        sheet = Sheet()
        sheet.set_cell_input("A1", "2")
        sheet.set_cell_input("B1", "3")
        sheet.set_cell_input("C1", "=A1+B1")
        sheet.get_cell_display("C1")  # "5"
    """

    def __init__(self) -> None:
        self._cells: dict[str, Cell] = {}
        self._resolver = Resolver(self)

    # ------------------------------------------------------------------
    # Cell store
    # ------------------------------------------------------------------

    def get(self, name: str) -> Cell | None:
        """Return the stored cell, or None.  Never creates a cell."""
        return self._cells.get(name)

    def get_cell(self, name: str) -> Cell:
        """Return the cell at *name*, creating an empty one on first reference.

        Raises:
            InvalidAddressError: If *name* is not a cell name.
        """
        cell = self._cells.get(name)
        if cell is None:
            parse_address(name)
            cell = Cell(name)
            self._cells[name] = cell
        return cell

    def cells(self) -> Iterator[Cell]:
        return iter(list(self._cells.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    # ------------------------------------------------------------------
    # UI interface
    # ------------------------------------------------------------------

    def set_cell_input(self, address: str, text: str) -> None:
        """Store *text* as the input of *address* and invalidate cached values."""
        if not self._check_address(address, "set"):
            return
        cell = self.get_cell(address).set(text)
        self._resolver.invalidate()

        if cell.parse_error:
            error_code = FORMULA_PARSE_ERROR
            if isinstance(cell.error, FormulaFunctionError):
                error_code = FORMULA_UNKNOWN_FUNCTION
            emit_warning(
                EventType.cell_parse_error,
                str(cell.error),
                {"address": address, "input": text},
                error_code=error_code,
            )
        else:
            emit_info(
                EventType.cell_set,
                f"Set {address}",
                {"address": address, "input": text, "kind": _kind(cell)},
            )

    def get_cell_display(self, address: str) -> str:
        """Display string for *address*: a value, ``#Error``, ``#CYCLE`` or ``#NA``."""
        if name_to_address(address) is None:
            return NA_MARKER
        return self._resolver.render(address)

    def toggle_cell_format(self, address: str, format_tag: str) -> None:
        """Add *format_tag* to the cell's formats, or remove it if present."""
        if not self._check_address(address, "toggle_format"):
            return
        if format_tag not in FORMAT_TAGS:
            emit_warning(
                EventType.format_toggled,
                f"Unknown format tag {format_tag!r}",
                {"address": address, "format": format_tag},
            )
        enabled = self.get_cell(address).toggle_format(format_tag)
        emit_info(
            EventType.format_toggled,
            f"{'Set' if enabled else 'Cleared'} {format_tag} on {address}",
            {"address": address, "format": format_tag, "enabled": enabled},
        )

    def get_cell_input(self, address: str) -> str:
        """Raw input last set on *address*, or "" for a cell never written."""
        cell = self._cells.get(address)
        if cell is None or cell.input is None:
            return ""
        return cell.input

    def get_cell_formats(self, address: str) -> frozenset[str]:
        cell = self._cells.get(address)
        return frozenset(cell.formats) if cell is not None else frozenset()

    def clear_cell(self, address: str) -> bool:
        """Remove the cell at *address*, formats included.  Returns True if one was stored."""
        cell = self._cells.pop(address, None)
        if cell is None:
            return False
        self._resolver.invalidate()
        emit_info(EventType.cell_cleared, f"Cleared {address}", {"address": address})
        return True

    def resolve(self, address: str) -> Value:
        """Effective value of *address* (None when absent).

        Raises:
            CellCycleError: If the cell depends on itself.
        """
        return self._resolver.resolve(address)

    def render_all(self) -> dict[str, str]:
        """Display strings for every stored cell, keyed by name."""
        return {cell.name: self.get_cell_display(cell.name) for cell in self.cells()}

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _check_address(self, address: str, operation: str) -> bool:
        addr = name_to_address(address)
        if addr is None:
            emit_warning(
                EventType.invalid_address,
                str(InvalidAddressError(address)),
                {"address": address, "operation": operation},
                error_code=ADDRESS_INVALID,
            )
            return False
        if not in_grid(address):
            emit_warning(
                EventType.invalid_address,
                f"Cell {address} is outside the {NUM_ROWS}x{NUM_COLS} grid",
                {"address": address, "operation": operation},
                error_code=ADDRESS_OUT_OF_GRID,
            )
            return False
        return True


def _kind(cell: Cell) -> str:
    if cell.formula is not None:
        return "formula"
    if cell.value is None:
        return "empty"
    if isinstance(cell.value, float):
        return "number"
    return "text"
