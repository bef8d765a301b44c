"""A1-style cell address encoding.

Columns use bijective base-26 (no zero digit): A=1 .. Z=26, AA=27 .. ZZ=702.
Rows are written 1-based.  Internally every address is a zero-based
``(row, col)`` pair.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_ADDR_RE = re.compile(r"([A-Z]{1,2})([1-9][0-9]*)")
_COLUMN_RE = re.compile(r"[A-Z]{1,2}")

MAX_COLUMN = 26 * 26 + 26  # ZZ

NUM_ROWS = 100
NUM_COLS = 100


class InvalidAddressError(ValueError):
    """Text that does not name a cell.

    Attributes:
        name: The rejected text.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid cell address: {name!r}")


class CellAddress(NamedTuple):
    """Zero-based grid coordinates of a cell."""

    row: int
    col: int

    @property
    def name(self) -> str:
        return address_to_name(self.row, self.col)


def encode_column(index: int) -> str:
    """Convert a 1-based column index to letters.  1=A, 26=Z, 27=AA, 702=ZZ."""
    if index < 1 or index > MAX_COLUMN:
        raise ValueError(f"Column index out of range: {index}")
    result = ""
    n = index
    while n > 0:
        n, rem = divmod(n - 1, 26)
        result = chr(65 + rem) + result
    return result


def decode_column(letters: str) -> int:
    """Convert column letters to a 1-based index.  A=1, Z=26, AA=27."""
    if not _COLUMN_RE.fullmatch(letters):
        raise ValueError(f"Invalid column letters: {letters!r}")
    idx = 0
    for ch in letters:
        idx = idx * 26 + (ord(ch) - ord("A") + 1)
    return idx


def address_to_name(row: int, col: int) -> str:
    """Build a cell name from 0-based row/col."""
    if row < 0:
        raise ValueError(f"Row index out of range: {row}")
    return f"{encode_column(col + 1)}{row + 1}"


def name_to_address(name: str) -> CellAddress | None:
    """Parse 'A1' -> CellAddress(row=0, col=0).

    Returns ``None`` when *name* is not a valid cell name.  No case folding
    is applied: ``"a1"`` is not an address.
    """
    if not isinstance(name, str):
        return None
    m = _ADDR_RE.fullmatch(name)
    if not m:
        return None
    return CellAddress(int(m.group(2)) - 1, decode_column(m.group(1)) - 1)


def parse_address(name: str) -> CellAddress:
    """Like :func:`name_to_address` but raises InvalidAddressError."""
    addr = name_to_address(name)
    if addr is None:
        raise InvalidAddressError(name)
    return addr


def is_valid_name(name: str) -> bool:
    return name_to_address(name) is not None


def in_grid(name: str) -> bool:
    """True if *name* is a valid address inside the NUM_ROWS x NUM_COLS grid."""
    addr = name_to_address(name)
    return addr is not None and addr.row < NUM_ROWS and addr.col < NUM_COLS
