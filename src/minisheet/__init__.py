"""minisheet -- a small spreadsheet formula engine.

Public API::

    from minisheet import Sheet
"""

__version__ = "0.1.0"

from minisheet.addressing import (
    NUM_COLS,
    NUM_ROWS,
    CellAddress,
    InvalidAddressError,
    address_to_name,
    decode_column,
    encode_column,
    name_to_address,
)
from minisheet.cells import Cell
from minisheet.formulas import CellCycleError, Formula, Op, parse_formula
from minisheet.ranges import expand_range
from minisheet.sheet import Sheet

__all__ = [
    "NUM_COLS",
    "NUM_ROWS",
    "Cell",
    "CellAddress",
    "CellCycleError",
    "Formula",
    "InvalidAddressError",
    "Op",
    "Sheet",
    "__version__",
    "address_to_name",
    "decode_column",
    "encode_column",
    "expand_range",
    "name_to_address",
    "parse_formula",
]
