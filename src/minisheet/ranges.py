"""Rectangular range expansion (``FROM:TO`` -> list of cell names)."""

from __future__ import annotations

from minisheet.addressing import InvalidAddressError, address_to_name, in_grid, parse_address


def expand_range(start: str, end: str) -> list[str]:
    """Expand a rectangular range (e.g. A1:C3) into a flat list of names (row-major).

    Reversed endpoints are normalised, so ``expand_range("B2", "A1")`` equals
    ``expand_range("A1", "B2")``.

    Args:
        start: One corner, e.g. "A1".
        end: The opposite corner, e.g. "C3".

    Returns:
        Flat list of cell names, outer loop rows, inner loop columns.

    Raises:
        InvalidAddressError: If either endpoint is not a cell name.
    """
    r0, c0 = parse_address(start)
    r1, c1 = parse_address(end)
    if r0 > r1:
        r0, r1 = r1, r0
    if c0 > c1:
        c0, c1 = c1, c0
    names: list[str] = []
    for r in range(r0, r1 + 1):
        for c in range(c0, c1 + 1):
            names.append(address_to_name(r, c))
    return names


def parse_range(text: str) -> list[str]:
    """Expand ``"FROM:TO"`` text naming a range inside the grid.

    Raises:
        InvalidAddressError: If *text* is not two in-grid cell names joined
            by ``:``.
    """
    parts = text.split(":")
    if len(parts) != 2 or not all(in_grid(p) for p in parts):
        raise InvalidAddressError(text)
    return expand_range(parts[0], parts[1])
