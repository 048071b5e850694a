"""
Braille cell helpers.

Cells are Unicode braille patterns (U+2800..U+28FF). Dot n (1..6) maps to bit n-1
of the offset from U+2800, so a cell string doubles as a dot bitmap.
"""

from __future__ import annotations

from typing import Tuple

BRAILLE_BASE = 0x2800
BLANK = chr(BRAILLE_BASE)


def cell(*dots: int) -> str:
    """Build a cell from dot numbers, e.g. cell(1, 2) -> '⠃'."""
    mask = 0
    for d in dots:
        if not 1 <= d <= 8:
            raise ValueError(f"invalid braille dot {d}")
        mask |= 1 << (d - 1)
    return chr(BRAILLE_BASE + mask)


def is_cell(ch: str) -> bool:
    return BRAILLE_BASE <= ord(ch) <= BRAILLE_BASE + 0xFF


def dots_of(ch: str) -> Tuple[int, ...]:
    """Raised dots of a cell, ascending."""
    if not is_cell(ch):
        raise ValueError(f"not a braille cell: {ch!r}")
    mask = ord(ch) - BRAILLE_BASE
    return tuple(d for d in range(1, 9) if mask & (1 << (d - 1)))


def count_cells(encoded: str) -> int:
    return sum(1 for ch in encoded if is_cell(ch))


__all__ = ["BLANK", "BRAILLE_BASE", "cell", "count_cells", "dots_of", "is_cell"]
