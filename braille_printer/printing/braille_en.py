"""
English grade-1 (uncontracted) braille.

Letters, digits with the number sign, the capital sign, and common punctuation.
Spaces become blank cells; newlines are kept so multi-line input stays multi-line.
Characters without a mapping are dropped.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from .cells import BLANK, cell, count_cells

logger = logging.getLogger(__name__)

LETTERS: Dict[str, str] = {
    "a": cell(1),
    "b": cell(1, 2),
    "c": cell(1, 4),
    "d": cell(1, 4, 5),
    "e": cell(1, 5),
    "f": cell(1, 2, 4),
    "g": cell(1, 2, 4, 5),
    "h": cell(1, 2, 5),
    "i": cell(2, 4),
    "j": cell(2, 4, 5),
    "k": cell(1, 3),
    "l": cell(1, 2, 3),
    "m": cell(1, 3, 4),
    "n": cell(1, 3, 4, 5),
    "o": cell(1, 3, 5),
    "p": cell(1, 2, 3, 4),
    "q": cell(1, 2, 3, 4, 5),
    "r": cell(1, 2, 3, 5),
    "s": cell(2, 3, 4),
    "t": cell(2, 3, 4, 5),
    "u": cell(1, 3, 6),
    "v": cell(1, 2, 3, 6),
    "w": cell(2, 4, 5, 6),
    "x": cell(1, 3, 4, 6),
    "y": cell(1, 3, 4, 5, 6),
    "z": cell(1, 3, 5, 6),
}

# Digits reuse the a-j cells after a number sign.
DIGITS: Dict[str, str] = {d: LETTERS[l] for d, l in zip("1234567890", "abcdefghij")}

CAPITAL_SIGN = cell(6)
NUMBER_SIGN = cell(3, 4, 5, 6)
LETTER_SIGN = cell(5, 6)
OPEN_QUOTE = cell(2, 3, 6)
CLOSE_QUOTE = cell(3, 5, 6)

PUNCTUATION: Dict[str, str] = {
    ",": cell(2),
    ";": cell(2, 3),
    ":": cell(2, 5),
    ".": cell(2, 5, 6),
    "!": cell(2, 3, 5),
    "?": cell(2, 3, 6),
    "'": cell(3),
    "-": cell(3, 6),
    "(": cell(2, 3, 5, 6),
    ")": cell(2, 3, 5, 6),
    "/": cell(3, 4),
}


def encode(text: str, punctuation: Optional[Mapping[str, str]] = None) -> Tuple[str, int]:
    """
    Transliterate `text` to English grade-1 braille.

    Args:
        text: Source text.
        punctuation: Optional overrides for the punctuation table (used by other
            languages that share the Latin alphabet cells).

    Returns:
        (encoded, cell_count) where newlines are not counted as cells.
    """
    table = dict(PUNCTUATION)
    if punctuation:
        table.update(punctuation)

    out: List[str] = []
    numeric = False
    quote_open = False

    for i, ch in enumerate(text):
        if ch == "\n":
            out.append("\n")
            numeric = False
            continue
        if ch in " \t\r":
            if ch != "\r":
                out.append(BLANK)
            numeric = False
            continue
        if ch in DIGITS:
            if not numeric:
                out.append(NUMBER_SIGN)
                numeric = True
            out.append(DIGITS[ch])
            continue
        # 3.14 and 1,000 stay in numeric mode
        if numeric and ch in ".," and text[i + 1 : i + 2] in DIGITS:
            out.append(table[ch])
            continue

        after_number = numeric
        numeric = False

        lower = ch.lower()
        if lower in LETTERS:
            if ch != lower:
                out.append(CAPITAL_SIGN)
            elif after_number and lower in "abcdefghij":
                out.append(LETTER_SIGN)
            out.append(LETTERS[lower])
        elif ch == '"':
            out.append(CLOSE_QUOTE if quote_open else OPEN_QUOTE)
            quote_open = not quote_open
        elif ch in table:
            out.append(table[ch])
        else:
            logger.debug("No braille mapping for %r; skipped", ch)

    encoded = "".join(out)
    return encoded, count_cells(encoded)


__all__ = ["CAPITAL_SIGN", "DIGITS", "LETTERS", "NUMBER_SIGN", "PUNCTUATION", "encode"]
