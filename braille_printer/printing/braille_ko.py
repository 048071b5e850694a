"""
Korean braille (uncontracted).

Precomposed Hangul syllables are decomposed into initial, medial and final jamo
and each jamo is written with its positional cell(s). The silent initial ㅇ is
omitted. Standalone compatibility jamo such as "ㄱ" or "ㅏ" are written after
the jamo indicator. Runs of Latin letters are wrapped in roman indicators and
written with the English cells; digits use the number sign.
"""

from __future__ import annotations

from typing import List, Tuple

from . import braille_en
from .cells import BLANK, cell, count_cells

HANGUL_FIRST = 0xAC00
HANGUL_LAST = 0xD7A3

# ㄱ ㄲ ㄴ ㄷ ㄸ ㄹ ㅁ ㅂ ㅃ ㅅ ㅆ ㅇ ㅈ ㅉ ㅊ ㅋ ㅌ ㅍ ㅎ
_TENSE = cell(6)
INITIALS: Tuple[str, ...] = (
    cell(4),
    _TENSE + cell(4),
    cell(1, 4),
    cell(2, 4),
    _TENSE + cell(2, 4),
    cell(5),
    cell(1, 5),
    cell(4, 5),
    _TENSE + cell(4, 5),
    cell(6),
    _TENSE + cell(6),
    "",
    cell(4, 6),
    _TENSE + cell(4, 6),
    cell(5, 6),
    cell(1, 2, 4),
    cell(1, 2, 5),
    cell(1, 4, 5),
    cell(2, 4, 5),
)

# ㅏ ㅐ ㅑ ㅒ ㅓ ㅔ ㅕ ㅖ ㅗ ㅘ ㅙ ㅚ ㅛ ㅜ ㅝ ㅞ ㅟ ㅠ ㅡ ㅢ ㅣ
_AE = cell(1, 2, 3, 5)
MEDIALS: Tuple[str, ...] = (
    cell(1, 2, 6),
    _AE,
    cell(3, 4, 5),
    cell(3, 4, 5) + _AE,
    cell(2, 3, 4),
    cell(1, 3, 4, 5),
    cell(1, 5, 6),
    cell(3, 4),
    cell(1, 3, 6),
    cell(1, 2, 3, 6),
    cell(1, 2, 3, 6) + _AE,
    cell(1, 3, 4, 5, 6),
    cell(3, 4, 6),
    cell(1, 3, 4),
    cell(1, 2, 3, 4),
    cell(1, 2, 3, 4) + _AE,
    cell(1, 3, 4) + _AE,
    cell(1, 4, 6),
    cell(2, 4, 6),
    cell(2, 4, 5, 6),
    cell(1, 3, 5),
)

# (none) ㄱ ㄲ ㄳ ㄴ ㄵ ㄶ ㄷ ㄹ ㄺ ㄻ ㄼ ㄽ ㄾ ㄿ ㅀ ㅁ ㅂ ㅄ ㅅ ㅆ ㅇ ㅈ ㅊ ㅋ ㅌ ㅍ ㅎ
_K, _N, _L, _B, _S = cell(1), cell(2, 5), cell(2), cell(1, 2), cell(3)
FINALS: Tuple[str, ...] = (
    "",
    _K,
    _K + _K,
    _K + _S,
    _N,
    _N + cell(1, 3),
    _N + cell(3, 5, 6),
    cell(3, 5),
    _L,
    _L + _K,
    _L + cell(2, 6),
    _L + _B,
    _L + _S,
    _L + cell(2, 3, 6),
    _L + cell(2, 5, 6),
    _L + cell(3, 5, 6),
    cell(2, 6),
    _B,
    _B + _S,
    _S,
    cell(3, 4),
    cell(2, 3, 5, 6),
    cell(1, 3),
    cell(2, 3),
    cell(2, 3, 5),
    cell(2, 3, 6),
    cell(2, 5, 6),
    cell(3, 5, 6),
)

# A syllable 애 right after an open ㅑ/ㅘ/ㅜ/ㅝ syllable needs a separator,
# otherwise the two vowels read as a single compound vowel.
VOWEL_SEPARATOR = cell(3, 6)
_SEPARATE_BEFORE_AE = {2, 9, 13, 14}
_MEDIAL_AE = 1
_INITIAL_IEUNG = 11

# Standalone jamo (U+3131..U+3163) are preceded by the full cell; consonants
# take their final form, or the initial form when they have none.
JAMO_INDICATOR = cell(1, 2, 3, 4, 5, 6)
_INITIAL_ORDER = "ㄱㄲㄴㄷㄸㄹㅁㅂㅃㅅㅆㅇㅈㅉㅊㅋㅌㅍㅎ"
_FINAL_ORDER = " ㄱㄲㄳㄴㄵㄶㄷㄹㄺㄻㄼㄽㄾㄿㅀㅁㅂㅄㅅㅆㅇㅈㅊㅋㅌㅍㅎ"
_VOWEL_ORDER = "ㅏㅐㅑㅒㅓㅔㅕㅖㅗㅘㅙㅚㅛㅜㅝㅞㅟㅠㅡㅢㅣ"

ROMAN_OPEN = cell(3, 5, 6)
ROMAN_CLOSE = cell(2, 5, 6)

PUNCTUATION = {
    ",": cell(5),
    ".": cell(2, 5, 6),
    "?": cell(2, 3, 6),
    "!": cell(2, 3, 5),
}


def decompose(ch: str) -> Tuple[int, int, int]:
    """Split a precomposed syllable into (initial, medial, final) indexes."""
    code = ord(ch) - HANGUL_FIRST
    if not 0 <= code <= HANGUL_LAST - HANGUL_FIRST:
        raise ValueError(f"not a Hangul syllable: {ch!r}")
    return code // 588, (code % 588) // 28, code % 28


def _is_syllable(ch: str) -> bool:
    return HANGUL_FIRST <= ord(ch) <= HANGUL_LAST


def jamo_cells(ch: str) -> str:
    """Cells for a standalone compatibility jamo, or "" if `ch` is not one."""
    if ch in _VOWEL_ORDER:
        return JAMO_INDICATOR + MEDIALS[_VOWEL_ORDER.index(ch)]
    if ch != " " and ch in _FINAL_ORDER:
        return JAMO_INDICATOR + FINALS[_FINAL_ORDER.index(ch)]
    if ch in _INITIAL_ORDER:
        return JAMO_INDICATOR + INITIALS[_INITIAL_ORDER.index(ch)]
    return ""


def _encode_foreign(run: str) -> str:
    encoded, _ = braille_en.encode(run, punctuation=PUNCTUATION)
    if any(c.isascii() and c.isalpha() for c in run):
        return ROMAN_OPEN + encoded + ROMAN_CLOSE
    return encoded


def encode(text: str) -> Tuple[str, int]:
    """
    Transliterate `text` to Korean braille.

    Returns:
        (encoded, cell_count) where newlines are not counted as cells.
    """
    out: List[str] = []
    pending: List[str] = []
    prev_open_medial = None

    def flush() -> None:
        if pending:
            out.append(_encode_foreign("".join(pending)))
            pending.clear()

    for ch in text:
        if _is_syllable(ch):
            flush()
            initial, medial, final = decompose(ch)
            if (
                initial == _INITIAL_IEUNG
                and medial == _MEDIAL_AE
                and prev_open_medial in _SEPARATE_BEFORE_AE
            ):
                out.append(VOWEL_SEPARATOR)
            out.append(INITIALS[initial] + MEDIALS[medial] + FINALS[final])
            prev_open_medial = medial if final == 0 else None
            continue

        prev_open_medial = None
        jamo = jamo_cells(ch)
        if jamo:
            flush()
            out.append(jamo)
        elif ch == "\n":
            flush()
            out.append("\n")
        elif ch in " \t":
            flush()
            out.append(BLANK)
        else:
            pending.append(ch)
    flush()

    encoded = "".join(out)
    return encoded, count_cells(encoded)


__all__ = ["FINALS", "INITIALS", "JAMO_INDICATOR", "MEDIALS", "decompose", "encode", "jamo_cells"]
