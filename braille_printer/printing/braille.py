"""
Language dispatch for braille encoders.

Every encoder is a pure function `text -> (encoded, cell_count)`.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from . import braille_en, braille_ko

Encoder = Callable[[str], Tuple[str, int]]

DEFAULT_LANG = "ko"

ENCODERS: Dict[str, Encoder] = {
    "ko": braille_ko.encode,
    "en": braille_en.encode,
}


class UnsupportedLanguage(ValueError):
    def __init__(self, lang: str):
        super().__init__(f"unsupported lang: {lang!r}")
        self.lang = lang


def supported_languages() -> Tuple[str, ...]:
    return tuple(sorted(ENCODERS))


def encode(text: str, lang: str) -> Tuple[str, int]:
    """
    Encode `text` with the encoder registered for `lang`.
    Raises UnsupportedLanguage for unknown languages.
    """
    try:
        encoder = ENCODERS[lang]
    except KeyError:
        raise UnsupportedLanguage(lang) from None
    return encoder(text)


__all__ = ["DEFAULT_LANG", "ENCODERS", "Encoder", "UnsupportedLanguage", "encode", "supported_languages"]
