"""
Braille subsystem for Braille Printer.

- braille: language dispatch over the Korean and English encoders
- render: SVG and raster rendering of encoded cells
"""

from .braille import DEFAULT_LANG, UnsupportedLanguage, encode, supported_languages
from .render import render_png, render_png_image, render_svg

__all__ = [
    "DEFAULT_LANG",
    "UnsupportedLanguage",
    "encode",
    "render_png",
    "render_png_image",
    "render_svg",
    "supported_languages",
]
