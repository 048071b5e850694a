"""
Braille rendering for Braille Printer.

- render_svg(): vector image of the encoded cells, stored with each queue record
- render_png_image(): grayscale Pillow image for raster devices and previews

Each cell is a 2x3 grid of dot positions:

    1 4
    2 5
    3 6

Raised dots are filled; flat positions are drawn as faint outlines in the SVG
and omitted from the raster image.
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

from .cells import dots_of, is_cell

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

# SVG geometry in user units
DOT_RADIUS = 4
DOT_SPACING = 12
CELL_PITCH = 24
LINE_PITCH = 48
MARGIN = 12

# dot number -> (column, row)
_DOT_POSITIONS = {1: (0, 0), 2: (0, 1), 3: (0, 2), 4: (1, 0), 5: (1, 1), 6: (1, 2), 7: (0, 3), 8: (1, 3)}


def _lines(encoded: str) -> List[str]:
    return [
        "".join(ch for ch in line if is_cell(ch))
        for line in encoded.split("\n")
    ]


def _dot_centers(col: int, row: int, cell_pitch: int, line_pitch: int, spacing: int, margin: int, dot: int) -> Tuple[int, int]:
    dx, dy = _DOT_POSITIONS[dot]
    x = margin + col * cell_pitch + dx * spacing + spacing // 2
    y = margin + row * line_pitch + dy * spacing + spacing // 2
    return x, y


def render_svg(encoded: str, length: int, canvas_size: int = 240) -> bytes:
    """
    Draw `encoded` as an SVG document.

    Args:
        encoded: Braille cell string; newlines start a new row of cells.
        length: Cell count reported by the encoder. Sizes the canvas when the
            encoding is empty and is recorded on the root element.
        canvas_size: Minimum canvas width; the canvas grows to fit the widest row.

    Returns:
        UTF-8 encoded SVG bytes.
    """
    lines = _lines(encoded)
    widest = max((len(line) for line in lines), default=0) or length
    if encoded and sum(len(line) for line in lines) != length:
        logger.warning("Encoder reported %d cells but %d were found", length, sum(len(l) for l in lines))

    width = max(canvas_size, 2 * MARGIN + widest * CELL_PITCH)
    height = 2 * MARGIN + max(1, len(lines)) * LINE_PITCH

    ET.register_namespace("", SVG_NS)
    root = ET.Element(
        f"{{{SVG_NS}}}svg",
        {
            "width": str(width),
            "height": str(height),
            "viewBox": f"0 0 {width} {height}",
            "data-cells": str(length),
        },
    )
    ET.SubElement(root, f"{{{SVG_NS}}}rect", {"width": "100%", "height": "100%", "fill": "white"})

    for row, line in enumerate(lines):
        for col, ch in enumerate(line):
            raised = set(dots_of(ch))
            group = ET.SubElement(root, f"{{{SVG_NS}}}g", {"class": "cell"})
            for dot in range(1, 7):
                cx, cy = _dot_centers(col, row, CELL_PITCH, LINE_PITCH, DOT_SPACING, MARGIN, dot)
                attrs = {"cx": str(cx), "cy": str(cy), "r": str(DOT_RADIUS)}
                if dot in raised:
                    attrs.update({"class": "on", "fill": "black"})
                else:
                    attrs.update({"class": "off", "fill": "none", "stroke": "#cccccc"})
                ET.SubElement(group, f"{{{SVG_NS}}}circle", attrs)

    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def render_png_image(encoded: str, config: Optional[Mapping[str, object]] = None) -> Image.Image:
    """
    Render `encoded` into a grayscale Pillow Image (black=0, white=255).

    Config keys used (with defaults):
      - receipt_width: int (default 512)
      - dot_radius: int (default 6)
      - print_margin: int (default 16)

    Rows longer than the receipt width wrap onto the next row.
    """
    cfg = config or {}
    width = int(cfg.get("receipt_width", 512))  # type: ignore[arg-type]
    radius = int(cfg.get("dot_radius", 6))  # type: ignore[arg-type]
    margin = int(cfg.get("print_margin", 16))  # type: ignore[arg-type]

    spacing = radius * 3
    cell_pitch = spacing * 2 + radius * 2
    line_pitch = spacing * 3 + radius * 4
    per_row = max(1, (width - 2 * margin) // cell_pitch)

    rows: List[str] = []
    for line in _lines(encoded):
        if not line:
            rows.append("")
            continue
        rows.extend(line[i : i + per_row] for i in range(0, len(line), per_row))

    height = 2 * margin + max(1, len(rows)) * line_pitch
    img = Image.new("L", (width, height), 255)
    draw = ImageDraw.Draw(img)
    for row, line in enumerate(rows):
        for col, ch in enumerate(line):
            for dot in dots_of(ch):
                cx, cy = _dot_centers(col, row, cell_pitch, line_pitch, spacing, margin, dot)
                draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=0)
    return img


def render_png(encoded: str, config: Optional[Mapping[str, object]] = None) -> bytes:
    """PNG bytes of render_png_image()."""
    buf = io.BytesIO()
    render_png_image(encoded, config).save(buf, format="PNG")
    return buf.getvalue()


__all__ = ["render_png", "render_png_image", "render_svg"]
