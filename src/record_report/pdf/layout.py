"""
Text Measurement
=================
Word-wrapping and height measurement of cell text with ReportLab font metrics.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from reportlab.pdfbase.pdfmetrics import stringWidth

from ..config import TableStyle


def wrap_text(text: str, font: str, size: float, max_width: float) -> list[str]:
    """
    Break ``text`` into lines no wider than ``max_width``.

    Explicit newlines start a new line; words wider than the column are broken
    between characters. The empty string has no lines.
    """
    if not text:
        return []
    lines: list[str] = []
    for paragraph in text.split("\n"):
        lines.extend(_wrap_paragraph(paragraph, font, size, max_width))
    return lines


def _wrap_paragraph(paragraph: str, font: str, size: float, max_width: float) -> list[str]:
    words = paragraph.split()
    if not words:
        return [""]

    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if stringWidth(candidate, font, size) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        pieces = _break_word(word, font, size, max_width)
        lines.extend(pieces[:-1])
        current = pieces[-1]

    if current:
        lines.append(current)
    return lines


def _break_word(word: str, font: str, size: float, max_width: float) -> list[str]:
    pieces: list[str] = []
    current = ""
    for char in word:
        if current and stringWidth(current + char, font, size) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    pieces.append(current)
    return pieces


def text_height(text: str, width: float, style: TableStyle) -> float:
    """Height of ``text`` wrapped at ``width`` in the body font."""
    return len(wrap_text(text, style.body_font, style.body_size, width)) * style.leading


def row_height(cells: Sequence[str], column_width: float, style: TableStyle) -> float:
    """
    Height of a table row: the tallest wrapped cell plus the vertical insets,
    rounded up. Rows whose cells are all empty get ``style.min_row_height``.
    """
    text_width = column_width - 2 * style.cell_inset
    tallest = max((text_height(cell, text_width, style) for cell in cells), default=0.0)
    if tallest <= 0:
        return style.min_row_height
    return float(math.ceil(tallest + 2 * style.cell_inset))
