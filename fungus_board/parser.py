"""Coordinate parsing helpers for console input such as ``C4``."""
from __future__ import annotations

import re
from typing import Tuple

Coord = Tuple[int, int]

_COORD_RE = re.compile(r"^\s*([a-zA-Z]+)\s*(\d{1,3})\s*$")


class ParseError(ValueError):
    pass


def column_label(col: int) -> str:
    """Spreadsheet style column letters: A..Z, AA, AB, ..."""

    if col < 0:
        raise ValueError("Column must not be negative")
    label = ""
    col += 1
    while col:
        col, rem = divmod(col - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def _column_number(letters: str) -> int:
    value = 0
    for ch in letters.upper():
        value = value * 26 + (ord(ch) - ord("A") + 1)
    return value - 1


def parse_coord(text: str, cols: int, rows: int) -> Coord:
    """Parse ``C4`` into a zero based ``(row, col)`` on a ``cols`` x ``rows`` board."""

    if not text or not text.strip():
        raise ParseError("Empty coordinate")
    match = _COORD_RE.match(text)
    if not match:
        raise ParseError("Enter a coordinate like C4")
    letters, number = match.groups()
    col = _column_number(letters)
    row = int(number) - 1
    if not 0 <= col < cols:
        raise ParseError(f"Column must be between A and {column_label(cols - 1)}")
    if not 0 <= row < rows:
        raise ParseError(f"Row must be between 1 and {rows}")
    return row, col


def parse_index(text: str, cols: int, rows: int) -> int:
    row, col = parse_coord(text, cols, rows)
    return row * cols + col


def format_index(index: int, cols: int, rows: int) -> str:
    if cols <= 0 or not 0 <= index < cols * rows:
        raise ValueError("Index outside the board")
    row, col = divmod(index, cols)
    return f"{column_label(col)}{row + 1}"


__all__ = ["Coord", "ParseError", "column_label", "format_index", "parse_coord", "parse_index"]
