"""Cell value extraction and display stringification."""

# Module responsibilities:
# - Convert a single worksheet cell into a native Python value.
# - Render any extracted value as deterministic text for header keys and CLI output.

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from openpyxl.cell.cell import Cell, MergedCell

BLANK = ""


def _raw_value(cell: Any) -> Any:
    if isinstance(cell, (Cell, MergedCell)):
        return cell.value
    return cell


def get_cell_value(cell: Any, trim: bool = False) -> Any:
    """Extract the value of ``cell``.

    Args:
        cell: An openpyxl cell or a plain value from an in-memory grid.
        trim: Strip surrounding whitespace from string values.

    Returns:
        ``str``, ``int``, ``float``, ``Decimal``, ``bool``, ``datetime``,
        ``date``, ``time`` or :data:`BLANK` for an empty cell. Integral floats
        are returned as ``int``.
    """

    value = _raw_value(cell)
    if value is None:
        return BLANK
    if isinstance(value, str):
        return value.strip() if trim else value
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, float, Decimal, datetime, date, time)):
        return value
    # Rich text and other wrappers expose their text through str().
    text = str(value)
    return text.strip() if trim else text


def cell_to_str(value: Any) -> str:
    """Render an extracted value as text."""

    if value is None:
        return BLANK
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        if value.microsecond:
            return value.isoformat(sep=" ")
        return value.isoformat(sep=" ", timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")
