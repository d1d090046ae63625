"""`sheetflow_io` top-level package exports the worksheet reading helpers."""

# Module responsibilities:
# - Re-export the reader facade, its components and option/error types so consumers have a stable API surface.
# - Provide package version for packaging.

from __future__ import annotations

from .cell import cell_to_str, get_cell_value
from .config import ReadPlan, load_read_plan
from .errors import (
    ConfigError,
    RecordConversionError,
    RowIndexOutOfRangeError,
    SheetflowError,
    SheetNotFoundError,
)
from .excel_reader import ExcelReader, read_table
from .header_mapper import HeaderMapper
from .range_reader import RangeReader
from .record_converter import RecordConverter, header_field
from .schema import ReaderOptions, Sheet
from .workbook import GridSheet, OpenpyxlSheet, load_book

__all__ = [
    "ExcelReader",
    "read_table",
    "RangeReader",
    "HeaderMapper",
    "RecordConverter",
    "header_field",
    "ReaderOptions",
    "Sheet",
    "GridSheet",
    "OpenpyxlSheet",
    "load_book",
    "get_cell_value",
    "cell_to_str",
    "ReadPlan",
    "load_read_plan",
    "SheetflowError",
    "ConfigError",
    "SheetNotFoundError",
    "RowIndexOutOfRangeError",
    "RecordConversionError",
]

__version__ = "0.1.0"
