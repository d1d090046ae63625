"""Workbook loading and worksheet adapters."""

# Module responsibilities:
# - Open workbooks from paths, binary streams or bytes via openpyxl.
# - Select a worksheet by zero-based index or name.
# - Adapt openpyxl worksheets and in-memory grids to the Sheet protocol.

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Sequence, Union

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import SheetNotFoundError
from .utils.log import get_logger

logger = get_logger("workbook")

SheetSelector = Union[int, str, None]
BookSource = Union[str, Path, BinaryIO, bytes]


def load_book(source: BookSource) -> Workbook:
    """Load a workbook with cached formula results instead of formulas.

    Raises:
        FileNotFoundError: When ``source`` is a path that does not exist.
    """

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Source workbook not found: {path}")
        logger.info("Loading workbook", extra={"path": str(path)})
        return load_workbook(path, data_only=True)
    if isinstance(source, bytes):
        source = BytesIO(source)
    logger.info("Loading workbook from stream")
    return load_workbook(source, data_only=True)


def get_sheet(book: Workbook, sheet: SheetSelector = None) -> Worksheet:
    """Return the worksheet selected by index or name; ``None`` selects the first."""

    names = list(book.sheetnames)
    if sheet is None:
        sheet = 0
    if isinstance(sheet, int):
        if not 0 <= sheet < len(names):
            raise SheetNotFoundError(sheet, names)
        return book.worksheets[sheet]
    if sheet not in names:
        raise SheetNotFoundError(sheet, names)
    return book[sheet]


class OpenpyxlSheet:
    """Zero-based view over an openpyxl worksheet.

    openpyxl rows are dense, so a row counts as absent when none of its
    cells holds a value, and trailing empty cells are not reported.
    """

    def __init__(self, worksheet: Worksheet) -> None:
        self.worksheet = worksheet

    @property
    def title(self) -> str:
        return self.worksheet.title

    @property
    def first_row_num(self) -> int:
        return self.worksheet.min_row - 1

    @property
    def last_row_num(self) -> int:
        return self.worksheet.max_row - 1

    def get_row(self, index: int) -> Optional[Sequence[Any]]:
        if index < 0 or index > self.last_row_num:
            return None
        cells = list(self.worksheet[index + 1])
        while cells and cells[-1].value is None:
            cells.pop()
        return cells or None


class GridSheet:
    """In-memory worksheet built from a list of rows.

    ``None`` entries model absent rows. ``first_row_num`` offsets the grid so
    that ``rows[0]`` is reported at that index.
    """

    def __init__(self, rows: Sequence[Optional[Sequence[Any]]], first_row_num: int = 0, title: str = "Sheet") -> None:
        self._rows: List[Optional[List[Any]]] = [None if row is None else list(row) for row in rows]
        self._first = first_row_num
        self.title = title

    @property
    def first_row_num(self) -> int:
        return self._first

    @property
    def last_row_num(self) -> int:
        if not self._rows:
            return self._first
        return self._first + len(self._rows) - 1

    def get_row(self, index: int) -> Optional[Sequence[Any]]:
        offset = index - self._first
        if offset < 0 or offset >= len(self._rows):
            return None
        return self._rows[offset]


def open_sheet(source: Union[BookSource, Workbook], sheet: SheetSelector = None) -> OpenpyxlSheet:
    """Load ``source`` if needed and return the selected worksheet adapter."""

    book = source if isinstance(source, Workbook) else load_book(source)
    return OpenpyxlSheet(get_sheet(book, sheet))
