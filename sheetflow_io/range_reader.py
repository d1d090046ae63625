"""Row range extraction."""

# Module responsibilities:
# - Clamp requested row bounds to the sheet's actual first/last rows.
# - Extract each row's cell values in column order, honouring trim/empty-row options.

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .cell import get_cell_value
from .schema import DEFAULT_OPTIONS, RawRow, ReaderOptions, Sheet


def clamp_bounds(sheet: Sheet, start_row: int, end_row: Optional[int]) -> Tuple[int, int]:
    """Constrain ``[start_row, end_row]`` to the sheet bounds; ``None`` means no upper bound."""

    start = max(start_row, sheet.first_row_num)
    last = sheet.last_row_num
    end = last if end_row is None else min(end_row, last)
    return start, end


def read_row(row: Optional[Sequence[Any]], trim: bool = False) -> RawRow:
    """Extract the values of ``row``; an absent row yields an empty list."""

    if row is None:
        return []
    return [get_cell_value(cell, trim) for cell in row]


class RangeReader:
    """Reads positional rows from a sheet."""

    def __init__(self, sheet: Sheet) -> None:
        self.sheet = sheet

    def read_row_at(self, index: int, options: ReaderOptions = DEFAULT_OPTIONS) -> RawRow:
        return read_row(self.sheet.get_row(index), options.trim_cell_value)

    def iter_rows(
        self,
        start_row: int,
        end_row: Optional[int],
        options: ReaderOptions = DEFAULT_OPTIONS,
        skip: Optional[int] = None,
    ) -> Iterator[Tuple[int, RawRow]]:
        """Yield ``(index, raw_row)`` pairs for the clamped range.

        Args:
            start_row: First row index (inclusive).
            end_row: Last row index (inclusive), ``None`` for the sheet's last row.
            options: Read options.
            skip: Optional row index to leave out, used for header rows.
        """

        start, end = clamp_bounds(self.sheet, start_row, end_row)
        for index in range(start, end + 1):
            if index == skip:
                continue
            values = self.read_row_at(index, options)
            if not values and options.ignore_empty_row:
                continue
            yield index, values

    def read(self, start_row: int = 0, end_row: Optional[int] = None, options: ReaderOptions = DEFAULT_OPTIONS) -> List[RawRow]:
        """Return raw rows for ``[start_row, end_row]`` after clamping."""

        return [values for _, values in self.iter_rows(start_row, end_row, options)]
