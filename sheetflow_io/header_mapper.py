"""Header aliasing and header-keyed record building."""

# Module responsibilities:
# - Validate the header row index against the sheet bounds before any extraction.
# - Substitute configured aliases for header text.
# - Zip aliased headers with each data row into an ordered dict.

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .cell import cell_to_str
from .errors import RowIndexOutOfRangeError
from .range_reader import RangeReader
from .schema import DEFAULT_OPTIONS, KeyedRecord, ReaderOptions, Sheet
from .utils.log import get_logger

logger = get_logger("header_mapper")


def alias_headers(headers: Iterable[Any], header_alias: Mapping[str, str]) -> List[str]:
    """Return display names for ``headers``, falling back to the header text."""

    result: List[str] = []
    for value in headers:
        text = cell_to_str(value)
        result.append(header_alias.get(text, text))
    return result


def zip_record(headers: Sequence[str], values: Sequence[Any]) -> KeyedRecord:
    """Pair headers with values positionally.

    Short rows leave trailing keys absent; surplus values are dropped.
    """

    return dict(zip(headers, values))


def check_header_row(sheet: Sheet, header_row: int) -> None:
    first, last = sheet.first_row_num, sheet.last_row_num
    if header_row < first:
        raise RowIndexOutOfRangeError(header_row, "first", first)
    if header_row > last:
        raise RowIndexOutOfRangeError(header_row, "last", last)


class HeaderMapper:
    """Reads header-keyed records from a sheet."""

    def __init__(self, sheet: Sheet, range_reader: Optional[RangeReader] = None) -> None:
        self.sheet = sheet
        self.range_reader = range_reader or RangeReader(sheet)

    def headers(self, header_row: int, options: ReaderOptions = DEFAULT_OPTIONS) -> List[str]:
        """Return the aliased header names of ``header_row``."""

        check_header_row(self.sheet, header_row)
        raw = self.range_reader.read_row_at(header_row, options)
        return alias_headers(raw, options.header_alias)

    def read(
        self,
        header_row: int = 0,
        start_row: int = 1,
        end_row: Optional[int] = None,
        options: ReaderOptions = DEFAULT_OPTIONS,
    ) -> List[KeyedRecord]:
        """Return one record per data row in ``[start_row, end_row]``.

        The header row is never emitted as data, even inside the range.

        Raises:
            RowIndexOutOfRangeError: ``header_row`` lies outside the sheet bounds.
        """

        try:
            headers = self.headers(header_row, options)
        except RowIndexOutOfRangeError as exc:
            logger.error(
                "Header row out of range",
                extra={"index": exc.index, "bound": exc.bound, "boundary": exc.boundary},
            )
            raise

        return [
            zip_record(headers, values)
            for _, values in self.range_reader.iter_rows(start_row, end_row, options, skip=header_row)
        ]
