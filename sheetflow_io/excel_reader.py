"""Excel input helpers."""

# Module responsibilities:
# - Bind the range, header and record readers to one worksheet behind a single facade.
# - Carry immutable read options, overridable per call.
# - Offer pandas DataFrame views and the path-based read_table() helper.

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Iterable, List, Optional, Union

import pandas as pd
from openpyxl import Workbook

from .header_mapper import HeaderMapper
from .range_reader import RangeReader
from .record_converter import RecordConverter
from .schema import DEFAULT_OPTIONS, HeaderAliasMap, KeyedRecord, RawRow, ReaderOptions, Sheet
from .utils.log import get_logger
from .workbook import SheetSelector, load_book, open_sheet

logger = get_logger("excel_reader")


class ExcelReader:
    """Reads rows, keyed records or typed records from one worksheet.

    Row indices are zero-based and bounds are inclusive; ``end_row=None``
    reads to the sheet's last row. The reader never mutates itself, so one
    instance can serve concurrent reads; use :meth:`with_options` or the
    per-call ``options`` argument for different settings.
    """

    def __init__(self, sheet: Sheet, options: ReaderOptions = DEFAULT_OPTIONS) -> None:
        self.sheet = sheet
        self.options = options
        self._range_reader = RangeReader(sheet)
        self._header_mapper = HeaderMapper(sheet, self._range_reader)
        self._converter = RecordConverter(self._header_mapper)

    @classmethod
    def from_path(cls, path: Union[str, Path], sheet: SheetSelector = 0, options: ReaderOptions = DEFAULT_OPTIONS) -> "ExcelReader":
        """Open the workbook at ``path`` and read ``sheet`` (index or name)."""

        return cls(open_sheet(Path(path), sheet), options)

    @classmethod
    def from_stream(cls, stream: Union[BinaryIO, bytes], sheet: SheetSelector = 0, options: ReaderOptions = DEFAULT_OPTIONS) -> "ExcelReader":
        """Open a workbook from a binary stream or raw bytes."""

        return cls(open_sheet(load_book(stream), sheet), options)

    @classmethod
    def from_workbook(cls, book: Workbook, sheet: SheetSelector = 0, options: ReaderOptions = DEFAULT_OPTIONS) -> "ExcelReader":
        return cls(open_sheet(book, sheet), options)

    @property
    def ignore_empty_row(self) -> bool:
        return self.options.ignore_empty_row

    @property
    def trim_cell_value(self) -> bool:
        return self.options.trim_cell_value

    @property
    def header_alias(self) -> HeaderAliasMap:
        return self.options.header_alias

    def with_options(self, **changes: Any) -> "ExcelReader":
        """Return a reader over the same sheet with ``changes`` applied to its options."""

        return ExcelReader(self.sheet, self.options.evolve(**changes))

    def _resolve(self, options: Optional[ReaderOptions]) -> ReaderOptions:
        return self.options if options is None else options

    def read(self, start_row: int = 0, end_row: Optional[int] = None, *, options: Optional[ReaderOptions] = None) -> List[RawRow]:
        """Return positional rows in ``[start_row, end_row]``."""

        rows = self._range_reader.read(start_row, end_row, self._resolve(options))
        logger.info("Rows read", extra={"start_row": start_row, "end_row": end_row, "rows": len(rows)})
        return rows

    def read_keyed(
        self,
        header_row: int = 0,
        start_row: int = 1,
        end_row: Optional[int] = None,
        *,
        options: Optional[ReaderOptions] = None,
    ) -> List[KeyedRecord]:
        """Return header-keyed records; the header row is never emitted as data.

        Raises:
            RowIndexOutOfRangeError: ``header_row`` lies outside the sheet bounds.
        """

        records = self._header_mapper.read(header_row, start_row, end_row, self._resolve(options))
        logger.info(
            "Keyed records read",
            extra={"header_row": header_row, "start_row": start_row, "end_row": end_row, "rows": len(records)},
        )
        return records

    def read_records(
        self,
        header_row: int,
        start_row: int,
        end_row: Optional[int],
        target: Any,
        *,
        options: Optional[ReaderOptions] = None,
    ) -> List[Any]:
        """Return records converted to ``target`` (mapping type, dataclass or pydantic model).

        Raises:
            RowIndexOutOfRangeError: ``header_row`` lies outside the sheet bounds.
            RecordConversionError: A record cannot populate ``target``; nothing is returned.
            TypeError: ``target`` is not a supported record type.
        """

        return self._converter.to_records(header_row, start_row, end_row, target, self._resolve(options))

    def headers(self, header_row: int = 0, *, options: Optional[ReaderOptions] = None) -> List[str]:
        """Return the aliased header names found in ``header_row``."""

        return self._header_mapper.headers(header_row, self._resolve(options))

    def read_frame(
        self,
        header_row: int = 0,
        start_row: int = 1,
        end_row: Optional[int] = None,
        *,
        options: Optional[ReaderOptions] = None,
    ) -> pd.DataFrame:
        """Return keyed records as a DataFrame with columns in header order."""

        resolved = self._resolve(options)
        records = self.read_keyed(header_row, start_row, end_row, options=resolved)
        columns = list(dict.fromkeys(self.headers(header_row, options=resolved)))
        return pd.DataFrame.from_records(records, columns=columns)

    def read_all(self, *, options: Optional[ReaderOptions] = None) -> List[RawRow]:
        return self.read(0, None, options=options)

    def read_all_keyed(self, *, options: Optional[ReaderOptions] = None) -> List[KeyedRecord]:
        """Row 0 is the header; data starts at row 1."""

        return self.read_keyed(0, 1, None, options=options)

    def read_all_as(self, target: Any, *, options: Optional[ReaderOptions] = None) -> List[Any]:
        return self.read_records(0, 1, None, target, options=options)


def read_table(
    path: Path,
    sheet: SheetSelector = None,
    usecols: Optional[Iterable[str]] = None,
    *,
    options: Optional[ReaderOptions] = None,
) -> pd.DataFrame:
    """Load a DataFrame from an Excel workbook, first row as header.

    Args:
        path: Path to the workbook.
        sheet: Sheet name or index; defaults to the first sheet.
        usecols: Optional iterable of columns to include.
        options: Read options (trimming, empty rows, header aliases); defaults
            to :data:`DEFAULT_OPTIONS`.

    Returns:
        DataFrame containing the requested data.

    Raises:
        FileNotFoundError: When the Excel file does not exist.
        ValueError: When a requested column is not present in the header row.
    """

    path = Path(path)
    logger.info("Reading Excel workbook", extra={"path": str(path), "sheet": sheet})

    df = ExcelReader.from_path(path, sheet, options if options is not None else DEFAULT_OPTIONS).read_frame()

    if usecols:
        wanted = list(usecols)
        missing = [col for col in wanted if col not in df.columns]
        if missing:
            logger.error("Requested columns missing", extra={"missing": missing})
            raise ValueError(f"Columns not found in sheet: {', '.join(missing)}")
        df = df[wanted]

    logger.info(
        "Excel workbook loaded",
        extra={"rows": len(df.index), "columns": df.columns.tolist()},
    )
    return df
