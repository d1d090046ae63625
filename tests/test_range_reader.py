"""Unit tests for row range extraction."""

# Module responsibilities:
# - Validate clamping of requested bounds and the empty-row/trim options.
# - Assert reads are repeatable and never fail on out-of-range requests.

from __future__ import annotations

from sheetflow_io.range_reader import RangeReader, clamp_bounds, read_row
from sheetflow_io.schema import ReaderOptions
from sheetflow_io.workbook import GridSheet


def _sheet() -> GridSheet:
    return GridSheet(
        [
            ["a", 1],
            None,
            ["  x  ", 2.0],
            [],
            ["d", True],
        ]
    )


def test_clamp_bounds_respects_sheet_limits() -> None:
    sheet = GridSheet([["a"], ["b"], ["c"]], first_row_num=5)

    assert clamp_bounds(sheet, 0, None) == (5, 7)
    assert clamp_bounds(sheet, 6, 100) == (6, 7)
    assert clamp_bounds(sheet, -3, 5) == (5, 5)


def test_read_all_rows_keeps_empty_rows_by_default() -> None:
    sheet = _sheet()
    rows = RangeReader(sheet).read(0, None)

    assert len(rows) == sheet.last_row_num - sheet.first_row_num + 1
    assert rows == [["a", 1], [], ["  x  ", 2], [], ["d", True]]


def test_ignore_empty_row_drops_absent_and_cell_less_rows() -> None:
    rows = RangeReader(_sheet()).read(0, None, ReaderOptions(ignore_empty_row=True))

    assert rows == [["a", 1], ["  x  ", 2], ["d", True]]


def test_trim_only_touches_strings() -> None:
    reader = RangeReader(_sheet())

    assert reader.read(2, 2, ReaderOptions(trim_cell_value=True)) == [["x", 2]]
    assert reader.read(2, 2) == [["  x  ", 2]]


def test_start_after_end_yields_nothing() -> None:
    reader = RangeReader(_sheet())

    assert reader.read(3, 1) == []
    assert reader.read(10, None) == []
    assert reader.read(-5, -1) == []


def test_read_is_idempotent() -> None:
    reader = RangeReader(_sheet())
    options = ReaderOptions(ignore_empty_row=True, trim_cell_value=True)

    assert reader.read(0, None, options) == reader.read(0, None, options)


def test_read_row_of_absent_row_is_empty() -> None:
    assert read_row(None) == []
    assert read_row([None, " v "], trim=True) == ["", "v"]


def test_iter_rows_skips_requested_index() -> None:
    indices = [index for index, _ in RangeReader(_sheet()).iter_rows(0, None, skip=2)]

    assert indices == [0, 1, 3, 4]


def test_empty_grid_reports_single_absent_row() -> None:
    sheet = GridSheet([])

    assert RangeReader(sheet).read(0, None) == [[]]
    assert RangeReader(sheet).read(0, None, ReaderOptions(ignore_empty_row=True)) == []
