from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pytest
from openpyxl import Workbook

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep test logs out of the home directory; must run before sheetflow_io is imported.
os.environ.setdefault("SHEETFLOW_LOG_DIR", tempfile.mkdtemp(prefix="sheetflow-logs-"))

from sheetflow_io.workbook import GridSheet  # noqa: E402

XlsxBuilder = Callable[..., Path]


@pytest.fixture
def people_sheet() -> GridSheet:
    return GridSheet([["Name", "Age"], ["Bob", "30"], []])


@pytest.fixture
def make_xlsx(tmp_path: Path) -> XlsxBuilder:
    """Write rows into a real workbook; ``None`` rows are left untouched."""

    def _build(
        rows: Sequence[Optional[Sequence[Any]]],
        name: str = "book.xlsx",
        title: str = "Sheet1",
        extra_sheets: Sequence[str] = (),
    ) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = title
        for row_idx, row in enumerate(rows, start=1):
            if row is None:
                continue
            for col_idx, value in enumerate(row, start=1):
                if value is not None:
                    ws.cell(row=row_idx, column=col_idx, value=value)
        for extra in extra_sheets:
            wb.create_sheet(title=extra).append(["only", extra])
        path = tmp_path / name
        wb.save(path)
        return path

    return _build
