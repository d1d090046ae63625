"""Typer based command line entry points for sheetflow_io."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from .cell import cell_to_str
from .config import ReadPlan, load_read_plan
from .errors import SheetflowError
from .excel_reader import ExcelReader
from .utils.log import get_logger

logger = get_logger("cli")

app = typer.Typer(help="Read worksheet rows and header-keyed records as JSON lines.")


def _sheet_selector(value: Optional[str]) -> Any:
    if value is None:
        return None
    return int(value) if value.lstrip("-").isdigit() else value


def _parse_aliases(values: Optional[List[str]]) -> Dict[str, str]:
    aliases: Dict[str, str] = {}
    for item in values or []:
        header, sep, alias = item.partition("=")
        if not sep or not header:
            raise typer.BadParameter(f"alias must look like HEADER=ALIAS, got {item!r}")
        aliases[header] = alias
    return aliases


def _dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, default=cell_to_str)


@app.command("rows")
def rows_command(
    path: Path = typer.Argument(..., help="Workbook path"),
    sheet: Optional[str] = typer.Option(None, "--sheet", "-s", help="Sheet index or name"),
    start: int = typer.Option(0, "--start", help="First row index (zero-based, inclusive)"),
    end: Optional[int] = typer.Option(None, "--end", help="Last row index (inclusive)"),
    ignore_empty: bool = typer.Option(False, "--ignore-empty", help="Skip rows without cells"),
    trim: bool = typer.Option(False, "--trim", help="Trim whitespace around string cells"),
) -> None:
    """Print one JSON array per row."""

    try:
        reader = ExcelReader.from_path(path, _sheet_selector(sheet))
        rows = reader.read(start, end, options=reader.options.evolve(ignore_empty_row=ignore_empty, trim_cell_value=trim))
    except (SheetflowError, FileNotFoundError) as exc:
        logger.error("rows command failed", extra={"path": str(path), "error": str(exc)})
        typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    for row in rows:
        typer.echo(_dumps(row))


@app.command("records")
def records_command(
    path: Path = typer.Argument(..., help="Workbook path"),
    plan: Optional[Path] = typer.Option(None, "--plan", help="YAML read plan supplying defaults"),
    sheet: Optional[str] = typer.Option(None, "--sheet", "-s", help="Sheet index or name"),
    header_row: Optional[int] = typer.Option(None, "--header-row", help="Header row index"),
    start: Optional[int] = typer.Option(None, "--start", help="First data row index"),
    end: Optional[int] = typer.Option(None, "--end", help="Last data row index"),
    ignore_empty: bool = typer.Option(False, "--ignore-empty", help="Skip rows without cells"),
    trim: bool = typer.Option(False, "--trim", help="Trim whitespace around string cells"),
    alias: Optional[List[str]] = typer.Option(None, "--alias", "-a", help="Header alias HEADER=ALIAS; repeatable"),
) -> None:
    """Print one JSON object per data row keyed by (aliased) header."""

    try:
        base = load_read_plan(plan) if plan else ReadPlan()
        overrides: Dict[str, Any] = {
            "sheet": _sheet_selector(sheet),
            "header_row": header_row,
            "start_row": start,
            "end_row": end,
            "ignore_empty_row": True if ignore_empty else None,
            "trim_cell_value": True if trim else None,
        }
        merged = base.model_copy(update={k: v for k, v in overrides.items() if v is not None})
        aliases = _parse_aliases(alias)
        if aliases:
            merged = merged.model_copy(update={"header_alias": {**merged.header_alias, **aliases}})

        reader = ExcelReader.from_path(path, merged.sheet, merged.options())
        records = reader.read_keyed(merged.header_row, merged.start_row, merged.end_row)
    except (SheetflowError, FileNotFoundError) as exc:
        logger.error("records command failed", extra={"path": str(path), "error": str(exc)})
        typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    for record in records:
        typer.echo(_dumps(record))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
