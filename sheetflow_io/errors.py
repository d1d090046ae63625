"""Custom exceptions used across sheetflow_io."""

from __future__ import annotations


class SheetflowError(Exception):
    """Base error for the package."""


class ConfigError(SheetflowError):
    """Read plan configuration could not be loaded or validated."""


class SheetNotFoundError(SheetflowError, KeyError):
    """Raised when a sheet selector matches no worksheet in the workbook."""

    def __init__(self, selector: int | str, available: list[str]) -> None:
        self.selector = selector
        self.available = available
        super().__init__(f"Sheet {selector!r} not found; available sheets: {', '.join(available) or '<none>'}")

    def __str__(self) -> str:
        return str(self.args[0])


class RowIndexOutOfRangeError(SheetflowError, IndexError):
    """Raised when a header row index lies outside the sheet's row bounds.

    Attributes:
        index: Requested header row index.
        bound: ``"first"`` or ``"last"``, the boundary that was violated.
        boundary: Value of the violated boundary.
    """

    def __init__(self, index: int, bound: str, boundary: int) -> None:
        self.index = index
        self.bound = bound
        self.boundary = boundary
        relation = "lower than first" if bound == "first" else "greater than last"
        super().__init__(f"Header row index {index} is {relation} row index {boundary}.")


class RecordConversionError(SheetflowError, ValueError):
    """Raised when a keyed record cannot populate a field of the target type.

    Attributes:
        position: Zero-based position of the record within the converted batch.
        field: Target field that failed, or ``None`` when not attributable.
        value: Offending cell value.
        target: Target type name.
    """

    def __init__(self, position: int, field: str | None, value: object, target: str, reason: str) -> None:
        self.position = position
        self.field = field
        self.value = value
        self.target = target
        self.reason = reason
        where = f"field '{field}'" if field else "record"
        super().__init__(f"Record {position} -> {target}: cannot populate {where} from {value!r}: {reason}")


__all__ = [
    "SheetflowError",
    "ConfigError",
    "SheetNotFoundError",
    "RowIndexOutOfRangeError",
    "RecordConversionError",
]
