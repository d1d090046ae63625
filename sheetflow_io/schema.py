"""Shared schemas for worksheet reading."""

# Module responsibilities:
# - Describe the worksheet contract the readers consume.
# - Provide the immutable option container applied to each read call.

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

RawRow = List[Any]
KeyedRecord = Dict[str, Any]
HeaderAliasMap = Mapping[str, str]


@runtime_checkable
class Sheet(Protocol):
    """Worksheet contract: zero-based, inclusive row bounds and row lookup."""

    @property
    def first_row_num(self) -> int: ...

    @property
    def last_row_num(self) -> int: ...

    def get_row(self, index: int) -> Optional[Sequence[Any]]:
        """Return the cells of row ``index`` or ``None`` when the row is absent."""


@dataclass(frozen=True)
class ReaderOptions:
    """Options applied uniformly to every row of a single read."""

    ignore_empty_row: bool = False
    trim_cell_value: bool = False
    header_alias: HeaderAliasMap = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only private copy of the caller mapping.
        object.__setattr__(self, "header_alias", MappingProxyType(dict(self.header_alias)))

    def __hash__(self) -> int:
        return hash((self.ignore_empty_row, self.trim_cell_value, frozenset(self.header_alias.items())))

    def evolve(self, **changes: Any) -> "ReaderOptions":
        """Return a copy with ``changes`` applied."""

        return replace(self, **changes)


DEFAULT_OPTIONS = ReaderOptions()
