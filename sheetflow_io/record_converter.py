"""Conversion of header-keyed records into typed records."""

# Module responsibilities:
# - Build an explicit, cached field schema per target type (dataclass or pydantic model).
# - Match record keys to fields: declared header, then exact name, then normalized name.
# - Validate matched values through a pydantic TypeAdapter and fail the batch on the first bad record.

from __future__ import annotations

import dataclasses
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from types import UnionType
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError

from .cell import cell_to_str, is_blank
from .errors import RecordConversionError
from .header_mapper import HeaderMapper
from .schema import DEFAULT_OPTIONS, KeyedRecord, ReaderOptions
from .utils.log import get_logger

logger = get_logger("record_converter")

HEADER_METADATA_KEY = "sheetflow_header"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\W_]+")
_ZERO_FACTORIES = {str: str, int: int, float: float, bool: bool, Decimal: Decimal}
_CONTAINERS = (list, dict, set, tuple)
_NUMERIC = (int, float, Decimal)


def header_field(header: str, **kwargs: Any) -> Any:
    """Dataclass ``field()`` bound to an explicit sheet header."""

    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[HEADER_METADATA_KEY] = header
    return dataclasses.field(metadata=metadata, **kwargs)


def normalize_name(label: str) -> str:
    """``"Order Date"``, ``"orderDate"`` and ``"order-date"`` all become ``"order_date"``."""

    text = _CAMEL_BOUNDARY.sub("_", label.strip())
    return _SEPARATORS.sub("_", text.lower()).strip("_")


def is_mapping_target(target: Any) -> bool:
    origin = get_origin(target) or target
    return isinstance(origin, type) and issubclass(origin, Mapping)


def _members(annotation: Any) -> Tuple[Any, ...]:
    if get_origin(annotation) in (Union, UnionType):
        return tuple(arg for arg in get_args(annotation) if arg is not type(None))
    return (annotation,)


def zero_value(annotation: Any) -> Any:
    """Zero value for ``annotation``.

    Optional types and ``Any`` give ``None``. Types without a natural zero
    (dates, enums, nested models) give ``dataclasses.MISSING``.
    """

    if annotation is Any or annotation is object:
        return None
    if get_origin(annotation) in (Union, UnionType):
        return None if type(None) in get_args(annotation) else dataclasses.MISSING
    factory = _ZERO_FACTORIES.get(annotation)
    if factory is not None:
        return factory()
    origin = get_origin(annotation) or annotation
    if origin in _CONTAINERS:
        return origin()
    return dataclasses.MISSING


def prepare_value(value: Any, annotation: Any) -> Any:
    """Normalize a cell value before validation.

    Thousands separators are removed from numeric text and non-text cells
    bound to ``str`` fields are rendered with :func:`cell_to_str`.
    """

    members = _members(annotation)
    if isinstance(value, str) and str not in members and any(member in _NUMERIC for member in members):
        return value.strip().replace(",", "")
    if members == (str,) and not isinstance(value, str):
        return cell_to_str(value)
    return value


@dataclass(frozen=True)
class FieldSpec:
    """One populatable field of a target type."""

    name: str
    key: str
    annotation: Any
    required: bool
    header: Optional[str] = None


class RecordSchema(ABC):
    """Field layout of a target type and the key matching rules applied to it.

    Both target kinds validate through one ``TypeAdapter``, so type errors and
    missing required fields surface the same way.
    """

    def __init__(self, target: type, fields: Sequence[FieldSpec]) -> None:
        self.target = target
        self.fields: Tuple[FieldSpec, ...] = tuple(fields)
        self._by_header: Dict[str, FieldSpec] = {}
        self._by_name: Dict[str, FieldSpec] = {}
        self._by_normalized: Dict[str, FieldSpec] = {}
        for spec in self.fields:
            if spec.header is not None:
                if spec.header in self._by_header:
                    raise TypeError(
                        f"{target.__name__}: header {spec.header!r} declared on both "
                        f"'{self._by_header[spec.header].name}' and '{spec.name}'"
                    )
                self._by_header[spec.header] = spec
            self._by_name[spec.name] = spec
            normalized = normalize_name(spec.name)
            if normalized:
                self._by_normalized.setdefault(normalized, spec)
        try:
            self.adapter: TypeAdapter[Any] = TypeAdapter(target)
        except PydanticUserError as exc:
            raise TypeError(f"{target.__name__}: cannot build a validator: {exc}") from exc

    @classmethod
    @abstractmethod
    def inspect(cls, target: type) -> "RecordSchema":
        """Build the schema of ``target``."""

    @property
    def name(self) -> str:
        return self.target.__name__

    def match(self, keys: Sequence[str]) -> Dict[str, str]:
        """Return ``field name -> record key`` for ``keys`` in column order.

        Declared headers beat exact names, which beat normalized names; on a
        tie the first key in column order wins.
        """

        assigned: Dict[str, Tuple[int, str]] = {}
        for key in keys:
            lookups = ((0, self._by_header, key), (1, self._by_name, key), (2, self._by_normalized, normalize_name(key)))
            for priority, table, candidate in lookups:
                spec = table.get(candidate)
                if spec is None:
                    continue
                current = assigned.get(spec.name)
                if current is None or priority < current[0]:
                    assigned[spec.name] = (priority, key)
                else:
                    logger.debug(
                        "Ignoring colliding record key",
                        extra={"target": self.name, "field": spec.name, "key": key, "kept": current[1]},
                    )
                break
        return {field_name: key for field_name, (_, key) in assigned.items()}

    def payload(self, record: KeyedRecord) -> Dict[str, Any]:
        """Resolve ``record`` to validator input keyed by field key.

        Blank cells populate only ``str`` fields; elsewhere they count as
        missing. A missing required field gets the zero value of its
        annotation, or stays absent when the annotation has none.
        """

        matched = self.match(list(record))
        data: Dict[str, Any] = {}
        for spec in self.fields:
            key = matched.get(spec.name)
            if key is not None:
                value = record[key]
                if spec.annotation is str or not is_blank(value):
                    data[spec.key] = value
                    continue
            if spec.required:
                zero = zero_value(spec.annotation)
                if zero is not dataclasses.MISSING:
                    data[spec.key] = zero
        return data

    def build(self, record: KeyedRecord, position: int) -> Any:
        """Construct one target instance from ``record``."""

        data = self.payload(record)
        by_key = {spec.key: spec for spec in self.fields}
        prepared = {key: prepare_value(value, by_key[key].annotation) for key, value in data.items()}
        try:
            return self.adapter.validate_python(prepared)
        except ValidationError as exc:
            error = exc.errors()[0]
            loc = error.get("loc") or ()
            key = loc[0] if loc else None
            spec = by_key.get(key) if isinstance(key, str) else None
            field_name = spec.name if spec else (str(key) if key is not None else None)
            reason = error.get("msg", str(exc))
            raise RecordConversionError(position, field_name, data.get(key), self.name, reason) from exc


def _dataclass_hints(target: type) -> Dict[str, Any]:
    try:
        return get_type_hints(target)
    except NameError as exc:
        unresolved = getattr(exc, "name", None)
        for item in dataclasses.fields(target):
            if isinstance(item.type, str) and unresolved and re.search(rf"\b{re.escape(unresolved)}\b", item.type):
                raise TypeError(
                    f"{target.__name__}.{item.name}: cannot resolve annotation {item.type!r}; "
                    f"{unresolved!r} must be importable from {target.__module__}"
                ) from exc
        raise TypeError(f"{target.__name__}: cannot resolve field annotations: {exc}") from exc


class DataclassSchema(RecordSchema):
    """Schema for ``@dataclass`` targets."""

    @classmethod
    def inspect(cls, target: type) -> "DataclassSchema":
        hints = _dataclass_hints(target)
        specs = []
        for item in dataclasses.fields(target):
            if not item.init:
                continue
            required = item.default is dataclasses.MISSING and item.default_factory is dataclasses.MISSING
            specs.append(
                FieldSpec(
                    name=item.name,
                    key=item.name,
                    annotation=hints.get(item.name, Any),
                    required=required,
                    header=item.metadata.get(HEADER_METADATA_KEY),
                )
            )
        return cls(target, specs)


class PydanticSchema(RecordSchema):
    """Schema for pydantic models; field aliases act as declared headers."""

    @classmethod
    def inspect(cls, target: type[BaseModel]) -> "PydanticSchema":
        specs = []
        for name, info in target.model_fields.items():
            specs.append(
                FieldSpec(
                    name=name,
                    key=info.alias or name,
                    annotation=info.annotation,
                    required=info.is_required(),
                    header=info.alias,
                )
            )
        return cls(target, specs)


@lru_cache(maxsize=None)
def record_schema(target: type) -> RecordSchema:
    """Return the cached schema for ``target``.

    Raises:
        TypeError: ``target`` is neither a dataclass nor a pydantic model, or
            two of its fields declare the same header.
    """

    if isinstance(target, type) and issubclass(target, BaseModel):
        return PydanticSchema.inspect(target)
    if isinstance(target, type) and dataclasses.is_dataclass(target):
        return DataclassSchema.inspect(target)
    raise TypeError(f"Unsupported record target {target!r}; expected a mapping type, dataclass or pydantic model")


def convert_records(records: List[KeyedRecord], target: Any) -> List[Any]:
    """Convert keyed records to ``target``; mapping targets get ``records`` back unchanged.

    Raises:
        RecordConversionError: On the first record that cannot be converted; no
            partial result is returned.
    """

    if is_mapping_target(target):
        return records
    schema = record_schema(target)
    return [schema.build(record, position) for position, record in enumerate(records)]


class RecordConverter:
    """Reads typed records through a :class:`HeaderMapper`."""

    def __init__(self, header_mapper: HeaderMapper) -> None:
        self.header_mapper = header_mapper

    def to_records(
        self,
        header_row: int,
        start_row: int,
        end_row: Optional[int],
        target: Any,
        options: ReaderOptions = DEFAULT_OPTIONS,
    ) -> List[Any]:
        if not is_mapping_target(target):
            # Fail on unsupported targets before touching the sheet.
            record_schema(target)
        records = self.header_mapper.read(header_row, start_row, end_row, options)
        try:
            converted = convert_records(records, target)
        except RecordConversionError as exc:
            logger.error(
                "Record conversion failed",
                extra={"target": exc.target, "position": exc.position, "field": exc.field, "error": exc.reason},
            )
            raise
        logger.info(
            "Records converted",
            extra={"target": getattr(target, "__name__", str(target)), "rows": len(converted)},
        )
        return converted
