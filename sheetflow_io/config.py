"""Read plan configuration loaded from YAML."""

# Module responsibilities:
# - Describe one worksheet read (sheet, row range, options) as a validated model.
# - Load plans from YAML files with explicit error reporting.

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .schema import ReaderOptions


class ReadPlan(BaseModel):
    """Complete read plan file model."""

    model_config = ConfigDict(extra="forbid")

    sheet: Union[int, str] = 0
    header_row: int = 0
    start_row: int = 1
    end_row: Optional[int] = None
    ignore_empty_row: bool = False
    trim_cell_value: bool = False
    header_alias: Dict[str, str] = Field(default_factory=dict)

    def options(self) -> ReaderOptions:
        return ReaderOptions(
            ignore_empty_row=self.ignore_empty_row,
            trim_cell_value=self.trim_cell_value,
            header_alias=self.header_alias,
        )


def load_read_plan(path: Union[str, Path]) -> ReadPlan:
    """Load a read plan from YAML.

    Raises:
        ConfigError: The file is missing, is not a YAML mapping, or holds invalid values.
    """

    plan_path = Path(path)
    if not plan_path.exists():
        raise ConfigError(f"Read plan not found: {plan_path}")
    with plan_path.open("r", encoding="utf-8") as fh:
        try:
            payload = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Read plan is not valid YAML: {exc}") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError("Invalid read plan structure (expected mapping)")
    if isinstance(payload.get("header_alias"), dict):
        payload["header_alias"] = {str(k): str(v) for k, v in payload["header_alias"].items()}
    try:
        return ReadPlan.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid read plan {plan_path}: {exc}") from exc
