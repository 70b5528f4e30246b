"""Pydantic models describing which form fields are compared and how.

A FormConfig ties the three external layouts together: the spreadsheet
column holding each field's ground truth, the position of the same field in
the scanner's output document, and the comparison rule for it. The ordering
of ``fields`` is the ordering of every FormRecord.
"""
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from openpyxl.utils import column_index_from_string
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import FieldCategory, FieldKind


DEFAULT_CONFIG_PATH = Path(__file__).parent / "form_config.yaml"


def _check_column(value: str) -> str:
    value = value.strip().upper()
    # Raises ValueError for anything that is not A..XFD
    column_index_from_string(value)
    return value


class BubbleOption(BaseModel):
    """One fillable circle of a multi-select field."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(description="Numeric code recorded in the ground truth, e.g. '3'")
    label: str = Field(description="Label text the scanner emits when the bubble is filled")

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_text(cls, value):
        return str(value).strip()


class FieldSpec(BaseModel):
    """Static metadata for one compared field."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Display name, e.g. 'health_cond'")
    column: Optional[str] = Field(default=None, description="Spreadsheet column letters holding the ground truth")
    json_index: Optional[int] = Field(default=None, ge=0, description="Zero-based index into the scanner output's 'fields' array")
    kind: Optional[FieldKind] = Field(default=None, description="Declared comparison rule; sniffed from the value when absent")
    options: Tuple[BubbleOption, ...] = Field(default=(), description="Ordered bubble table for multi-select fields")
    pad_width: Optional[int] = Field(default=None, ge=1, description="Zero-pad both values to this width before comparing")
    category: Optional[FieldCategory] = Field(default=None, description="Report category; derived when absent")

    @field_validator("column")
    @classmethod
    def _valid_column(cls, value):
        if value is None:
            return value
        return _check_column(value)

    @model_validator(mode="after")
    def _bubble_needs_options(self):
        if self.kind == FieldKind.BUBBLE and not self.options:
            raise ValueError(f"field '{self.name}' is declared bubble but has no options")
        return self

    @property
    def is_bubble(self) -> bool:
        return bool(self.options)

    @property
    def report_category(self) -> FieldCategory:
        if self.category is not None:
            return self.category
        if self.options or self.kind == FieldKind.CATEGORICAL:
            return FieldCategory.BUBBLE
        return FieldCategory.DIGIT


class FormConfig(BaseModel):
    """Everything a run needs to know about the form layout."""
    model_config = ConfigDict(frozen=True)

    sheets: Tuple[str, ...] = ("#3",)
    client_id_column: str = "P"
    header_rows: int = Field(default=1, ge=0)
    identifier_file: str = "clientID.txt"
    output_file: str = "output.json"
    fields: Tuple[FieldSpec, ...] = ()

    # Alignment review columns (one per form section)
    alignment_columns: Tuple[str, ...] = ()
    misalignment_weights: Dict[str, int] = Field(
        default_factory=lambda: {"none": 0, "small": 2, "medium": 5, "large": 10}
    )
    misalignment_header: str = "Misalignment"

    @field_validator("client_id_column")
    @classmethod
    def _valid_id_column(cls, value):
        return _check_column(value)

    @field_validator("alignment_columns")
    @classmethod
    def _valid_alignment_columns(cls, value):
        return tuple(_check_column(v) for v in value)

    @model_validator(mode="after")
    def _unique_field_names(self):
        seen = set()
        for spec in self.fields:
            if spec.name in seen:
                raise ValueError(f"duplicate field name '{spec.name}'")
            seen.add(spec.name)
        return self

    @property
    def field_specs(self) -> Tuple[FieldSpec, ...]:
        return self.fields

    @property
    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]

    @property
    def columns(self) -> List[str]:
        """Spreadsheet columns in field order."""
        missing = [spec.name for spec in self.fields if spec.column is None]
        if missing:
            raise ValueError(f"fields without a spreadsheet column: {', '.join(missing)}")
        return [spec.column for spec in self.fields]

    @property
    def json_indexes(self) -> List[int]:
        """Scanner output positions in field order."""
        missing = [spec.name for spec in self.fields if spec.json_index is None]
        if missing:
            raise ValueError(f"fields without a scan output index: {', '.join(missing)}")
        return [spec.json_index for spec in self.fields]


def load_form_config(path: Optional[Path] = None) -> FormConfig:
    """Load form configuration from YAML (the bundled default when path is None)."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    with open(config_path) as f:
        data = yaml.safe_load(f) or {}
    return FormConfig.model_validate(data)
