"""
Raw Report Models

Schemas for the Profit & Loss document produced by the accounting API.

DESIGN DECISION: These models are deliberately LENIENT.
The upstream schema varies between companies and API versions, so a
wrong-typed container is treated as absent rather than rejected:
- Non-list ColData / Row / Column / MetaData become None
- Non-mapping Header / Summary / Rows become None
- Numeric cell values are coerced to strings
- Unknown keys are ignored

The only hard failure is a document that is not a mapping at all,
which is a caller contract violation (see parsing.parser).
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_list(value: Any) -> Optional[list]:
    """Drop wrong-typed containers; replace non-mapping entries with {}."""
    if not isinstance(value, list):
        return None
    return [item if isinstance(item, dict) else {} for item in value]


def _coerce_mapping(value: Any) -> Optional[dict]:
    return value if isinstance(value, dict) else None


def _coerce_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


class _RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# =============================================================================
# ROW TREE
# =============================================================================

class ColValue(_RawModel):
    """A single cell. Column 0 of any ColData list is the label."""

    value: Optional[str] = None

    @field_validator('value', mode='before')
    @classmethod
    def coerce_value(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)


class ColDataBlock(_RawModel):
    """The `Header` / `Summary` wrapper around a ColData list."""

    col_data: Optional[list[ColValue]] = Field(default=None, alias="ColData")

    @field_validator('col_data', mode='before')
    @classmethod
    def coerce_col_data(cls, v: Any) -> Optional[list]:
        return _coerce_list(v)


class RowContainer(_RawModel):
    """The `Rows` wrapper around nested rows."""

    row: Optional[list["RawRow"]] = Field(default=None, alias="Row")

    @field_validator('row', mode='before')
    @classmethod
    def coerce_row(cls, v: Any) -> Optional[list]:
        return _coerce_list(v)


class RawRow(_RawModel):
    """
    One node of the report row tree.

    A node may carry any combination of ColData (data row), Header
    (sub-section label and inline values), Summary (rollup) and Rows
    (children). `group` is a machine tag such as "Income" or "COGS".
    """

    type: Optional[str] = None
    col_data: Optional[list[ColValue]] = Field(default=None, alias="ColData")
    header: Optional[ColDataBlock] = Field(default=None, alias="Header")
    summary: Optional[ColDataBlock] = Field(default=None, alias="Summary")
    rows: Optional[RowContainer] = Field(default=None, alias="Rows")
    group: Optional[str] = None

    @field_validator('col_data', mode='before')
    @classmethod
    def coerce_col_data(cls, v: Any) -> Optional[list]:
        return _coerce_list(v)

    @field_validator('header', 'summary', 'rows', mode='before')
    @classmethod
    def coerce_blocks(cls, v: Any) -> Optional[dict]:
        return _coerce_mapping(v)

    @field_validator('type', 'group', mode='before')
    @classmethod
    def coerce_tags(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)

    @property
    def children(self) -> Optional[list["RawRow"]]:
        """Nested rows, or None when the row has no `Rows.Row` list."""
        if self.rows is None:
            return None
        return self.rows.row


# =============================================================================
# REPORT ENVELOPE
# =============================================================================

class MetaDataEntry(_RawModel):
    name: Optional[str] = Field(default=None, alias="Name")
    value: Optional[str] = Field(default=None, alias="Value")

    @field_validator('name', 'value', mode='before')
    @classmethod
    def coerce_fields(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)


class RawColumn(_RawModel):
    col_title: Optional[str] = Field(default=None, alias="ColTitle")
    meta_data: Optional[list[MetaDataEntry]] = Field(default=None, alias="MetaData")

    @field_validator('col_title', mode='before')
    @classmethod
    def coerce_title(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)

    @field_validator('meta_data', mode='before')
    @classmethod
    def coerce_meta(cls, v: Any) -> Optional[list]:
        return _coerce_list(v)

    def meta(self, name: str) -> Optional[MetaDataEntry]:
        """First MetaData entry with the given Name."""
        for entry in self.meta_data or []:
            if entry.name == name:
                return entry
        return None


class ColumnContainer(_RawModel):
    column: Optional[list[RawColumn]] = Field(default=None, alias="Column")

    @field_validator('column', mode='before')
    @classmethod
    def coerce_column(cls, v: Any) -> Optional[list]:
        return _coerce_list(v)


class ReportHeader(_RawModel):
    report_basis: Optional[str] = Field(default=None, alias="ReportBasis")
    currency: Optional[str] = Field(default=None, alias="Currency")
    start_period: Optional[str] = Field(default=None, alias="StartPeriod")
    end_period: Optional[str] = Field(default=None, alias="EndPeriod")
    summarize_columns_by: Optional[str] = Field(default=None, alias="SummarizeColumnsBy")

    @field_validator(
        'report_basis', 'currency', 'start_period', 'end_period',
        'summarize_columns_by', mode='before',
    )
    @classmethod
    def coerce_fields(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)


class LegacyMonth(_RawModel):
    year: int
    month: int = Field(ge=1, le=12)


class RawReport(_RawModel):
    """
    The full P&L document.

    `_monthlyMode` / `_months` are a legacy envelope used by older
    callers that pre-computed the month list themselves.
    """

    header: Optional[ReportHeader] = Field(default=None, alias="Header")
    columns: Optional[ColumnContainer] = Field(default=None, alias="Columns")
    rows: Optional[RowContainer] = Field(default=None, alias="Rows")
    legacy_monthly_mode: bool = Field(default=False, alias="_monthlyMode")
    legacy_months: list[LegacyMonth] = Field(default_factory=list, alias="_months")

    @field_validator('header', 'columns', 'rows', mode='before')
    @classmethod
    def coerce_blocks(cls, v: Any) -> Optional[dict]:
        return _coerce_mapping(v)

    @field_validator('legacy_monthly_mode', mode='before')
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return v is True

    @field_validator('legacy_months', mode='before')
    @classmethod
    def coerce_months(cls, v: Any) -> list:
        if not isinstance(v, list):
            return []
        kept = []
        for item in v:
            if not isinstance(item, dict):
                continue
            year, month = item.get("year"), item.get("month")
            if isinstance(year, int) and isinstance(month, int) and 1 <= month <= 12:
                kept.append({"year": year, "month": month})
        return kept

    @property
    def top_level_rows(self) -> list[RawRow]:
        if self.rows is None or self.rows.row is None:
            return []
        return self.rows.row

    @property
    def column_list(self) -> list[RawColumn]:
        if self.columns is None or self.columns.column is None:
            return []
        return self.columns.column


RowContainer.model_rebuild()
RawRow.model_rebuild()
