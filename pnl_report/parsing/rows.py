"""
Row Utilities

Primitive accessors over the raw row tree: labels, values, value
validity, and the single shape classification step (`to_node`) that the
transformer dispatches on.

DESIGN DECISION: "0", "0.00" and "" are treated as ABSENT, not zero.
A row usually carries the same amount in more than one place (Summary,
Header, ColData) and an empty or zero cell in one place means "look
elsewhere". Once no better source exists the zero is rendered as-is.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional, Union

from pnl_report.models.raw import ColDataBlock, ColValue, RawRow
from pnl_report.models.report import MonthlyAmount


ABSENT_VALUES = frozenset({"", "0", "0.00"})
DEFAULT_VALUE = "0.00"
MISSING_MONTH_VALUE = "0"


def is_valid_value(value: Optional[str]) -> bool:
    """True iff the value is non-empty and not a literal zero."""
    return bool(value) and value not in ABSENT_VALUES


# =============================================================================
# CELL ACCESS
# =============================================================================

def _cells(block: Optional[ColDataBlock]) -> Optional[list[ColValue]]:
    if block is None:
        return None
    return block.col_data


def cell_text(cells: Optional[list[ColValue]], index: int) -> str:
    """Value of the cell at `index`, or "" when missing or empty."""
    if not cells:
        return ""
    try:
        return cells[index].value or ""
    except IndexError:
        return ""


def is_data_row(row: RawRow) -> bool:
    return row.col_data is not None and (not row.type or row.type == "Data")


def is_header_row(row: RawRow) -> bool:
    return _cells(row.header) is not None and row.children is not None


def data_label(row: RawRow) -> str:
    return cell_text(row.col_data, 0)


def data_value(row: RawRow) -> str:
    return cell_text(row.col_data, 1)


def header_label(row: RawRow) -> str:
    return cell_text(_cells(row.header), 0)


def header_value(row: RawRow) -> str:
    """First inline value after the header label."""
    return cell_text(_cells(row.header), 1)


def summary_label(row: RawRow) -> str:
    return cell_text(_cells(row.summary), 0)


def summary_cells(row: RawRow) -> Optional[list[ColValue]]:
    return _cells(row.summary)


def summary_value(row: RawRow, prefer_last: bool = True) -> str:
    """
    Aggregate value from the Summary.

    With `prefer_last`, the trailing (total) column wins when there is
    more than one value column.
    """
    cells = _cells(row.summary)
    if not cells:
        return ""
    if prefer_last and len(cells) > 1:
        return cell_text(cells, -1) or cell_text(cells, 1)
    return cell_text(cells, 1)


class PreferredValue(NamedTuple):
    value: str
    source: str


def preferred_value(row: RawRow, prefer_last: bool = True) -> PreferredValue:
    """
    Resolve a row's amount: Summary, then Header, then "0.00".
    """
    value = summary_value(row, prefer_last)
    if is_valid_value(value):
        return PreferredValue(value, "summary")

    value = header_value(row)
    if is_valid_value(value):
        return PreferredValue(value, "header")

    return PreferredValue(DEFAULT_VALUE, "default")


def has_header_value(row: RawRow) -> bool:
    """True if any inline header cell after the label is valid."""
    cells = _cells(row.header)
    if not cells or len(cells) < 2:
        return False
    return any(is_valid_value(cell.value) for cell in cells[1:])


# =============================================================================
# MONTHLY VALUES
# =============================================================================

def month_values(cells: Optional[list[ColValue]], num_months: int) -> list[str]:
    """
    Per-month values from `[label, m1, ..., mN, total]`.

    Always returns exactly `num_months` entries; missing or empty cells
    become "0".
    """
    if not cells:
        return [MISSING_MONTH_VALUE] * num_months

    between = cells[1:-1]
    if len(between) >= num_months:
        picked = between[:num_months]
    else:
        picked = cells[1:num_months + 1]

    values = [cell.value or MISSING_MONTH_VALUE for cell in picked]
    values.extend([MISSING_MONTH_VALUE] * (num_months - len(values)))
    return values


def total_value(cells: Optional[list[ColValue]]) -> str:
    """Trailing (total) column, or "0". A label-only row has no total."""
    if not cells or len(cells) < 2:
        return MISSING_MONTH_VALUE
    return cell_text(cells, -1) or MISSING_MONTH_VALUE


def monthly_amount(cells: Optional[list[ColValue]], num_months: int) -> MonthlyAmount:
    return MonthlyAmount(
        values=month_values(cells, num_months),
        total=total_value(cells),
    )


def zero_amount(num_months: int) -> MonthlyAmount:
    return MonthlyAmount(values=[MISSING_MONTH_VALUE] * num_months, total=DEFAULT_VALUE)


def has_header_monthly_value(row: RawRow, num_months: int) -> bool:
    """True if any inline header month, or the header total, is valid."""
    cells = _cells(row.header)
    if not cells or len(cells) < 2:
        return False
    if any(is_valid_value(v) for v in month_values(cells, num_months)):
        return True
    return is_valid_value(total_value(cells))


# =============================================================================
# ROW SHAPES
# =============================================================================

@dataclass(frozen=True)
class LeafNode:
    """A data row: one label and its value cells."""
    row: RawRow
    label: str


@dataclass(frozen=True)
class BranchNode:
    """A header row with nested children."""
    row: RawRow
    label: str
    summary_label: str
    children: list[RawRow]


@dataclass(frozen=True)
class UnknownNode:
    """Anything else. Dropped by the transformer."""
    row: RawRow


Node = Union[LeafNode, BranchNode, UnknownNode]


def to_node(row: RawRow) -> Node:
    """
    Classify a raw row by shape.

    Data rows take priority when a row happens to look like both.
    """
    if is_data_row(row):
        return LeafNode(row=row, label=data_label(row))
    if is_header_row(row):
        return BranchNode(
            row=row,
            label=header_label(row),
            summary_label=summary_label(row),
            children=row.children or [],
        )
    return UnknownNode(row=row)
