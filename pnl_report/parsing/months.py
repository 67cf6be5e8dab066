"""
Month Extraction

Derives the list of month columns of a report summarized by month.

Dates are read straight from the "YYYY-MM-DD" text of the column's
StartDate. No timezone conversion is applied, so a column starting on
the first of a month always lands in that month.
"""

import re

from pnl_report.models.raw import RawColumn, RawReport
from pnl_report.models.report import MonthInfo


DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")

MONTH_SUMMARY = "Month"


def _is_month_column(column: RawColumn) -> bool:
    return column.meta("StartDate") is not None and column.meta("EndDate") is not None


def _column_month(column: RawColumn):
    start = column.meta("StartDate")
    if start is None or not start.value:
        return None
    match = DATE_PATTERN.match(start.value)
    if not match:
        return None
    month = int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return MonthInfo(year=int(match.group(1)), month=month)


def _summarized_by_month(report: RawReport) -> bool:
    return report.header is not None and report.header.summarize_columns_by == MONTH_SUMMARY


def extract_months(report: RawReport) -> list[MonthInfo]:
    """
    Months covered by the report's month columns, in column order.

    Reports not summarized by month fall back to the legacy
    `_monthlyMode` / `_months` envelope when both are present.
    """
    if _summarized_by_month(report):
        months = []
        for column in report.column_list:
            if not _is_month_column(column):
                continue
            month = _column_month(column)
            if month is not None:
                months.append(month)
        return months

    if report.legacy_monthly_mode and report.legacy_months:
        return [MonthInfo(year=m.year, month=m.month) for m in report.legacy_months]

    return []


def is_monthly_mode(report: RawReport) -> bool:
    """True if the report asks for month columns."""
    if _summarized_by_month(report):
        return True
    return report.legacy_monthly_mode and bool(report.legacy_months)
