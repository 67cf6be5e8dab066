"""
Report Parser

One linear pass over the top-level rows: classify each row, transform
the sections it recognises, and assemble the typed report.

DESIGN DECISION: The parser never fails on report content.
Sections that are missing stay None and are simply not drawn. When two
rows classify to the same section, the later one replaces the earlier
one; nothing is merged.

The only error raised is for input that is not a report document at
all (see InvalidReportError).
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

import structlog

from pnl_report.models.raw import RawReport, RawRow
from pnl_report.models.report import (
    ExpensesBlock,
    MonthlyExpensesBlock,
    MonthlyReport,
    MonthlySection,
    MonthlyTotal,
    PeriodReport,
    Section,
    SectionTotal,
    SectionType,
)
from pnl_report.parsing.classifier import classify
from pnl_report.parsing.rows import (
    cell_text,
    header_label,
    monthly_amount,
    summary_cells,
    summary_label,
)
from pnl_report.parsing.rules import should_exclude_expense_section
from pnl_report.parsing.transformer import (
    MonthlyItemTransformer,
    PeriodItemTransformer,
    TransformContext,
)


logger = structlog.get_logger(__name__)


INCOME_HEADER = "Income"
COST_OF_SALES_HEADER = "Cost of Sales"
OTHER_INCOME_HEADER = "Other Income"


# =============================================================================
# ERRORS
# =============================================================================

class ReportError(Exception):
    """Base error for report generation."""
    pass


class InvalidReportError(ReportError):
    """The report data is not a mapping."""
    pass


def load_report(report_data: Union[RawReport, Mapping[str, Any]]) -> RawReport:
    """
    Validate a raw report document.

    Raises:
        InvalidReportError: If report_data is not a mapping
    """
    if isinstance(report_data, RawReport):
        return report_data
    if not isinstance(report_data, Mapping):
        raise InvalidReportError(
            f"Report data must be a mapping, got {type(report_data).__name__}"
        )
    return RawReport.model_validate(dict(report_data))


# =============================================================================
# SHARED HELPERS
# =============================================================================

def is_expense_sub_section(row: RawRow) -> bool:
    """A child of Expenses whose header names an expense and which has rows."""
    return "EXPENSE" in header_label(row).upper() and row.children is not None


def is_total_expenses(label: str) -> bool:
    upper = label.upper()
    return "TOTAL" in upper and "EXPENSES" in upper


def _log_unclassified(row: RawRow) -> None:
    logger.debug(
        "row_unclassified",
        header=header_label(row),
        summary=summary_label(row),
        group=row.group,
    )


# =============================================================================
# PERIOD MODE
# =============================================================================

def _period_summary(row: RawRow) -> SectionTotal:
    return SectionTotal(label=summary_label(row), value=cell_text(summary_cells(row), 1))


def _period_total(row: RawRow) -> Optional[SectionTotal]:
    return _period_summary(row) if row.summary is not None else None


def _period_expenses(row: RawRow, transformer: PeriodItemTransformer) -> ExpensesBlock:
    sections = []
    for child in row.children or []:
        if not is_expense_sub_section(child):
            continue

        header = header_label(child)
        if should_exclude_expense_section(header):
            logger.debug("expense_section_excluded", header=header)
            continue

        items, _ = transformer.transform(
            child.children,
            TransformContext(expense_section_header=header),
        )
        sections.append(Section(header=header, items=items, total=_period_total(child)))

    total = _period_summary(row) if is_total_expenses(summary_label(row)) else None
    return ExpensesBlock(sections=sections, total=total)


def parse_period_report(report_data: Union[RawReport, Mapping[str, Any]]) -> PeriodReport:
    """
    Parse a report into single-period sections.

    Raises:
        InvalidReportError: If report_data is not a mapping
    """
    raw = load_report(report_data)
    transformer = PeriodItemTransformer()
    report = PeriodReport()

    for row in raw.top_level_rows:
        section_type = classify(row)

        if section_type is None:
            _log_unclassified(row)
        elif section_type == SectionType.INCOME:
            items, _ = transformer.transform(
                row.children, TransformContext(is_income_section=True)
            )
            report.income = Section(
                header=INCOME_HEADER, items=items, total=_period_total(row)
            )
        elif section_type == SectionType.COST_OF_SALES:
            items, _ = transformer.transform(row.children, TransformContext())
            report.cost_of_sales = Section(
                header=COST_OF_SALES_HEADER,
                items=items,
                total=_period_total(row),
                is_important=True,
            )
        elif section_type == SectionType.GROSS_PROFIT:
            report.gross_profit = _period_summary(row)
        elif section_type == SectionType.EXPENSES:
            report.expenses = _period_expenses(row, transformer)
        elif section_type == SectionType.OTHER_INCOME:
            items, _ = transformer.transform(row.children, TransformContext())
            report.other_income = Section(
                header=OTHER_INCOME_HEADER, items=items, total=_period_total(row)
            )
        elif section_type == SectionType.PROFIT:
            report.profit = _period_summary(row)

    return report


# =============================================================================
# MONTHLY MODE
# =============================================================================

def _monthly_summary(row: RawRow, num_months: int) -> MonthlyTotal:
    amount = monthly_amount(summary_cells(row), num_months)
    return MonthlyTotal(label=summary_label(row), values=amount.values, total=amount.total)


def _monthly_total(row: RawRow, num_months: int) -> Optional[MonthlyTotal]:
    return _monthly_summary(row, num_months) if row.summary is not None else None


def _monthly_expenses(
    row: RawRow,
    transformer: MonthlyItemTransformer,
) -> MonthlyExpensesBlock:
    num_months = transformer.num_months
    sections = []
    for child in row.children or []:
        if not is_expense_sub_section(child):
            continue

        header = header_label(child)
        if should_exclude_expense_section(header):
            logger.debug("expense_section_excluded", header=header)
            continue

        items, _ = transformer.transform(
            child.children,
            TransformContext(expense_section_header=header),
        )
        sections.append(MonthlySection(
            header=header,
            items=items,
            total=_monthly_total(child, num_months),
        ))

    total = (
        _monthly_summary(row, num_months)
        if is_total_expenses(summary_label(row))
        else None
    )
    return MonthlyExpensesBlock(sections=sections, total=total)


def parse_monthly_report(
    report_data: Union[RawReport, Mapping[str, Any]],
    num_months: int,
) -> MonthlyReport:
    """
    Parse a report into sections with one value per month.

    Every item and total carries exactly `num_months` values.

    Raises:
        InvalidReportError: If report_data is not a mapping
        ValueError: If num_months is less than 1
    """
    raw = load_report(report_data)
    transformer = MonthlyItemTransformer(num_months)
    report = MonthlyReport(num_months=num_months)

    for row in raw.top_level_rows:
        section_type = classify(row)

        if section_type is None:
            _log_unclassified(row)
        elif section_type == SectionType.INCOME:
            items, _ = transformer.transform(
                row.children, TransformContext(is_income_section=True)
            )
            report.income = MonthlySection(
                header=INCOME_HEADER,
                items=items,
                total=_monthly_total(row, num_months),
            )
        elif section_type == SectionType.COST_OF_SALES:
            items, _ = transformer.transform(row.children, TransformContext())
            report.cost_of_sales = MonthlySection(
                header=COST_OF_SALES_HEADER,
                items=items,
                total=_monthly_total(row, num_months),
                is_important=True,
            )
        elif section_type == SectionType.GROSS_PROFIT:
            report.gross_profit = _monthly_summary(row, num_months)
        elif section_type == SectionType.EXPENSES:
            report.expenses = _monthly_expenses(row, transformer)
        elif section_type == SectionType.OTHER_INCOME:
            items, _ = transformer.transform(row.children, TransformContext())
            report.other_income = MonthlySection(
                header=OTHER_INCOME_HEADER,
                items=items,
                total=_monthly_total(row, num_months),
            )
        elif section_type == SectionType.PROFIT:
            report.profit = _monthly_summary(row, num_months)

    return report
