"""
Data Models Package

Pydantic models for the raw accounting document, the normalized report
produced by the parser, and the report event trail.
"""

from pnl_report.models.raw import (
    ColDataBlock,
    ColValue,
    RawColumn,
    RawReport,
    RawRow,
    ReportHeader,
    RowContainer,
)
from pnl_report.models.report import (
    ExpensesBlock,
    MonthInfo,
    MonthlyAmount,
    MonthlyExpensesBlock,
    MonthlyItem,
    MonthlyReport,
    MonthlySection,
    MonthlyTotal,
    PeriodReport,
    ReportItem,
    ReportMode,
    Section,
    SectionTotal,
    SectionType,
    TargetPercentages,
)
from pnl_report.models.audit import (
    EventSeverity,
    ReportEvent,
    ReportEventBuilder,
    ReportEventType,
)

__all__ = [
    # Raw document
    "ColDataBlock",
    "ColValue",
    "RawColumn",
    "RawReport",
    "RawRow",
    "ReportHeader",
    "RowContainer",
    # Normalized report
    "ExpensesBlock",
    "MonthInfo",
    "MonthlyAmount",
    "MonthlyExpensesBlock",
    "MonthlyItem",
    "MonthlyReport",
    "MonthlySection",
    "MonthlyTotal",
    "PeriodReport",
    "ReportItem",
    "ReportMode",
    "Section",
    "SectionTotal",
    "SectionType",
    "TargetPercentages",
    # Events
    "EventSeverity",
    "ReportEvent",
    "ReportEventBuilder",
    "ReportEventType",
]
