"""
Report Parsing Package

Raw accounting report -> typed section/item model.
"""

from pnl_report.parsing.classifier import classify
from pnl_report.parsing.months import extract_months, is_monthly_mode
from pnl_report.parsing.parser import (
    InvalidReportError,
    ReportError,
    load_report,
    parse_monthly_report,
    parse_period_report,
)
from pnl_report.parsing.rules import KeywordsFound, should_exclude
from pnl_report.parsing.transformer import (
    MonthlyItemTransformer,
    PeriodItemTransformer,
    TransformContext,
)

__all__ = [
    "InvalidReportError",
    "KeywordsFound",
    "MonthlyItemTransformer",
    "PeriodItemTransformer",
    "ReportError",
    "TransformContext",
    "classify",
    "extract_months",
    "is_monthly_mode",
    "load_report",
    "parse_monthly_report",
    "parse_period_report",
    "should_exclude",
]
