"""
PDF Rendering Package

Typed report -> PDF pages, through one of two layout strategies.
"""

from pnl_report.rendering.document import PdfDocument
from pnl_report.rendering.engine import PageCursor, RenderConfig, ReportRenderer, render_header
from pnl_report.rendering.formatting import format_currency, format_percentage, parse_amount
from pnl_report.rendering.monthly import ColumnGeometry, MonthlyStrategy
from pnl_report.rendering.period import PeriodStrategy
from pnl_report.rendering.strategy import RenderStrategy

__all__ = [
    "ColumnGeometry",
    "MonthlyStrategy",
    "PageCursor",
    "PdfDocument",
    "PeriodStrategy",
    "RenderConfig",
    "RenderStrategy",
    "ReportRenderer",
    "format_currency",
    "format_percentage",
    "parse_amount",
    "render_header",
]
