"""
Report Generator

End-to-end entry point: raw report document in, PDF bytes out.

DESIGN DECISION: The mode is decided by the data, not the caller.
A report summarized by month (or carrying the legacy month envelope)
renders month columns; everything else renders a single period. If a
monthly report yields no usable month columns it falls back to the
period layout rather than drawing an empty table.
"""

import base64
from collections.abc import Mapping
from typing import Any, Optional, Union

from pnl_report.audit.logger import ReportAuditLogger, create_correlation_id
from pnl_report.config.settings import Settings, get_settings
from pnl_report.models.raw import RawReport
from pnl_report.models.report import TargetPercentages
from pnl_report.parsing.months import extract_months, is_monthly_mode
from pnl_report.parsing.parser import (
    load_report,
    parse_monthly_report,
    parse_period_report,
)
from pnl_report.rendering.document import PdfDocument
from pnl_report.rendering.engine import RenderConfig, ReportRenderer, render_header
from pnl_report.rendering.layout import MONTHLY_LAYOUT, PERIOD_LAYOUT
from pnl_report.rendering.monthly import MonthlyStrategy
from pnl_report.rendering.period import PeriodStrategy


PERIOD_TITLE = "Profit & Loss Report"
MONTHLY_TITLE = "Monthly P&L Report"


def generate_pdf(
    report_data: Union[RawReport, Mapping[str, Any]],
    start_date: str,
    end_date: str,
    location_name: Optional[str] = None,
    targets: Optional[TargetPercentages] = None,
    settings: Optional[Settings] = None,
    audit_logger: Optional[ReportAuditLogger] = None,
) -> bytes:
    """
    Parse and render a P&L report.

    Args:
        report_data: The accounting API's P&L document
        start_date: Printed period start
        end_date: Printed period end
        location_name: Optional subtitle under the title
        targets: Target percentages; missing fields use configured defaults
        settings: Overrides get_settings()
        audit_logger: Overrides the default event logger

    Returns:
        The PDF document bytes

    Raises:
        InvalidReportError: If report_data is not a mapping
    """
    settings = settings or get_settings()
    audit = audit_logger or ReportAuditLogger()
    correlation_id = create_correlation_id()

    audit.log_received(correlation_id, start_date, end_date, location_name)

    # Parse
    try:
        raw = load_report(report_data)

        render_settings = settings.render
        resolved_targets = (targets or TargetPercentages()).with_defaults(settings.targets)

        header = raw.header
        currency = (header.currency if header and header.currency else None) or render_settings.default_currency
        report_basis = header.report_basis if header else None

        months = extract_months(raw)
        monthly = is_monthly_mode(raw) and bool(months)

        if monthly:
            report = parse_monthly_report(raw, len(months))
            strategy = MonthlyStrategy(months, show_gross_profit=render_settings.show_gross_profit)
            margin = MONTHLY_LAYOUT.margin
            title = MONTHLY_TITLE
        else:
            report = parse_period_report(raw)
            strategy = PeriodStrategy(show_gross_profit=render_settings.show_gross_profit)
            margin = PERIOD_LAYOUT.margin
            title = PERIOD_TITLE
    except Exception as e:
        audit.log_failed(correlation_id, type(e).__name__, str(e))
        raise

    audit.log_parsed(
        correlation_id,
        strategy.mode.value,
        report.sections_found,
        len(months) if monthly else None,
    )

    # Render
    try:
        document = PdfDocument(render_settings.page_size)

        # The title block always uses the period margin
        y = render_header(
            document,
            title,
            start_date,
            end_date,
            margin=PERIOD_LAYOUT.margin,
            initial_y=PERIOD_LAYOUT.margin,
            location_name=location_name,
            report_basis=report_basis,
        )

        renderer = ReportRenderer(document, RenderConfig(margin=margin, currency=currency), initial_y=y)
        strategy.render(renderer, report, resolved_targets)

        pdf_bytes = document.output()
    except Exception as e:
        audit.log_failed(correlation_id, type(e).__name__, str(e))
        raise

    audit.log_rendered(correlation_id, strategy.mode.value, document.page_count, len(pdf_bytes))

    return pdf_bytes


def pdf_to_base64(pdf_bytes: bytes) -> str:
    return base64.b64encode(pdf_bytes).decode("ascii")


def generate_pdf_base64(
    report_data: Union[RawReport, Mapping[str, Any]],
    start_date: str,
    end_date: str,
    location_name: Optional[str] = None,
    targets: Optional[TargetPercentages] = None,
    settings: Optional[Settings] = None,
    audit_logger: Optional[ReportAuditLogger] = None,
) -> str:
    """Same as generate_pdf, encoded as a base64 string."""
    return pdf_to_base64(generate_pdf(
        report_data,
        start_date,
        end_date,
        location_name=location_name,
        targets=targets,
        settings=settings,
        audit_logger=audit_logger,
    ))
