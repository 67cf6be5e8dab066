"""
Report Audit Logger

DESIGN DECISION: Every generation call leaves a trail in the structured
log, tied together by a correlation id. This makes it possible to answer
"which sections did that PDF contain, and why is Payroll missing?"
without re-running the report.

The logger:
- Is synchronous; report generation is a pure in-memory call
- Never raises; a broken log sink must not break PDF output
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from pnl_report.models.audit import EventSeverity, ReportEvent, ReportEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and therefore structlog) at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))


class ReportAuditLogger:
    """
    Report event logging service.

    Events go to the structured local log only; there is no persistent
    audit store for report generation.
    """

    def __init__(self, logger=None):
        """
        Initialize report audit logger.

        Args:
            logger: A structlog logger. Defaults to this module's logger.
        """
        self._logger = logger or structlog.get_logger(__name__)

    def log(self, event: ReportEvent) -> bool:
        """
        Log a report event.

        Returns False if the log sink raised, True otherwise.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == EventSeverity.ERROR:
                self._logger.error("report_event", **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning("report_event", **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug("report_event", **log_dict)
            else:
                self._logger.info("report_event", **log_dict)
        except Exception:
            return False

        return True

    def log_received(
        self,
        correlation_id: UUID,
        start_date: str,
        end_date: str,
        location_name: Optional[str] = None,
    ) -> None:
        """Log that a report document arrived for rendering."""
        self.log(ReportEventBuilder.report_received(
            correlation_id=correlation_id,
            start_date=start_date,
            end_date=end_date,
            location_name=location_name,
        ))

    def log_parsed(
        self,
        correlation_id: UUID,
        mode: str,
        sections_found: list[str],
        num_months: Optional[int] = None,
    ) -> None:
        """Log the sections the parser recognised."""
        self.log(ReportEventBuilder.report_parsed(
            correlation_id=correlation_id,
            mode=mode,
            sections_found=sections_found,
            num_months=num_months,
        ))

    def log_rendered(
        self,
        correlation_id: UUID,
        mode: str,
        page_count: int,
        size_bytes: int,
    ) -> None:
        """Log a finished PDF."""
        self.log(ReportEventBuilder.report_rendered(
            correlation_id=correlation_id,
            mode=mode,
            page_count=page_count,
            size_bytes=size_bytes,
        ))

    def log_failed(
        self,
        correlation_id: UUID,
        error_type: str,
        error_message: str,
    ) -> None:
        """Log a failed generation call."""
        self.log(ReportEventBuilder.report_failed(
            correlation_id=correlation_id,
            error_type=error_type,
            error_message=error_message,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for one generation call.

    Pass it through every event logged for that call.
    """
    return uuid4()
