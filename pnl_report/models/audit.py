"""
Report Event Models

Every report generation emits a short trail of structured events:
received, parsed, rendered (or failed). Events sharing a correlation id
belong to the same generation call.

DESIGN DECISION: Events are plain records. They are written to the
structured log and never fed back into parsing or rendering, so a
logging failure can never change the PDF.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportEventType(str, Enum):
    """Steps of a generation call."""
    REPORT_RECEIVED = "report_received"
    REPORT_PARSED = "report_parsed"
    REPORT_RENDERED = "report_rendered"
    REPORT_FAILED = "report_failed"


class EventSeverity(str, Enum):
    """Severity level for report events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ReportEvent(BaseModel):
    """A single report generation event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: ReportEventType = Field(
        ...,
        description="Type of event"
    )
    severity: EventSeverity = Field(
        default=EventSeverity.INFO,
        description="Event severity"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by every event of one generation call"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ReportEventBuilder:
    """
    Helper class to build report events with common patterns.

    Usage:
        event = ReportEventBuilder.report_received(correlation_id, "2025-01-01", "2025-01-31")
        event = ReportEventBuilder.report_rendered(correlation_id, "period", 2, 18234)
    """

    @staticmethod
    def report_received(
        correlation_id: UUID,
        start_date: str,
        end_date: str,
        location_name: Optional[str] = None,
    ) -> ReportEvent:
        return ReportEvent(
            event_type=ReportEventType.REPORT_RECEIVED,
            correlation_id=correlation_id,
            description=f"Report received for {start_date} to {end_date}",
            details={
                "start_date": start_date,
                "end_date": end_date,
                "location_name": location_name,
            },
        )

    @staticmethod
    def report_parsed(
        correlation_id: UUID,
        mode: str,
        sections_found: list[str],
        num_months: Optional[int] = None,
    ) -> ReportEvent:
        details: dict[str, Any] = {
            "mode": mode,
            "sections_found": sections_found,
        }
        if num_months is not None:
            details["num_months"] = num_months
        severity = EventSeverity.INFO if sections_found else EventSeverity.WARNING
        return ReportEvent(
            event_type=ReportEventType.REPORT_PARSED,
            severity=severity,
            correlation_id=correlation_id,
            description=f"Parsed {mode} report with {len(sections_found)} sections",
            details=details,
        )

    @staticmethod
    def report_rendered(
        correlation_id: UUID,
        mode: str,
        page_count: int,
        size_bytes: int,
    ) -> ReportEvent:
        return ReportEvent(
            event_type=ReportEventType.REPORT_RENDERED,
            correlation_id=correlation_id,
            description=f"Rendered {mode} report: {page_count} page(s)",
            details={
                "mode": mode,
                "page_count": page_count,
                "size_bytes": size_bytes,
            },
        )

    @staticmethod
    def report_failed(
        correlation_id: UUID,
        error_type: str,
        error_message: str,
    ) -> ReportEvent:
        return ReportEvent(
            event_type=ReportEventType.REPORT_FAILED,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Report generation failed: {error_type}",
            error_message=error_message,
        )
