"""Report audit logging package."""

from pnl_report.audit.logger import (
    ReportAuditLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["ReportAuditLogger", "configure_logging", "create_correlation_id"]
