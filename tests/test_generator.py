"""End-to-end tests: raw document in, PDF bytes out."""

import base64

import pytest

from pnl_report.audit.logger import ReportAuditLogger
from pnl_report.config.settings import Settings
from pnl_report.generator import generate_pdf, generate_pdf_base64, pdf_to_base64
from pnl_report.models.report import TargetPercentages
from pnl_report.parsing.parser import InvalidReportError
from pnl_report.rendering.period import PeriodStrategy


class TestGeneratePdf:
    """Tests for generate_pdf()."""

    def test_period_report(self, period_report_data):
        """Test a complete period report renders to a PDF."""
        pdf = generate_pdf(period_report_data, "2025-01-01", "2025-01-31", location_name="Downtown")
        assert pdf.startswith(b"%PDF")

    def test_monthly_report(self, monthly_report_data):
        """Test a monthly report renders to a PDF."""
        pdf = generate_pdf(monthly_report_data, "2025-01-01", "2025-02-28")
        assert pdf.startswith(b"%PDF")

    def test_empty_report(self):
        """Test that an empty document still gives a PDF with the header."""
        assert generate_pdf({}, "a", "b").startswith(b"%PDF")

    def test_custom_targets(self, period_report_data):
        """Test that caller targets are accepted."""
        targets = TargetPercentages(cost_of_sales=28.5)
        assert generate_pdf(period_report_data, "a", "b", targets=targets).startswith(b"%PDF")

    def test_invalid_report(self):
        """Test that non-mapping input is rejected."""
        with pytest.raises(InvalidReportError):
            generate_pdf(["not", "a", "report"], "a", "b")

    def test_letter_page_size(self, period_report_data, monkeypatch):
        """Test the LETTER page size setting."""
        monkeypatch.setenv("PNL_RENDER_PAGE_SIZE", "LETTER")
        assert generate_pdf(period_report_data, "a", "b", settings=Settings()).startswith(b"%PDF")


class TestGenerationEvents:
    """Tests for the event trail of one generation call."""

    def test_success_events(self, period_report_data, recording_logger):
        """Test received, parsed and rendered events share one correlation id."""
        generate_pdf(period_report_data, "a", "b", audit_logger=ReportAuditLogger(recording_logger))

        assert recording_logger.event_types() == ["report_received", "report_parsed", "report_rendered"]
        ids = {kwargs["correlation_id"] for _, _, kwargs in recording_logger.calls}
        assert len(ids) == 1

        parsed = recording_logger.calls[1][2]
        assert parsed["details"]["mode"] == "period"
        assert "INCOME" in parsed["details"]["sections_found"]

    def test_monthly_parsed_event(self, monthly_report_data, recording_logger):
        """Test the month count on monthly reports."""
        generate_pdf(monthly_report_data, "a", "b", audit_logger=ReportAuditLogger(recording_logger))
        parsed = recording_logger.calls[1][2]
        assert parsed["details"]["mode"] == "monthly"
        assert parsed["details"]["num_months"] == 2

    def test_empty_report_warns(self, recording_logger):
        """Test that a report with no sections logs a warning."""
        generate_pdf({}, "a", "b", audit_logger=ReportAuditLogger(recording_logger))
        level, _, kwargs = recording_logger.calls[1]
        assert level == "warning"
        assert kwargs["details"]["sections_found"] == []

    def test_failure_event(self, recording_logger):
        """Test that a rejected report is logged before raising."""
        with pytest.raises(InvalidReportError):
            generate_pdf("nope", "a", "b", audit_logger=ReportAuditLogger(recording_logger))
        assert recording_logger.event_types() == ["report_received", "report_failed"]
        assert recording_logger.calls[-1][0] == "error"

    def test_parse_failure_event(self, period_report_data, recording_logger, monkeypatch):
        """Test that an error while parsing a valid document is logged before raising."""
        def broken_parse(raw):
            raise RuntimeError("parse exploded")

        monkeypatch.setattr("pnl_report.generator.parse_period_report", broken_parse)
        with pytest.raises(RuntimeError):
            generate_pdf(period_report_data, "a", "b", audit_logger=ReportAuditLogger(recording_logger))

        assert recording_logger.event_types() == ["report_received", "report_failed"]
        level, _, kwargs = recording_logger.calls[-1]
        assert level == "error"
        assert kwargs["error_message"] == "parse exploded"

    def test_render_failure_event(self, period_report_data, recording_logger, monkeypatch):
        """Test that an error while rendering is logged after the parsed event."""
        def broken_render(self, renderer, report, targets):
            raise RuntimeError("render exploded")

        monkeypatch.setattr(PeriodStrategy, "render", broken_render)
        with pytest.raises(RuntimeError):
            generate_pdf(period_report_data, "a", "b", audit_logger=ReportAuditLogger(recording_logger))

        assert recording_logger.event_types() == ["report_received", "report_parsed", "report_failed"]
        assert recording_logger.calls[-1][0] == "error"


class TestBase64:
    """Tests for base64 export."""

    def test_round_trip(self):
        """Test that the encoding decodes to the same bytes."""
        assert base64.b64decode(pdf_to_base64(b"%PDF-1.4")) == b"%PDF-1.4"

    def test_generate_base64(self, period_report_data):
        """Test the base64 variant of generate_pdf."""
        encoded = generate_pdf_base64(period_report_data, "a", "b")
        assert base64.b64decode(encoded).startswith(b"%PDF")

    def test_generate_base64_events(self, period_report_data, recording_logger):
        """Test that the base64 variant logs through the given audit logger."""
        generate_pdf_base64(period_report_data, "a", "b", audit_logger=ReportAuditLogger(recording_logger))
        assert recording_logger.event_types() == ["report_received", "report_parsed", "report_rendered"]
