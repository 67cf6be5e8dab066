"""
Shared fixtures.

No network and no files outside tmp_path: every report is built in
memory from the factories module.
"""

import pytest

from factories import data_row, month_column, report, section_row, summary_row
from pnl_report.config.settings import get_settings
from pnl_report.rendering.document import PdfDocument


class RecordingDocument(PdfDocument):
    """PdfDocument that remembers every string drawn."""

    def __init__(self, page_size: str = "A4"):
        super().__init__(page_size)
        self.drawn = []

    def text(self, text, x, y, align="left"):
        self.drawn.append((text, x, y, align, self.font_style, self.font_size))
        super().text(text, x, y, align=align)

    @property
    def texts(self):
        return [entry[0] for entry in self.drawn]

    def find(self, text):
        """All draw calls for exactly `text`."""
        return [entry for entry in self.drawn if entry[0] == text]


class RecordingLogger:
    """Stands in for a structlog logger."""

    def __init__(self):
        self.calls = []

    def _record(self, level):
        def log(event, **kwargs):
            self.calls.append((level, event, kwargs))
        return log

    def __getattr__(self, level):
        if level in ("debug", "info", "warning", "error"):
            return self._record(level)
        raise AttributeError(level)

    def event_types(self):
        return [kwargs.get("event_type") for _, _, kwargs in self.calls]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def recording_document():
    return RecordingDocument()


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def period_report_data():
    """A complete single-period P&L."""
    return report(
        section_row(
            "Income",
            [data_row("Sales", "800.00"), data_row("Catering", "200.00")],
            summary=("Total Income", "1000.00"),
            group="Income",
        ),
        section_row(
            "Cost of Goods Sold",
            [data_row("Food Purchases", "300.00")],
            summary=("Total Cost of Goods Sold", "300.00"),
            group="COGS",
        ),
        summary_row(("Gross Profit", "700.00"), group="GrossProfit"),
        section_row(
            "Expenses",
            [
                section_row(
                    "Expense A - Fixed",
                    [data_row("Rent", "200.00")],
                    summary=("Total Expense A - Fixed", "200.00"),
                ),
                section_row(
                    "Expense B - Payroll",
                    [data_row("Wages", "150.00")],
                    summary=("Total Expense B - Payroll", "150.00"),
                ),
                section_row(
                    "Expense C",
                    [
                        data_row("Online Subscription", "20.00"),
                        data_row("Supplies", "30.00"),
                    ],
                    summary=("Total Expense C", "50.00"),
                ),
                section_row(
                    "E17 Payroll Expenses",
                    [data_row("Duplicate Wages", "150.00")],
                    summary=("Total E17 Payroll Expenses", "150.00"),
                ),
            ],
            summary=("Total Expenses", "400.00"),
            group="Expenses",
        ),
        summary_row(("Net Income", "300.00"), group="NetIncome"),
        header={"ReportBasis": "Accrual", "Currency": "USD"},
    )


@pytest.fixture
def monthly_report_data():
    """A P&L summarized by month over January and February 2025."""
    return report(
        section_row(
            "Income",
            [data_row("Sales", "50.00", "150.00", "200.00")],
            summary=("Total Income", "100.00", "200.00", "300.00"),
            group="Income",
        ),
        section_row(
            "Expenses",
            [
                section_row(
                    "Expense A",
                    [data_row("Rent", "40.00", "40.00", "80.00")],
                    summary=("Total Expense A", "40.00", "40.00", "80.00"),
                ),
            ],
            summary=("Total Expenses", "40.00", "40.00", "80.00"),
            group="Expenses",
        ),
        summary_row(("Net Income", "60.00", "160.00", "220.00"), group="NetIncome"),
        header={"SummarizeColumnsBy": "Month", "Currency": "CAD"},
        columns=[
            {"ColTitle": ""},
            month_column("2025-01-01", "2025-01-31", "Jan 2025"),
            month_column("2025-02-01", "2025-02-28", "Feb 2025"),
            {"ColTitle": "Total"},
        ],
    )
