"""
Tests for the P&L report models

Test strategy:
1. Raw models accept whatever the accounting API sends, degrading odd shapes
2. Typed report models enforce their invariants
3. No files and no network
"""

import pytest
from pydantic import ValidationError

from pnl_report.config.settings import TargetSettings
from pnl_report.models.raw import RawReport, RawRow
from pnl_report.models.report import (
    ExpensesBlock,
    MonthInfo,
    MonthlyReport,
    PeriodReport,
    ReportItem,
    Section,
    SectionTotal,
    TargetPercentages,
)


class TestRawModels:
    """Tests for the lenient raw report schema."""

    def test_data_row_parses(self):
        """Test a plain data row."""
        row = RawRow.model_validate({"type": "Data", "ColData": [{"value": "Sales"}, {"value": "10.00"}]})
        assert row.type == "Data"
        assert row.col_data[0].value == "Sales"
        assert row.children is None

    def test_numeric_values_coerced_to_strings(self):
        """Test that numbers in cells become strings."""
        row = RawRow.model_validate({"ColData": [{"value": "Sales"}, {"value": 12.5}]})
        assert row.col_data[1].value == "12.5"

    def test_non_list_col_data_becomes_absent(self):
        """Test that a wrong-typed ColData is treated as missing."""
        row = RawRow.model_validate({"ColData": "oops"})
        assert row.col_data is None

    def test_non_mapping_entries_become_empty_cells(self):
        """Test that a stray scalar in ColData does not break the row."""
        row = RawRow.model_validate({"ColData": ["junk", {"value": "5"}]})
        assert row.col_data[0].value is None
        assert row.col_data[1].value == "5"

    def test_non_mapping_rows_become_absent(self):
        """Test that a non-mapping Rows wrapper means no children."""
        row = RawRow.model_validate({"Header": {"ColData": [{"value": "X"}]}, "Rows": []})
        assert row.rows is None
        assert row.children is None

    def test_nested_children(self):
        """Test that nested rows are reachable through children."""
        row = RawRow.model_validate({
            "Header": {"ColData": [{"value": "Income"}]},
            "Rows": {"Row": [{"type": "Data", "ColData": [{"value": "Sales"}]}]},
        })
        assert len(row.children) == 1
        assert row.children[0].col_data[0].value == "Sales"

    def test_unknown_keys_ignored(self):
        """Test that extra keys are dropped silently."""
        report = RawReport.model_validate({"Rows": {"Row": []}, "Extra": 1})
        assert report.top_level_rows == []

    def test_report_without_rows(self):
        """Test that a report with no Rows has no top-level rows."""
        report = RawReport.model_validate({})
        assert report.top_level_rows == []
        assert report.column_list == []

    def test_column_meta_lookup(self):
        """Test MetaData lookup by name."""
        report = RawReport.model_validate({
            "Columns": {"Column": [{"MetaData": [{"Name": "StartDate", "Value": "2025-01-01"}]}]},
        })
        column = report.column_list[0]
        assert column.meta("StartDate").value == "2025-01-01"
        assert column.meta("EndDate") is None

    def test_legacy_month_envelope(self):
        """Test the legacy monthly envelope keeps only well-formed months."""
        report = RawReport.model_validate({
            "_monthlyMode": True,
            "_months": [{"year": 2025, "month": 1}, {"year": 2025, "month": 13}, "bad"],
        })
        assert report.legacy_monthly_mode is True
        assert [(m.year, m.month) for m in report.legacy_months] == [(2025, 1)]

    def test_legacy_flag_must_be_true(self):
        """Test that a truthy non-boolean flag does not enable monthly mode."""
        report = RawReport.model_validate({"_monthlyMode": "yes"})
        assert report.legacy_monthly_mode is False


class TestReportModels:
    """Tests for the typed report models."""

    def test_report_item_indent_optional(self):
        """Test that top-level items carry no indent."""
        item = ReportItem(label="Sales", value="10.00")
        assert item.indent is None

    def test_report_item_rejects_zero_indent(self):
        """Test that indent, when present, is at least 1."""
        with pytest.raises(ValidationError):
            ReportItem(label="Sales", value="10.00", indent=0)

    def test_report_item_is_frozen(self):
        """Test that items cannot be changed after parsing."""
        item = ReportItem(label="Sales", value="10.00")
        with pytest.raises(ValidationError):
            item.label = "Other"

    def test_empty_expenses_block(self):
        """Test the empty expenses block."""
        assert ExpensesBlock().is_empty
        assert not ExpensesBlock(total=SectionTotal(label="Total Expenses", value="1.00")).is_empty

    def test_sections_found_in_report_order(self):
        """Test that sections_found lists only present blocks."""
        report = PeriodReport(
            income=Section(header="Income"),
            profit=SectionTotal(label="Net Income", value="1.00"),
        )
        assert report.sections_found == ["INCOME", "PROFIT"]

    def test_monthly_report_needs_a_month(self):
        """Test that a monthly report has at least one month."""
        with pytest.raises(ValidationError):
            MonthlyReport(num_months=0)

    def test_month_label(self):
        """Test the short month label."""
        assert MonthInfo(year=2025, month=1).label == "Jan 2025"
        assert MonthInfo(year=2024, month=12).label == "Dec 2024"

    def test_month_out_of_range(self):
        """Test that months are 1 to 12."""
        with pytest.raises(ValidationError):
            MonthInfo(year=2025, month=13)


class TestTargetPercentages:
    """Tests for target percentages."""

    def test_defaults_fill_missing_targets(self):
        """Test that only missing targets are filled."""
        targets = TargetPercentages(payroll=20.0).with_defaults(TargetSettings())
        assert targets.cost_of_sales == 30.0
        assert targets.payroll == 20.0
        assert targets.profit == 15.0

    def test_defaults_loaded_from_environment(self, monkeypatch):
        """Test that defaults come from settings when none are passed."""
        monkeypatch.setenv("PNL_TARGET_PROFIT", "12.5")
        targets = TargetPercentages().with_defaults()
        assert targets.profit == 12.5

    def test_nan_is_unset(self):
        """Test that NaN is treated as no target."""
        assert TargetPercentages(profit=float("nan")).profit is None

    def test_from_form_all_empty(self):
        """Test that an empty form gives no targets at all."""
        assert TargetPercentages.from_form("", "", "") is None

    def test_from_form_partial(self):
        """Test that unparseable form values are ignored."""
        targets = TargetPercentages.from_form(cost_of_sales="35", payroll="", profit="abc")
        assert targets.cost_of_sales == 35.0
        assert targets.payroll is None
        assert targets.profit is None
