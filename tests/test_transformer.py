"""
Tests for the recursive item transformer

Covers the header dispatch order, indent handling, and how keyword
state is threaded from one sibling to the next.
"""

import pytest

from factories import data_row, raw_rows, section_row
from pnl_report.models.report import MonthlyItem, ReportItem
from pnl_report.parsing.rules import KeywordsFound
from pnl_report.parsing.transformer import (
    MonthlyItemTransformer,
    PeriodItemTransformer,
    TransformContext,
)


@pytest.fixture
def transformer():
    return PeriodItemTransformer()


def labels(items):
    return [item.label for item in items]


class TestTransformContext:
    """Tests for the threaded context."""

    def test_top_level_has_no_indent(self):
        """Test that depth 0 attaches no indent."""
        assert TransformContext().indent is None
        assert TransformContext().nested().indent == 1

    def test_keywords_merge(self):
        """Test that keyword flags only accumulate."""
        context = TransformContext().with_keywords(KeywordsFound(clover=True))
        context = context.with_keywords(KeywordsFound())
        assert context.keywords_found.clover


class TestLeafRows:
    """Tests for data rows."""

    def test_data_rows_become_items(self, transformer):
        """Test plain data rows."""
        items, _ = transformer.transform(
            raw_rows(data_row("Sales", "100.00"), data_row("Tips", "5.00")),
            TransformContext(),
        )
        assert items == [
            ReportItem(label="Sales", value="100.00"),
            ReportItem(label="Tips", value="5.00"),
        ]

    def test_empty_label_dropped(self, transformer):
        """Test that unlabeled rows are omitted."""
        items, _ = transformer.transform(raw_rows(data_row("", "1.00")), TransformContext())
        assert items == []

    def test_zero_value_kept(self, transformer):
        """Test that a data row keeps its zero value."""
        items, _ = transformer.transform(raw_rows(data_row("Refunds", "0.00")), TransformContext())
        assert items[0].value == "0.00"

    def test_excluded_label_dropped(self, transformer):
        """Test the scoped exclusion on data rows."""
        rows = raw_rows(data_row("Online Subscription", "9.00"), data_row("Supplies", "1.00"))
        items, _ = transformer.transform(rows, TransformContext(expense_section_header="Expense C"))
        assert labels(items) == ["Supplies"]

        items, _ = transformer.transform(rows, TransformContext(expense_section_header="Expense D"))
        assert labels(items) == ["Online Subscription", "Supplies"]

    def test_unknown_rows_dropped(self, transformer):
        """Test that rows of no recognisable shape are skipped."""
        items, _ = transformer.transform(raw_rows({"type": "Section"}), TransformContext())
        assert items == []


class TestRegularHeaders:
    """Tests for header rows outside Income and payroll."""

    def test_single_line_no_expansion(self, transformer):
        """Test that a regular header is one line with its summary value."""
        rows = raw_rows(section_row(
            "Utilities",
            [data_row("Hydro", "40.00"), data_row("Gas", "60.00")],
            summary=("Total Utilities", "100.00"),
        ))
        items, _ = transformer.transform(rows, TransformContext())
        assert items == [ReportItem(label="Utilities", value="100.00")]

    def test_no_valid_value_dropped(self, transformer):
        """Test that a regular header without a value is omitted."""
        rows = raw_rows(section_row("Utilities", [data_row("Hydro", "0.00")], summary=("Total Utilities", "0.00")))
        items, _ = transformer.transform(rows, TransformContext())
        assert items == []

    def test_summary_label_fallback(self, transformer):
        """Test that an empty header label falls back to the summary label."""
        rows = raw_rows(section_row("", [data_row("Hydro", "1")], summary=("Total Utilities", "40.00")))
        items, _ = transformer.transform(rows, TransformContext())
        assert items == [ReportItem(label="Total Utilities", value="40.00")]

    def test_summary_label_fallback_rechecks_exclusion(self, transformer):
        """Test that the fallback label is checked against exclusions too."""
        rows = raw_rows(section_row("", [data_row("x", "1")], summary=("Online Subscription", "40.00")))
        items, _ = transformer.transform(rows, TransformContext(expense_section_header="Expense C"))
        assert items == []

    def test_excluded_header(self, transformer):
        """Test that an excluded header drops its whole subtree."""
        rows = raw_rows(section_row(
            "E17 Payroll Expenses",
            [data_row("Wages", "10.00")],
            summary=("Total", "10.00"),
        ))
        items, _ = transformer.transform(rows, TransformContext())
        assert items == []


class TestPayrollHeaders:
    """Tests for payroll subtrees."""

    def test_header_and_children(self, transformer):
        """Test that payroll headers print and expand one level deeper."""
        rows = raw_rows(section_row(
            "Payroll",
            [data_row("Kitchen", "60.00"), data_row("Front", "40.00")],
            summary=("Total Payroll", "100.00"),
        ))
        items, _ = transformer.transform(rows, TransformContext())
        assert items == [
            ReportItem(label="Payroll", value="100.00"),
            ReportItem(label="Kitchen", value="60.00", indent=1),
            ReportItem(label="Front", value="40.00", indent=1),
        ]

    def test_zero_payroll_header_still_prints(self, transformer):
        """Test that payroll headers are never suppressed."""
        rows = raw_rows(section_row("Wages", [data_row("Kitchen", "0.00")]))
        items, _ = transformer.transform(rows, TransformContext())
        assert items[0] == ReportItem(label="Wages", value="0.00")

    def test_payroll_sub_section_expands_nested_headers(self, transformer):
        """Test that every header inside a payroll sub-section expands."""
        rows = raw_rows(section_row(
            "Kitchen",
            [section_row("Cooks", [data_row("Line", "30.00")], summary=("Total Cooks", "30.00"))],
            summary=("Total Kitchen", "30.00"),
        ))
        items, _ = transformer.transform(rows, TransformContext(expense_section_header="Expense B - Payroll"))
        assert [(item.label, item.indent) for item in items] == [
            ("Kitchen", None),
            ("Cooks", 1),
            ("Line", 2),
        ]

    def test_indent_does_not_leak_to_siblings(self, transformer):
        """Test that siblings after a nested subtree keep the parent indent."""
        rows = raw_rows(
            section_row("Payroll", [data_row("Kitchen", "1.00")], summary=("Total Payroll", "1.00")),
            data_row("Rent", "5.00"),
        )
        items, _ = transformer.transform(rows, TransformContext())
        assert items[-1] == ReportItem(label="Rent", value="5.00")


class TestIncomeKeywords:
    """Tests for keyword bucketing in the Income section."""

    def income(self):
        return TransformContext(is_income_section=True)

    def test_header_with_keyword_single_line(self, transformer):
        """Test that a header naming a keyword is one line, not expanded."""
        rows = raw_rows(section_row(
            "Clover Sales",
            [data_row("Card", "70.00"), data_row("Cash", "30.00")],
            summary=("Total Clover Sales", "100.00"),
        ))
        items, context = transformer.transform(rows, self.income())
        assert items == [ReportItem(label="Clover Sales", value="100.00")]
        assert context.keywords_found == KeywordsFound(clover=True)

    def test_nested_keyword_expands(self, transformer):
        """Test that a descendant keyword expands the header."""
        rows = raw_rows(section_row(
            "Delivery",
            [data_row("Courier Orders", "20.00"), data_row("Pickup", "10.00")],
            summary=("Total Delivery", "30.00"),
        ))
        items, context = transformer.transform(rows, self.income())
        assert items == [
            ReportItem(label="Delivery", value="30.00"),
            ReportItem(label="Courier Orders", value="20.00", indent=1),
            ReportItem(label="Pickup", value="10.00", indent=1),
        ]
        assert context.keywords_found.courier

    def test_nested_keyword_without_value_promotes_children(self, transformer):
        """Test that a valueless header with inline values yields only its children."""
        rows = raw_rows(section_row(
            "Delivery",
            [data_row("Courier Orders", "20.00")],
            summary=("Total Delivery", "0.00"),
            header_values=("0.00", "0.00", "20.00"),
        ))
        items, _ = transformer.transform(rows, self.income())
        assert items == [ReportItem(label="Courier Orders", value="20.00", indent=1)]

    def test_no_keyword_plain_header(self, transformer):
        """Test that a header with no keywords is one line."""
        rows = raw_rows(section_row(
            "Dine In",
            [data_row("Food", "80.00"), data_row("Drinks", "20.00")],
            summary=("Total Dine In", "100.00"),
        ))
        items, _ = transformer.transform(rows, self.income())
        assert items == [ReportItem(label="Dine In", value="100.00")]

    def test_keyword_state_is_order_dependent(self, transformer):
        """Test that once both keywords are seen, later rows collapse."""
        rows = raw_rows(
            section_row(
                "Card Sales",
                [data_row("Clover Terminal", "50.00")],
                summary=("Total Card Sales", "50.00"),
            ),
            section_row(
                "Courier",
                [data_row("App A", "30.00")],
                summary=("Total Courier", "30.00"),
            ),
            section_row(
                "Catering",
                [data_row("Clover Catering", "20.00")],
                summary=("Total Catering", "20.00"),
            ),
        )
        items, context = transformer.transform(rows, self.income())

        assert context.keywords_found == KeywordsFound(clover=True, courier=True)
        assert items == [
            ReportItem(label="Card Sales", value="50.00"),
            ReportItem(label="Clover Terminal", value="50.00", indent=1),
            ReportItem(label="Courier", value="30.00"),
            ReportItem(label="Catering", value="20.00"),
        ]

    def test_same_rows_reordered_expand_differently(self, transformer):
        """Test that a row before the keywords are known still expands."""
        rows = raw_rows(
            section_row(
                "Catering",
                [data_row("Clover Catering", "20.00")],
                summary=("Total Catering", "20.00"),
            ),
            section_row(
                "Courier",
                [data_row("App A", "30.00")],
                summary=("Total Courier", "30.00"),
            ),
        )
        items, _ = transformer.transform(rows, self.income())
        assert labels(items) == ["Catering", "Clover Catering", "Courier"]

    def test_data_row_keywords_tracked(self, transformer):
        """Test that keyword data rows in Income update the context."""
        _, context = transformer.transform(raw_rows(data_row("Clover", "1.00")), self.income())
        assert context.keywords_found.clover

    def test_keywords_ignored_outside_income(self, transformer):
        """Test that keyword state is only kept for Income."""
        _, context = transformer.transform(raw_rows(data_row("Clover", "1.00")), TransformContext())
        assert not context.keywords_found.any


class TestMonthlyTransformer:
    """Tests for the monthly variant."""

    def test_requires_a_month(self):
        """Test that zero months is rejected."""
        with pytest.raises(ValueError):
            MonthlyItemTransformer(0)

    def test_leaf_values_padded(self):
        """Test that every item has exactly num_months values."""
        transformer = MonthlyItemTransformer(3)
        items, _ = transformer.transform(raw_rows(data_row("Sales", "1.00", "2.00")), TransformContext())
        assert items == [MonthlyItem(label="Sales", values=["1.00", "2.00", "0"], total="2.00")]

    def test_header_uses_summary_months(self):
        """Test that a regular header reads its summary months and total."""
        transformer = MonthlyItemTransformer(2)
        rows = raw_rows(section_row(
            "Utilities",
            [data_row("Hydro", "1", "1", "2")],
            summary=("Total Utilities", "10.00", "20.00", "30.00"),
        ))
        items, _ = transformer.transform(rows, TransformContext())
        assert items == [MonthlyItem(label="Utilities", values=["10.00", "20.00"], total="30.00")]

    def test_header_fallback(self):
        """Test the header values when the summary total is zero."""
        transformer = MonthlyItemTransformer(2)
        rows = raw_rows(section_row(
            "Utilities",
            [data_row("Hydro", "1", "1", "2")],
            summary=("Total Utilities", "0", "0", "0"),
            header_values=("5.00", "6.00", "11.00"),
        ))
        items, _ = transformer.transform(rows, TransformContext())
        assert items[0].values == ["5.00", "6.00"]
        assert items[0].total == "11.00"

    def test_payroll_zero_placeholder(self):
        """Test the zero amount for a valueless payroll header."""
        transformer = MonthlyItemTransformer(2)
        rows = raw_rows(section_row("Payroll", [data_row("Kitchen", "1", "1", "2")]))
        items, _ = transformer.transform(rows, TransformContext())
        assert items[0] == MonthlyItem(label="Payroll", values=["0", "0"], total="0.00")
        assert items[1].indent == 1
        assert all(len(item.values) == 2 for item in items)
