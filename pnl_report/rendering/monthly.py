"""
Monthly Mode Strategy

N month columns plus a total column, each split into a value ("CUR")
and a percentage ("%") half.

Percentages use two different denominators on purpose: a month column
is a share of THAT month's income, the total column is a share of the
whole period's income.
"""

from dataclasses import dataclass
from typing import Optional

from pnl_report.models.report import (
    MonthInfo,
    MonthlyExpensesBlock,
    MonthlyItem,
    MonthlyReport,
    MonthlySection,
    MonthlyTotal,
    ReportMode,
    TargetPercentages,
)
from pnl_report.rendering.engine import ReportRenderer
from pnl_report.rendering.formatting import amount_or_zero, format_percentage
from pnl_report.rendering.layout import (
    EXPENSE_SECTION_BREAK_HEIGHT,
    GROSS_PROFIT_BREAK_HEIGHT,
    MONTHLY_LAYOUT,
    PROFIT_BREAK_HEIGHT,
    SECTION_BREAK_HEIGHT,
    MonthlyLayout,
)
from pnl_report.rendering.strategy import RenderStrategy


@dataclass(frozen=True)
class ColumnGeometry:
    """
    Horizontal layout of the monthly table.

    Column positions are centres: column i is centred at
    `first_column_x + i * column_width`.
    """
    margin: float
    label_width: float
    column_width: float
    table_end_x: float
    num_columns: int
    show_month_columns: bool

    @classmethod
    def compute(
        cls,
        page_width: float,
        margin: float,
        num_months: int,
        layout: MonthlyLayout = MONTHLY_LAYOUT,
    ) -> "ColumnGeometry":
        """
        Pick the label width from the breakpoint table, then share the
        rest of the page between the value columns.
        """
        show_month_columns = num_months > 1
        num_columns = num_months + 1 if show_month_columns else 1
        available = page_width - 2 * margin

        if num_months == 1:
            ratio = layout.single_month_label_ratio
        elif num_columns <= 3:
            ratio = layout.few_columns_label_ratio
        elif num_columns <= 5:
            ratio = layout.some_columns_label_ratio
        else:
            ratio = layout.many_columns_label_ratio
        label_width = available * ratio

        column_width = (available - label_width) / (num_columns - layout.column_width_offset)

        return cls(
            margin=margin,
            label_width=label_width,
            column_width=column_width,
            table_end_x=page_width - margin,
            num_columns=num_columns,
            show_month_columns=show_month_columns,
        )

    @property
    def first_column_x(self) -> float:
        return self.margin + self.label_width

    def column_x(self, index: int) -> float:
        return self.first_column_x + index * self.column_width

    @property
    def total_column_x(self) -> float:
        return self.column_x(self.num_columns - 1)


class MonthlyStrategy(RenderStrategy):
    """Renders a MonthlyReport for the given months."""

    mode = ReportMode.MONTHLY

    def __init__(
        self,
        months: list[MonthInfo],
        show_gross_profit: bool = False,
        layout: MonthlyLayout = MONTHLY_LAYOUT,
    ):
        if not months:
            raise ValueError("Monthly rendering needs at least one month")
        self.months = months
        self.show_gross_profit = show_gross_profit
        self.layout = layout
        self.month_incomes: list[float] = []
        self.income_total = 0.0
        self.geometry: Optional[ColumnGeometry] = None
        self._renderer: Optional[ReportRenderer] = None

    @property
    def single_month(self) -> bool:
        return len(self.months) == 1

    def month_labels(self) -> list[str]:
        return [month.label for month in self.months]

    def percentage(self, value: str, month_index: Optional[int] = None) -> str:
        """
        Percentage of income for one cell.

        `month_index=None` means the total column.
        """
        if month_index is None:
            base = self.income_total
        elif month_index < len(self.month_incomes):
            base = self.month_incomes[month_index]
        else:
            base = self.month_incomes[0] if self.month_incomes else 0.0
        return format_percentage(value, base)

    # =========================================================================
    # RENDER
    # =========================================================================

    def render(
        self,
        renderer: ReportRenderer,
        report: MonthlyReport,
        targets: TargetPercentages,
    ) -> None:
        self._renderer = renderer
        self.geometry = ColumnGeometry.compute(
            renderer.page_width, renderer.margin, len(self.months), self.layout
        )

        income_total = report.income.total if report.income is not None else None
        if income_total is not None:
            self.month_incomes = [amount_or_zero(v or "0") for v in income_total.values]
            self.income_total = amount_or_zero(income_total.total)
        else:
            self.month_incomes = []
            self.income_total = 0.0

        self.draw_section(report.income)
        self.draw_section(report.cost_of_sales, targets.cost_of_sales)
        if self.show_gross_profit:
            self.draw_gross_profit(report.gross_profit)
        self.draw_expenses(report.expenses, targets)
        self.draw_section(report.other_income)
        self.draw_profit(report.profit, targets.profit)

    # =========================================================================
    # COLUMN HEADERS
    # =========================================================================

    def draw_month_column_headers(self) -> None:
        r, geo, layout = self._renderer, self.geometry, self.layout
        labels = self.month_labels()

        r.use_font(layout.column_header_font_size, "bold")

        if geo.show_month_columns:
            for index, label in enumerate(labels):
                r.draw_text(label[:layout.max_month_label_length], geo.column_x(index), r.y, align="center")

        total_label = labels[0] if self.single_month else "Total"
        r.draw_text(total_label, geo.total_column_x, r.y, align="center")
        r.move_down(3)

    def draw_sub_headers(self) -> None:
        r, geo, layout = self._renderer, self.geometry, self.layout
        r.set_font_size(layout.sub_header_font_size)

        if geo.show_month_columns:
            for index in range(len(self.months)):
                value_x, percent_x = self._cell_positions(geo.column_x(index), is_total=False)
                r.draw_text("CUR", value_x, r.y, align="left")
                r.draw_text("%", percent_x, r.y, align="right")

        value_x, percent_x = self._cell_positions(geo.total_column_x, is_total=True)
        r.draw_text("CUR", value_x, r.y, align="left")
        r.draw_text("%", percent_x, r.y, align="right")
        r.move_down(4)

    def _cell_positions(self, center_x: float, is_total: bool) -> tuple[float, float]:
        """(value x, left-aligned; percent x, right-aligned) for one column."""
        geo, margin = self.geometry, self.layout.column_margin
        half = geo.column_width / 2
        if is_total and not geo.show_month_columns:
            value_x = center_x - half
        else:
            value_x = center_x - half + margin
        return value_x, center_x + half - margin

    # =========================================================================
    # SECTIONS
    # =========================================================================

    def draw_section_header(self, header: str, is_important: bool = False) -> None:
        r, geo, layout = self._renderer, self.geometry, self.layout

        r.check_page_break(SECTION_BREAK_HEIGHT)

        size = (
            layout.important_section_header_font_size
            if is_important
            else layout.section_header_font_size
        )
        r.use_font(size, "bold")
        r.draw_text(header, r.margin, r.y)
        r.move_down(6)
        r.draw_line(r.margin, r.y - 2, geo.table_end_x, r.y - 2, layout.header_line_width)
        r.move_down(4)

        self.draw_month_column_headers()
        self.draw_sub_headers()
        r.draw_column_header_line(geo.table_end_x, layout.header_line_width)

    def draw_section(self, section: Optional[MonthlySection], target: Optional[float] = None) -> None:
        if section is None:
            return
        self.draw_section_header(section.header, section.is_important)
        self.draw_items(section.items)
        self.draw_section_total(section, target)

    def _label_width_for(self, indent_offset: float) -> float:
        layout = self.layout
        font_size = layout.item_font_size
        if self.single_month:
            padding = max(10, font_size * layout.single_month_padding_multiplier)
            safety = layout.single_month_safety_ratio
        else:
            padding = max(20, font_size * layout.multi_month_padding_multiplier)
            safety = layout.multi_month_safety_ratio
        available = (self.geometry.label_width - indent_offset - padding) * safety
        return max(available, layout.min_text_width)

    def draw_label(self, label: str, x: float, start_y: float, max_width: float) -> list[str]:
        """
        Draw a wrapped label and return the lines actually drawn.

        A line that still overruns the label column after wrapping is
        wrapped again at the width that is really left.
        """
        r, layout = self._renderer, self.layout
        max_x = r.margin + self.geometry.label_width - 5
        drawn: list[str] = []

        for line in r.wrap(label, max_width):
            if r.document.text_width(line) + x > max_x:
                pieces = r.wrap(line, max(max_x - x - 2, 10))
            else:
                pieces = [line]
            for piece in pieces:
                r.draw_text(piece, x, start_y + len(drawn) * layout.line_spacing)
                drawn.append(piece)

        return drawn

    def draw_items(self, items: list[MonthlyItem]) -> None:
        r, layout = self._renderer, self.layout

        r.use_font(layout.item_font_size)

        for item in items:
            if r.check_page_break(layout.line_height):
                r.use_font(layout.item_font_size)

            indent_offset = item.indent * layout.indent_per_level if item.indent else 0
            start_y = r.y
            lines = self.draw_label(
                item.label,
                r.margin + indent_offset,
                start_y,
                self._label_width_for(indent_offset),
            )

            self.draw_values(item.values, item.total, start_y)

            r.draw_row_line(start_y, lines, layout.line_spacing, self.geometry.table_end_x, layout.row_line_width)
            r.use_font(layout.item_font_size)
            r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing)

    def draw_values(self, values: list[str], total: str, y: float) -> float:
        """
        Draw month values and the total column. Returns the total
        column's percent x, where target annotations go.
        """
        r, geo, layout = self._renderer, self.geometry, self.layout

        if geo.show_month_columns:
            for index, value in enumerate(values):
                value_x, percent_x = self._cell_positions(geo.column_x(index), is_total=False)
                r.set_font_size(layout.item_font_size)
                r.draw_text(r.format_currency(value), value_x, y, align="left")
                percentage = self.percentage(value, index)
                if percentage:
                    r.draw_text(percentage, percent_x, y, align="right")

        value_x, percent_x = self._cell_positions(geo.total_column_x, is_total=True)
        r.set_font_size(layout.item_font_size)
        r.draw_text(r.format_currency(total), value_x, y, align="left")
        percentage = self.percentage(total)
        if percentage:
            r.draw_text(percentage, percent_x, y, align="right")

        return percent_x

    def _total_padding(self, font_size: float) -> float:
        layout = self.layout
        if self.single_month:
            return max(10, font_size * layout.bold_single_month_padding_multiplier)
        return self._renderer.bold_text_padding(
            font_size, layout.bold_multi_month_padding_multiplier, 20
        )

    def _draw_total_row(
        self,
        total: MonthlyTotal,
        font_size: float,
        target: Optional[float] = None,
    ) -> tuple[list[str], float]:
        r, layout = self._renderer, self.layout
        r.use_font(font_size, "bold")
        lines, start_y = r.draw_total_label(
            total.label,
            self.geometry.label_width,
            self._total_padding(font_size),
            layout.line_spacing,
        )
        percent_x = self.draw_values(total.values, total.total, start_y)
        if target is not None:
            r.draw_target(target, percent_x, start_y + 3, layout.target_font_size)
        return lines, start_y

    def draw_section_total(self, section: MonthlySection, target: Optional[float] = None) -> None:
        if section.total is None or not section.total.label:
            return

        r, layout = self._renderer, self.layout
        r.check_page_break(layout.line_height + 2)
        r.move_down(2)

        size = layout.important_total_font_size if section.is_important else layout.total_font_size
        lines, start_y = self._draw_total_row(section.total, size, target)
        r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing) + layout.section_spacing

    def draw_gross_profit(self, gross_profit: Optional[MonthlyTotal]) -> None:
        if gross_profit is None:
            return

        r, layout = self._renderer, self.layout
        r.check_page_break(GROSS_PROFIT_BREAK_HEIGHT)
        r.use_font(layout.important_total_font_size, "bold")
        r.draw_text(gross_profit.label, r.margin, r.y)
        self.draw_values(gross_profit.values, gross_profit.total, r.y)
        r.move_down(layout.line_height + layout.section_spacing)

    # =========================================================================
    # EXPENSES
    # =========================================================================

    def draw_expenses(self, expenses: MonthlyExpensesBlock, targets: TargetPercentages) -> None:
        if expenses.is_empty:
            return

        r, geo, layout = self._renderer, self.geometry, self.layout
        r.draw_expenses_header(geo.table_end_x, layout.section_header_font_size, layout.header_line_width)
        self.draw_month_column_headers()
        self.draw_sub_headers()
        r.draw_column_header_line(geo.table_end_x, layout.header_line_width)

        for index, section in enumerate(expenses.sections):
            self.draw_expense_section(section, index, targets)

        if expenses.total is not None:
            self.draw_expenses_total(expenses.total)

    def draw_expense_section(
        self,
        section: MonthlySection,
        index: int,
        targets: TargetPercentages,
    ) -> None:
        r, layout = self._renderer, self.layout

        r.check_page_break(EXPENSE_SECTION_BREAK_HEIGHT)
        if index > 0:
            r.move_down(3)

        r.use_font(layout.section_header_font_size, "bold")
        r.draw_text(section.header, r.margin, r.y)
        r.move_down(6)

        if not r.is_fixed_expense(section.header):
            self.draw_items(section.items)

        if section.total is not None and section.total.label:
            self.draw_expense_section_total(section.total, targets)

    def draw_expense_section_total(self, total: MonthlyTotal, targets: TargetPercentages) -> None:
        r, layout = self._renderer, self.layout

        r.check_page_break(layout.line_height + 3)
        r.move_down(2)

        target = targets.payroll if r.contains_keyword(total.label, "PAYROLL") else None
        lines, start_y = self._draw_total_row(total, layout.total_font_size, target)

        r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing) + 2
        r.move_down(2)
        r.draw_line(r.margin, r.y, self.geometry.table_end_x, r.y, layout.expense_section_line_width)
        r.move_down(3)

    def draw_expenses_total(self, total: MonthlyTotal) -> None:
        r, layout = self._renderer, self.layout

        r.check_page_break(layout.line_height + 5)
        r.move_down(2)

        lines, start_y = self._draw_total_row(total, layout.total_font_size)
        r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing) + layout.section_spacing

    # =========================================================================
    # PROFIT
    # =========================================================================

    def draw_profit(self, profit: Optional[MonthlyTotal], target: Optional[float] = None) -> None:
        if profit is None:
            return

        r, layout = self._renderer, self.layout
        r.check_page_break(PROFIT_BREAK_HEIGHT)
        r.move_down(2)

        r.use_font(layout.profit_font_size, "bold")
        r.draw_text(profit.label, r.margin, r.y)
        percent_x = self.draw_values(profit.values, profit.total, r.y)

        if target is not None:
            r.draw_target(target, percent_x, r.y + 3, layout.target_font_size)
