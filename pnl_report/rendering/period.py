"""
Period Mode Strategy

One value column ("CURRENT") and one "% of Income" column. Column
widths are fixed ratios of the printable width.
"""

from typing import Optional

from pnl_report.models.report import (
    ExpensesBlock,
    PeriodReport,
    ReportItem,
    ReportMode,
    Section,
    SectionTotal,
    TargetPercentages,
)
from pnl_report.rendering.engine import ReportRenderer
from pnl_report.rendering.formatting import amount_or_zero, format_percentage
from pnl_report.rendering.layout import (
    EXPENSE_SECTION_BREAK_HEIGHT,
    GROSS_PROFIT_BREAK_HEIGHT,
    PERIOD_LAYOUT,
    PROFIT_BREAK_HEIGHT,
    SECTION_BREAK_HEIGHT,
    PeriodLayout,
)
from pnl_report.rendering.strategy import RenderStrategy


class PeriodStrategy(RenderStrategy):
    """Renders a PeriodReport."""

    mode = ReportMode.PERIOD

    def __init__(self, show_gross_profit: bool = False, layout: PeriodLayout = PERIOD_LAYOUT):
        self.show_gross_profit = show_gross_profit
        self.layout = layout
        self.income_total = 0.0
        self._renderer: Optional[ReportRenderer] = None

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    @property
    def _available_width(self) -> float:
        return self._renderer.page_width - 2 * self._renderer.margin

    @property
    def label_width(self) -> float:
        return self._available_width * self.layout.label_width_ratio

    @property
    def value_x(self) -> float:
        """Right edge of the value column."""
        return self._renderer.margin + self.label_width

    @property
    def table_end_x(self) -> float:
        """Right edge of the percentage column."""
        layout = self.layout
        return self._renderer.margin + self._available_width * (
            layout.label_width_ratio + layout.value_width_ratio + layout.percentage_width_ratio
        )

    def percentage(self, value: str) -> str:
        return format_percentage(value, self.income_total)

    # =========================================================================
    # RENDER
    # =========================================================================

    def render(
        self,
        renderer: ReportRenderer,
        report: PeriodReport,
        targets: TargetPercentages,
    ) -> None:
        self._renderer = renderer
        self.income_total = (
            amount_or_zero(report.income.total.value)
            if report.income is not None and report.income.total is not None
            else 0.0
        )

        self.draw_section(report.income)
        self.draw_section(report.cost_of_sales, targets.cost_of_sales)
        if self.show_gross_profit:
            self.draw_gross_profit(report.gross_profit)
        self.draw_expenses(report.expenses, targets)
        self.draw_section(report.other_income)
        self.draw_profit(report.profit, targets.profit)

    # =========================================================================
    # SECTIONS
    # =========================================================================

    def draw_column_headers(self) -> None:
        r = self._renderer
        r.use_font(self.layout.column_header_font_size, "bold")
        r.draw_text("CURRENT", self.value_x, r.y, align="right")
        r.draw_text("% of Income", self.table_end_x, r.y, align="right")
        r.move_down(6)

    def draw_section(self, section: Optional[Section], target: Optional[float] = None) -> None:
        if section is None:
            return

        r, layout = self._renderer, self.layout

        if r.check_page_break(SECTION_BREAK_HEIGHT):
            r.use_font(layout.item_font_size)

        header_size = (
            layout.important_section_header_font_size
            if section.is_important
            else layout.section_header_font_size
        )
        r.use_font(header_size, "bold")
        r.draw_text(section.header, r.margin, r.y)
        r.move_down(8)
        r.draw_line(r.margin, r.y - 2, self.table_end_x, r.y - 2, layout.header_line_width)
        r.move_down(5)

        self.draw_column_headers()
        r.move_down(3)
        r.draw_column_header_line(self.table_end_x, layout.column_header_line_width)

        self.draw_items(section.items)
        self.draw_section_total(section, target)

    def draw_value_columns(self, value: str, y: float, font_size: float, percent_font_size: float) -> None:
        r = self._renderer
        r.draw_text(r.format_currency(value), self.value_x, y, align="right")
        percentage = self.percentage(value)
        if percentage:
            r.set_font_size(percent_font_size)
            r.draw_text(percentage, self.table_end_x, y, align="right")
            r.set_font_size(font_size)

    def draw_items(
        self,
        items: list[ReportItem],
        base_offset: float = 0,
        indent_base: int = 0,
        row_line_width: Optional[float] = None,
    ) -> None:
        r, layout = self._renderer, self.layout
        if row_line_width is None:
            row_line_width = layout.row_line_width
        padding = r.text_padding(layout.item_font_size, layout.text_padding_multiplier)

        r.use_font(layout.item_font_size)

        for item in items:
            if r.check_page_break(layout.line_height):
                r.use_font(layout.item_font_size)

            level = (item.indent - indent_base) if item.indent else 0
            indent_offset = level * layout.indent_per_level if level > 0 else 0

            lines = r.wrap(item.label, self.label_width - padding - indent_offset)
            start_y = r.y
            r.draw_label_lines(lines, start_y, r.margin + base_offset + indent_offset, layout.line_spacing)

            r.use_font(layout.item_font_size)
            self.draw_value_columns(item.value, start_y, layout.item_font_size, layout.target_font_size)

            r.draw_row_line(start_y, lines, layout.line_spacing, self.table_end_x, row_line_width)
            r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing)

    def draw_section_total(self, section: Section, target: Optional[float] = None) -> None:
        total = section.total
        if total is None or not total.label or not total.value:
            return

        r, layout = self._renderer, self.layout
        r.check_page_break(layout.line_height + 3)
        r.move_down(3)

        font_size = (
            layout.important_total_font_size if section.is_important else layout.total_font_size
        )
        r.use_font(font_size, "bold")
        padding = r.bold_text_padding(font_size, layout.bold_text_padding_multiplier)
        lines, start_y = r.draw_total_label(total.label, self.label_width, padding, layout.line_spacing)

        self.draw_value_columns(total.value, start_y, font_size, layout.target_font_size)
        if target is not None:
            r.draw_target(target, self.table_end_x, start_y + 3, layout.target_font_size)

        r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing) + layout.section_spacing

    def draw_gross_profit(self, gross_profit: Optional[SectionTotal]) -> None:
        if gross_profit is None:
            return

        r, layout = self._renderer, self.layout
        r.check_page_break(GROSS_PROFIT_BREAK_HEIGHT)
        self.draw_column_headers()

        r.use_font(layout.important_total_font_size, "bold")
        r.draw_text(gross_profit.label, r.margin, r.y)
        self.draw_value_columns(
            gross_profit.value, r.y, layout.important_total_font_size, layout.target_font_size
        )
        r.move_down(layout.line_height + layout.section_spacing)

    # =========================================================================
    # EXPENSES
    # =========================================================================

    def draw_expenses(self, expenses: ExpensesBlock, targets: TargetPercentages) -> None:
        if expenses.is_empty:
            return

        r, layout = self._renderer, self.layout
        r.draw_expenses_header(self.table_end_x, layout.section_header_font_size, layout.header_line_width)
        r.move_down(1)
        self.draw_column_headers()
        r.draw_column_header_line(self.table_end_x, layout.column_header_line_width)

        for index, section in enumerate(expenses.sections):
            self.draw_expense_section(section, index, targets)

        if expenses.total is not None:
            self.draw_expenses_total(expenses.total)

    def draw_expense_section(self, section: Section, index: int, targets: TargetPercentages) -> None:
        r, layout = self._renderer, self.layout

        r.check_page_break(EXPENSE_SECTION_BREAK_HEIGHT)
        if index > 0:
            r.move_down(3)

        r.use_font(layout.total_font_size, "bold")
        r.draw_text(section.header, r.margin, r.y)
        r.move_down(7)

        if not r.is_fixed_expense(section.header) and section.items:
            # Shallowest item draws at the sub-section's base indent
            min_indent = min(item.indent or 0 for item in section.items)
            self.draw_items(
                section.items,
                base_offset=layout.expense_item_offset,
                indent_base=min_indent,
                row_line_width=layout.expense_row_line_width,
            )

        total = section.total
        if total is not None and total.label and total.value:
            self.draw_expense_section_total(total, targets)

    def draw_expense_section_total(self, total: SectionTotal, targets: TargetPercentages) -> None:
        r, layout = self._renderer, self.layout

        r.check_page_break(layout.line_height + 3)
        r.move_down(3)

        font_size = layout.item_font_size
        r.use_font(font_size, "bold")
        padding = r.bold_text_padding(font_size, layout.bold_text_padding_multiplier)
        lines, start_y = r.draw_total_label(total.label, self.label_width, padding, layout.line_spacing)

        self.draw_value_columns(total.value, start_y, font_size, layout.target_font_size)
        if r.contains_keyword(total.label, "PAYROLL") and targets.payroll is not None:
            r.draw_target(targets.payroll, self.table_end_x, start_y + 3, layout.target_font_size)

        r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing) + 2
        r.move_down(2)
        r.draw_line(r.margin, r.y, self.table_end_x, r.y, layout.expense_section_line_width)
        r.move_down(3)

    def draw_expenses_total(self, total: SectionTotal) -> None:
        r, layout = self._renderer, self.layout

        r.check_page_break(layout.line_height + 5)
        r.move_down(5)

        font_size = layout.total_font_size
        r.use_font(font_size, "bold")
        padding = r.bold_text_padding(font_size, layout.bold_text_padding_multiplier)
        lines, start_y = r.draw_total_label(total.label, self.label_width, padding, layout.line_spacing)

        self.draw_value_columns(total.value, start_y, font_size, layout.target_font_size)
        r.y = start_y + r.row_height(lines, layout.line_height, layout.line_spacing) + layout.section_spacing

    # =========================================================================
    # PROFIT
    # =========================================================================

    def draw_profit(self, profit: Optional[SectionTotal], target: Optional[float] = None) -> None:
        if profit is None:
            return

        r, layout = self._renderer, self.layout
        r.check_page_break(PROFIT_BREAK_HEIGHT)
        r.move_down(5)
        self.draw_column_headers()

        r.use_font(layout.profit_font_size, "bold")
        r.draw_text(profit.label, r.margin, r.y)
        self.draw_value_columns(
            profit.value, r.y, layout.profit_font_size, layout.important_total_font_size
        )

        if target is not None:
            r.draw_target(target, self.table_end_x, r.y + 3, layout.profit_target_font_size)
