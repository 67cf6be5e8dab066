"""
Layout Constants

All distances are millimetres from the top-left corner of the page.
Font sizes are points.
"""

from dataclasses import dataclass


FONT_FAMILY = "helvetica"


@dataclass(frozen=True)
class HeaderLayout:
    """The title block at the top of the first page."""
    title_font_size: float = 16
    location_font_size: float = 12
    period_font_size: float = 11
    basis_font_size: float = 10
    title_step: float = 10
    location_step: float = 8
    period_step: float = 12
    basis_step: float = 7
    trailing_space: float = 5


@dataclass(frozen=True)
class PeriodLayout:
    margin: float = 20
    section_header_font_size: float = 12
    important_section_header_font_size: float = 13
    column_header_font_size: float = 9
    item_font_size: float = 10
    total_font_size: float = 11
    important_total_font_size: float = 12
    profit_font_size: float = 14
    target_font_size: float = 9
    profit_target_font_size: float = 11
    line_height: float = 7
    line_spacing: float = 5
    section_spacing: float = 8
    label_width_ratio: float = 0.7
    value_width_ratio: float = 0.2
    percentage_width_ratio: float = 0.1
    text_padding_multiplier: float = 2
    bold_text_padding_multiplier: float = 3.5
    header_line_width: float = 0.5
    column_header_line_width: float = 0.3
    row_line_width: float = 0.1
    expense_row_line_width: float = 0.05
    expense_section_line_width: float = 0.2
    indent_per_level: float = 10
    expense_item_offset: float = 10


@dataclass(frozen=True)
class MonthlyLayout:
    margin: float = 12
    section_header_font_size: float = 10
    important_section_header_font_size: float = 11
    column_header_font_size: float = 7
    sub_header_font_size: float = 6
    item_font_size: float = 8
    total_font_size: float = 9
    important_total_font_size: float = 10
    profit_font_size: float = 9
    target_font_size: float = 8
    line_height: float = 6
    line_spacing: float = 4
    section_spacing: float = 6
    single_month_label_ratio: float = 0.8
    few_columns_label_ratio: float = 0.4
    some_columns_label_ratio: float = 0.35
    many_columns_label_ratio: float = 0.3
    column_width_offset: float = 0.5
    single_month_padding_multiplier: float = 1.5
    multi_month_padding_multiplier: float = 3
    bold_single_month_padding_multiplier: float = 1.5
    bold_multi_month_padding_multiplier: float = 2.5
    header_line_width: float = 0.3
    row_line_width: float = 0.1
    expense_section_line_width: float = 0.2
    indent_per_level: float = 8
    column_margin: float = 3
    min_text_width: float = 15
    single_month_safety_ratio: float = 0.95
    multi_month_safety_ratio: float = 0.8
    max_month_label_length: int = 10


HEADER_LAYOUT = HeaderLayout()
PERIOD_LAYOUT = PeriodLayout()
MONTHLY_LAYOUT = MonthlyLayout()

# Space that must be left on the page before starting each block
SECTION_BREAK_HEIGHT = 30
EXPENSE_SECTION_BREAK_HEIGHT = 20
GROSS_PROFIT_BREAK_HEIGHT = 15
PROFIT_BREAK_HEIGHT = 20
