"""
Layout Engine

The page cursor and the drawing helpers shared by both rendering
strategies.

DESIGN DECISION: One cursor per render call.
`PageCursor` owns the vertical position and the page-break decision.
Strategies never compare y against the page height themselves; they ask
`check_page_break(required_height)` before drawing a block and re-apply
their font when it returns True.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from pnl_report.rendering.document import PdfDocument
from pnl_report.rendering.formatting import format_currency
from pnl_report.rendering.layout import FONT_FAMILY, HEADER_LAYOUT, SECTION_BREAK_HEIGHT


class PageCursor:
    """
    Vertical position on the current page.

    `on_new_page` is called whenever a break happens; the cursor then
    restarts at the top margin.
    """

    def __init__(
        self,
        y: float,
        page_height: float,
        margin: float,
        on_new_page: Optional[Callable[[], None]] = None,
    ):
        self.y = y
        self.page_height = page_height
        self.margin = margin
        self._on_new_page = on_new_page

    def move_down(self, amount: float) -> None:
        self.y += amount

    def check_page_break(self, required_height: float) -> bool:
        """
        Start a new page if `required_height` does not fit.

        Returns True when a page was added.
        """
        if self.y + required_height > self.page_height - self.margin:
            if self._on_new_page is not None:
                self._on_new_page()
            self.y = self.margin
            return True
        return False


@dataclass(frozen=True)
class RenderConfig:
    margin: float
    currency: str = "CAD"


class ReportRenderer:
    """
    Drawing helpers over one document and one cursor.

    Injected into a RenderStrategy, which decides what to draw where.
    """

    def __init__(self, document: PdfDocument, config: RenderConfig, initial_y: float):
        self.document = document
        self.config = config
        self.cursor = PageCursor(
            initial_y,
            document.page_height,
            config.margin,
            on_new_page=document.add_page,
        )

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    @property
    def page_width(self) -> float:
        return self.document.page_width

    @property
    def page_height(self) -> float:
        return self.document.page_height

    @property
    def margin(self) -> float:
        return self.config.margin

    @property
    def y(self) -> float:
        return self.cursor.y

    @y.setter
    def y(self, value: float) -> None:
        self.cursor.y = value

    def move_down(self, amount: float) -> None:
        self.cursor.move_down(amount)

    def check_page_break(self, required_height: float) -> bool:
        return self.cursor.check_page_break(required_height)

    # =========================================================================
    # PRIMITIVES
    # =========================================================================

    def set_font(self, style: str = "normal") -> None:
        self.document.set_font(FONT_FAMILY, style)

    def set_font_size(self, size: float) -> None:
        self.document.set_font_size(size)

    def use_font(self, size: float, style: str = "normal") -> None:
        self.document.set_font_size(size)
        self.document.set_font(FONT_FAMILY, style)

    def draw_text(self, text: str, x: float, y: float, align: str = "left") -> None:
        self.document.text(text, x, y, align=align)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.5) -> None:
        self.document.set_line_width(width)
        self.document.line(x1, y1, x2, y2)

    def wrap(self, text: str, max_width: float) -> list[str]:
        return self.document.split_text(text, max_width)

    def format_currency(self, value: str) -> str:
        return format_currency(value, self.config.currency)

    # =========================================================================
    # SHARED PATTERNS
    # =========================================================================

    @staticmethod
    def row_height(lines: list[str], line_height: float, line_spacing: float) -> float:
        """Height of a row whose label wrapped to `lines`."""
        if len(lines) <= 1:
            return line_height
        return (len(lines) - 1) * line_spacing + line_height

    @staticmethod
    def text_padding(font_size: float, multiplier: float, minimum: float = 20) -> float:
        return max(minimum, font_size * multiplier)

    @staticmethod
    def bold_text_padding(font_size: float, multiplier: float, minimum: float = 35) -> float:
        return max(minimum, font_size * multiplier)

    @staticmethod
    def contains_keyword(label: Optional[str], keyword: str) -> bool:
        return bool(label) and keyword.upper() in label.upper()

    def is_fixed_expense(self, header: Optional[str]) -> bool:
        """Fixed expense sub-sections print header and total only."""
        return self.contains_keyword(header, "FIXED")

    def draw_label_lines(
        self,
        lines: list[str],
        start_y: float,
        x: float,
        line_spacing: float,
    ) -> None:
        for index, line in enumerate(lines):
            self.draw_text(line, x, start_y + index * line_spacing)

    def draw_row_line(
        self,
        start_y: float,
        lines: list[str],
        line_spacing: float,
        end_x: float,
        width: float = 0.1,
    ) -> None:
        """Rule under a row, 2mm below its last baseline."""
        row_bottom = start_y + (len(lines) - 1) * line_spacing + 2
        self.draw_line(self.margin, row_bottom, end_x, row_bottom, width)

    def draw_total_label(
        self,
        label: str,
        available_width: float,
        padding: float,
        line_spacing: float,
    ) -> tuple[list[str], float]:
        """Wrap and draw a total's label at the cursor. Returns (lines, start_y)."""
        lines = self.wrap(label, available_width - padding)
        start_y = self.y
        self.draw_label_lines(lines, start_y, self.margin, line_spacing)
        return lines, start_y

    def draw_target(
        self,
        target: Optional[float],
        x: float,
        y: float,
        font_size: float = 9,
    ) -> None:
        """Right-aligned "Target: N%" in italic. No-op without a target."""
        if target is None or target != target:
            return
        self.set_font_size(font_size)
        self.set_font("italic")
        self.draw_text(f"Target: {target:.2f}%", x, y, align="right")
        self.set_font("bold")

    def draw_expenses_header(self, end_x: float, font_size: float, line_width: float) -> None:
        self.check_page_break(SECTION_BREAK_HEIGHT)

        self.use_font(font_size, "bold")
        self.draw_text("Expenses", self.margin, self.y)
        self.move_down(6)

        self.draw_line(self.margin, self.y - 2, end_x, self.y - 2, line_width)
        self.move_down(4)

    def draw_column_header_line(self, end_x: float, line_width: float) -> None:
        self.draw_line(self.margin, self.y - 2, end_x, self.y - 2, line_width)
        self.move_down(3)


def render_header(
    document: PdfDocument,
    title: str,
    start_date: str,
    end_date: str,
    margin: float,
    initial_y: float,
    location_name: Optional[str] = None,
    report_basis: Optional[str] = None,
) -> float:
    """
    Draw the title block. Returns the y position after it.
    """
    layout = HEADER_LAYOUT
    center_x = document.page_width / 2
    y = initial_y

    document.set_font_size(layout.title_font_size)
    document.set_font(FONT_FAMILY, "bold")
    document.text(title, center_x, y, align="center")
    y += layout.title_step

    if location_name:
        document.set_font_size(layout.location_font_size)
        document.set_font(FONT_FAMILY, "normal")
        document.text(location_name, center_x, y, align="center")
        y += layout.location_step

    document.set_font_size(layout.period_font_size)
    document.set_font(FONT_FAMILY, "normal")
    document.text(f"Period: {start_date} to {end_date}", center_x, y, align="center")
    y += layout.period_step

    if report_basis:
        document.set_font_size(layout.basis_font_size)
        document.set_font(FONT_FAMILY, "normal")
        document.text(f"Basis: {report_basis}", margin, y)
        y += layout.basis_step

    return y + layout.trailing_space
