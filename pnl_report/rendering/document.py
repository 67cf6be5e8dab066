"""
PDF Drawing Surface

A thin wrapper over a ReportLab canvas that speaks the coordinate system
the layout code is written in:
- Units are millimetres, origin at the TOP-LEFT, y grows downward
- Font sizes are points
- `y` passed to `text()` is the text baseline

DESIGN DECISION: Font state does not survive a page break.
`add_page()` resets the tracked font to the document default, exactly
as a fresh canvas page does. Every drawing routine that checks for a
page break must set its own font again afterwards.
"""

import io

from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas


PAGE_SIZES = {
    "A4": A4,
    "LETTER": LETTER,
}

FONT_NAMES = {
    ("helvetica", "normal"): "Helvetica",
    ("helvetica", "bold"): "Helvetica-Bold",
    ("helvetica", "italic"): "Helvetica-Oblique",
    ("helvetica", "bolditalic"): "Helvetica-BoldOblique",
}

DEFAULT_FONT_FAMILY = "helvetica"
DEFAULT_FONT_STYLE = "normal"
DEFAULT_FONT_SIZE = 16
DEFAULT_LINE_WIDTH = 0.2


class PdfDocument:
    """
    One output PDF.

    Usage:
        doc = PdfDocument("A4")
        doc.set_font("helvetica", "bold")
        doc.text("Income", 20, 40)
        pdf_bytes = doc.output()
    """

    def __init__(self, page_size: str = "A4"):
        try:
            self._page_size = PAGE_SIZES[page_size.upper()]
        except KeyError:
            raise ValueError(f"Unsupported page size: {page_size}") from None

        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=self._page_size)
        self._page_count = 1
        self._output = None
        self._reset_state()

    def _reset_state(self) -> None:
        self._font_family = DEFAULT_FONT_FAMILY
        self._font_style = DEFAULT_FONT_STYLE
        self._font_size = DEFAULT_FONT_SIZE
        self._line_width = DEFAULT_LINE_WIDTH
        self._apply_font()
        self._canvas.setLineWidth(self._line_width * mm)

    def _apply_font(self) -> None:
        self._canvas.setFont(self.font_name, self._font_size)

    def _to_page(self, x: float, y: float) -> tuple[float, float]:
        return x * mm, self._page_size[1] - y * mm

    # =========================================================================
    # PAGE
    # =========================================================================

    @property
    def page_width(self) -> float:
        return self._page_size[0] / mm

    @property
    def page_height(self) -> float:
        return self._page_size[1] / mm

    @property
    def page_count(self) -> int:
        return self._page_count

    def add_page(self) -> None:
        self._canvas.showPage()
        self._page_count += 1
        self._reset_state()

    # =========================================================================
    # FONT
    # =========================================================================

    @property
    def font_name(self) -> str:
        return FONT_NAMES.get(
            (self._font_family, self._font_style),
            FONT_NAMES[(DEFAULT_FONT_FAMILY, DEFAULT_FONT_STYLE)],
        )

    @property
    def font_style(self) -> str:
        return self._font_style

    @property
    def font_size(self) -> float:
        return self._font_size

    def set_font(self, family: str, style: str = "normal") -> None:
        self._font_family = family.lower()
        self._font_style = style.lower()
        self._apply_font()

    def set_font_size(self, size: float) -> None:
        self._font_size = size
        self._apply_font()

    # =========================================================================
    # DRAWING
    # =========================================================================

    def text(self, text: str, x: float, y: float, align: str = "left") -> None:
        """Draw one line of text with its baseline at y."""
        px, py = self._to_page(x, y)
        if align == "right":
            self._canvas.drawRightString(px, py, text)
        elif align == "center":
            self._canvas.drawCentredString(px, py, text)
        else:
            self._canvas.drawString(px, py, text)

    def set_line_width(self, width: float) -> None:
        self._line_width = width
        self._canvas.setLineWidth(width * mm)

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        px1, py1 = self._to_page(x1, y1)
        px2, py2 = self._to_page(x2, y2)
        self._canvas.line(px1, py1, px2, py2)

    # =========================================================================
    # TEXT METRICS
    # =========================================================================

    def text_width(self, text: str) -> float:
        """Width of text in the current font, in mm."""
        return self._canvas.stringWidth(text, self.font_name, self._font_size) / mm

    def split_text(self, text: str, max_width: float) -> list[str]:
        """
        Wrap text to lines no wider than max_width mm.

        Always returns at least one line.
        """
        lines = simpleSplit(text, self.font_name, self._font_size, max(max_width, 0) * mm)
        return lines or [""]

    # =========================================================================
    # OUTPUT
    # =========================================================================

    def output(self) -> bytes:
        """Finish the document and return the PDF bytes."""
        if self._output is None:
            self._canvas.save()
            self._output = self._buffer.getvalue()
        return self._output
