"""fpdf2 implementation of the drawing surface."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fpdf import FPDF  # type: ignore

from .fonts import FontManager
from .formatting import ellipsize
from .pdf_constants import COLOR_DEFAULT, FONT_SIZE_DEFAULT, Color, PageLayout

LINE_HEIGHT_FACTOR = 1.2


class FpdfSurface:
    """DrawingSurface backed by fpdf2, using top-left point coordinates."""

    def __init__(
        self,
        layout: PageLayout,
        title: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.layout = layout
        self.pdf = FPDF(unit="pt", format=(layout.page_width, layout.page_height))
        self.pdf.set_auto_page_break(False)
        self.pdf.set_margins(layout.margin, layout.margin, layout.margin)
        if title:
            self.pdf.set_title(title)
        if created_at is not None:
            self.pdf.creation_date = created_at
        self.pdf.add_page()

        self.fonts = FontManager(self.pdf)
        self._size: float = FONT_SIZE_DEFAULT
        self._bold = False
        self.set_font(FONT_SIZE_DEFAULT)
        self.set_text_color(COLOR_DEFAULT)

    def set_font(self, size: float, bold: bool = False) -> None:
        self._size = size
        self._bold = bold
        self.fonts.set_font(size, bold=bold)

    def set_text_color(self, color: Color) -> None:
        self.pdf.set_text_color(*color)

    def set_draw_color(self, color: Color) -> None:
        self.pdf.set_draw_color(*color)

    def set_line_width(self, width: float) -> None:
        self.pdf.set_line_width(width)

    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        width = self.fonts.text_width(text, size, bold=bold)
        self.fonts.set_font(self._size, bold=self._bold)
        return width

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        width: Optional[float] = None,
        align: str = "L",
        ellipsis: bool = False,
    ) -> None:
        box_width = width if width is not None else self.layout.max_x - x
        if ellipsis:
            # Cells pad both sides by c_margin, which eats into the usable width.
            text = ellipsize(self, text, box_width - 2 * self.pdf.c_margin, self._size, self._bold)
        self.fonts.set_font(self._size, bold=self._bold)
        self.pdf.set_xy(x, y)
        self.pdf.cell(box_width, self._size * LINE_HEIGHT_FACTOR, text, align=align)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.pdf.line(x1, y1, x2, y2)

    def draw_image(self, path: str, x: float, y: float, height: float) -> None:
        self.pdf.image(path, x=x, y=y, h=height)

    def add_page(self) -> None:
        self.pdf.add_page()

    @property
    def page_count(self) -> int:
        return self.pdf.page_no()

    def finish(self) -> bytes:
        return bytes(self.pdf.output())
