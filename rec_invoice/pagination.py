"""Render cursor and the page-break rule shared by every block."""

from __future__ import annotations

from typing import List

from .formatting import fmt_date, format_quantity
from .models import InvoiceType, LineItem
from .pdf_constants import CERTIFICATE_UNIT, PageLayout


class RenderCursor:
    """Vertical write position for one render.

    ``ensure_room`` applies the pagination rule: when a block of the given
    height would end below ``bottom`` the cursor jumps back to ``top`` and
    the caller must start a new page before drawing.
    """

    def __init__(self, top: float, bottom: float, y: float) -> None:
        self.top = top
        self.bottom = bottom
        self.y = y
        self.page_count = 1

    @classmethod
    def for_layout(cls, layout: PageLayout, y: float) -> "RenderCursor":
        return cls(layout.top_y, layout.max_y, y)

    def advance(self, dy: float) -> float:
        self.y += dy
        return self.y

    def would_overflow(self, height: float) -> bool:
        return self.y + height > self.bottom

    def ensure_room(self, height: float) -> bool:
        # A block taller than a whole page is drawn where it is rather than
        # looping over blank pages.
        if not self.would_overflow(height) or self.y <= self.top:
            return False
        self.y = self.top
        self.page_count += 1
        return True


def description_lines(item: LineItem, invoice_type: InvoiceType) -> List[str]:
    return [
        invoice_type.value,
        item.device_name,
        format_quantity(item.quantity, CERTIFICATE_UNIT),
        item.issuer,
        f"{fmt_date(item.start_date)} - {fmt_date(item.end_date)}",
    ]


def row_height(line_count: int, layout: PageLayout) -> float:
    """Height from the top of a row to its trailing rule."""
    return (line_count + 1) * layout.spacing
