"""Placement of the invoice blocks on a drawing surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .formatting import DrawingSurface, format_currency, format_quantity
from .models import InvoiceRequest, InvoiceType, LineItem
from .pagination import RenderCursor, description_lines, row_height
from .pdf_constants import (
    COLOR_DEFAULT,
    COLOR_DESCRIPTION,
    COLOR_HEADER_SUB,
    COLOR_RULE,
    DEFAULT_LAYOUT,
    FONT_SIZE_DEFAULT,
    FONT_SIZE_DESCRIPTION_TITLE,
    FONT_SIZE_TITLE,
    PAYMENT_METHOD,
    QUANTITY_UNIT,
    PageLayout,
)

NO_TAX = "No Tax"


@dataclass(frozen=True)
class SummaryRow:
    label: str
    value: str
    bold: bool = False


def summary_rows(request: InvoiceRequest) -> List[SummaryRow]:
    currency = request.currency_code
    rows = [SummaryRow("Total (Excl. Tax)", format_currency(request.total_excl_tax, currency))]
    if request.discount > 0:
        rows.append(
            SummaryRow(
                f"Discount ({format_quantity(request.discount_pct)}%)",
                format_currency(request.discount, currency),
            )
        )
    rows.append(SummaryRow("Tax", format_currency(request.tax, currency)))
    rows.append(SummaryRow("Grand Total", format_currency(request.grand_total, currency), bold=True))
    rows.append(SummaryRow("Payment Method", PAYMENT_METHOD))
    return rows


def tax_cell(item: LineItem) -> str:
    if item.tax.is_zero():
        return NO_TAX
    return format_currency(item.tax)


class LayoutEngine:
    """Draws the invoice template onto ``surface`` one block at a time."""

    def __init__(self, surface: DrawingSurface, layout: PageLayout = DEFAULT_LAYOUT) -> None:
        self.surface = surface
        self.layout = layout
        self.cursor = RenderCursor.for_layout(layout, layout.top_y)

    @property
    def page_count(self) -> int:
        return self.cursor.page_count

    def _new_page_if_needed(self, height: float) -> None:
        if self.cursor.ensure_room(height):
            self.surface.add_page()

    def _use_default_style(self) -> None:
        self.surface.set_font(FONT_SIZE_DEFAULT)
        self.surface.set_text_color(COLOR_DEFAULT)

    def draw_rule(self, y: float, width: float = 1.0) -> None:
        self.surface.set_draw_color(COLOR_RULE)
        self.surface.set_line_width(width)
        self.surface.draw_line(self.layout.margin, y, self.layout.rule_x_end, y)

    def place_header(self, title: str) -> None:
        layout = self.layout
        if layout.logo_path:
            self.surface.draw_image(layout.logo_path, layout.margin, layout.header_y, layout.logo_height)

        self._use_default_style()
        for index, line in enumerate(layout.letterhead):
            y = layout.header_y + index * layout.header_line_spacing
            self.surface.draw_text(
                layout.letterhead_x, y, line, width=layout.max_x - layout.letterhead_x, align="R"
            )

        self.draw_rule(layout.header_rule_y)
        self.surface.set_font(FONT_SIZE_TITLE)
        self.surface.draw_text(layout.margin, layout.title_y, title)
        self.draw_rule(layout.title_rule_y)
        self.cursor.y = layout.title_rule_y

    def place_details_block(
        self,
        tx_id: str,
        date: str,
        company_name: str,
        address: Optional[str] = None,
    ) -> None:
        layout = self.layout
        first_row = layout.details_top + layout.spacing
        second_row = layout.details_top + 2 * layout.spacing
        self._use_default_style()

        x = layout.margin
        self.surface.draw_text(x, first_row, "Invoice Number:")
        self.surface.draw_text(x, second_row, "Date:")

        x += layout.details_value_offset
        value_width = layout.mid_x + layout.details_second_column_shift - x
        self.surface.draw_text(x, first_row, tx_id, width=value_width, ellipsis=True)
        self.surface.draw_text(x, second_row, date, width=value_width)

        x = layout.mid_x + layout.details_second_column_shift
        self.surface.draw_text(x, first_row, "Company Name:")
        if address:
            self.surface.draw_text(x, second_row, "Address:")

        x += layout.details_second_value_offset
        max_width = layout.max_x - x
        self.surface.draw_text(x, first_row, company_name, width=max_width, ellipsis=True)
        if address:
            self.surface.draw_text(x, second_row, address, width=max_width, ellipsis=True)

        self.cursor.y = second_row + layout.spacing

    def _draw_table_row(
        self,
        y: float,
        description: Sequence[str],
        columns: Sequence[Sequence[str]],
        is_header: bool,
    ) -> None:
        layout = self.layout
        spacing = layout.spacing

        for index, value in enumerate(description):
            if index == 0:
                size = FONT_SIZE_DEFAULT if is_header else FONT_SIZE_DESCRIPTION_TITLE
                self.surface.set_font(size, bold=True)
                self.surface.set_text_color(COLOR_DEFAULT)
            else:
                self.surface.set_font(FONT_SIZE_DEFAULT)
                self.surface.set_text_color(COLOR_HEADER_SUB if is_header else COLOR_DESCRIPTION)
            self.surface.draw_text(
                layout.margin,
                y + index * spacing,
                value,
                width=layout.description_width,
                ellipsis=True,
            )

        cell_width = layout.numeric_column_width - layout.cell_inset
        for column, values in enumerate(columns, start=1):
            x = layout.column_x(column)
            for index, value in enumerate(values):
                if is_header and index == 0:
                    self.surface.set_font(FONT_SIZE_DEFAULT, bold=True)
                    self.surface.set_text_color(COLOR_DEFAULT)
                elif is_header:
                    self.surface.set_font(FONT_SIZE_DEFAULT)
                    self.surface.set_text_color(COLOR_HEADER_SUB)
                else:
                    self._use_default_style()
                self.surface.draw_text(x, y + index * spacing, value, width=cell_width, align="R")

    def place_line_item_table(
        self,
        items: Sequence[LineItem],
        invoice_type: InvoiceType,
        currency_code: str,
    ) -> float:
        """Draw the header row and one row per item; return the y of the last rule."""
        layout = self.layout
        cursor = self.cursor
        cursor.y = layout.table_top

        self._draw_table_row(
            cursor.y,
            ["Description"],
            [["Quantity", QUANTITY_UNIT], ["Unit Price", currency_code], ["Tax"], ["Total (Excl. Tax)", currency_code]],
            is_header=True,
        )
        cursor.advance(2 * layout.spacing)
        self.draw_rule(cursor.y)

        for item in items:
            cursor.advance(layout.spacing)
            lines = description_lines(item, invoice_type)
            height = row_height(len(lines), layout)
            self._new_page_if_needed(height)

            self._draw_table_row(
                cursor.y,
                lines,
                [
                    [format_quantity(item.quantity)],
                    [format_currency(item.unit_price)],
                    [tax_cell(item)],
                    [format_currency(item.total_excl_tax)],
                ],
                is_header=False,
            )
            cursor.advance(height)
            self.draw_rule(cursor.y)

        return cursor.y

    def place_summary_block(self, request: InvoiceRequest, start_y: float) -> float:
        layout = self.layout
        cursor = self.cursor
        cursor.y = start_y + layout.summary_gap
        label_x = layout.mid_x + layout.summary_label_shift

        for row in summary_rows(request):
            self._new_page_if_needed(layout.summary_row_spacing)
            self.surface.set_font(FONT_SIZE_DEFAULT, bold=row.bold)
            self.surface.set_text_color(COLOR_DEFAULT)
            self.surface.draw_text(label_x, cursor.y, row.label, width=layout.summary_label_width, align="R")
            self.surface.draw_text(0, cursor.y, row.value, width=layout.max_x, align="R")
            cursor.advance(layout.summary_row_spacing)

        return cursor.y


class PageCounter:
    """Surface that only counts pages, used to size a request up front."""

    def __init__(self) -> None:
        self.pages = 1

    def set_font(self, size: float, bold: bool = False) -> None:
        pass

    def set_text_color(self, color) -> None:
        pass

    def set_draw_color(self, color) -> None:
        pass

    def set_line_width(self, width: float) -> None:
        pass

    def draw_text(self, x, y, text, width=None, align="L", ellipsis=False) -> None:
        pass

    def draw_line(self, x1, y1, x2, y2) -> None:
        pass

    def draw_image(self, path, x, y, height) -> None:
        pass

    def add_page(self) -> None:
        self.pages += 1

    def finish(self) -> bytes:
        return b""


def estimate_page_count(request: InvoiceRequest, layout: PageLayout = DEFAULT_LAYOUT) -> int:
    counter = PageCounter()
    engine = LayoutEngine(counter, layout)
    table_end = engine.place_line_item_table(request.items, request.invoice_type, request.currency_code)
    engine.place_summary_block(request, table_end)
    return counter.pages
