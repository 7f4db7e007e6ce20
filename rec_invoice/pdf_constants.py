"""Page geometry, spacing and palette for the invoice template."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Color = Tuple[int, int, int]

COLOR_DEFAULT: Color = (0x44, 0x44, 0x44)
COLOR_HEADER_SUB: Color = (0x91, 0x9D, 0xB6)
COLOR_DESCRIPTION: Color = (0x53, 0x62, 0x7E)
COLOR_RULE: Color = (0xAA, 0xAA, 0xAA)

FONT_SIZE_DEFAULT = 10
FONT_SIZE_DESCRIPTION_TITLE = 11
FONT_SIZE_TITLE = 16

DOCUMENT_TITLE = "Payment Invoice"
QUANTITY_UNIT = "MWh"
CERTIFICATE_UNIT = "RECs"
PAYMENT_METHOD = "Wallet"

LETTERHEAD: Tuple[str, ...] = (
    "InterOpera Pte. Ltd.",
    "79 Anson Road, #06-05",
    "Singapore 079903",
    "UEN No.: 202115516D",
)


@dataclass(frozen=True)
class PageLayout:
    """Immutable geometry for one rendering of the invoice template.

    Coordinates are points with the origin at the top-left corner of the page.
    """

    page_width: float = 595.28
    page_height: float = 841.89
    margin: float = 50.0

    header_y: float = 55.0
    header_line_spacing: float = 15.0
    logo_height: float = 40.0
    letterhead_x: float = 200.0
    header_rule_y: float = 130.0
    title_y: float = 140.0
    title_rule_y: float = 170.0

    details_top: float = 175.0
    details_value_offset: float = 100.0
    details_second_column_shift: float = -20.0
    details_second_value_offset: float = 80.0

    table_top: float = 310.0
    column_count: int = 5
    cell_inset: float = 2.0

    spacing: float = 15.0
    summary_gap: float = 25.0
    summary_row_spacing: float = 20.0
    summary_label_shift: float = -100.0
    summary_label_width: float = 180.0

    rule_x_end: float = 550.0
    letterhead: Tuple[str, ...] = LETTERHEAD
    logo_path: Optional[str] = None

    @property
    def mid_x(self) -> float:
        return self.page_width / 2

    @property
    def max_x(self) -> float:
        return self.page_width - self.margin

    @property
    def max_y(self) -> float:
        return self.page_height - self.margin

    @property
    def top_y(self) -> float:
        return self.margin

    @property
    def table_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def description_width(self) -> float:
        return self.table_width / 3

    @property
    def numeric_column_width(self) -> float:
        return (self.table_width - self.description_width) / (self.column_count - 1)

    def column_x(self, index: int) -> float:
        """Left edge of table column ``index`` (0 is the description column)."""
        if index == 0:
            return self.margin
        return self.margin + self.description_width + (index - 1) * self.numeric_column_width


DEFAULT_LAYOUT = PageLayout()
