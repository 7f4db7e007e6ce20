"""Formatting helpers for amounts, quantities and dates."""

from __future__ import annotations

import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Optional, Protocol, Tuple, Union

from dateutil import parser as dateutil_parser

from .errors import ValidationError

Number = Union[int, float, str, Decimal]

ELLIPSIS = "..."
_CENTS = Decimal("0.01")
_MICROS = Decimal("0.000001")
# Largest accepted amount, in integer digits.
MAX_AMOUNT_DIGITS = 40

_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)
_YEAR_FIRST = re.compile(r"^\d{4}\D")


class TextWidthProvider(Protocol):
    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        ...


class DrawingSurface(Protocol):
    def set_font(self, size: float, bold: bool = False) -> None:
        ...

    def set_text_color(self, color: Tuple[int, int, int]) -> None:
        ...

    def set_draw_color(self, color: Tuple[int, int, int]) -> None:
        ...

    def set_line_width(self, width: float) -> None:
        ...

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        width: Optional[float] = None,
        align: str = "L",
        ellipsis: bool = False,
    ) -> None:
        ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        ...

    def draw_image(self, path: str, x: float, y: float, height: float) -> None:
        ...

    def add_page(self) -> None:
        ...

    def finish(self) -> bytes:
        ...


def _as_decimal(amount: Number) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    # str() keeps float literals such as 1000.237 from picking up binary noise.
    return Decimal(str(amount))


def _with_unit(text: str, unit: Optional[str]) -> str:
    if not unit:
        return text
    return f"{text} {unit}"


def _quantize(amount: Number, exponent: Decimal) -> Decimal:
    value = _as_decimal(amount)
    with localcontext() as ctx:
        # quantize needs every integer digit plus the kept decimals.
        ctx.prec = max(ctx.prec, value.adjusted() + 8)
        value = value.quantize(exponent, rounding=ROUND_HALF_UP)
    if value.is_zero():
        value = abs(value)
    return value


def format_currency(amount: Number, unit: Optional[str] = None) -> str:
    """Two decimals, thousands separators, half-away-from-zero rounding."""
    value = _quantize(amount, _CENTS)
    return _with_unit(f"{value:,.2f}", unit)


def format_quantity(amount: Number, unit: Optional[str] = None) -> str:
    """Up to six decimals with trailing zeros dropped, e.g. ``50,000.1234``."""
    value = _quantize(amount, _MICROS)
    text = f"{value:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return _with_unit(text, unit)


def to_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"'{field_name}' must be a number.")
    try:
        result = _as_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"'{field_name}' must be a number.") from None
    if not result.is_finite():
        raise ValidationError(f"'{field_name}' must be a finite number.")
    if not result.is_zero() and result.adjusted() >= MAX_AMOUNT_DIGITS:
        raise ValidationError(f"'{field_name}' is out of range.")
    return result


def format_issue_date(moment: datetime) -> str:
    """Render a date as '7 Nov 2019'."""
    return f"{moment.day} {moment:%b %Y}"


def fmt_date(raw: str) -> str:
    """Normalise a fully specified date to '7 Nov 2019'.

    Anything else comes back as given: unparseable text, partial dates such
    as ``Nov 2019`` and all-numeric dates whose day/month order is ambiguous
    (``11/07/2019``). Only year-first numeric dates are read as numbers.
    """
    raw = raw.strip()
    if not raw:
        return raw
    if not any(ch.isalpha() for ch in raw) and not _YEAR_FIRST.match(raw):
        return raw
    try:
        # Parts missing from the input are filled from the default, so two
        # different defaults only agree when the date is complete.
        first = dateutil_parser.parse(raw, default=_DEFAULT_A)
        second = dateutil_parser.parse(raw, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return raw
    if first.date() != second.date():
        return raw
    return format_issue_date(first)


def ellipsize(
    fonts_obj: TextWidthProvider,
    text: str,
    max_width: float,
    font_size: float,
    bold: bool = False,
) -> str:
    """Trim ``text`` so that it fits ``max_width``, marking the cut with '...'."""
    if fonts_obj.text_width(text, font_size, bold=bold) <= max_width:
        return text

    cut = text
    while cut:
        cut = cut[:-1]
        candidate = cut.rstrip() + ELLIPSIS
        if fonts_obj.text_width(candidate, font_size, bold=bold) <= max_width:
            return candidate
    return ELLIPSIS if fonts_obj.text_width(ELLIPSIS, font_size, bold=bold) <= max_width else ""
