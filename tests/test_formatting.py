import unittest
from datetime import datetime
from decimal import Decimal

from rec_invoice.errors import ValidationError
from rec_invoice.formatting import (
    ellipsize,
    fmt_date,
    format_currency,
    format_issue_date,
    format_quantity,
    to_decimal,
)


class FixedWidthFont:
    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        return len(text) * 5.0


class FormattingTests(unittest.TestCase):
    def test_format_currency_pads_to_two_decimals(self) -> None:
        self.assertEqual(format_currency(0), "0.00")
        self.assertEqual(format_currency(1234.5), "1,234.50")

    def test_format_currency_rounds_half_away_from_zero(self) -> None:
        self.assertEqual(format_currency(1000.237, "SGD"), "1,000.24 SGD")
        self.assertEqual(format_currency(Decimal("2.345")), "2.35")
        self.assertEqual(format_currency(0.125), "0.13")

    def test_format_currency_groups_large_amounts(self) -> None:
        self.assertEqual(format_currency(123456969696.6923, "SGD"), "123,456,969,696.69 SGD")

    def test_format_quantity_trims_trailing_zeros(self) -> None:
        self.assertEqual(format_quantity(50000.1234, "RECs"), "50,000.1234 RECs")
        self.assertEqual(format_quantity(320), "320")
        self.assertEqual(format_quantity(Decimal("2.500")), "2.5")

    def test_format_quantity_keeps_six_decimals_at_most(self) -> None:
        self.assertEqual(format_quantity(Decimal("0.1234564")), "0.123456")
        self.assertEqual(format_quantity(Decimal("0.1234565")), "0.123457")

    def test_to_decimal_rejects_non_numeric_values(self) -> None:
        self.assertEqual(to_decimal("12.5", "tax"), Decimal("12.5"))
        for bad in ("abc", None, True, "NaN"):
            with self.assertRaises(ValidationError):
                to_decimal(bad, "tax")

    def test_fmt_date_normalises_parseable_dates(self) -> None:
        self.assertEqual(fmt_date("2019-11-07"), "7 Nov 2019")
        self.assertEqual(fmt_date("17 Nov 2019"), "17 Nov 2019")

    def test_fmt_date_returns_original_for_invalid_input(self) -> None:
        raw = "not-a-date"
        self.assertEqual(fmt_date(raw), raw)

    def test_fmt_date_keeps_partial_dates_unchanged(self) -> None:
        for raw in ("Nov 2019", "2024", "2019-11", "17 Nov"):
            with self.subTest(raw=raw):
                self.assertEqual(fmt_date(raw), raw)

    def test_fmt_date_keeps_ambiguous_numeric_dates_unchanged(self) -> None:
        self.assertEqual(fmt_date("11/07/2019"), "11/07/2019")
        self.assertEqual(fmt_date("2019/11/07"), "7 Nov 2019")

    def test_format_currency_handles_amounts_beyond_default_precision(self) -> None:
        self.assertEqual(
            format_currency("1e27", "SGD"),
            "1,000,000,000,000,000,000,000,000,000.00 SGD",
        )
        self.assertEqual(
            format_currency(Decimal("123456789012345678901234567.895")),
            "123,456,789,012,345,678,901,234,567.90",
        )

    def test_format_quantity_handles_amounts_beyond_default_precision(self) -> None:
        self.assertEqual(format_quantity("1e23"), "100,000,000,000,000,000,000,000")
        self.assertEqual(
            format_quantity(Decimal("12345678901234567890123.0000005")),
            "12,345,678,901,234,567,890,123.000001",
        )

    def test_to_decimal_rejects_out_of_range_magnitudes(self) -> None:
        self.assertEqual(to_decimal("1e27", "grandTotal"), Decimal("1e27"))
        with self.assertRaises(ValidationError) as ctx:
            to_decimal("1e80", "grandTotal")
        self.assertIn("out of range", str(ctx.exception))

    def test_format_issue_date_has_no_leading_zero(self) -> None:
        self.assertEqual(format_issue_date(datetime(2024, 3, 5)), "5 Mar 2024")

    def test_ellipsize_truncates_to_width(self) -> None:
        font = FixedWidthFont()
        self.assertEqual(ellipsize(font, "short", 100, 10), "short")
        self.assertEqual(ellipsize(font, "a rather long company name", 50, 10), "a rathe...")
        self.assertEqual(ellipsize(font, "abcdef", 10, 10), "")


if __name__ == "__main__":
    unittest.main()
