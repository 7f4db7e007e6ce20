import unittest
from datetime import datetime, timezone
from importlib import util as importlib_util

from fakes import RecordingSurface, invoice_payload

from rec_invoice.errors import RenderError, ValidationError
from rec_invoice.layout import LayoutEngine
from rec_invoice.models import InvoiceRequest
from rec_invoice.pdf_constants import DEFAULT_LAYOUT
from rec_invoice.rendering import assemble, build_filename

FPDF_AVAILABLE = importlib_util.find_spec("fpdf") is not None
if FPDF_AVAILABLE:
    from rec_invoice.surface import FpdfSurface

ISSUED_AT = datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc)


class AssembleTests(unittest.TestCase):
    def test_blocks_are_drawn_in_order_and_document_finished(self) -> None:
        surface = RecordingSurface()
        document = assemble(invoice_payload(2), surface_factory=surface.factory, issued_at=ISSUED_AT)

        order = [drawn.text for drawn in surface.texts]
        self.assertLess(order.index("Payment Invoice"), order.index("Invoice Number:"))
        self.assertLess(order.index("Invoice Number:"), order.index("Description"))
        self.assertLess(order.index("Description"), order.index("Grand Total"))
        self.assertTrue(surface.finished)
        self.assertEqual(document.content, b"%PDF-recorded")
        self.assertEqual(document.page_count, 1)
        self.assertIn("5 Mar 2024", order)

    def test_filename_uses_type_slug_tx_id_and_millis(self) -> None:
        surface = RecordingSurface()
        document = assemble(invoice_payload(1), surface_factory=surface.factory, issued_at=ISSUED_AT)

        self.assertEqual(document.filename, "REC-Withdrawal-Invoice-a-1709631000000.pdf")
        request = InvoiceRequest.from_payload(invoice_payload(1, type="Issuance", txId="0xabc"))
        self.assertEqual(build_filename(request, 42), "REC-Issuance-Invoice-0xabc-42.pdf")

    def test_invalid_type_fails_before_surface_is_opened(self) -> None:
        opened = []

        def factory(layout, title, created_at):
            opened.append(title)
            return RecordingSurface()

        with self.assertRaises(ValidationError):
            assemble(invoice_payload(1, type="Refund"), surface_factory=factory)
        self.assertEqual(opened, [])

    def test_surface_faults_become_render_errors(self) -> None:
        surface = RecordingSurface(fail_on="Grand Total")

        with self.assertRaises(RenderError) as ctx:
            assemble(invoice_payload(1), surface_factory=surface.factory, issued_at=ISSUED_AT)
        self.assertIsInstance(ctx.exception.__cause__, OSError)
        self.assertFalse(surface.finished)


@unittest.skipUnless(FPDF_AVAILABLE, "fpdf2 is not installed")
class PdfRenderingTests(unittest.TestCase):
    def test_assemble_returns_pdf_bytes(self) -> None:
        document = assemble(invoice_payload(1), issued_at=ISSUED_AT)

        self.assertIsInstance(document.content, bytes)
        self.assertTrue(document.content.startswith(b"%PDF"))
        self.assertGreater(len(document.content), 100)

    def test_identical_input_renders_identical_bytes(self) -> None:
        first = assemble(invoice_payload(3), issued_at=ISSUED_AT)
        second = assemble(invoice_payload(3), issued_at=ISSUED_AT)

        self.assertEqual(first.content, second.content)

    def test_long_invoices_span_several_pdf_pages(self) -> None:
        request = InvoiceRequest.from_payload(invoice_payload(12))
        surface = FpdfSurface(DEFAULT_LAYOUT, created_at=ISSUED_AT)
        engine = LayoutEngine(surface, DEFAULT_LAYOUT)
        engine.place_header("Payment Invoice")
        end = engine.place_line_item_table(request.items, request.invoice_type, request.currency_code)
        engine.place_summary_block(request, end)

        self.assertEqual(surface.page_count, 3)
        self.assertEqual(engine.page_count, 3)
        self.assertTrue(surface.finish().startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()
