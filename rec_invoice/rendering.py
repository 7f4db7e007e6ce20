"""Invoice document assembly."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from . import config
from .errors import InvoiceError, RenderError
from .formatting import DrawingSurface, format_issue_date
from .layout import LayoutEngine
from .models import InvoiceRequest, RenderedDocument
from .pdf_constants import DEFAULT_LAYOUT, DOCUMENT_TITLE, PageLayout

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[PageLayout, str, datetime], DrawingSurface]


def default_surface_factory(layout: PageLayout, title: str, created_at: datetime) -> DrawingSurface:
    from .surface import FpdfSurface

    return FpdfSurface(layout, title=title, created_at=created_at)


def configured_layout() -> PageLayout:
    return replace(DEFAULT_LAYOUT, logo_path=config.logo_path())


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def build_filename(request: InvoiceRequest, millis: int) -> str:
    return f"{request.invoice_type.slug}-Invoice-{request.tx_id}-{millis}.pdf"


def coerce_request(request: Union[InvoiceRequest, Dict[str, Any]]) -> InvoiceRequest:
    if isinstance(request, InvoiceRequest):
        return request
    return InvoiceRequest.from_payload(request)


def assemble(
    request: Union[InvoiceRequest, Dict[str, Any]],
    surface_factory: Optional[SurfaceFactory] = None,
    layout: Optional[PageLayout] = None,
    issued_at: Optional[datetime] = None,
) -> RenderedDocument:
    """Lay out the whole invoice and return the finished PDF bytes.

    ``issued_at`` is printed as the invoice date and stored as the PDF
    creation date; two calls with the same request and ``issued_at`` produce
    identical bytes. The returned filename carries ``issued_at`` in epoch
    milliseconds and is the key the document is published under.
    """
    invoice = coerce_request(request)
    issued_at = issued_at or datetime.now()
    if issued_at.tzinfo is None:
        issued_at = issued_at.astimezone()
    factory = surface_factory or default_surface_factory
    layout = layout or configured_layout()

    try:
        surface = factory(layout, DOCUMENT_TITLE, issued_at)
        engine = LayoutEngine(surface, layout)
        engine.place_header(DOCUMENT_TITLE)
        engine.place_details_block(
            invoice.tx_id,
            format_issue_date(issued_at),
            invoice.company_name,
            invoice.address,
        )
        table_end = engine.place_line_item_table(invoice.items, invoice.invoice_type, invoice.currency_code)
        engine.place_summary_block(invoice, table_end)
        content = surface.finish()
    except InvoiceError:
        raise
    except Exception as exc:
        raise RenderError(f"Failed to render invoice {invoice.tx_id}: {exc}") from exc

    filename = build_filename(invoice, epoch_millis(issued_at))
    logger.debug("Rendered %s (%d pages, %d bytes)", filename, engine.page_count, len(content))
    return RenderedDocument(content=content, filename=filename, page_count=engine.page_count)


def render_invoice(data: Dict[str, Any]) -> bytes:
    return assemble(data).content
