"""Request handler that renders, publishes and wraps the outcome."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, Union

from .models import InvoiceRequest, InvoiceResponse, RenderedDocument
from .rendering import assemble, coerce_request

logger = logging.getLogger(__name__)


class Publisher(Protocol):
    def publish(self, document: RenderedDocument) -> str:
        ...


def default_publisher() -> Publisher:
    from .storage import S3Publisher

    return S3Publisher.from_env()


def generate_invoice(
    request: Union[InvoiceRequest, Dict[str, Any]],
    publisher: Optional[Publisher] = None,
    **assemble_kwargs: Any,
) -> InvoiceResponse:
    """Render and upload one invoice, never raising.

    Any failure, including a failed upload after a successful render, yields
    a response carrying only ``err``; rendered bytes are not returned without
    a URL.
    """
    try:
        invoice = coerce_request(request)
        document = assemble(invoice, **assemble_kwargs)
        if publisher is None:
            publisher = default_publisher()
        url = publisher.publish(document)
    except Exception as exc:
        logger.exception("Invoice generation failed")
        message = str(exc) or exc.__class__.__name__
        return InvoiceResponse.failure(message)

    return InvoiceResponse.success(document.content, url)
