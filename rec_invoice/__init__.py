"""Public package API for invoice generation."""

from __future__ import annotations

from typing import Any, Dict

from .errors import InvoiceError, RenderError, StorageError, ValidationError
from .models import InvoiceRequest, InvoiceResponse, InvoiceType, LineItem, RenderedDocument


def generate_invoice(data: Any, **kwargs: Any) -> InvoiceResponse:
    from .handler import generate_invoice as _generate_invoice

    return _generate_invoice(data, **kwargs)


def render_invoice(data: Dict[str, Any]) -> bytes:
    from .rendering import render_invoice as _render_invoice

    return _render_invoice(data)


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    from .server import run as _run

    _run(host, port)


__all__ = [
    "InvoiceError",
    "InvoiceRequest",
    "InvoiceResponse",
    "InvoiceType",
    "LineItem",
    "RenderError",
    "RenderedDocument",
    "StorageError",
    "ValidationError",
    "generate_invoice",
    "render_invoice",
    "run",
]
