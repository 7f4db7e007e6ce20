"""Error taxonomy for invoice generation."""

from __future__ import annotations


class InvoiceError(Exception):
    """Base class for failures surfaced through the response envelope."""


class ValidationError(InvoiceError):
    """Raised when a request is rejected before any rendering starts."""


class RenderError(InvoiceError):
    """Raised when the drawing surface fails while laying out a document."""


class StorageError(InvoiceError):
    """Raised when the rendered document cannot be uploaded."""
