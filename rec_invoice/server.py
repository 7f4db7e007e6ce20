"""HTTP server entrypoints for invoice generation."""

from __future__ import annotations

import errno
import json
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional, Tuple

from .config import (
    LISTEN_BACKLOG,
    MAX_BODY_BYTES as MAX_BODY_BYTES_CONFIG,
    MAX_INFLIGHT,
    MAX_PAGES as MAX_PAGES_CONFIG,
    QUEUE_TIMEOUT_MS,
)
from .errors import ValidationError
from .handler import generate_invoice
from .layout import estimate_page_count
from .models import InvoiceRequest

logger = logging.getLogger(__name__)

INFLIGHT_SEMAPHORE = threading.BoundedSemaphore(MAX_INFLIGHT)
HttpError = Tuple[int, Dict[str, Any]]

DISCONNECT_ERRNOS = {errno.EPIPE, errno.ECONNRESET, errno.ETIMEDOUT}


class DependencyError(RuntimeError):
    """Raised when a required runtime dependency is missing."""


def check_dependencies() -> None:
    try:
        import fpdf  # noqa: F401
    except ModuleNotFoundError as exc:
        raise DependencyError(
            "Missing dependency 'fpdf2'. Install the project with 'pip install -e .'."
        ) from exc
    try:
        import boto3  # noqa: F401
    except ModuleNotFoundError as exc:
        raise DependencyError(
            "Missing dependency 'boto3'. Install the project with 'pip install -e .'."
        ) from exc


def is_client_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, (BrokenPipeError, ConnectionResetError, TimeoutError)):
        return True
    return isinstance(exc, OSError) and exc.errno in DISCONNECT_ERRNOS


def validate_invoice_payload(
    body: bytes,
    max_pages: int,
) -> Tuple[Optional[InvoiceRequest], Optional[HttpError]]:
    try:
        payload = json.loads(body.decode("utf-8"))
    except UnicodeDecodeError:
        return None, (400, {"err": "Body must be UTF-8 encoded JSON."})
    except json.JSONDecodeError as exc:
        return None, (400, {"err": f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"})

    if not isinstance(payload, dict):
        return None, (400, {"err": "JSON root must be an object."})

    try:
        request = InvoiceRequest.from_payload(payload)
    except ValidationError as exc:
        return None, (422, {"err": str(exc)})

    estimated_pages = estimate_page_count(request)
    if estimated_pages > max_pages:
        return None, (
            413,
            {"err": f"Invoice would render {estimated_pages} pages; maximum is {max_pages}."},
        )

    return request, None


class InvoiceHandler(BaseHTTPRequestHandler):
    MAX_BODY_BYTES = MAX_BODY_BYTES_CONFIG
    MAX_PAGES = MAX_PAGES_CONFIG

    def _write_response(self, status: int, content_type: str, body: bytes) -> bool:
        try:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            return True
        except Exception as exc:
            if is_client_disconnect(exc):
                return False
            raise

    def _send_json(self, status: int, payload: Dict[str, Any]) -> bool:
        body = json.dumps(payload).encode("utf-8")
        return self._write_response(status, "application/json", body)

    def _read_body(self) -> Optional[bytes]:
        header = self.headers.get("Content-Length")
        if header is None:
            self._send_json(411, {"err": "Content-Length header is required."})
            return None

        try:
            content_length = int(header)
        except ValueError:
            self._send_json(400, {"err": "Content-Length must be an integer."})
            return None

        if content_length <= 0:
            self._send_json(400, {"err": "Request body cannot be empty."})
            return None

        if content_length > self.MAX_BODY_BYTES:
            self._send_json(413, {"err": f"Body exceeds {self.MAX_BODY_BYTES} bytes."})
            return None

        try:
            return self.rfile.read(content_length)
        except Exception as exc:
            if is_client_disconnect(exc):
                return None
            raise

    def do_POST(self) -> None:
        if self.path not in ("/", "/invoice", "/generate"):
            self._send_json(404, {"err": "Unsupported endpoint."})
            return

        body = self._read_body()
        if body is None:
            return

        request, error = validate_invoice_payload(body, self.MAX_PAGES)
        if error is not None:
            status, payload = error
            self._send_json(status, payload)
            return

        acquired = INFLIGHT_SEMAPHORE.acquire(timeout=QUEUE_TIMEOUT_MS / 1000.0)
        if not acquired:
            self._send_json(503, {"err": "Server is busy; retry shortly."})
            return

        try:
            response = generate_invoice(request)
        finally:
            INFLIGHT_SEMAPHORE.release()

        self._send_json(200 if response.ok else 502, response.to_dict())

    def do_GET(self) -> None:
        if self.path in ("/", "/health", "/healthz", "/ready"):
            self._send_json(200, {"status": "ok"})
            return
        self._send_json(404, {"err": "Unsupported endpoint."})

    def handle_one_request(self) -> None:
        try:
            super().handle_one_request()
        except Exception as exc:
            if is_client_disconnect(exc):
                return
            raise

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


class InvoiceHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = LISTEN_BACKLOG


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    check_dependencies()
    server = InvoiceHTTPServer((host, port), InvoiceHandler)
    logger.info("Invoice API server listening on http://%s:%s", host, port)
    server.serve_forever()
