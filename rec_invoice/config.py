"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from typing import Optional


def env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


HOST = env_str("INVOICE_HOST", "0.0.0.0")
PORT = env_int("INVOICE_PORT", 8080, minimum=1)
LOG_LEVEL = env_str("INVOICE_LOG_LEVEL", "INFO")

MAX_INFLIGHT = env_int("INVOICE_MAX_INFLIGHT", max(8, (os.cpu_count() or 4) * 2), minimum=1)
QUEUE_TIMEOUT_MS = env_int("INVOICE_QUEUE_TIMEOUT_MS", 30000, minimum=0)
MAX_BODY_BYTES = env_int("INVOICE_MAX_BODY_BYTES", 4 * 1024 * 1024, minimum=1024)
MAX_PAGES = env_int("INVOICE_MAX_PAGES", 200, minimum=1)
LISTEN_BACKLOG = env_int("INVOICE_LISTEN_BACKLOG", 128, minimum=1)


def s3_bucket() -> Optional[str]:
    return env_str("S3_BUCKET_NAME")


def s3_region() -> Optional[str]:
    return env_str("S3_REGION")


def s3_endpoint_url() -> Optional[str]:
    return env_str("S3_ENDPOINT_URL")


def s3_public_base_url() -> Optional[str]:
    return env_str("S3_PUBLIC_BASE_URL")


def logo_path() -> Optional[str]:
    path = env_str("INVOICE_LOGO_PATH")
    if path and os.path.exists(path):
        return path
    return None
