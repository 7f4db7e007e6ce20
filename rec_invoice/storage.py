"""Upload of rendered invoices to S3-compatible object storage."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from . import config
from .errors import StorageError
from .models import RenderedDocument

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
PUBLIC_READ = "public-read"


def create_s3_client(region: Optional[str] = None, endpoint_url: Optional[str] = None) -> Any:
    session = boto3.session.Session(region_name=region or None)
    return session.client("s3", endpoint_url=endpoint_url or None)


class S3Publisher:
    """Stores invoices under ``{Type}-Invoice-{txId}-{epochMillis}.pdf``.

    A single ``put_object`` is attempted per invoice; retrying is left to
    whoever calls ``publish``.
    """

    def __init__(
        self,
        bucket: Optional[str],
        client: Any = None,
        public_base_url: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.region = region
        self.endpoint_url = endpoint_url
        self._client = client

    @classmethod
    def from_env(cls) -> "S3Publisher":
        return cls(
            bucket=config.s3_bucket(),
            public_base_url=config.s3_public_base_url(),
            region=config.s3_region(),
            endpoint_url=config.s3_endpoint_url(),
        )

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = create_s3_client(self.region, self.endpoint_url)
        return self._client

    def public_url(self, key: str) -> str:
        quoted = quote(key)
        if self.public_base_url:
            return f"{self.public_base_url}/{quoted}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{quoted}"
        return f"https://{self.bucket}.s3.amazonaws.com/{quoted}"

    def upload(
        self,
        content: bytes,
        key: str,
        content_type: str = PDF_CONTENT_TYPE,
        visibility: str = PUBLIC_READ,
    ) -> str:
        if not self.bucket:
            raise StorageError("S3_BUCKET_NAME is not configured.")
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
                ACL=visibility,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Upload of {key} to {self.bucket} failed: {exc}") from exc

        url = self.public_url(key)
        logger.info("Uploaded %s (%d bytes) to %s", key, len(content), url)
        return url

    def publish(self, document: RenderedDocument) -> str:
        """Store ``document`` under its own filename and return the public URL."""
        return self.upload(document.content, document.filename)
