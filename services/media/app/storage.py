"""
Object storage gateway — presigned uploads and streamed downloads.

Talks to any S3-compatible endpoint through aioboto3. The default endpoint
is the Google Cloud Storage XML API, which accepts SigV4 requests signed
with HMAC interoperability keys.

Upload flow:
  1. Client asks the API for a presigned PUT URL.
  2. Client uploads the file directly to the bucket using that URL.
  3. The stored object is served back through GET /media/{object_name}.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Any

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.exceptions import ObjectNotFound, UploadUrlError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ObjectStream:
    """An open object body plus the metadata needed to serve it."""

    object_name: str
    body: Any
    content_type: str
    content_length: int | None = None
    chunk_size: int = 64 * 1024

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.body.iter_chunks(self.chunk_size):
                yield chunk
        except Exception:
            # Headers are already sent; the client sees a truncated body.
            logger.exception("Could not write response for object %s", self.object_name)
            raise
        finally:
            self.body.close()


class ObjectStoreGateway:
    """Owns the long-lived S3 client shared by every request."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._session = aioboto3.Session(
            aws_access_key_id=settings.storage_access_key_id or None,
            aws_secret_access_key=settings.storage_secret_access_key or None,
            region_name=settings.storage_region,
        )
        self._stack: AsyncExitStack | None = None
        self._client: Any = None

    async def start(self) -> None:
        if self._client is not None:
            return
        stack = AsyncExitStack()
        self._client = await stack.enter_async_context(
            self._session.client(
                "s3",
                endpoint_url=self._settings.storage_endpoint_url or None,
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
        )
        self._stack = stack
        logger.info(
            "Object storage client ready (bucket=%s, endpoint=%s)",
            self._settings.storage_bucket,
            self._settings.storage_endpoint_url or "aws",
        )

    async def close(self) -> None:
        if self._stack is not None:
            await self._stack.aclose()
        self._stack = None
        self._client = None

    def _require_client(self) -> Any:
        if self._client is None:
            raise RuntimeError("ObjectStoreGateway.start() must be awaited before use")
        return self._client

    async def generate_upload_url(self, object_name: str, content_type: str) -> str:
        """Return a presigned PUT URL valid for ``upload_url_expiry_seconds``."""
        if not self._settings.storage_bucket:
            logger.error("STORAGE_BUCKET is not configured; cannot sign %s", object_name)
            raise UploadUrlError()
        client = self._require_client()
        try:
            url: str = await client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self._settings.storage_bucket,
                    "Key": object_name,
                    "ContentType": content_type,
                },
                ExpiresIn=self._settings.upload_url_expiry_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Error generating signed URL for %s: %s", object_name, exc)
            raise UploadUrlError()
        return url

    async def open_read_stream(self, object_name: str) -> ObjectStream:
        """Open *object_name* for streaming. Any storage failure is a 404."""
        if not object_name:
            raise ObjectNotFound()
        client = self._require_client()
        try:
            response = await client.get_object(
                Bucket=self._settings.storage_bucket, Key=object_name,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Could not get object %s from storage: %s", object_name, exc)
            raise ObjectNotFound()
        return ObjectStream(
            object_name=object_name,
            body=response["Body"],
            content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE,
            content_length=response.get("ContentLength"),
            chunk_size=self._settings.stream_chunk_size,
        )
