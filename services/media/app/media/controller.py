"""
Uploads and media — controller layer.

Receives validated input from the router, talks to the storage gateway and
composes the response.
"""
from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from app.exceptions import InvalidUploadRequest
from app.media.schemas import PresignedUrlRequest, PresignedUrlResponse

if TYPE_CHECKING:
    from app.config import Settings
    from app.storage import ObjectStoreGateway, ObjectStream
    from shared.models.identity import Identity

logger = logging.getLogger(__name__)

MAX_BASE_NAME_LENGTH = 255


def build_object_name(prefix: str, subject: str, file_name: str) -> str:
    """``<prefix>/<subject>/<base name of file_name>``; directories are dropped."""
    base = PurePosixPath(file_name.replace("\\", "/")).name
    if base in ("", ".", "..") or len(base) > MAX_BASE_NAME_LENGTH:
        raise InvalidUploadRequest("Invalid fileName")
    return f"{prefix}/{subject}/{base}"


async def request_upload_url(
    request: PresignedUrlRequest,
    identity: Identity,
    storage: ObjectStoreGateway,
    settings: Settings,
) -> PresignedUrlResponse:
    if not request.file_name or not request.content_type:
        raise InvalidUploadRequest("fileName and contentType are required")

    object_name = build_object_name(settings.upload_prefix, identity.subject, request.file_name)
    url = await storage.generate_upload_url(object_name, request.content_type)
    logger.info("Issued upload URL for %s", object_name)
    return PresignedUrlResponse(
        presigned_url=url,
        object_name=object_name,
        expires_in=settings.upload_url_expiry_seconds,
    )


async def open_media(object_name: str, storage: ObjectStoreGateway) -> ObjectStream:
    return await storage.open_read_stream(object_name)
