"""
Media service — request dependencies.

Re-exports the shared auth guards and resolves the objects created once by
the application factory (settings, storage gateway).
"""
import logging

from fastapi import Depends, Request
from pydantic import ValidationError

from app.config import Settings
from app.exceptions import InvalidUploadRequest
from app.media.schemas import PresignedUrlRequest
from app.storage import ObjectStoreGateway
from shared.auth import bound_identity, verify_and_bind
from shared.models.identity import Identity

__all__ = ["bound_identity", "get_settings", "get_storage", "upload_request", "verify_and_bind"]

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> ObjectStoreGateway:
    return request.app.state.storage


async def upload_request(
    request: Request,
    identity: Identity = Depends(bound_identity),
) -> PresignedUrlRequest:
    """Parse the upload body only once the caller is authenticated."""
    try:
        return PresignedUrlRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        logger.info("Rejected upload request from %s: %s", identity.subject, exc.errors())
        raise InvalidUploadRequest("Invalid request body")
