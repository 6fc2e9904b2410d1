"""
Uploads and media — HTTP routes.

Upload URL issuance requires a Bearer JWT; media serving is public so the
stored objects can back <img>/<video> tags directly.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.config import Settings
from app.media import controller
from app.media.dependencies import (
    bound_identity,
    get_settings,
    get_storage,
    upload_request,
    verify_and_bind,
)
from app.media.schemas import PresignedUrlRequest, PresignedUrlResponse
from app.storage import ObjectStoreGateway
from shared.models.identity import Identity

uploads_router = APIRouter(
    prefix="/api/uploads",
    tags=["uploads"],
    dependencies=[Depends(verify_and_bind)],
)
media_router = APIRouter(prefix="/media", tags=["media"])


# ── Upload flow ──────────────────────────────────────────────────────────────

@uploads_router.post(
    "/presigned-url",
    response_model=PresignedUrlResponse,
    summary="Request a presigned upload URL",
    description=(
        "Generates a short-lived presigned PUT URL for uploading a file "
        "directly to the bucket under the caller's own prefix."
    ),
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": PresignedUrlRequest.model_json_schema(by_alias=True)}},
        },
    },
)
async def generate_presigned_url(
    request: PresignedUrlRequest = Depends(upload_request),
    identity: Identity = Depends(bound_identity),
    storage: ObjectStoreGateway = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> PresignedUrlResponse:
    return await controller.request_upload_url(request, identity, storage, settings)


# ── Public file serving ──────────────────────────────────────────────────────

@media_router.get(
    "/{object_name:path}",
    summary="Stream a stored object",
    description="Public endpoint (no auth). Copies the object bytes straight through.",
    response_class=StreamingResponse,
)
async def serve_media(
    object_name: str,
    storage: ObjectStoreGateway = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    stream = await controller.open_media(object_name, storage)

    headers = {"Cache-Control": settings.media_cache_control}
    if stream.content_length is not None:
        headers["Content-Length"] = str(stream.content_length)

    return StreamingResponse(
        stream.iter_chunks(),
        media_type=stream.content_type,
        headers=headers,
    )
