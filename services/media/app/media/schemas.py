"""
Uploads and media — Pydantic V2 request/response schemas.

Wire names are camelCase to match the front end; Python names stay snake_case.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Base(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )


# ── Requests ─────────────────────────────────────────────────────────────────

class PresignedUrlRequest(_Base):
    """Ask for a presigned PUT URL. Unknown keys (e.g. a legacy userId) are ignored."""
    file_name: str = Field(default="", alias="fileName")
    content_type: str = Field(default="", alias="contentType", max_length=255)


# ── Responses ────────────────────────────────────────────────────────────────

class PresignedUrlResponse(_Base):
    presigned_url: str = Field(alias="presignedUrl")
    object_name: str = Field(alias="objectName")
    expires_in: int = Field(alias="expiresIn", description="URL expiry in seconds")
