"""
Media service — domain-specific HTTP exceptions.

All exceptions use preset status codes and detail messages so that callers
never need to specify these at the call site. The error handlers installed
from shared render them as ``{"error": detail}``.
"""
from fastapi import HTTPException, status


# ── Upload ───────────────────────────────────────────────────────────────────

class InvalidUploadRequest(HTTPException):
    def __init__(self, message: str) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


class UploadUrlError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


# ── Serving ──────────────────────────────────────────────────────────────────

class ObjectNotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found",
        )
