"""
Auth gate — HTTP exceptions.

Preset status codes and messages so call sites never spell them out. The
error handlers registered by the service render every one of these as
``{"error": detail}``.
"""
from fastapi import HTTPException, status


class MissingAuthorizationHeader(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )


class MalformedAuthorizationHeader(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format. Expected Bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidToken(HTTPException):
    """Generic on purpose: the specific cause is only logged."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthConfigurationError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


class IdentityNotBound(HTTPException):
    """A handler asked for the caller's identity but the gate never ran."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
