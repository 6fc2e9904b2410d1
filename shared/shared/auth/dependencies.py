"""
Auth gate — FastAPI dependencies.

``verify_and_bind`` parses the Authorization header, verifies the bearer
token and binds the caller's identity to the current request. Handlers that
need the identity read it back with ``bound_identity``.
"""
import logging

from fastapi import Request

from shared.auth.errors import CredentialError, KeyFormatError
from shared.auth.exceptions import (
    AuthConfigurationError,
    IdentityNotBound,
    InvalidToken,
    MalformedAuthorizationHeader,
    MissingAuthorizationHeader,
)
from shared.auth.verifier import TokenVerifier
from shared.models.identity import Identity

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "

# Key into the per-request state dict. Not a str, so no attribute set through
# request.state can ever shadow it.
_IDENTITY_KEY = object()


def _request_state(request: Request) -> dict:
    return request.scope.setdefault("state", {})


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "").strip()
    if not header:
        raise MissingAuthorizationHeader()
    if not header.startswith(_BEARER_PREFIX):
        raise MalformedAuthorizationHeader()
    token = header[len(_BEARER_PREFIX):].strip()
    if not token:
        raise MalformedAuthorizationHeader()
    return token


def _get_verifier(request: Request) -> TokenVerifier:
    verifier = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        logger.error("No token verifier configured on the application")
        raise AuthConfigurationError()
    return verifier


async def verify_and_bind(request: Request) -> Identity:
    token = _bearer_token(request)
    verifier = _get_verifier(request)
    try:
        subject = verifier.verify(token)
    except KeyFormatError as exc:
        logger.error("JWT public key is unusable: %s", exc)
        raise AuthConfigurationError()
    except CredentialError as exc:
        logger.warning("Failed to validate token: %s: %s", type(exc).__name__, exc)
        raise InvalidToken()

    identity = Identity(subject=subject)
    _request_state(request)[_IDENTITY_KEY] = identity
    return identity


async def bound_identity(request: Request) -> Identity:
    identity = _request_state(request).get(_IDENTITY_KEY)
    if identity is None:
        logger.error("Identity requested on %s but the auth gate did not run", request.url.path)
        raise IdentityNotBound()
    return identity
