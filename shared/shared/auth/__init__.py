from shared.auth.config import AuthSettings
from shared.auth.dependencies import bound_identity, verify_and_bind
from shared.auth.verifier import TokenVerifier, validate_token

__all__ = [
    "AuthSettings",
    "TokenVerifier",
    "bound_identity",
    "validate_token",
    "verify_and_bind",
]
