"""
JWT verification against a PEM-encoded RSA public key.

Pure utility: no FastAPI imports, no I/O. The only cached state is the
parsed public key, which is immutable for the life of the process.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from jose import jws, jwt
from jose.exceptions import ExpiredSignatureError, JWSError, JWTClaimsError, JWTError

from shared.auth.config import RSA_ALGORITHMS, AuthSettings
from shared.auth.errors import (
    ClaimMissingError,
    KeyFormatError,
    SignatureError,
    TokenInvalidError,
)


@lru_cache(maxsize=8)
def load_public_key(public_key_pem: str) -> str:
    """Parse an RSA public key and return it re-serialised as SPKI PEM."""
    if not public_key_pem or "-----BEGIN" not in public_key_pem:
        raise KeyFormatError("failed to parse PEM block containing the public key")
    try:
        key = serialization.load_pem_public_key(public_key_pem.encode())
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyFormatError(f"failed to parse DER encoded public key: {exc}") from exc
    if not isinstance(key, RSAPublicKey):
        raise KeyFormatError(f"key type is {type(key).__name__}, expected RSA public key")
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


def _check_algorithm(token: str) -> None:
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as exc:
        raise TokenInvalidError(f"failed to parse token: {exc}") from exc
    alg = header.get("alg")
    if alg not in RSA_ALGORITHMS:
        raise SignatureError(f"unexpected signing method: {alg}")


def _decode_claims(
    token: str,
    key: str,
    *,
    issuer: str | None,
    audience: str | None,
    leeway: int,
    require_exp: bool,
) -> dict[str, Any]:
    try:
        jws.verify(token, key, list(RSA_ALGORITHMS))
    except JWSError as exc:
        raise SignatureError(f"failed to verify token signature: {exc}") from exc

    # Signature already checked above; this pass only validates claims.
    options = {
        "verify_signature": False,
        "verify_aud": audience is not None,
        "verify_sub": False,
        "require_exp": require_exp,
        "leeway": leeway,
    }
    try:
        return jwt.decode(
            token,
            key,
            algorithms=list(RSA_ALGORITHMS),
            issuer=issuer,
            audience=audience,
            options=options,
        )
    except ExpiredSignatureError as exc:
        raise TokenInvalidError("token has expired") from exc
    except JWTClaimsError as exc:
        raise TokenInvalidError(f"invalid token claims: {exc}") from exc
    except JWTError as exc:
        raise TokenInvalidError(f"invalid token or claims: {exc}") from exc


def validate_token(
    token: str,
    public_key_pem: str,
    *,
    issuer: str | None = None,
    audience: str | None = None,
    leeway: int = 0,
    require_exp: bool = False,
) -> str:
    """Verify *token* and return its ``sub`` claim.

    Raises:
        KeyFormatError: the public key cannot be used.
        SignatureError: non-RSA algorithm or bad signature.
        TokenInvalidError: malformed token or failed claim validation.
        ClaimMissingError: ``sub`` is missing, empty or not a string.
    """
    key = load_public_key(public_key_pem)
    _check_algorithm(token)
    claims = _decode_claims(
        token,
        key,
        issuer=issuer,
        audience=audience,
        leeway=leeway,
        require_exp=require_exp,
    )
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise ClaimMissingError("subject (sub) claim is missing or not a string")
    return subject


class TokenVerifier:
    """Binds :func:`validate_token` to the process-wide auth settings."""

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    def verify(self, token: str) -> str:
        s = self._settings
        return validate_token(
            token,
            s.public_key,
            issuer=s.issuer,
            audience=s.audience,
            leeway=s.leeway_seconds,
            require_exp=s.require_exp,
        )
