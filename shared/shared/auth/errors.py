"""
Token verification failures.

These are plain exceptions raised by the verifier. They never reach a
client: the auth gate maps them to HTTP errors and logs the message.
"""


class TokenVerificationError(Exception):
    """Base class for every verifier failure."""


class KeyFormatError(TokenVerificationError):
    """The configured public key is missing, malformed or not an RSA key."""


class CredentialError(TokenVerificationError):
    """The presented token is unacceptable."""


class SignatureError(CredentialError):
    """Disallowed algorithm or signature that does not match the key."""


class TokenInvalidError(CredentialError):
    """Structurally broken token, or registered claims that fail validation."""


class ClaimMissingError(CredentialError):
    """The subject claim is absent, empty or not a string."""
