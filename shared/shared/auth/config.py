from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# RSASSA-PKCS1-v1_5 only. PSS, ECDSA, HMAC and "none" are never accepted.
RSA_ALGORITHMS: tuple[str, ...] = ("RS256", "RS384", "RS512")


def _env_files() -> list[str]:
    """Load .env from repository root so JWT_* vars are always available."""
    base = Path(__file__).resolve().parents[3]  # shared/shared/auth/ → repository root
    return [str(base / ".env"), ".env"]


class AuthSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    public_key: str = ""  # PEM-encoded RSA public key
    issuer: str | None = None
    audience: str | None = None
    leeway_seconds: int = 0
    require_exp: bool = False
