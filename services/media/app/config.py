from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_files() -> list[str]:
    """Load .env from repository root (when running from services/media) then local .env."""
    base = Path(__file__).resolve().parent.parent.parent.parent  # repository root
    return [str(base / ".env"), ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Server ───────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 4001
    env_name: str = "development"
    log_level: str = "INFO"

    # ── Object storage (S3-compatible; GCS interoperability by default) ──────
    storage_bucket: str = ""
    storage_endpoint_url: str = "https://storage.googleapis.com"
    storage_region: str = "auto"
    storage_access_key_id: str = ""
    storage_secret_access_key: str = ""

    # Presigned PUT URL expiry
    upload_url_expiry_seconds: int = 900  # 15 min
    upload_prefix: str = "avatars"

    # Streaming
    stream_chunk_size: int = 64 * 1024
    media_cache_control: str = "public, max-age=86400"

    # ── CORS ─────────────────────────────────────────────────────────────────
    front_end_url: str = "http://localhost:5173"

    @property
    def is_production(self) -> bool:
        return self.env_name.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        return [x.strip() for x in self.front_end_url.split(",") if x.strip()]
