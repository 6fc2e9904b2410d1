import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from app.config import Settings
from app.media.router import media_router, uploads_router
from app.storage import ObjectStoreGateway
from shared.auth import AuthSettings, TokenVerifier
from shared.middleware import (
    error_envelope_middleware,
    install_error_handlers,
    install_request_id_filter,
    request_id_middleware,
)

logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Keeper Media Service

Object-storage proxy for user media.

* **Upload** — presigned PUT URLs for direct uploads, scoped to the caller.
* **Serve** — stored objects streamed back byte-for-byte.

### Authentication
Upload endpoints require:
```
Authorization: Bearer <access_token>
```
Tokens are RS256/RS384/RS512 JWTs verified against `JWT_PUBLIC_KEY`.

### Error shape
All errors return the same JSON body:
```json
{ "error": "Human-readable message" }
```
"""

_TAGS_METADATA = [
    {"name": "uploads", "description": "Issue presigned upload URLs."},
    {"name": "media", "description": "Stream stored media objects."},
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s:%(name)s:[%(request_id)s] %(message)s",
    )
    install_request_id_filter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    storage: ObjectStoreGateway = app.state.storage
    await storage.start()
    logger.info("Starting media service on port %s", app.state.settings.port)
    try:
        yield
    finally:
        await storage.close()
        logger.info("Media service shut down")


def create_app(
    settings: Settings | None = None,
    *,
    auth_settings: AuthSettings | None = None,
    storage: ObjectStoreGateway | None = None,
) -> FastAPI:
    settings = settings or Settings()
    auth_settings = auth_settings or AuthSettings()
    configure_logging(settings.log_level)

    if not auth_settings.public_key:
        logger.warning("JWT_PUBLIC_KEY is not set; every authenticated request will fail")

    app = FastAPI(
        title="Keeper Media Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.token_verifier = TokenVerifier(auth_settings)
    app.state.storage = storage or ObjectStoreGateway(settings)

    install_error_handlers(app)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(uploads_router)
    app.include_router(media_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="media")

    return app


app = create_app()
