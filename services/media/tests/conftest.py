import base64
import json
import time
from collections.abc import Generator
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from fastapi.testclient import TestClient
from jose import jwt

from app.config import Settings
from app.exceptions import ObjectNotFound
from app.main import create_app
from app.storage import ObjectStream
from shared.auth import AuthSettings


# ── Keys and tokens ──────────────────────────────────────────────────────────

def _private_pem(key: Any) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


def _public_pem(key: Any) -> str:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def untrusted_rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_pem(rsa_key: rsa.RSAPrivateKey) -> str:
    return _private_pem(rsa_key)


@pytest.fixture(scope="session")
def public_pem(rsa_key: rsa.RSAPrivateKey) -> str:
    return _public_pem(rsa_key)


@pytest.fixture(scope="session")
def untrusted_private_pem(untrusted_rsa_key: rsa.RSAPrivateKey) -> str:
    return _private_pem(untrusted_rsa_key)


@pytest.fixture(scope="session")
def ec_public_pem() -> str:
    return _public_pem(ec.generate_private_key(ec.SECP256R1()))


def make_claims(**overrides: Any) -> dict[str, Any]:
    now = int(time.time())
    claims: dict[str, Any] = {"sub": "alice", "iat": now, "exp": now + 300}
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def unsigned_token(claims: dict[str, Any]) -> str:
    """A structurally valid ``alg: none`` token."""
    def seg(obj: dict[str, Any]) -> str:
        raw = json.dumps(obj, separators=(",", ":")).encode()
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

    return f"{seg({'alg': 'none', 'typ': 'JWT'})}.{seg(claims)}."


@pytest.fixture
def token_for(private_pem: str):
    def _make(subject: str | None = "alice", algorithm: str = "RS256", **claims: Any) -> str:
        return jwt.encode(make_claims(sub=subject, **claims), private_pem, algorithm=algorithm)

    return _make


# ── Storage double ───────────────────────────────────────────────────────────

class FakeBody:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self.closed = False

    async def iter_chunks(self, chunk_size: int):
        for start in range(0, len(self._data), chunk_size):
            yield self._data[start:start + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeStorage:
    """In-memory stand-in for ObjectStoreGateway."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.upload_requests: list[tuple[str, str]] = []
        self.bodies: list[FakeBody] = []
        self.started = False
        self.closed = False

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    async def generate_upload_url(self, object_name: str, content_type: str) -> str:
        self.upload_requests.append((object_name, content_type))
        return f"https://storage.example.com/test-bucket/{object_name}?X-Goog-Signature=fake"

    async def open_read_stream(self, object_name: str) -> ObjectStream:
        if object_name not in self.objects:
            raise ObjectNotFound()
        data, content_type = self.objects[object_name]
        body = FakeBody(data)
        self.bodies.append(body)
        return ObjectStream(
            object_name=object_name,
            body=body,
            content_type=content_type,
            content_length=len(data),
            chunk_size=4,
        )


# ── App ──────────────────────────────────────────────────────────────────────

@pytest.fixture
def settings() -> Settings:
    return Settings(storage_bucket="test-bucket", front_end_url="http://localhost:5173")


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def client(settings: Settings, storage: FakeStorage, public_pem: str) -> Generator[TestClient, None, None]:
    app = create_app(settings, auth_settings=AuthSettings(public_key=public_pem), storage=storage)
    with TestClient(app) as c:
        yield c
