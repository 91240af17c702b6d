"""Test fixtures."""

import json
import time
from collections.abc import Callable
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from jose import jwk, jwt

from venty_auth.config import AuthSettings, get_settings
from venty_auth.dependencies import get_http_transport
from venty_auth.main import create_app
from venty_auth.services.oauth_service import get_apple_key_cache

GOOGLE_CLIENT_ID = "google-client-id.apps.googleusercontent.com"
APPLE_CLIENT_ID = "app.venty.signin"
FACEBOOK_APP_ID = "1234567890"
BASE_URL = "https://venty.test"
APPLE_KID = "test-kid"


class FakeProviders:
    """Stand-in for Google, Apple and Facebook HTTP endpoints.

    Routes are keyed by ``(method, host + path)``; each handler receives the
    request and returns an ``httpx.Response``. Unrouted calls return 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, url: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        parsed = httpx.URL(url)
        self.routes[(method.upper(), f"{parsed.host}{parsed.path}")] = handler

    def json(self, method: str, url: str, payload, status_code: int = 200) -> None:
        self.route(method, url, lambda request: httpx.Response(status_code, json=payload))

    def calls(self, url: str) -> list[httpx.Request]:
        parsed = httpx.URL(url)
        return [
            r for r in self.requests if r.url.host == parsed.host and r.url.path == parsed.path
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, f"{request.url.host}{request.url.path}"))
        if handler is None:
            return httpx.Response(404, json={"error": "not routed"})
        return handler(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class AppleKeyPair:
    """RSA key pair publishing a JWKS and signing Apple-style ID tokens."""

    def __init__(self, kid: str = APPLE_KID) -> None:
        self.kid = kid
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        self.private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()
        public_pem = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()

        public_jwk = jwk.construct(public_pem, "RS256").to_dict()
        public_jwk.update({"kid": kid, "use": "sig", "alg": "RS256"})
        self.public_jwk = public_jwk

    def jwks(self) -> dict:
        return {"keys": [self.public_jwk]}

    def sign(self, kid: str | None = None, **overrides) -> str:
        now = int(time.time())
        claims = {
            "iss": "https://appleid.apple.com",
            "aud": APPLE_CLIENT_ID,
            "sub": "apple-sub-001",
            "email": "apple.user@example.com",
            "iat": now,
            "exp": now + 600,
        }
        claims.update(overrides)
        return jwt.encode(
            claims,
            self.private_pem,
            algorithm="RS256",
            headers={"kid": kid or self.kid},
        )


def google_tokeninfo(**overrides) -> dict:
    info = {
        "sub": "google-sub-001",
        "email": "Ada@Example.com",
        "name": "Ada Lovelace",
        "picture": "https://lh3.googleusercontent.com/ada.png",
        "aud": GOOGLE_CLIENT_ID,
    }
    info.update(overrides)
    return info


def form_data(request: httpx.Request) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def read_users(settings: AuthSettings) -> list[dict]:
    if not settings.users_path.exists():
        return []
    return json.loads(settings.users_path.read_text())


@pytest.fixture(autouse=True)
def clear_apple_keys():
    """Apple keys are cached process-wide; isolate tests from each other."""
    get_apple_key_cache().clear()
    yield
    get_apple_key_cache().clear()


@pytest.fixture
def settings(tmp_path) -> AuthSettings:
    """Fully configured settings with a temporary user store."""
    return AuthSettings(
        _env_file=None,
        jwt_secret="test-jwt-secret",
        users_file=str(tmp_path / "data" / "users.json"),
        base_url=BASE_URL,
        google_client_id=GOOGLE_CLIENT_ID,
        google_client_secret="google-secret",
        apple_client_id=APPLE_CLIENT_ID,
        facebook_app_id=FACEBOOK_APP_ID,
        facebook_app_secret="facebook-secret",
        vercel="",
        vercel_env="",
        auth_cors_origins="",
    )


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture(scope="session")
def apple_keys() -> AppleKeyPair:
    return AppleKeyPair()


@pytest.fixture
def app(settings, providers):
    application = create_app(settings)
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_http_transport] = providers.transport
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    """Create test HTTP client."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# Pytest markers
def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
