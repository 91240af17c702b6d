"""Credential verifiers for Google, Apple and Facebook sign-in.

Each verifier checks a bearer credential against the provider's authority
and returns a normalized ``Identity``. Verification fails closed: network
errors, non-2xx answers, missing fields and mismatches all reject.
"""

import logging
import time
from typing import Any, Protocol
from urllib.parse import urlencode

import httpx
from jose import JWTError, jwt

from venty_auth.config import AuthSettings, get_settings
from venty_auth.errors import AuthenticationError, ConfigurationError, UpstreamError
from venty_auth.services import identity_service
from venty_auth.services.identity_service import Identity, Provider

logger = logging.getLogger(__name__)


class CredentialVerifier(Protocol):
    """Verifies one provider's bearer credential."""

    async def verify(self, credential: str) -> Identity: ...


class _ProviderClient:
    """Shared HTTP plumbing for provider verifiers."""

    provider: str = ""

    def __init__(
        self,
        settings: AuthSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds,
            transport=self.transport,
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{self.provider} request to {url} failed: {e}")
            raise UpstreamError(self.provider, f"{self.provider} unreachable: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}


# =============================================================================
# Google
# =============================================================================


class GoogleVerifier(_ProviderClient):
    """Google sign-in via the authorization-code flow or a direct ID token.

    ID tokens are validated with Google's token-info endpoint.
    """

    provider = Provider.GOOGLE

    GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
    GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"

    SCOPES = ["openid", "email", "profile"]

    def require_code_flow(self) -> None:
        """Raise if the code flow is not fully configured."""
        if not self.settings.google_enabled:
            raise ConfigurationError(
                "google_env_missing",
                "GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and BASE_URL are required",
            )

    def build_authorization_url(self, state: str | None = None) -> str:
        """Build Google's consent screen URL.

        Args:
            state: Opaque value Google hands back on the callback

        Returns:
            Full authorization URL
        """
        self.require_code_flow()
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.SCOPES),
            "prompt": "select_account",
        }
        if state:
            params["state"] = state
        return f"{self.GOOGLE_AUTH_URL}?{urlencode(params, safe='/')}"

    async def exchange_code(self, code: str) -> dict[str, Any]:
        """Exchange an authorization code for tokens.

        Raises:
            AuthenticationError: If Google rejects the code
        """
        self.require_code_flow()
        response = await self._request(
            "POST",
            self.GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": self.settings.google_client_id,
                "client_secret": self.settings.google_client_secret,
                "redirect_uri": self.settings.google_redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        if response.status_code != 200:
            # Upstream detail is logged only, never returned to the client
            logger.warning(
                f"Google token exchange failed ({response.status_code}): {response.text[:500]}"
            )
            raise AuthenticationError("token_exchange_failed", "Google token exchange failed")
        return self._json(response)

    async def verify_id_token(self, id_token: str, require_audience: bool = False) -> Identity:
        """Validate an ID token with token-info and check its audience.

        Args:
            id_token: Google ID token
            require_audience: Reject when no client id is configured

        Raises:
            AuthenticationError: invalid_token or aud_mismatch
        """
        response = await self._request(
            "GET", self.GOOGLE_TOKENINFO_URL, params={"id_token": id_token}
        )
        info = self._json(response)
        if response.status_code != 200 or not info:
            logger.warning(f"Google token-info rejected ID token ({response.status_code})")
            raise AuthenticationError("invalid_token", "Google rejected the ID token")

        client_id = self.settings.google_client_id
        if client_id or require_audience:
            if not client_id or info.get("aud") != client_id:
                logger.warning("Google ID token audience mismatch")
                raise AuthenticationError("aud_mismatch", "Google ID token audience mismatch")

        return identity_service.from_google(info)

    async def verify(self, credential: str) -> Identity:
        return await self.verify_id_token(credential)

    async def verify_code(self, code: str) -> Identity:
        """Run the code flow: exchange the code, then validate the ID token."""
        tokens = await self.exchange_code(code)
        id_token = tokens.get("id_token")
        if not id_token:
            raise AuthenticationError("missing_id_token", "No ID token in Google response")
        return await self.verify_id_token(id_token, require_audience=True)


# =============================================================================
# Apple
# =============================================================================


class JWKSCache:
    """Caches a provider's published signing keys.

    Keys are kept for ``ttl`` seconds; an unknown ``kid`` forces one refetch
    so key rotation is picked up without waiting for expiry.
    """

    def __init__(self, url: str, ttl: float = 3600) -> None:
        self.url = url
        self.ttl = ttl
        self._keys: list[dict[str, Any]] = []
        self._fetched_at: float = 0

    def clear(self) -> None:
        self._keys = []
        self._fetched_at = 0

    async def _fetch(self, verifier: "_ProviderClient") -> list[dict[str, Any]]:
        response = await verifier._request("GET", self.url)
        if response.status_code != 200:
            raise UpstreamError(
                verifier.provider,
                f"Failed to fetch signing keys ({response.status_code})",
            )
        keys = verifier._json(response).get("keys")
        if not isinstance(keys, list):
            raise UpstreamError(verifier.provider, "Signing key set has no keys")
        self._keys = [k for k in keys if isinstance(k, dict)]
        self._fetched_at = time.time()
        return self._keys

    async def get_key(self, kid: str | None, verifier: "_ProviderClient") -> dict[str, Any] | None:
        fresh = bool(self._keys) and (time.time() - self._fetched_at) < self.ttl
        keys = self._keys if fresh else await self._fetch(verifier)

        key = next((k for k in keys if k.get("kid") == kid), None)
        if key is None and fresh:
            logger.debug(f"Unknown key id {kid}, refreshing {self.url}")
            keys = await self._fetch(verifier)
            key = next((k for k in keys if k.get("kid") == kid), None)
        return key


APPLE_KEYS_URL = "https://appleid.apple.com/auth/keys"

_apple_keys = JWKSCache(APPLE_KEYS_URL)


def get_apple_key_cache() -> JWKSCache:
    """Get the process-wide Apple signing key cache."""
    return _apple_keys


class AppleVerifier(_ProviderClient):
    """Sign in with Apple: verify an ID token against Apple's key set."""

    provider = Provider.APPLE

    APPLE_ISSUER = "https://appleid.apple.com"

    def __init__(
        self,
        settings: AuthSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        key_cache: JWKSCache | None = None,
    ) -> None:
        super().__init__(settings, transport)
        self.key_cache = key_cache or get_apple_key_cache()

    async def verify(self, credential: str) -> Identity:
        """Validate an Apple ID token.

        Raises:
            AuthenticationError: If the token is malformed, unsigned by a
                published Apple key, expired, or for another audience
        """
        try:
            kid = jwt.get_unverified_header(credential).get("kid")
        except JWTError as e:
            raise AuthenticationError("invalid_token", f"Malformed Apple ID token: {e}") from e

        key = await self.key_cache.get_key(kid, self)
        if key is None:
            logger.warning(f"No matching Apple key found for kid: {kid}")
            raise AuthenticationError("invalid_token", "No matching Apple signing key")

        audience = self.settings.apple_client_id or None
        try:
            claims = jwt.decode(
                credential,
                key,
                algorithms=["RS256"],
                audience=audience,
                issuer=self.APPLE_ISSUER,
                options={"verify_aud": audience is not None, "verify_at_hash": False},
            )
        except JWTError as e:
            logger.warning(f"Apple ID token validation failed: {e}")
            raise AuthenticationError("invalid_token", f"Invalid Apple ID token: {e}") from e

        return identity_service.from_apple(claims)


# =============================================================================
# Facebook
# =============================================================================


class FacebookVerifier(_ProviderClient):
    """Facebook Login: validate an access token, then read the profile."""

    provider = Provider.FACEBOOK

    GRAPH_URL = "https://graph.facebook.com"
    PROFILE_FIELDS = "id,name,email,picture"

    async def verify(self, credential: str) -> Identity:
        """Validate a Facebook user access token.

        Raises:
            ConfigurationError: If the app id/secret are not configured
            AuthenticationError: If Facebook does not vouch for the token
        """
        app_id = self.settings.facebook_app_id
        app_secret = self.settings.facebook_app_secret
        if not self.settings.facebook_enabled:
            raise ConfigurationError(
                "facebook_env_missing", "FACEBOOK_APP_ID and FACEBOOK_APP_SECRET are required"
            )

        debug = await self._request(
            "GET",
            f"{self.GRAPH_URL}/debug_token",
            params={"input_token": credential, "access_token": f"{app_id}|{app_secret}"},
        )
        data = self._json(debug).get("data")
        if not isinstance(data, dict):
            data = {}
        if debug.status_code != 200 or not data.get("is_valid"):
            logger.warning(f"Facebook debug_token rejected access token ({debug.status_code})")
            raise AuthenticationError("invalid_token", "Facebook access token is not valid")

        token_app = data.get("app_id")
        if token_app is not None and str(token_app) != app_id:
            logger.warning("Facebook access token was issued for another app")
            raise AuthenticationError("invalid_token", "Facebook access token app mismatch")

        me = await self._request(
            "GET",
            f"{self.GRAPH_URL}/me",
            params={"fields": self.PROFILE_FIELDS, "access_token": credential},
        )
        profile = self._json(me)
        if me.status_code != 200 or not profile:
            logger.warning(f"Facebook profile fetch failed ({me.status_code})")
            raise AuthenticationError("invalid_token", "Facebook profile fetch failed")

        return identity_service.from_facebook(profile)
