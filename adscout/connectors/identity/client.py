"""ADSCOUT — Identity Service Client.

Resolves a bearer token to a caller identity through Supabase Auth
(GET /auth/v1/user).
"""

from typing import Optional

import httpx

from adscout.config import Settings, settings as default_settings
from adscout.core.logging import get_logger

logger = get_logger("identity.client")

REQUEST_TIMEOUT = 30.0  # seconds


class IdentityError(Exception):
    """Raised when a token cannot be resolved to a user."""


class IdentityClient:
    """Async client for the Supabase Auth user endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=REQUEST_TIMEOUT, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def resolve(self, token: str) -> str:
        """Return the user id that owns ``token``."""
        if not self.settings.supabase_url:
            raise IdentityError("Identity service URL is not configured")

        url = f"{self.settings.supabase_url.rstrip('/')}/auth/v1/user"
        headers = {
            "apikey": self.settings.supabase_anon_key,
            "Authorization": f"Bearer {token}",
        }
        client = await self._get_client()
        try:
            resp = await client.get(url, headers=headers)
        except httpx.RequestError as e:
            raise IdentityError(f"Identity service unreachable: {e}") from e

        if resp.is_error:
            raise IdentityError(f"Identity service rejected token ({resp.status_code})")

        try:
            user = resp.json()
        except ValueError as e:
            raise IdentityError("Identity service returned invalid JSON") from e

        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            raise IdentityError("Identity service returned no user")
        return str(user_id)
