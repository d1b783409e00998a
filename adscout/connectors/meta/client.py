"""ADSCOUT — Meta Ad Library Client.

Single-shot reads from the public ads_archive endpoint. No retries and
no pagination: one request, one page of results.
"""

import json
from typing import Any, Dict, List, Optional

import httpx

from adscout.config import Settings, settings as default_settings
from adscout.core.catalog import COUNTRY_CODE, ModeProfile
from adscout.core.logging import get_logger

logger = get_logger("meta.client")

REQUEST_TIMEOUT = 30.0  # seconds


class MetaAPIError(Exception):
    """Raised when the Ad Library call fails or returns an error."""

    def __init__(self, message: str, status_code: int = 0, error_code: int = 0):
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class MetaClient:
    """Async HTTP client for the Meta Ad Library API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self.access_token = self.settings.meta_access_token
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return f"{self.settings.meta_base_url}/{self.settings.meta_api_version}"

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=REQUEST_TIMEOUT, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ── Core Request Method ──

    async def _request(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET once; raise MetaAPIError on any transport or API failure."""
        params["access_token"] = self.access_token
        client = await self._get_client()

        try:
            resp = await client.get(url, params=params)
        except httpx.RequestError as e:
            raise MetaAPIError(f"Facebook API request failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.is_error or "error" in body:
            error = body.get("error") or {}
            logger.error(
                f"Facebook API error: {json.dumps(error)}",
                extra={"status_code": resp.status_code},
            )
            raise MetaAPIError(
                f"Facebook API error: {error.get('message') or 'Unknown error'}",
                resp.status_code,
                error.get("code", 0),
            )
        return body

    # ── Ads Archive ──

    def build_archive_params(
        self, profile: ModeProfile, date_min: str, date_max: str
    ) -> Dict[str, Any]:
        """Query parameters for one ads_archive page (without the token)."""
        params: Dict[str, Any] = {
            "ad_reached_countries": json.dumps([COUNTRY_CODE]),
            "ad_delivery_date_min": date_min,
            "ad_delivery_date_max": date_max,
            "ad_type": profile.ad_type,
            "limit": str(self.settings.ad_library_limit),
            "fields": ",".join(profile.fields),
        }
        if profile.search_terms:
            params["search_terms"] = " ".join(profile.search_terms)
            params["search_type"] = "KEYWORD_UNORDERED"
        return params

    async def fetch_ads(
        self, profile: ModeProfile, date_min: str, date_max: str
    ) -> List[Dict[str, Any]]:
        """Fetch a single page of ads delivered in India within the window."""
        url = f"{self.base_url}/ads_archive"
        params = self.build_archive_params(profile, date_min, date_max)
        logger.info(
            f"Calling Facebook Ad Library: ad_type={profile.ad_type} "
            f"{date_min} → {date_max}",
            extra={"endpoint": "ads_archive"},
        )
        result = await self._request(url, params)
        data = result.get("data") or []
        if not isinstance(data, list) or not all(isinstance(ad, dict) for ad in data):
            raise MetaAPIError("Facebook API error: malformed ads_archive response")
        logger.info(f"Fetched {len(data)} ads from ads_archive", extra={"count": len(data)})
        return data
