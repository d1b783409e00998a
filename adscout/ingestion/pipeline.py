"""ADSCOUT — Scrape Pipeline.

Runs one scrape request end to end:
  authenticate → resolve window → fetch ads_archive → transform/filter
  (or fall back to sample ads) → batch insert

Every failure comes back as an IngestionResult carrying an ErrorKind;
nothing raised by a connector escapes run_scrape.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import ValidationError
from sqlmodel import Session

from adscout.config import Settings
from adscout.connectors.identity.client import IdentityClient, IdentityError
from adscout.connectors.meta.client import MetaAPIError, MetaClient
from adscout.connectors.meta.transformer import build_fallback_records, transform_ads
from adscout.core.catalog import get_profile
from adscout.ingestion.storage import StorageError, insert_ads
from adscout.models.ad_models import AdRecord
from adscout.models.ingestion_models import (
    DateWindow,
    ErrorKind,
    IngestionResult,
    ScrapeAdsRequest,
)
from adscout.core.logging import get_logger

logger = get_logger("ingestion.pipeline")

DATE_FORMAT = "%Y-%m-%d"
GENERIC_ERROR = "An unexpected error occurred"


class _Abort(Exception):
    """Internal: ends the pipeline with a typed failure."""

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        super().__init__(message)


def resolve_window(date_range: int, today: Optional[datetime] = None) -> DateWindow:
    """Window ending today (UTC) and starting date_range days earlier."""
    end = (today or datetime.now(timezone.utc)).date()
    start = end - timedelta(days=date_range)
    return DateWindow(start=start.strftime(DATE_FORMAT), end=end.strftime(DATE_FORMAT))


def parse_request(raw_body: bytes) -> ScrapeAdsRequest:
    """Parse the optional JSON body; an empty body means all defaults."""
    if not raw_body or not raw_body.strip():
        return ScrapeAdsRequest()
    try:
        payload = json.loads(raw_body)
    except ValueError as e:
        raise _Abort(ErrorKind.INVALID_REQUEST, f"Invalid JSON body: {e}") from e
    if not isinstance(payload, dict):
        raise _Abort(ErrorKind.INVALID_REQUEST, "Request body must be a JSON object")
    try:
        return ScrapeAdsRequest.model_validate(payload)
    except ValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise _Abort(ErrorKind.INVALID_REQUEST, f"Invalid dateRange: {errors}") from e


async def authenticate(authorization: Optional[str], identity: IdentityClient) -> str:
    """Resolve the Authorization header to a caller id."""
    if not authorization:
        raise _Abort(ErrorKind.AUTHENTICATION, "Authorization header is required")
    token = authorization.replace("Bearer ", "", 1).strip()
    try:
        return await identity.resolve(token)
    except IdentityError as e:
        logger.error(f"Auth error: {e}")
        raise _Abort(ErrorKind.AUTHENTICATION, "Invalid authentication") from e


async def _collect_records(
    settings: Settings,
    meta: MetaClient,
    user_id: str,
    request: ScrapeAdsRequest,
    window: DateWindow,
) -> tuple[List[AdRecord], bool]:
    """Return (records, fallback_used) for the configured ingestion mode."""
    profile = get_profile(settings.ingestion_mode)
    strict = not profile.allow_fallback

    if not meta.is_configured:
        if strict:
            raise _Abort(
                ErrorKind.CONFIGURATION, "Facebook access token is not configured"
            )
        logger.info("No Facebook token provided, using fallback data")
        return build_fallback_records(user_id, request.date_range), True

    try:
        raw_ads = await meta.fetch_ads(profile, window.start, window.end)
        records = transform_ads(raw_ads, profile, user_id, request.date_range)
    except MetaAPIError as e:
        if strict:
            raise _Abort(ErrorKind.SOURCE_UNAVAILABLE, str(e)) from e
        logger.warning(f"Facebook API call failed, using fallback data: {e}")
        return build_fallback_records(user_id, request.date_range), True

    if records:
        return records, False

    if strict:
        raise _Abort(
            ErrorKind.EMPTY_RESULT,
            f"No matching Facebook ads found for India between {window.start} and {window.end}",
        )
    logger.info("No matching Facebook ads found, using fallback data")
    return build_fallback_records(user_id, request.date_range), True


async def run_scrape(
    *,
    authorization: Optional[str],
    raw_body: bytes,
    settings: Settings,
    identity: IdentityClient,
    meta: MetaClient,
    session: Session,
) -> IngestionResult:
    """Execute one scrape request and report its outcome."""
    try:
        user_id = await authenticate(authorization, identity)
        logger.info(f"Authenticated user: {user_id}", extra={"user_id": user_id})

        request = parse_request(raw_body)
        window = resolve_window(request.date_range)
        logger.info(
            f"Scraping Facebook ads for India from {window.start} to {window.end} "
            f"(mode={settings.ingestion_mode.value})"
        )

        records, fallback = await _collect_records(
            settings, meta, user_id, request, window
        )

        logger.info(
            f"Attempting to insert {len(records)} ads for user {user_id}",
            extra={"user_id": user_id, "count": len(records)},
        )
        try:
            inserted = insert_ads(session, records)
        except StorageError as e:
            raise _Abort(ErrorKind.STORAGE, f"Failed to save ads: {e}") from e

        result = IngestionResult(inserted=len(inserted), fallback=fallback, window=window)
        logger.info(
            f"Successfully saved {result.inserted} ads for user {user_id}",
            extra={"user_id": user_id, "count": result.inserted, "source": result.source},
        )
        return result

    except _Abort as e:
        return IngestionResult.failure(e.kind, str(e))
    except Exception as e:
        logger.exception("Error in scrape-ads pipeline")
        return IngestionResult.failure(ErrorKind.UNEXPECTED, str(e) or GENERIC_ERROR)
