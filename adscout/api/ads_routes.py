"""ADSCOUT — Scrape Ads Route."""

import time
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse
from sqlmodel import Session

from adscout.config import Settings, get_settings
from adscout.connectors.identity.client import IdentityClient
from adscout.connectors.meta.client import MetaClient
from adscout.database import get_session
from adscout.ingestion.pipeline import run_scrape
from adscout.models.ingestion_models import ErrorResponse, ScrapeAdsResponse
from adscout.core.logging import get_logger

logger = get_logger("api.ads")

router = APIRouter(tags=["Ads"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

SCRAPE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


# ── Dependencies ──


async def get_identity_client(settings: Settings = Depends(get_settings)):
    """Dependency — yields an identity client, closed after the request."""
    client = IdentityClient(settings)
    try:
        yield client
    finally:
        await client.close()


async def get_meta_client(settings: Settings = Depends(get_settings)):
    """Dependency — yields an Ad Library client, closed after the request."""
    client = MetaClient(settings)
    try:
        yield client
    finally:
        await client.close()


# ── Endpoints ──


@router.options("/scrape-ads", include_in_schema=False)
async def scrape_ads_preflight():
    """CORS preflight: empty body, no auth."""
    return Response(content=None, headers=CORS_HEADERS)


@router.api_route(
    "/scrape-ads",
    methods=SCRAPE_METHODS,
    response_model=ScrapeAdsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def scrape_ads(
    request: Request,
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
    identity: IdentityClient = Depends(get_identity_client),
    meta: MetaClient = Depends(get_meta_client),
    session: Session = Depends(get_session),
):
    """Scrape Facebook ads for India and save them for the caller.

    Body (optional): ``{"dateRange": <days to look back, default 30>}``.
    Falls back to sample ads when the Ad Library is unavailable, unless
    the service runs in strict mode.
    """
    started = time.perf_counter()
    result = await run_scrape(
        authorization=authorization,
        raw_body=await request.body(),
        settings=settings,
        identity=identity,
        meta=meta,
        session=session,
    )
    duration_ms = round((time.perf_counter() - started) * 1000, 1)

    if not result.ok:
        logger.error(
            f"Error in scrape-ads ({result.error.kind.value}): {result.error.message}",
            extra={"endpoint": "scrape-ads", "status_code": 500, "duration_ms": duration_ms},
        )
        body = ErrorResponse(error=result.error.message)
        return JSONResponse(body.model_dump(), status_code=500, headers=CORS_HEADERS)

    body = ScrapeAdsResponse(
        ads=result.inserted,
        message=result.message,
        fallback=result.fallback,
        source=result.source,
        dateRange=result.window,
    )
    logger.info(
        result.message,
        extra={"endpoint": "scrape-ads", "status_code": 200, "duration_ms": duration_ms},
    )
    return JSONResponse(body.model_dump(), status_code=200, headers=CORS_HEADERS)
