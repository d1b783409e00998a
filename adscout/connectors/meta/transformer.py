"""ADSCOUT — Ad Library → AdRecord Transformer.

Maps raw ads_archive rows onto the AdRecord schema. The Ad Library
exposes no engagement counts, so likes/comments/shares are synthesized:
either independently at random (basic mode) or by splitting an
impressions-based engagement total (keyword and strict modes).
"""

import json
import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from adscout.core.catalog import (
    CATEGORY_KEYWORDS,
    COMMERCE_KEYWORDS,
    COUNTRY,
    DEFAULT_CATEGORY,
    FALLBACK_ADS,
    PLATFORM,
    SAMPLE_AD_URL,
    ModeProfile,
)
from adscout.connectors.meta.client import MetaAPIError
from adscout.models.ad_models import AdRecord
from adscout.core.logging import get_logger

logger = get_logger("meta.transformer")

ENGAGEMENT_RATE = (0.02, 0.07)
LIKES_SHARE = (0.60, 0.80)
COMMENTS_SHARE = (0.15, 0.25)
IMPRESSIONS_FALLBACK = (5000, 50000)


def _first(value: Any) -> Optional[str]:
    """First non-empty string of a list field (or the field itself)."""
    if isinstance(value, list):
        for item in value:
            if item:
                return str(item)
        return None
    return str(value) if value else None


def _texts(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return [str(value)] if value else []


def _parse_time(value: Any) -> Optional[datetime]:
    """Parse an Ad Library timestamp; naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        # Graph API style offsets: 2024-01-15T08:00:00+0000
        try:
            parsed = datetime.strptime(str(value), "%Y-%m-%dT%H:%M:%S%z")
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_impressions(value: Any) -> Optional[int]:
    """Lower bound of an impressions range.

    The source sends {"lower_bound": "1000", "upper_bound": "4999"}, the
    same object as a JSON string, or a bare number.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if isinstance(value, dict):
        value = value.get("lower_bound", value.get("upper_bound"))
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


# ── Heuristics ──


def combined_text(ad: Dict[str, Any]) -> str:
    """Case-folded creative body + page name + link title + link description."""
    parts = (
        _texts(ad.get("ad_creative_bodies"))
        + _texts(ad.get("ad_creative_body"))
        + _texts(ad.get("page_name"))
        + _texts(ad.get("ad_creative_link_titles"))
        + _texts(ad.get("ad_creative_link_descriptions"))
    )
    return " ".join(parts).casefold()


def matches_commerce_keywords(text: str) -> bool:
    """True if the case-folded text mentions any commerce keyword."""
    return any(keyword in text for keyword in COMMERCE_KEYWORDS)


def classify_category(text: str) -> str:
    """First category in table order whose keyword appears in the text."""
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def split_engagement(
    impressions: int, rng=random
) -> Tuple[int, int, int, int]:
    """Synthesize (total, likes, comments, shares) from impressions.

    shares is the remainder and goes negative when the likes and comments
    fractions together exceed 1.
    """
    total = int(impressions * rng.uniform(*ENGAGEMENT_RATE))
    likes = int(total * rng.uniform(*LIKES_SHARE))
    comments = int(total * rng.uniform(*COMMENTS_SHARE))
    shares = total - likes - comments
    return total, likes, comments, shares


def random_engagement(rng=random) -> Tuple[int, int, int]:
    """Independent (likes, comments, shares) for basic mode."""
    return (
        rng.randint(100, 1099),
        rng.randint(20, 219),
        rng.randint(10, 109),
    )


def compute_days_active(
    start: Any,
    stop: Any = None,
    now: Optional[datetime] = None,
    minimum: int = 1,
) -> Optional[int]:
    """Whole days between delivery start and stop (stop defaults to now)."""
    started = _parse_time(start)
    if started is None:
        return None
    now = now or datetime.now(timezone.utc)
    stopped = _parse_time(stop) or now
    return max((stopped - started).days, minimum)


def random_days_active(date_range: int, rng=random) -> int:
    return rng.randint(1, max(date_range, 1))


# ── Mapping ──


def _basic_record(ad: Dict[str, Any], user_id: str, date_range: int) -> AdRecord:
    likes, comments, shares = random_engagement()
    days = compute_days_active(ad.get("ad_delivery_start_time"), minimum=0)
    page_name = ad.get("page_name")
    return AdRecord(
        title=f"{page_name or 'Unknown Page'} - Ad",
        description=_first(ad.get("ad_creative_body")) or "No description available",
        platform=PLATFORM,
        likes=likes,
        comments=comments,
        shares=shares,
        country=COUNTRY,
        days_active=days if days is not None else 0,
        brand=page_name or "Unknown Brand",
        category="Political/Issue",
        ad_url=ad.get("ad_snapshot_url") or None,
        user_id=user_id,
        scraped_at=datetime.now(timezone.utc),
    )


def _commerce_record(ad: Dict[str, Any], user_id: str, date_range: int) -> AdRecord:
    text = combined_text(ad)
    page_name = ad.get("page_name")

    impressions = parse_impressions(ad.get("impressions"))
    if impressions is None:
        impressions = random.randint(*IMPRESSIONS_FALLBACK)
    _, likes, comments, shares = split_engagement(impressions)

    days = compute_days_active(
        ad.get("ad_delivery_start_time"), ad.get("ad_delivery_stop_time")
    )
    if days is None:
        days = random_days_active(date_range)

    description = (
        _first(ad.get("ad_creative_bodies"))
        or _first(ad.get("ad_creative_body"))
        or _first(ad.get("ad_creative_link_descriptions"))
        or "No description available"
    )
    return AdRecord(
        title=_first(ad.get("ad_creative_link_titles"))
        or f"{page_name or 'Unknown Page'} - Ad",
        description=description,
        platform=PLATFORM,
        likes=likes,
        comments=comments,
        shares=shares,
        country=COUNTRY,
        days_active=days,
        brand=page_name or "Unknown Brand",
        category=classify_category(text),
        ad_url=ad.get("ad_snapshot_url") or None,
        user_id=user_id,
        scraped_at=datetime.now(timezone.utc),
    )


def transform_ads(
    raw_ads: List[Dict[str, Any]],
    profile: ModeProfile,
    user_id: str,
    date_range: int,
) -> List[AdRecord]:
    """Map (and in keyword mode, filter) raw Ad Library rows."""
    records: List[AdRecord] = []
    dropped = 0
    for ad in raw_ads:
        if not isinstance(ad, dict):
            raise MetaAPIError(f"Facebook API error: malformed ad record {ad!r:.80}")
        if profile.keyword_filter and not matches_commerce_keywords(combined_text(ad)):
            dropped += 1
            continue
        if profile.engagement_split:
            records.append(_commerce_record(ad, user_id, date_range))
        else:
            records.append(_basic_record(ad, user_id, date_range))

    logger.info(
        f"Transformed {len(raw_ads)} source ads into {len(records)} records ({dropped} dropped by keyword filter)",
        extra={"count": len(records)},
    )
    return records


def build_fallback_records(user_id: str, date_range: int) -> List[AdRecord]:
    """Instantiate the sample ad set for one user."""
    return [
        AdRecord(
            title=sample.title,
            description=sample.description,
            platform=PLATFORM,
            image_url=sample.image_url,
            video_url=None,
            likes=sample.likes,
            comments=sample.comments,
            shares=sample.shares,
            country=COUNTRY,
            days_active=random_days_active(date_range),
            brand=sample.brand,
            category=sample.category,
            ad_url=SAMPLE_AD_URL,
            user_id=user_id,
            scraped_at=datetime.now(timezone.utc),
        )
        for sample in FALLBACK_ADS
    ]
