"""Tests for Ad Library → AdRecord mapping and heuristics."""

import random
from datetime import datetime, timezone

import pytest

from adscout.config import IngestionMode
from adscout.connectors.meta.transformer import (
    COMMENTS_SHARE,
    ENGAGEMENT_RATE,
    LIKES_SHARE,
    build_fallback_records,
    classify_category,
    combined_text,
    compute_days_active,
    matches_commerce_keywords,
    parse_impressions,
    split_engagement,
    transform_ads,
)
from adscout.core.catalog import FALLBACK_ADS, get_profile

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestKeywordFilter:
    def test_free_shipping_matches(self):
        ad = {"ad_creative_bodies": ["Handmade candles. FREE SHIPPING this week"]}
        assert matches_commerce_keywords(combined_text(ad))

    def test_text_without_keywords_is_rejected(self):
        ad = {"page_name": "Ward 12 Residents", "ad_creative_bodies": ["Town hall tonight"]}
        assert not matches_commerce_keywords(combined_text(ad))

    def test_link_fields_count_towards_match(self):
        ad = {
            "page_name": "Nykaa",
            "ad_creative_link_descriptions": ["Use coupon GLOW20"],
        }
        assert matches_commerce_keywords(combined_text(ad))

    def test_keyword_profile_drops_non_matching_ads(self):
        ads = [
            {"page_name": "Ward 12 Residents", "ad_creative_bodies": ["Town hall tonight"]},
            {"page_name": "Urban Kurta", "ad_creative_bodies": ["Festive sale, free shipping"]},
        ]
        records = transform_ads(ads, get_profile(IngestionMode.KEYWORD), "u1", 30)
        assert [r.brand for r in records] == ["Urban Kurta"]


class TestCategory:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("new 5g phone launch", "Electronics"),
            ("designer saree collection", "Fashion"),
            ("vitamin c serum", "Beauty"),
            ("whey protein for the gym", "Health & Fitness"),
            ("modular kitchen sale", "Home & Kitchen"),
            ("crash course for upsc", "Education"),
            ("insurance renewal", "General"),
        ],
    )
    def test_classification(self, text, expected):
        assert classify_category(text) == expected

    def test_first_match_in_table_order_wins(self):
        # Mentions both a laptop and a course: Electronics comes first
        assert classify_category("laptop course bundle") == "Electronics"


class TestEngagement:
    @pytest.mark.parametrize("impressions", [1000, 4999, 25000, 1_000_000])
    def test_split_adds_up_to_total(self, impressions):
        rng = random.Random(impressions)
        for _ in range(50):
            total, likes, comments, shares = split_engagement(impressions, rng)
            assert likes + comments + shares == total
            assert int(impressions * ENGAGEMENT_RATE[0]) <= total <= int(
                impressions * ENGAGEMENT_RATE[1]
            )
            assert int(total * LIKES_SHARE[0]) <= likes <= total * LIKES_SHARE[1]
            assert int(total * COMMENTS_SHARE[0]) <= comments <= total * COMMENTS_SHARE[1]

    def test_shares_can_go_negative(self):
        class HighRng:
            def uniform(self, low, high):
                return high

        _, likes, comments, shares = split_engagement(100_000, HighRng())
        assert shares == 7000 - likes - comments
        assert shares < 0


class TestParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ({"lower_bound": "1000", "upper_bound": "1999"}, 1000),
            ('{"lower_bound": "5000", "upper_bound": "9999"}', 5000),
            ({"upper_bound": "999"}, 999),
            (12000, 12000),
            ("not-json", None),
            (None, None),
        ],
    )
    def test_parse_impressions(self, value, expected):
        assert parse_impressions(value) == expected

    def test_days_active_between_start_and_stop(self):
        assert compute_days_active("2026-10-01T00:00:00+0000", "2026-10-11T08:00:00+0000") == 10

    def test_days_active_defaults_stop_to_now(self):
        assert compute_days_active("2026-10-09T12:00:00Z", now=NOW) == 10

    def test_days_active_has_a_floor_of_one(self):
        assert compute_days_active("2026-10-19T11:00:00Z", now=NOW) == 1
        assert compute_days_active("2026-10-20", "2026-10-18") == 1

    def test_days_active_without_start(self):
        assert compute_days_active(None) is None


class TestRecords:
    def test_commerce_record_mapping(self):
        ad = {
            "page_name": "boAt",
            "ad_creative_bodies": ["", "Wireless earbuds at the best price"],
            "ad_creative_link_titles": ["boAt Airdopes"],
            "ad_snapshot_url": "https://www.facebook.com/ads/archive/render_ad/?id=9",
            "ad_delivery_start_time": "2026-10-10",
            "impressions": {"lower_bound": "20000", "upper_bound": "24999"},
        }
        (record,) = transform_ads([ad], get_profile(IngestionMode.STRICT), "u1", 30)

        assert record.title == "boAt Airdopes"
        assert record.description == "Wireless earbuds at the best price"
        assert record.category == "Electronics"
        assert record.platform == "Facebook"
        assert record.country == "India"
        assert record.user_id == "u1"
        assert record.likes + record.comments + record.shares <= 20000 * 0.07
        assert record.days_active >= 1

    def test_missing_source_fields_get_defaults(self):
        (record,) = transform_ads([{}], get_profile(IngestionMode.STRICT), "u1", 5)

        assert record.title == "Unknown Page - Ad"
        assert record.description == "No description available"
        assert record.brand == "Unknown Brand"
        assert record.ad_url is None
        assert 1 <= record.days_active <= 5

    def test_fallback_records_match_catalog(self):
        records = build_fallback_records("u1", 10)

        assert len(records) == len(FALLBACK_ADS)
        assert [r.title for r in records] == [s.title for s in FALLBACK_ADS]
        assert all(r.user_id == "u1" for r in records)
        assert all(1 <= r.days_active <= 10 for r in records)

    def test_fallback_days_active_with_zero_range(self):
        records = build_fallback_records("u1", 0)
        assert all(r.days_active == 1 for r in records)
