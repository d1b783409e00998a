"""ADSCOUT — Static Ingestion Catalog.

Versioned, read-only reference data used by the scrape pipeline:
the per-mode source query profiles, the commerce keyword list, the
category classification table, and the sample ads used as fallback.

Everything here is built once at import time. Bump CATALOG_VERSION
whenever a table changes so stored rows can be traced to the data
that produced them.
"""

from typing import Dict, Tuple

from pydantic import BaseModel

from adscout.config import IngestionMode

CATALOG_VERSION = "1.0.0"

PLATFORM = "Facebook"
COUNTRY = "India"
COUNTRY_CODE = "IN"
SAMPLE_AD_URL = "https://facebook.com/ads/library"


# ─────────────────────────────────────────────
# SOURCE QUERY PROFILES
# ─────────────────────────────────────────────

BASE_FIELDS = (
    "id",
    "ad_creative_body",
    "page_name",
    "ad_snapshot_url",
    "ad_delivery_start_time",
    "impressions",
    "spend",
    "demographic_distribution",
    "region_distribution",
)

COMMERCE_FIELDS = (
    "id",
    "ad_creative_bodies",
    "ad_creative_link_titles",
    "ad_creative_link_descriptions",
    "ad_creative_link_captions",
    "page_name",
    "ad_snapshot_url",
    "ad_delivery_start_time",
    "ad_delivery_stop_time",
    "impressions",
    "spend",
)

# Sent as a single unordered keyword query
COMMERCE_SEARCH_TERMS = (
    "sale",
    "discount",
    "offer",
    "shop now",
    "buy now",
    "free delivery",
)


class ModeProfile(BaseModel):
    """How one ingestion mode queries, maps, and falls back."""

    model_config = {"frozen": True}

    ad_type: str
    fields: Tuple[str, ...]
    search_terms: Tuple[str, ...] = ()
    keyword_filter: bool = False
    engagement_split: bool = False
    allow_fallback: bool = True


MODE_PROFILES: Dict[IngestionMode, ModeProfile] = {
    IngestionMode.BASIC: ModeProfile(
        ad_type="POLITICAL_AND_ISSUE_ADS",
        fields=BASE_FIELDS,
    ),
    IngestionMode.KEYWORD: ModeProfile(
        ad_type="ALL",
        fields=COMMERCE_FIELDS,
        search_terms=COMMERCE_SEARCH_TERMS,
        keyword_filter=True,
        engagement_split=True,
    ),
    IngestionMode.STRICT: ModeProfile(
        ad_type="ALL",
        fields=COMMERCE_FIELDS,
        search_terms=COMMERCE_SEARCH_TERMS,
        engagement_split=True,
        allow_fallback=False,
    ),
}


def get_profile(mode: IngestionMode) -> ModeProfile:
    """Look up the profile for an ingestion mode."""
    return MODE_PROFILES[mode]


# ─────────────────────────────────────────────
# KEYWORD TABLES
# ─────────────────────────────────────────────

# A source ad is kept in keyword mode only if its text contains one of these
COMMERCE_KEYWORDS = (
    "buy",
    "shop",
    "sale",
    "discount",
    "offer",
    "deal",
    "price",
    "order now",
    "free shipping",
    "free delivery",
    "cash on delivery",
    "limited time",
    "% off",
    "coupon",
    "cashback",
    "no cost emi",
    "checkout",
    "add to cart",
    "new arrival",
    "best seller",
)

# Ordered: the first category with a matching keyword wins
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "Electronics",
        ("phone", "mobile", "laptop", "electronic", "gadget", "headphone", "earbuds", "camera", "smartwatch"),
    ),
    (
        "Fashion",
        ("fashion", "clothing", "dress", "shoes", "apparel", "saree", "kurta", "jewellery", "handbag"),
    ),
    (
        "Beauty",
        ("beauty", "skincare", "makeup", "cosmetic", "serum", "lipstick", "hair care"),
    ),
    (
        "Health & Fitness",
        ("fitness", "health", "gym", "workout", "yoga", "protein", "supplement", "ayurved"),
    ),
    (
        "Home & Kitchen",
        ("home", "kitchen", "furniture", "decor", "cookware", "appliance", "mattress"),
    ),
    (
        "Education",
        ("course", "learn", "education", "training", "class", "coaching", "exam"),
    ),
)

DEFAULT_CATEGORY = "General"


# ─────────────────────────────────────────────
# FALLBACK SET
# ─────────────────────────────────────────────


class SampleAd(BaseModel):
    """A literal sample ad; days_active is drawn per request."""

    model_config = {"frozen": True}

    title: str
    description: str
    image_url: str
    likes: int
    comments: int
    shares: int
    brand: str
    category: str


FALLBACK_ADS: Tuple[SampleAd, ...] = (
    SampleAd(
        title="Digital Marketing Course - Learn Online",
        description="Master digital marketing with our comprehensive course. Perfect for beginners and professionals. 100% practical training with live projects.",
        image_url="https://images.unsplash.com/photo-1460925895917-afdab827c52f?w=400&h=300&fit=crop",
        likes=1250,
        comments=89,
        shares=42,
        brand="EduTech India",
        category="Education",
    ),
    SampleAd(
        title="Premium Smartphone at Best Price",
        description="Get the latest smartphone with amazing features. 48MP camera, 5000mAh battery, 128GB storage. Limited time offer!",
        image_url="https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?w=400&h=300&fit=crop",
        likes=2100,
        comments=156,
        shares=78,
        brand="TechMart India",
        category="Electronics",
    ),
    SampleAd(
        title="Online Fitness Training Program",
        description="Transform your body with our expert-led fitness program. Personal trainers, nutrition guidance, and 24/7 support included.",
        image_url="https://images.unsplash.com/photo-1571019613454-1cb2f99b2d8b?w=400&h=300&fit=crop",
        likes=890,
        comments=67,
        shares=34,
        brand="FitIndia",
        category="Health & Fitness",
    ),
    SampleAd(
        title="E-commerce Business Course",
        description="Start your own online business with our comprehensive e-commerce course. Learn dropshipping, marketing, and scaling strategies.",
        image_url="https://images.unsplash.com/photo-1556742049-0cfed4f6a45d?w=400&h=300&fit=crop",
        likes=1456,
        comments=203,
        shares=89,
        brand="BizGuru India",
        category="Business",
    ),
    SampleAd(
        title="Affordable Health Insurance",
        description="Protect your family with comprehensive health insurance starting at just ₹99/month. Cashless claims, 24/7 support.",
        image_url="https://images.unsplash.com/photo-1559757148-5c350d0d3c56?w=400&h=300&fit=crop",
        likes=567,
        comments=45,
        shares=23,
        brand="SecureLife India",
        category="Insurance",
    ),
    SampleAd(
        title="Learn Web Development - Full Stack",
        description="Master MERN stack development. Get job-ready skills in 6 months. 100% placement assistance. Live projects included.",
        image_url="https://images.unsplash.com/photo-1498050108023-c5249f4df085?w=400&h=300&fit=crop",
        likes=980,
        comments=124,
        shares=56,
        brand="CodeAcademy India",
        category="Technology",
    ),
    SampleAd(
        title="Organic Food Delivery Service",
        description="Fresh organic vegetables and fruits delivered to your doorstep. Chemical-free farming. Order now and get 20% off!",
        image_url="https://images.unsplash.com/photo-1542838132-92c53300491e?w=400&h=300&fit=crop",
        likes=654,
        comments=87,
        shares=31,
        brand="FreshHarvest",
        category="Food & Beverage",
    ),
)
