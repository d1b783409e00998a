"""ADSCOUT — Ad Record Model.

One row per observed advertisement, owned by the caller who triggered
the scrape. Rows are append-only: the scrape endpoint never updates or
deletes them, and repeated scrapes may store the same ad twice.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field


class AdRecord(SQLModel, table=True):
    """A scraped (or sample) ad stored for a single user."""

    __tablename__ = "ads"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str
    platform: str = Field(default="Facebook")
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    likes: int = 0
    comments: int = 0
    shares: int = Field(default=0, description="May be negative for split engagement")
    country: str = Field(default="India")
    days_active: int = Field(default=1, description="Whole days the ad has run")
    brand: str
    category: str
    ad_url: Optional[str] = None
    user_id: str = Field(index=True, description="Authenticated caller identity")
    scraped_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
