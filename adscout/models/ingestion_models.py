"""ADSCOUT — Scrape Request / Result Schemas."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ScrapeAdsRequest(BaseModel):
    """Body for /scrape-ads. Every field is optional."""

    date_range: int = Field(default=30, ge=0, le=3650, alias="dateRange")
    """Days to look back from today."""

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"dateRange": 7}, {}]},
    }


class DateWindow(BaseModel):
    """Delivery-date bounds sent to the ad library, as YYYY-MM-DD."""

    start: str
    end: str


class ErrorKind(str, Enum):
    """Why a scrape request failed."""

    AUTHENTICATION = "authentication"
    INVALID_REQUEST = "invalid_request"
    CONFIGURATION = "configuration"
    SOURCE_UNAVAILABLE = "source_unavailable"
    EMPTY_RESULT = "empty_result"
    STORAGE = "storage"
    UNEXPECTED = "unexpected"


class IngestionError(BaseModel):
    """A failed scrape. Every kind is reported to the caller as HTTP 500."""

    kind: ErrorKind
    message: str


class IngestionResult(BaseModel):
    """Outcome of one scrape request: either inserted rows or an error."""

    inserted: int = 0
    fallback: bool = False
    window: Optional[DateWindow] = None
    error: Optional[IngestionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def source(self) -> str:
        return "fallback" if self.fallback else "facebook_api"

    @property
    def message(self) -> str:
        if self.fallback:
            return f"Sample Indian ads data added ({self.inserted} ads)"
        return f"Successfully scraped {self.inserted} real Facebook ads from India"

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "IngestionResult":
        return cls(error=IngestionError(kind=kind, message=message))


class ScrapeAdsResponse(BaseModel):
    """Success body for /scrape-ads."""

    success: bool = True
    ads: int
    message: str
    fallback: bool
    source: str
    dateRange: DateWindow


class ErrorResponse(BaseModel):
    """Failure body for /scrape-ads."""

    success: bool = False
    error: str
