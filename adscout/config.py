"""ADSCOUT — Central Configuration via Pydantic Settings."""

import os
from enum import Enum

from pydantic_settings import BaseSettings


class IngestionMode(str, Enum):
    """Which ingestion profile the scrape endpoint runs."""

    BASIC = "basic"  # Political ads, random engagement, fallback on any miss
    KEYWORD = "keyword"  # Commerce search + keyword filter, fallback on any miss
    STRICT = "strict"  # Commerce search, no fallback — every miss is an error


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Meta Ad Library ──
    meta_access_token: str = ""
    meta_api_version: str = "v18.0"
    meta_base_url: str = "https://graph.facebook.com"
    ad_library_limit: int = 50

    # ── Identity (Supabase Auth) ──
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # ── Database ──
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    ingestion_mode: IngestionMode = IngestionMode.KEYWORD

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/adscout.db"
        return "sqlite:///./adscout.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def get_settings() -> Settings:
    """Dependency — returns the process-wide settings instance."""
    return settings
