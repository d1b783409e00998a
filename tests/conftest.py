"""Shared fixtures: in-memory database, fake identity/source clients."""

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from adscout.api.ads_routes import get_identity_client, get_meta_client
from adscout.config import IngestionMode, Settings, get_settings
from adscout.connectors.identity.client import IdentityError
from adscout.connectors.meta.client import MetaAPIError
from adscout.database import get_session
from adscout.main import app
from adscout.models.ad_models import AdRecord  # noqa: F401

USER_ID = "7d4f6a3e-1b2c-4e5f-9a8b-0c1d2e3f4a5b"
TOKEN = "valid-token"


class FakeIdentity:
    """Resolves TOKEN to USER_ID; anything else is rejected."""

    def __init__(self):
        self.calls: List[str] = []

    async def resolve(self, token: str) -> str:
        self.calls.append(token)
        if token != TOKEN:
            raise IdentityError("invalid JWT")
        return USER_ID

    async def close(self) -> None:
        pass


class FakeMeta:
    """Stands in for MetaClient; returns canned ads or raises."""

    def __init__(
        self,
        ads: Optional[List[Dict[str, Any]]] = None,
        configured: bool = True,
        error: Optional[str] = None,
    ):
        self.ads = ads or []
        self.is_configured = configured
        self.error = error
        self.calls: List[tuple] = []

    async def fetch_ads(self, profile, date_min: str, date_max: str):
        self.calls.append((profile, date_min, date_max))
        if self.error:
            raise MetaAPIError(self.error, 400)
        return self.ads

    async def close(self) -> None:
        pass


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def make_client(engine, identity):
    """Build a TestClient wired to fakes for a given mode and source."""

    def _make(
        mode: IngestionMode = IngestionMode.KEYWORD,
        meta: Optional[FakeMeta] = None,
    ):
        settings = Settings(
            ingestion_mode=mode,
            meta_access_token="fb-token",
            supabase_url="https://project.supabase.co",
            _env_file=None,
        )
        meta = meta or FakeMeta(configured=False)

        def _session():
            with Session(engine) as s:
                yield s

        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_identity_client] = lambda: identity
        app.dependency_overrides[get_meta_client] = lambda: meta
        app.dependency_overrides[get_session] = _session
        return TestClient(app), meta

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}
