"""Dependency wiring — builds sessions, API clients, sources and list controllers."""

import logging
from pathlib import Path

import httpx
from fastapi import Request

from schoolboard.application.interfaces import CollectionSource, Notifier
from schoolboard.application.services import ListController, ListingService, SessionContext
from schoolboard.config import Settings, get_settings
from schoolboard.domain.entities import ENTITY_TYPES, RecordT
from schoolboard.infrastructure.http import ResponseCache, SchoolApiClient
from schoolboard.infrastructure.sources import (
    FixtureCollectionSource,
    RemoteCollectionSource,
    load_fixture_file,
)
from schoolboard.infrastructure.storage.file_credential_store import FileCredentialStore

logger = logging.getLogger(__name__)


def build_session(settings: Settings | None = None) -> SessionContext:
    """A session hydrated from the persisted credentials file."""
    settings = settings or get_settings()
    session = SessionContext(FileCredentialStore(settings.credentials_file))
    session.hydrate()
    return session


def build_api_client(
    session: SessionContext,
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> SchoolApiClient:
    settings = settings or get_settings()
    return SchoolApiClient(
        settings.api_base_url,
        session,
        http_client=http_client,
        cache=ResponseCache(ttl_seconds=settings.cache_ttl_seconds),
        timeout=settings.request_timeout,
    )


def build_fixture_sources(settings: Settings | None = None) -> dict[str, FixtureCollectionSource]:
    """One fixture source per known collection; empty when no fixture file exists."""
    settings = settings or get_settings()
    path = Path(settings.fixtures_file)
    sources: dict[str, FixtureCollectionSource] = {}
    if path.exists():
        sources = load_fixture_file(path, latency_ms=settings.fixture_latency_ms)
    else:
        logger.warning("Fixture file %s not found — starting with empty collections", path)
    for collection, entity_type in ENTITY_TYPES.items():
        sources.setdefault(
            collection,
            FixtureCollectionSource(entity_type, latency_ms=settings.fixture_latency_ms),
        )
    return sources


def remote_list_controller(
    entity_type: type[RecordT],
    api_client: SchoolApiClient,
    notifier: Notifier,
    **options,
) -> ListController[RecordT]:
    """List controller for a page backed by the remote paged listing."""
    return ListController(RemoteCollectionSource(entity_type, api_client), notifier, **options)


def fixture_list_controller(
    source: FixtureCollectionSource[RecordT],
    notifier: Notifier,
    **options,
) -> ListController[RecordT]:
    """List controller for a fixture-only page (client-side filtering)."""
    return ListController(source, notifier, **options)


# ── FastAPI dependencies (fixture API) ───────────────────────────────


def get_fixture_sources(request: Request) -> dict[str, CollectionSource]:
    """Provides the fixture sources attached to the running app."""
    return request.app.state.fixture_sources


def get_listing_service() -> ListingService:
    return ListingService()
