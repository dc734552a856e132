"""Tests for the AppState container."""
import asyncio

from gateway.app_state import build_app_state
from gateway.monitoring import ErrorLog, ViewCounter
from gateway.settings import Settings
from gateway.upstream.anilist import AniListClient
from gateway.upstream.catalog import CatalogClient


def test_build_app_state(tmp_path):
    settings = Settings(_env_file=None, catalog_base_url="https://catalog.example", error_log_dir=tmp_path)

    state = build_app_state(settings)

    assert len(state.cache) == 0
    assert isinstance(state.gateway.upstreams.catalog, CatalogClient)
    assert isinstance(state.gateway.upstreams.metadata, AniListClient)
    assert state.gateway.upstreams.resolver.catalog is state.gateway.upstreams.catalog
    assert isinstance(state.views, ViewCounter)
    assert isinstance(state.errors, ErrorLog)
    assert state.errors.log_dir == tmp_path.resolve()
    asyncio.run(state.aclose())


def test_aclose_closes_clients(tmp_path):
    settings = Settings(_env_file=None, stats_url="https://stats.example", error_log_dir=tmp_path)
    state = build_app_state(settings)
    catalog = state.gateway.upstreams.catalog
    metadata = state.gateway.upstreams.metadata

    asyncio.run(state.aclose())

    assert catalog.client.is_closed
    assert metadata.client.is_closed
    assert state.views.client.is_closed
    assert state.closeables == []


def test_each_state_has_its_own_cache(tmp_path):
    settings = Settings(_env_file=None, error_log_dir=tmp_path)
    first, second = build_app_state(settings), build_app_state(settings)

    first.cache.put("recent_1", [], now=0)

    assert "recent_1" not in second.cache
    asyncio.run(first.aclose())
    asyncio.run(second.aclose())
