"""
Application state container.

Holds everything that lives for the whole process: the response cache, the
upstream clients and the monitoring sinks. One instance is built per process
at startup and reached from endpoints through ``request.app.state.app_state``,
which keeps the cache an explicit object rather than a module global and lets
tests inject fakes.

Usage:
    # In lifespan function:
    app.state.app_state = build_app_state(settings)

    # In endpoints (via dependency):
    def get_app_state(request: Request) -> AppState:
        return request.app.state.app_state
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from gateway.cache import CacheStore
from gateway.fetchers import Upstreams
from gateway.monitoring import ErrorLog, ViewCounter
from gateway.resolver import FallbackResolver
from gateway.routing import Gateway
from gateway.upstream.anilist import AniListClient
from gateway.upstream.base import AnalyticsSink, ErrorSink
from gateway.upstream.catalog import CatalogClient

if TYPE_CHECKING:
    from gateway.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Container for all gateway runtime state.

    Attributes:
        gateway: Route dispatcher owning the response cache
        views: Analytics sink called once per request
        errors: Sink receiving every upstream failure
        closeables: Clients to close on shutdown
    """

    gateway: Gateway
    views: AnalyticsSink
    errors: ErrorSink
    closeables: list[Any] = field(default_factory=list)

    @property
    def cache(self) -> CacheStore:
        return self.gateway.cache

    async def aclose(self) -> None:
        """Close every upstream client."""
        for client in self.closeables:
            await client.aclose()
        self.closeables.clear()


def build_app_state(settings: Settings) -> AppState:
    """
    Build the production state from settings.

    Args:
        settings: Validated gateway settings

    Returns:
        A ready AppState with an empty cache
    """
    catalog = CatalogClient(
        settings.catalog_base_url,
        timeout=settings.upstream_timeout,
        credentials=settings.catalog_credentials,
    )
    metadata = AniListClient(settings.anilist_url, timeout=settings.upstream_timeout)
    views = ViewCounter(settings.stats_url)

    upstreams = Upstreams(catalog=catalog, metadata=metadata, resolver=FallbackResolver(catalog))
    state = AppState(
        gateway=Gateway(upstreams, CacheStore()),
        views=views,
        errors=ErrorLog(settings.error_log_dir),
        closeables=[catalog, metadata, views],
    )
    logger.info("Application state built")
    return state
