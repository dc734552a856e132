"""Contracts the gateway core requires from its upstream collaborators."""
from __future__ import annotations

from typing import Any, Mapping, Protocol


class UpstreamError(Exception):
    """An upstream answered, but not with something the gateway can use."""


class VideoCatalogSource(Protocol):
    """Scraped video catalog: entities, episodes, downloads and listings."""

    async def fetch_entity(self, anime_id: str) -> dict[str, Any]: ...

    async def search(self, query: str, page: int | str = 1) -> list[dict[str, Any]]: ...

    async def fetch_episode(self, episode_id: str) -> Any: ...

    async def obtain_auth_token(self) -> str: ...

    async def fetch_download_links(self, episode_id: str, token: str) -> Any: ...

    async def recent(self, page: int | str) -> list[dict[str, Any]]: ...

    async def popular(self, page: int | str, limit: int) -> list[dict[str, Any]]: ...


class MetadataSource(Protocol):
    """Community metadata and recommendations."""

    async def search(self, query: str, page: int | str = 1) -> dict[str, Any]: ...

    async def fetch_anime(self, anime_id: int | str) -> dict[str, Any]: ...

    async def upcoming(self, page: int | str) -> dict[str, Any]: ...


class AnalyticsSink(Protocol):
    async def record_view(self, headers: Mapping[str, str]) -> None: ...


class ErrorSink(Protocol):
    def record_error(self, error: BaseException, path: str | None = None) -> None: ...
