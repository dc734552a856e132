"""Async client for the video-catalog JSON API."""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from gateway.upstream.base import UpstreamError

logger = logging.getLogger(__name__)

USER_AGENT = "ab-anime-gateway/1.0"


class CatalogClient:
    """
    Client for the scraped video catalog.

    Listing endpoints answer ``{"results": [...]}``; the client unwraps them.
    Entity, episode and download endpoints are passed through as returned.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        credentials: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
            },
        )
        logger.info(f"CatalogClient initialized ({self.base_url})")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _get_json(self, endpoint: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        response = await self.client.get(endpoint, params=params, headers=headers)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _unwrap(payload: Any, endpoint: str) -> list[dict[str, Any]]:
        if isinstance(payload, dict):
            payload = payload.get("results")
        if not isinstance(payload, list):
            raise UpstreamError(f"Unexpected listing payload from {endpoint}")
        return payload

    async def fetch_entity(self, anime_id: str) -> dict[str, Any]:
        """Fetch a single anime by catalog id."""
        return await self._get_json(f"/anime/{quote(anime_id, safe='')}")

    async def search(self, query: str, page: int | str = 1) -> list[dict[str, Any]]:
        """Search the catalog by title. Order is the catalog's relevance order."""
        payload = await self._get_json("/search", params={"keyw": query, "page": page})
        return self._unwrap(payload, "/search")

    async def fetch_episode(self, episode_id: str) -> Any:
        """Fetch stream sources for an episode."""
        return await self._get_json(f"/episode/{quote(episode_id, safe='')}")

    async def recent(self, page: int | str) -> list[dict[str, Any]]:
        payload = await self._get_json("/recent", params={"page": page})
        return self._unwrap(payload, "/recent")

    async def popular(self, page: int | str, limit: int) -> list[dict[str, Any]]:
        payload = await self._get_json("/popular", params={"page": page, "limit": limit})
        return self._unwrap(payload, "/popular")

    async def obtain_auth_token(self) -> str:
        """Log in and return a short-lived token for download requests."""
        response = await self.client.post("/login", json=self.credentials or {})
        response.raise_for_status()
        token = response.json().get("token")
        if not token:
            raise UpstreamError("Catalog login did not return a token")
        return token

    async def fetch_download_links(self, episode_id: str, token: str) -> Any:
        """Fetch download links for an episode using a token from obtain_auth_token."""
        return await self._get_json(
            f"/download/{quote(episode_id, safe='')}",
            headers={"Authorization": f"Bearer {token}"},
        )
