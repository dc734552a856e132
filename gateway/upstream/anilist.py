"""Async AniList GraphQL client for metadata, recommendations and upcoming releases."""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from gateway.upstream.base import UpstreamError

logger = logging.getLogger(__name__)

PER_PAGE = 20

MEDIA_FIELDS = """
      id
      title { romaji english native }
      coverImage { large }
      status
      format
      episodes
      averageScore
"""

QUERY_SEARCH = """
query ($search: String, $page: Int, $perPage: Int) {
  Page(page: $page, perPage: $perPage) {
    pageInfo { hasNextPage }
    media(search: $search, type: ANIME, sort: SEARCH_MATCH) {%s}
  }
}
""" % MEDIA_FIELDS

QUERY_ANIME = """
query ($id: Int) {
  Media(id: $id, type: ANIME) {%s
    description(asHtml: false)
    genres
    recommendations(sort: RATING_DESC, perPage: 25) {
      nodes { mediaRecommendation {%s} }
    }
  }
}
""" % (MEDIA_FIELDS, MEDIA_FIELDS)

QUERY_UPCOMING = """
query ($page: Int, $perPage: Int) {
  Page(page: $page, perPage: $perPage) {
    pageInfo { hasNextPage }
    media(type: ANIME, status: NOT_YET_RELEASED, sort: POPULARITY_DESC) {%s}
  }
}
""" % MEDIA_FIELDS


def normalize_media(media: dict[str, Any]) -> dict[str, Any]:
    """Flatten an AniList media object into a search hit."""
    title = media.get("title") or {}
    cover = media.get("coverImage") or {}
    return {
        "id": media.get("id"),
        "title": title.get("romaji") or title.get("english"),
        "english": title.get("english"),
        "native": title.get("native"),
        "image": cover.get("large"),
        "status": media.get("status"),
        "format": media.get("format"),
        "episodes": media.get("episodes"),
        "score": media.get("averageScore"),
    }


def _normalize_page(page_data: dict[str, Any], page: int) -> dict[str, Any]:
    page_info = page_data.get("pageInfo") or {}
    return {
        "results": [normalize_media(m) for m in page_data.get("media") or []],
        "page": page,
        "hasNextPage": bool(page_info.get("hasNextPage")),
    }


class AniListClient:
    """Client for the AniList GraphQL API."""

    def __init__(
        self,
        url: str = "https://graphql.anilist.co",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
        logger.info(f"AniListClient initialized ({self.url})")

    async def aclose(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        response = await self.client.post(self.url, json={"query": query, "variables": variables})
        response.raise_for_status()
        payload = response.json()
        if payload.get("errors"):
            message = payload["errors"][0].get("message", "unknown error")
            raise UpstreamError(f"AniList query failed: {message}")
        return payload.get("data") or {}

    async def search(self, query: str, page: int | str = 1) -> dict[str, Any]:
        """Search anime by title, best match first."""
        page = int(page)
        data = await self._query(QUERY_SEARCH, {"search": query, "page": page, "perPage": PER_PAGE})
        return _normalize_page(data.get("Page") or {}, page)

    async def fetch_anime(self, anime_id: int | str) -> dict[str, Any]:
        """Fetch one anime with its community recommendations."""
        data = await self._query(QUERY_ANIME, {"id": int(anime_id)})
        media = data.get("Media")
        if not media:
            raise UpstreamError(f"AniList returned no media for id {anime_id}")

        anime = normalize_media(media)
        anime["description"] = media.get("description")
        anime["genres"] = media.get("genres") or []
        nodes = (media.get("recommendations") or {}).get("nodes") or []
        anime["recommendations"] = [
            normalize_media(node["mediaRecommendation"])
            for node in nodes
            if node.get("mediaRecommendation")
        ]
        return anime

    async def upcoming(self, page: int | str) -> dict[str, Any]:
        """Most anticipated titles that have not started airing."""
        page = int(page)
        data = await self._query(QUERY_UPCOMING, {"page": page, "perPage": PER_PAGE})
        return _normalize_page(data.get("Page") or {}, page)
