"""
Pytest configuration and shared fixtures.

Upstream collaborators are replaced by in-memory fakes that record every
call, and the gateway clock is a FakeClock the tests move by hand.
"""
from collections import defaultdict

import pytest
from fastapi.testclient import TestClient

from gateway.app_state import AppState
from gateway.cache import CacheStore
from gateway.fetchers import Upstreams
from gateway.main import create_app
from gateway.resolver import FallbackResolver
from gateway.routing import Gateway


class UpstreamDown(Exception):
    """Stands in for any failing upstream call."""


class FakeClock:
    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class FakeCatalog:
    """Video catalog keeping its data in dicts. Unknown ids raise UpstreamDown."""

    def __init__(self):
        self.entities = {}
        self.search_results = {}
        self.calls = defaultdict(list)
        self.fail_with = {}
        self.tokens_issued = 0

    def _maybe_fail(self, operation):
        if operation in self.fail_with:
            raise self.fail_with[operation]

    async def fetch_entity(self, anime_id):
        self.calls["fetch_entity"].append(anime_id)
        result = self.entities.get(anime_id)
        if result is None:
            raise UpstreamDown(f"no anime {anime_id}")
        if isinstance(result, Exception):
            raise result
        return result

    async def search(self, query, page=1):
        self.calls["search"].append((query, page))
        self._maybe_fail("search")
        return self.search_results.get(query, [])

    async def fetch_episode(self, episode_id):
        self.calls["fetch_episode"].append(episode_id)
        self._maybe_fail("fetch_episode")
        return {"episode": episode_id, "sources": [{"file": f"https://cdn.example/{episode_id}.m3u8"}]}

    async def obtain_auth_token(self):
        self.tokens_issued += 1
        self.calls["obtain_auth_token"].append(self.tokens_issued)
        return f"token-{self.tokens_issued}"

    async def fetch_download_links(self, episode_id, token):
        self.calls["fetch_download_links"].append((episode_id, token))
        return {"360p": f"https://dl.example/{episode_id}?auth={token}"}

    async def recent(self, page):
        self.calls["recent"].append(page)
        self._maybe_fail("recent")
        return [{"id": f"recent-{page}-{len(self.calls['recent'])}"}]

    async def popular(self, page, limit):
        self.calls["popular"].append((page, limit))
        return [{"id": f"popular-{page}"}]


class FakeMetadata:
    """AniList stand-in."""

    def __init__(self):
        self.search_results = {}
        self.anime = {}
        self.calls = defaultdict(list)

    async def search(self, query, page=1):
        self.calls["search"].append((query, page))
        return {"results": self.search_results.get(query, []), "page": int(page), "hasNextPage": False}

    async def fetch_anime(self, anime_id):
        self.calls["fetch_anime"].append(anime_id)
        return self.anime[anime_id]

    async def upcoming(self, page):
        self.calls["upcoming"].append(page)
        return {"results": [{"id": 900, "title": "Soon"}], "page": int(page), "hasNextPage": True}


class FakeViews:
    def __init__(self):
        self.views = []
        self.fail = False

    async def record_view(self, headers):
        self.views.append(headers)
        if self.fail:
            raise UpstreamDown("stats backend unreachable")


class FakeErrors:
    def __init__(self):
        self.errors = []

    def record_error(self, error, path=None):
        self.errors.append((error, path))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def catalog():
    return FakeCatalog()


@pytest.fixture()
def metadata():
    return FakeMetadata()


@pytest.fixture()
def views():
    return FakeViews()


@pytest.fixture()
def errors():
    return FakeErrors()


@pytest.fixture()
def gateway(catalog, metadata, clock):
    upstreams = Upstreams(catalog=catalog, metadata=metadata, resolver=FallbackResolver(catalog))
    return Gateway(upstreams, CacheStore(), clock=clock)


@pytest.fixture()
def app_state(gateway, views, errors):
    return AppState(gateway=gateway, views=views, errors=errors)


@pytest.fixture()
def client(app_state):
    with TestClient(create_app(app_state)) as test_client:
        yield test_client
