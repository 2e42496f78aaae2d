import pytest
from httpx import Response

from app.schemas.quote import Journey
from app.schemas.route import RouteSummary
from app.services.routing import RouteAnalyzer
from app.utils import route_cache
from app.utils.route_cache import get_cached_route, route_cache_key, set_cached_route
from conftest import DIRECTIONS_URL


class InMemoryRedis:
    def __init__(self, fail: bool = False):
        self.data = {}
        self.expiry = {}
        self.fail = fail

    async def get(self, key):
        if self.fail:
            raise ConnectionError("redis down")
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise ConnectionError("redis down")
        self.data[key] = value.encode() if isinstance(value, str) else value
        self.expiry[key] = ex


JOURNEY = Journey(start="Dublin Airport", end="Galway City")
SUMMARY = RouteSummary(total_distance_meters=10000, major_road_distance_meters=6000)


def test_cache_key_is_stable():
    again = Journey(start="Dublin Airport", end="Galway City")
    assert route_cache_key(JOURNEY) == route_cache_key(again)
    assert route_cache_key(JOURNEY).startswith("route:")
    assert route_cache_key(JOURNEY) != route_cache_key(Journey(start="Galway City", end="Dublin Airport"))


@pytest.mark.asyncio
async def test_disabled_without_redis(monkeypatch):
    monkeypatch.setattr(route_cache, "get_redis", lambda: None)
    await set_cached_route(JOURNEY, SUMMARY, ttl=60)
    assert await get_cached_route(JOURNEY) is None


@pytest.mark.asyncio
async def test_round_trip_with_ttl(monkeypatch):
    store = InMemoryRedis()
    monkeypatch.setattr(route_cache, "get_redis", lambda: store)

    assert await get_cached_route(JOURNEY) is None
    await set_cached_route(JOURNEY, SUMMARY, ttl=60)

    assert await get_cached_route(JOURNEY) == SUMMARY
    assert store.expiry[route_cache_key(JOURNEY)] == 60


@pytest.mark.asyncio
async def test_redis_errors_are_not_fatal(monkeypatch):
    monkeypatch.setattr(route_cache, "get_redis", lambda: InMemoryRedis(fail=True))

    await set_cached_route(JOURNEY, SUMMARY, ttl=60)
    assert await get_cached_route(JOURNEY) is None


@pytest.mark.asyncio
async def test_unreadable_entry_is_ignored(monkeypatch):
    store = InMemoryRedis()
    store.data[route_cache_key(JOURNEY)] = b"{not json"
    monkeypatch.setattr(route_cache, "get_redis", lambda: store)

    assert await get_cached_route(JOURNEY) is None


@pytest.mark.asyncio
async def test_analyzer_serves_second_request_from_cache(monkeypatch, mock_upstreams, sample_directions):
    store = InMemoryRedis()
    monkeypatch.setattr(route_cache, "get_redis", lambda: store)
    route = mock_upstreams.get(DIRECTIONS_URL).mock(return_value=Response(200, json=sample_directions))
    analyzer = RouteAnalyzer(DIRECTIONS_URL, "directions-key", cache_ttl=300)

    first = await analyzer.analyze_route(JOURNEY)
    second = await analyzer.analyze_route(JOURNEY)

    assert first == second == SUMMARY
    assert route.call_count == 1
