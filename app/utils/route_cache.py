import logging
from typing import Optional
from app.core.redis import get_redis
from app.core.metrics import cache_hits, cache_misses
from app.schemas.quote import Journey
from app.schemas.route import RouteSummary
from app.utils.hashing import payload_hash

logger = logging.getLogger(__name__)

CACHE_NAME = "route"


def route_cache_key(journey: Journey) -> str:
    return f"route:{payload_hash(journey.model_dump())}"


async def get_cached_route(journey: Journey) -> Optional[RouteSummary]:
    redis = get_redis()
    if redis is None:
        return None
    try:
        cached = await redis.get(route_cache_key(journey))
    except Exception as e:
        logger.warning(f"Route cache retrieval failed: {e}")
        return None
    if not cached:
        cache_misses.labels(cache=CACHE_NAME).inc()
        return None
    cache_hits.labels(cache=CACHE_NAME).inc()
    try:
        return RouteSummary.model_validate_json(cached)
    except ValueError as e:
        logger.warning(f"Discarding unreadable route cache entry: {e}")
        return None


async def set_cached_route(journey: Journey, summary: RouteSummary, ttl: int) -> None:
    redis = get_redis()
    if redis is None or ttl <= 0:
        return
    try:
        await redis.set(route_cache_key(journey), summary.model_dump_json(), ex=ttl)
    except Exception as e:
        logger.warning(f"Route cache write failed: {e}")
