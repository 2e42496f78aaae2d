import logging
from typing import Optional
from redis.asyncio import Redis
from app.core.config import settings

logger = logging.getLogger(__name__)

redis: Optional[Redis] = None

async def init_redis(url: Optional[str] = None) -> Redis:
    global redis
    url = url or settings.REDIS_URL
    if not url:
        raise RuntimeError("REDIS_URL is not configured")
    try:
        redis = Redis.from_url(url, decode_responses=False)
        await redis.ping()
        logger.info("Connected to Redis")
        return redis
    except Exception as e:
        redis = None
        logger.error(f"Failed to connect to Redis: {e}")
        raise

async def close_redis():
    global redis
    if redis:
        await redis.close()
        redis = None

def get_redis() -> Optional[Redis]:
    """Return the shared connection, or None when caching is disabled."""
    return redis
