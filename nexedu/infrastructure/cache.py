import json
import redis
import structlog
from typing import Optional, Any
from ..config import settings

logger = structlog.get_logger(__name__)

_redis_client: Optional[redis.Redis] = None

def cache_enabled() -> bool:
    return bool(settings.REDIS_URL)

def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
            retry_on_timeout=True
        )
    return _redis_client

def get_cache(key: str) -> Optional[Any]:
    """Lê um valor do cache; None em miss ou se o Redis estiver fora"""
    if not cache_enabled():
        return None
    try:
        value = get_redis().get(key)
        if value is not None:
            return json.loads(value)
    except (redis.RedisError, ValueError) as e:
        logger.warning("cache_get_failed", key=key, error=str(e))
    return None

def set_cache(key: str, value: Any, ttl: int | None = None) -> bool:
    if not cache_enabled():
        return False
    try:
        get_redis().setex(key, ttl or settings.CACHE_TTL, json.dumps(value, ensure_ascii=False, default=str))
        return True
    except (redis.RedisError, TypeError) as e:
        logger.warning("cache_set_failed", key=key, error=str(e))
        return False

def delete_cache_pattern(pattern: str) -> int:
    """Remove todas as chaves que casam com o padrão"""
    if not cache_enabled():
        return 0
    try:
        client = get_redis()
        keys = list(client.scan_iter(match=pattern))
        if keys:
            return client.delete(*keys)
        return 0
    except redis.RedisError as e:
        logger.warning("cache_invalidate_failed", pattern=pattern, error=str(e))
        return 0
