import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


def check_cache_connection():
    """Round-trip a sentinel key through the configured cache."""
    if not settings.CACHES:
        logger.error("CACHES setting is not configured !!")
        raise ValueError("CACHES setting is not configured")

    try:
        cache.set("health_check", "ok", 10)
        return cache.get("health_check") == "ok"
    except Exception as e:
        logger.error(f"Cache connection error: {e}")
        return False


def get_cache_key_value(key):
    # A cache outage degrades to a miss; callers fall back to the database
    try:
        value = cache.get(key)
    except Exception as e:
        logger.warning(f"Cache get error for key: {key}, error: {e}")
        return None
    if value is None:
        logger.debug(f"Cache miss for key: {key}")
    return value


def set_cache_key(key, value, ttl=None):
    try:
        cache.set(key, value, ttl)
    except Exception as e:
        logger.warning(f"Cache set error for key: {key}, error: {e}")


def delete_cache_key(key):
    try:
        cache.delete(key)
        logger.info(f"Cache deleted for key: {key}")
    except Exception as e:
        logger.warning(f"Cache delete error for key: {key}, error: {e}")
