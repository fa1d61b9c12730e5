import logging
from keyserver.core.config import settings
import redis.exceptions
from fastapi import Request

logger = logging.getLogger(__name__)
RATE_LIMIT_VALUE_KEY = "config:RATE_LIMIT_LIMIT"
RATE_LIMIT_WINDOW_KEY = "config:RATE_LIMIT_WINDOW"

ADMIN_PATHS = (
    "/admin-login",
    "/admin-validate",
    "/admin-logout",
    "/admin-stats",
    "/regenerate-daily-key",
    "/generate-premium-key",
    "/generate-admin-key",
)

def get_rate_limit_config(database):
    limit, window = settings.RATE_LIMIT_LIMIT, settings.RATE_LIMIT_WINDOW
    try:
        limit_str = database.redis_client.get(RATE_LIMIT_VALUE_KEY)
        window_str = database.redis_client.get(RATE_LIMIT_WINDOW_KEY)
        limit = int(limit_str) if limit_str else limit
        window = int(window_str) if window_str else window
    except (redis.exceptions.RedisError, ValueError):
        logger.warning(
            f"Failed to fetch/parse dynamic rate limit config. "
            f"Using defaults: {limit} requests per {window} seconds."
        )
    return limit, window


def get_rate_limit_ip(request: Request) -> str:
    # X-Forwarded-For is client supplied unless a trusted proxy sets it
    if settings.TRUST_FORWARDED_FOR:
        xff = request.headers.get("x-forwarded-for")
        if xff:
            return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def is_admin_path(path: str) -> bool:
    return path.rstrip("/") in ADMIN_PATHS


def check_rate_limit(database, key: str, limit: int, window: int):
    try:
        current = database.redis_client.get(key)
    except redis.exceptions.RedisError:
        logger.warning("Redis unavailable. Rate limiting skipped (fail open).")
        return None  # Skip rate limiting if Redis is down

    if current and int(current) >= limit:
        return False  # Limit exceeded

    try:
        pipe = database.redis_client.pipeline()
        pipe.incr(key, 1)
        if not current:
            pipe.expire(key, window)
        pipe.execute()
    except redis.exceptions.RedisError:
        logger.warning("Redis connection lost while counting request (fail open).")
        return None
    return True
