# ruff: noqa: PLW0603
"""Shared async Redis client.

Only the comment rate limiter talks to Redis. When the server is unreachable
at startup the client stays unset and comment creation is not throttled.
"""

import redis.asyncio as redis

from blog.config import Settings, get_settings
from blog.core.logging import get_logger


logger = get_logger(__name__)

_client: redis.Redis | None = None


def _build_client(settings: Settings) -> redis.Redis:
    return redis.from_url(
        settings.redis_url,
        decode_responses=True,
        max_connections=settings.redis_max_connections,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        retry_on_timeout=settings.redis_retry_on_timeout,
        health_check_interval=settings.redis_health_check_interval,
    )


async def init_redis() -> redis.Redis:
    """Connect and ping; raises ``redis.ConnectionError`` when unreachable."""
    global _client

    settings = get_settings()
    candidate = _build_client(settings)
    try:
        await candidate.ping()
    except redis.ConnectionError:
        await candidate.aclose()
        raise

    _client = candidate
    logger.info("redis_connected", url=settings.redis_url)
    return candidate


async def shutdown_redis() -> None:
    global _client

    if _client is None:
        return
    await _client.aclose()
    _client = None
    logger.info("redis_disconnected")


def get_redis() -> redis.Redis | None:
    return _client


def rate_limit_key(scope: str, subject: str, window: str) -> str:
    """Fixed-window counter key, e.g. ``ratelimit:comments:<user id>:minute``."""
    return f"ratelimit:{scope}:{subject}:{window}"
