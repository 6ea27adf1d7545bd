"""Redis connections backing the card profile cache."""

import logging

import redis.asyncio as redis

log = logging.getLogger("stylesync.redis")

_clients: dict[str, redis.Redis] = {}


def get_redis_client(url: str, socket_timeout: float = 2.0) -> redis.Redis:
    """Return the client for ``url``, creating it on first use.

    Connections are opened lazily by redis-py, so this never blocks. Every
    connect and command is bounded by ``socket_timeout`` seconds.
    """
    client = _clients.get(url)
    if client is None:
        client = redis.from_url(
            url,
            decode_responses=True,
            health_check_interval=30,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        _clients[url] = client
        log.info("Redis client created (%d open)", len(_clients))
    return client


async def close_redis() -> None:
    """Close every client created so far."""
    while _clients:
        _, client = _clients.popitem()
        await client.aclose()
