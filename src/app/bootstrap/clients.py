"""Factories de clientes externos — Redis."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def create_redis_client(redis_url: str) -> Redis[bytes]:
    """Cria cliente Redis síncrono (um por URL).

    Args:
        redis_url: URL de conexão (redis:// ou rediss://)

    Returns:
        Cliente Redis configurado

    Raises:
        ValueError: Se redis_url vazio
    """
    import redis

    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: Redis[bytes] = redis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("redis_client_created", extra={"host": host})
    return client
