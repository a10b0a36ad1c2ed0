"""Redis Key-Value Store — snapshots de navegação no Redis.

Cada motor grava seu snapshot em uma chave com namespace próprio.
Erros do cliente são convertidos em RedisConnectionError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.kv_store import KeyValueStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)

# Prefixo para namespace dos snapshots
SNAPSHOT_PREFIX = "navstate:"


class RedisKeyValueStore(KeyValueStoreProtocol):
    """Key-value store usando Redis.

    Características:
        - SET com EX quando há TTL configurado
        - Valores decodificados como UTF-8 (cliente pode usar bytes)

    Args:
        redis_client: Cliente Redis síncrono
        ttl_seconds: Expiração das chaves (0 = sem expiração)
        prefix: Namespace das chaves
    """

    def __init__(
        self,
        redis_client: Redis[bytes],
        ttl_seconds: int = 0,
        prefix: str = SNAPSHOT_PREFIX,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds deve ser >= 0")
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds
        self._prefix = prefix

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str | None:
        """Lê o valor da chave."""
        try:
            data = self._redis.get(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao ler snapshot no Redis") from exc
        if data is None:
            return None
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return data

    def set(self, key: str, value: str) -> None:
        """Grava o valor, com TTL quando configurado."""
        try:
            if self._ttl_seconds:
                self._redis.set(self._key(key), value, ex=self._ttl_seconds)
            else:
                self._redis.set(self._key(key), value)
        except Exception as exc:
            raise RedisConnectionError("Falha ao gravar snapshot no Redis") from exc
        logger.debug("snapshot_key_written", extra={"key": key, "ttl": self._ttl_seconds})

    def delete(self, key: str) -> bool:
        """Remove a chave."""
        try:
            return bool(self._redis.delete(self._key(key)))
        except Exception as exc:
            raise RedisConnectionError("Falha ao remover snapshot no Redis") from exc

    def exists(self, key: str) -> bool:
        """Verifica se a chave existe."""
        try:
            return bool(self._redis.exists(self._key(key)))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar snapshot no Redis") from exc
