"""Store em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import time

from app.protocols.kv_store import KeyValueStoreProtocol


class MemoryKeyValueStore(KeyValueStoreProtocol):
    """Key-value store em memória com TTL opcional.

    Args:
        ttl_seconds: Expiração das chaves (0 = sem expiração)
    """

    def __init__(self, ttl_seconds: int = 0) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds deve ser >= 0")
        self._ttl_seconds = ttl_seconds
        self._store: dict[str, tuple[str, float | None]] = {}  # key -> (value, expires_at)

    def _expired(self, key: str) -> bool:
        """Remove a chave se expirada. True se removeu (ou não existe)."""
        entry = self._store.get(key)
        if entry is None:
            return True
        _, expires_at = entry
        if expires_at is not None and time.time() > expires_at:
            del self._store[key]
            return True
        return False

    def get(self, key: str) -> str | None:
        """Retorna o valor ou None se ausente/expirado."""
        if self._expired(key):
            return None
        return self._store[key][0]

    def set(self, key: str, value: str) -> None:
        """Grava o valor (renova o TTL)."""
        expires_at = time.time() + self._ttl_seconds if self._ttl_seconds else None
        self._store[key] = (value, expires_at)

    def delete(self, key: str) -> bool:
        """Remove a chave."""
        return self._store.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        """Verifica se a chave existe e não expirou."""
        return not self._expired(key)

    def keys(self) -> list[str]:
        """Chaves vigentes (apenas para testes)."""
        return [key for key in list(self._store) if not self._expired(key)]
