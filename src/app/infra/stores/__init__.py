"""Stores — implementações concretas de key-value store para snapshots.

Módulos disponíveis:
    - memory_store: Store em memória para desenvolvimento/testes
    - redis_store: Store usando Redis
"""

from __future__ import annotations

from app.infra.stores.memory_store import MemoryKeyValueStore
from app.infra.stores.redis_store import RedisKeyValueStore

__all__ = [
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
]
