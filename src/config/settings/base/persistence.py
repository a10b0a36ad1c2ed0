"""Settings de persistência dos snapshots de navegação.

Configurações do key-value store onde o motor grava estado + histórico.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

StoreBackend = Literal["memory", "redis"]

VALID_BACKENDS = frozenset({"memory", "redis"})


@dataclass(frozen=True)
class PersistenceSettings:
    """Configurações de persistência.

    Attributes:
        enabled: Se o motor grava snapshots a cada transição
        store_backend: Backend do key-value store
        snapshot_key: Chave do snapshot no store
        snapshot_ttl_seconds: TTL do snapshot (0 = sem expiração)
        redis_url: URL de conexão Redis (backend redis)
    """

    enabled: bool = False
    store_backend: StoreBackend = "memory"
    snapshot_key: str = "fsm:snapshot"
    snapshot_ttl_seconds: int = 0
    redis_url: str = ""

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de persistência.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.enabled:
            return errors

        if self.store_backend not in VALID_BACKENDS:
            errors.append(f"FSM_STORE_BACKEND inválido: {self.store_backend}")

        if not self.snapshot_key:
            errors.append("FSM_SNAPSHOT_KEY não pode ser vazio")

        if self.snapshot_ttl_seconds < 0:
            errors.append("FSM_SNAPSHOT_TTL_SECONDS deve ser >= 0")

        if self.store_backend == "redis" and not self.redis_url:
            errors.append("REDIS_URL obrigatório quando FSM_STORE_BACKEND=redis")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("FSM_STORE_BACKEND=memory proibido em staging/production")

        return errors


def _load_persistence_from_env() -> PersistenceSettings:
    """Carrega PersistenceSettings de variáveis de ambiente."""
    backend_str = os.getenv("FSM_STORE_BACKEND", "memory").lower()
    backend: StoreBackend = backend_str if backend_str in VALID_BACKENDS else "memory"
    return PersistenceSettings(
        enabled=os.getenv("FSM_PERSISTENCE_ENABLED", "").lower() in ("true", "1", "yes"),
        store_backend=backend,
        snapshot_key=os.getenv("FSM_SNAPSHOT_KEY", "fsm:snapshot"),
        snapshot_ttl_seconds=int(os.getenv("FSM_SNAPSHOT_TTL_SECONDS", "0")),
        redis_url=os.getenv("REDIS_URL", ""),
    )


@lru_cache(maxsize=1)
def get_persistence_settings() -> PersistenceSettings:
    """Retorna instância cacheada de PersistenceSettings."""
    return _load_persistence_from_env()
