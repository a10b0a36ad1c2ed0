"""Factories de stores e motores baseadas nas settings.

Este módulo centraliza a criação do key-value store de snapshots e o
wiring do TransitionEngine com a persistência configurada.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_redis_client
from app.infra.stores import MemoryKeyValueStore, RedisKeyValueStore
from app.observability import engine_scope
from config.logging import log_fallback
from config.settings import (
    get_base_settings,
    get_persistence_settings,
)
from fsm import (
    PersistenceAdapter,
    StaleSnapshotError,
    StateRegistry,
    TransitionEngine,
)

if TYPE_CHECKING:
    from app.protocols.kv_store import KeyValueStoreProtocol
    from config.settings import BaseSettings, PersistenceSettings
    from fsm.states.registry import DefinitionsInput

logger = logging.getLogger(__name__)


def create_kv_store(
    settings: PersistenceSettings | None = None,
    base: BaseSettings | None = None,
) -> KeyValueStoreProtocol:
    """Cria key-value store baseado na configuração.

    - "memory": MemoryKeyValueStore (dev only)
    - "redis": RedisKeyValueStore (staging/production)

    Raises:
        ValueError: Se o backend for inválido
    """
    settings = settings or get_persistence_settings()
    base = base or get_base_settings()
    backend = settings.store_backend

    if backend == "redis":
        store: KeyValueStoreProtocol = RedisKeyValueStore(
            create_redis_client(settings.redis_url),
            ttl_seconds=settings.snapshot_ttl_seconds,
        )
        logger.info("kv_store_created", extra={"backend": "redis"})
        return store

    if backend == "memory":
        if not base.is_development:
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        store = MemoryKeyValueStore(ttl_seconds=settings.snapshot_ttl_seconds)
        logger.info("kv_store_created", extra={"backend": "memory"})
        return store

    msg = f"FSM_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


def create_persistence_adapter(
    engine_id: str = "",
    settings: PersistenceSettings | None = None,
    store: KeyValueStoreProtocol | None = None,
) -> PersistenceAdapter | None:
    """Cria o adaptador de snapshot de um motor.

    A chave fica em ``<FSM_SNAPSHOT_KEY>:<engine_id>`` (ou só
    ``<FSM_SNAPSHOT_KEY>`` sem engine_id).

    Args:
        engine_id: Identificador do motor
        settings: PersistenceSettings (default: env)
        store: Store explícito (ignora o backend das settings)

    Returns:
        PersistenceAdapter, ou None se a persistência estiver desligada e
        nenhum store for informado
    """
    settings = settings or get_persistence_settings()
    if store is None:
        if not settings.enabled:
            return None
        store = create_kv_store(settings)

    key = f"{settings.snapshot_key}:{engine_id}" if engine_id else settings.snapshot_key
    return PersistenceAdapter(store, key)


def build_engine(
    definitions: DefinitionsInput | StateRegistry,
    initial: str | None = None,
    *,
    engine_id: str = "",
    settings: PersistenceSettings | None = None,
    store: KeyValueStoreProtocol | None = None,
    restore: bool = True,
) -> TransitionEngine:
    """Constrói um motor com a persistência configurada.

    Snapshot obsoleto não impede o boot: o motor segue no estado inicial
    e o fallback é logado.

    Args:
        definitions: Definições de estado ou registro pronto
        initial: Estado inicial (quando definitions não é registro)
        engine_id: Identificador do motor (logs e chave do snapshot)
        settings: PersistenceSettings (default: env)
        store: Store explícito (ignora o backend das settings)
        restore: Se True, restaura o snapshot após construir

    Raises:
        GraphError: Grafo inválido
        ValueError: initial ausente com definições cruas
    """
    if isinstance(definitions, StateRegistry):
        registry = definitions
    else:
        if initial is None:
            raise ValueError("initial é obrigatório ao construir a partir de definições")
        registry = StateRegistry(definitions, initial)

    persistence = create_persistence_adapter(engine_id, settings, store)

    with engine_scope(engine_id):
        engine = TransitionEngine(registry, engine_id=engine_id, persistence=persistence)
        if restore:
            try:
                engine.restore()
            except StaleSnapshotError:
                log_fallback(
                    logger,
                    "restore",
                    reason="stale_snapshot",
                    state=engine.current,
                )

    logger.info(
        "engine_built",
        extra={
            "engine_id": engine_id,
            "persistence_enabled": engine.persistence_enabled,
            "current_state": engine.current,
        },
    )
    return engine
