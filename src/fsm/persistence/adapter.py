"""
Adaptador de persistência do motor sobre um key-value store plugável.

O motor trata o snapshot como blob opaco (JSON canônico) e não depende
de nenhuma tecnologia de armazenamento: basta um objeto com
``get(key) -> str | None`` e ``set(key, value) -> None``.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from fsm.persistence.snapshot import PersistedSnapshot
from fsm.types.errors import StaleSnapshotError

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_KEY = "fsm:snapshot"


@runtime_checkable
class KeyValueStore(Protocol):
    """Capacidade mínima exigida do store externo."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class PersistenceAdapter:
    """
    Salva e carrega snapshots do motor em uma chave fixa do store.

    Args:
        store: Key-value store externo
        key: Chave onde o snapshot é gravado
    """

    __slots__ = ("_key", "_store")

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_SNAPSHOT_KEY) -> None:
        if not key:
            raise ValueError("key não pode ser vazia")
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def save(self, snapshot: PersistedSnapshot) -> None:
        """Grava o snapshot (sobrescreve o anterior)."""
        self._store.set(self._key, snapshot.to_json())
        logger.debug(
            "snapshot_saved",
            extra={"key": self._key, "current": snapshot.current,
                   "cursor": snapshot.cursor},
        )

    def load(self) -> PersistedSnapshot | None:
        """
        Carrega o snapshot gravado.

        Returns:
            Snapshot ou None se não existir

        Raises:
            StaleSnapshotError: Se o blob gravado não puder ser decodificado
                (texto inválido ou bytes fora de UTF-8)
        """
        try:
            blob = self._store.get(self._key)
        except UnicodeDecodeError as exc:
            logger.warning(
                "snapshot_decode_failed",
                extra={"key": self._key, "reason": "invalid_utf8"},
            )
            raise StaleSnapshotError(
                f"Snapshot em {self._key!r} não é UTF-8 válido"
            ) from exc
        if blob is None:
            return None
        try:
            return PersistedSnapshot.from_json(blob)
        except ValidationError as exc:
            logger.warning(
                "snapshot_decode_failed",
                extra={"key": self._key, "error_count": exc.error_count()},
            )
            raise StaleSnapshotError(
                f"Snapshot em {self._key!r} inválido: {exc.error_count()} erro(s)"
            ) from exc

    def clear(self) -> bool:
        """Remove o snapshot quando o store suporta ``delete``."""
        delete = getattr(self._store, "delete", None)
        if delete is None:
            return False
        return bool(delete(self._key))
