"""
Exports públicos do módulo fsm/persistence.

Snapshot persistido e adaptador sobre key-value store.
"""

from fsm.persistence.adapter import (
    DEFAULT_SNAPSHOT_KEY,
    KeyValueStore,
    PersistenceAdapter,
)
from fsm.persistence.snapshot import PersistedSnapshot

__all__ = [
    "DEFAULT_SNAPSHOT_KEY",
    "KeyValueStore",
    "PersistedSnapshot",
    "PersistenceAdapter",
]
