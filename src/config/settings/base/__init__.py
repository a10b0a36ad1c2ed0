"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.persistence import (
    PersistenceSettings,
    StoreBackend,
    get_persistence_settings,
)

__all__ = [
    # Core
    "BaseSettings",
    # Types
    "Environment",
    # Persistence
    "PersistenceSettings",
    "StoreBackend",
    "get_base_settings",
    "get_persistence_settings",
]
