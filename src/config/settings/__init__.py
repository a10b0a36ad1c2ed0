"""Agregador de settings do navstate.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    PersistenceSettings,
    StoreBackend,
    get_base_settings,
    get_persistence_settings,
)

__all__ = [
    "BaseSettings",
    "Environment",
    "PersistenceSettings",
    "StoreBackend",
    "get_base_settings",
    "get_persistence_settings",
]
