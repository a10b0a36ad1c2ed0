"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InfrastructureError,
    RedisConnectionError,
    StoreUnavailableError,
)

__all__ = [
    "InfrastructureError",
    "RedisConnectionError",
    "StoreUnavailableError",
]
