"""Protocolos e contratos da aplicação."""

from .kv_store import KeyValueStoreProtocol

__all__ = [
    "KeyValueStoreProtocol",
]
