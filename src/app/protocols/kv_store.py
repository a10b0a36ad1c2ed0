"""Protocolos de domínio para o key-value store de snapshots."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStoreProtocol(ABC):
    """Contrato mínimo síncrono para armazenar blobs por chave.

    O motor de transições só depende de ``get`` e ``set``; ``delete`` e
    ``exists`` servem a manutenção (limpar snapshot, health checks).
    """

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete(self, key: str) -> bool: ...

    @abstractmethod
    def exists(self, key: str) -> bool: ...
