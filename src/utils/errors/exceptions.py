"""Exceções de domínio para falhas recuperáveis de infraestrutura."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class StoreUnavailableError(InfrastructureError):
    """Falha ao ler ou gravar no key-value store de snapshots."""


class RedisConnectionError(StoreUnavailableError):
    """Falha de conexão/timeout ao acessar Redis."""
