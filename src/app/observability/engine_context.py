"""Engine_id do contexto atual para enriquecer logs.

Usa ContextVar para ser thread/async-safe: o host marca qual motor está
atuando e o filter de logging injeta o valor em cada record.

Uso:
    from app.observability import engine_scope

    with engine_scope(engine.engine_id):
        engine.transition_to("checkout")
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

_engine_id: ContextVar[str] = ContextVar("engine_id", default="")


def get_engine_id() -> str:
    """Retorna o engine_id do contexto atual (string vazia se não definido)."""
    return _engine_id.get()


def set_engine_id(engine_id: str) -> Token[str]:
    """Define o engine_id no contexto atual.

    Returns:
        Token para reset posterior via reset_engine_id().
    """
    return _engine_id.set(engine_id)


def reset_engine_id(token: Token[str]) -> None:
    """Restaura o engine_id ao valor anterior."""
    _engine_id.reset(token)


@contextmanager
def engine_scope(engine_id: str) -> Iterator[str]:
    """Define engine_id durante o bloco e restaura ao sair."""
    token = set_engine_id(engine_id)
    try:
        yield engine_id
    finally:
        reset_engine_id(token)
