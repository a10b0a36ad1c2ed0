"""Observabilidade — contexto de logs estruturados.

Uso:
    from app.observability import engine_scope, get_engine_id
"""

from app.observability.engine_context import (
    engine_scope,
    get_engine_id,
    reset_engine_id,
    set_engine_id,
)

__all__ = [
    "engine_scope",
    "get_engine_id",
    "reset_engine_id",
    "set_engine_id",
]
