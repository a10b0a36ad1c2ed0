"""Handler JSON do root logger e helpers de log do motor.

O motor emite mensagens snake_case (transition_committed, snapshot_stale)
com os dados do evento em ``extra``; o handler instalado aqui serializa
cada record em uma linha JSON marcada com engine_id e service.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import EngineContextFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

# Níveis de log válidos
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Nome padrão do serviço
DEFAULT_SERVICE_NAME = "navstate"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    engine_id_getter: Callable[[], str] | None = None,
) -> None:
    """Instala um único handler JSON no root logger.

    Chamadas repetidas substituem o handler anterior.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        engine_id_getter: Função que retorna o motor ativo; em produção é
            app.observability.get_engine_id (engine_scope).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(EngineContextFilter(service_name, engine_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Atalho para logging.getLogger; engine_id e service vêm do handler."""
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    state: str | None = None,
) -> None:
    """Registra que o motor seguiu por um caminho de fallback.

    Hoje o único caso é o restore com snapshot obsoleto, em que o motor
    segue no estado inicial.

    Args:
        logger: Logger do chamador.
        component: Nome do componente (ex: "restore").
        reason: Razão do fallback (ex: "stale_snapshot").
        state: Estado assumido após o fallback.
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
    }
    if reason:
        extra["reason"] = reason
    if state is not None:
        extra["fallback_state"] = state

    logger.info(
        "Fallback applied for %s",
        component,
        extra=extra,
    )
