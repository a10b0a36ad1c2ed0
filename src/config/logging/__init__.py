"""Logging JSON do navstate.

Toda linha de log traz engine_id, service, level, logger, message e
asctime, além dos campos de ``extra`` (from_state, to_state, cursor...).
O bootstrap (app.bootstrap.initialize_app) chama configure_logging.
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import EngineContextFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    # Filters
    "EngineContextFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]
