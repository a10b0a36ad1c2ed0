"""Formatter JSON (python-json-logger) das linhas de log do motor."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado (ordem estável na saída)
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "engine_id",
    "service",
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Campos passados via ``extra`` (from_state, to_state, cursor...) são
    acrescentados ao objeto JSON.

    Exemplo de output:
        {
            "asctime": "2026-10-18 10:30:00,123",
            "level": "INFO",
            "logger": "fsm.manager.machine",
            "message": "transition_committed",
            "engine_id": "checkout",
            "service": "navstate",
            "from_state": "cart",
            "to_state": "payment"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
