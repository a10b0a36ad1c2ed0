"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta o key-value store configurado aos motores de transição.

Uso:
    from app.bootstrap import initialize_app, build_engine

    # Na inicialização do serviço
    initialize_app()

    engine = build_engine(STATES, "home", engine_id="main")
"""

from __future__ import annotations

import logging

from app.bootstrap.dependencies import (
    build_engine,
    create_kv_store,
    create_persistence_adapter,
)
from app.observability import get_engine_id
from config.logging import configure_logging
from config.settings import get_base_settings, get_persistence_settings

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com logging JSON estruturado.

    Deve ser chamada uma vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        engine_id_getter=get_engine_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    base = get_base_settings()
    configure_logging(
        level="DEBUG",
        service_name=f"{base.service_name}_test",
        engine_id_getter=get_engine_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(
        f"persistence: {error}" for error in get_persistence_settings().validate(base)
    )

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok",
                   "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


__all__ = [
    "build_engine",
    "create_kv_store",
    "create_persistence_adapter",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
