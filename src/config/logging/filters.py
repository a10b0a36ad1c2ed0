"""Filter que marca cada record com o motor de navegação em execução."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class EngineContextFilter(logging.Filter):
    """Preenche engine_id e service nos records.

    O engine_id passado via ``extra`` pelo próprio motor tem precedência
    sobre o do contexto (engine_scope).

    Args:
        service_name: Valor do campo service.
        engine_id_getter: Leitor do motor ativo; sem ele, engine_id fica "".
    """

    def __init__(
        self,
        service_name: str,
        engine_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_engine_id = engine_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Enriquece o record; nunca descarta (retorna sempre True)."""
        existing = getattr(record, "engine_id", None)
        record.engine_id = existing if existing else self._get_engine_id()
        record.service = self._service_name
        return True
