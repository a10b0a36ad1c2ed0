"""
Guards para transições de estado.

Guards são predicados que podem bloquear uma transição já permitida
pelo grafo. Todos os guards do destino precisam permitir a transição,
avaliados na ordem de declaração.

Um guard recebe um GuardContext somente-leitura e retorna bool ou
GuardResult (quando quer explicar o motivo da negação).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from fsm.types.errors import GuardError, ReentrancyError

logger = logging.getLogger(__name__)

_EMPTY_PAYLOAD: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class GuardContext:
    """
    Contexto somente-leitura entregue a cada guard.

    Attributes:
        current: Nome do estado atual
        target: Nome do estado de destino
        payload: Dados do caller (visão somente-leitura quando for Mapping)
    """

    current: str
    target: str
    payload: Any = field(default=_EMPTY_PAYLOAD)

    @classmethod
    def build(cls, current: str, target: str, payload: Any = None) -> GuardContext:
        """Cria contexto protegendo payloads do tipo dict contra mutação."""
        if payload is None:
            view: Any = _EMPTY_PAYLOAD
        elif isinstance(payload, dict):
            view = MappingProxyType(payload)
        else:
            view = payload
        return cls(current=current, target=target, payload=view)


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    def __repr__(self) -> str:
        return f"GuardResult(allowed={self.allowed!r}, reason={self.reason!r})"

    @classmethod
    def allow(cls) -> GuardResult:
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> GuardResult:
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[GuardContext], bool | GuardResult]


def guard_name(guard: Guard) -> str:
    """Nome legível do guard para logs e mensagens de erro."""
    return getattr(guard, "__name__", None) or repr(guard)


def evaluate_guards(guards: Iterable[Guard], context: GuardContext) -> GuardResult:
    """
    Avalia os guards de uma transição em ordem de declaração.

    Para no primeiro guard que negar; os seguintes não são chamados.

    Args:
        guards: Guards a aplicar
        context: Contexto somente-leitura da transição

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem

    Raises:
        GuardError: Se algum guard levantar exceção
        ReentrancyError: Se algum guard tentar reentrar no motor
    """
    for guard in guards:
        try:
            outcome = guard(context)
        except ReentrancyError:
            raise
        except Exception as exc:
            name = guard_name(guard)
            logger.warning(
                "guard_failed",
                extra={
                    "guard": name,
                    "from_state": context.current,
                    "to_state": context.target,
                    "error": str(exc),
                },
            )
            raise GuardError(name, context.current, context.target) from exc

        if isinstance(outcome, GuardResult):
            if not outcome.allowed:
                return outcome
            continue

        if not outcome:
            return GuardResult.deny(f"Guard {guard_name(guard)} negou a transição")

    return GuardResult.allow()


class GuardRegistry:
    """Mapeia nomes de guard para predicados.

    Usado ao carregar grafos de JSON/YAML, onde guards são referenciados
    por nome.
    """

    def __init__(self, guards: Mapping[str, Guard] | None = None) -> None:
        self._guards: dict[str, Guard] = dict(guards or {})

    def register(self, name: str, fn: Guard) -> None:
        """Registra um guard nomeado. Sobrescreve se já existir."""
        self._guards[name] = fn

    def resolve(self, name: str) -> Guard:
        """Retorna o guard. Levanta KeyError se não registrado."""
        return self._guards[name]

    def has(self, name: str) -> bool:
        """Verifica se o nome está registrado."""
        return name in self._guards

    def names(self) -> list[str]:
        """Lista os nomes registrados."""
        return list(self._guards)
