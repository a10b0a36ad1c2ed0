"""
Barramento síncrono de eventos do motor de transições.

Entrega em ordem de inscrição, imediatamente (sem fila), antes de a
operação que publicou retornar. Inscrição e cancelamento são O(1).
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

STATE_CHANGE = "stateChange"
HOOK_ERROR = "hookError"
EVENT_NAMES = frozenset({STATE_CHANGE, HOOK_ERROR})


@dataclass(frozen=True, slots=True)
class StateChangeEvent:
    """
    Notificação de mudança de estado.

    Attributes:
        from_state: Estado anterior
        to_state: Estado atual
        payload: Payload do caller (None em navegação no tempo)
        timestamp: Momento da mudança (UTC)
        trigger: Operação que causou a mudança
            (transition, back, forward, go_to, restore, reset)
    """

    from_state: str
    to_state: str
    payload: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    trigger: str = "transition"

    name = STATE_CHANGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_state,
            "to": self.to_state,
            "payload": self.payload,
            "timestamp": self.timestamp.isoformat(),
            "trigger": self.trigger,
        }


@dataclass(frozen=True, slots=True)
class HookErrorEvent:
    """Falha de um after-hook (a transição já efetivada é mantida)."""

    hook: str
    from_state: str
    to_state: str
    error: BaseException
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    name = HOOK_ERROR


Event = StateChangeEvent | HookErrorEvent
Handler = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class Subscription:
    """Handle retornado por subscribe(); usado para cancelar a inscrição."""

    event: str
    token: int


class EventBus:
    """
    Barramento síncrono de eventos do motor.

    Handlers são chamados em ordem de inscrição, no mesmo thread do
    publish. Falha de um handler é logada e não interrompe os demais.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, dict[int, Handler]] = {
            name: {} for name in EVENT_NAMES
        }
        self._tokens = itertools.count(1)

    def subscribe(self, handler: Handler, event: str = STATE_CHANGE) -> Subscription:
        """
        Inscreve um handler para um evento.

        Raises:
            ValueError: Evento desconhecido
            TypeError: Handler não chamável
        """
        if event not in self._subscribers:
            raise ValueError(
                f"Evento desconhecido: {event}. "
                f"Válidos: {', '.join(sorted(EVENT_NAMES))}"
            )
        if not callable(handler):
            raise TypeError("handler deve ser chamável")
        subscription = Subscription(event=event, token=next(self._tokens))
        self._subscribers[event][subscription.token] = handler
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Cancela a inscrição. Retorna False se já havia sido cancelada."""
        handlers = self._subscribers.get(subscription.event)
        if handlers is None:
            return False
        return handlers.pop(subscription.token, None) is not None

    def subscriber_count(self, event: str = STATE_CHANGE) -> int:
        """Quantidade de handlers inscritos no evento."""
        return len(self._subscribers.get(event, {}))

    def publish(self, event: Event) -> None:
        """Entrega o evento a todos os handlers inscritos."""
        # Cópia: handlers podem cancelar inscrições durante a entrega
        for handler in list(self._subscribers[event.name].values()):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "event_subscriber_failed",
                    extra={"event": event.name, "from_state": event.from_state,
                           "to_state": event.to_state},
                )

    def clear(self) -> None:
        """Remove todas as inscrições."""
        for handlers in self._subscribers.values():
            handlers.clear()
