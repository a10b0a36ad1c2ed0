"""
Exports públicos do módulo fsm/events.

Eventos de mudança de estado e barramento síncrono de entrega.
"""

from fsm.events.bus import (
    EVENT_NAMES,
    HOOK_ERROR,
    STATE_CHANGE,
    EventBus,
    HookErrorEvent,
    StateChangeEvent,
    Subscription,
)

__all__ = [
    "EVENT_NAMES",
    "HOOK_ERROR",
    "STATE_CHANGE",
    "EventBus",
    "HookErrorEvent",
    "StateChangeEvent",
    "Subscription",
]
