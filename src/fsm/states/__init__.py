"""
Exports públicos do módulo fsm/states.

Definições de estado e registro imutável do grafo.
"""

from fsm.states.definition import State, StateDefinition
from fsm.states.registry import StateRegistry

__all__ = [
    "State",
    "StateDefinition",
    "StateRegistry",
]
