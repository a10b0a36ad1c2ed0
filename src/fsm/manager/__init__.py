"""
Exports públicos do módulo fsm/manager.

Motor de transições (TransitionEngine) para navegação por estados.
"""

from fsm.manager.machine import TransitionEngine, create_engine

__all__ = [
    "TransitionEngine",
    "create_engine",
]
