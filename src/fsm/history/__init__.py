"""
Exports públicos do módulo fsm/history.

Histórico linear com cursor para navegação no tempo.
"""

from fsm.history.stack import HistoryStack

__all__ = [
    "HistoryStack",
]
