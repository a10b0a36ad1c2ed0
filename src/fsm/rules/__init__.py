"""
Exports públicos do módulo fsm/rules.

Guards para transições de estado.
"""

from fsm.rules.guards import (
    Guard,
    GuardContext,
    GuardRegistry,
    GuardResult,
    evaluate_guards,
    guard_name,
)

__all__ = [
    "Guard",
    "GuardContext",
    "GuardRegistry",
    "GuardResult",
    "evaluate_guards",
    "guard_name",
]
