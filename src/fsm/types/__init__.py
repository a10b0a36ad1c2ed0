"""
Exports públicos do módulo fsm/types.

Tipos, resultados e exceções das transições de estado.
"""

from fsm.types.errors import (
    FSMError,
    GraphError,
    GuardError,
    IndexOutOfRange,
    ReentrancyError,
    StaleSnapshotError,
    UnknownStateError,
)
from fsm.types.transition import RejectionReason, TransitionRecord, TransitionResult

__all__ = [
    "FSMError",
    "GraphError",
    "GuardError",
    "IndexOutOfRange",
    "ReentrancyError",
    "RejectionReason",
    "StaleSnapshotError",
    "TransitionRecord",
    "TransitionResult",
    "UnknownStateError",
]
