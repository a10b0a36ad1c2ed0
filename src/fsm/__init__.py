"""
Módulo FSM — Motor de navegação por transições de estado.

Navegação só avança por arestas declaradas em um grafo estático,
opcionalmente protegidas por guards. Toda transição é observável,
reversível (navegação no tempo) e persistível.

Estrutura:
    - states/: Definições de estado e registro imutável (StateRegistry)
    - transitions/: Carregamento do grafo (JSON/YAML) e exportação
    - rules/: Guards (GuardContext, GuardResult, evaluate_guards)
    - hooks/: Before/after hooks (HookDispatcher)
    - history/: Histórico linear com cursor (HistoryStack)
    - events/: Eventos stateChange/hookError (EventBus)
    - persistence/: Snapshot e adaptador de key-value store
    - manager/: Motor de transições (TransitionEngine)
    - types/: Resultados, registros e exceções
"""

# Eventos
from fsm.events import (
    HOOK_ERROR,
    STATE_CHANGE,
    EventBus,
    HookErrorEvent,
    StateChangeEvent,
    Subscription,
)

# Histórico
from fsm.history import HistoryStack

# Manager
from fsm.manager import TransitionEngine, create_engine

# Persistência
from fsm.persistence import (
    DEFAULT_SNAPSHOT_KEY,
    KeyValueStore,
    PersistedSnapshot,
    PersistenceAdapter,
)

# Guards
from fsm.rules import GuardContext, GuardRegistry, GuardResult, evaluate_guards

# Estados
from fsm.states import State, StateDefinition, StateRegistry

# Grafo
from fsm.transitions import (
    export_state_graph,
    load_graph_file,
    load_graph_from_json,
    load_graph_from_mapping,
    load_graph_from_yaml,
)

# Types
from fsm.types import (
    FSMError,
    GraphError,
    GuardError,
    IndexOutOfRange,
    ReentrancyError,
    RejectionReason,
    StaleSnapshotError,
    TransitionRecord,
    TransitionResult,
    UnknownStateError,
)

__all__ = [
    "DEFAULT_SNAPSHOT_KEY",
    "HOOK_ERROR",
    "STATE_CHANGE",
    # Types
    "FSMError",
    "GraphError",
    # Guards
    "GuardContext",
    "GuardError",
    "GuardRegistry",
    "GuardResult",
    # Histórico
    "HistoryStack",
    # Eventos
    "HookErrorEvent",
    "IndexOutOfRange",
    # Persistência
    "KeyValueStore",
    "PersistedSnapshot",
    "PersistenceAdapter",
    "ReentrancyError",
    "RejectionReason",
    "StaleSnapshotError",
    # Estados
    "State",
    "EventBus",
    "StateChangeEvent",
    "StateDefinition",
    "StateRegistry",
    "Subscription",
    "TransitionEngine",
    "TransitionRecord",
    "TransitionResult",
    "UnknownStateError",
    # Manager
    "create_engine",
    "evaluate_guards",
    # Grafo
    "export_state_graph",
    "load_graph_file",
    "load_graph_from_json",
    "load_graph_from_mapping",
    "load_graph_from_yaml",
]
