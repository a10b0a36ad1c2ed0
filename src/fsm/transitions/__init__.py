"""
Exports públicos do módulo fsm/transitions.

Carregamento do grafo (JSON/YAML) e exportação para visualização.
"""

from fsm.transitions.export import export_state_graph
from fsm.transitions.loader import (
    GraphDocument,
    StateDocument,
    load_graph_file,
    load_graph_from_json,
    load_graph_from_mapping,
    load_graph_from_yaml,
)

__all__ = [
    "GraphDocument",
    "StateDocument",
    "export_state_graph",
    "load_graph_file",
    "load_graph_from_json",
    "load_graph_from_mapping",
    "load_graph_from_yaml",
]
