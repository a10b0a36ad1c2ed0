"""
Exportação somente-leitura do grafo para ferramentas de visualização.

Não expõe guards nem hooks, apenas a presença de guards por estado.
"""

from __future__ import annotations

from typing import Any

from fsm.states.registry import StateRegistry


def export_state_graph(registry: StateRegistry) -> dict[str, Any]:
    """
    Gera o documento {states: [{name, allowedTransitions, hasGuards}], initial}.

    Cada chamada retorna estruturas novas: alterar o resultado não afeta
    o registro.
    """
    return {
        "states": [
            {
                "name": state.name,
                "allowedTransitions": list(state.allowed_transitions),
                "hasGuards": state.has_guards,
            }
            for state in registry.states()
        ],
        "initial": registry.initial,
    }
