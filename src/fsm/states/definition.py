"""
Definição de estados do grafo de navegação.

StateDefinition é a forma de entrada (o que o caller declara);
State é a forma validada e imutável mantida pelo StateRegistry.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fsm.rules.guards import Guard


@dataclass(frozen=True, slots=True)
class StateDefinition:
    """
    Declaração de um estado, antes da validação do grafo.

    Attributes:
        allowed_transitions: Nomes dos estados de destino permitidos
        guards: Predicados avaliados ao entrar neste estado
        metadata: Payload opaco (não interpretado pelo motor)
        component: Handle externo da view (apenas armazenado e repassado)
    """

    allowed_transitions: Sequence[str] = ()
    guards: Sequence[Guard] = ()
    metadata: Any = None
    component: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StateDefinition:
        """
        Cria definição a partir de um dict no formato de construção.

        Aceita as chaves ``allowedTransitions``/``allowed_transitions``,
        ``guards``, ``metadata`` e ``componentHandle``/``component``.
        Os valores são repassados sem conversão; o StateRegistry valida os
        tipos ao construir o grafo.
        """
        allowed = data.get("allowedTransitions", data.get("allowed_transitions"))
        guards = data.get("guards")
        component = data.get("componentHandle", data.get("component"))
        return cls(
            allowed_transitions=() if allowed is None else allowed,
            guards=() if guards is None else guards,
            metadata=data.get("metadata"),
            component=component,
        )


@dataclass(frozen=True, slots=True)
class State:
    """
    Estado validado e residente no registro.

    Attributes:
        name: Identificador único do estado
        allowed_transitions: Destinos permitidos (conjunto ordenado)
        guards: Guards de entrada, em ordem de declaração
        metadata: Payload opaco (mapeamentos ficam somente leitura)
        component: Handle externo da view
    """

    name: str
    allowed_transitions: tuple[str, ...] = ()
    guards: tuple[Guard, ...] = field(default=(), repr=False)
    metadata: Any = None
    component: Any = field(default=None, repr=False)

    @property
    def is_terminal(self) -> bool:
        """Estado sem arestas de saída (válido, apenas terminal)."""
        return not self.allowed_transitions

    @property
    def has_guards(self) -> bool:
        """Indica se o estado possui guards de entrada."""
        return bool(self.guards)
