"""
Registro imutável de estados do grafo de navegação.

O registro valida o grafo inteiro na construção: um grafo inválido
nunca produz um motor utilizável.

Invariantes verificados:
    - Estado inicial declarado
    - Todo destino de allowed_transitions declarado no mesmo registro
    - Nomes de estado não vazios e sem duplicatas
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Union

from fsm.states.definition import State, StateDefinition
from fsm.types.errors import GraphError, UnknownStateError

logger = logging.getLogger(__name__)

DefinitionLike = Union[StateDefinition, Mapping[str, Any]]
DefinitionsInput = Union[
    Mapping[str, DefinitionLike],
    Iterable[tuple[str, DefinitionLike]],
]


def _coerce_definition(name: str, definition: DefinitionLike) -> StateDefinition:
    if isinstance(definition, StateDefinition):
        return definition
    if isinstance(definition, Mapping):
        return StateDefinition.from_mapping(definition)
    raise GraphError(
        f"Definição do estado {name!r} deve ser StateDefinition ou dict, "
        f"recebido: {type(definition).__name__}"
    )


def _ordered_unique(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))


def _as_list(value: Any) -> tuple[Any, ...] | None:
    """Converte lista/tupla em tupla; None para string ou não-sequência."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return None
    return tuple(value)


def _freeze_metadata(metadata: Any) -> Any:
    if isinstance(metadata, Mapping):
        return MappingProxyType(dict(metadata))
    return metadata


class StateRegistry:
    """
    Grafo imutável de estados declarados e suas arestas.

    Reconfigurar o grafo exige construir um novo registro (e um novo motor).

    Args:
        definitions: Mapa nome → definição, ou sequência de pares
            (nome, definição) quando se quer detectar nomes duplicados
        initial: Nome do estado inicial
    """

    __slots__ = ("_initial", "_pairs", "_states")

    def __init__(self, definitions: DefinitionsInput, initial: str) -> None:
        if isinstance(definitions, Mapping):
            pairs = list(definitions.items())
        else:
            pairs = list(definitions)

        self._pairs = pairs
        self._initial = initial
        self._states: Mapping[str, State] = MappingProxyType({})
        self.validate()

    def validate(self) -> None:
        """
        Valida a integridade do grafo e materializa os estados.

        Raises:
            GraphError: Se o grafo for inválido
        """
        errors: list[str] = []
        states: dict[str, State] = {}

        for name, raw in self._pairs:
            if not isinstance(name, str) or not name.strip():
                errors.append(f"Nome de estado inválido: {name!r}")
                continue
            if name in states:
                errors.append(f"Estado duplicado: {name}")
                continue

            try:
                definition = _coerce_definition(name, raw)
            except GraphError as exc:
                errors.append(str(exc))
                continue

            targets = _as_list(definition.allowed_transitions)
            if targets is None:
                errors.append(
                    f"allowedTransitions de {name} deve ser lista de nomes, "
                    f"recebido: {type(definition.allowed_transitions).__name__}"
                )
                targets = ()
            guards = _as_list(definition.guards)
            if guards is None:
                errors.append(
                    f"guards de {name} deve ser lista de callables, "
                    f"recebido: {type(definition.guards).__name__}"
                )
                guards = ()

            for target in targets:
                if not isinstance(target, str):
                    errors.append(f"Transição {name} → {target!r}: nome inválido")
            for guard in guards:
                if not callable(guard):
                    errors.append(f"Guard de {name} não é chamável: {guard!r}")

            states[name] = State(
                name=name,
                allowed_transitions=_ordered_unique(
                    t for t in targets if isinstance(t, str)
                ),
                guards=guards,
                metadata=_freeze_metadata(definition.metadata),
                component=definition.component,
            )

        if not isinstance(self._initial, str) or self._initial not in states:
            errors.append(f"Estado inicial {self._initial!r} não declarado")

        for state in states.values():
            for target in state.allowed_transitions:
                if target not in states:
                    errors.append(
                        f"Transição {state.name} → {target}: destino não declarado"
                    )

        if errors:
            logger.error(
                "state_graph_invalid",
                extra={"error_count": len(errors), "errors": errors},
            )
            raise GraphError("Grafo de estados inválido:\n" + "\n".join(
                f"- {error}" for error in errors
            ))

        self._states = MappingProxyType(states)

    @property
    def initial(self) -> str:
        """Nome do estado inicial."""
        return self._initial

    @property
    def initial_state(self) -> State:
        """Estado inicial."""
        return self._states[self._initial]

    def get(self, name: str) -> State:
        """
        Retorna o estado declarado.

        Raises:
            UnknownStateError: Se o nome não estiver no registro
        """
        try:
            return self._states[name]
        except (KeyError, TypeError):
            raise UnknownStateError(name) from None

    def has_edge(self, from_state: str, to_state: str) -> bool:
        """Verifica se existe aresta declarada (comparação exata de string)."""
        state = self._states.get(from_state)
        if state is None:
            return False
        return to_state in state.allowed_transitions

    def names(self) -> list[str]:
        """Nomes dos estados em ordem de declaração."""
        return list(self._states)

    def states(self) -> list[State]:
        """Estados em ordem de declaração."""
        return list(self._states.values())

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return f"StateRegistry(initial={self._initial!r}, states={self.names()!r})"
