"""
Carregamento do grafo de estados a partir de documentos JSON/YAML.

Formato:
    {
        "initial": "home",
        "states": {
            "home": {"allowedTransitions": ["settings"], "guards": []},
            "settings": {
                "allowedTransitions": ["home"],
                "guards": ["is_logged_in"],
                "metadata": {"title": "Configurações"}
            }
        }
    }

Em documentos, guards são nomes resolvidos por um GuardRegistry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fsm.rules.guards import Guard, GuardRegistry
from fsm.states.definition import StateDefinition
from fsm.states.registry import StateRegistry
from fsm.types.errors import GraphError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class StateDocument(BaseModel):
    """Entrada de um estado no documento do grafo."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    allowed_transitions: list[str] = Field(default_factory=list, alias="allowedTransitions")
    guards: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None
    component_handle: Any = Field(default=None, alias="componentHandle")


class GraphDocument(BaseModel):
    """Documento completo do grafo."""

    model_config = ConfigDict(extra="forbid")

    initial: str
    states: dict[str, StateDocument | None]


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    seen: dict[str, Any] = {}
    for key, value in pairs:
        if key in seen:
            raise GraphError(f"Chave duplicada no documento do grafo: {key}")
        seen[key] = value
    return seen


def _resolve_guards(
    state_name: str,
    names: list[str],
    guards: GuardRegistry | None,
    strict: bool,
) -> tuple[Guard, ...]:
    if not names:
        return ()
    if guards is None and not strict:
        return tuple(_unresolved_guard(name) for name in names)

    resolved: list[Guard] = []
    missing: list[str] = []
    for name in names:
        if guards is not None and guards.has(name):
            resolved.append(guards.resolve(name))
        else:
            missing.append(name)
    if missing:
        raise GraphError(
            f"Guards não registrados para o estado {state_name}: {', '.join(missing)}"
        )
    return tuple(resolved)


def _unresolved_guard(name: str) -> Guard:
    def guard(context: Any) -> bool:
        raise RuntimeError(f"Guard {name} não foi resolvido (grafo carregado sem guards)")

    guard.__name__ = name
    return guard


def load_graph_from_mapping(
    data: Any,
    guards: GuardRegistry | None = None,
    *,
    strict: bool = True,
) -> StateRegistry:
    """
    Constrói um StateRegistry a partir de um documento já decodificado.

    Args:
        data: Documento no formato {"initial": ..., "states": {...}}
        guards: Registro para resolver nomes de guard
        strict: Se False e sem GuardRegistry, guards viram placeholders
            que falham ao executar (útil para exportar/visualizar o grafo)

    Raises:
        GraphError: Se o documento ou o grafo forem inválidos
    """
    try:
        document = GraphDocument.model_validate(data)
    except ValidationError as exc:
        raise GraphError(f"Documento de grafo inválido: {exc}") from exc

    definitions: list[tuple[str, StateDefinition]] = []
    for name, entry in document.states.items():
        # "estado: {}" e "estado:" (YAML vazio) são equivalentes
        entry = entry or StateDocument()
        definitions.append((
            name,
            StateDefinition(
                allowed_transitions=tuple(entry.allowed_transitions),
                guards=_resolve_guards(name, entry.guards, guards, strict),
                metadata=entry.metadata,
                component=entry.component_handle,
            ),
        ))

    registry = StateRegistry(definitions, document.initial)
    logger.debug(
        "state_graph_loaded",
        extra={"initial": registry.initial, "state_count": len(registry)},
    )
    return registry


def load_graph_from_json(
    text: str | bytes,
    guards: GuardRegistry | None = None,
    *,
    strict: bool = True,
) -> StateRegistry:
    """Decodifica JSON (rejeitando chaves duplicadas) e constrói o registro."""
    try:
        data = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as exc:
        raise GraphError(f"JSON de grafo inválido: {exc}") from exc
    return load_graph_from_mapping(data, guards, strict=strict)


def load_graph_from_yaml(
    text: str | bytes,
    guards: GuardRegistry | None = None,
    *,
    strict: bool = True,
) -> StateRegistry:
    """Decodifica YAML (safe_load) e constrói o registro."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GraphError(f"YAML de grafo inválido: {exc}") from exc
    return load_graph_from_mapping(data, guards, strict=strict)


def load_graph_file(
    path: str | Path,
    guards: GuardRegistry | None = None,
    *,
    strict: bool = True,
) -> StateRegistry:
    """Carrega o grafo de um arquivo .json, .yaml ou .yml."""
    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() in YAML_SUFFIXES:
        return load_graph_from_yaml(text, guards, strict=strict)
    return load_graph_from_json(text, guards, strict=strict)
