"""
Motor de transições (TransitionEngine) para navegação por estados.

Este módulo compõe registro, guards, hooks, histórico e persistência
para implementar transition_to e a navegação no tempo.

Ordem de uma transição (cada passo pode rejeitar):
    1. Estado de destino declarado (UnknownStateError)
    2. Aresta atual → destino declarada (NotAllowed)
    3. Guards do destino (GuardRejected ou GuardError)
    4. Before-hooks (Vetoed)
    5. Commit: histórico, cursor, estado atual e snapshot
    6. After-hooks (best-effort)
    7. Evento stateChange para os inscritos

Nenhum estado intermediário é observável: ou o estado anterior, ou o
estado completamente efetivado.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fsm.events.bus import (
    STATE_CHANGE,
    EventBus,
    HookErrorEvent,
    StateChangeEvent,
    Subscription,
)
from fsm.history.stack import HistoryStack
from fsm.hooks.dispatcher import Hook, HookDispatcher
from fsm.persistence.adapter import (
    DEFAULT_SNAPSHOT_KEY,
    KeyValueStore,
    PersistenceAdapter,
)
from fsm.persistence.snapshot import PersistedSnapshot
from fsm.rules.guards import GuardContext, evaluate_guards
from fsm.states.definition import State
from fsm.states.registry import DefinitionsInput, StateRegistry
from fsm.transitions.export import export_state_graph
from fsm.types.errors import ReentrancyError, StaleSnapshotError
from fsm.types.transition import RejectionReason, TransitionRecord, TransitionResult

logger = logging.getLogger(__name__)


class TransitionEngine:
    """
    Máquina de estados de navegação.

    Cada instância é independente: não há estado global, e vários motores
    (ex.: fluxos aninhados) podem coexistir.

    Navegação no tempo (back, forward, go_to) NÃO passa por guards nem
    hooks: é uma reprodução do histórico, distinta de transition_to.

    Attributes:
        registry: Grafo imutável de estados
        engine_id: Identificador do motor para logs
    """

    __slots__ = (
        "_engine_id",
        "_events",
        "_history",
        "_hooks",
        "_in_flight",
        "_persistence",
        "_registry",
    )

    def __init__(
        self,
        registry: StateRegistry,
        *,
        engine_id: str = "",
        persistence: PersistenceAdapter | None = None,
    ) -> None:
        """
        Inicializa o motor no estado inicial do registro.

        Args:
            registry: Grafo validado
            engine_id: Identificador do motor para logs
            persistence: Adaptador de persistência (None desativa)
        """
        self._registry = registry
        self._engine_id = engine_id
        self._persistence = persistence
        self._history = HistoryStack(registry.initial)
        self._hooks = HookDispatcher()
        self._events = EventBus()
        self._in_flight: str | None = None

    # ──────────────────────────────────────────────────────────────
    # Leitura
    # ──────────────────────────────────────────────────────────────

    @property
    def registry(self) -> StateRegistry:
        return self._registry

    @property
    def engine_id(self) -> str:
        return self._engine_id

    @property
    def current_state(self) -> State:
        """Estado atual (sempre residente no registro)."""
        return self._registry.get(self._history.current)

    @property
    def current(self) -> str:
        """Nome do estado atual."""
        return self._history.current

    @property
    def history(self) -> tuple[str, ...]:
        """Sequência de estados visitados (cópia)."""
        return self._history.entries

    @property
    def transitions(self) -> tuple[TransitionRecord, ...]:
        """Registros de transição (cópia)."""
        return self._history.records

    @property
    def cursor(self) -> int:
        return self._history.cursor

    @property
    def persistence_enabled(self) -> bool:
        return self._persistence is not None

    def get_current_state(self) -> State:
        """Retorna o estado atual; nunca None após a construção."""
        return self.current_state

    def get_valid_targets(self) -> tuple[str, ...]:
        """Destinos declarados a partir do estado atual."""
        return self.current_state.allowed_transitions

    def can_transition_to(self, target: str, payload: Any = None) -> bool:
        """
        Simula os passos 1–3 de transition_to, sem hooks e sem mutação.

        Raises:
            UnknownStateError: Se o destino não estiver declarado
            GuardError: Se algum guard levantar exceção
        """
        target_state = self._registry.get(target)
        current = self._history.current
        if not self._registry.has_edge(current, target):
            return False
        context = GuardContext.build(current, target, payload)
        return evaluate_guards(target_state.guards, context).allowed

    def export_state_graph(self) -> dict[str, Any]:
        """Dump somente-leitura do grafo (sem guards/hooks, só presença)."""
        return export_state_graph(self._registry)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        state = self.current_state
        return {
            "engine_id": self._engine_id,
            "current_state": state.name,
            "is_terminal": state.is_terminal,
            "cursor": self._history.cursor,
            "history_length": len(self._history),
            "valid_targets": list(state.allowed_transitions),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """
        Retorna histórico em formato seguro para logs.

        Returns:
            Lista de transições em formato dict
        """
        return [record.to_log_dict() for record in self._history.records]

    # ──────────────────────────────────────────────────────────────
    # Hooks e eventos
    # ──────────────────────────────────────────────────────────────

    def before_transition(self, hook: Hook) -> Callable[[], None]:
        """Registra hook (from, to) que pode vetar retornando False."""
        return self._hooks.before_transition(hook)

    def after_transition(self, hook: Hook) -> Callable[[], None]:
        """Registra hook (from, to) executado após o commit."""
        return self._hooks.after_transition(hook)

    def subscribe(
        self,
        handler: Callable[[Any], None],
        event: str = STATE_CHANGE,
    ) -> Subscription:
        """Inscreve handler em stateChange (padrão) ou hookError."""
        return self._events.subscribe(handler, event)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Cancela inscrição. False se já cancelada."""
        return self._events.unsubscribe(subscription)

    # ──────────────────────────────────────────────────────────────
    # Transição
    # ──────────────────────────────────────────────────────────────

    def transition_to(self, target: str, payload: Any = None) -> TransitionResult:
        """
        Tenta transitar para o estado alvo.

        Args:
            target: Nome do estado de destino
            payload: Dados do caller repassados a guards e ao evento

        Returns:
            TransitionResult com committed=True, ou committed=False e
            reason NotAllowed/GuardRejected/Vetoed

        Raises:
            UnknownStateError: Destino não declarado
            GuardError: Um guard levantou exceção
            ReentrancyError: Chamada de dentro de outra operação do motor
        """
        self._enter("transition_to")
        try:
            target_state = self._registry.get(target)
            current = self._history.current

            if not self._registry.has_edge(current, target):
                return self._reject(
                    current, target, RejectionReason.NOT_ALLOWED,
                    f"Transição inválida: {current} → {target}",
                )

            context = GuardContext.build(current, target, payload)
            guard_result = evaluate_guards(target_state.guards, context)
            if not guard_result.allowed:
                return self._reject(
                    current, target, RejectionReason.GUARD_REJECTED, guard_result.reason,
                )

            veto = self._hooks.run_before(current, target)
            if veto.vetoed:
                return self._reject(current, target, RejectionReason.VETOED, veto.detail)

            record = TransitionRecord(from_state=current, to_state=target)
            self._history.push(record)
            self._save_snapshot()

            logger.info(
                "transition_committed",
                extra={
                    "engine_id": self._engine_id,
                    **record.to_log_dict(),
                    "cursor": self._history.cursor,
                },
            )

            self._hooks.run_after(
                current,
                target,
                on_error=lambda name, exc: self._events.publish(
                    HookErrorEvent(hook=name, from_state=current, to_state=target, error=exc)
                ),
            )
            self._events.publish(
                StateChangeEvent(
                    from_state=current,
                    to_state=target,
                    payload=payload,
                    timestamp=record.timestamp,
                )
            )
            return TransitionResult.ok(record)
        finally:
            self._in_flight = None

    # ──────────────────────────────────────────────────────────────
    # Navegação no tempo (sem guards e sem hooks)
    # ──────────────────────────────────────────────────────────────

    def back(self) -> bool:
        """Volta uma posição no histórico. False (no-op) se no índice 0."""
        return self._travel("back", self._history.back)

    def forward(self) -> bool:
        """Avança uma posição no histórico. False (no-op) se no fim."""
        return self._travel("forward", self._history.forward)

    def go_to(self, index: int) -> bool:
        """
        Salta para qualquer índice registrado no histórico.

        Raises:
            IndexOutOfRange: Se o índice não existir
        """
        return self._travel("go_to", lambda: self._history.go_to(index))

    def reset(self) -> None:
        """
        Volta ao estado inicial com histórico novo.

        ATENÇÃO: Descarta todo o histórico (e o snapshot, se persistido).
        """
        self._enter("reset")
        try:
            previous = self._history.current
            self._history.reset(self._registry.initial)
            self._save_snapshot()
            self._announce(previous, "reset")
        finally:
            self._in_flight = None

    # ──────────────────────────────────────────────────────────────
    # Persistência
    # ──────────────────────────────────────────────────────────────

    def snapshot(self) -> PersistedSnapshot:
        """Snapshot do estado atual (independe de persistência ativa)."""
        return PersistedSnapshot(
            current=self._history.current,
            history=list(self._history.entries),
            cursor=self._history.cursor,
        )

    def restore(self) -> bool:
        """
        Restaura estado e histórico a partir do snapshot persistido.

        Returns:
            True se restaurou; False se não há persistência ou snapshot

        Raises:
            StaleSnapshotError: Snapshot inválido para o grafo atual; o
                motor volta ao estado inicial antes de propagar
        """
        self._enter("restore")
        try:
            if self._persistence is None:
                logger.debug("restore_skipped", extra={"engine_id": self._engine_id})
                return False

            previous = self._history.current
            try:
                snapshot = self._persistence.load()
                if snapshot is None:
                    logger.info(
                        "snapshot_not_found",
                        extra={"engine_id": self._engine_id, "key": self._persistence.key},
                    )
                    return False
                self._check_snapshot(snapshot)
            except StaleSnapshotError as exc:
                self._history.reset(self._registry.initial)
                logger.warning(
                    "snapshot_stale",
                    extra={"engine_id": self._engine_id, "error": str(exc)},
                )
                self._announce(previous, "restore")
                raise

            self._history = HistoryStack.from_snapshot(snapshot.history, snapshot.cursor)
            logger.info(
                "snapshot_restored",
                extra={
                    "engine_id": self._engine_id,
                    "current_state": snapshot.current,
                    "cursor": snapshot.cursor,
                    "history_length": len(snapshot.history),
                },
            )
            self._announce(previous, "restore")
            return True
        finally:
            self._in_flight = None

    # ──────────────────────────────────────────────────────────────
    # Internos
    # ──────────────────────────────────────────────────────────────

    def _enter(self, operation: str) -> None:
        if self._in_flight is not None:
            logger.error(
                "reentrant_call_rejected",
                extra={
                    "engine_id": self._engine_id,
                    "operation": operation,
                    "in_flight": self._in_flight,
                },
            )
            raise ReentrancyError(
                f"{operation} chamado durante {self._in_flight} no mesmo motor"
            )
        self._in_flight = operation

    def _reject(
        self,
        current: str,
        target: str,
        reason: RejectionReason,
        detail: str | None,
    ) -> TransitionResult:
        logger.info(
            "transition_rejected",
            extra={
                "engine_id": self._engine_id,
                "from_state": current,
                "to_state": target,
                "reason": reason.value,
            },
        )
        return TransitionResult.rejected(reason, detail)

    def _travel(self, trigger: str, move: Callable[[], bool]) -> bool:
        self._enter(trigger)
        try:
            previous = self._history.current
            previous_cursor = self._history.cursor
            if not move():
                return False
            if self._history.cursor != previous_cursor:
                self._save_snapshot()
                logger.info(
                    "history_travelled",
                    extra={
                        "engine_id": self._engine_id,
                        "trigger": trigger,
                        "from_state": previous,
                        "to_state": self._history.current,
                        "cursor": self._history.cursor,
                    },
                )
                self._announce(previous, trigger, force=True)
            return True
        finally:
            self._in_flight = None

    def _announce(self, previous: str, trigger: str, *, force: bool = False) -> None:
        current = self._history.current
        if previous == current and not force:
            return
        self._events.publish(
            StateChangeEvent(from_state=previous, to_state=current, trigger=trigger)
        )

    def _check_snapshot(self, snapshot: PersistedSnapshot) -> None:
        missing = [name for name in snapshot.history if name not in self._registry]
        if missing:
            raise StaleSnapshotError(
                "Snapshot referencia estados ausentes do grafo: "
                + ", ".join(dict.fromkeys(missing))
            )

    def _save_snapshot(self) -> None:
        if self._persistence is None:
            return
        try:
            self._persistence.save(self.snapshot())
        except Exception as exc:
            # Commit já aconteceu: falha do store não desfaz a transição
            logger.warning(
                "snapshot_save_failed",
                extra={"engine_id": self._engine_id, "error": str(exc)},
            )


def create_engine(
    definitions: DefinitionsInput | StateRegistry,
    initial: str | None = None,
    *,
    engine_id: str = "",
    store: KeyValueStore | None = None,
    snapshot_key: str = DEFAULT_SNAPSHOT_KEY,
    restore: bool = False,
) -> TransitionEngine:
    """
    Factory function para criar um motor.

    Args:
        definitions: Definições de estado ou StateRegistry já construído
        initial: Estado inicial (obrigatório quando definitions não é registro)
        engine_id: Identificador do motor para logs
        store: Key-value store para persistência (None desativa)
        snapshot_key: Chave do snapshot no store
        restore: Se True, chama restore() logo após construir

    Returns:
        TransitionEngine configurado

    Raises:
        GraphError: Grafo inválido
        StaleSnapshotError: restore=True e snapshot incompatível
    """
    if isinstance(definitions, StateRegistry):
        registry = definitions
    else:
        if initial is None:
            raise ValueError("initial é obrigatório ao construir a partir de definições")
        registry = StateRegistry(definitions, initial)

    persistence = PersistenceAdapter(store, snapshot_key) if store is not None else None
    engine = TransitionEngine(registry, engine_id=engine_id, persistence=persistence)
    if restore:
        engine.restore()
    return engine
