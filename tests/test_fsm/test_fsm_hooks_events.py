"""
Testes de hooks, eventos e proteção contra reentrância do motor.
"""

import logging
import threading

import pytest

from fsm import (
    HOOK_ERROR,
    STATE_CHANGE,
    EventBus,
    HookErrorEvent,
    ReentrancyError,
    RejectionReason,
    StateChangeEvent,
    create_engine,
)
from fsm.hooks import HookDispatcher


def _engine():
    return create_engine(
        {
            "A": {"allowedTransitions": ["B"]},
            "B": {"allowedTransitions": ["A", "C"]},
            "C": {"allowedTransitions": []},
        },
        "A",
    )


class TestBeforeHooks:
    """
    Testa before-hooks: veto por False, veto por exceção, ordem.
    """

    def test_before_hook_vetoes_transition(self) -> None:
        """
        Hook retornando False veta sem alterar estado nem emitir evento.
        Cobre: before_transition, Vetoed, ausência de evento
        """
        engine = _engine()
        engine.transition_to("B")
        events: list[StateChangeEvent] = []
        engine.subscribe(events.append)

        def block_c(from_state: str, to_state: str) -> bool:
            return to_state != "C"

        engine.before_transition(block_c)

        result = engine.transition_to("C")
        assert result.committed is False
        assert result.reason == RejectionReason.VETOED
        assert "block_c" in result.detail
        assert engine.current == "B"
        assert engine.history == ("A", "B")
        assert events == []

        # Outro destino continua permitido
        assert engine.transition_to("A").committed

    def test_before_hook_returning_none_allows(self) -> None:
        """Só False (identidade) veta; None e valores truthy permitem."""
        engine = _engine()
        engine.before_transition(lambda f, t: None)
        engine.before_transition(lambda f, t: True)

        assert engine.transition_to("B").committed

    def test_before_hook_exception_is_veto(self) -> None:
        """Exceção em before-hook veta e não vaza para o caller."""
        engine = _engine()
        later_calls: list[str] = []

        def explode(from_state: str, to_state: str) -> None:
            raise RuntimeError("indisponível")

        engine.before_transition(explode)
        engine.before_transition(lambda f, t: later_calls.append(t))

        result = engine.transition_to("B")
        assert result.reason == RejectionReason.VETOED
        assert "explode falhou" in result.detail
        assert "indisponível" in result.detail
        assert later_calls == []
        assert engine.current == "A"

    def test_hooks_run_in_registration_order_and_can_be_removed(self) -> None:
        """Hooks rodam na ordem de registro; remove() desfaz o registro."""
        engine = _engine()
        order: list[str] = []

        engine.before_transition(lambda f, t: order.append("before-1"))
        remove = engine.before_transition(lambda f, t: order.append("before-2"))
        engine.after_transition(lambda f, t: order.append("after-1"))

        engine.transition_to("B")
        assert order == ["before-1", "before-2", "after-1"]

        remove()
        remove()  # idempotente
        order.clear()
        engine.transition_to("A")
        assert order == ["before-1", "after-1"]

    def test_non_callable_hook_raises_type_error(self) -> None:
        """Registro de hook não chamável é erro de uso."""
        dispatcher = HookDispatcher()

        with pytest.raises(TypeError):
            dispatcher.before_transition("not a hook")  # type: ignore[arg-type]
        assert dispatcher.before_count == 0
        assert dispatcher.after_count == 0


class TestAfterHooks:
    """
    Testa after-hooks: best-effort, falhas publicadas como hookError.
    """

    def test_after_hook_sees_committed_state(self) -> None:
        """After-hook roda após o commit com (from, to)."""
        engine = _engine()
        seen: list[tuple[str, str, str]] = []

        engine.after_transition(lambda f, t: seen.append((f, t, engine.current)))
        engine.transition_to("B")

        assert seen == [("A", "B", "B")]

    def test_after_hook_failure_keeps_transition_and_publishes_hook_error(self) -> None:
        """Falha em after-hook não desfaz a transição."""
        engine = _engine()
        errors: list[HookErrorEvent] = []
        changes: list[StateChangeEvent] = []
        engine.subscribe(errors.append, HOOK_ERROR)
        engine.subscribe(changes.append)
        remaining: list[str] = []

        def audit(from_state: str, to_state: str) -> None:
            raise ValueError("audit offline")

        engine.after_transition(audit)
        engine.after_transition(lambda f, t: remaining.append(t))

        result = engine.transition_to("B")

        assert result.committed is True
        assert engine.current == "B"
        assert remaining == ["B"]
        assert len(errors) == 1
        assert errors[0].hook == "audit"
        assert isinstance(errors[0].error, ValueError)
        assert (errors[0].from_state, errors[0].to_state) == ("A", "B")
        assert len(changes) == 1


class TestEvents:
    """
    Testa EventBus e a emissão de stateChange pelo motor.
    """

    def test_state_change_event_carries_payload_and_timestamp(self) -> None:
        """Evento é síncrono e traz payload e timestamp do registro."""
        engine = _engine()
        events: list[StateChangeEvent] = []
        engine.subscribe(events.append)

        result = engine.transition_to("B", {"source": "menu"})

        assert len(events) == 1
        event = events[0]
        assert (event.from_state, event.to_state) == ("A", "B")
        assert event.payload == {"source": "menu"}
        assert event.timestamp == result.transition.timestamp
        assert event.trigger == "transition"
        assert event.to_dict()["from"] == "A"
        assert event.to_dict()["to"] == "B"

    def test_rejected_transition_emits_nothing(self) -> None:
        """Nenhum evento para transição rejeitada."""
        engine = _engine()
        events: list[StateChangeEvent] = []
        engine.subscribe(events.append)

        engine.transition_to("C")

        assert events == []

    def test_subscribers_receive_in_registration_order(self) -> None:
        """Entrega em ordem de inscrição."""
        bus = EventBus()
        order: list[int] = []
        bus.subscribe(lambda e: order.append(1))
        bus.subscribe(lambda e: order.append(2))
        bus.subscribe(lambda e: order.append(3))

        bus.publish(StateChangeEvent(from_state="A", to_state="B"))

        assert order == [1, 2, 3]

    def test_unsubscribe_stops_delivery(self) -> None:
        """unsubscribe é idempotente e interrompe a entrega."""
        engine = _engine()
        events: list[StateChangeEvent] = []
        subscription = engine.subscribe(events.append)

        engine.transition_to("B")
        assert engine.unsubscribe(subscription) is True
        assert engine.unsubscribe(subscription) is False
        engine.transition_to("A")

        assert len(events) == 1

    def test_faulty_subscriber_does_not_block_others(self, caplog) -> None:
        """Exceção em subscriber é logada e os demais recebem o evento."""
        bus = EventBus()
        received: list[StateChangeEvent] = []

        def broken(event: StateChangeEvent) -> None:
            raise RuntimeError("ui quebrada")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        with caplog.at_level(logging.ERROR, logger="fsm.events.bus"):
            bus.publish(StateChangeEvent(from_state="A", to_state="B"))

        assert len(received) == 1
        assert any(r.getMessage() == "event_subscriber_failed" for r in caplog.records)

    def test_subscriber_can_unsubscribe_during_delivery(self) -> None:
        """Cancelar inscrição durante a entrega não quebra o laço."""
        bus = EventBus()
        calls: list[str] = []
        subscriptions = []

        def once(event: StateChangeEvent) -> None:
            calls.append("once")
            bus.unsubscribe(subscriptions[0])

        subscriptions.append(bus.subscribe(once))
        bus.subscribe(lambda e: calls.append("other"))

        bus.publish(StateChangeEvent(from_state="A", to_state="B"))
        bus.publish(StateChangeEvent(from_state="B", to_state="A"))

        assert calls == ["once", "other", "other"]
        assert bus.subscriber_count(STATE_CHANGE) == 1

    def test_publish_is_synchronous_and_scoped_to_event(self) -> None:
        """Entrega ocorre no thread do publish e só para inscritos no evento."""
        bus = EventBus()
        changes: list[int] = []
        errors: list[object] = []
        bus.subscribe(lambda e: changes.append(threading.get_ident()))
        bus.subscribe(errors.append, HOOK_ERROR)

        bus.publish(StateChangeEvent(from_state="A", to_state="B"))

        assert changes == [threading.get_ident()]
        assert errors == []
        assert bus.subscriber_count(HOOK_ERROR) == 1

    def test_subscribe_validation(self) -> None:
        """Evento desconhecido e handler não chamável são rejeitados."""
        bus = EventBus()

        with pytest.raises(ValueError, match="Evento desconhecido"):
            bus.subscribe(lambda e: None, "transition")
        with pytest.raises(TypeError):
            bus.subscribe(None)  # type: ignore[arg-type]

        bus.subscribe(lambda e: None)
        bus.clear()
        assert bus.subscriber_count() == 0


class TestReentrancy:
    """
    Testa a rejeição de chamadas reentrantes no mesmo motor.
    """

    def test_transition_from_subscriber_is_rejected(self) -> None:
        """Subscriber que tenta transitar recebe ReentrancyError (logada pelo bus)."""
        engine = _engine()
        errors: list[Exception] = []

        def chain(event: StateChangeEvent) -> None:
            try:
                engine.transition_to("C")
            except ReentrancyError as exc:
                errors.append(exc)

        engine.subscribe(chain)
        engine.transition_to("B")

        assert len(errors) == 1
        assert engine.current == "B"
        # Após a operação, o motor volta a aceitar chamadas
        assert engine.transition_to("C").committed

    def test_reentrant_call_from_before_hook_propagates(self) -> None:
        """ReentrancyError em before-hook não vira veto: propaga ao caller."""
        engine = _engine()
        engine.before_transition(lambda f, t: engine.back())

        with pytest.raises(ReentrancyError, match="back chamado durante transition_to"):
            engine.transition_to("B")

        assert engine.current == "A"
        assert engine.history == ("A",)

    def test_reentrant_call_from_guard_propagates(self) -> None:
        """Guard não pode dirigir o motor."""
        holder: dict[str, object] = {}

        def sneaky(ctx) -> bool:
            holder["engine"].reset()
            return True

        engine = create_engine(
            {"A": {"allowedTransitions": ["B"]}, "B": {"guards": [sneaky]}},
            "A",
        )
        holder["engine"] = engine

        with pytest.raises(ReentrancyError):
            engine.transition_to("B")
        assert engine.current == "A"

    def test_separate_engines_may_call_each_other(self) -> None:
        """Reentrância é por motor: outro motor pode ser dirigido."""
        outer = _engine()
        inner = _engine()
        outer.after_transition(lambda f, t: inner.transition_to("B"))

        outer.transition_to("B")

        assert outer.current == "B"
        assert inner.current == "B"
