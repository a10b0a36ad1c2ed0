"""
Testes de persistência do motor: snapshot, restore e snapshot obsoleto.
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from fsm import (
    DEFAULT_SNAPSHOT_KEY,
    PersistedSnapshot,
    PersistenceAdapter,
    StaleSnapshotError,
    StateChangeEvent,
    create_engine,
)

STATES = {
    "A": {"allowedTransitions": ["B"]},
    "B": {"allowedTransitions": ["A", "C"]},
    "C": {"allowedTransitions": []},
}


class DictStore:
    """Store mínimo em memória (get/set/delete)."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.data[key] = value

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class FailingStore(DictStore):
    def set(self, key: str, value: str) -> None:
        raise ConnectionError("store offline")


class BytesStore(DictStore):
    """Guarda bytes e decodifica na leitura, como um cliente Redis."""

    def __init__(self, raw: bytes) -> None:
        super().__init__()
        self.raw = raw

    def get(self, key: str) -> str | None:
        return self.raw.decode("utf-8")


class TestPersistedSnapshot:
    """
    Testa o modelo PersistedSnapshot (pydantic).
    """

    def test_canonical_json(self) -> None:
        """JSON canônico: chaves ordenadas e separadores compactos."""
        snapshot = PersistedSnapshot(current="B", history=["A", "B", "C"], cursor=1)

        assert snapshot.to_json() == '{"current":"B","cursor":1,"history":["A","B","C"]}'
        assert PersistedSnapshot.from_json(snapshot.to_json()) == snapshot

    @pytest.mark.parametrize(
        "payload",
        [
            {"current": "A", "history": ["A"], "cursor": 1},
            {"current": "B", "history": ["A", "B"], "cursor": 0},
            {"current": "A", "history": [], "cursor": 0},
            {"current": "A", "history": ["A"], "cursor": -1},
            {"current": "A", "history": ["A"], "cursor": 0, "extra": True},
            {"current": "A", "history": ["A"]},
        ],
    )
    def test_inconsistent_snapshot_is_rejected(self, payload) -> None:
        """Cursor fora do histórico ou current divergente não valida."""
        with pytest.raises(ValidationError):
            PersistedSnapshot.from_json(json.dumps(payload))


class TestEnginePersistence:
    """
    Testa persistência integrada ao TransitionEngine.
    """

    def test_snapshot_saved_after_each_commit(self) -> None:
        """Snapshot gravado após transições e navegação no tempo."""
        store = DictStore()
        engine = create_engine(STATES, "A", store=store)

        engine.transition_to("B")
        saved = PersistedSnapshot.from_json(store.data[DEFAULT_SNAPSHOT_KEY])
        assert saved.current == "B"
        assert saved.history == ["A", "B"]
        assert saved.cursor == 1

        engine.back()
        saved = PersistedSnapshot.from_json(store.data[DEFAULT_SNAPSHOT_KEY])
        assert saved.current == "A"
        assert saved.cursor == 0
        assert saved.history == ["A", "B"]

    def test_rejected_transition_does_not_write(self) -> None:
        """Transição rejeitada não toca o store."""
        store = DictStore()
        engine = create_engine(STATES, "A", store=store)

        engine.transition_to("C")

        assert store.writes == 0

    def test_round_trip_restores_state_history_and_cursor(self) -> None:
        """Novo motor no mesmo store retoma estado, histórico e cursor."""
        store = DictStore()
        first = create_engine(STATES, "A", store=store, snapshot_key="nav:main")
        first.transition_to("B")
        first.transition_to("C")
        first.back()

        second = create_engine(STATES, "A", store=store, snapshot_key="nav:main", restore=True)

        assert second.current == "B"
        assert second.history == ("A", "B", "C")
        assert second.cursor == 1
        assert [r.timestamp for r in second.transitions] == [None, None]
        # forward continua funcionando após restaurar
        assert second.forward() is True
        assert second.current == "C"

    def test_restore_without_snapshot_returns_false(self) -> None:
        """Sem snapshot gravado: motor permanece no inicial."""
        engine = create_engine(STATES, "A", store=DictStore())

        assert engine.restore() is False
        assert engine.current == "A"

    def test_restore_without_persistence_returns_false(self) -> None:
        """Persistência desativada: restore é no-op."""
        engine = create_engine(STATES, "A")

        assert engine.persistence_enabled is False
        assert engine.restore() is False

    def test_stale_snapshot_resets_to_initial(self) -> None:
        """Snapshot com estado removido do grafo: volta ao inicial e sinaliza."""
        store = DictStore()
        engine = create_engine(STATES, "A", store=store)
        engine.transition_to("B")
        events: list[StateChangeEvent] = []
        engine.subscribe(events.append)
        store.set(
            DEFAULT_SNAPSHOT_KEY,
            PersistedSnapshot(current="legacy", history=["A", "legacy"], cursor=1).to_json(),
        )

        with pytest.raises(StaleSnapshotError, match="legacy"):
            engine.restore()

        assert engine.current == "A"
        assert engine.history == ("A",)
        assert [(e.from_state, e.to_state, e.trigger) for e in events] == [
            ("B", "A", "restore"),
        ]

    def test_corrupt_blob_is_stale(self) -> None:
        """Blob não decodificável é tratado como snapshot obsoleto."""
        store = DictStore()
        store.set(DEFAULT_SNAPSHOT_KEY, "{not json")

        with pytest.raises(StaleSnapshotError):
            create_engine(STATES, "A", store=store, restore=True)

    def test_non_utf8_blob_is_stale(self) -> None:
        """Bytes fora de UTF-8 no store: fallback para o inicial, não UnicodeDecodeError."""
        store = BytesStore(b"\x80\xff{")
        engine = create_engine(STATES, "A", store=store)
        engine.transition_to("B")

        with pytest.raises(StaleSnapshotError, match="UTF-8") as exc_info:
            engine.restore()

        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        assert engine.current == "A"
        assert engine.history == ("A",)

    def test_save_failure_does_not_roll_back(self, caplog) -> None:
        """Falha do store é logada; a transição já efetivada é mantida."""
        engine = create_engine(STATES, "A", store=FailingStore())

        with caplog.at_level("WARNING", logger="fsm.manager.machine"):
            result = engine.transition_to("B")

        assert result.committed is True
        assert engine.current == "B"
        assert any(r.getMessage() == "snapshot_save_failed" for r in caplog.records)

    def test_reset_overwrites_snapshot(self) -> None:
        """reset() grava snapshot com histórico novo."""
        store = DictStore()
        engine = create_engine(STATES, "A", store=store)
        engine.transition_to("B")

        engine.reset()

        saved = PersistedSnapshot.from_json(store.data[DEFAULT_SNAPSHOT_KEY])
        assert saved.history == ["A"]
        assert saved.cursor == 0


class TestPersistenceAdapter:
    """
    Testa PersistenceAdapter isoladamente.
    """

    def test_empty_key_raises(self) -> None:
        with pytest.raises(ValueError):
            PersistenceAdapter(DictStore(), "")

    def test_clear_uses_store_delete(self) -> None:
        """clear() remove o snapshot quando o store suporta delete."""
        store = DictStore()
        adapter = PersistenceAdapter(store, "k")
        adapter.save(PersistedSnapshot(current="A", history=["A"], cursor=0))

        assert adapter.load() is not None
        assert adapter.clear() is True
        assert adapter.load() is None
