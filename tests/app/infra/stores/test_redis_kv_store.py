"""Testes do RedisKeyValueStore com mock."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.infra.stores.redis_store import SNAPSHOT_PREFIX, RedisKeyValueStore
from app.protocols.kv_store import KeyValueStoreProtocol
from fsm import KeyValueStore, StaleSnapshotError, create_engine
from utils.errors import RedisConnectionError, StoreUnavailableError


class TestRedisKeyValueStore:
    """Testes do RedisKeyValueStore (API síncrona)."""

    def test_implements_protocols(self) -> None:
        """Satisfaz o contrato do app e o Protocol do motor."""
        store = RedisKeyValueStore(MagicMock())
        assert isinstance(store, KeyValueStoreProtocol)
        assert isinstance(store, KeyValueStore)

    def test_set_without_ttl(self) -> None:
        """Sem TTL: SET simples com namespace."""
        mock_redis = MagicMock()
        store = RedisKeyValueStore(mock_redis)

        store.set("fsm:snapshot:main", '{"cursor":0}')

        mock_redis.set.assert_called_once_with(
            f"{SNAPSHOT_PREFIX}fsm:snapshot:main", '{"cursor":0}'
        )

    def test_set_with_ttl_uses_ex(self) -> None:
        """Com TTL: SET com EX."""
        mock_redis = MagicMock()
        store = RedisKeyValueStore(mock_redis, ttl_seconds=600, prefix="t:")

        store.set("k", "v")

        mock_redis.set.assert_called_once_with("t:k", "v", ex=600)

    def test_get_decodes_bytes(self) -> None:
        """Deve decodificar bytes do cliente."""
        mock_redis = MagicMock()
        mock_redis.get.return_value = b'{"current":"home"}'
        store = RedisKeyValueStore(mock_redis)

        assert store.get("k") == '{"current":"home"}'
        mock_redis.get.assert_called_once_with(f"{SNAPSHOT_PREFIX}k")

    def test_undecodable_snapshot_is_stale_for_engine(self) -> None:
        """Bytes fora de UTF-8 viram snapshot obsoleto; o motor volta ao inicial."""
        mock_redis = MagicMock()
        mock_redis.get.return_value = b"\xff\xfe"
        store = RedisKeyValueStore(mock_redis)
        engine = create_engine({"home": {"allowedTransitions": ["cart"]}, "cart": {}}, "home",
                               store=store)
        engine.transition_to("cart")

        with pytest.raises(StaleSnapshotError, match="UTF-8"):
            engine.restore()

        assert engine.current == "home"

    def test_get_returns_none_for_missing(self) -> None:
        """Deve retornar None se chave não existe."""
        mock_redis = MagicMock()
        mock_redis.get.return_value = None
        store = RedisKeyValueStore(mock_redis)

        assert store.get("missing") is None

    def test_delete_and_exists(self) -> None:
        """delete/exists convertem o retorno do Redis para bool."""
        mock_redis = MagicMock()
        mock_redis.delete.return_value = 1
        mock_redis.exists.return_value = 0
        store = RedisKeyValueStore(mock_redis)

        assert store.delete("k") is True
        assert store.exists("k") is False
        mock_redis.delete.assert_called_once_with(f"{SNAPSHOT_PREFIX}k")

    def test_client_errors_are_wrapped(self) -> None:
        """Erros do cliente viram RedisConnectionError encadeado."""
        mock_redis = MagicMock()
        mock_redis.get.side_effect = ConnectionError("down")
        mock_redis.set.side_effect = ConnectionError("down")
        store = RedisKeyValueStore(mock_redis)

        with pytest.raises(RedisConnectionError, match="ler snapshot") as exc_info:
            store.get("k")
        assert isinstance(exc_info.value.__cause__, ConnectionError)

        with pytest.raises(StoreUnavailableError, match="gravar snapshot"):
            store.set("k", "v")

    def test_negative_ttl_raises(self) -> None:
        with pytest.raises(ValueError):
            RedisKeyValueStore(MagicMock(), ttl_seconds=-1)
