import asyncio
import json

import pytest
from unittest.mock import AsyncMock, patch
from redis.exceptions import ConnectionError as RedisConnectionError, RedisError

from cache.core import PreloadCache
from cache.redis_storage import RedisStorage
from staking.mock import COSMOS, mock_fetch_validators, mock_preload_data
from staking.preload_data import BOOTSTRAP_PRELOAD_DATA, PreloadDataStore, as_safe_preload_data

REDIS_URL = "redis://localhost:6379/0"


@pytest.fixture
def client():
    """Create a mocked redis.asyncio client."""
    mock_client = AsyncMock()
    mock_client.get.return_value = None
    return mock_client


@pytest.fixture
def storage(client):
    return RedisStorage(REDIS_URL, client=client)


def test_save_data_writes_json_under_network_key(storage, client):
    snapshot = as_safe_preload_data(mock_preload_data())

    asyncio.run(storage.save_data(COSMOS, snapshot))

    client.set.assert_awaited_once()
    key, payload = client.set.call_args[0]
    assert key == "preload:cosmos"
    assert len(json.loads(payload)["validators"]) == len(snapshot.validators)


def test_prepare_then_hydrate_through_redis(storage, client):
    """A snapshot saved by one process hydrates the next."""
    store = PreloadDataStore(PreloadCache(storage), COSMOS, mock_fetch_validators)
    prepared = asyncio.run(store.prepare())

    saved = client.set.call_args[0][1]
    client.get.return_value = saved

    restarted = PreloadDataStore(PreloadCache(storage), COSMOS, mock_fetch_validators)
    assert asyncio.run(restarted.hydrate()) == prepared
    client.get.assert_awaited_with("preload:cosmos")


def test_get_data_missing_key(storage):
    assert asyncio.run(storage.get_data(COSMOS)) is None


def test_get_data_failure_is_logged_and_ignored(storage, client):
    client.get.side_effect = RedisConnectionError("connection refused")

    with patch("cache.redis_storage.logger") as mock_logger:
        assert asyncio.run(storage.get_data(COSMOS)) is None

    mock_logger.error.assert_called_once()
    assert mock_logger.error.call_args[0][0] == "redis_get_failed"


def test_get_data_corrupt_value(storage, client):
    client.get.return_value = "{not json"

    store = PreloadDataStore(PreloadCache(storage), COSMOS, mock_fetch_validators)
    assert asyncio.run(store.hydrate()) is None
    assert store.get_current_data() == BOOTSTRAP_PRELOAD_DATA


def test_save_failure_reaches_prepare_caller(storage, client):
    """The snapshot is published even when persisting it fails."""
    client.set.side_effect = RedisConnectionError("connection reset")
    store = PreloadDataStore(PreloadCache(storage), COSMOS, mock_fetch_validators)

    with patch("cache.redis_storage.logger") as mock_logger:
        with pytest.raises(RedisError):
            asyncio.run(store.prepare())

    assert mock_logger.error.call_args[0][0] == "redis_set_failed"
    assert len(store.get_current_data().validators) == 12


def test_connects_lazily_from_url(client):
    storage = RedisStorage(REDIS_URL)

    with patch("cache.redis_storage.redis.from_url", return_value=client) as mock_from_url:
        asyncio.run(storage.get_data(COSMOS))
        asyncio.run(storage.get_data(COSMOS))

    mock_from_url.assert_called_once_with(REDIS_URL, encoding="utf-8", decode_responses=True)
    client.ping.assert_awaited_once()

    asyncio.run(storage.disconnect())
    client.aclose.assert_awaited_once()
    assert storage.redis is None


def test_connection_failure_on_save_propagates(client):
    client.ping.side_effect = RedisConnectionError("no route to host")
    storage = RedisStorage(REDIS_URL)

    with patch("cache.redis_storage.redis.from_url", return_value=client):
        with pytest.raises(RedisError):
            asyncio.run(storage.save_data(COSMOS, mock_preload_data()))

    client.set.assert_not_called()
