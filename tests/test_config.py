import pytest

from cache.redis_storage import RedisStorage
from cache.storage import InMemoryStorage, JsonFileStorage
from config.settings import StakeviewSettings, get_settings
from staking.filtering import sorted_validators
from staking.mock import COSMOS
from staking.preload_data import build_preload_cache
from staking.types import ValidatorInfo, DraftValidator


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = StakeviewSettings()
    assert settings.MOCK is False
    assert settings.PRELOAD_CACHE_DIR is None
    assert settings.REDIS_URL is None
    assert settings.MAX_REDELEGATIONS == 7
    assert settings.MAX_UNBONDINGS == 7
    assert settings.MAX_DELEGATIONS == 5
    assert settings.PIN_DELEGATED_VALIDATORS is True


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("STAKEVIEW_MOCK", "1")
    monkeypatch.setenv("STAKEVIEW_MAX_UNBONDINGS", "3")
    monkeypatch.setenv("STAKEVIEW_PRELOAD_CACHE_DIR", str(tmp_path))

    settings = get_settings()
    assert settings.MOCK is True
    assert settings.MAX_UNBONDINGS == 3
    assert settings.PRELOAD_CACHE_DIR == str(tmp_path)
    assert get_settings() is settings


def test_storage_selected_from_settings(tmp_path):
    redis_cache = build_preload_cache(StakeviewSettings(REDIS_URL="redis://localhost:6379/0",
                                                        PRELOAD_CACHE_DIR=str(tmp_path)))
    assert isinstance(redis_cache._storage, RedisStorage)
    assert redis_cache._storage.key_for(COSMOS) == "preload:cosmos"

    file_cache = build_preload_cache(StakeviewSettings(PRELOAD_CACHE_DIR=str(tmp_path)))
    assert isinstance(file_cache._storage, JsonFileStorage)

    assert isinstance(build_preload_cache(StakeviewSettings())._storage, InMemoryStorage)


def test_pin_setting_drives_validator_order(monkeypatch):
    validators = [
        ValidatorInfo(validator_address="a", name="A", rank=1),
        ValidatorInfo(validator_address="b", name="B", rank=2),
    ]
    delegations = [DraftValidator(address="b", amount=10)]

    assert [r.validator.name for r in sorted_validators("", validators, delegations)] == ["B", "A"]

    monkeypatch.setenv("STAKEVIEW_PIN_DELEGATED_VALIDATORS", "false")
    get_settings.cache_clear()
    assert [r.validator.name for r in sorted_validators("", validators, delegations)] == ["A", "B"]
