"""
Cosmos preload data: the validator set shared by every account of a network.

PreloadDataStore binds the generic PreloadCache to one network and to the
CosmosPreloadData shape. Readers call get_current_data() synchronously and
always get a complete snapshot; prepare() refreshes it.
"""
from typing import Any, Awaitable, Callable, Optional

import structlog
from pydantic import ValidationError

from cache.core import PreloadCache
from cache.exceptions import InvalidPreloadDataError
from cache.redis_storage import RedisStorage
from cache.storage import CacheStorage, InMemoryStorage, JsonFileStorage
from config.settings import StakeviewSettings, get_settings
from error_handling.circuit_breaker import CircuitBreaker

from .types import CosmosPreloadData, Network

logger = structlog.get_logger()

ValidatorFetcher = Callable[[Network], Awaitable[Any]]

# Served until the first successful prepare() or hydrate().
BOOTSTRAP_PRELOAD_DATA = CosmosPreloadData(validators=[])


def as_safe_preload_data(data: Any, network_id: str = "unknown") -> CosmosPreloadData:
    """
    Validate a raw preload blob.

    Accepts a CosmosPreloadData, a mapping with a "validators" list or a bare
    validator list. When no validator carries a rank, each gets its 1-based
    position. Ranks are all or nothing: a set mixing ranked and unranked
    validators is rejected.

    Raises:
        InvalidPreloadDataError: If the blob does not describe a validator set
    """
    if isinstance(data, CosmosPreloadData):
        parsed = data
    else:
        if isinstance(data, list):
            data = {"validators": data}
        try:
            parsed = CosmosPreloadData.model_validate(data)
        except ValidationError as e:
            raise InvalidPreloadDataError(network_id, f"invalid preload data: {e.error_count()} errors") from e

    seen = set()
    for validator in parsed.validators:
        if validator.validator_address in seen:
            raise InvalidPreloadDataError(
                network_id, f"duplicate validator {validator.validator_address}"
            )
        seen.add(validator.validator_address)

    ranked = sum(1 for v in parsed.validators if v.rank > 0)
    if ranked == len(parsed.validators):
        return parsed
    if ranked:
        raise InvalidPreloadDataError(
            network_id, f"{ranked} of {len(parsed.validators)} validators ranked"
        )
    return CosmosPreloadData(validators=[
        v.model_copy(update={"rank": i + 1})
        for i, v in enumerate(parsed.validators)
    ])


class PreloadDataStore:
    """Preload data of one Cosmos network, backed by a PreloadCache."""

    def __init__(self, cache: PreloadCache, network: Network, fetch_validators: ValidatorFetcher):
        self.cache = cache
        self.network = network
        self._fetch_validators = fetch_validators
        cache.register(network, self)

    # Preloader protocol

    async def preload(self, network: Network) -> Any:
        data = await self._fetch_validators(network)
        logger.debug("cosmos_validators_fetched", network=network.id)
        return data

    def validate(self, data: Any) -> CosmosPreloadData:
        return as_safe_preload_data(data, self.network.id)

    def default(self) -> CosmosPreloadData:
        return BOOTSTRAP_PRELOAD_DATA

    # Reader API

    def get_current_data(self) -> CosmosPreloadData:
        return self.cache.get_current(self.network)

    async def prepare(self) -> CosmosPreloadData:
        return await self.cache.prepare(self.network)

    async def hydrate(self) -> Optional[CosmosPreloadData]:
        return await self.cache.hydrate(self.network)

    def subscribe(self, callback: Callable[[CosmosPreloadData], None]) -> Callable[[], None]:
        return self.cache.subscribe(self.network, callback)


def build_preload_cache(settings: Optional[StakeviewSettings] = None,
                        storage: Optional[CacheStorage] = None) -> PreloadCache:
    """Create a PreloadCache wired from settings."""
    settings = settings or get_settings()
    if storage is None:
        if settings.REDIS_URL:
            storage = RedisStorage(settings.REDIS_URL)
        elif settings.PRELOAD_CACHE_DIR:
            storage = JsonFileStorage(settings.PRELOAD_CACHE_DIR)
        else:
            storage = InMemoryStorage()
    breaker = CircuitBreaker(
        failure_threshold=settings.FETCH_FAILURE_THRESHOLD,
        recovery_timeout=settings.FETCH_RECOVERY_TIMEOUT,
        name="preload_fetch"
    )
    logger.info("preload_cache_created",
                storage=type(storage).__name__,
                failure_threshold=settings.FETCH_FAILURE_THRESHOLD)
    return PreloadCache(storage, breaker=breaker)
