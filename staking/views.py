"""
UI-facing staking operations for one network.

StakingViews is the surface a wallet UI talks to: it exposes the current
preload data, refreshes it, and derives delegation views from accounts.
"""
from typing import Iterable, List, Optional, Sequence

import structlog

from cache.storage import CacheStorage
from config.settings import StakeviewSettings, get_settings

from . import mapper
from .filtering import sorted_validators
from .mock import mock_fetch_validators
from .preload_data import PreloadDataStore, ValidatorFetcher, build_preload_cache
from .selector import DelegationSelector, select_delegation
from .types import (
    Account,
    CosmosPreloadData,
    DraftValidator,
    MappedDelegation,
    MappedRedelegation,
    MappedUnbonding,
    Network,
    RankedValidator,
    TransactionDraft,
    ValidatorInfo,
)

logger = structlog.get_logger()


class StakingViews:
    """Derived staking views over a network's preload data store."""

    def __init__(self, store: PreloadDataStore):
        self.store = store

    @classmethod
    def create(cls, network: Network,
               fetch_validators: Optional[ValidatorFetcher] = None,
               settings: Optional[StakeviewSettings] = None,
               storage: Optional[CacheStorage] = None) -> "StakingViews":
        """
        Wire a cache, store and views from settings.

        In MOCK mode the mock validator fetcher is used and fetch_validators
        is ignored.
        """
        settings = settings or get_settings()
        if settings.MOCK:
            fetch_validators = mock_fetch_validators
        if fetch_validators is None:
            raise ValueError("fetch_validators is required unless MOCK is enabled")

        cache = build_preload_cache(settings, storage)
        store = PreloadDataStore(cache, network, fetch_validators)
        logger.info("staking_views_created", network=network.id, mock=settings.MOCK)
        return cls(store)

    def get_current_preload_data(self) -> CosmosPreloadData:
        return self.store.get_current_data()

    async def prepare(self) -> CosmosPreloadData:
        return await self.store.prepare()

    async def hydrate(self) -> Optional[CosmosPreloadData]:
        return await self.store.hydrate()

    @property
    def validators(self) -> List[ValidatorInfo]:
        return self.get_current_preload_data().validators

    def map_delegations(self, account: Account, mode: Optional[str] = None) -> List[MappedDelegation]:
        return mapper.map_delegations(account, self.validators, mode)

    def map_unbondings(self, account: Account) -> List[MappedUnbonding]:
        return mapper.map_unbondings(account, self.validators)

    def map_redelegations(self, account: Account) -> List[MappedRedelegation]:
        return mapper.map_redelegations(account, self.validators)

    def select_delegation(self, account: Account, transaction: TransactionDraft) -> DelegationSelector:
        return select_delegation(self.store, account, transaction)

    def sorted_validators(self, query: str,
                          validators: Optional[Sequence[ValidatorInfo]] = None,
                          existing_delegations: Iterable[DraftValidator] = ()) -> List[RankedValidator]:
        if validators is None:
            validators = self.validators
        return sorted_validators(query, validators, existing_delegations)
