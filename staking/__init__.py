"""
stakeview staking views

Read-model layer turning an account's raw delegation records and the
network's preloaded validator set into ranked, formatted, filterable views.
"""

from .exceptions import MissingResourceError, StakingError
from .filtering import filter_and_sort, find_delegation, search_filter, sorted_validators
from .mapper import map_delegations, map_redelegations, map_unbondings
from .preload_data import PreloadDataStore, as_safe_preload_data, build_preload_cache
from .selector import DelegationSelector, SelectorStatus, select_delegation
from .types import (
    Account,
    CosmosPreloadData,
    DelegationRecord,
    DraftValidator,
    MappedDelegation,
    Network,
    RankedValidator,
    TransactionDraft,
    TransactionMode,
    ValidatorInfo,
    create_transaction,
    get_account_unit,
)
from .views import StakingViews

__all__ = [
    'StakingError',
    'MissingResourceError',
    'filter_and_sort',
    'find_delegation',
    'search_filter',
    'sorted_validators',
    'map_delegations',
    'map_redelegations',
    'map_unbondings',
    'PreloadDataStore',
    'as_safe_preload_data',
    'build_preload_cache',
    'DelegationSelector',
    'SelectorStatus',
    'select_delegation',
    'Account',
    'CosmosPreloadData',
    'DelegationRecord',
    'DraftValidator',
    'MappedDelegation',
    'Network',
    'RankedValidator',
    'TransactionDraft',
    'TransactionMode',
    'ValidatorInfo',
    'create_transaction',
    'get_account_unit',
    'StakingViews'
]
