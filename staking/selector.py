"""
Delegation query selector.

Holds the search query for a delegation picker and derives its options and
selected value from the current account, transaction draft and preload
snapshot on every read, so a changed input is never shadowed by an older
result.
"""
from enum import Enum
from typing import List, Optional

import structlog
from pydantic import BaseModel

from .filtering import filter_and_sort, find_delegation
from .mapper import map_delegations
from .preload_data import PreloadDataStore
from .types import Account, MappedDelegation, TransactionDraft, TransactionMode

logger = structlog.get_logger()

CLAIM_MODES = (TransactionMode.CLAIM_REWARD, TransactionMode.CLAIM_REWARD_COMPOUND)


class SelectorStatus(str, Enum):
    IDLE = "idle"
    QUERYING = "querying"


class SelectorState(BaseModel):
    """Point-in-time view of a selector."""
    status: SelectorStatus
    query: str
    value: Optional[MappedDelegation]
    options: List[MappedDelegation]


class DelegationSelector:
    """
    Selected delegation plus filterable options for one account.

    The value is chosen in this order:
    1. redelegate drafts with a source validator: the delegation to that validator
    2. drafts listing validators: the delegation to the first listed validator
    3. otherwise the first option, or None when there are no options

    When the draft names a validator the account does not delegate to, the
    value is None rather than a fallback.
    """

    def __init__(self, store: PreloadDataStore, account: Account, transaction: TransactionDraft):
        self._store = store
        self.account = account
        self.transaction = transaction
        self.query = ""
        self.status = SelectorStatus.IDLE

    def set_query(self, query: str) -> None:
        self.query = query
        self.status = SelectorStatus.QUERYING if query.strip() else SelectorStatus.IDLE
        logger.debug("delegation_query_set", account=self.account.id, query=query)

    def update(self, account: Optional[Account] = None,
               transaction: Optional[TransactionDraft] = None) -> None:
        """Swap the account or draft the selector derives from."""
        if account is not None:
            self.account = account
        if transaction is not None:
            self.transaction = transaction

    @property
    def delegations(self) -> List[MappedDelegation]:
        mode = TransactionMode.CLAIM_REWARD if self.transaction.mode in CLAIM_MODES else None
        validators = self._store.get_current_data().validators
        return map_delegations(self.account, validators, mode)

    @property
    def options(self) -> List[MappedDelegation]:
        return filter_and_sort(self.delegations, self.query)

    @property
    def value(self) -> Optional[MappedDelegation]:
        delegations = self.delegations
        transaction = self.transaction

        if transaction.mode == TransactionMode.REDELEGATE and transaction.cosmos_source_validator:
            return find_delegation(delegations, transaction.cosmos_source_validator)

        if transaction.validators:
            return find_delegation(delegations, transaction.validators[0].address)

        options = filter_and_sort(delegations, self.query)
        return options[0] if options else None

    def state(self) -> SelectorState:
        return SelectorState(
            status=self.status,
            query=self.query,
            value=self.value,
            options=self.options
        )


def select_delegation(store: PreloadDataStore, account: Account,
                      transaction: TransactionDraft) -> DelegationSelector:
    return DelegationSelector(store, account, transaction)
