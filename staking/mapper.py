"""
Map raw account staking records into display records.

Every mapping call builds fresh records from the account and the validator
list it is given. Records whose validator is missing from the snapshot are
skipped: the snapshot and the account are synced separately and may briefly
disagree.
"""
from typing import Dict, Iterable, List, Optional, Union

import structlog

from .exceptions import MissingResourceError
from .formatting import format_currency_unit
from .types import (
    Account,
    CosmosResources,
    DelegationRecord,
    MappedDelegation,
    MappedRedelegation,
    MappedUnbonding,
    TransactionMode,
    ValidatorInfo,
    get_account_unit,
)

logger = structlog.get_logger()

CLAIM_REWARD = TransactionMode.CLAIM_REWARD.value


def index_validators(validators: Iterable[ValidatorInfo]) -> Dict[str, ValidatorInfo]:
    return {v.validator_address: v for v in validators}


def get_cosmos_resources(account: Account) -> CosmosResources:
    if account.cosmos_resources is None:
        raise MissingResourceError(account.id, "cosmos_resources")
    return account.cosmos_resources


def get_delegations(account: Account) -> List[DelegationRecord]:
    """
    Raises:
        MissingResourceError: If the account carries no delegation records
    """
    delegations = get_cosmos_resources(account).delegations
    if delegations is None:
        raise MissingResourceError(account.id, "cosmos_resources.delegations")
    return delegations


def map_delegations(account: Account,
                    validators: Iterable[ValidatorInfo],
                    mode: Optional[Union[str, TransactionMode]] = None) -> List[MappedDelegation]:
    """
    Join an account's delegations with the validator set.

    Args:
        account: Account holding cosmos resources
        validators: Validators of the current preload snapshot
        mode: "claimReward" keeps only delegations with pending rewards

    Returns:
        Mapped delegations in the account's delegation order
    """
    delegations = get_delegations(account)
    by_address = index_validators(validators)
    unit = get_account_unit(account)
    mode = mode.value if isinstance(mode, TransactionMode) else mode

    mapped = []
    for delegation in delegations:
        validator = by_address.get(delegation.validator_address)
        if validator is None:
            logger.debug("delegation_validator_unknown",
                         account=account.id,
                         validator=delegation.validator_address)
            continue
        if mode == CLAIM_REWARD and delegation.pending_rewards <= 0:
            continue
        mapped.append(MappedDelegation(
            validator=validator,
            validator_address=delegation.validator_address,
            amount=delegation.amount,
            pending_rewards=delegation.pending_rewards,
            formatted_amount=format_currency_unit(unit, delegation.amount),
            formatted_pending_rewards=format_currency_unit(unit, delegation.pending_rewards),
            rank=validator.rank,
        ))
    return mapped


def map_unbondings(account: Account, validators: Iterable[ValidatorInfo]) -> List[MappedUnbonding]:
    """Unbondings joined with their validator, soonest completion first."""
    resources = get_cosmos_resources(account)
    by_address = index_validators(validators)
    unit = get_account_unit(account)

    mapped = [
        MappedUnbonding(
            validator=by_address[u.validator_address],
            validator_address=u.validator_address,
            amount=u.amount,
            formatted_amount=format_currency_unit(unit, u.amount),
            completion_date=u.completion_date,
        )
        for u in resources.unbondings
        if u.validator_address in by_address
    ]
    return sorted(mapped, key=lambda u: u.completion_date)


def map_redelegations(account: Account, validators: Iterable[ValidatorInfo]) -> List[MappedRedelegation]:
    """Redelegations joined with source and destination validators."""
    resources = get_cosmos_resources(account)
    by_address = index_validators(validators)
    unit = get_account_unit(account)

    mapped = []
    for r in resources.redelegations:
        src = by_address.get(r.validator_src_address)
        dst = by_address.get(r.validator_dst_address)
        if src is None or dst is None:
            continue
        mapped.append(MappedRedelegation(
            validator_src=src,
            validator_dst=dst,
            validator_src_address=r.validator_src_address,
            validator_dst_address=r.validator_dst_address,
            amount=r.amount,
            formatted_amount=format_currency_unit(unit, r.amount),
            completion_date=r.completion_date,
        ))
    return sorted(mapped, key=lambda r: r.completion_date)
