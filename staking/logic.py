"""Staking eligibility rules for delegate, undelegate and redelegate flows."""
from datetime import datetime, timezone
from typing import Optional

from config.settings import StakeviewSettings, get_settings

from .mapper import get_cosmos_resources
from .types import Account, TransactionDraft


def get_max_delegation_available(account: Account, fees: int = 0) -> int:
    """Spendable balance left for delegating once fees are paid."""
    return max(account.spendable_balance - fees, 0)


def can_delegate(account: Account, fees: int = 0) -> bool:
    return get_max_delegation_available(account, fees) > 0


def can_undelegate(account: Account, settings: Optional[StakeviewSettings] = None) -> bool:
    settings = settings or get_settings()
    return len(get_cosmos_resources(account).unbondings) < settings.MAX_UNBONDINGS


def can_redelegate(account: Account, validator_address: str,
                   now: Optional[datetime] = None,
                   settings: Optional[StakeviewSettings] = None) -> bool:
    """
    A delegation can be moved while the account is under the redelegation
    limit and no redelegation into that validator is still maturing.
    """
    settings = settings or get_settings()
    now = now or datetime.now(timezone.utc)
    redelegations = get_cosmos_resources(account).redelegations

    if len(redelegations) >= settings.MAX_REDELEGATIONS:
        return False
    return not any(
        r.validator_dst_address == validator_address and r.completion_date > now
        for r in redelegations
    )


def can_add_validator(transaction: TransactionDraft,
                      settings: Optional[StakeviewSettings] = None) -> bool:
    settings = settings or get_settings()
    return len(transaction.validators) < settings.MAX_DELEGATIONS
