"""
Query filtering and ordering of delegation and validator rows.

Two orderings are in use: delegation options are ordered by delegated
amount, largest first; the validator discovery list is ordered by rank.
"""
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from config.settings import get_settings

from .types import DraftValidator, MappedDelegation, RankedValidator, ValidatorInfo

R = TypeVar('R')


def search_filter(query: str) -> Callable[[object], bool]:
    """
    Predicate matching rows whose validator name or address contains query,
    ignoring case. An empty query matches everything.
    """
    needle = query.strip().lower()

    def matches(row: object) -> bool:
        if not needle:
            return True
        validator: Optional[ValidatorInfo] = getattr(row, "validator", None)
        if validator is None:
            return False
        return (needle in validator.name.lower()
                or needle in validator.validator_address.lower())

    return matches


def filter_records(records: Iterable[R], query: str) -> List[R]:
    matches = search_filter(query)
    return [r for r in records if matches(r)]


def filter_and_sort(records: Iterable[MappedDelegation], query: str) -> List[MappedDelegation]:
    """Matching delegations, largest amount first. Ties keep input order."""
    return sorted(filter_records(records, query), key=lambda d: d.amount, reverse=True)


def find_delegation(records: Iterable[MappedDelegation], address: str) -> Optional[MappedDelegation]:
    """Delegation to the validator with exactly this address, if any."""
    for record in records:
        if record.validator_address == address:
            return record
    return None


def sorted_validators(query: str,
                      validators: Sequence[ValidatorInfo],
                      existing_delegations: Iterable[DraftValidator],
                      pin_delegated: Optional[bool] = None) -> List[RankedValidator]:
    """
    Validator discovery list.

    Every validator is listed once, by ascending rank, with the amount the
    account already delegates to it. Without a query, validators already
    delegated to come first when pin_delegated is set (default from the
    PIN_DELEGATED_VALIDATORS setting). With a query, the rank ordered list
    is filtered.
    """
    if pin_delegated is None:
        pin_delegated = get_settings().PIN_DELEGATED_VALIDATORS

    amounts: Dict[str, int] = {}
    for delegation in existing_delegations:
        amounts[delegation.address] = amounts.get(delegation.address, 0) + delegation.amount

    ranked = sorted(
        (RankedValidator(rank=v.rank, validator=v, amount=amounts.get(v.validator_address, 0))
         for v in validators),
        key=lambda row: row.rank
    )

    if query.strip():
        return filter_records(ranked, query)

    if not pin_delegated:
        return ranked
    delegated = [row for row in ranked if row.validator.validator_address in amounts]
    others = [row for row in ranked if row.validator.validator_address not in amounts]
    return delegated + others
