"""
Deterministic mock data for tests and MOCK mode.

The validator set mirrors the shape returned by a Cosmos validators
endpoint; addresses are derived from validator names so they are stable
across runs.
"""
import hashlib
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from .types import (
    Account,
    CosmosResources,
    DelegationRecord,
    Network,
    RedelegationRecord,
    UnbondingRecord,
    Unit,
)

COSMOS = Network(
    id="cosmos",
    name="Cosmos",
    units=[
        Unit(name="Atom", code="ATOM", magnitude=6),
        Unit(name="microAtom", code="uatom", magnitude=0),
    ]
)

_VALIDATORS = [
    # name, voting power, commission, estimated yearly rewards rate
    ("Cosmostation", 0.082, 0.12, 0.0852),
    ("Binance Staking", 0.071, 0.10, 0.0871),
    ("Figment Networks", 0.054, 0.09, 0.0881),
    ("Everstake", 0.041, 0.08, 0.0891),
    ("Sikka", 0.037, 0.05, 0.0920),
    ("Chorus One", 0.033, 0.075, 0.0896),
    ("Certus One", 0.030, 0.125, 0.0847),
    ("B-Harvest", 0.027, 0.10, 0.0871),
    ("Staking Facilities", 0.022, 0.10, 0.0871),
    ("Nodeasy.com", 0.015, 0.03, 0.0939),
    ("FRESHATOMS", 0.011, 0.05, 0.0920),
    ("Zero Knowledge Validator (ZKV)", 0.008, 0.10, 0.0871),
]

# validator name, delegated amount (uatom), pending rewards (uatom)
_DELEGATIONS = [
    ("Figment Networks", 3_000_000, 5),
    ("FRESHATOMS", 12_500_000, 0),
    ("Nodeasy.com", 800_000, 3),
]


def validator_address(name: str) -> str:
    return "cosmosvaloper1" + hashlib.sha256(name.encode("utf-8")).hexdigest()[:38]


def mock_validators() -> List[Dict[str, Any]]:
    """Raw validator list, already ordered by voting power."""
    return [
        {
            "validator_address": validator_address(name),
            "name": name,
            "voting_power": power,
            "commission": commission,
            "estimated_yearly_rewards_rate": rate,
        }
        for name, power, commission, rate in _VALIDATORS
    ]


def mock_preload_data() -> Dict[str, Any]:
    return {"validators": mock_validators()}


async def mock_fetch_validators(network: Network) -> Dict[str, Any]:
    """Stands in for the network validator fetcher."""
    return mock_preload_data()


def gen_account(seed: str, network: Network = COSMOS) -> Account:
    """Mock account with three delegations, one unbonding and one redelegation."""
    rng = random.Random(seed)
    now = datetime.now(timezone.utc)
    delegations = [
        DelegationRecord(
            validator_address=validator_address(name),
            amount=amount,
            pending_rewards=rewards,
        )
        for name, amount, rewards in _DELEGATIONS
    ]
    delegated = sum(d.amount for d in delegations)
    spendable = rng.randrange(1_000_000, 50_000_000)
    unbonding_amount = rng.randrange(100_000, 1_000_000)

    return Account(
        id=f"mock:{network.id}:{seed}",
        currency=network,
        balance=spendable + delegated + unbonding_amount,
        spendable_balance=spendable,
        cosmos_resources=CosmosResources(
            delegations=delegations,
            unbondings=[
                UnbondingRecord(
                    validator_address=validator_address("Sikka"),
                    amount=unbonding_amount,
                    completion_date=now + timedelta(days=rng.randrange(1, 21)),
                )
            ],
            redelegations=[
                RedelegationRecord(
                    validator_src_address=validator_address("Certus One"),
                    validator_dst_address=validator_address("Figment Networks"),
                    amount=1_000_000,
                    completion_date=now + timedelta(days=rng.randrange(1, 21)),
                )
            ],
            delegated_balance=delegated,
            pending_rewards_balance=sum(d.pending_rewards for d in delegations),
            unbonding_balance=unbonding_amount,
        )
    )
