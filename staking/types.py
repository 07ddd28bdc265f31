"""
Data model for delegated staking views.

Raw records (networks, accounts, delegations, transaction drafts) are owned
by the account and bridge collaborators and are read-only here. Snapshot
models are frozen because a published snapshot is shared by every reader.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Unit(BaseModel):
    """Currency unit used for display."""
    model_config = ConfigDict(frozen=True)

    name: str
    code: str
    magnitude: int = Field(ge=0)


class Network(BaseModel):
    """A blockchain network. Its id keys the preload cache."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    units: List[Unit]


class ValidatorInfo(BaseModel):
    """A validator as listed in the preload snapshot."""
    model_config = ConfigDict(frozen=True)

    validator_address: str
    name: str
    voting_power: float = 0.0
    commission: float = 0.0
    estimated_yearly_rewards_rate: float = 0.0
    rank: int = 0


class CosmosPreloadData(BaseModel):
    """Preload snapshot for a Cosmos-style network."""
    model_config = ConfigDict(frozen=True)

    validators: List[ValidatorInfo] = Field(default_factory=list)


class DelegationRecord(BaseModel):
    validator_address: str
    amount: int = Field(ge=0)
    pending_rewards: int = Field(default=0, ge=0)


class UnbondingRecord(BaseModel):
    validator_address: str
    amount: int = Field(ge=0)
    completion_date: datetime


class RedelegationRecord(BaseModel):
    validator_src_address: str
    validator_dst_address: str
    amount: int = Field(ge=0)
    completion_date: datetime


class CosmosResources(BaseModel):
    delegations: Optional[List[DelegationRecord]] = None
    unbondings: List[UnbondingRecord] = Field(default_factory=list)
    redelegations: List[RedelegationRecord] = Field(default_factory=list)
    delegated_balance: int = 0
    pending_rewards_balance: int = 0
    unbonding_balance: int = 0


class Account(BaseModel):
    id: str
    currency: Network
    unit: Optional[Unit] = None
    balance: int = 0
    spendable_balance: int = 0
    cosmos_resources: Optional[CosmosResources] = None


def get_account_unit(account: Account) -> Unit:
    """The unit an account is displayed in."""
    return account.unit or account.currency.units[0]


class TransactionMode(str, Enum):
    SEND = "send"
    DELEGATE = "delegate"
    UNDELEGATE = "undelegate"
    REDELEGATE = "redelegate"
    CLAIM_REWARD = "claimReward"
    CLAIM_REWARD_COMPOUND = "claimRewardCompound"


class DraftValidator(BaseModel):
    address: str
    amount: int = Field(default=0, ge=0)


class TransactionDraft(BaseModel):
    """Transaction being edited, as handed over by the bridge."""
    mode: TransactionMode = TransactionMode.SEND
    recipient: str = ""
    amount: int = 0
    validators: List[DraftValidator] = Field(default_factory=list)
    cosmos_source_validator: Optional[str] = None


def create_transaction(account: Account) -> TransactionDraft:
    """Blank draft for an account, as the bridge would create it."""
    return TransactionDraft()


class MappedDelegation(BaseModel):
    """A delegation joined with its validator and formatted for display."""
    model_config = ConfigDict(frozen=True)

    validator: ValidatorInfo
    validator_address: str
    amount: int
    pending_rewards: int
    formatted_amount: str
    formatted_pending_rewards: str
    rank: int


class RankedValidator(BaseModel):
    """Row of the validator discovery list."""
    model_config = ConfigDict(frozen=True)

    rank: int
    validator: ValidatorInfo
    amount: int = 0


class MappedUnbonding(BaseModel):
    model_config = ConfigDict(frozen=True)

    validator: ValidatorInfo
    validator_address: str
    amount: int
    formatted_amount: str
    completion_date: datetime


class MappedRedelegation(BaseModel):
    model_config = ConfigDict(frozen=True)

    validator_src: ValidatorInfo
    validator_dst: ValidatorInfo
    validator_src_address: str
    validator_dst_address: str
    amount: int
    formatted_amount: str
    completion_date: datetime
