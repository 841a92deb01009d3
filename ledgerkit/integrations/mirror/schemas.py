"""
Pydantic schemas for mirror node responses.

Only the fields the kit reads are declared; everything else in a response
is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MirrorModel(BaseModel):
    """Base for mirror node response models."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# =============================================================================
# Keys
# =============================================================================


class MirrorKey(MirrorModel):
    """A key as the mirror node reports it: {"_type": "ED25519", "key": "<hex>"}."""

    type: str = Field(..., alias="_type")
    key: str


# =============================================================================
# Accounts
# =============================================================================


class TokenBalance(MirrorModel):
    token_id: str
    balance: int


class AccountBalance(MirrorModel):
    balance: int = 0
    timestamp: str | None = None
    tokens: list[TokenBalance] = Field(default_factory=list)


class AccountInfo(MirrorModel):
    account: str
    key: MirrorKey | None = None
    balance: AccountBalance | None = None
    memo: str | None = None
    evm_address: str | None = None
    deleted: bool = False
    auto_renew_period: int | None = None
    max_automatic_token_associations: int | None = None
    receiver_sig_required: bool | None = None


# =============================================================================
# Tokens, topics, schedules
# =============================================================================


class TokenInfo(MirrorModel):
    token_id: str
    name: str
    symbol: str
    type: str | None = None
    decimals: int | str = 0
    total_supply: int | str | None = None
    max_supply: int | str | None = None
    supply_type: str | None = None
    treasury_account_id: str | None = None
    memo: str | None = None
    admin_key: MirrorKey | None = None
    supply_key: MirrorKey | None = None
    deleted: bool = False
    pause_status: str | None = None


class TopicInfo(MirrorModel):
    topic_id: str
    memo: str | None = None
    admin_key: MirrorKey | None = None
    submit_key: MirrorKey | None = None
    auto_renew_account: str | None = None
    auto_renew_period: int | None = None
    deleted: bool = False


class ScheduleSignature(MirrorModel):
    public_key_prefix: str
    type: str | None = None
    consensus_timestamp: str | None = None


class ScheduleInfo(MirrorModel):
    schedule_id: str
    creator_account_id: str | None = None
    payer_account_id: str | None = None
    memo: str | None = None
    admin_key: MirrorKey | None = None
    executed_timestamp: str | None = None
    expiration_time: str | None = None
    deleted: bool = False
    signatures: list[ScheduleSignature] = Field(default_factory=list)
    transaction_body: str | None = None

    @property
    def executed(self) -> bool:
        return self.executed_timestamp is not None
