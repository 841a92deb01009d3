"""
Operation kinds and key roles.

OperationKind names every operation a builder can stage. KeyRole is the
closed set of key roles that may be given as "current_signer" and are
substituted with the operator key before submission.
"""

from __future__ import annotations

from enum import Enum


class OperationKind(str, Enum):
    """Kinds of ledger operations."""

    # Accounts
    ACCOUNT_CREATE = "account_create"
    ACCOUNT_UPDATE = "account_update"
    ACCOUNT_DELETE = "account_delete"
    CRYPTO_TRANSFER = "crypto_transfer"
    ALLOWANCE_APPROVE = "allowance_approve"
    ALLOWANCE_DELETE = "allowance_delete"

    # Tokens
    TOKEN_CREATE = "token_create"
    TOKEN_UPDATE = "token_update"
    TOKEN_DELETE = "token_delete"
    TOKEN_MINT = "token_mint"
    TOKEN_BURN = "token_burn"
    TOKEN_ASSOCIATE = "token_associate"
    TOKEN_DISSOCIATE = "token_dissociate"
    TOKEN_FREEZE = "token_freeze"
    TOKEN_UNFREEZE = "token_unfreeze"
    TOKEN_GRANT_KYC = "token_grant_kyc"
    TOKEN_REVOKE_KYC = "token_revoke_kyc"
    TOKEN_PAUSE = "token_pause"
    TOKEN_UNPAUSE = "token_unpause"
    TOKEN_WIPE = "token_wipe"
    TOKEN_AIRDROP = "token_airdrop"

    # Topics
    TOPIC_CREATE = "topic_create"
    TOPIC_UPDATE = "topic_update"
    TOPIC_DELETE = "topic_delete"
    TOPIC_MESSAGE_SUBMIT = "topic_message_submit"

    # Files
    FILE_CREATE = "file_create"
    FILE_APPEND = "file_append"
    FILE_UPDATE = "file_update"
    FILE_DELETE = "file_delete"

    # Contracts
    CONTRACT_CREATE = "contract_create"
    CONTRACT_EXECUTE = "contract_execute"
    CONTRACT_UPDATE = "contract_update"
    CONTRACT_DELETE = "contract_delete"

    # Schedules
    SCHEDULE_CREATE = "schedule_create"
    SCHEDULE_SIGN = "schedule_sign"

    @property
    def label(self) -> str:
        """Human readable label, e.g. 'token create'."""
        return self.value.replace("_", " ")


class KeyRole(str, Enum):
    """Roles a key can play on an entity."""

    ADMIN = "admin"
    KYC = "kyc"
    FREEZE = "freeze"
    WIPE = "wipe"
    SUPPLY = "supply"
    FEE_SCHEDULE = "fee_schedule"
    PAUSE = "pause"


# Body field name for each role, shared by every builder that sets role keys
KEY_ROLE_FIELDS: dict[KeyRole, str] = {
    KeyRole.ADMIN: "admin_key",
    KeyRole.KYC: "kyc_key",
    KeyRole.FREEZE: "freeze_key",
    KeyRole.WIPE: "wipe_key",
    KeyRole.SUPPLY: "supply_key",
    KeyRole.FEE_SCHEDULE: "fee_schedule_key",
    KeyRole.PAUSE: "pause_key",
}


def role_fields(*roles: KeyRole) -> dict[str, KeyRole]:
    """Map body field names to roles for the given roles."""
    return {KEY_ROLE_FIELDS[role]: role for role in roles}
