"""
Account tools: account creation and deletion, hbar transfers and
schedule signing.
"""

from __future__ import annotations

from pydantic import Field

from ledgerkit.execution.policy import OperationPolicy
from ledgerkit.tools.transaction import ToolParams, TransactionTool

SERIALIZED_KEY_DESCRIPTION = (
    "serialized public key string, private key string for derivation, "
    "or 'current_signer' for the agent's key"
)


class CreateAccountParams(ToolParams):
    key: str | None = Field(None, description=f"Account key ({SERIALIZED_KEY_DESCRIPTION}).")
    initial_balance: float | str = Field(
        0, description="Initial balance in HBAR (e.g. 10 or '1.5')."
    )
    memo: str | None = Field(None, description="Optional. Memo for the account.")
    auto_renew_period: int | None = Field(
        None, gt=0, description="Optional. Auto-renewal period in seconds."
    )
    max_automatic_token_associations: int | None = Field(
        None, description="Optional. Number of automatic token associations (-1 for unlimited)."
    )
    receiver_signature_required: bool | None = None
    alias: str | None = Field(None, description="Optional. EVM address alias for the account.")


class CreateAccountTool(TransactionTool):
    tool_name = "ledger_create_account"
    tool_description = (
        "Creates a new account. Provide a key (or 'current_signer') and an optional "
        "initial HBAR balance."
    )
    title = "Create Account"
    params_model = CreateAccountParams
    service = "accounts"
    builder_method = "create_account"

    def note_for_default(self, field, value):
        if field == "initial_balance":
            return f"The new account was given an initial balance of {value} HBAR by default."
        return None


class HbarTransferEntry(ToolParams):
    account_id: str = Field(..., description='Account ID (e.g. "0.0.xxxx").')
    amount: float | str = Field(
        ..., description="HBAR amount; positive credits, negative debits the account."
    )


class TransferHbarParams(ToolParams):
    transfers: list[HbarTransferEntry] = Field(
        ...,
        min_length=1,
        description=(
            "Transfers that must sum to zero. In returnBytes mode a single positive "
            "entry is paid from the user's account."
        ),
    )
    memo: str | None = Field(None, description="Optional. Memo for the transfer.")


class TransferHbarTool(TransactionTool):
    tool_name = "ledger_transfer_hbar"
    tool_description = "Transfers HBAR between accounts."
    title = "Transfer HBAR"
    params_model = TransferHbarParams
    service = "accounts"
    builder_method = "transfer_hbar"


class DeleteAccountParams(ToolParams):
    delete_account_id: str = Field(..., description="The account to delete.")
    transfer_account_id: str | None = Field(
        None,
        description="Optional. Account that receives the remaining balance.",
    )


class DeleteAccountTool(TransactionTool):
    tool_name = "ledger_delete_account"
    tool_description = (
        "Deletes an account and transfers its remaining balance. The transfer account "
        "defaults to your account."
    )
    title = "Delete Account"
    params_model = DeleteAccountParams
    service = "accounts"
    builder_method = "delete_account"
    destructive = True


class SignScheduledTransactionParams(ToolParams):
    schedule_id: str = Field(..., description='The schedule to sign (e.g. "0.0.xxxx").')
    memo: str | None = None


class SignScheduledTransactionTool(TransactionTool):
    tool_name = "ledger_sign_scheduled_transaction"
    tool_description = (
        "Adds the agent's signature to an existing scheduled transaction so it can execute."
    )
    title = "Sign Scheduled Transaction"
    params_model = SignScheduledTransactionParams
    service = "accounts"
    builder_method = "sign_scheduled_transaction"
    policy = OperationPolicy(never_schedule=True)
