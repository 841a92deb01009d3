"""
Account builder: account lifecycle, hbar transfers, allowances and
schedule signing.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ledgerkit.builders.base import DEFAULT_AUTORENEW_PERIOD_SECONDS, ServiceBuilder, staging
from ledgerkit.execution.policy import OperatingMode
from ledgerkit.ledger.amounts import format_hbar, hbar_to_tinybars, normalize_amount
from ledgerkit.operations.kinds import OperationKind
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)


class AccountBuilder(ServiceBuilder):
    """Stages account operations."""

    @staging
    def create_account(
        self,
        *,
        key: Any = None,
        initial_balance: int | float | str | Decimal | None = None,
        receiver_signature_required: bool | None = None,
        auto_renew_period: int | None = None,
        memo: str | None = None,
        max_automatic_token_associations: int | None = None,
        staked_account_id: str | None = None,
        staked_node_id: int | None = None,
        decline_staking_reward: bool | None = None,
        alias: str | None = None,
    ) -> StagedOperation:
        """
        Stage an account creation.

        Args:
            key: Account key (public key, private key string, or "current_signer")
            initial_balance: Initial balance in hbar
            auto_renew_period: Seconds; defaults to 90 days with a note
        """
        notes: list[str] = []

        if auto_renew_period is None:
            auto_renew_period = DEFAULT_AUTORENEW_PERIOD_SECONDS
            notes.append(
                f"Default auto-renew period of {DEFAULT_AUTORENEW_PERIOD_SECONDS} seconds applied."
            )

        if key is None and alias is None:
            logger.warning(
                "[accounts] Neither key nor alias was provided for account creation. "
                "The transaction might fail."
            )

        body = {
            "key": self._key(key),
            "initial_balance": (
                hbar_to_tinybars(initial_balance) if initial_balance is not None else None
            ),
            "receiver_signature_required": receiver_signature_required,
            "auto_renew_period": auto_renew_period,
            "account_memo": memo,
            "max_automatic_token_associations": max_automatic_token_associations,
            "staked_account_id": self._id(staked_account_id),
            "staked_node_id": staked_node_id,
            "decline_staking_reward": decline_staking_reward,
            "alias": alias,
        }
        return self._stage(OperationKind.ACCOUNT_CREATE, body, notes)

    @staging
    def update_account(
        self,
        *,
        account_id: str,
        key: Any = None,
        memo: str | None = None,
        auto_renew_period: int | None = None,
        receiver_signature_required: bool | None = None,
        max_automatic_token_associations: int | None = None,
        staked_account_id: str | None = None,
        staked_node_id: int | None = None,
        decline_staking_reward: bool | None = None,
    ) -> StagedOperation:
        """Stage an account update; omitted fields are left unchanged."""
        body = {
            "account_id": self._id(account_id),
            "key": self._key(key),
            "account_memo": memo,
            "auto_renew_period": auto_renew_period,
            "receiver_signature_required": receiver_signature_required,
            "max_automatic_token_associations": max_automatic_token_associations,
            "staked_account_id": self._id(staked_account_id),
            "staked_node_id": staked_node_id,
            "decline_staking_reward": decline_staking_reward,
        }
        return self._stage(OperationKind.ACCOUNT_UPDATE, body)

    @staging
    def delete_account(
        self,
        *,
        delete_account_id: str,
        transfer_account_id: str | None = None,
    ) -> StagedOperation:
        """
        Stage an account deletion.

        The remaining balance goes to transfer_account_id, which defaults to
        the effective sender (or the operator when the sender is the account
        being deleted).
        """
        notes: list[str] = []
        deleted = self._id(delete_account_id)

        if transfer_account_id is None:
            candidates = [str(self.kit.effective_sender()), self._operator_account()]
            transfer_to = next((c for c in candidates if c != deleted), None)
            if transfer_to is None:
                raise ValueError("transfer_account_id is required for deleting an account.")
            notes.append(
                f"The remaining balance of {deleted} will be transferred to {transfer_to} "
                f"since no transfer account was specified."
            )
        else:
            transfer_to = self._id(transfer_account_id)

        body = {"account_id": deleted, "transfer_account_id": transfer_to}
        return self._stage(OperationKind.ACCOUNT_DELETE, body, notes)

    @staging
    def transfer_hbar(
        self,
        *,
        transfers: Iterable[Mapping[str, Any]],
        memo: str | None = None,
        user_initiated: bool = True,
    ) -> StagedOperation:
        """
        Stage an hbar transfer.

        Args:
            transfers: Entries with account_id and amount (hbar, signed)
            memo: Transaction memo
            user_initiated: Whether the user asked for this transfer

        In return-bytes mode with a user configured, a single positive
        transfer is read as "pay this recipient from the user's account"
        and the debit from the user is added.

        Raises:
            ValueError: If there are no transfers or they do not sum to zero
        """
        entries = [dict(t) for t in transfers]
        if not entries:
            raise ValueError("transfer_hbar requires at least one transfer.")

        notes: list[str] = []
        config = self.kit.config
        user = config.user_account_id

        if (
            user_initiated
            and user
            and config.operating_mode == OperatingMode.RETURN_BYTES
            and len(entries) == 1
            and hbar_to_tinybars(entries[0]["amount"]) > 0
        ):
            recipient = self._id(entries[0]["account_id"])
            tinybars = hbar_to_tinybars(entries[0]["amount"])
            sender = self._id(user)
            logger.info(
                f"[accounts] Configuring user-initiated transfer of {format_hbar(tinybars)} "
                f"from {sender} to {recipient}"
            )
            notes.append(
                f"Configured HBAR transfer from your account ({sender}) to {recipient} "
                f"for {format_hbar(tinybars)}."
            )
            hbar_transfers = [
                {"account_id": recipient, "amount": tinybars},
                {"account_id": sender, "amount": -tinybars},
            ]
        else:
            hbar_transfers = [
                {
                    "account_id": self._id(entry["account_id"]),
                    "amount": hbar_to_tinybars(entry["amount"]),
                }
                for entry in entries
            ]
            if sum(t["amount"] for t in hbar_transfers) != 0:
                raise ValueError("The sum of all HBAR transfers must be zero.")

        return self._stage(
            OperationKind.CRYPTO_TRANSFER,
            {"hbar_transfers": hbar_transfers},
            notes,
            memo=memo,
        )

    # =========================================================================
    # Allowances
    # =========================================================================

    @staging
    def approve_hbar_allowance(
        self,
        *,
        spender_account_id: str,
        amount: int | float | str | Decimal,
        owner_account_id: str | None = None,
    ) -> StagedOperation:
        """Approve an hbar allowance (amount in hbar). Owner defaults to the operator."""
        allowance = {
            "owner_account_id": self._id(owner_account_id) or self._operator_account(),
            "spender_account_id": self._id(spender_account_id),
            "amount": hbar_to_tinybars(amount),
        }
        return self._stage(OperationKind.ALLOWANCE_APPROVE, {"hbar_allowances": [allowance]})

    @staging
    def approve_token_allowance(
        self,
        *,
        token_id: str,
        spender_account_id: str,
        amount: int | str,
        owner_account_id: str | None = None,
    ) -> StagedOperation:
        """Approve a fungible token allowance (amount in base units)."""
        allowance = {
            "token_id": self._id(token_id),
            "owner_account_id": self._id(owner_account_id) or self._operator_account(),
            "spender_account_id": self._id(spender_account_id),
            "amount": normalize_amount(amount),
        }
        return self._stage(OperationKind.ALLOWANCE_APPROVE, {"token_allowances": [allowance]})

    @staging
    def revoke_hbar_allowance(
        self,
        *,
        spender_account_id: str,
        owner_account_id: str | None = None,
    ) -> StagedOperation:
        """Revoke an hbar allowance by approving zero."""
        return self.approve_hbar_allowance(
            spender_account_id=spender_account_id,
            amount=0,
            owner_account_id=owner_account_id,
        )

    # =========================================================================
    # Schedules
    # =========================================================================

    @staging
    def sign_scheduled_transaction(
        self,
        *,
        schedule_id: str,
        memo: str | None = None,
    ) -> StagedOperation:
        """Stage a signature for an existing schedule."""
        return self._stage(
            OperationKind.SCHEDULE_SIGN,
            {"schedule_id": self._id(schedule_id)},
            memo=memo,
        )
