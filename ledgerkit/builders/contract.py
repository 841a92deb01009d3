"""
Contract builder: smart contract deployment and calls.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from ledgerkit.builders.base import DEFAULT_AUTORENEW_PERIOD_SECONDS, ServiceBuilder, staging
from ledgerkit.ledger.amounts import hbar_to_tinybars, normalize_amount
from ledgerkit.operations.kinds import KeyRole, OperationKind, role_fields
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)

CONTRACT_KEY_FIELDS = role_fields(KeyRole.ADMIN)


def _hex(value: str | bytes | None) -> str | None:
    """Normalize bytecode / call data to lower-case hex without a 0x prefix."""
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.hex()
    text = value.strip()
    if text.lower().startswith("0x"):
        text = text[2:]
    bytes.fromhex(text)
    return text.lower()


class ContractBuilder(ServiceBuilder):
    """Stages smart contract operations."""

    @staging
    def create_contract(
        self,
        *,
        gas: int,
        bytecode: str | bytes | None = None,
        bytecode_file_id: str | None = None,
        admin_key: Any = None,
        initial_balance: int | float | str | Decimal | None = None,
        constructor_parameters: str | bytes | None = None,
        memo: str | None = None,
        auto_renew_period: int | None = None,
        staked_account_id: str | None = None,
        staked_node_id: int | None = None,
        decline_staking_reward: bool | None = None,
        max_automatic_token_associations: int | None = None,
    ) -> StagedOperation:
        """
        Stage a contract deployment.

        Raises:
            ValueError: If neither bytecode nor bytecode_file_id is given
        """
        if bytecode_file_id is None and bytecode is None:
            raise ValueError("Either bytecode_file_id or bytecode must be provided to create a contract.")

        notes: list[str] = []
        if auto_renew_period is None:
            auto_renew_period = DEFAULT_AUTORENEW_PERIOD_SECONDS
            notes.append(
                f"Default auto-renew period of {DEFAULT_AUTORENEW_PERIOD_SECONDS} seconds "
                f"applied for contract."
            )

        body = {
            "bytecode_file_id": self._id(bytecode_file_id),
            "bytecode": _hex(bytecode) if bytecode_file_id is None else None,
            "admin_key": self._optional_role_key("admin_key", admin_key, notes),
            "gas": normalize_amount(gas),
            "initial_balance": (
                hbar_to_tinybars(initial_balance) if initial_balance is not None else None
            ),
            "constructor_parameters": _hex(constructor_parameters),
            "contract_memo": memo,
            "auto_renew_period": auto_renew_period,
            "staked_account_id": self._id(staked_account_id),
            "staked_node_id": staked_node_id,
            "decline_staking_reward": decline_staking_reward,
            "max_automatic_token_associations": max_automatic_token_associations,
        }
        return self._stage(OperationKind.CONTRACT_CREATE, body, notes, CONTRACT_KEY_FIELDS)

    @staging
    def execute_contract(
        self,
        *,
        contract_id: str,
        gas: int,
        function_name: str,
        function_parameters: str | bytes | None = None,
        payable_amount: int | float | str | Decimal | None = None,
        memo: str | None = None,
    ) -> StagedOperation:
        """
        Stage a contract call.

        Args:
            function_parameters: ABI-encoded arguments (hex or bytes)
            payable_amount: Hbar sent with the call
        """
        body = {
            "contract_id": self._id(contract_id),
            "gas": normalize_amount(gas),
            "function_name": function_name,
            "function_parameters": _hex(function_parameters),
            "payable_amount": (
                hbar_to_tinybars(payable_amount) if payable_amount is not None else None
            ),
        }
        return self._stage(OperationKind.CONTRACT_EXECUTE, body, memo=memo)

    @staging
    def update_contract(
        self,
        *,
        contract_id: str,
        admin_key: Any = None,
        auto_renew_period: int | None = None,
        memo: str | None = None,
        staked_account_id: str | None = None,
        staked_node_id: int | None = None,
        decline_staking_reward: bool | None = None,
        max_automatic_token_associations: int | None = None,
    ) -> StagedOperation:
        notes: list[str] = []
        body = {
            "contract_id": self._id(contract_id),
            "admin_key": self._optional_role_key("admin_key", admin_key, notes),
            "auto_renew_period": auto_renew_period,
            "contract_memo": memo,
            "staked_account_id": self._id(staked_account_id),
            "staked_node_id": staked_node_id,
            "decline_staking_reward": decline_staking_reward,
            "max_automatic_token_associations": max_automatic_token_associations,
        }
        return self._stage(OperationKind.CONTRACT_UPDATE, body, notes, CONTRACT_KEY_FIELDS)

    @staging
    def delete_contract(
        self,
        *,
        contract_id: str,
        transfer_account_id: str | None = None,
        transfer_contract_id: str | None = None,
    ) -> StagedOperation:
        """Stage a contract deletion; the balance goes to an account or a contract."""
        if transfer_account_id and transfer_contract_id:
            raise ValueError("Only one of transfer_account_id or transfer_contract_id may be set.")
        body = {
            "contract_id": self._id(contract_id),
            "transfer_account_id": self._id(transfer_account_id),
            "transfer_contract_id": self._id(transfer_contract_id),
        }
        return self._stage(OperationKind.CONTRACT_DELETE, body)
