"""
Contract tools.
"""

from __future__ import annotations

from pydantic import Field

from ledgerkit.tools.transaction import ToolParams, TransactionTool


class ExecuteContractParams(ToolParams):
    contract_id: str = Field(..., description='The contract to call (e.g. "0.0.xxxx").')
    gas: int = Field(..., gt=0, description="Gas limit for the call.")
    function_name: str = Field(..., description="Name of the contract function.")
    function_parameters: str | None = Field(
        None, description="Optional. ABI-encoded function arguments as hex."
    )
    payable_amount: float | str | None = Field(
        None, description="Optional. HBAR sent with the call."
    )
    memo: str | None = None


class ExecuteContractTool(TransactionTool):
    tool_name = "ledger_execute_contract"
    tool_description = "Calls a function on a deployed smart contract."
    title = "Execute Contract"
    params_model = ExecuteContractParams
    service = "contracts"
    builder_method = "execute_contract"
