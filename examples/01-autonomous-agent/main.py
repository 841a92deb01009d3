"""
Autonomous Agent Example

This example demonstrates the autonomous operating mode:
1. Implement a ledger client (here: in memory)
2. Build a kit with an operator signer
3. Stage operations with builders and through agent tools

Every operation is signed and submitted by the operator.

Run: python -m examples.01-autonomous-agent.main
"""

import asyncio
import json

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from ledgerkit import (
    BaseLedgerClient,
    ExecutionConfig,
    LedgerAgentKit,
    OperatingMode,
    PrivateKeySigner,
    Receipt,
    build_ledger_toolkit,
)
from ledgerkit.operations import OperationKind

OPERATOR_ACCOUNT = "0.0.1001"

# =============================================================================
# In-memory Ledger
# =============================================================================


class InMemoryLedger(BaseLedgerClient):
    """Accepts every operation and hands out sequential entity ids."""

    def __init__(self):
        super().__init__(OPERATOR_ACCOUNT, nodes=["0.0.3"])
        self._next_entity = 2000

    async def _send(self, operation):
        self._next_entity += 1
        entity = f"0.0.{self._next_entity}"

        receipt = Receipt(transaction_id=str(operation.transaction_id))
        if operation.kind == OperationKind.TOPIC_CREATE:
            receipt = Receipt(transaction_id=receipt.transaction_id, topic_id=entity)
        elif operation.kind == OperationKind.TOKEN_CREATE:
            receipt = Receipt(transaction_id=receipt.transaction_id, token_id=entity)
        return receipt


def generate_operator_key() -> str:
    private = Ed25519PrivateKey.generate()
    return private.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    ).hex()


# =============================================================================
# Main
# =============================================================================


async def main():
    ledger = InMemoryLedger()
    signer = PrivateKeySigner(OPERATOR_ACCOUNT, generate_operator_key(), ledger)
    kit = LedgerAgentKit(
        ledger=ledger,
        signer=signer,
        config=ExecutionConfig(operating_mode=OperatingMode.AUTONOMOUS),
    )
    print(f"Kit: {kit}")
    print()

    # Builder usage
    topics = kit.topics()
    topics.create_topic(memo="daily reports", admin_key="current_signer")
    outcome = await topics.resolve(meta={"transactionMemo": "create report topic"})

    print("Topic creation:")
    print(json.dumps(outcome.to_dict(), indent=2))
    print()

    # Tool usage
    registry = build_ledger_toolkit(kit)
    print(f"Tools: {registry.list_names()}")
    print()

    tool = registry.get_required("ledger_create_fungible_token")
    result = await tool.execute({"tokenName": "Gold Coin", "initialSupply": 1000})

    print(f"Tool result: {result.text}")
    for note in result.structured_content["notes"]:
        print(f"  - {note}")


if __name__ == "__main__":
    asyncio.run(main())
