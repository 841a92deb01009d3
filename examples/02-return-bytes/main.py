"""
Return Bytes Example

This example demonstrates the returnBytes operating mode, where the
agent acts for a user who signs with their own wallet:
1. A plain call returns unsigned transaction bytes for the user
2. A scheduled call creates a schedule the user co-signs later
3. Topic creation is never scheduled, even when asked

Run: python -m examples.02-return-bytes.main
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
from ledgerkit.ledger.keys import KeyAlgorithm, PublicKey
from ledgerkit.operations import OperationKind, StagedOperation

OPERATOR_ACCOUNT = "0.0.1001"
USER_ACCOUNT = "0.0.5005"

# =============================================================================
# Collaborators
# =============================================================================


def generate_key_pair() -> tuple[str, PublicKey]:
    private = Ed25519PrivateKey.generate()
    raw_private = private.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )
    raw_public = private.public_key().public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw,
    )
    return raw_private.hex(), PublicKey(KeyAlgorithm.ED25519, raw_public)


class InMemoryLedger(BaseLedgerClient):
    """Accepts every operation; schedule creations get a schedule id."""

    def __init__(self):
        super().__init__(OPERATOR_ACCOUNT, nodes=["0.0.3"])
        self.submitted = 0

    async def _send(self, operation):
        self.submitted += 1
        schedule_id = "0.0.9001" if operation.kind == OperationKind.SCHEDULE_CREATE else None
        return Receipt(transaction_id=str(operation.transaction_id), schedule_id=schedule_id)


class StaticDirectory:
    """Directory that knows one account's public key."""

    def __init__(self, keys: dict[str, PublicKey]):
        self._keys = keys

    async def lookup_public_key(self, account_id: str) -> PublicKey:
        return self._keys[account_id]


# =============================================================================
# Main
# =============================================================================


async def main():
    operator_private, _ = generate_key_pair()
    _, user_public = generate_key_pair()

    ledger = InMemoryLedger()
    kit = LedgerAgentKit(
        ledger=ledger,
        signer=PrivateKeySigner(OPERATOR_ACCOUNT, operator_private, ledger),
        directory=StaticDirectory({USER_ACCOUNT: user_public}),
        config=ExecutionConfig(
            operating_mode=OperatingMode.RETURN_BYTES,
            user_account_id=USER_ACCOUNT,
        ),
    )
    registry = build_ledger_toolkit(kit)
    transfer = registry.get_required("ledger_transfer_hbar")

    # 1. Unsigned bytes for the user's wallet
    result = await transfer.execute({"transfers": [{"accountId": "0.0.800", "amount": 2.5}]})
    payload = result.structured_content
    operation = StagedOperation.from_base64(payload["transactionBytes"])

    print(f"Bytes: {result.text}")
    print(f"  transfers: {operation.body['hbar_transfers']}")
    print(f"  notes: {payload['notes']}")
    print()

    # 2. Scheduled transfer the user co-signs
    result = await transfer.execute(
        {
            "transfers": [{"accountId": "0.0.800", "amount": 1}],
            "metaOptions": {"schedule": True, "transactionMemo": "rent"},
        }
    )
    print(f"Schedule: {result.text}")
    print(json.dumps(result.structured_content, indent=2))
    print()

    # 3. Topic creation ignores the schedule request
    result = await registry.get_required("ledger_create_topic").execute(
        {"memo": "user topic", "metaOptions": {"schedule": True}}
    )
    print(f"Topic: {result.text}")
    print(f"Submitted to the network: {ledger.submitted} operation(s)")


if __name__ == "__main__":
    asyncio.run(main())
