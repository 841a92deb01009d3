"""
Collaborator contracts.

The execution core talks to three external capabilities:

- LedgerClient: freezes, serializes and submits operations
- Signer: the operator identity (account id + public key), able to sign and submit
- DirectoryService: read-only lookups, used to resolve a user's public key

Implementations must be safe for concurrent use by independent builders;
the core adds no locking around them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ledgerkit.ledger.ids import EntityId
    from ledgerkit.ledger.keys import PublicKey
    from ledgerkit.operations.staged import StagedOperation

SUCCESS_STATUS = "SUCCESS"


@dataclass(frozen=True, slots=True)
class Receipt:
    """
    Receipt returned by the network for a submitted operation.

    Only the fields relevant to the operation are populated.
    """

    status: str = SUCCESS_STATUS
    transaction_id: str | None = None
    account_id: str | None = None
    token_id: str | None = None
    topic_id: str | None = None
    file_id: str | None = None
    contract_id: str | None = None
    schedule_id: str | None = None
    scheduled_transaction_id: str | None = None
    topic_sequence_number: int | None = None
    total_supply: int | None = None
    serial_numbers: tuple[int, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status.upper() == SUCCESS_STATUS

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization, omitting empty fields."""
        result: dict[str, Any] = {"status": self.status}

        optional = {
            "transactionId": self.transaction_id,
            "accountId": self.account_id,
            "tokenId": self.token_id,
            "topicId": self.topic_id,
            "fileId": self.file_id,
            "contractId": self.contract_id,
            "scheduleId": self.schedule_id,
            "scheduledTransactionId": self.scheduled_transaction_id,
            "topicSequenceNumber": self.topic_sequence_number,
            "totalSupply": self.total_supply,
        }
        result.update({k: v for k, v in optional.items() if v is not None})

        if self.serial_numbers:
            result["serialNumbers"] = list(self.serial_numbers)
        if self.extra:
            result.update(self.extra)

        return result


@runtime_checkable
class LedgerClient(Protocol):
    """Network client that owns freezing, serialization and submission."""

    @property
    def operator_account_id(self) -> EntityId:
        """Account that pays for operations submitted through this client."""
        ...

    def freeze(self, operation: StagedOperation) -> StagedOperation:
        """Assign a transaction id and target nodes if missing, then freeze."""
        ...

    def serialize(self, operation: StagedOperation) -> bytes:
        """Encode an operation without submitting it."""
        ...

    async def submit(self, operation: StagedOperation) -> Receipt:
        """Sign with the operator, submit, and wait for the receipt."""
        ...


@runtime_checkable
class Signer(Protocol):
    """The operator identity."""

    def account_id(self) -> EntityId:
        """The signer's account."""
        ...

    def public_key(self) -> PublicKey:
        """The signer's public key."""
        ...

    async def sign_and_submit(self, operation: StagedOperation) -> Receipt:
        """Sign the operation as this identity and submit it."""
        ...


@runtime_checkable
class DirectoryService(Protocol):
    """Read-only lookups against the ledger's directory (mirror) service."""

    async def lookup_public_key(self, account_id: str) -> PublicKey:
        """
        Return the single public key controlling the account.

        Raises on failure; callers must degrade gracefully.
        """
        ...
