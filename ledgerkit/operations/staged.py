"""
Staged operations.

A StagedOperation is an in-memory, not-yet-submitted ledger operation:
its kind, a JSON-compatible body of parameters, and the transaction-level
fields (memo, transaction id, target nodes).

Lifecycle:
    builder stages -> meta options mutate -> resolver freezes/serializes/submits

Serialization:
    to_bytes() is canonical JSON (sorted keys, UTF-8). from_bytes(to_bytes(op))
    reproduces an equivalent operation, so returned bytes can be handed back
    to a compatible LedgerClient without information loss.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any

from ledgerkit.errors import StagingError
from ledgerkit.ledger.ids import EntityId, TransactionId
from ledgerkit.operations.kinds import KeyRole, OperationKind

CODEC_VERSION = 1


@dataclass(slots=True)
class StagedOperation:
    """
    A constructed-but-unsent ledger operation.

    Example:
        op = StagedOperation(OperationKind.TOPIC_DELETE, {"topic_id": "0.0.42"})
        op.set_memo("cleanup")
        payload = op.to_base64()
    """

    kind: OperationKind
    body: dict[str, Any] = field(default_factory=dict)
    memo: str | None = None
    transaction_id: TransactionId | None = None
    node_account_ids: tuple[EntityId, ...] = ()

    # Body fields holding role keys (declared by the builder)
    key_fields: dict[str, KeyRole] = field(default_factory=dict)

    frozen: bool = False

    def _check_mutable(self) -> None:
        if self.frozen:
            raise StagingError(
                f"Operation {self.kind.value} is frozen; stage it again to change it."
            )

    def set_memo(self, memo: str) -> StagedOperation:
        self._check_mutable()
        self.memo = memo
        return self

    def set_transaction_id(self, transaction_id: TransactionId) -> StagedOperation:
        self._check_mutable()
        self.transaction_id = transaction_id
        return self

    def set_node_account_ids(self, node_account_ids: list[EntityId] | tuple[EntityId, ...]) -> StagedOperation:
        self._check_mutable()
        self.node_account_ids = tuple(node_account_ids)
        return self

    def freeze(self) -> StagedOperation:
        """Mark the operation as frozen; further mutation is refused."""
        self.frozen = True
        return self

    # =========================================================================
    # Codec
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "version": CODEC_VERSION,
            "kind": self.kind.value,
            "body": self.body,
            "memo": self.memo,
            "transactionId": str(self.transaction_id) if self.transaction_id else None,
            "nodeAccountIds": [str(node) for node in self.node_account_ids],
            "keyFields": {name: role.value for name, role in self.key_fields.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StagedOperation:
        """Rebuild an operation from to_dict() output. The result is not frozen."""
        transaction_id = data.get("transactionId")
        return cls(
            kind=OperationKind(data["kind"]),
            body=dict(data.get("body") or {}),
            memo=data.get("memo"),
            transaction_id=TransactionId.parse(transaction_id) if transaction_id else None,
            node_account_ids=tuple(EntityId.parse(n) for n in data.get("nodeAccountIds", [])),
            key_fields={
                name: KeyRole(role) for name, role in (data.get("keyFields") or {}).items()
            },
        )

    def to_bytes(self) -> bytes:
        """Canonical JSON encoding."""
        return json.dumps(
            self.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> StagedOperation:
        return cls.from_dict(json.loads(data.decode("utf-8")))

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_base64(cls, text: str) -> StagedOperation:
        return cls.from_bytes(base64.b64decode(text))

    def describe(self) -> str:
        """Short description for logs."""
        parts = [self.kind.value]
        if self.transaction_id:
            parts.append(f"id={self.transaction_id}")
        if self.memo:
            parts.append(f"memo={self.memo!r}")
        return " ".join(parts)
