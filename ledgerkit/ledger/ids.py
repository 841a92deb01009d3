"""
Ledger identifiers.

EntityId addresses accounts, tokens, topics, files, contracts, schedules
and nodes ("shard.realm.num"). TransactionId is the payer account plus a
valid-start timestamp ("0.0.5@1700000000.000000123").
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass

from ledgerkit.errors import InvalidIdentifier

_ENTITY_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")
_TRANSACTION_RE = re.compile(r"^(\d+\.\d+\.\d+)@(\d+)\.(\d+)(\?scheduled)?$")


@dataclass(frozen=True, slots=True)
class EntityId:
    """Identifier of a ledger entity."""

    shard: int = 0
    realm: int = 0
    num: int = 0

    @classmethod
    def parse(cls, value: str | int | EntityId) -> EntityId:
        """
        Parse an entity id.

        Accepts "shard.realm.num", a bare number ("1234" or 1234, meaning
        0.0.1234) or an existing EntityId.

        Raises:
            InvalidIdentifier: If the value is not a valid id
        """
        if isinstance(value, EntityId):
            return value
        if isinstance(value, bool):
            raise InvalidIdentifier(value)
        if isinstance(value, int):
            if value < 0:
                raise InvalidIdentifier(value)
            return cls(0, 0, value)
        if not isinstance(value, str):
            raise InvalidIdentifier(value)

        text = value.strip()
        if text.isdigit():
            return cls(0, 0, int(text))

        match = _ENTITY_RE.match(text)
        if not match:
            raise InvalidIdentifier(value)
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    def __str__(self) -> str:
        return f"{self.shard}.{self.realm}.{self.num}"


@dataclass(frozen=True, slots=True)
class TransactionId:
    """Identifier of a transaction: payer account and valid-start time."""

    account_id: EntityId
    valid_start_seconds: int
    valid_start_nanos: int = 0
    scheduled: bool = False

    @classmethod
    def generate(cls, account_id: EntityId | str) -> TransactionId:
        """Generate a fresh id for the given payer using the current time."""
        now = time.time_ns()
        return cls(
            account_id=EntityId.parse(account_id),
            valid_start_seconds=now // 1_000_000_000,
            valid_start_nanos=now % 1_000_000_000,
        )

    @classmethod
    def parse(cls, value: str | TransactionId) -> TransactionId:
        """
        Parse "shard.realm.num@seconds.nanos[?scheduled]".

        Raises:
            InvalidIdentifier: If the value is not a valid transaction id
        """
        if isinstance(value, TransactionId):
            return value
        if not isinstance(value, str):
            raise InvalidIdentifier(value, "transaction id")

        match = _TRANSACTION_RE.match(value.strip())
        if not match:
            raise InvalidIdentifier(value, "transaction id")

        nanos_text = match.group(3)
        if len(nanos_text) > 9:
            raise InvalidIdentifier(value, "transaction id")

        return cls(
            account_id=EntityId.parse(match.group(1)),
            valid_start_seconds=int(match.group(2)),
            valid_start_nanos=int(nanos_text),
            scheduled=match.group(4) is not None,
        )

    def __str__(self) -> str:
        text = f"{self.account_id}@{self.valid_start_seconds}.{self.valid_start_nanos:09d}"
        if self.scheduled:
            text += "?scheduled"
        return text
