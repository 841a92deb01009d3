"""
Execution Outcome.

This module defines the single result shape returned by ExecutionResolver,
whichever strategy ran.

Invariant:
    success=True  -> receipt, schedule_id and/or transaction_bytes populated
    success=False -> error populated
    Every outcome carries notes, success or failure.

Usage:
    outcome = await resolver.resolve(operation, meta=meta, notes=notes)

    if outcome.success:
        print(outcome.schedule_id or outcome.transaction_id)
    else:
        print(f"Failed: {outcome.error}")

    payload = outcome.to_dict()   # flat record for the calling layer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ledgerkit.ledger.interfaces import Receipt


class Strategy(str, Enum):
    """Which execution strategy produced an outcome."""

    EXECUTE = "execute"
    BYTES = "bytes"
    SCHEDULE = "schedule"
    NONE = "none"  # failed before a strategy ran


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """
    Result of one operation attempt.

    Example:
        outcome = executed_outcome(receipt, transaction_id="0.0.2@1.0", notes=[])
        outcome.to_dict()
        # {"success": True, "receipt": {...}, "transactionId": "0.0.2@1.0", "notes": []}
    """

    success: bool
    strategy: Strategy = Strategy.NONE

    receipt: "Receipt | None" = None
    schedule_id: str | None = None
    transaction_id: str | None = None
    transaction_bytes: str | None = None
    description: str | None = None

    error: str | None = None
    requires_autonomous: bool = False

    notes: tuple[str, ...] = ()

    # Strategy-specific extras, rendered verbatim by to_dict()
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flat record for the calling layer."""
        result: dict[str, Any] = {"success": self.success}

        if self.receipt is not None:
            result["receipt"] = self.receipt.to_dict()
        if self.schedule_id is not None:
            result["scheduleId"] = self.schedule_id
        if self.transaction_bytes is not None:
            result["transactionBytes"] = self.transaction_bytes
        if self.transaction_id is not None:
            result["transactionId"] = self.transaction_id
        if self.description is not None:
            result["description"] = self.description
        if self.error is not None:
            result["error"] = self.error
        if self.requires_autonomous:
            result["requiresAutonomous"] = True
        if self.extra:
            result.update(self.extra)

        result["notes"] = list(self.notes)
        return result


# =============================================================================
# Factory Functions
# =============================================================================


def executed_outcome(
    receipt: "Receipt",
    *,
    transaction_id: str | None,
    notes: list[str] | tuple[str, ...] = (),
) -> ExecutionOutcome:
    """Outcome of a successful immediate execution."""
    return ExecutionOutcome(
        success=True,
        strategy=Strategy.EXECUTE,
        receipt=receipt,
        transaction_id=transaction_id,
        notes=tuple(notes),
    )


def bytes_outcome(
    transaction_bytes: str,
    *,
    transaction_id: str | None,
    notes: list[str] | tuple[str, ...] = (),
) -> ExecutionOutcome:
    """Outcome of a bytes-return (nothing was submitted)."""
    return ExecutionOutcome(
        success=True,
        strategy=Strategy.BYTES,
        transaction_bytes=transaction_bytes,
        transaction_id=transaction_id,
        notes=tuple(notes),
    )


def scheduled_outcome(
    schedule_id: str,
    *,
    transaction_id: str | None,
    description: str,
    receipt: "Receipt | None" = None,
    notes: list[str] | tuple[str, ...] = (),
    extra: dict[str, Any] | None = None,
) -> ExecutionOutcome:
    """Outcome of a successful schedule creation."""
    return ExecutionOutcome(
        success=True,
        strategy=Strategy.SCHEDULE,
        receipt=receipt,
        schedule_id=schedule_id,
        transaction_id=transaction_id,
        description=description,
        notes=tuple(notes),
        extra=extra or {},
    )


def failure_outcome(
    error: Exception | str,
    *,
    strategy: Strategy = Strategy.NONE,
    transaction_id: str | None = None,
    notes: list[str] | tuple[str, ...] = (),
) -> ExecutionOutcome:
    """Outcome of a failed attempt."""
    message = str(error) if str(error) else f"{type(error).__name__} during execution"
    return ExecutionOutcome(
        success=False,
        strategy=strategy,
        transaction_id=transaction_id,
        error=message,
        requires_autonomous=bool(getattr(error, "requires_autonomous", False)),
        notes=tuple(notes),
    )
