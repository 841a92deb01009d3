"""
Execution configuration and per-operation policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OperatingMode(str, Enum):
    """How the agent delivers operations by default."""

    AUTONOMOUS = "autonomous"  # sign and submit with the operator
    RETURN_BYTES = "returnBytes"  # hand unsigned bytes (or a schedule) to the user

    @classmethod
    def from_string(cls, value: str) -> OperatingMode:
        """Parse a mode name; 'provideBytes' and 'directExecution' are accepted aliases."""
        aliases = {
            "autonomous": cls.AUTONOMOUS,
            "directexecution": cls.AUTONOMOUS,
            "returnbytes": cls.RETURN_BYTES,
            "providebytes": cls.RETURN_BYTES,
            "return_bytes": cls.RETURN_BYTES,
        }
        try:
            return aliases[value.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown operating mode: {value!r}") from None


@dataclass(frozen=True, slots=True)
class OperationPolicy:
    """
    Per-operation-kind execution constraints.

    Attributes:
        never_schedule: The operation must never be wrapped in a schedule
        requires_multiple_operations: The operation cannot be expressed as one
            returned-bytes artifact
    """

    never_schedule: bool = False
    requires_multiple_operations: bool = False


DEFAULT_POLICY = OperationPolicy()


@dataclass(frozen=True, slots=True)
class ExecutionConfig:
    """
    Agent-wide execution configuration, passed explicitly to the resolver.

    Attributes:
        operating_mode: Default delivery strategy
        schedule_user_transactions: In return-bytes mode, schedule operations
            unless the caller says otherwise
        user_account_id: The user the agent is acting for, if any
    """

    operating_mode: OperatingMode = OperatingMode.AUTONOMOUS
    schedule_user_transactions: bool = False
    user_account_id: str | None = None

    @property
    def is_autonomous(self) -> bool:
        return self.operating_mode == OperatingMode.AUTONOMOUS
