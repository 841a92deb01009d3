"""
Exceptions for ledgerkit.

Taxonomy:
    LedgerKitError
    ├── StagingError
    │   └── NoActiveOperation          # mutator called before anything was staged
    ├── KeyResolutionError
    │   ├── InvalidKeyFormat           # string is neither a public nor a private key
    │   └── SignerUnavailable          # "current_signer" requested without a signer
    ├── InvalidIdentifier              # malformed entity / transaction id
    ├── InvalidAmount                  # amount cannot be normalized
    ├── PolicyViolation
    │   └── MultiStepUnsupportedInBytesMode
    └── NetworkExecutionError          # submission or receipt failure

Error Handling:
    Everything below ExecutionResolver either recovers locally (a note or a
    logged warning) or propagates. ExecutionResolver converts whatever
    propagates into a failed ExecutionOutcome.
"""

from __future__ import annotations


class LedgerKitError(Exception):
    """Base exception for ledgerkit errors."""


# =============================================================================
# Staging
# =============================================================================


class StagingError(LedgerKitError):
    """Raised for misuse of the staging slot."""


class NoActiveOperation(StagingError):
    """Raised when a mutator is invoked before any operation was staged."""

    def __init__(self, action: str = "modify the operation"):
        super().__init__(
            f"No operation is currently staged. Call a specific builder method "
            f"(e.g. create_topic) before trying to {action}."
        )
        self.action = action


# =============================================================================
# Keys, identifiers, amounts
# =============================================================================


class KeyResolutionError(LedgerKitError):
    """Base error for key resolution failures."""


class InvalidKeyFormat(KeyResolutionError, ValueError):
    """Raised when a key string cannot be parsed as a public or private key."""

    def __init__(self, value: str):
        preview = value[:30]
        super().__init__(f"Invalid key string format: {preview}...")
        self.preview = preview


class SignerUnavailable(KeyResolutionError):
    """Raised when the operator key is required but no signer can provide it."""

    def __init__(self, reason: str = "Signer is not available to resolve 'current_signer'."):
        super().__init__(reason)


class InvalidIdentifier(LedgerKitError, ValueError):
    """Raised when an entity or transaction identifier cannot be parsed."""

    def __init__(self, value: object, kind: str = "entity id"):
        super().__init__(f"Invalid {kind}: {value!r}")
        self.value = value
        self.kind = kind


class InvalidAmount(LedgerKitError, ValueError):
    """Raised when an amount cannot be normalized to a 64-bit integer."""


# =============================================================================
# Execution
# =============================================================================


class PolicyViolation(LedgerKitError):
    """Raised when an operation policy forbids the requested strategy."""

    requires_autonomous: bool = False


class MultiStepUnsupportedInBytesMode(PolicyViolation):
    """Raised when a multi-operation tool is used in return-bytes mode."""

    requires_autonomous = True

    def __init__(self, label: str):
        super().__init__(
            f"The {label} tool requires multiple transactions and cannot be used in "
            f"returnBytes mode. Please use autonomous mode or break down the operation "
            f"into individual steps."
        )
        self.label = label


class NetworkExecutionError(LedgerKitError):
    """Raised when the network rejects a submission or the receipt is not successful."""

    def __init__(
        self,
        message: str,
        *,
        transaction_id: str | None = None,
        status: str | None = None,
    ):
        super().__init__(message)
        self.transaction_id = transaction_id
        self.status = status
