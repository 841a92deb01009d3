"""
Staged operations and the staging slot.
"""

from ledgerkit.operations.kinds import KEY_ROLE_FIELDS, KeyRole, OperationKind, role_fields
from ledgerkit.operations.stage import OperationStage
from ledgerkit.operations.staged import StagedOperation

__all__ = [
    "KEY_ROLE_FIELDS",
    "KeyRole",
    "OperationKind",
    "OperationStage",
    "StagedOperation",
    "role_fields",
]
