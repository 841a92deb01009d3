"""
Operation staging slot.

OperationStage holds at most one staged operation plus the notes that
describe defaults applied while staging it. Every staging call replaces
the operation and resets the notes, so nothing leaks from one staged
operation into the next. Delivery takes the operation out of the slot;
it is attempted once.
"""

from __future__ import annotations

from typing import Iterable

from ledgerkit.errors import NoActiveOperation
from ledgerkit.ledger.ids import EntityId, TransactionId
from ledgerkit.operations.staged import StagedOperation


class OperationStage:
    """
    Single-slot holder for the operation being built.

    Not safe for concurrent mutation; use one instance per logical operation.

    Example:
        stage = OperationStage()
        op = stage.stage(StagedOperation(OperationKind.TOPIC_DELETE, {...}))
        stage.set_memo("cleanup")
        stage.notes()   # []
    """

    def __init__(self) -> None:
        self._current: StagedOperation | None = None
        self._notes: list[str] = []

    def stage(self, operation: StagedOperation, notes: Iterable[str] = ()) -> StagedOperation:
        """
        Replace the staged operation.

        Args:
            operation: The new operation
            notes: Notes produced while building it (previous notes are dropped)

        Returns:
            The staged operation
        """
        self._current = operation
        self._notes = list(notes)
        return operation

    def current_operation(self) -> StagedOperation | None:
        """The staged operation, or None when nothing is staged."""
        return self._current

    def require_operation(self, action: str = "modify the operation") -> StagedOperation:
        """
        The staged operation.

        Raises:
            NoActiveOperation: If nothing is staged
        """
        if self._current is None:
            raise NoActiveOperation(action)
        return self._current

    def take_operation(self, action: str = "execute") -> StagedOperation:
        """
        Remove the staged operation from the slot for delivery.

        The notes stay so they can be reported with the outcome. The
        operation must be staged again before another attempt.

        Raises:
            NoActiveOperation: If nothing is staged
        """
        operation = self.require_operation(action)
        self._current = None
        return operation

    def reset(self) -> None:
        """Drop the staged operation and its notes."""
        self._current = None
        self._notes = []

    # =========================================================================
    # Mutators
    # =========================================================================

    def set_memo(self, memo: str) -> OperationStage:
        self.require_operation("set a memo").set_memo(memo)
        return self

    def set_explicit_id(self, transaction_id: TransactionId | str) -> OperationStage:
        operation = self.require_operation("set a transaction id")
        operation.set_transaction_id(TransactionId.parse(transaction_id))
        return self

    def set_target_nodes(self, node_account_ids: Iterable[EntityId | str]) -> OperationStage:
        operation = self.require_operation("set target nodes")
        operation.set_node_account_ids([EntityId.parse(node) for node in node_account_ids])
        return self

    # =========================================================================
    # Notes
    # =========================================================================

    def add_note(self, note: str) -> None:
        self._notes.append(note)

    def notes(self) -> list[str]:
        """A copy of the current notes, in insertion order."""
        return list(self._notes)

    def clear_notes(self) -> None:
        self._notes = []
