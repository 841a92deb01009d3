"""
Base ledger client.

BaseLedgerClient implements the parts of the LedgerClient contract that do
not depend on a transport: freezing (transaction id + target nodes) and
serialization. Transports subclass it and implement _send().

Usage:
    class GrpcLedgerClient(BaseLedgerClient):
        async def _send(self, operation: StagedOperation) -> Receipt:
            ...

    client = GrpcLedgerClient(operator_account_id="0.0.1001", nodes=["0.0.3"])
    receipt = await client.submit(operation)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from ledgerkit.errors import NetworkExecutionError
from ledgerkit.ledger.ids import EntityId, TransactionId
from ledgerkit.ledger.interfaces import Receipt
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)


class BaseLedgerClient(ABC):
    """
    Abstract ledger client.

    Subclasses must implement:
    - _send(): transmit a frozen operation and wait for its receipt
    """

    def __init__(
        self,
        operator_account_id: EntityId | str,
        *,
        nodes: Iterable[EntityId | str] = (),
    ):
        self._operator_account_id = EntityId.parse(operator_account_id)
        self._nodes = tuple(EntityId.parse(node) for node in nodes)

    @property
    def operator_account_id(self) -> EntityId:
        return self._operator_account_id

    @property
    def nodes(self) -> tuple[EntityId, ...]:
        return self._nodes

    def freeze(self, operation: StagedOperation) -> StagedOperation:
        """
        Freeze an operation for submission.

        Assigns a transaction id paid by the operator and the client's nodes
        when the operation does not already carry them.
        """
        if operation.frozen:
            return operation
        if operation.transaction_id is None:
            operation.set_transaction_id(TransactionId.generate(self._operator_account_id))
        if not operation.node_account_ids and self._nodes:
            operation.set_node_account_ids(self._nodes)
        return operation.freeze()

    def serialize(self, operation: StagedOperation) -> bytes:
        """Encode without submitting or freezing."""
        return operation.to_bytes()

    def deserialize(self, data: bytes) -> StagedOperation:
        return StagedOperation.from_bytes(data)

    async def submit(self, operation: StagedOperation) -> Receipt:
        """
        Freeze (if needed), send and wait for the receipt.

        Raises:
            NetworkExecutionError: If the receipt status is not SUCCESS
        """
        self.freeze(operation)
        logger.info(f"[ledger] Submitting {operation.describe()}")

        receipt = await self._send(operation)

        if not receipt.is_success:
            raise NetworkExecutionError(
                f"Transaction {operation.transaction_id} failed with status {receipt.status}",
                transaction_id=str(operation.transaction_id),
                status=receipt.status,
            )
        return receipt

    @abstractmethod
    async def _send(self, operation: StagedOperation) -> Receipt:
        """Transmit a frozen operation and return its receipt."""
        ...
