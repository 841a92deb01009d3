"""
Execution Resolver.

ExecutionResolver decides how a staged operation reaches the network and
runs exactly one strategy:

    Execute      - submit now, signed by the operator
    BytesReturn  - serialize without submitting, for an external signer
    Schedule     - wrap in a schedule-create operation and submit that

Decision procedure:

    autonomous mode                      -> Execute
    returnBytes + multi-step policy      -> failure (requiresAutonomous)
    returnBytes + should schedule        -> Schedule
    returnBytes otherwise                -> BytesReturn

    should schedule = not policy.never_schedule
                      and (meta.schedule if given else config.schedule_user_transactions)

resolve() is the error boundary for one attempt: every exception raised
while applying meta options or running a strategy becomes a failed
ExecutionOutcome that still carries the notes. No retries happen here.

Usage:
    resolver = ExecutionResolver(ledger=client, signer=signer, directory=mirror, config=config)
    outcome = await resolver.resolve(operation, meta=MetaOptions(memo="hi"), notes=notes)
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Iterable, MutableMapping

from ledgerkit.errors import MultiStepUnsupportedInBytesMode, NetworkExecutionError, StagingError
from ledgerkit.execution.meta import MetaOptions, MetaOptionsApplier
from ledgerkit.execution.outcome import (
    ExecutionOutcome,
    Strategy,
    bytes_outcome,
    executed_outcome,
    failure_outcome,
    scheduled_outcome,
)
from ledgerkit.execution.policy import DEFAULT_POLICY, ExecutionConfig, OperationPolicy
from ledgerkit.execution.schedule import ScheduleComposer
from ledgerkit.ledger.ids import TransactionId
from ledgerkit.ledger.interfaces import DirectoryService, LedgerClient, Signer
from ledgerkit.ledger.keys import KeyResolver
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)


class ExecutionResolver:
    """
    Chooses and runs the execution strategy for staged operations.

    One resolver can serve many builders concurrently; it holds no
    per-operation state. The ledger client and signer must themselves be
    safe for concurrent use.
    """

    def __init__(
        self,
        *,
        ledger: LedgerClient,
        signer: Signer | None = None,
        directory: DirectoryService | None = None,
        config: ExecutionConfig | None = None,
    ):
        self.ledger = ledger
        self.signer = signer
        self.directory = directory
        self.config = config or ExecutionConfig()

        self.key_resolver = KeyResolver(signer)
        self.meta_applier = MetaOptionsApplier(self.key_resolver)
        self.composer = ScheduleComposer(signer, directory, self.config.user_account_id)

    # =========================================================================
    # Decision
    # =========================================================================

    def should_schedule(self, policy: OperationPolicy, meta: MetaOptions | None) -> bool:
        """Whether a return-bytes call should go through a schedule."""
        if policy.never_schedule:
            return False
        requested = meta.schedule if meta is not None else None
        if requested is None:
            return self.config.schedule_user_transactions
        return requested

    async def resolve(
        self,
        operation: StagedOperation,
        *,
        policy: OperationPolicy = DEFAULT_POLICY,
        meta: MetaOptions | dict[str, Any] | None = None,
        notes: Iterable[str] = (),
        label: str | None = None,
        params: MutableMapping[str, Any] | None = None,
    ) -> ExecutionOutcome:
        """
        Apply meta options and run the selected strategy.

        Args:
            operation: The staged operation
            policy: Per-operation-kind constraints
            meta: Meta options (model or camelCase mapping)
            notes: Builder and defaulted-parameter notes
            label: Name used in messages (defaults to the operation kind)
            params: Caller parameters, for key-field substitution

        Returns:
            ExecutionOutcome; never raises
        """
        collected = list(notes)
        label = label or operation.kind.label

        try:
            meta_options = MetaOptions.coerce(meta)
            self.meta_applier.apply(operation, meta_options, params)

            if self.config.is_autonomous:
                logger.info(f"[resolver] Executing directly (mode: autonomous): {label}")
                return await self.execute(operation, collected)

            if policy.requires_multiple_operations:
                error = MultiStepUnsupportedInBytesMode(label)
                logger.warning(f"[resolver] {error}")
                return failure_outcome(error, notes=collected)

            if self.should_schedule(policy, meta_options):
                logger.info(f"[resolver] Preparing scheduled operation (mode: returnBytes): {label}")
                return await self.create_schedule(operation, meta_options, collected, label)

            logger.info(f"[resolver] Returning operation bytes (mode: returnBytes): {label}")
            return self.return_bytes(operation, collected)

        except Exception as e:
            logger.error(f"[resolver] {label} failed: {e}")
            return failure_outcome(
                e,
                transaction_id=_transaction_id_of(operation),
                notes=collected,
            )

    # =========================================================================
    # Strategies
    # =========================================================================

    async def execute(
        self,
        operation: StagedOperation,
        notes: Iterable[str] = (),
    ) -> ExecutionOutcome:
        """Submit the operation and wait for its receipt."""
        notes = list(notes)
        try:
            self.ledger.freeze(operation)
            receipt = await self._submit(operation)
        except Exception as e:
            logger.error(f"[resolver] Execution failed for {operation.describe()}: {e}")
            return failure_outcome(
                e,
                strategy=Strategy.EXECUTE,
                transaction_id=_transaction_id_of(operation) or getattr(e, "transaction_id", None),
                notes=notes,
            )

        return executed_outcome(
            receipt,
            transaction_id=_transaction_id_of(operation) or receipt.transaction_id,
            notes=notes,
        )

    def return_bytes(
        self,
        operation: StagedOperation,
        notes: Iterable[str] = (),
    ) -> ExecutionOutcome:
        """
        Serialize the operation without submitting it.

        An operation without a transaction id gets one generated for the
        effective payer (the user when configured, otherwise the operator).
        """
        if operation.transaction_id is None and not operation.frozen:
            operation.set_transaction_id(TransactionId.generate(self.effective_payer()))

        encoded = base64.b64encode(self.ledger.serialize(operation)).decode("ascii")
        return bytes_outcome(
            encoded,
            transaction_id=_transaction_id_of(operation),
            notes=list(notes),
        )

    async def create_schedule(
        self,
        operation: StagedOperation,
        meta: MetaOptions | None,
        notes: Iterable[str] = (),
        label: str | None = None,
    ) -> ExecutionOutcome:
        """
        Wrap the operation in a schedule and submit the schedule creation.

        The inner operation is not executed. A receipt without a schedule
        id counts as a failure.
        """
        notes = list(notes)
        label = label or operation.kind.label
        meta = meta or MetaOptions()

        schedule_op: StagedOperation | None = None
        try:
            schedule_op = await self.composer.compose(operation, meta, notes)
            self.ledger.freeze(schedule_op)
            receipt = await self._submit(schedule_op)
        except Exception as e:
            logger.error(f"[resolver] Schedule creation failed for {label}: {e}")
            return failure_outcome(
                e,
                strategy=Strategy.SCHEDULE,
                transaction_id=_transaction_id_of(schedule_op) if schedule_op else None,
                notes=notes,
            )

        if not receipt.schedule_id:
            return failure_outcome(
                "Failed to create schedule and retrieve ID.",
                strategy=Strategy.SCHEDULE,
                transaction_id=_transaction_id_of(schedule_op),
                notes=notes,
            )

        user = self.config.user_account_id
        description = meta.memo or f"Scheduled {label} operation."
        if user:
            description += f" User ({user}) will be payer of scheduled transaction."

        extra: dict[str, Any] = {"payerAccountIdScheduledTx": user or "unknown"}
        if meta.memo:
            extra["memoScheduledTx"] = meta.memo

        return scheduled_outcome(
            receipt.schedule_id,
            transaction_id=_transaction_id_of(schedule_op) or receipt.transaction_id,
            description=description,
            receipt=receipt,
            notes=notes,
            extra=extra,
        )

    async def execute_with_signer(
        self,
        operation: StagedOperation,
        signer: Signer,
        notes: Iterable[str] = (),
    ) -> ExecutionOutcome:
        """
        Submit with a different signer, who pays for the operation.

        Raises:
            StagingError: If the operation is already frozen
        """
        if operation.frozen:
            raise StagingError(
                "Operation is frozen, stage it again and then call execute_with_signer."
            )

        notes = list(notes)
        try:
            receipt = await signer.sign_and_submit(operation)
        except Exception as e:
            logger.error(f"[resolver] Execution with new signer failed: {e}")
            return failure_outcome(e, strategy=Strategy.EXECUTE, notes=notes)

        return executed_outcome(
            receipt,
            transaction_id=_transaction_id_of(operation) or receipt.transaction_id,
            notes=notes,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def effective_payer(self) -> str:
        """User account when configured, otherwise the operator account."""
        if self.config.user_account_id:
            return self.config.user_account_id
        if self.signer is not None:
            return str(self.signer.account_id())
        return str(self.ledger.operator_account_id)

    async def _submit(self, operation: StagedOperation):
        if self.signer is not None:
            receipt = await self.signer.sign_and_submit(operation)
        else:
            receipt = await self.ledger.submit(operation)
        if not receipt.is_success:
            raise NetworkExecutionError(
                f"Transaction {operation.transaction_id} failed with status {receipt.status}",
                transaction_id=_transaction_id_of(operation),
                status=receipt.status,
            )
        return receipt


def _transaction_id_of(operation: StagedOperation) -> str | None:
    return str(operation.transaction_id) if operation.transaction_id else None
