"""
Service builder base.

A ServiceBuilder is an OperationStage bound to a kit. Domain builders add
stage methods that translate parameters into a StagedOperation (recording
notes for any defaults they apply) and return it. The staged value is then
delivered with execute(), get_bytes(), execute_with_signer() or resolve().
Each delivery empties the slot; stage again to retry.

Usage:
    topics = kit.topics()
    topics.create_topic(memo="daily reports")
    topics.get_notes()          # ["Default auto-renew period of ..."]

    outcome = await topics.execute()
"""

from __future__ import annotations

import base64
import functools
import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, MutableMapping, TypeVar

from ledgerkit.errors import InvalidKeyFormat, NoActiveOperation
from ledgerkit.execution.meta import MetaOptions
from ledgerkit.execution.outcome import ExecutionOutcome, failure_outcome
from ledgerkit.execution.policy import DEFAULT_POLICY, OperationPolicy
from ledgerkit.ledger.ids import EntityId
from ledgerkit.ledger.keys import KeyResolver, key_to_wire
from ledgerkit.operations.kinds import KeyRole, OperationKind
from ledgerkit.operations.stage import OperationStage
from ledgerkit.operations.staged import StagedOperation

if TYPE_CHECKING:
    from ledgerkit.execution.resolver import ExecutionResolver
    from ledgerkit.kit import LedgerAgentKit
    from ledgerkit.ledger.interfaces import Signer

logger = logging.getLogger(__name__)

DEFAULT_AUTORENEW_PERIOD_SECONDS = 7_776_000

StageMethod = TypeVar("StageMethod", bound=Callable[..., StagedOperation])


def staging(method: StageMethod) -> StageMethod:
    """
    Mark a public stage method.

    The slot and its notes are cleared before the method runs, so a call
    that fails validation leaves nothing staged.
    """

    @functools.wraps(method)
    def wrapper(self: ServiceBuilder, *args: Any, **kwargs: Any) -> StagedOperation:
        self.reset()
        return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class ServiceBuilder(OperationStage):
    """
    Base class for domain builders.

    Subclasses implement stage methods that:
    1. Validate and translate their parameters
    2. Collect notes for silently applied defaults
    3. Return self._stage(kind, body, notes, key_fields)
    """

    def __init__(self, kit: LedgerAgentKit):
        super().__init__()
        self.kit = kit

    @property
    def resolver(self) -> ExecutionResolver:
        return self.kit.resolver

    @property
    def keys(self) -> KeyResolver:
        return self.kit.resolver.key_resolver

    # =========================================================================
    # Staging helpers
    # =========================================================================

    def _stage(
        self,
        kind: OperationKind,
        body: dict[str, Any],
        notes: Iterable[str] = (),
        key_fields: dict[str, KeyRole] | None = None,
        memo: str | None = None,
    ) -> StagedOperation:
        operation = StagedOperation(
            kind,
            {name: value for name, value in body.items() if value is not None},
            memo=memo,
            key_fields=dict(key_fields or {}),
        )
        return self.stage(operation, notes)

    def _role_key(self, value: Any) -> Any:
        """
        Wire form of a key-role value.

        The "current_signer" sentinel is kept as is; it is substituted with
        the operator key when meta options are applied.
        """
        if value is None or self.keys.is_current_signer(value):
            return value
        return key_to_wire(self.keys.resolve(value))

    def _optional_role_key(self, field: str, value: Any, notes: list[str]) -> Any:
        """
        Wire form of an optional role key.

        A key string that cannot be parsed is left out of the operation with
        a warning and a note. SignerUnavailable still propagates.
        """
        try:
            return self._role_key(value)
        except InvalidKeyFormat as e:
            logger.warning(f"[builder] Skipping {field}: {e}")
            notes.append(f"The provided {field} could not be parsed and was not set.")
            return None

    def _key(self, value: Any) -> Any:
        """Wire form of a key that is not a role key (resolved immediately)."""
        key = self.keys.resolve(value)
        return key_to_wire(key) if key is not None else None

    @staticmethod
    def _id(value: Any) -> str | None:
        return str(EntityId.parse(value)) if value is not None else None

    def _operator_account(self) -> str:
        return str(self.kit.operator_account_id())

    # =========================================================================
    # Delivery
    # =========================================================================

    async def execute(self, meta: MetaOptions | dict[str, Any] | None = None) -> ExecutionOutcome:
        """
        Submit the staged operation, or its schedule when meta.schedule is set.

        Returns:
            ExecutionOutcome carrying the builder notes
        """
        notes = self.notes()
        try:
            operation = self.take_operation("execute")
            meta = MetaOptions.coerce(meta)
            self.resolver.meta_applier.apply(operation, meta)
        except Exception as e:
            logger.error(f"[builder] Cannot execute: {e}")
            return failure_outcome(e, notes=notes)

        if meta.schedule:
            return await self.resolver.create_schedule(operation, meta, notes)
        return await self.resolver.execute(operation, notes)

    def get_bytes(self, meta: MetaOptions | dict[str, Any] | None = None) -> str:
        """
        Base64 encoding of the staged operation, without submitting it.

        With meta.schedule set the bytes are those of a schedule-create
        wrapper built verbatim from the schedule options.

        Raises:
            NoActiveOperation: If nothing is staged
        """
        operation = self.take_operation("get bytes")
        meta = MetaOptions.coerce(meta)
        self.resolver.meta_applier.apply(operation, meta)

        target = operation
        if meta.schedule:
            target = self.resolver.composer.wrap_for_bytes(operation, meta)
        return base64.b64encode(self.resolver.ledger.serialize(target)).decode("ascii")

    async def execute_with_signer(self, signer: Signer) -> ExecutionOutcome:
        """Submit with another signer, who pays for the operation."""
        operation = self.current_operation()
        if operation is None:
            return failure_outcome(NoActiveOperation("execute"), notes=self.notes())
        self.take_operation()
        return await self.resolver.execute_with_signer(operation, signer, self.notes())

    async def resolve(
        self,
        *,
        policy: OperationPolicy = DEFAULT_POLICY,
        meta: MetaOptions | dict[str, Any] | None = None,
        param_notes: Iterable[str] = (),
        label: str | None = None,
        params: MutableMapping[str, Any] | None = None,
    ) -> ExecutionOutcome:
        """
        Deliver the staged operation the way the kit's configuration says.

        param_notes (defaulted tool parameters) come first, then builder notes.
        """
        notes = [*param_notes, *self.notes()]
        operation = self.current_operation()
        if operation is None:
            return failure_outcome(NoActiveOperation("execute"), notes=notes)
        self.take_operation()
        return await self.resolver.resolve(
            operation,
            policy=policy,
            meta=meta,
            notes=notes,
            label=label,
            params=params,
        )

    def get_notes(self) -> list[str]:
        return self.notes()
