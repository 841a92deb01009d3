"""
Schedule composition.

ScheduleComposer wraps a staged operation inside a schedule-create
operation so that it can be co-signed later. It chooses who pays for the
schedule creation and builds the schedule's admin authorization from the
operator key and, when the agent acts for a user, that user's key.

Counterparty key lookup is best-effort: lookup_counterparty_key() returns
a KeyLookup carrying either the key or the reason it is unavailable, and
composition degrades to operator-only authorization with a note.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ledgerkit.errors import KeyResolutionError
from ledgerkit.execution.meta import MetaOptions
from ledgerkit.ledger.ids import EntityId, TransactionId
from ledgerkit.ledger.interfaces import DirectoryService, Signer
from ledgerkit.ledger.keys import Key, KeyList, KeyResolver, PublicKey, key_to_wire
from ledgerkit.operations.kinds import OperationKind
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class KeyLookup:
    """
    Result of a best-effort key lookup.

    Exactly one of key / reason is set. `retrieval_failed` distinguishes a
    failed lookup from an account without a usable single key.
    """

    key: PublicKey | None = None
    reason: str | None = None
    retrieval_failed: bool = False

    @property
    def found(self) -> bool:
        return self.key is not None

    @classmethod
    def of(cls, key: PublicKey) -> KeyLookup:
        return cls(key=key)

    @classmethod
    def missing(cls, reason: str) -> KeyLookup:
        return cls(reason=reason)

    @classmethod
    def failed(cls, reason: str) -> KeyLookup:
        return cls(reason=reason, retrieval_failed=True)


def wrap_schedule(operation: StagedOperation) -> StagedOperation:
    """Wrap an operation in an empty schedule-create operation."""
    return StagedOperation(
        OperationKind.SCHEDULE_CREATE,
        {"scheduled_transaction": operation.to_dict()},
    )


class ScheduleComposer:
    """
    Builds schedule-create operations.

    Example:
        composer = ScheduleComposer(signer, directory, user_account_id="0.0.5005")
        notes: list[str] = []
        schedule_op = await composer.compose(operation, meta, notes)
    """

    def __init__(
        self,
        signer: Signer | None,
        directory: DirectoryService | None,
        user_account_id: str | None = None,
    ):
        self._signer = signer
        self._directory = directory
        self._user_account_id = user_account_id
        self._keys = KeyResolver(signer)

    @property
    def user_account_id(self) -> str | None:
        return self._user_account_id

    async def compose(
        self,
        operation: StagedOperation,
        meta: MetaOptions | None,
        notes: list[str],
    ) -> StagedOperation:
        """
        Wrap the operation in a schedule-create operation.

        Args:
            operation: The inner operation (not executed, only scheduled)
            meta: Scheduling options (memo, payer, admin key)
            notes: Note list; composition notes are appended to it

        Returns:
            The schedule-create operation, ready for submission
        """
        meta = meta or MetaOptions()
        user = self._user_account_id

        if user and operation.transaction_id is None and not operation.frozen:
            operation.set_transaction_id(TransactionId.generate(user))

        schedule = wrap_schedule(operation)

        if meta.schedule_memo:
            schedule.body["schedule_memo"] = meta.schedule_memo

        schedule.body["payer_account_id"] = self._choose_payer(meta, notes)

        admin_key = await self._admin_authorization(meta, notes)
        if admin_key is not None:
            schedule.body["admin_key"] = key_to_wire(admin_key)

        logger.info(
            f"[schedule] Composed schedule for {operation.kind.value} "
            f"(payer={schedule.body['payer_account_id']}, admin={'yes' if admin_key else 'no'})"
        )
        return schedule

    def wrap_for_bytes(
        self,
        operation: StagedOperation,
        meta: MetaOptions | None,
    ) -> StagedOperation:
        """
        Wrap the operation for a bytes export.

        Payer and admin key are taken from the options as given; no
        directory lookups are made.
        """
        meta = meta or MetaOptions()
        schedule = wrap_schedule(operation)
        if meta.schedule_memo:
            schedule.body["schedule_memo"] = meta.schedule_memo
        if meta.schedule_payer:
            schedule.body["payer_account_id"] = str(EntityId.parse(meta.schedule_payer))
        if meta.schedule_admin_key:
            schedule.body["admin_key"] = key_to_wire(self._keys.resolve(meta.schedule_admin_key))
        return schedule

    async def lookup_counterparty_key(self, account_id: str) -> KeyLookup:
        """
        Look up the current public key of an account.

        Never raises; failures are reported in the returned KeyLookup.
        """
        if self._directory is None:
            return KeyLookup.failed("no directory service is configured")
        try:
            key = await self._directory.lookup_public_key(account_id)
        except Exception as e:
            logger.warning(
                f"[schedule] Failed to get user key for schedule admin key for {account_id}: {e}"
            )
            return KeyLookup.failed(str(e))
        if not isinstance(key, PublicKey):
            return KeyLookup.missing("key not found or not a single key")
        return KeyLookup.of(key)

    # =========================================================================
    # Internals
    # =========================================================================

    def _choose_payer(self, meta: MetaOptions, notes: list[str]) -> str:
        if self._user_account_id:
            return str(EntityId.parse(self._user_account_id))
        if meta.schedule_payer:
            return str(EntityId.parse(meta.schedule_payer))

        operator = self._operator_account()
        notes.append(f"Your agent account ({operator}) will pay the fee to create this schedule.")
        return operator

    def _operator_account(self) -> str:
        if self._signer is None:
            raise KeyResolutionError("A signer is required to pay for schedule creation.")
        return str(self._signer.account_id())

    def _operator_key(self) -> PublicKey | None:
        try:
            return self._keys.operator_public_key()
        except KeyResolutionError as e:
            logger.warning(f"[schedule] Operator key unavailable for schedule admin key: {e}")
            return None

    async def _admin_authorization(self, meta: MetaOptions, notes: list[str]) -> Key | None:
        if meta.schedule_admin_key:
            try:
                explicit = self._keys.resolve(meta.schedule_admin_key)
            except KeyResolutionError as e:
                logger.warning(f"[schedule] Ignoring schedule admin key: {e}")
                notes.append("The provided schedule admin key was invalid and was ignored.")
            else:
                notes.append("The schedule admin key is set to the key you provided.")
                return explicit

        user = self._user_account_id
        admin_keys = KeyList(threshold=1)

        operator_key = self._operator_key()
        if operator_key is not None:
            admin_keys = admin_keys.with_key(operator_key)

        if user:
            lookup = await self.lookup_counterparty_key(user)
            if lookup.found:
                admin_keys = admin_keys.with_key(lookup.key)
                if operator_key is not None:
                    notes.append(
                        f"The schedule admin key allows both your agent and user ({user}) "
                        f"to manage the schedule."
                    )
                else:
                    notes.append(f"The schedule admin key is set to user ({user}).")
            elif lookup.retrieval_failed:
                notes.append(
                    f"The schedule admin key is set to your agent. "
                    f"Could not retrieve user ({user}) key."
                )
            else:
                notes.append(
                    f"The schedule admin key is set to your agent. "
                    f"User ({user}) key not found or not a single key."
                )

        if len(admin_keys) == 0:
            notes.append(
                "No admin key could be set for the schedule "
                "(agent key missing and user key not found/retrieved)."
            )
            return None
        return admin_keys
