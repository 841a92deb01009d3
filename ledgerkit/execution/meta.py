"""
Meta options.

Meta options are cross-cutting adjustments a caller can attach to any
operation: memo, explicit transaction id, target nodes and scheduling
intent. MetaOptionsApplier applies the non-scheduling ones to a staged
operation; scheduling options are consumed by ScheduleComposer.

Failure policy:
    Malformed meta options never abort the call. A bad transaction id or
    node list is logged, reported as a warning and ignored. The only hard
    failure is a "current_signer" key field without a usable signer.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

from pydantic import BaseModel, ConfigDict, Field

from ledgerkit.errors import InvalidIdentifier
from ledgerkit.ledger.ids import EntityId, TransactionId
from ledgerkit.ledger.keys import KeyResolver
from ledgerkit.operations.kinds import KEY_ROLE_FIELDS
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)


class MetaOptions(BaseModel):
    """
    Cross-cutting options for one operation.

    Accepts both snake_case names and the camelCase names used by tool
    callers (transactionMemo, transactionId, nodeAccountIds, ...).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    memo: str | None = Field(default=None, alias="transactionMemo")
    explicit_id: str | None = Field(default=None, alias="transactionId")
    target_nodes: list[str] | None = Field(default=None, alias="nodeAccountIds")

    schedule: bool | None = None
    schedule_memo: str | None = Field(default=None, alias="scheduleMemo")
    schedule_payer: str | None = Field(default=None, alias="schedulePayerAccountId")
    schedule_admin_key: str | None = Field(default=None, alias="scheduleAdminKey")

    @classmethod
    def coerce(cls, value: MetaOptions | dict[str, Any] | None) -> MetaOptions:
        """Accept an instance, a plain mapping or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)


class MetaOptionsApplier:
    """
    Applies meta options to a staged operation.

    Order:
        (a) "current_signer" key fields -> operator public key
        (b) explicit transaction id (warn and ignore if malformed)
        (c) target nodes (warn and ignore the whole list if any is malformed)
        (d) memo

    Example:
        applier = MetaOptionsApplier(KeyResolver(signer))
        warnings = applier.apply(operation, MetaOptions(memo="hello"))
    """

    def __init__(self, key_resolver: KeyResolver):
        self._keys = key_resolver

    def apply(
        self,
        operation: StagedOperation,
        meta: MetaOptions | None = None,
        params: MutableMapping[str, Any] | None = None,
    ) -> list[str]:
        """
        Apply meta options in place.

        Args:
            operation: The staged operation
            meta: Options to apply (None applies only key substitution)
            params: Caller parameters; key-role entries are substituted too

        Returns:
            Warnings for options that were ignored

        Raises:
            SignerUnavailable: If a key field is "current_signer" and no
                operator key is available
        """
        meta = meta or MetaOptions()
        warnings: list[str] = []

        self._substitute_signer_keys(operation, params)

        if meta.explicit_id:
            try:
                operation.set_transaction_id(TransactionId.parse(meta.explicit_id))
            except InvalidIdentifier as e:
                warnings.append(f"Ignoring invalid transaction id {meta.explicit_id!r}: {e}")

        if meta.target_nodes:
            try:
                nodes = [EntityId.parse(node) for node in meta.target_nodes]
            except InvalidIdentifier as e:
                warnings.append(f"Ignoring invalid node account ids {meta.target_nodes!r}: {e}")
            else:
                operation.set_node_account_ids(nodes)

        if meta.memo is not None:
            operation.set_memo(meta.memo)

        for warning in warnings:
            logger.warning(f"[meta] {warning}")
        return warnings

    def _substitute_signer_keys(
        self,
        operation: StagedOperation,
        params: MutableMapping[str, Any] | None,
    ) -> None:
        targets: list[tuple[MutableMapping[str, Any], str]] = [
            (operation.body, name)
            for name in operation.key_fields
            if self._keys.is_current_signer(operation.body.get(name))
        ]
        if params is not None:
            role_names = set(KEY_ROLE_FIELDS.values()) | _camel_role_names()
            targets.extend(
                (params, name)
                for name, value in params.items()
                if name in role_names and self._keys.is_current_signer(value)
            )

        if not targets:
            return

        operator_key = self._keys.operator_public_key().to_string_der()
        for mapping, name in targets:
            logger.info(f"[meta] Substituting '{name}' current_signer with the operator key")
            mapping[name] = operator_key


def _camel_role_names() -> set[str]:
    names = set()
    for field_name in KEY_ROLE_FIELDS.values():
        head, *rest = field_name.split("_")
        names.add(head + "".join(part.title() for part in rest))
    return names
