"""
Transaction Tool.

TransactionTool is the base for every tool that stages one ledger
operation. A concrete tool declares:

    params_model    pydantic model for its arguments (camelCase on the wire)
    service         kit builder accessor ("accounts", "tokens", ...)
    builder_method  builder stage method called with the validated params
    policy          OperationPolicy for its operation kind

Execution flow:
    1. Split metaOptions from the tool arguments
    2. Validate the arguments against params_model
    3. Record a note for every omitted parameter that has a schema default
    4. Stage the operation on a fresh builder
    5. Hand it to the kit's ExecutionResolver

Errors never escape execute(): invalid arguments and staging failures come
back as ToolResult.error, with the notes collected so far.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as ParamsValidationError
from pydantic.alias_generators import to_camel

from ledgerkit.execution.meta import MetaOptions
from ledgerkit.execution.outcome import ExecutionOutcome, Strategy, failure_outcome
from ledgerkit.execution.policy import DEFAULT_POLICY, OperationPolicy
from ledgerkit.tools.base import Tool, ToolAnnotations, ToolResult

if TYPE_CHECKING:
    from ledgerkit.builders.base import ServiceBuilder
    from ledgerkit.kit import LedgerAgentKit

logger = logging.getLogger(__name__)


class ToolParams(BaseModel):
    """Base for tool parameter models: snake_case in Python, camelCase in schemas."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TransactionTool(Tool):
    """
    Base class for tools that stage and deliver one ledger operation.

    Subclasses set the class attributes below and override stage() only
    when the params do not map one-to-one onto the builder method.
    """

    tool_name: ClassVar[str]
    tool_description: ClassVar[str]
    title: ClassVar[str | None] = None
    params_model: ClassVar[type[ToolParams]]
    service: ClassVar[str]
    builder_method: ClassVar[str]
    policy: ClassVar[OperationPolicy] = DEFAULT_POLICY
    destructive: ClassVar[bool] = False

    def __init__(self, kit: LedgerAgentKit):
        self.kit = kit

    @property
    def name(self) -> str:
        return self.tool_name

    @property
    def description(self) -> str:
        return self.tool_description

    @property
    def input_schema(self) -> dict[str, Any]:
        schema = self.params_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        meta_schema = MetaOptions.model_json_schema(by_alias=True)
        meta_schema.pop("title", None)
        meta_schema["description"] = (
            "Optional. Controls how the transaction is delivered: memo, explicit "
            "transaction id, node selection and scheduling."
        )
        schema.setdefault("properties", {})["metaOptions"] = meta_schema
        return schema

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title=self.title,
            destructive_hint=self.destructive,
        )

    @property
    def label(self) -> str:
        """Name used in outcome messages."""
        return self.tool_name

    # =========================================================================
    # Hooks
    # =========================================================================

    def get_builder(self) -> ServiceBuilder:
        return getattr(self.kit, self.service)()

    def stage(self, builder: ServiceBuilder, params: ToolParams) -> None:
        """Stage the operation; raises on invalid parameters."""
        method = getattr(builder, self.builder_method)
        method(**params.model_dump(exclude_none=True))

    def note_for_default(self, field: str, value: Any) -> str | None:
        """User-facing note for a defaulted parameter, or None for the generic one."""
        return None

    def defaulted_notes(self, params: ToolParams) -> list[str]:
        """Notes for parameters the caller omitted that carry a schema default."""
        notes: list[str] = []
        for field_name, info in type(params).model_fields.items():
            if field_name in params.model_fields_set or info.is_required():
                continue
            if info.default_factory is not None or info.default is None:
                continue
            default = info.default
            value = getattr(params, field_name)
            note = self.note_for_default(field_name, value)
            if note is None:
                key = info.alias or field_name
                note = (
                    f"For the parameter '{key}', the value '{_json(value)}' was used. "
                    f"This field has a tool schema default of '{_json(default)}'."
                )
            notes.append(note)
        return notes

    # =========================================================================
    # Execution
    # =========================================================================

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        args = dict(arguments)
        meta = args.pop("metaOptions", None)

        try:
            params = self.params_model.model_validate(args)
        except ParamsValidationError as e:
            logger.warning(f"[{self.name}] Invalid arguments: {e}")
            return ToolResult.error(f"Invalid arguments for {self.name}: {e}")

        param_notes = self.defaulted_notes(params)
        logger.info(
            f"[{self.name}] Executing with params={params.model_dump(exclude_none=True)} "
            f"meta={meta}"
        )

        builder = self.get_builder()
        try:
            self.stage(builder, params)
        except Exception as e:
            logger.error(f"[{self.name}] Failed to stage operation: {e}")
            outcome = failure_outcome(e, notes=[*param_notes, *builder.notes()])
            return self._to_result(outcome)

        operation_params = params.model_dump(by_alias=True, exclude_none=True)
        outcome = await builder.resolve(
            policy=self.policy,
            meta=meta,
            param_notes=param_notes,
            label=self.label,
            params=operation_params,
        )
        logger.debug(f"[{self.name}] Resolved params={operation_params}")
        return self._to_result(outcome)

    def _to_result(self, outcome: ExecutionOutcome) -> ToolResult:
        structured = outcome.to_dict()
        if not outcome.success:
            return ToolResult.error(outcome.error or "Unknown error", structured=structured)
        return ToolResult.success(_summary(self.label, outcome), structured=structured)


def _summary(label: str, outcome: ExecutionOutcome) -> str:
    if outcome.strategy == Strategy.BYTES:
        return f"Prepared {label} transaction bytes for signing (id: {outcome.transaction_id})."
    if outcome.strategy == Strategy.SCHEDULE:
        return f"Scheduled {label}: schedule {outcome.schedule_id}."
    status = outcome.receipt.status if outcome.receipt is not None else "SUCCESS"
    return f"Executed {label} (id: {outcome.transaction_id}, status: {status})."


def _json(value: Any) -> str:
    return json.dumps(value, default=str)
