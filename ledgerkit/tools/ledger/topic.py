"""
Topic tools: create and delete topics, submit messages.
"""

from __future__ import annotations

from pydantic import Field

from ledgerkit.execution.policy import OperationPolicy
from ledgerkit.tools.ledger.account import SERIALIZED_KEY_DESCRIPTION
from ledgerkit.tools.transaction import ToolParams, TransactionTool


class CreateTopicParams(ToolParams):
    memo: str | None = Field(None, description="Optional. Memo for the topic.")
    admin_key: str | None = Field(
        None, description=f"Optional. Admin key for the topic ({SERIALIZED_KEY_DESCRIPTION})."
    )
    submit_key: str | None = Field(
        None, description="Optional. Submit key for the topic (public or private key string)."
    )
    fee_schedule_key: str | None = Field(
        None, description=f"Optional. Fee schedule key ({SERIALIZED_KEY_DESCRIPTION})."
    )
    auto_renew_period: int | None = Field(
        None, gt=0, description="Optional. Auto-renewal period in seconds (e.g. 7776000 for 90 days)."
    )
    auto_renew_account_id: str | None = Field(
        None, description='Optional. Account ID for auto-renewal payments (e.g. "0.0.xxxx").'
    )


class CreateTopicTool(TransactionTool):
    """Topic creation is never scheduled."""

    tool_name = "ledger_create_topic"
    tool_description = "Creates a new consensus topic. The builder handles defaults and key parsing."
    title = "Create Topic"
    params_model = CreateTopicParams
    service = "topics"
    builder_method = "create_topic"
    policy = OperationPolicy(never_schedule=True)


class SubmitTopicMessageParams(ToolParams):
    topic_id: str = Field(..., description='The topic (e.g. "0.0.xxxx").')
    message: str = Field(..., description="The message to submit.")
    max_chunks: int | None = Field(None, gt=0)
    chunk_size: int | None = Field(None, gt=0)


class SubmitTopicMessageTool(TransactionTool):
    tool_name = "ledger_submit_topic_message"
    tool_description = "Submits a message to a consensus topic."
    title = "Submit Topic Message"
    params_model = SubmitTopicMessageParams
    service = "topics"
    builder_method = "submit_message"


class DeleteTopicParams(ToolParams):
    topic_id: str = Field(..., description='The topic to delete (e.g. "0.0.xxxx").')


class DeleteTopicTool(TransactionTool):
    tool_name = "ledger_delete_topic"
    tool_description = "Deletes a consensus topic. Requires the topic's admin key."
    title = "Delete Topic"
    params_model = DeleteTopicParams
    service = "topics"
    builder_method = "delete_topic"
    destructive = True
