"""
Topic builder: consensus topics and messages.
"""

from __future__ import annotations

import logging
from typing import Any

from ledgerkit.builders.base import DEFAULT_AUTORENEW_PERIOD_SECONDS, ServiceBuilder, staging
from ledgerkit.operations.kinds import KeyRole, OperationKind, role_fields
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)

MAX_SINGLE_MESSAGE_BYTES = 1000

TOPIC_KEY_FIELDS = role_fields(KeyRole.ADMIN, KeyRole.FEE_SCHEDULE)


class TopicBuilder(ServiceBuilder):
    """Stages topic operations."""

    @staging
    def create_topic(
        self,
        *,
        memo: str | None = None,
        admin_key: Any = None,
        submit_key: Any = None,
        fee_schedule_key: Any = None,
        auto_renew_period: int | None = None,
        auto_renew_account_id: str | None = None,
    ) -> StagedOperation:
        notes: list[str] = []

        if auto_renew_period is None:
            auto_renew_period = DEFAULT_AUTORENEW_PERIOD_SECONDS
            notes.append(
                f"Default auto-renew period of {DEFAULT_AUTORENEW_PERIOD_SECONDS} seconds "
                f"applied for topic."
            )

        body = {
            "topic_memo": memo,
            "admin_key": self._optional_role_key("admin_key", admin_key, notes),
            "submit_key": self._key(submit_key),
            "fee_schedule_key": self._optional_role_key("fee_schedule_key", fee_schedule_key, notes),
            "auto_renew_period": auto_renew_period,
            "auto_renew_account_id": self._id(auto_renew_account_id),
        }
        return self._stage(OperationKind.TOPIC_CREATE, body, notes, TOPIC_KEY_FIELDS)

    @staging
    def update_topic(
        self,
        *,
        topic_id: str,
        memo: str | None = None,
        admin_key: Any = None,
        submit_key: Any = None,
        auto_renew_period: int | None = None,
        auto_renew_account_id: str | None = None,
    ) -> StagedOperation:
        notes: list[str] = []
        body = {
            "topic_id": self._id(topic_id),
            "topic_memo": memo,
            "admin_key": self._optional_role_key("admin_key", admin_key, notes),
            "submit_key": self._key(submit_key),
            "auto_renew_period": auto_renew_period,
            "auto_renew_account_id": self._id(auto_renew_account_id),
        }
        return self._stage(OperationKind.TOPIC_UPDATE, body, notes, TOPIC_KEY_FIELDS)

    @staging
    def delete_topic(self, *, topic_id: str) -> StagedOperation:
        return self._stage(OperationKind.TOPIC_DELETE, {"topic_id": self._id(topic_id)})

    @staging
    def submit_message(
        self,
        *,
        topic_id: str,
        message: str | bytes,
        max_chunks: int | None = None,
        chunk_size: int | None = None,
    ) -> StagedOperation:
        """
        Stage a message submission.

        Messages above 1,000 bytes are staged anyway with a logged warning;
        the network may reject them.
        """
        if isinstance(message, bytes):
            size = len(message)
            text = message.decode("utf-8")
        else:
            size = len(message.encode("utf-8"))
            text = message

        if size > MAX_SINGLE_MESSAGE_BYTES:
            logger.warning(
                f"[topics] Message size ({size} bytes) exceeds recommended single transaction "
                f"limit ({MAX_SINGLE_MESSAGE_BYTES} bytes)"
            )

        body = {
            "topic_id": self._id(topic_id),
            "message": text,
            "max_chunks": max_chunks,
            "chunk_size": chunk_size,
        }
        return self._stage(OperationKind.TOPIC_MESSAGE_SUBMIT, body)
