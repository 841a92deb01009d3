"""
File builder: ledger file storage.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Iterable

from ledgerkit.builders.base import ServiceBuilder, staging
from ledgerkit.ledger.keys import key_to_wire
from ledgerkit.operations.kinds import OperationKind
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)

MAX_FILE_APPEND_BYTES = 6000


def _contents(value: str | bytes | None) -> bytes | None:
    if value is None:
        return None
    return value.encode("utf-8") if isinstance(value, str) else value


def _encode(data: bytes | None) -> str | None:
    return base64.b64encode(data).decode("ascii") if data is not None else None


class FileBuilder(ServiceBuilder):
    """Stages file operations. Contents travel base64-encoded in the body."""

    @staging
    def create_file(
        self,
        *,
        contents: str | bytes | None = None,
        keys: Iterable[Any] | None = None,
        memo: str | None = None,
    ) -> StagedOperation:
        body = {
            "contents": _encode(_contents(contents)),
            "keys": self._keys(keys),
            "file_memo": memo,
        }
        return self._stage(OperationKind.FILE_CREATE, body)

    @staging
    def append_file(self, *, file_id: str, contents: str | bytes) -> StagedOperation:
        """
        Stage a file append.

        Contents above 6,000 bytes are truncated to fit one transaction, with a note.
        """
        notes: list[str] = []
        data = _contents(contents) or b""

        if len(data) > MAX_FILE_APPEND_BYTES:
            logger.warning(
                f"[files] Content size ({len(data)} bytes) exceeds single transaction limit "
                f"({MAX_FILE_APPEND_BYTES} bytes); only the first chunk will be staged"
            )
            notes.append(
                f"Content for file append was truncated to {MAX_FILE_APPEND_BYTES} bytes "
                f"due to single transaction limit."
            )
            data = data[:MAX_FILE_APPEND_BYTES]

        body = {"file_id": self._id(file_id), "contents": _encode(data)}
        return self._stage(OperationKind.FILE_APPEND, body, notes)

    @staging
    def update_file(
        self,
        *,
        file_id: str,
        contents: str | bytes | None = None,
        keys: Iterable[Any] | None = None,
        memo: str | None = None,
    ) -> StagedOperation:
        body = {
            "file_id": self._id(file_id),
            "contents": _encode(_contents(contents)),
            "keys": self._keys(keys),
            "file_memo": memo,
        }
        return self._stage(OperationKind.FILE_UPDATE, body)

    @staging
    def delete_file(self, *, file_id: str) -> StagedOperation:
        return self._stage(OperationKind.FILE_DELETE, {"file_id": self._id(file_id)})

    def _keys(self, keys: Iterable[Any] | None) -> list[Any] | None:
        if keys is None:
            return None
        resolved = [self.keys.resolve(k) for k in keys]
        return [key_to_wire(k) for k in resolved if k is not None] or None
