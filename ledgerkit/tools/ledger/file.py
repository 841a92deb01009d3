"""
File tools: create files and append to them.
"""

from __future__ import annotations

from pydantic import Field

from ledgerkit.tools.transaction import ToolParams, TransactionTool


class CreateFileParams(ToolParams):
    contents: str | None = Field(None, description="Optional. Initial file contents (text).")
    keys: list[str] | None = Field(
        None, description="Optional. Keys that must sign to modify or delete the file."
    )
    memo: str | None = Field(None, description="Optional. Memo for the file.")


class CreateFileTool(TransactionTool):
    tool_name = "ledger_create_file"
    tool_description = "Creates a new file with optional initial contents."
    title = "Create File"
    params_model = CreateFileParams
    service = "files"
    builder_method = "create_file"


class AppendFileParams(ToolParams):
    file_id: str = Field(..., description='The file to append to (e.g. "0.0.xxxx").')
    contents: str = Field(
        ..., description="Contents to append. Only the first 6000 bytes fit in one transaction."
    )


class AppendFileTool(TransactionTool):
    tool_name = "ledger_append_file"
    tool_description = "Appends contents to an existing file."
    title = "Append File"
    params_model = AppendFileParams
    service = "files"
    builder_method = "append_file"
