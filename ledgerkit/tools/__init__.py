"""
Agent tool layer.

Tools wrap builders into MCP-aligned callable units. Every ledger tool
stages one operation and returns the ExecutionOutcome as structured
content.
"""

from ledgerkit.tools.base import ContentBlock, ContentType, Tool, ToolAnnotations, ToolResult
from ledgerkit.tools.registry import ToolRegistry, ToolRegistryError
from ledgerkit.tools.toolkit import build_ledger_toolkit
from ledgerkit.tools.transaction import ToolParams, TransactionTool

__all__ = [
    "ContentBlock",
    "ContentType",
    "Tool",
    "ToolAnnotations",
    "ToolParams",
    "ToolRegistry",
    "ToolRegistryError",
    "ToolResult",
    "TransactionTool",
    "build_ledger_toolkit",
]
