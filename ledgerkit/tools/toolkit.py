"""
Ledger toolkit factory.

Usage:
    kit = LedgerAgentKit(ledger=client, signer=signer, directory=mirror, config=config)
    registry = build_ledger_toolkit(kit)
    schemas = registry.to_llm_schemas()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from ledgerkit.tools.ledger import LEDGER_TOOLS
from ledgerkit.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from ledgerkit.kit import LedgerAgentKit
    from ledgerkit.tools.transaction import TransactionTool

logger = logging.getLogger(__name__)


def build_ledger_toolkit(
    kit: LedgerAgentKit,
    *,
    tools: Iterable[type[TransactionTool]] = LEDGER_TOOLS,
    registry: ToolRegistry | None = None,
) -> ToolRegistry:
    """
    Register one instance of each ledger tool, bound to kit.

    Args:
        kit: The kit every tool stages through
        tools: Tool classes to register (defaults to all ledger tools)
        registry: Existing registry to extend

    Raises:
        ToolRegistryError: If a tool name is already registered
    """
    registry = registry if registry is not None else ToolRegistry()
    for tool_class in tools:
        registry.register(tool_class(kit))
    logger.info(
        f"[toolkit] Registered {len(registry)} tools "
        f"(mode: {kit.config.operating_mode.value})"
    )
    return registry
