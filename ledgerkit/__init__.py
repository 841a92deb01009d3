"""
ledgerkit - transaction staging and execution-mode resolution for ledger agents.

ledgerkit lets an agent prepare ledger operations and deliver them in the
way its configuration calls for:

- **Staging**: Domain builders turn parameters into one staged operation,
  recording a note for every default they apply
- **Meta Options**: Memo, explicit transaction id, node selection and
  scheduling overrides applied just before delivery
- **Execution Resolution**: Execute directly, return unsigned bytes for the
  user to sign, or wrap in a schedule the user co-signs
- **Agent Tools**: MCP-aligned tools that report outcomes, notes included

Quick Start:
    >>> from ledgerkit import ExecutionConfig, LedgerAgentKit, OperatingMode
    >>>
    >>> kit = LedgerAgentKit(
    ...     ledger=client,
    ...     signer=signer,
    ...     config=ExecutionConfig(operating_mode=OperatingMode.AUTONOMOUS),
    ... )
    >>> topics = kit.topics()
    >>> topics.create_topic(memo="daily reports")
    >>> outcome = await topics.resolve()
"""

__version__ = "0.1.0"

from ledgerkit.errors import LedgerKitError
from ledgerkit.execution import (
    ExecutionConfig,
    ExecutionOutcome,
    ExecutionResolver,
    MetaOptions,
    OperatingMode,
    OperationPolicy,
)
from ledgerkit.kit import LedgerAgentKit
from ledgerkit.ledger import CURRENT_SIGNER, BaseLedgerClient, PrivateKeySigner, Receipt
from ledgerkit.tools import ToolRegistry, build_ledger_toolkit

__all__ = [
    # Version info
    "__version__",
    # Kit
    "LedgerAgentKit",
    "LedgerKitError",
    # Execution
    "ExecutionConfig",
    "ExecutionOutcome",
    "ExecutionResolver",
    "MetaOptions",
    "OperatingMode",
    "OperationPolicy",
    # Ledger
    "BaseLedgerClient",
    "CURRENT_SIGNER",
    "PrivateKeySigner",
    "Receipt",
    # Tools
    "ToolRegistry",
    "build_ledger_toolkit",
]
