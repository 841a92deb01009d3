"""
Concrete ledger tools, one per common operation.
"""

from ledgerkit.tools.ledger.account import (
    CreateAccountTool,
    DeleteAccountTool,
    SignScheduledTransactionTool,
    TransferHbarTool,
)
from ledgerkit.tools.ledger.contract import ExecuteContractTool
from ledgerkit.tools.ledger.file import AppendFileTool, CreateFileTool
from ledgerkit.tools.ledger.token import (
    AssociateTokensTool,
    CreateFungibleTokenTool,
    CreateNftTool,
    MintFungibleTokenTool,
    MintNftTool,
    TransferTokensTool,
)
from ledgerkit.tools.ledger.topic import CreateTopicTool, DeleteTopicTool, SubmitTopicMessageTool

LEDGER_TOOLS = (
    CreateAccountTool,
    TransferHbarTool,
    DeleteAccountTool,
    SignScheduledTransactionTool,
    CreateFungibleTokenTool,
    CreateNftTool,
    MintFungibleTokenTool,
    MintNftTool,
    AssociateTokensTool,
    TransferTokensTool,
    CreateTopicTool,
    SubmitTopicMessageTool,
    DeleteTopicTool,
    CreateFileTool,
    AppendFileTool,
    ExecuteContractTool,
)

__all__ = [
    "AppendFileTool",
    "AssociateTokensTool",
    "CreateAccountTool",
    "CreateFileTool",
    "CreateFungibleTokenTool",
    "CreateNftTool",
    "CreateTopicTool",
    "DeleteAccountTool",
    "DeleteTopicTool",
    "ExecuteContractTool",
    "LEDGER_TOOLS",
    "MintFungibleTokenTool",
    "MintNftTool",
    "SignScheduledTransactionTool",
    "SubmitTopicMessageTool",
    "TransferHbarTool",
    "TransferTokensTool",
]
