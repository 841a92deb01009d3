"""
Domain builders.
"""

from ledgerkit.builders.account import AccountBuilder
from ledgerkit.builders.base import DEFAULT_AUTORENEW_PERIOD_SECONDS, ServiceBuilder
from ledgerkit.builders.contract import ContractBuilder
from ledgerkit.builders.file import MAX_FILE_APPEND_BYTES, FileBuilder
from ledgerkit.builders.token import TokenBuilder, generate_default_symbol
from ledgerkit.builders.topic import MAX_SINGLE_MESSAGE_BYTES, TopicBuilder

__all__ = [
    "AccountBuilder",
    "ContractBuilder",
    "DEFAULT_AUTORENEW_PERIOD_SECONDS",
    "FileBuilder",
    "MAX_FILE_APPEND_BYTES",
    "MAX_SINGLE_MESSAGE_BYTES",
    "ServiceBuilder",
    "TokenBuilder",
    "TopicBuilder",
    "generate_default_symbol",
]
