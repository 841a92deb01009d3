"""
Ledger vocabulary: identifiers, keys, amounts and collaborator contracts.
"""

from ledgerkit.ledger.amounts import format_hbar, hbar_to_tinybars, normalize_amount
from ledgerkit.ledger.client import BaseLedgerClient
from ledgerkit.ledger.ids import EntityId, TransactionId
from ledgerkit.ledger.interfaces import DirectoryService, LedgerClient, Receipt, Signer
from ledgerkit.ledger.keys import (
    CURRENT_SIGNER,
    Key,
    KeyAlgorithm,
    KeyList,
    KeyResolver,
    PublicKey,
    derive_public_key,
    key_from_wire,
    key_to_wire,
)
from ledgerkit.ledger.signer import PrivateKeySigner

__all__ = [
    "BaseLedgerClient",
    "CURRENT_SIGNER",
    "DirectoryService",
    "EntityId",
    "Key",
    "KeyAlgorithm",
    "KeyList",
    "KeyResolver",
    "LedgerClient",
    "PrivateKeySigner",
    "PublicKey",
    "Receipt",
    "Signer",
    "TransactionId",
    "derive_public_key",
    "format_hbar",
    "hbar_to_tinybars",
    "key_from_wire",
    "key_to_wire",
    "normalize_amount",
]
