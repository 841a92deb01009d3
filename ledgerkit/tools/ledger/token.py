"""
Token tools: fungible tokens, NFT collections, minting, association and
transfers.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from ledgerkit.tools.ledger.account import SERIALIZED_KEY_DESCRIPTION, HbarTransferEntry
from ledgerkit.tools.transaction import ToolParams, TransactionTool

DEFAULT_FT_MAX_SUPPLY = 1_000_000_000_000_000


class TokenKeyParams(ToolParams):
    admin_key: str | None = Field(
        None, description=f"Optional. Admin key ({SERIALIZED_KEY_DESCRIPTION}). Required for a mutable token."
    )
    kyc_key: str | None = Field(None, description=f"Optional. KYC key ({SERIALIZED_KEY_DESCRIPTION}).")
    freeze_key: str | None = Field(None, description=f"Optional. Freeze key ({SERIALIZED_KEY_DESCRIPTION}).")
    wipe_key: str | None = Field(None, description=f"Optional. Wipe key ({SERIALIZED_KEY_DESCRIPTION}).")
    supply_key: str | None = Field(None, description=f"Optional. Supply key ({SERIALIZED_KEY_DESCRIPTION}).")
    fee_schedule_key: str | None = Field(
        None, description=f"Optional. Fee schedule key ({SERIALIZED_KEY_DESCRIPTION})."
    )
    pause_key: str | None = Field(None, description=f"Optional. Pause key ({SERIALIZED_KEY_DESCRIPTION}).")


# =============================================================================
# Creation
# =============================================================================


class CreateFungibleTokenParams(TokenKeyParams):
    token_name: str = Field(..., description="The publicly visible name of the token.")
    token_symbol: str | None = Field(None, description="The publicly visible symbol of the token.")
    treasury_account_id: str | None = Field(None, description='Treasury account ID (e.g. "0.0.xxxx").')
    initial_supply: int | str = Field(..., description="Initial supply in the smallest denomination.")
    decimals: int = Field(0, ge=0, description="Number of decimal places. Defaults to 0.")
    supply_type: Literal["FINITE", "INFINITE"] = Field(
        "FINITE", description="Supply type. Defaults to FINITE."
    )
    max_supply: int | str = Field(
        DEFAULT_FT_MAX_SUPPLY, description="Max supply if supplyType is FINITE."
    )
    memo: str | None = Field(None, description="Optional. Memo for the token.")
    auto_renew_account_id: str | None = None
    auto_renew_period: int | None = Field(None, gt=0)


class CreateFungibleTokenTool(TransactionTool):
    tool_name = "ledger_create_fungible_token"
    tool_description = (
        "Creates a new fungible token. Keys may be given as key strings or 'current_signer'."
    )
    title = "Create Fungible Token"
    params_model = CreateFungibleTokenParams
    service = "tokens"
    builder_method = "create_fungible_token"

    def note_for_default(self, field, value):
        if field == "decimals":
            return f"The number of decimal places for your token was automatically set to '{value}'."
        if field == "supply_type":
            return f"Your token's supply type was set to '{value}' by default."
        if field == "max_supply":
            return f"A maximum supply of '{int(value):,}' for the token was set by default."
        return None


class CreateNftParams(TokenKeyParams):
    token_name: str = Field(..., description="The publicly visible name of the NFT collection.")
    token_symbol: str | None = Field(None, description="The publicly visible symbol of the collection.")
    treasury_account_id: str | None = Field(None, description='Treasury account ID (e.g. "0.0.xxxx").')
    supply_type: Literal["FINITE", "INFINITE"] = Field(
        "FINITE", description="Supply type. Defaults to FINITE."
    )
    max_supply: int | str | None = Field(
        None, description="Max number of NFTs if supplyType is FINITE."
    )
    memo: str | None = Field(None, description="Optional. Memo for the collection.")
    auto_renew_account_id: str | None = None
    auto_renew_period: int | None = Field(None, gt=0)


class CreateNftTool(TransactionTool):
    tool_name = "ledger_create_nft"
    tool_description = (
        "Creates a new NFT collection. Without a supply key the agent's key is used so it can mint."
    )
    title = "Create NFT Collection"
    params_model = CreateNftParams
    service = "tokens"
    builder_method = "create_non_fungible_token"

    def note_for_default(self, field, value):
        if field == "supply_type":
            return f"Your NFT collection's supply type was set to '{value}' by default."
        return None


# =============================================================================
# Minting
# =============================================================================


class MintFungibleTokenParams(ToolParams):
    token_id: str = Field(..., description='The token to mint (e.g. "0.0.xxxx").')
    amount: int | str = Field(..., description="Amount in the smallest denomination.")


class MintFungibleTokenTool(TransactionTool):
    tool_name = "ledger_mint_fungible_token"
    tool_description = "Mints additional supply of a fungible token to its treasury."
    title = "Mint Fungible Token"
    params_model = MintFungibleTokenParams
    service = "tokens"
    builder_method = "mint_fungible_token"


class MintNftParams(ToolParams):
    token_id: str = Field(..., description='The NFT collection (e.g. "0.0.xxxx").')
    metadata: list[str] = Field(
        ..., min_length=1, description="One metadata entry (e.g. an IPFS URI) per NFT to mint."
    )


class MintNftTool(TransactionTool):
    tool_name = "ledger_mint_nft"
    tool_description = "Mints NFTs in an existing collection, one per metadata entry."
    title = "Mint NFT"
    params_model = MintNftParams
    service = "tokens"
    builder_method = "mint_non_fungible_token"


# =============================================================================
# Association and transfers
# =============================================================================


class AssociateTokensParams(ToolParams):
    account_id: str = Field(..., description="The account to associate the tokens with.")
    token_ids: list[str] = Field(..., min_length=1, description="Tokens to associate.")


class AssociateTokensTool(TransactionTool):
    tool_name = "ledger_associate_tokens"
    tool_description = "Associates one or more tokens with an account so it can hold them."
    title = "Associate Tokens"
    params_model = AssociateTokensParams
    service = "tokens"
    builder_method = "associate_tokens"


class FungibleTransferEntry(ToolParams):
    type: Literal["fungible"] = "fungible"
    token_id: str
    account_id: str
    amount: int | str = Field(..., description="Signed amount in the smallest denomination.")


class NftTransferEntry(ToolParams):
    type: Literal["nft"]
    token_id: str
    serial: int | str
    sender_account_id: str
    receiver_account_id: str
    is_approved: bool = False


class TransferTokensParams(ToolParams):
    token_transfers: list[FungibleTransferEntry | NftTransferEntry] = Field(
        default_factory=list,
        description="Fungible (signed amounts) and NFT transfers.",
    )
    hbar_transfers: list[HbarTransferEntry] = Field(
        default_factory=list,
        description="Optional HBAR transfers in the same transaction.",
    )
    memo: str | None = None


class TransferTokensTool(TransactionTool):
    tool_name = "ledger_transfer_tokens"
    tool_description = (
        "Transfers fungible tokens, NFTs and HBAR in a single transaction. Fungible "
        "amounts for each token must sum to zero."
    )
    title = "Transfer Tokens"
    params_model = TransferTokensParams
    service = "tokens"
    builder_method = "transfer_tokens"
