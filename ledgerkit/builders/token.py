"""
Token builder: fungible and non-fungible token operations.
"""

from __future__ import annotations

import base64
import logging
import re
from typing import Any, Iterable, Mapping

from ledgerkit.builders.base import DEFAULT_AUTORENEW_PERIOD_SECONDS, ServiceBuilder, staging
from ledgerkit.execution.policy import OperatingMode
from ledgerkit.ledger.amounts import hbar_to_tinybars, normalize_amount
from ledgerkit.ledger.keys import CURRENT_SIGNER
from ledgerkit.operations.kinds import KeyRole, OperationKind, role_fields
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)

FINITE = "FINITE"
INFINITE = "INFINITE"

TOKEN_KEY_FIELDS = role_fields(
    KeyRole.ADMIN,
    KeyRole.KYC,
    KeyRole.FREEZE,
    KeyRole.WIPE,
    KeyRole.SUPPLY,
    KeyRole.FEE_SCHEDULE,
    KeyRole.PAUSE,
)


def generate_default_symbol(token_name: str | None) -> str:
    """Up to five alphanumerics of the name, upper-cased; 'TOKEN' if none."""
    symbol = re.sub(r"[^a-zA-Z0-9]", "", token_name or "")[:5].upper()
    return symbol or "TOKEN"


class TokenBuilder(ServiceBuilder):
    """Stages token operations."""

    # =========================================================================
    # Creation
    # =========================================================================

    @staging
    def create_fungible_token(
        self,
        *,
        token_name: str,
        token_symbol: str | None = None,
        treasury_account_id: str | None = None,
        decimals: int = 0,
        initial_supply: int | str = 0,
        supply_type: str | None = None,
        max_supply: int | str | None = None,
        memo: str | None = None,
        auto_renew_account_id: str | None = None,
        auto_renew_period: int | None = None,
        **keys: Any,
    ) -> StagedOperation:
        """
        Stage a fungible token creation.

        Role keys (admin_key, kyc_key, freeze_key, wipe_key, supply_key,
        fee_schedule_key, pause_key) are passed as keyword arguments and may
        be "current_signer".
        """
        notes: list[str] = []
        treasury = self._treasury(treasury_account_id, "token", notes)
        symbol = self._symbol(token_name, token_symbol, "a token symbol", "token name", notes)
        supply = self._supply_type(supply_type, INFINITE, "", notes)

        body = {
            "token_type": "FUNGIBLE_COMMON",
            "token_name": token_name,
            "token_symbol": symbol,
            "treasury_account_id": treasury,
            "decimals": decimals,
            "initial_supply": normalize_amount(initial_supply),
            "supply_type": supply,
            "max_supply": (
                normalize_amount(max_supply) if supply == FINITE and max_supply else None
            ),
            "token_memo": memo,
            **self._auto_renew(auto_renew_account_id, auto_renew_period, "token", notes),
            **self._role_keys(keys, notes),
        }
        return self._stage(OperationKind.TOKEN_CREATE, body, notes, TOKEN_KEY_FIELDS)

    @staging
    def create_non_fungible_token(
        self,
        *,
        token_name: str,
        token_symbol: str | None = None,
        treasury_account_id: str | None = None,
        supply_type: str | None = None,
        max_supply: int | str | None = None,
        memo: str | None = None,
        auto_renew_account_id: str | None = None,
        auto_renew_period: int | None = None,
        **keys: Any,
    ) -> StagedOperation:
        """
        Stage an NFT collection creation.

        Without a supply key the operator key is used, so the agent can mint.
        """
        notes: list[str] = []
        treasury = self._treasury(treasury_account_id, "NFT collection", notes)
        symbol = self._symbol(
            token_name, token_symbol, "an NFT collection symbol", "collection name", notes
        )
        supply = self._supply_type(supply_type, FINITE, " for NFT", notes)

        if supply == FINITE and not max_supply:
            logger.warning("[tokens] NFT supply type is FINITE but no max supply was provided")
            notes.append(
                "For this FINITE NFT collection, a specific maximum supply was not provided. "
                "The network might apply its own default or limit minting."
            )

        role_keys = self._role_keys(keys, notes)
        if "supply_key" not in role_keys:
            role_keys["supply_key"] = CURRENT_SIGNER
            notes.append("The supply key was set to your agent's key so the collection can be minted.")

        body = {
            "token_type": "NON_FUNGIBLE_UNIQUE",
            "token_name": token_name,
            "token_symbol": symbol,
            "treasury_account_id": treasury,
            "decimals": 0,
            "initial_supply": 0,
            "supply_type": supply,
            "max_supply": (
                normalize_amount(max_supply) if supply == FINITE and max_supply else None
            ),
            "token_memo": memo,
            **self._auto_renew(auto_renew_account_id, auto_renew_period, "NFT collection", notes),
            **role_keys,
        }
        return self._stage(OperationKind.TOKEN_CREATE, body, notes, TOKEN_KEY_FIELDS)

    # =========================================================================
    # Supply
    # =========================================================================

    @staging
    def mint_fungible_token(self, *, token_id: str, amount: int | str) -> StagedOperation:
        body = {"token_id": self._id(token_id), "amount": normalize_amount(amount)}
        return self._stage(OperationKind.TOKEN_MINT, body)

    @staging
    def burn_fungible_token(self, *, token_id: str, amount: int | str) -> StagedOperation:
        body = {"token_id": self._id(token_id), "amount": normalize_amount(amount)}
        return self._stage(OperationKind.TOKEN_BURN, body)

    @staging
    def mint_non_fungible_token(
        self,
        *,
        token_id: str,
        metadata: Iterable[str | bytes],
    ) -> StagedOperation:
        """Stage an NFT mint; each metadata entry becomes one serial."""
        encoded = [
            base64.b64encode(m.encode("utf-8") if isinstance(m, str) else m).decode("ascii")
            for m in metadata
        ]
        if not encoded:
            raise ValueError("At least one metadata entry is required to mint NFTs.")
        return self._stage(
            OperationKind.TOKEN_MINT,
            {"token_id": self._id(token_id), "metadata": encoded},
        )

    @staging
    def burn_non_fungible_token(
        self,
        *,
        token_id: str,
        serials: Iterable[int | str],
    ) -> StagedOperation:
        serial_numbers = [normalize_amount(s) for s in serials]
        if not serial_numbers:
            raise ValueError("Serial numbers are required to burn NFTs.")
        return self._stage(
            OperationKind.TOKEN_BURN,
            {"token_id": self._id(token_id), "serials": serial_numbers},
        )

    # =========================================================================
    # Transfers
    # =========================================================================

    @staging
    def transfer_tokens(
        self,
        *,
        token_transfers: Iterable[Mapping[str, Any]] = (),
        hbar_transfers: Iterable[Mapping[str, Any]] = (),
        memo: str | None = None,
    ) -> StagedOperation:
        """
        Stage a mixed transfer of fungible tokens, NFTs and hbar.

        token_transfers entries are either
            {"type": "fungible", "token_id", "account_id", "amount"} or
            {"type": "nft", "token_id", "serial", "sender_account_id",
             "receiver_account_id", "is_approved"}.
        hbar_transfers entries are {"account_id", "amount"} in hbar.
        """
        fungible: list[dict[str, Any]] = []
        nfts: list[dict[str, Any]] = []

        for entry in token_transfers:
            kind = entry.get("type", "fungible")
            if kind == "fungible":
                fungible.append(
                    {
                        "token_id": self._id(entry["token_id"]),
                        "account_id": self._id(entry["account_id"]),
                        "amount": normalize_amount(entry["amount"]),
                    }
                )
            elif kind == "nft":
                nfts.append(self._nft_transfer(entry))
            else:
                raise ValueError(f"Unknown token transfer type: {kind!r}")

        hbar = [
            {"account_id": self._id(t["account_id"]), "amount": hbar_to_tinybars(t["amount"])}
            for t in hbar_transfers
        ]
        if not (fungible or nfts or hbar):
            raise ValueError("transfer_tokens requires at least one transfer.")

        body = {
            "token_transfers": fungible or None,
            "nft_transfers": nfts or None,
            "hbar_transfers": hbar or None,
        }
        return self._stage(OperationKind.CRYPTO_TRANSFER, body, memo=memo)

    @staging
    def transfer_nft(
        self,
        *,
        token_id: str,
        serial: int | str,
        sender_account_id: str,
        receiver_account_id: str,
        is_approved: bool = False,
        memo: str | None = None,
    ) -> StagedOperation:
        transfer = self._nft_transfer(
            {
                "token_id": token_id,
                "serial": serial,
                "sender_account_id": sender_account_id,
                "receiver_account_id": receiver_account_id,
                "is_approved": is_approved,
            }
        )
        return self._stage(OperationKind.CRYPTO_TRANSFER, {"nft_transfers": [transfer]}, memo=memo)

    @staging
    def airdrop_token(
        self,
        *,
        token_id: str,
        recipients: Iterable[Mapping[str, Any]],
        memo: str | None = None,
    ) -> StagedOperation:
        """
        Stage an airdrop from the operator account.

        Recipients with a zero or negative amount are skipped.
        """
        token = self._id(token_id)
        sender = self._operator_account()
        transfers: list[dict[str, Any]] = []

        for recipient in recipients:
            amount = normalize_amount(recipient["amount"])
            account = self._id(recipient["account_id"])
            if amount <= 0:
                logger.warning(f"[tokens] Skipping airdrop to {account} with non-positive amount")
                continue
            transfers.append({"token_id": token, "account_id": sender, "amount": -amount})
            transfers.append({"token_id": token, "account_id": account, "amount": amount})

        if not transfers:
            raise ValueError("No valid transfers generated for the airdrop. Check recipient amounts.")

        return self._stage(OperationKind.TOKEN_AIRDROP, {"token_transfers": transfers}, memo=memo)

    # =========================================================================
    # Account relationships
    # =========================================================================

    @staging
    def associate_tokens(self, *, account_id: str, token_ids: Iterable[str]) -> StagedOperation:
        body = {"account_id": self._id(account_id), "token_ids": self._ids(token_ids)}
        return self._stage(OperationKind.TOKEN_ASSOCIATE, body)

    @staging
    def dissociate_tokens(self, *, account_id: str, token_ids: Iterable[str]) -> StagedOperation:
        body = {"account_id": self._id(account_id), "token_ids": self._ids(token_ids)}
        return self._stage(OperationKind.TOKEN_DISSOCIATE, body)

    @staging
    def freeze_token_account(self, *, token_id: str, account_id: str) -> StagedOperation:
        return self._account_token_op(OperationKind.TOKEN_FREEZE, token_id, account_id)

    @staging
    def unfreeze_token_account(self, *, token_id: str, account_id: str) -> StagedOperation:
        return self._account_token_op(OperationKind.TOKEN_UNFREEZE, token_id, account_id)

    @staging
    def grant_kyc(self, *, token_id: str, account_id: str) -> StagedOperation:
        return self._account_token_op(OperationKind.TOKEN_GRANT_KYC, token_id, account_id)

    @staging
    def revoke_kyc(self, *, token_id: str, account_id: str) -> StagedOperation:
        return self._account_token_op(OperationKind.TOKEN_REVOKE_KYC, token_id, account_id)

    @staging
    def wipe_token_account(
        self,
        *,
        token_id: str,
        account_id: str,
        amount: int | str | None = None,
        serials: Iterable[int | str] | None = None,
    ) -> StagedOperation:
        if amount is None and not serials:
            raise ValueError("Either amount or serials is required to wipe a token account.")
        body = {
            "token_id": self._id(token_id),
            "account_id": self._id(account_id),
            "amount": normalize_amount(amount) if amount is not None else None,
            "serials": [normalize_amount(s) for s in serials] if serials else None,
        }
        return self._stage(OperationKind.TOKEN_WIPE, body)

    # =========================================================================
    # Token lifecycle
    # =========================================================================

    @staging
    def pause_token(self, *, token_id: str) -> StagedOperation:
        return self._stage(OperationKind.TOKEN_PAUSE, {"token_id": self._id(token_id)})

    @staging
    def unpause_token(self, *, token_id: str) -> StagedOperation:
        return self._stage(OperationKind.TOKEN_UNPAUSE, {"token_id": self._id(token_id)})

    @staging
    def delete_token(self, *, token_id: str) -> StagedOperation:
        return self._stage(OperationKind.TOKEN_DELETE, {"token_id": self._id(token_id)})

    @staging
    def update_token(
        self,
        *,
        token_id: str,
        token_name: str | None = None,
        token_symbol: str | None = None,
        treasury_account_id: str | None = None,
        memo: str | None = None,
        auto_renew_account_id: str | None = None,
        auto_renew_period: int | None = None,
        **keys: Any,
    ) -> StagedOperation:
        """Stage a token update; omitted fields are left unchanged."""
        logger.info(f"[tokens] Staging update for token {token_id}")
        notes: list[str] = []
        body = {
            "token_id": self._id(token_id),
            "token_name": token_name,
            "token_symbol": token_symbol,
            "treasury_account_id": self._id(treasury_account_id),
            "token_memo": memo,
            "auto_renew_account_id": self._id(auto_renew_account_id),
            "auto_renew_period": auto_renew_period,
            **self._role_keys(keys, notes),
        }
        return self._stage(OperationKind.TOKEN_UPDATE, body, notes, TOKEN_KEY_FIELDS)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _ids(self, values: Iterable[str]) -> list[str]:
        ids = [self._id(v) for v in values]
        if not ids:
            raise ValueError("At least one token id is required.")
        return ids

    def _account_token_op(self, kind: OperationKind, token_id: str, account_id: str) -> StagedOperation:
        return self._stage(kind, {"token_id": self._id(token_id), "account_id": self._id(account_id)})

    def _nft_transfer(self, entry: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "token_id": self._id(entry["token_id"]),
            "serial": normalize_amount(entry["serial"]),
            "sender_account_id": self._id(entry["sender_account_id"]),
            "receiver_account_id": self._id(entry["receiver_account_id"]),
            "is_approved": bool(entry.get("is_approved", False)),
        }

    def _role_keys(self, keys: Mapping[str, Any], notes: list[str]) -> dict[str, Any]:
        unknown = set(keys) - set(TOKEN_KEY_FIELDS)
        if unknown:
            raise TypeError(f"Unexpected token key arguments: {sorted(unknown)}")
        resolved = {
            name: self._optional_role_key(name, value, notes)
            for name, value in keys.items()
            if value is not None
        }
        return {name: value for name, value in resolved.items() if value is not None}

    def _treasury(self, treasury_account_id: str | None, what: str, notes: list[str]) -> str:
        if treasury_account_id is not None:
            return self._id(treasury_account_id)

        config = self.kit.config
        if config.user_account_id and config.operating_mode == OperatingMode.RETURN_BYTES:
            user = self._id(config.user_account_id)
            logger.info(f"[tokens] Using user account {user} as treasury in returnBytes mode")
            notes.append(
                f"Since no treasury was specified, your account ({user}) has been set "
                f"as the {what}'s treasury."
            )
            return user

        operator = self._operator_account()
        notes.append(
            f"Since no treasury was specified, the agent account ({operator}) has been set "
            f"as the {what}'s treasury."
        )
        return operator

    @staticmethod
    def _symbol(
        name: str,
        symbol: str | None,
        what: str,
        source: str,
        notes: list[str],
    ) -> str:
        if symbol:
            return symbol
        generated = generate_default_symbol(name)
        notes.append(
            f"We've generated {what} '{generated}' for you, based on the {source} '{name}'."
        )
        return generated

    @staticmethod
    def _supply_type(value: str | None, default: str, context: str, notes: list[str]) -> str:
        if value is None:
            notes.append(f"No supply type was specified{context}, defaulted to {default}.")
            return default
        upper = value.strip().upper()
        if upper in (FINITE, INFINITE):
            return upper
        logger.warning(f"[tokens] Invalid supply type {value!r}, defaulting to {default}")
        notes.append(f"Invalid supplyType string '{value}' received{context}, defaulted to {default}.")
        return default

    def _auto_renew(
        self,
        account_id: str | None,
        period: int | None,
        what: str,
        notes: list[str],
    ) -> dict[str, Any]:
        if account_id and period is None:
            period = DEFAULT_AUTORENEW_PERIOD_SECONDS
            notes.append(
                f"A standard auto-renew period of {DEFAULT_AUTORENEW_PERIOD_SECONDS // 86_400} "
                f"days has been set for this {what}."
            )
        return {"auto_renew_account_id": self._id(account_id), "auto_renew_period": period}
