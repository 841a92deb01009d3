"""
Mirror node client.

Read-only access to the ledger's mirror node REST API. MirrorNodeClient
implements the DirectoryService contract (lookup_public_key) used by the
schedule composer, plus the account / token / topic / schedule lookups
the rest of the kit needs.

Usage:
    async with MirrorNodeClient(MirrorNodeConfig.for_network("testnet")) as mirror:
        key = await mirror.lookup_public_key("0.0.5005")
        info = await mirror.get_account("0.0.5005")

API Reference:
    https://docs.hedera.com/hedera/sdks-and-apis/rest-api
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ledgerkit.integrations.base import IntegrationClient, IntegrationConfig, IntegrationError
from ledgerkit.integrations.mirror.schemas import (
    AccountBalance,
    AccountInfo,
    ScheduleInfo,
    TokenInfo,
    TopicInfo,
)
from ledgerkit.ledger.ids import EntityId
from ledgerkit.ledger.keys import KeyAlgorithm, PublicKey

logger = logging.getLogger(__name__)

NETWORK_URLS: dict[str, str] = {
    "mainnet": "https://mainnet-public.mirrornode.hedera.com",
    "testnet": "https://testnet.mirrornode.hedera.com",
    "previewnet": "https://previewnet.mirrornode.hedera.com",
}

_KEY_TYPES: dict[str, KeyAlgorithm] = {
    "ED25519": KeyAlgorithm.ED25519,
    "ECDSA_SECP256K1": KeyAlgorithm.ECDSA_SECP256K1,
}


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class MirrorNodeConfig(IntegrationConfig):
    """Configuration for the mirror node client."""

    base_url: str = NETWORK_URLS["testnet"]
    network: str = "testnet"

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("Mirror node base URL is required")

    @classmethod
    def for_network(
        cls,
        network: str,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        **kwargs,
    ) -> MirrorNodeConfig:
        """
        Build a config for a named network.

        Raises:
            ValueError: For an unknown network without an explicit base_url
        """
        if base_url is None:
            try:
                base_url = NETWORK_URLS[network]
            except KeyError:
                raise ValueError(f"Unknown network: {network!r}") from None
        return cls(base_url=base_url.rstrip("/"), network=network, api_key=api_key, **kwargs)


# =============================================================================
# Client
# =============================================================================


class MirrorNodeClient(IntegrationClient):
    """
    Async mirror node client.

    Retries follow IntegrationClient: timeouts, network errors, 429 and 5xx
    are retried with exponential backoff.
    """

    def __init__(self, config: MirrorNodeConfig | None = None):
        super().__init__(config or MirrorNodeConfig())
        if self.config.api_key:
            logger.info(f"[{self.name}] Using API key for mirror node requests")

    @property
    def name(self) -> str:
        return "mirror"

    def _get_auth_headers(self) -> dict[str, str]:
        if not self.config.api_key:
            return {}
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "X-API-Key": self.config.api_key,
        }

    # =========================================================================
    # DirectoryService
    # =========================================================================

    async def lookup_public_key(self, account_id: str) -> PublicKey:
        """
        Return the single public key controlling an account.

        Raises:
            NotFoundError: If the account does not exist
            IntegrationError: If the account has no key or a key list
        """
        logger.info(f"[{self.name}] Getting public key for account {account_id}")
        account = await self.get_account(account_id)

        if account.key is None:
            raise IntegrationError(
                f"Failed to retrieve public key for account ID: {account_id}", self.name
            )

        algorithm = _KEY_TYPES.get(account.key.type)
        if algorithm is None:
            raise IntegrationError(
                f"Account {account_id} key is not a single key (type={account.key.type})",
                self.name,
            )

        key = PublicKey.from_string(account.key.key)
        if key.algorithm != algorithm:
            raise IntegrationError(
                f"Account {account_id} key does not match its reported type {account.key.type}",
                self.name,
            )
        return key

    # =========================================================================
    # Lookups
    # =========================================================================

    async def get_account(self, account_id: str) -> AccountInfo:
        response = await self._request("GET", f"/api/v1/accounts/{_entity(account_id)}")
        return AccountInfo.model_validate(response.json())

    async def get_account_balance(self, account_id: str) -> AccountBalance:
        """Balance of an account in tinybars, with token balances."""
        account = await self.get_account(account_id)
        return account.balance or AccountBalance()

    async def get_token(self, token_id: str) -> TokenInfo:
        response = await self._request("GET", f"/api/v1/tokens/{_entity(token_id)}")
        return TokenInfo.model_validate(response.json())

    async def get_topic(self, topic_id: str) -> TopicInfo:
        response = await self._request("GET", f"/api/v1/topics/{_entity(topic_id)}")
        return TopicInfo.model_validate(response.json())

    async def get_schedule(self, schedule_id: str) -> ScheduleInfo:
        response = await self._request("GET", f"/api/v1/schedules/{_entity(schedule_id)}")
        return ScheduleInfo.model_validate(response.json())


def _entity(value: str) -> str:
    return str(EntityId.parse(value))
