"""
LedgerAgentKit: the facade an agent holds.

The kit owns one ExecutionResolver and hands out fresh builders. Builders
are cheap and single-use per call; the resolver and its collaborators are
shared.

Usage:
    settings = settings_from_env()
    kit = LedgerAgentKit.from_settings(settings, ledger=GrpcLedgerClient(...))

    topics = kit.topics()
    topics.create_topic(memo="daily reports")
    outcome = await topics.resolve()

    registry = build_ledger_toolkit(kit)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ledgerkit.builders import (
    AccountBuilder,
    ContractBuilder,
    FileBuilder,
    TokenBuilder,
    TopicBuilder,
)
from ledgerkit.execution.policy import ExecutionConfig
from ledgerkit.execution.resolver import ExecutionResolver
from ledgerkit.integrations.mirror import MirrorNodeClient, MirrorNodeConfig
from ledgerkit.ledger.ids import EntityId
from ledgerkit.ledger.signer import PrivateKeySigner

if TYPE_CHECKING:
    from ledgerkit.config.schemas import KitSettings
    from ledgerkit.ledger.interfaces import DirectoryService, LedgerClient, Signer

logger = logging.getLogger(__name__)


class LedgerAgentKit:
    """
    Entry point for staging and delivering ledger operations.

    Attributes:
        ledger: Network client (freeze, serialize, submit)
        signer: Operator identity, if the agent can sign
        directory: Mirror node lookups, if available
        config: Execution configuration shared by every builder
    """

    def __init__(
        self,
        *,
        ledger: LedgerClient,
        signer: Signer | None = None,
        directory: DirectoryService | None = None,
        config: ExecutionConfig | None = None,
    ):
        self.ledger = ledger
        self.signer = signer
        self.directory = directory
        self.config = config or ExecutionConfig()
        self.resolver = ExecutionResolver(
            ledger=ledger,
            signer=signer,
            directory=directory,
            config=self.config,
        )
        logger.info(
            f"[kit] Initialized (mode: {self.config.operating_mode.value}, "
            f"user: {self.config.user_account_id or 'none'})"
        )

    @classmethod
    def from_settings(cls, settings: KitSettings, *, ledger: LedgerClient) -> LedgerAgentKit:
        """
        Build a kit from settings: operator signer plus a mirror node client.

        Raises:
            ValueError: If an operator key is configured without an operator account
        """
        signer = None
        if settings.operator_private_key is not None:
            if settings.operator_account_id is None:
                raise ValueError("operator_account_id is required with operator_private_key")
            signer = PrivateKeySigner(
                settings.operator_account_id, settings.operator_private_key, ledger
            )

        mirror_api_key = (
            settings.mirror_api_key.get_secret_value() if settings.mirror_api_key else None
        )
        directory = MirrorNodeClient(
            MirrorNodeConfig.for_network(
                settings.network,
                base_url=settings.mirror_node_url,
                api_key=mirror_api_key,
            )
        )
        return cls(
            ledger=ledger,
            signer=signer,
            directory=directory,
            config=settings.to_execution_config(),
        )

    # =========================================================================
    # Builders
    # =========================================================================

    def accounts(self) -> AccountBuilder:
        return AccountBuilder(self)

    def tokens(self) -> TokenBuilder:
        return TokenBuilder(self)

    def topics(self) -> TopicBuilder:
        return TopicBuilder(self)

    def files(self) -> FileBuilder:
        return FileBuilder(self)

    def contracts(self) -> ContractBuilder:
        return ContractBuilder(self)

    # =========================================================================
    # Accounts
    # =========================================================================

    def operator_account_id(self) -> EntityId:
        """The agent's own account: the signer's, else the ledger client's."""
        if self.signer is not None:
            return self.signer.account_id()
        return self.ledger.operator_account_id

    def effective_sender(self) -> EntityId:
        """The user account when configured, otherwise the operator account."""
        if self.config.user_account_id:
            return EntityId.parse(self.config.user_account_id)
        return self.operator_account_id()

    async def close(self) -> None:
        """Close the directory client, if it holds connections."""
        close = getattr(self.directory, "close", None)
        if close is not None:
            await close()

    def __repr__(self) -> str:
        return (
            f"<LedgerAgentKit operator={self.operator_account_id()} "
            f"mode={self.config.operating_mode.value}>"
        )
