"""
Settings loading and logging setup for applications embedding the kit.

Environment variables:
    LEDGERKIT_NETWORK                     mainnet | testnet | previewnet
    LEDGERKIT_OPERATOR_ACCOUNT_ID         operator account (0.0.x)
    LEDGERKIT_OPERATOR_PRIVATE_KEY        operator private key
    LEDGERKIT_OPERATING_MODE              autonomous | returnBytes
    LEDGERKIT_USER_ACCOUNT_ID             user account the agent acts for
    LEDGERKIT_SCHEDULE_USER_TRANSACTIONS  true | false
    LEDGERKIT_MIRROR_NODE_URL             mirror node base URL override
    LEDGERKIT_MIRROR_API_KEY              mirror node API key
    LEDGERKIT_LOG_LEVEL                   DEBUG | INFO | WARNING | ERROR
    LEDGERKIT_DISABLE_LOGS                true | false
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from ledgerkit.config.schemas import KitSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


@lru_cache()
def settings_from_env() -> KitSettings:
    """
    Get kit settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return KitSettings(
        # Network
        network=os.getenv("LEDGERKIT_NETWORK", "testnet"),
        # Operator
        operator_account_id=os.getenv("LEDGERKIT_OPERATOR_ACCOUNT_ID"),
        operator_private_key=os.getenv("LEDGERKIT_OPERATOR_PRIVATE_KEY"),
        # Execution
        operating_mode=os.getenv("LEDGERKIT_OPERATING_MODE", "autonomous"),
        user_account_id=os.getenv("LEDGERKIT_USER_ACCOUNT_ID"),
        schedule_user_transactions_in_bytes_mode=_flag("LEDGERKIT_SCHEDULE_USER_TRANSACTIONS"),
        # Mirror node
        mirror_node_url=os.getenv("LEDGERKIT_MIRROR_NODE_URL"),
        mirror_api_key=os.getenv("LEDGERKIT_MIRROR_API_KEY"),
        # Logging
        log_level=os.getenv("LEDGERKIT_LOG_LEVEL", "INFO"),
        disable_logs=_flag("LEDGERKIT_DISABLE_LOGS"),
    )


def configure_logging(settings: KitSettings) -> None:
    """
    Configure root logging for an application.

    With disable_logs set, the ledgerkit logger tree is silenced and the
    root configuration is left alone.
    """
    if settings.disable_logs:
        logging.getLogger("ledgerkit").disabled = True
        return

    logging.getLogger("ledgerkit").disabled = False
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )
