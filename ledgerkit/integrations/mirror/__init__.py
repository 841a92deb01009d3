"""
Mirror node integration.
"""

from ledgerkit.integrations.mirror.client import NETWORK_URLS, MirrorNodeClient, MirrorNodeConfig
from ledgerkit.integrations.mirror.schemas import (
    AccountBalance,
    AccountInfo,
    MirrorKey,
    ScheduleInfo,
    TokenInfo,
    TopicInfo,
)

__all__ = [
    "AccountBalance",
    "AccountInfo",
    "MirrorKey",
    "MirrorNodeClient",
    "MirrorNodeConfig",
    "NETWORK_URLS",
    "ScheduleInfo",
    "TokenInfo",
    "TopicInfo",
]
