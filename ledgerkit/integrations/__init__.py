"""
HTTP integrations.

Directory Structure:
    integrations/
    ├── base.py           # IntegrationClient, retry policy, error mapping
    └── mirror/           # Mirror node (DirectoryService)
        ├── client.py     # MirrorNodeClient
        └── schemas.py    # Pydantic response models
"""

from ledgerkit.integrations.base import (
    AuthenticationError,
    IntegrationClient,
    IntegrationConfig,
    IntegrationError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "IntegrationClient",
    "IntegrationConfig",
    "IntegrationError",
    "NotFoundError",
    "RateLimitError",
    "ValidationError",
]
