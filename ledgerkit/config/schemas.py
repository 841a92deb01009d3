"""
Configuration Schemas for ledgerkit.

Security:
    The operator private key and mirror node API key use SecretStr to
    prevent accidental logging. Access the value with `.get_secret_value()`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

from ledgerkit.execution.policy import ExecutionConfig, OperatingMode
from ledgerkit.ledger.ids import EntityId


class KitSettings(BaseModel):
    """
    Settings for one agent kit.

    Read once at the application edge (see settings_from_env) and turned
    into an explicit ExecutionConfig; nothing below the edge reads the
    environment.
    """

    # Network
    network: Literal["mainnet", "testnet", "previewnet"] = "testnet"

    # Operator (the agent's own account)
    operator_account_id: str | None = Field(None, description="Operator account ID (0.0.x)")
    operator_private_key: SecretStr | None = Field(None, description="Operator private key")

    # Execution
    operating_mode: OperatingMode = OperatingMode.AUTONOMOUS
    user_account_id: str | None = Field(None, description="The user the agent acts for")
    schedule_user_transactions_in_bytes_mode: bool = False

    # Mirror node
    mirror_node_url: str | None = Field(None, description="Override the network's mirror node URL")
    mirror_api_key: SecretStr | None = None

    # Logging
    log_level: str = "INFO"
    disable_logs: bool = False

    @field_validator("operating_mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        if isinstance(value, str):
            return OperatingMode.from_string(value)
        return value

    @field_validator("operator_account_id", "user_account_id")
    @classmethod
    def _parse_account(cls, value):
        if value is None or value == "":
            return None
        return str(EntityId.parse(value))

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    def to_execution_config(self) -> ExecutionConfig:
        return ExecutionConfig(
            operating_mode=self.operating_mode,
            schedule_user_transactions=self.schedule_user_transactions_in_bytes_mode,
            user_account_id=self.user_account_id,
        )
