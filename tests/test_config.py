"""
Tests for settings, logging setup and the kit facade.
"""

import logging

import pytest
from pydantic import SecretStr, ValidationError

from ledgerkit import LedgerAgentKit
from ledgerkit.config import KitSettings, configure_logging, settings_from_env
from ledgerkit.execution.policy import OperatingMode
from ledgerkit.integrations.mirror import NETWORK_URLS, MirrorNodeClient
from ledgerkit.ledger.ids import EntityId

OPERATOR_ACCOUNT = "0.0.1001"
USER_ACCOUNT = "0.0.5005"


# =============================================================================
# KitSettings
# =============================================================================


class TestKitSettings:
    """Tests for KitSettings validation."""

    def test_defaults(self):
        settings = KitSettings()

        assert settings.network == "testnet"
        assert settings.operating_mode == OperatingMode.AUTONOMOUS
        assert settings.log_level == "INFO"
        assert not settings.disable_logs

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("autonomous", OperatingMode.AUTONOMOUS),
            ("returnBytes", OperatingMode.RETURN_BYTES),
            ("provideBytes", OperatingMode.RETURN_BYTES),
            ("RETURN_BYTES", OperatingMode.RETURN_BYTES),
        ],
    )
    def test_operating_mode(self, value, expected):
        assert KitSettings(operating_mode=value).operating_mode == expected

    def test_unknown_mode(self):
        with pytest.raises(ValidationError):
            KitSettings(operating_mode="sometimes")

    def test_accounts_are_normalized(self):
        settings = KitSettings(operator_account_id="1001", user_account_id="")
        assert settings.operator_account_id == OPERATOR_ACCOUNT
        assert settings.user_account_id is None

    def test_invalid_account(self):
        with pytest.raises(ValidationError):
            KitSettings(user_account_id="not-an-account")

    def test_secret_is_hidden(self):
        settings = KitSettings(operator_private_key="abcdef")
        assert "abcdef" not in repr(settings)
        assert settings.operator_private_key.get_secret_value() == "abcdef"

    def test_to_execution_config(self):
        config = KitSettings(
            operating_mode="returnBytes",
            user_account_id=USER_ACCOUNT,
            schedule_user_transactions_in_bytes_mode=True,
        ).to_execution_config()

        assert config.operating_mode == OperatingMode.RETURN_BYTES
        assert config.user_account_id == USER_ACCOUNT
        assert config.schedule_user_transactions
        assert not config.is_autonomous


class TestSettingsFromEnv:
    """Tests for settings_from_env."""

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        settings_from_env.cache_clear()
        yield
        settings_from_env.cache_clear()

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LEDGERKIT_NETWORK", "mainnet")
        monkeypatch.setenv("LEDGERKIT_OPERATOR_ACCOUNT_ID", OPERATOR_ACCOUNT)
        monkeypatch.setenv("LEDGERKIT_OPERATING_MODE", "returnBytes")
        monkeypatch.setenv("LEDGERKIT_USER_ACCOUNT_ID", USER_ACCOUNT)
        monkeypatch.setenv("LEDGERKIT_SCHEDULE_USER_TRANSACTIONS", "TRUE")
        monkeypatch.setenv("LEDGERKIT_LOG_LEVEL", "debug")

        settings = settings_from_env()

        assert settings.network == "mainnet"
        assert settings.operator_account_id == OPERATOR_ACCOUNT
        assert settings.operating_mode == OperatingMode.RETURN_BYTES
        assert settings.user_account_id == USER_ACCOUNT
        assert settings.schedule_user_transactions_in_bytes_mode
        assert settings.log_level == "DEBUG"

    def test_is_cached(self, monkeypatch):
        first = settings_from_env()
        monkeypatch.setenv("LEDGERKIT_NETWORK", "previewnet")
        assert settings_from_env() is first

    def test_defaults(self, monkeypatch):
        for name in ("LEDGERKIT_OPERATING_MODE", "LEDGERKIT_DISABLE_LOGS", "LEDGERKIT_NETWORK"):
            monkeypatch.delenv(name, raising=False)

        settings = settings_from_env()

        assert settings.operating_mode == OperatingMode.AUTONOMOUS
        assert settings.network == "testnet"
        assert not settings.disable_logs


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger("ledgerkit")
        disabled = logger.disabled
        yield
        logger.disabled = disabled

    def test_disable_logs(self):
        configure_logging(KitSettings(disable_logs=True))
        assert logging.getLogger("ledgerkit").disabled

    def test_enable_logs(self):
        logging.getLogger("ledgerkit").disabled = True
        configure_logging(KitSettings(log_level="warning"))
        assert not logging.getLogger("ledgerkit").disabled


# =============================================================================
# LedgerAgentKit
# =============================================================================


class TestLedgerAgentKit:
    """Tests for the kit facade."""

    def test_operator_account(self, autonomous_kit, make_kit):
        assert str(autonomous_kit.operator_account_id()) == OPERATOR_ACCOUNT
        assert str(make_kit(with_signer=False).operator_account_id()) == OPERATOR_ACCOUNT

    def test_effective_sender(self, autonomous_kit, bytes_kit):
        assert autonomous_kit.effective_sender() == EntityId.parse(OPERATOR_ACCOUNT)
        assert bytes_kit.effective_sender() == EntityId.parse(USER_ACCOUNT)

    def test_builders_are_fresh(self, autonomous_kit):
        assert autonomous_kit.topics() is not autonomous_kit.topics()
        assert autonomous_kit.tokens().kit is autonomous_kit

    def test_repr(self, bytes_kit):
        assert repr(bytes_kit) == f"<LedgerAgentKit operator={OPERATOR_ACCOUNT} mode=returnBytes>"

    @pytest.mark.asyncio
    async def test_from_settings(self, ledger, operator_keys):
        settings = KitSettings(
            network="mainnet",
            operator_account_id=OPERATOR_ACCOUNT,
            operator_private_key=SecretStr(operator_keys[0]),
            operating_mode="returnBytes",
            user_account_id=USER_ACCOUNT,
        )

        kit = LedgerAgentKit.from_settings(settings, ledger=ledger)

        assert kit.signer.public_key().to_string_der() == operator_keys[1]
        assert isinstance(kit.directory, MirrorNodeClient)
        assert kit.directory.config.base_url == NETWORK_URLS["mainnet"]
        assert kit.config.operating_mode == OperatingMode.RETURN_BYTES
        assert kit.resolver.composer.user_account_id == USER_ACCOUNT
        await kit.close()

    def test_from_settings_without_key(self, ledger):
        kit = LedgerAgentKit.from_settings(KitSettings(), ledger=ledger)
        assert kit.signer is None
        assert str(kit.operator_account_id()) == OPERATOR_ACCOUNT

    def test_key_without_account(self, ledger, operator_keys):
        settings = KitSettings(operator_private_key=operator_keys[0])
        with pytest.raises(ValueError, match="operator_account_id is required"):
            LedgerAgentKit.from_settings(settings, ledger=ledger)

    @pytest.mark.asyncio
    async def test_close_without_directory(self, make_kit):
        await make_kit(with_directory=False).close()
