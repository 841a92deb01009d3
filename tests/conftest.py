"""
Pytest configuration and fixtures for ledgerkit tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add the repository root to path for imports
# This allows `from ledgerkit.execution import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from cryptography.hazmat.primitives import serialization  # noqa: E402
from cryptography.hazmat.primitives.asymmetric import ec  # noqa: E402
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey  # noqa: E402

from ledgerkit.execution.policy import ExecutionConfig, OperatingMode  # noqa: E402
from ledgerkit.kit import LedgerAgentKit  # noqa: E402
from ledgerkit.ledger.client import BaseLedgerClient  # noqa: E402
from ledgerkit.ledger.interfaces import Receipt  # noqa: E402
from ledgerkit.ledger.keys import KeyAlgorithm, PublicKey  # noqa: E402
from ledgerkit.ledger.signer import PrivateKeySigner  # noqa: E402
from ledgerkit.operations.kinds import OperationKind  # noqa: E402

OPERATOR_ACCOUNT = "0.0.1001"
USER_ACCOUNT = "0.0.5005"
SCHEDULE_ID = "0.0.9001"


# =============================================================================
# Keys
# =============================================================================


def _ed25519_pair() -> tuple[str, str]:
    private = Ed25519PrivateKey.generate()
    raw_private = private.private_bytes(
        serialization.Encoding.Raw,
        serialization.PrivateFormat.Raw,
        serialization.NoEncryption(),
    )
    raw_public = private.public_key().public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw,
    )
    return raw_private.hex(), PublicKey(KeyAlgorithm.ED25519, raw_public).to_string_der()


def _ecdsa_pair() -> tuple[str, str]:
    private = ec.generate_private_key(ec.SECP256K1())
    raw_private = private.private_numbers().private_value.to_bytes(32, "big")
    compressed = private.public_key().public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.CompressedPoint,
    )
    return "0x" + raw_private.hex(), PublicKey(KeyAlgorithm.ECDSA_SECP256K1, compressed).to_string_der()


@pytest.fixture(scope="session")
def operator_keys():
    """(private key hex, public key DER hex) for the operator."""
    return _ed25519_pair()


@pytest.fixture(scope="session")
def user_keys():
    """(private key hex, public key DER hex) for the user."""
    return _ed25519_pair()


@pytest.fixture(scope="session")
def ecdsa_keys():
    """("0x"-prefixed private key hex, public key DER hex) for secp256k1."""
    return _ecdsa_pair()


# =============================================================================
# Collaborators
# =============================================================================


class FakeLedger(BaseLedgerClient):
    """In-memory ledger client recording every submitted operation."""

    def __init__(self, status: str = "SUCCESS", schedule_id: str | None = SCHEDULE_ID):
        super().__init__(OPERATOR_ACCOUNT, nodes=["0.0.3"])
        self.status = status
        self.schedule_id = schedule_id
        self.sent = []

    async def _send(self, operation):
        self.sent.append(operation)
        return Receipt(
            status=self.status,
            transaction_id=str(operation.transaction_id),
            schedule_id=(
                self.schedule_id if operation.kind == OperationKind.SCHEDULE_CREATE else None
            ),
        )


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def signer(ledger, operator_keys):
    return PrivateKeySigner(OPERATOR_ACCOUNT, operator_keys[0], ledger)


@pytest.fixture
def directory(user_keys):
    """Directory returning the user's public key."""
    mock = AsyncMock()
    mock.lookup_public_key.return_value = PublicKey.from_string(user_keys[1])
    return mock


@pytest.fixture
def make_kit(ledger, signer, directory):
    """Factory for kits in a given mode."""

    def _make(
        mode: OperatingMode = OperatingMode.AUTONOMOUS,
        *,
        user: str | None = None,
        schedule_default: bool = False,
        with_signer: bool = True,
        with_directory: bool = True,
    ) -> LedgerAgentKit:
        return LedgerAgentKit(
            ledger=ledger,
            signer=signer if with_signer else None,
            directory=directory if with_directory else None,
            config=ExecutionConfig(
                operating_mode=mode,
                schedule_user_transactions=schedule_default,
                user_account_id=user,
            ),
        )

    return _make


@pytest.fixture
def autonomous_kit(make_kit):
    return make_kit()


@pytest.fixture
def bytes_kit(make_kit):
    """Return-bytes kit acting for USER_ACCOUNT."""
    return make_kit(OperatingMode.RETURN_BYTES, user=USER_ACCOUNT)
