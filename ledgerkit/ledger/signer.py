"""
Private-key signer.

PrivateKeySigner is the operator identity for server-side agents: it
derives its public key locally from the private key and submits through
a LedgerClient configured for the same account.
"""

from __future__ import annotations

import logging

from pydantic import SecretStr

from ledgerkit.ledger.ids import EntityId, TransactionId
from ledgerkit.ledger.interfaces import LedgerClient, Receipt
from ledgerkit.ledger.keys import PublicKey, derive_public_key
from ledgerkit.operations.staged import StagedOperation

logger = logging.getLogger(__name__)


class PrivateKeySigner:
    """
    Signer backed by an operator private key.

    Example:
        signer = PrivateKeySigner("0.0.1001", SecretStr(private_key), client)
        signer.public_key()   # derived locally, no network access
    """

    def __init__(
        self,
        account_id: EntityId | str,
        private_key: SecretStr | str,
        client: LedgerClient,
    ):
        self._account_id = EntityId.parse(account_id)
        secret = private_key if isinstance(private_key, SecretStr) else SecretStr(private_key)
        self._public_key = derive_public_key(secret.get_secret_value())
        self._private_key = secret
        self._client = client

    def account_id(self) -> EntityId:
        return self._account_id

    def public_key(self) -> PublicKey:
        return self._public_key

    async def sign_and_submit(self, operation: StagedOperation) -> Receipt:
        """Submit with this signer's account as payer."""
        if not operation.frozen and operation.transaction_id is None:
            operation.set_transaction_id(TransactionId.generate(self._account_id))
        logger.debug(f"[signer] {self._account_id} submitting {operation.describe()}")
        return await self._client.submit(operation)

    def __repr__(self) -> str:
        return f"<PrivateKeySigner {self._account_id}>"
