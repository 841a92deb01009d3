"""
Tests for ExecutionResolver strategy selection and outcomes.
"""

import base64
from unittest.mock import AsyncMock

import pytest

from ledgerkit.errors import StagingError
from ledgerkit.execution import (
    ExecutionConfig,
    ExecutionResolver,
    MetaOptions,
    OperatingMode,
    OperationPolicy,
)
from ledgerkit.execution.outcome import Strategy
from ledgerkit.ledger.interfaces import Receipt
from ledgerkit.ledger.keys import KeyList, key_from_wire
from ledgerkit.operations import KeyRole, OperationKind, StagedOperation, role_fields

OPERATOR_ACCOUNT = "0.0.1001"
USER_ACCOUNT = "0.0.5005"
SCHEDULE_ID = "0.0.9001"

NEVER_SCHEDULE = OperationPolicy(never_schedule=True)
MULTI_STEP = OperationPolicy(requires_multiple_operations=True)


def topic_operation() -> StagedOperation:
    return StagedOperation(
        OperationKind.TOPIC_CREATE,
        {"memo": "reports", "admin_key": "current_signer"},
        key_fields=role_fields(KeyRole.ADMIN),
    )


def transfer_operation() -> StagedOperation:
    return StagedOperation(
        OperationKind.CRYPTO_TRANSFER,
        {
            "hbar_transfers": [
                {"account_id": USER_ACCOUNT, "amount": -100},
                {"account_id": "0.0.800", "amount": 100},
            ]
        },
    )


def make_resolver(ledger, signer=None, directory=None, **config) -> ExecutionResolver:
    return ExecutionResolver(
        ledger=ledger,
        signer=signer,
        directory=directory,
        config=ExecutionConfig(**config),
    )


# =============================================================================
# Autonomous Mode
# =============================================================================


class TestAutonomousMode:
    """Autonomous mode always executes directly."""

    @pytest.mark.asyncio
    async def test_executes(self, ledger, signer):
        resolver = make_resolver(ledger, signer)

        outcome = await resolver.resolve(transfer_operation())

        assert outcome.success
        assert outcome.strategy == Strategy.EXECUTE
        assert len(ledger.sent) == 1

        result = outcome.to_dict()
        assert result["receipt"]["status"] == "SUCCESS"
        assert result["transactionId"].startswith(f"{OPERATOR_ACCOUNT}@")
        assert result["notes"] == []

    @pytest.mark.asyncio
    async def test_ignores_schedule_request(self, ledger, signer):
        resolver = make_resolver(ledger, signer, user_account_id=USER_ACCOUNT)

        outcome = await resolver.resolve(
            transfer_operation(), policy=NEVER_SCHEDULE, meta={"schedule": True}
        )

        assert outcome.strategy == Strategy.EXECUTE
        assert ledger.sent[0].kind == OperationKind.CRYPTO_TRANSFER

    @pytest.mark.asyncio
    async def test_multi_step_runs(self, ledger, signer):
        resolver = make_resolver(ledger, signer)
        outcome = await resolver.resolve(transfer_operation(), policy=MULTI_STEP)
        assert outcome.success

    @pytest.mark.asyncio
    async def test_applies_meta_options(self, ledger, signer, operator_keys):
        resolver = make_resolver(ledger, signer)
        op = topic_operation()

        outcome = await resolver.resolve(
            op,
            meta={
                "transactionMemo": "hello",
                "transactionId": "0.0.1001@1700000000.000000001",
                "nodeAccountIds": ["0.0.7"],
            },
        )

        sent = ledger.sent[0]
        assert sent.memo == "hello"
        assert str(sent.transaction_id) == "0.0.1001@1700000000.000000001"
        assert [str(n) for n in sent.node_account_ids] == ["0.0.7"]
        assert sent.body["admin_key"] == operator_keys[1]
        assert outcome.transaction_id == "0.0.1001@1700000000.000000001"

    @pytest.mark.asyncio
    async def test_failed_receipt(self, ledger, signer):
        ledger.status = "INSUFFICIENT_PAYER_BALANCE"
        resolver = make_resolver(ledger, signer)

        outcome = await resolver.resolve(transfer_operation(), notes=["a note"])

        assert not outcome.success
        assert "INSUFFICIENT_PAYER_BALANCE" in outcome.error
        assert outcome.notes == ("a note",)
        assert outcome.transaction_id is not None

    @pytest.mark.asyncio
    async def test_submit_without_signer(self, ledger):
        resolver = make_resolver(ledger)

        outcome = await resolver.resolve(transfer_operation())

        assert outcome.success
        assert str(ledger.sent[0].transaction_id.account_id) == OPERATOR_ACCOUNT

    @pytest.mark.asyncio
    async def test_missing_signer_for_sentinel(self, ledger):
        resolver = make_resolver(ledger)

        outcome = await resolver.resolve(topic_operation(), notes=["kept"])

        assert not outcome.success
        assert "current_signer" in outcome.error
        assert outcome.notes == ("kept",)
        assert ledger.sent == []


# =============================================================================
# Return Bytes Mode
# =============================================================================


class TestReturnBytesMode:
    """Bytes return and its policy constraints."""

    @pytest.mark.asyncio
    async def test_returns_bytes(self, ledger, signer):
        resolver = make_resolver(
            ledger, signer, operating_mode=OperatingMode.RETURN_BYTES, user_account_id=USER_ACCOUNT
        )

        outcome = await resolver.resolve(transfer_operation(), meta={})

        assert outcome.success
        assert outcome.strategy == Strategy.BYTES
        assert ledger.sent == []

        result = outcome.to_dict()
        assert result["transactionId"].startswith(f"{USER_ACCOUNT}@")
        assert base64.b64decode(result["transactionBytes"])

    @pytest.mark.asyncio
    async def test_payer_defaults_to_operator(self, ledger, signer):
        resolver = make_resolver(ledger, signer, operating_mode=OperatingMode.RETURN_BYTES)
        outcome = await resolver.resolve(transfer_operation())
        assert outcome.transaction_id.startswith(f"{OPERATOR_ACCOUNT}@")

    @pytest.mark.asyncio
    async def test_round_trip(self, ledger, signer, operator_keys):
        resolver = make_resolver(ledger, signer, operating_mode=OperatingMode.RETURN_BYTES)
        op = topic_operation()

        outcome = await resolver.resolve(op, meta={"transactionMemo": "m"})
        restored = StagedOperation.from_base64(outcome.transaction_bytes)

        assert restored.kind == op.kind
        assert restored.body == {"memo": "reports", "admin_key": operator_keys[1]}
        assert restored.memo == "m"
        assert str(restored.transaction_id) == outcome.transaction_id

        receipt = await ledger.submit(restored)
        assert receipt.is_success
        assert ledger.sent[0].body == op.body

    @pytest.mark.asyncio
    async def test_never_schedule_with_schedule_request(self, ledger, signer):
        resolver = make_resolver(
            ledger,
            signer,
            operating_mode=OperatingMode.RETURN_BYTES,
            schedule_user_transactions=True,
        )

        outcome = await resolver.resolve(
            topic_operation(), policy=NEVER_SCHEDULE, meta=MetaOptions(schedule=True)
        )

        assert outcome.strategy == Strategy.BYTES
        assert ledger.sent == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("meta", [None, {}, {"schedule": True}, {"schedule": False}])
    async def test_multi_step_requires_autonomous(self, ledger, signer, meta):
        resolver = make_resolver(ledger, signer, operating_mode=OperatingMode.RETURN_BYTES)

        outcome = await resolver.resolve(
            transfer_operation(), policy=MULTI_STEP, meta=meta, label="airdrop", notes=["n"]
        )

        result = outcome.to_dict()
        assert result["success"] is False
        assert result["requiresAutonomous"] is True
        assert "returnBytes mode" in result["error"]
        assert result["notes"] == ["n"]


# =============================================================================
# Scheduling
# =============================================================================


class TestScheduling:
    """Schedule creation in return-bytes mode."""

    @pytest.fixture
    def resolver(self, ledger, signer, directory):
        return make_resolver(
            ledger,
            signer,
            directory,
            operating_mode=OperatingMode.RETURN_BYTES,
            schedule_user_transactions=True,
            user_account_id=USER_ACCOUNT,
        )

    def test_should_schedule(self, resolver):
        assert resolver.should_schedule(OperationPolicy(), None)
        assert resolver.should_schedule(OperationPolicy(), MetaOptions())
        assert not resolver.should_schedule(OperationPolicy(), MetaOptions(schedule=False))
        assert not resolver.should_schedule(NEVER_SCHEDULE, MetaOptions(schedule=True))

    @pytest.mark.asyncio
    async def test_schedules_with_joint_control(self, resolver, ledger):
        outcome = await resolver.resolve(transfer_operation(), label="transfer hbar")

        result = outcome.to_dict()
        assert result["success"] is True
        assert result["scheduleId"] == SCHEDULE_ID
        assert result["notes"] == [
            f"The schedule admin key allows both your agent and user ({USER_ACCOUNT}) "
            f"to manage the schedule."
        ]
        assert result["description"] == (
            f"Scheduled transfer hbar operation. User ({USER_ACCOUNT}) will be payer "
            f"of scheduled transaction."
        )
        assert result["payerAccountIdScheduledTx"] == USER_ACCOUNT
        assert "memoScheduledTx" not in result

        submitted = ledger.sent[0]
        assert submitted.kind == OperationKind.SCHEDULE_CREATE
        assert isinstance(key_from_wire(submitted.body["admin_key"]), KeyList)

    @pytest.mark.asyncio
    async def test_memo_describes_schedule(self, resolver):
        outcome = await resolver.resolve(transfer_operation(), meta={"transactionMemo": "rent"})

        result = outcome.to_dict()
        assert result["description"].startswith("rent User")
        assert result["memoScheduledTx"] == "rent"

    @pytest.mark.asyncio
    async def test_schedule_request_overrides_default(self, ledger, signer, directory):
        resolver = make_resolver(
            ledger, signer, directory, operating_mode=OperatingMode.RETURN_BYTES
        )

        outcome = await resolver.resolve(transfer_operation(), meta={"schedule": True})

        assert outcome.strategy == Strategy.SCHEDULE
        assert outcome.notes[0] == (
            f"Your agent account ({OPERATOR_ACCOUNT}) will pay the fee to create this schedule."
        )

    @pytest.mark.asyncio
    async def test_missing_schedule_id(self, resolver, ledger):
        ledger.schedule_id = None

        outcome = await resolver.resolve(transfer_operation())

        assert not outcome.success
        assert outcome.error == "Failed to create schedule and retrieve ID."
        assert len(outcome.notes) == 1

    @pytest.mark.asyncio
    async def test_proceeds_without_any_admin_key(self, ledger):
        resolver = make_resolver(
            ledger,
            operating_mode=OperatingMode.RETURN_BYTES,
            schedule_user_transactions=True,
            user_account_id=USER_ACCOUNT,
        )

        outcome = await resolver.resolve(transfer_operation())

        assert outcome.success
        assert "admin_key" not in ledger.sent[0].body
        assert outcome.notes[-1].startswith("No admin key could be set for the schedule")

    @pytest.mark.asyncio
    async def test_directory_failure_degrades(self, ledger, signer):
        directory = AsyncMock()
        directory.lookup_public_key.side_effect = RuntimeError("timeout")
        resolver = make_resolver(
            ledger,
            signer,
            directory,
            operating_mode=OperatingMode.RETURN_BYTES,
            schedule_user_transactions=True,
            user_account_id=USER_ACCOUNT,
        )

        outcome = await resolver.resolve(transfer_operation())

        assert outcome.success
        admin = key_from_wire(ledger.sent[0].body["admin_key"])
        assert len(admin) == 1
        assert "Could not retrieve user" in outcome.notes[0]


# =============================================================================
# Other Entry Points
# =============================================================================


class TestExecuteWithSigner:
    """Tests for execute_with_signer."""

    @pytest.mark.asyncio
    async def test_uses_given_signer(self, ledger):
        other = AsyncMock()
        other.sign_and_submit.return_value = Receipt(transaction_id="0.0.77@1.000000000")
        resolver = make_resolver(ledger)

        outcome = await resolver.execute_with_signer(transfer_operation(), other, ["n"])

        assert outcome.success
        assert outcome.transaction_id == "0.0.77@1.000000000"
        assert outcome.notes == ("n",)

    @pytest.mark.asyncio
    async def test_frozen_operation_rejected(self, ledger):
        resolver = make_resolver(ledger)
        op = transfer_operation().freeze()

        with pytest.raises(StagingError):
            await resolver.execute_with_signer(op, AsyncMock())

    @pytest.mark.asyncio
    async def test_signer_failure(self, ledger):
        other = AsyncMock()
        other.sign_and_submit.side_effect = RuntimeError("rejected")

        outcome = await make_resolver(ledger).execute_with_signer(transfer_operation(), other)

        assert not outcome.success
        assert outcome.error == "rejected"


class TestEffectivePayer:
    """Tests for effective_payer."""

    def test_user(self, ledger, signer):
        assert make_resolver(ledger, signer, user_account_id=USER_ACCOUNT).effective_payer() == USER_ACCOUNT

    def test_signer(self, ledger, signer):
        assert make_resolver(ledger, signer).effective_payer() == OPERATOR_ACCOUNT

    def test_ledger_operator(self, ledger):
        assert make_resolver(ledger).effective_payer() == OPERATOR_ACCOUNT
