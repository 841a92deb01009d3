"""
Tests for the agent tool layer.

Tests cover:
- ToolResult and ToolAnnotations serialization
- ToolRegistry validation
- TransactionTool argument handling, defaulted-parameter notes and outcomes
- build_ledger_toolkit
"""

import logging
from typing import Any

import pytest

from ledgerkit.execution.policy import OperatingMode
from ledgerkit.operations import OperationKind
from ledgerkit.tools import (
    Tool,
    ToolAnnotations,
    ToolRegistry,
    ToolRegistryError,
    ToolResult,
    build_ledger_toolkit,
)
from ledgerkit.tools.ledger import (
    LEDGER_TOOLS,
    AppendFileTool,
    CreateAccountTool,
    CreateFungibleTokenTool,
    CreateNftTool,
    CreateTopicTool,
    DeleteTopicTool,
    TransferHbarTool,
    TransferTokensTool,
)

USER_ACCOUNT = "0.0.5005"
SCHEDULE_ID = "0.0.9001"


class SchemaLessTool(Tool):
    """Tool with an invalid input schema, for registry validation."""

    @property
    def name(self) -> str:
        return "broken"

    @property
    def description(self) -> str:
        return "Broken tool"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {"type": "string"}

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult.success("never")


# =============================================================================
# Result Types
# =============================================================================


class TestToolResult:
    """Tests for ToolResult."""

    def test_success(self):
        result = ToolResult.success("done", structured={"success": True})

        assert not result.is_error
        assert result.text == "done"
        assert result.to_dict() == {
            "content": [{"type": "text", "text": "done"}],
            "structuredContent": {"success": True},
        }

    def test_error(self):
        result = ToolResult.error("boom")

        assert result.is_error
        assert result.text == "Error: boom"
        assert result.to_dict()["isError"] is True

    def test_annotations_camel_case(self):
        data = ToolAnnotations(title="Create Topic", destructive_hint=False).to_dict()
        assert data == {
            "title": "Create Topic",
            "destructiveHint": False,
            "openWorldHint": True,
        }


# =============================================================================
# Registry
# =============================================================================


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_register_and_lookup(self, autonomous_kit):
        registry = ToolRegistry()
        tool = CreateTopicTool(autonomous_kit)

        registry.register(tool)

        assert "ledger_create_topic" in registry
        assert registry.get_required("ledger_create_topic") is tool
        assert registry.get("missing") is None

    def test_duplicate(self, autonomous_kit):
        registry = ToolRegistry()
        registry.register(CreateTopicTool(autonomous_kit))

        with pytest.raises(ToolRegistryError, match="already registered"):
            registry.register(CreateTopicTool(autonomous_kit))

    def test_invalid_schema(self):
        with pytest.raises(ToolRegistryError, match="type: 'object'"):
            ToolRegistry().register(SchemaLessTool())

    def test_get_required_missing(self):
        with pytest.raises(ToolRegistryError, match="not found"):
            ToolRegistry().get_required("nope")

    def test_unregister(self, autonomous_kit):
        registry = ToolRegistry()
        registry.register(DeleteTopicTool(autonomous_kit))

        assert registry.unregister("ledger_delete_topic")
        assert not registry.unregister("ledger_delete_topic")
        assert len(registry) == 0


class TestBuildLedgerToolkit:
    """Tests for build_ledger_toolkit."""

    def test_registers_all_tools(self, autonomous_kit):
        registry = build_ledger_toolkit(autonomous_kit)

        assert len(registry) == len(LEDGER_TOOLS) == 16
        assert all(name.startswith("ledger_") for name in registry.list_names())

    def test_llm_schemas(self, autonomous_kit):
        schemas = build_ledger_toolkit(autonomous_kit).to_llm_schemas()

        for schema in schemas:
            assert schema["input_schema"]["type"] == "object"
            assert "metaOptions" in schema["input_schema"]["properties"]

    def test_mcp_schema_annotations(self, autonomous_kit):
        registry = build_ledger_toolkit(autonomous_kit)
        delete_schema = registry.get_required("ledger_delete_topic").to_mcp_schema()
        create_schema = registry.get_required("ledger_create_topic").to_mcp_schema()

        assert "destructiveHint" not in delete_schema["annotations"]
        assert create_schema["annotations"]["destructiveHint"] is False
        assert create_schema["annotations"]["title"] == "Create Topic"

    def test_extends_existing_registry(self, autonomous_kit):
        registry = ToolRegistry()

        result = build_ledger_toolkit(
            autonomous_kit, tools=[CreateTopicTool], registry=registry
        )

        assert result is registry
        assert registry.list_names() == ["ledger_create_topic"]


# =============================================================================
# Transaction Tools
# =============================================================================


class TestTransactionToolSchema:
    """Tests for generated input schemas."""

    def test_camel_case_properties(self, autonomous_kit):
        schema = CreateFungibleTokenTool(autonomous_kit).input_schema

        properties = schema["properties"]
        assert "tokenName" in properties
        assert "initialSupply" in properties
        assert "adminKey" in properties
        assert "tokenName" in schema["required"]

    def test_meta_options_schema(self, autonomous_kit):
        meta = CreateTopicTool(autonomous_kit).input_schema["properties"]["metaOptions"]

        assert "transactionMemo" in meta["properties"]
        assert "schedulePayerAccountId" in meta["properties"]
        assert meta["description"].startswith("Optional.")


class TestTransactionToolExecution:
    """Tests for TransactionTool.execute."""

    @pytest.mark.asyncio
    async def test_autonomous_execution(self, autonomous_kit, ledger):
        tool = CreateTopicTool(autonomous_kit)

        result = await tool.execute({"memo": "reports", "metaOptions": {"transactionMemo": "tx"}})

        assert not result.is_error
        assert result.text.startswith("Executed ledger_create_topic")
        assert result.structured_content["notes"] == [
            "Default auto-renew period of 7776000 seconds applied for topic."
        ]
        assert ledger.sent[0].memo == "tx"

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, autonomous_kit, ledger):
        result = await DeleteTopicTool(autonomous_kit).execute({})

        assert result.is_error
        assert "Invalid arguments for ledger_delete_topic" in result.text
        assert ledger.sent == []

    @pytest.mark.asyncio
    async def test_staging_error_keeps_notes(self, autonomous_kit, ledger):
        result = await CreateFungibleTokenTool(autonomous_kit).execute(
            {"tokenName": "Gold", "initialSupply": "lots"}
        )

        assert result.is_error
        assert result.structured_content["success"] is False
        assert len(result.structured_content["notes"]) == 3
        assert ledger.sent == []

    @pytest.mark.asyncio
    async def test_create_account_balance_note(self, autonomous_kit, ledger):
        result = await CreateAccountTool(autonomous_kit).execute({"key": "current_signer"})

        assert not result.is_error
        assert result.structured_content["notes"][0] == (
            "The new account was given an initial balance of 0 HBAR by default."
        )
        assert ledger.sent[0].body["initial_balance"] == 0

    @pytest.mark.asyncio
    async def test_unbalanced_transfer(self, autonomous_kit):
        result = await TransferHbarTool(autonomous_kit).execute(
            {"transfers": [{"accountId": "0.0.800", "amount": 1}]}
        )

        assert result.is_error
        assert "must be zero" in result.text

    @pytest.mark.asyncio
    async def test_defaulted_parameter_notes_come_first(self, autonomous_kit):
        tool = CreateFungibleTokenTool(autonomous_kit)

        result = await tool.execute(
            {"tokenName": "Gold", "tokenSymbol": "GLD", "initialSupply": 100}
        )

        notes = result.structured_content["notes"]
        assert notes[:3] == [
            "The number of decimal places for your token was automatically set to '0'.",
            "Your token's supply type was set to 'FINITE' by default.",
            "A maximum supply of '1,000,000,000,000,000' for the token was set by default.",
        ]
        assert notes[3].startswith("Since no treasury was specified")

    @pytest.mark.asyncio
    async def test_explicit_values_have_no_notes(self, autonomous_kit):
        tool = CreateFungibleTokenTool(autonomous_kit)

        result = await tool.execute(
            {
                "tokenName": "Gold",
                "tokenSymbol": "GLD",
                "initialSupply": 100,
                "decimals": 2,
                "supplyType": "INFINITE",
                "maxSupply": 1,
                "treasuryAccountId": "0.0.1001",
            }
        )

        assert result.structured_content["notes"] == []

    @pytest.mark.asyncio
    async def test_nft_supply_note(self, autonomous_kit):
        result = await CreateNftTool(autonomous_kit).execute(
            {"tokenName": "Art", "tokenSymbol": "ART", "maxSupply": 10}
        )

        assert result.structured_content["notes"][0] == (
            "Your NFT collection's supply type was set to 'FINITE' by default."
        )

    @pytest.mark.asyncio
    async def test_empty_list_defaults_have_no_notes(self, autonomous_kit):
        tool = TransferTokensTool(autonomous_kit)

        result = await tool.execute(
            {
                "tokenTransfers": [
                    {"tokenId": "0.0.77", "accountId": "0.0.1", "amount": -1},
                    {"tokenId": "0.0.77", "accountId": "0.0.2", "amount": 1},
                ]
            }
        )

        assert not result.is_error
        assert result.structured_content["notes"] == []

    @pytest.mark.asyncio
    async def test_bytes_mode(self, bytes_kit, ledger):
        result = await AppendFileTool(bytes_kit).execute({"fileId": "0.0.150", "contents": "hi"})

        assert result.text.startswith("Prepared ledger_append_file transaction bytes")
        assert "transactionBytes" in result.structured_content
        assert ledger.sent == []

    @pytest.mark.asyncio
    async def test_scheduled(self, make_kit):
        kit = make_kit(OperatingMode.RETURN_BYTES, user=USER_ACCOUNT)

        result = await TransferHbarTool(kit).execute(
            {
                "transfers": [{"accountId": "0.0.800", "amount": 1}],
                "metaOptions": {"schedule": True},
            }
        )

        assert result.text == f"Scheduled ledger_transfer_hbar: schedule {SCHEDULE_ID}."
        assert result.structured_content["scheduleId"] == SCHEDULE_ID

    @pytest.mark.asyncio
    async def test_topic_creation_never_scheduled(self, make_kit, ledger):
        kit = make_kit(OperatingMode.RETURN_BYTES, user=USER_ACCOUNT, schedule_default=True)

        result = await CreateTopicTool(kit).execute({"metaOptions": {"schedule": True}})

        assert "transactionBytes" in result.structured_content
        assert "scheduleId" not in result.structured_content
        assert ledger.sent == []

    @pytest.mark.asyncio
    async def test_failed_outcome(self, autonomous_kit, ledger):
        ledger.status = "INVALID_TOPIC_ID"

        result = await DeleteTopicTool(autonomous_kit).execute({"topicId": "0.0.42"})

        assert result.is_error
        assert "INVALID_TOPIC_ID" in result.text
        assert result.structured_content["success"] is False
        assert ledger.sent[0].kind == OperationKind.TOPIC_DELETE

    @pytest.mark.asyncio
    async def test_current_signer_parameters_substituted(
        self, autonomous_kit, ledger, operator_keys, caplog
    ):
        caplog.set_level(logging.DEBUG, logger="ledgerkit")

        result = await CreateTopicTool(autonomous_kit).execute(
            {"adminKey": "current_signer", "autoRenewPeriod": 86_400}
        )

        assert not result.is_error
        assert ledger.sent[0].body["admin_key"] == operator_keys[1]
        assert "Substituting 'admin_key' current_signer" in caplog.text
        assert "Substituting 'adminKey' current_signer" in caplog.text
        assert f"'adminKey': '{operator_keys[1]}'" in caplog.text
