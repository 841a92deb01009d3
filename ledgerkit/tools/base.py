"""
Tool Base Classes (MCP-Aligned).

This module defines the abstractions agents use to call into the kit:
- Tool: Base class for all tools
- ToolResult: Result from tool execution
- ToolAnnotations: Behavioral hints for tools
- ContentBlock: Content blocks in tool results

Tools do not know they are called by an agent. A ledger tool stages one
operation through a builder and lets the kit's ExecutionResolver deliver
it; the outcome travels back as structured content.

MCP Alignment:
    - Tool has name, description, input_schema
    - ToolResult has content blocks and is_error flag
    - Annotations are advisory hints only
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ContentType(Enum):
    """Type of content in a tool result (MCP-aligned)."""

    TEXT = "text"
    RESOURCE_LINK = "resource_link"


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """
    Content block in tool result (MCP-aligned).

    Example:
        ContentBlock.from_text("Topic created: 0.0.5005")
        ContentBlock.from_resource_link("https://hashscan.io/testnet/topic/0.0.5005")
    """

    type: ContentType
    text_content: str | None = None
    uri: str | None = None
    name: str | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_text(
        cls,
        content: str,
        *,
        annotations: dict[str, Any] | None = None,
    ) -> ContentBlock:
        """Create a text content block."""
        return cls(
            type=ContentType.TEXT,
            text_content=content,
            annotations=annotations or {},
        )

    @classmethod
    def from_resource_link(cls, uri: str, name: str | None = None) -> ContentBlock:
        """Create a resource link content block."""
        return cls(type=ContentType.RESOURCE_LINK, uri=uri, name=name)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type.value}

        if self.text_content is not None:
            result["text"] = self.text_content
        if self.uri is not None:
            result["uri"] = self.uri
        if self.name is not None:
            result["name"] = self.name
        if self.annotations:
            result["annotations"] = self.annotations

        return result


@dataclass(frozen=True, slots=True)
class ToolAnnotations:
    """
    Behavioral hints for tools (MCP-aligned).

    These are ADVISORY only - they do not enforce behavior and should
    not be relied upon for security decisions.

    Attributes:
        title: Human-readable title for display
        read_only_hint: If True, tool does not modify ledger state
        destructive_hint: For non-read-only tools, may destroy entities
        idempotent_hint: Repeated calls with same args have no additional effect
        open_world_hint: Tool interacts with the network
    """

    title: str | None = None
    read_only_hint: bool = False
    destructive_hint: bool = True  # Default True for write operations
    idempotent_hint: bool = False
    open_world_hint: bool = True

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}

        if self.title is not None:
            result["title"] = self.title
        if self.read_only_hint:
            result["readOnlyHint"] = True
        if not self.destructive_hint:
            result["destructiveHint"] = False
        if self.idempotent_hint:
            result["idempotentHint"] = True
        if self.open_world_hint:
            result["openWorldHint"] = True

        return result


@dataclass(frozen=True, slots=True)
class ToolResult:
    """
    Result from tool execution (MCP-aligned).

    Error Handling:
        Tool execution errors are reported IN the result, not as
        exceptions, so the agent can reason about them. A failed ledger
        outcome still carries its notes in structured_content.

    Example:
        ToolResult.success("Executed create_topic", structured=outcome.to_dict())
        ToolResult.error("Invalid entity id: 'abc'")
    """

    content: tuple[ContentBlock, ...]
    is_error: bool = False
    structured_content: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        text: str,
        *,
        structured: dict[str, Any] | None = None,
        additional_content: tuple[ContentBlock, ...] | None = None,
    ) -> ToolResult:
        """Create a successful result."""
        content = [ContentBlock.from_text(text)]
        if additional_content:
            content.extend(additional_content)

        return cls(
            content=tuple(content),
            is_error=False,
            structured_content=structured,
        )

    @classmethod
    def error(
        cls,
        message: str,
        *,
        structured: dict[str, Any] | None = None,
    ) -> ToolResult:
        """Create an error result."""
        return cls(
            content=(ContentBlock.from_text(f"Error: {message}"),),
            is_error=True,
            structured_content=structured,
        )

    @property
    def text(self) -> str:
        """Get the primary text content (convenience accessor)."""
        for block in self.content:
            if block.type == ContentType.TEXT and block.text_content:
                return block.text_content
        return ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "content": [block.to_dict() for block in self.content],
        }

        if self.is_error:
            result["isError"] = True
        if self.structured_content is not None:
            result["structuredContent"] = self.structured_content

        return result


class Tool(ABC):
    """
    Base class for all tools (MCP-aligned).

    Contract:
        - name: Unique identifier (snake_case)
        - description: Clear description for LLM understanding
        - input_schema: JSON Schema for arguments
        - execute: Async method that performs the action
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique identifier for the tool.

        Convention: snake_case (e.g., "ledger_create_topic")
        """
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description, used by the LLM to pick the tool."""
        ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """
        JSON Schema defining expected input arguments.

        Must be a JSON Schema object with type "object" and "properties".
        """
        ...

    @property
    def output_schema(self) -> dict[str, Any] | None:
        return None

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations()

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """
        Execute the tool with the given arguments.

        Important:
            - Report errors in ToolResult.error(), don't raise exceptions
            - Exceptions should only be raised for unexpected failures
        """
        ...

    def to_llm_schema(self) -> dict[str, Any]:
        """Schema format for LLM tool use (Claude/OpenAI compatible)."""
        schema = {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

        if self.output_schema:
            schema["output_schema"] = self.output_schema

        return schema

    def to_mcp_schema(self) -> dict[str, Any]:
        """Full MCP tool schema, including annotations."""
        schema = self.to_llm_schema()

        annotations = self.annotations.to_dict()
        if annotations:
            schema["annotations"] = annotations

        return schema

    def __repr__(self) -> str:
        return f"<Tool {self.name}>"
