"""Tool catalog exposed to the model."""

from ai_coder.tools.catalog import (
    TOOLS,
    ToolDefinition,
    get_tool,
    list_tools,
    openai_tools,
    tool_names,
)

__all__ = [
    "TOOLS",
    "ToolDefinition",
    "get_tool",
    "list_tools",
    "openai_tools",
    "tool_names",
]
