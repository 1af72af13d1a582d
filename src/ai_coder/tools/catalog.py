"""Catalog of the tools the model may call."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from ai_coder.tools.schemas import AskArgs, BrowserArgs, CodeArgs, DoneArgs, TerminalArgs


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_model: type[BaseModel]
    _schema: dict[str, Any] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_schema", _parameters_schema(self.input_model))

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON schema of the arguments. Callers get their own copy."""
        return copy.deepcopy(self._schema)

    def to_openai(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


def _parameters_schema(model: type[BaseModel]) -> dict[str, Any]:
    schema = model.model_json_schema()
    # Every field is required, matching what the model is asked to send.
    schema["required"] = list(schema.get("properties", {}).keys())
    schema.pop("title", None)
    return schema


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="terminal",
        description="Calls a terminal command",
        input_model=TerminalArgs,
    ),
    ToolDefinition(
        name="browser",
        description="Opens a browser to look for additional information",
        input_model=BrowserArgs,
    ),
    ToolDefinition(
        name="code",
        description="Modifies or reads code files",
        input_model=CodeArgs,
    ),
    ToolDefinition(
        name="ask",
        description="Sends a question to the user for additional information",
        input_model=AskArgs,
    ),
    ToolDefinition(
        name="done",
        description=(
            "Mark the whole task as done. "
            "Should be called at the very end when everything is completed"
        ),
        input_model=DoneArgs,
    ),
)

_TOOLS_BY_NAME = {tool.name: tool for tool in TOOLS}


def list_tools() -> list[ToolDefinition]:
    return list(TOOLS)


def tool_names() -> list[str]:
    return [tool.name for tool in TOOLS]


def get_tool(name: str) -> ToolDefinition | None:
    return _TOOLS_BY_NAME.get(name)


def openai_tools() -> list[dict[str, Any]]:
    return [tool.to_openai() for tool in TOOLS]
