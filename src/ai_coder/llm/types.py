"""Conversation turns and completion responses in chat-completions shape."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

Role = Literal["system", "user", "assistant", "tool"]


class FunctionCall(BaseModel):
    name: str = ""
    # Raw JSON text exactly as produced by the model.
    arguments: str = ""


class ToolCall(BaseModel):
    id: str = ""
    type: Literal["function"] = "function"
    function: FunctionCall = Field(default_factory=FunctionCall)


class ChatMessage(BaseModel):
    """One conversation turn."""

    role: Role
    content: str | None = None
    tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_call_id: str | None = None
    name: str | None = None

    @classmethod
    def system(cls, content: str) -> ChatMessage:
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> ChatMessage:
        return cls(role="assistant", content=content)

    @classmethod
    def assistant_tool_call(cls, *, call_id: str, name: str, arguments: str) -> ChatMessage:
        return cls(
            role="assistant",
            tool_calls=[
                ToolCall(id=call_id, function=FunctionCall(name=name, arguments=arguments))
            ],
        )

    @classmethod
    def tool_result(cls, *, call_id: str, name: str, content: str) -> ChatMessage:
        return cls(role="tool", tool_call_id=call_id, name=name, content=content)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [call.model_dump() for call in self.tool_calls]
        if self.tool_call_id is not None:
            payload["tool_call_id"] = self.tool_call_id
        if self.name is not None:
            payload["name"] = self.name
        return payload


class CompletionChoice(BaseModel):
    content: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)
    finish_reason: str | None = None


class Completion(BaseModel):
    choices: list[CompletionChoice] = Field(default_factory=list)

    @property
    def text(self) -> str:
        if not self.choices:
            return ""
        return self.choices[0].content
