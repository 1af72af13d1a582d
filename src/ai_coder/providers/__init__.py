"""LLM providers and the task/message translation they rely on."""

from ai_coder.providers.base import ChatProvider, Provider, ProviderError
from ai_coder.providers.calls import ArgsDecode, Call, decode_tool_args, parse_call
from ai_coder.providers.messages import tasks_to_messages
from ai_coder.providers.ollama import OllamaProvider
from ai_coder.providers.openai import OpenAIProvider
from ai_coder.providers.registry import (
    ProviderType,
    UnknownProviderError,
    list_providers,
    provider_factory,
    register_provider,
)
from ai_coder.providers.tasks import (
    ArgsSerializationError,
    CallParseError,
    EmptyToolNameError,
    NoChoicesError,
    NoToolCallsError,
    TaskConstructionError,
    ToolArgsDecodeError,
    default_ask_task,
    safe_task_from_text,
    safe_task_from_tool_calls,
    task_from_text,
    task_from_tool_calls,
)

__all__ = [
    "ArgsDecode",
    "ArgsSerializationError",
    "Call",
    "CallParseError",
    "ChatProvider",
    "EmptyToolNameError",
    "NoChoicesError",
    "NoToolCallsError",
    "OllamaProvider",
    "OpenAIProvider",
    "Provider",
    "ProviderError",
    "ProviderType",
    "TaskConstructionError",
    "ToolArgsDecodeError",
    "UnknownProviderError",
    "decode_tool_args",
    "default_ask_task",
    "list_providers",
    "parse_call",
    "provider_factory",
    "register_provider",
    "safe_task_from_text",
    "safe_task_from_tool_calls",
    "task_from_text",
    "task_from_tool_calls",
    "tasks_to_messages",
]
