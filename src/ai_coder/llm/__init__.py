"""Chat completion types and client."""

from ai_coder.llm.client import (
    ChatCompletionClient,
    LLMRequestError,
    OpenAIChatCompletionsClient,
    parse_completion,
)
from ai_coder.llm.types import (
    ChatMessage,
    Completion,
    CompletionChoice,
    FunctionCall,
    ToolCall,
)

__all__ = [
    "ChatCompletionClient",
    "ChatMessage",
    "Completion",
    "CompletionChoice",
    "FunctionCall",
    "LLMRequestError",
    "OpenAIChatCompletionsClient",
    "ToolCall",
    "parse_completion",
]
