"""OpenAI backend using native tool calls."""

from __future__ import annotations

from ai_coder.config.settings import Settings
from ai_coder.llm.client import OpenAIChatCompletionsClient
from ai_coder.llm.types import ChatMessage, Completion
from ai_coder.providers.base import ChatProvider
from ai_coder.providers.tasks import safe_task_from_tool_calls
from ai_coder.storage.models import Task
from ai_coder.tools.catalog import openai_tools


class OpenAIProvider(ChatProvider):
    name = "openai"

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIProvider:
        return cls(
            client=OpenAIChatCompletionsClient(
                model=settings.openai_model,
                base_url=settings.openai_base_url,
                api_key=settings.resolved_openai_api_key(),
                timeout_s=settings.llm_timeout_s,
                max_retries=settings.llm_max_retries,
                backoff_s=settings.llm_backoff_s,
            )
        )

    def request_next(self, messages: list[ChatMessage]) -> Completion:
        return self.client.complete(
            messages=messages,
            tools=openai_tools(),
            tool_choice="required",
        )

    def task_from_completion(self, completion: Completion) -> Task:
        return safe_task_from_tool_calls(completion.choices)
