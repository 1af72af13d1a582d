from __future__ import annotations

import pytest

from ai_coder.config.settings import Settings
from ai_coder.storage.memory import InMemoryTaskStorage


@pytest.fixture
def settings() -> Settings:
    return Settings(
        llm_provider="openai",
        openai_api_key="test-key",
        llm_max_retries=0,
        llm_backoff_s=0.0,
        database_url="",
    )


@pytest.fixture
def storage() -> InMemoryTaskStorage:
    return InMemoryTaskStorage()
