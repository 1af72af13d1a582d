from ai_coder.config.settings import Settings


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("AI_CODER_LLM_PROVIDER", "ollama")
    monkeypatch.setenv("AI_CODER_OLLAMA_MODEL", "qwen2.5-coder")
    monkeypatch.setenv("AI_CODER_LLM_MAX_RETRIES", "3")

    settings = Settings()

    assert settings.llm_provider == "ollama"
    assert settings.ollama_model == "qwen2.5-coder"
    assert settings.llm_max_retries == 3


def test_settings_fall_back_to_unprefixed_secrets(monkeypatch) -> None:
    monkeypatch.delenv("AI_CODER_OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("AI_CODER_DATABASE_URL", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/ai_coder")

    settings = Settings()

    assert settings.resolved_openai_api_key() == "sk-env"
    assert settings.resolved_database_url() == "postgresql://localhost/ai_coder"


def test_explicit_values_win_over_fallbacks(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    settings = Settings(openai_api_key="sk-explicit")

    assert settings.resolved_openai_api_key() == "sk-explicit"
