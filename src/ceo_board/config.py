from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: str = "dev"
    log_level: str = "INFO"

    # Comma-separated fallback board, e.g. "openai:gpt-4o-mini,anthropic:claude-3-5-haiku".
    default_models: str = "openai:gpt-4o-mini"
    ceo_model: str = "openai:o3"

    worker_timeout_seconds: float = 120.0
    arbiter_timeout_seconds: float = 300.0
    max_retries: int = 2
    retry_base_delay_seconds: float = 2.0
    max_concurrency: int = 8

    arbitration_document_name: str = "ceo_prompt.xml"
    decision_document_name: str = "ceo_decision.md"

    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    anthropic_api_key: str = ""
    anthropic_base_url: str = "https://api.anthropic.com/v1/"
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com"
    ollama_base_url: str = "http://localhost:11434/v1"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
