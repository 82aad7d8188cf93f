"""OpenAI-compatible model client.

Every supported provider exposes an OpenAI-compatible chat completions
endpoint, so a single ``AsyncOpenAI`` client per provider covers the board.
"""

from __future__ import annotations

from openai import AsyncOpenAI

from ceo_board.config import AppSettings
from ceo_board.domain.model_identifier import split_model_identifier
from ceo_board.types import ModelProvider


def _provider_endpoint(settings: AppSettings, provider: ModelProvider) -> tuple[str, str]:
    return {
        ModelProvider.OPENAI: (settings.openai_base_url, settings.openai_api_key),
        ModelProvider.ANTHROPIC: (settings.anthropic_base_url, settings.anthropic_api_key),
        ModelProvider.GEMINI: (settings.gemini_base_url, settings.gemini_api_key),
        ModelProvider.GROQ: (settings.groq_base_url, settings.groq_api_key),
        ModelProvider.DEEPSEEK: (settings.deepseek_base_url, settings.deepseek_api_key),
        ModelProvider.OLLAMA: (settings.ollama_base_url, "ollama"),
    }[provider]


class OpenAICompatibleClient:
    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings
        self._clients: dict[ModelProvider, AsyncOpenAI] = {}

    def _client_for(self, provider: ModelProvider) -> AsyncOpenAI:
        client = self._clients.get(provider)
        if client is None:
            base_url, api_key = _provider_endpoint(self._settings, provider)
            if not api_key:
                raise RuntimeError(f"no API key configured for provider {provider.value}")
            # Retries and timeouts are owned by the dispatcher and arbiter invoker.
            client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
            self._clients[provider] = client
        return client

    async def complete(self, prompt_text: str, model_identifier: str) -> str:
        raw_provider, model = split_model_identifier(model_identifier)
        try:
            provider = ModelProvider(raw_provider)
        except ValueError as exc:
            raise RuntimeError(f"unsupported provider {raw_provider!r}") from exc

        response = await self._client_for(provider).chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt_text}],
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
