from __future__ import annotations

from ceo_board.errors import ConfigurationError
from ceo_board.types import PROVIDER_ALIASES

SEPARATOR = ":"


def split_model_identifier(identifier: str) -> tuple[str, str]:
    provider, separator, model = identifier.partition(SEPARATOR)
    if not separator:
        raise ConfigurationError(f"model identifier {identifier!r} must look like provider:model")
    return provider, model


def normalize_model_identifier(raw_value: str, *, field_name: str = "model") -> str:
    """Validate a ``provider:model`` identifier and expand provider short aliases.

    ``o:gpt-4o`` becomes ``openai:gpt-4o``. Only the provider prefix is
    normalised; the model part is kept as given (minus surrounding whitespace)
    because some providers use colons inside model names, e.g. ``ollama:llama3:8b``.
    """
    candidate = raw_value.strip()
    if not candidate:
        raise ConfigurationError(f"{field_name} is required")

    raw_provider, separator, raw_model = candidate.partition(SEPARATOR)
    provider = raw_provider.strip().lower()
    model = raw_model.strip()
    if not separator or not provider or not model:
        raise ConfigurationError(
            f"{field_name} {candidate!r} must look like provider:model with both parts non-empty"
        )

    alias = PROVIDER_ALIASES.get(provider)
    if alias is not None:
        provider = alias.value
    return f"{provider}{SEPARATOR}{model}"
