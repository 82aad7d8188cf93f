from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from ceo_board.domain import normalize_model_identifier
from ceo_board.errors import ConfigurationError
from ceo_board.orchestration.board_config import BoardConfig


class BoardSource(StrEnum):
    EXPLICIT = "explicit"
    FALLBACK = "fallback"


@dataclass(slots=True, frozen=True)
class BoardSelection:
    models: tuple[str, ...]
    ceo_model: str
    source: BoardSource

    def as_dict(self) -> dict[str, object]:
        return {
            "models": list(self.models),
            "ceo_model": self.ceo_model,
            "source": self.source.value,
        }


def parse_model_list(raw_value: str | None) -> list[str]:
    if not raw_value:
        return []
    return [part.strip() for part in raw_value.split(",") if part.strip()]


def resolve_board(
    explicit_models: Sequence[str] | None,
    config: BoardConfig,
    *,
    ceo_model: str | None = None,
) -> BoardSelection:
    candidates = [model.strip() for model in explicit_models or () if model and model.strip()]
    source = BoardSource.EXPLICIT
    if not candidates:
        candidates = parse_model_list(config.fallback_models)
        source = BoardSource.FALLBACK

    if not candidates:
        raise ConfigurationError(
            "no board models resolved: pass models explicitly or set DEFAULT_MODELS"
        )

    models = tuple(
        normalize_model_identifier(candidate, field_name="board model") for candidate in candidates
    )
    arbiter = normalize_model_identifier(
        (ceo_model or "").strip() or config.ceo_model,
        field_name="ceo model",
    )
    return BoardSelection(models=models, ceo_model=arbiter, source=source)
