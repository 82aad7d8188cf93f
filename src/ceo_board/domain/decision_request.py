from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ceo_board.errors import ConfigurationError

DEFAULT_ARBITRATION_DOCUMENT_NAME = "ceo_prompt.xml"
DEFAULT_DECISION_DOCUMENT_NAME = "ceo_decision.md"


@dataclass(slots=True, frozen=True)
class DecisionRequest:
    prompt: str
    prompt_file: Path
    models: tuple[str, ...]
    ceo_model: str
    output_dir: Path
    arbitration_name: str = DEFAULT_ARBITRATION_DOCUMENT_NAME
    decision_name: str = DEFAULT_DECISION_DOCUMENT_NAME

    def __post_init__(self) -> None:
        if not self.models:
            raise ConfigurationError("a decision request needs at least one board model")
        if not self.ceo_model:
            raise ConfigurationError("ceo_model is required")
        for name in (self.arbitration_name, self.decision_name):
            if not name or Path(name).name != name:
                raise ConfigurationError(f"artifact name {name!r} must be a plain file name")
        if self.arbitration_name == self.decision_name:
            raise ConfigurationError("arbitration and decision artifacts need distinct names")

    def as_dict(self) -> dict[str, object]:
        return {
            "prompt_file": str(self.prompt_file),
            "models": list(self.models),
            "ceo_model": self.ceo_model,
            "output_dir": str(self.output_dir),
            "arbitration_name": self.arbitration_name,
            "decision_name": self.decision_name,
        }
