from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

JsonDict = dict[str, Any]


class CommandStatus(StrEnum):
    EXECUTED = "executed"
    FAILED = "failed"


class ModelProvider(StrEnum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    GROQ = "groq"
    DEEPSEEK = "deepseek"
    OLLAMA = "ollama"


PROVIDER_ALIASES: dict[str, ModelProvider] = {
    "o": ModelProvider.OPENAI,
    "a": ModelProvider.ANTHROPIC,
    "g": ModelProvider.GEMINI,
    "q": ModelProvider.GROQ,
    "d": ModelProvider.DEEPSEEK,
    "l": ModelProvider.OLLAMA,
}


class PipelineStage(StrEnum):
    RESOLVING = "resolving"
    DISPATCHING = "dispatching"
    COLLECTING = "collecting"
    BUILDING = "building"
    ARBITRATING = "arbitrating"
    PERSISTING = "persisting"
    PERSISTED = "persisted"


class PipelineStatus(StrEnum):
    PERSISTED = "persisted"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class CommandResult:
    command: str
    status: CommandStatus
    details: JsonDict = field(default_factory=dict)

    def to_dict(self) -> JsonDict:
        return {
            "command": self.command,
            "status": self.status.value,
            "details": self.details,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
