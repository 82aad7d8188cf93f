from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class DispatchOutcome:
    """Tagged result of dispatching the prompt to one board member."""

    model: str
    response_file: Path | None = None
    error: str | None = None
    attempts: int = 1

    def __post_init__(self) -> None:
        if (self.response_file is None) == (self.error is None):
            raise ValueError("dispatch outcome needs exactly one of response_file or error")

    @property
    def ok(self) -> bool:
        return self.response_file is not None

    @classmethod
    def succeeded(cls, model: str, response_file: Path, *, attempts: int = 1) -> DispatchOutcome:
        return cls(model=model, response_file=response_file, attempts=attempts)

    @classmethod
    def failed(cls, model: str, error: str, *, attempts: int = 1) -> DispatchOutcome:
        return cls(model=model, error=error, attempts=attempts)


def failure_marker(model: str, reason: str) -> str:
    return f"{model} failed to respond: {reason}"


@dataclass(slots=True, frozen=True)
class WorkerResult:
    model: str
    response: str | None = None
    failure: str | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.failure is None):
            raise ValueError("worker result needs exactly one of response or failure")

    @property
    def ok(self) -> bool:
        return self.response is not None

    @property
    def text(self) -> str:
        if self.response is not None:
            return self.response
        return str(self.failure)

    @classmethod
    def answered(cls, model: str, response: str) -> WorkerResult:
        return cls(model=model, response=response)

    @classmethod
    def unanswered(cls, model: str, reason: str) -> WorkerResult:
        return cls(model=model, failure=failure_marker(model, reason))

    def as_dict(self) -> dict[str, object]:
        return {
            "model": self.model,
            "ok": self.ok,
            "failure": self.failure,
        }
