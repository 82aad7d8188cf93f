from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(slots=True, frozen=True)
class GatewayReply:
    """One entry of a gateway dispatch: a response file or an error, per model."""

    model: str
    response_file: Path | None = None
    error: str | None = None


class PromptGateway(Protocol):
    async def dispatch(
        self,
        prompt_file: Path,
        model_identifiers: Sequence[str],
        output_dir: Path,
    ) -> list[GatewayReply]:
        ...

    async def invoke(self, prompt_text: str, model_identifier: str) -> str:
        ...


class ModelClient(Protocol):
    async def complete(self, prompt_text: str, model_identifier: str) -> str:
        ...
