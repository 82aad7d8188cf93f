from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ceo_board.gateway.base import GatewayReply, ModelClient
from ceo_board.observability.logging import get_logger

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def response_file_name(position: int, model_identifier: str) -> str:
    return f"{position:02d}-{_UNSAFE_FILENAME_CHARS.sub('_', model_identifier)}.md"


@dataclass(slots=True)
class ModelClientGateway:
    """Prompt gateway that writes each model's completion to a markdown file.

    File names carry the position in the batch, so a model listed twice gets
    two files.
    """

    client: ModelClient

    async def dispatch(
        self,
        prompt_file: Path,
        model_identifiers: Sequence[str],
        output_dir: Path,
    ) -> list[GatewayReply]:
        prompt_text = prompt_file.read_text(encoding="utf-8")
        output_dir.mkdir(parents=True, exist_ok=True)

        completions = await asyncio.gather(
            *(self.client.complete(prompt_text, model) for model in model_identifiers),
            return_exceptions=True,
        )

        replies: list[GatewayReply] = []
        for position, (model, completion) in enumerate(zip(model_identifiers, completions)):
            if isinstance(completion, BaseException):
                if isinstance(completion, asyncio.CancelledError):
                    raise completion
                get_logger("gateway").warning(
                    "gateway_completion_failed",
                    model=model,
                    error=str(completion),
                )
                error = f"{type(completion).__name__}: {completion}"
                replies.append(GatewayReply(model=model, error=error))
                continue

            response_file = output_dir / response_file_name(position, model)
            response_file.write_text(completion, encoding="utf-8")
            replies.append(GatewayReply(model=model, response_file=response_file))
        return replies

    async def invoke(self, prompt_text: str, model_identifier: str) -> str:
        return await self.client.complete(prompt_text, model_identifier)
