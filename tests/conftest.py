from __future__ import annotations

import asyncio
from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest
import structlog

from ceo_board.gateway import GatewayReply
from ceo_board.orchestration.board_config import BoardConfig

Behaviour = str | Exception | None

PROMPT = "Should we expand into the European market next quarter?"


class StubGateway:
    """Deterministic in-memory gateway.

    ``responses`` maps a model identifier to its answer, to an ``Exception``
    (reported as a gateway error reply) or to ``None`` (model hangs forever).
    Models without an entry echo the prompt.
    """

    def __init__(
        self,
        responses: dict[str, Behaviour] | None = None,
        decision: str | Exception = "Expand, starting with Germany.",
        raise_for: Sequence[str] = (),
    ) -> None:
        self.responses = dict(responses or {})
        self.decision = decision
        self.raise_for = set(raise_for)
        self.dispatch_calls: list[list[str]] = []
        self.invoke_calls: list[tuple[str, str]] = []

    async def dispatch(
        self,
        prompt_file: Path,
        model_identifiers: Sequence[str],
        output_dir: Path,
    ) -> list[GatewayReply]:
        self.dispatch_calls.append(list(model_identifiers))
        prompt = prompt_file.read_text(encoding="utf-8")
        output_dir.mkdir(parents=True, exist_ok=True)

        replies: list[GatewayReply] = []
        for model in model_identifiers:
            if model in self.raise_for:
                raise RuntimeError(f"gateway crashed for {model}")

            behaviour = self.responses.get(model, f"{model} answers: {prompt}")
            if behaviour is None:
                await asyncio.sleep(3600)
            if isinstance(behaviour, Exception):
                replies.append(GatewayReply(model=model, error=str(behaviour)))
                continue

            response_file = output_dir / f"{model.replace(':', '_')}.md"
            response_file.write_text(str(behaviour), encoding="utf-8")
            replies.append(GatewayReply(model=model, response_file=response_file))
        return replies

    async def invoke(self, prompt_text: str, model_identifier: str) -> str:
        self.invoke_calls.append((prompt_text, model_identifier))
        if isinstance(self.decision, Exception):
            raise self.decision
        return self.decision


@pytest.fixture
def prompt_file(tmp_path: Path) -> Path:
    path = tmp_path / "prompt.md"
    path.write_text(PROMPT, encoding="utf-8")
    return path


@pytest.fixture
def board_config() -> BoardConfig:
    return BoardConfig(
        fallback_models="openai:gpt-4o-mini",
        ceo_model="openai:o3",
        worker_timeout_seconds=2.0,
        arbiter_timeout_seconds=2.0,
        max_retries=1,
        retry_base_delay_seconds=0.0,
    )


@pytest.fixture
def stub_gateway_factory() -> type[StubGateway]:
    return StubGateway


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
