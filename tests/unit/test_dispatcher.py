from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from ceo_board.domain import DecisionRequest, DispatchOutcome
from ceo_board.gateway import GatewayReply
from ceo_board.orchestration.dispatcher import Dispatcher
from ceo_board.orchestration.retry import RetryPolicy

FAST_RETRY = RetryPolicy(max_retries=2, base_delay_seconds=0.0, timeout_seconds=1.0)


def _request(prompt_file: Path, models: Sequence[str]) -> DecisionRequest:
    return DecisionRequest(
        prompt=prompt_file.read_text(encoding="utf-8"),
        prompt_file=prompt_file,
        models=tuple(models),
        ceo_model="openai:o3",
        output_dir=prompt_file.parent / "out",
    )


def _dispatch(dispatcher: Dispatcher, request: DecisionRequest, scratch: Path) -> tuple[DispatchOutcome, ...]:
    return asyncio.run(dispatcher.dispatch(request, scratch))


def test_dispatch_keeps_request_order_and_length(prompt_file, stub_gateway_factory, tmp_path) -> None:
    models = ["openai:gpt-4o", "anthropic:claude-3-5-haiku", "gemini:gemini-2.0-flash"]
    gateway = stub_gateway_factory()

    outcomes = _dispatch(Dispatcher(gateway, FAST_RETRY), _request(prompt_file, models), tmp_path)

    assert [outcome.model for outcome in outcomes] == models
    assert all(outcome.ok for outcome in outcomes)
    assert sorted(call[0] for call in gateway.dispatch_calls) == sorted(models)


def test_failing_model_does_not_affect_the_others(prompt_file, stub_gateway_factory, tmp_path) -> None:
    models = ["openai:gpt-4o", "anthropic:claude-3-5-haiku", "gemini:gemini-2.0-flash"]
    gateway = stub_gateway_factory(responses={"anthropic:claude-3-5-haiku": ValueError("invalid api key")})

    outcomes = _dispatch(Dispatcher(gateway, FAST_RETRY), _request(prompt_file, models), tmp_path)

    assert [outcome.ok for outcome in outcomes] == [True, False, True]
    assert outcomes[1].error == "invalid api key"
    assert outcomes[1].attempts == 1


def test_gateway_exception_becomes_failed_outcome(prompt_file, stub_gateway_factory, tmp_path) -> None:
    models = ["openai:gpt-4o", "groq:llama3"]
    gateway = stub_gateway_factory(raise_for=["groq:llama3"])

    outcomes = _dispatch(Dispatcher(gateway, FAST_RETRY), _request(prompt_file, models), tmp_path)

    assert outcomes[0].ok
    assert not outcomes[1].ok
    assert outcomes[1].error == "RuntimeError: gateway crashed for groq:llama3"


def test_stalled_model_times_out_without_blocking_the_batch(
    prompt_file, stub_gateway_factory, tmp_path
) -> None:
    models = ["openai:gpt-4o", "ollama:llama3"]
    gateway = stub_gateway_factory(responses={"ollama:llama3": None})
    policy = RetryPolicy(max_retries=0, base_delay_seconds=0.0, timeout_seconds=0.05)

    outcomes = _dispatch(Dispatcher(gateway, policy), _request(prompt_file, models), tmp_path)

    assert outcomes[0].ok
    assert outcomes[1].error == "timed out after 0.05s"


def test_transient_failures_are_retried(prompt_file, tmp_path) -> None:
    class FlakyGateway:
        def __init__(self) -> None:
            self.calls = 0

        async def dispatch(self, prompt_file, model_identifiers, output_dir):
            self.calls += 1
            if self.calls == 1:
                raise ConnectionError("connection reset by peer")
            output_dir.mkdir(parents=True, exist_ok=True)
            response_file = output_dir / "answer.md"
            response_file.write_text("second time lucky", encoding="utf-8")
            return [GatewayReply(model=model_identifiers[0], response_file=response_file)]

        async def invoke(self, prompt_text, model_identifier):
            raise NotImplementedError

    gateway = FlakyGateway()

    outcomes = _dispatch(
        Dispatcher(gateway, FAST_RETRY), _request(prompt_file, ["openai:gpt-4o"]), tmp_path
    )

    assert outcomes[0].ok
    assert outcomes[0].attempts == 2
    assert gateway.calls == 2


def test_retries_are_bounded(prompt_file, stub_gateway_factory, tmp_path) -> None:
    gateway = stub_gateway_factory(responses={"openai:gpt-4o": RuntimeError("503 service unavailable")})

    outcomes = _dispatch(
        Dispatcher(gateway, FAST_RETRY), _request(prompt_file, ["openai:gpt-4o"]), tmp_path
    )

    assert not outcomes[0].ok
    assert outcomes[0].attempts == FAST_RETRY.max_attempts
    assert len(gateway.dispatch_calls) == FAST_RETRY.max_attempts


def test_empty_gateway_reply_becomes_failed_outcome(prompt_file, tmp_path) -> None:
    class SilentGateway:
        async def dispatch(self, prompt_file, model_identifiers, output_dir):
            return []

        async def invoke(self, prompt_text, model_identifier):
            raise NotImplementedError

    outcomes = _dispatch(
        Dispatcher(SilentGateway(), FAST_RETRY),
        _request(prompt_file, ["openai:gpt-4o", "groq:llama3"]),
        tmp_path,
    )

    assert len(outcomes) == 2
    assert [outcome.error for outcome in outcomes] == ["gateway returned no reply"] * 2


def test_each_slot_writes_into_its_own_directory(prompt_file, stub_gateway_factory, tmp_path) -> None:
    models = ["openai:gpt-4o", "openai:gpt-4o"]

    outcomes = _dispatch(
        Dispatcher(stub_gateway_factory(), FAST_RETRY), _request(prompt_file, models), tmp_path
    )

    paths = [outcome.response_file for outcome in outcomes]
    assert paths[0] != paths[1]
    assert paths[0].parent.name == "slot-00"
    assert paths[1].parent.name == "slot-01"


class OverlapGateway:
    """Records how many dispatch calls are in flight at the same time."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.peak = 0

    async def dispatch(self, prompt_file, model_identifiers, output_dir):
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(0.02)
        finally:
            self.in_flight -= 1
        output_dir.mkdir(parents=True, exist_ok=True)
        response_file = output_dir / "answer.md"
        response_file.write_text(f"{model_identifiers[0]} agrees", encoding="utf-8")
        return [GatewayReply(model=model_identifiers[0], response_file=response_file)]

    async def invoke(self, prompt_text, model_identifier):
        raise NotImplementedError


def test_board_members_are_queried_concurrently(prompt_file, tmp_path) -> None:
    models = ["openai:gpt-4o", "anthropic:claude-3-5-haiku", "gemini:gemini-2.0-flash"]
    gateway = OverlapGateway()

    outcomes = _dispatch(Dispatcher(gateway, FAST_RETRY), _request(prompt_file, models), tmp_path)

    assert all(outcome.ok for outcome in outcomes)
    assert gateway.peak == len(models)


def test_concurrency_limit_is_respected(prompt_file, tmp_path) -> None:
    models = ["openai:gpt-4o", "anthropic:claude-3-5-haiku", "gemini:gemini-2.0-flash"]
    gateway = OverlapGateway()

    outcomes = _dispatch(
        Dispatcher(gateway, FAST_RETRY, max_concurrency=1), _request(prompt_file, models), tmp_path
    )

    assert [outcome.model for outcome in outcomes] == models
    assert all(outcome.ok for outcome in outcomes)
    assert gateway.peak == 1
