from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from ceo_board.domain import DecisionRequest, DispatchOutcome
from ceo_board.errors import WorkerInvocationError
from ceo_board.gateway import PromptGateway
from ceo_board.observability.logging import get_logger
from ceo_board.orchestration.retry import (
    AttemptsExhausted,
    RetryPolicy,
    call_with_retry,
    describe_error,
)


def slot_directory(scratch_dir: Path, slot: int) -> Path:
    return scratch_dir / f"slot-{slot:02d}"


@dataclass(slots=True)
class Dispatcher:
    """Fan the prompt out to every board model, one independent slot per model.

    The returned tuple is built position by position from ``request.models``,
    so its length and order always match the request. A failing, stalled or
    misbehaving model only ever turns its own slot into a failed outcome.
    """

    gateway: PromptGateway
    retry: RetryPolicy
    max_concurrency: int = 8

    async def dispatch(
        self, request: DecisionRequest, scratch_dir: Path
    ) -> tuple[DispatchOutcome, ...]:
        semaphore = asyncio.Semaphore(max(1, self.max_concurrency))
        outcomes = await asyncio.gather(
            *(
                self._dispatch_slot(slot, model, request.prompt_file, scratch_dir, semaphore)
                for slot, model in enumerate(request.models)
            )
        )
        return tuple(outcomes)

    async def _dispatch_slot(
        self,
        slot: int,
        model: str,
        prompt_file: Path,
        scratch_dir: Path,
        semaphore: asyncio.Semaphore,
    ) -> DispatchOutcome:
        logger = get_logger("dispatcher")
        output_dir = slot_directory(scratch_dir, slot)

        async with semaphore:
            try:
                response_file, attempts = await call_with_retry(
                    lambda: self._dispatch_once(prompt_file, model, output_dir),
                    self.retry,
                    label=model,
                    reason_for=self._reason_for,
                )
            except AttemptsExhausted as exc:
                logger.warning(
                    "worker_failed",
                    slot=slot,
                    model=model,
                    attempts=exc.attempts,
                    error=exc.reason,
                )
                return DispatchOutcome.failed(model, exc.reason, attempts=exc.attempts)

        logger.info("worker_responded", slot=slot, model=model, attempts=attempts)
        return DispatchOutcome.succeeded(model, response_file, attempts=attempts)

    async def _dispatch_once(self, prompt_file: Path, model: str, output_dir: Path) -> Path:
        replies = await self.gateway.dispatch(prompt_file, [model], output_dir)
        if not replies:
            raise WorkerInvocationError(model, "gateway returned no reply")
        if len(replies) > 1:
            get_logger("dispatcher").warning(
                "gateway_extra_replies_ignored",
                model=model,
                replies=len(replies),
            )

        reply = replies[0]
        if reply.error is not None:
            raise WorkerInvocationError(model, reply.error)
        if reply.response_file is None:
            raise WorkerInvocationError(model, "gateway reply carries no response")
        return reply.response_file

    def _reason_for(self, exc: Exception) -> str:
        if isinstance(exc, WorkerInvocationError):
            return exc.reason
        if isinstance(exc, TimeoutError):
            return describe_error(exc, self.retry.timeout_seconds)
        return f"{type(exc).__name__}: {exc}"
