from __future__ import annotations

from dataclasses import dataclass

from ceo_board.domain import ArbitrationDocument, Decision
from ceo_board.errors import ArbiterInvocationError
from ceo_board.gateway import PromptGateway
from ceo_board.observability.logging import get_logger
from ceo_board.orchestration.retry import AttemptsExhausted, RetryPolicy, call_with_retry


@dataclass(slots=True)
class ArbiterInvoker:
    gateway: PromptGateway
    retry: RetryPolicy

    async def decide(self, document: ArbitrationDocument, ceo_model: str) -> Decision:
        """Ask the CEO model for the final decision; any failure aborts the run."""
        logger = get_logger("arbiter")
        logger.info(
            "arbiter_invoked",
            ceo_model=ceo_model,
            board_size=len(document.results),
            document_hash=document.document_hash,
        )

        try:
            text, attempts = await call_with_retry(
                lambda: self.gateway.invoke(document.rendered, ceo_model),
                self.retry,
                label=ceo_model,
            )
        except AttemptsExhausted as exc:
            raise ArbiterInvocationError(
                f"{ceo_model} failed to decide after {exc.attempts} attempt(s): {exc.reason}"
            ) from exc.last_error

        if not isinstance(text, str) or not text.strip():
            raise ArbiterInvocationError(f"{ceo_model} returned an empty decision")

        logger.info("arbiter_decided", ceo_model=ceo_model, attempts=attempts, chars=len(text))
        return Decision(ceo_model=ceo_model, text=text, document=document)
