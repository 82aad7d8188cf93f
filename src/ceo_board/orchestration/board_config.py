from __future__ import annotations

from dataclasses import dataclass

from ceo_board.config import AppSettings
from ceo_board.domain import DEFAULT_ARBITRATION_DOCUMENT_NAME, DEFAULT_DECISION_DOCUMENT_NAME
from ceo_board.orchestration.retry import RetryPolicy

DEFAULT_CEO_MODEL = "openai:o3"


@dataclass(slots=True, frozen=True)
class BoardConfig:
    """Board settings resolved once at the process boundary.

    The pipeline only ever sees this object; it never reads the environment.
    """

    fallback_models: str = ""
    ceo_model: str = DEFAULT_CEO_MODEL
    worker_timeout_seconds: float | None = 120.0
    arbiter_timeout_seconds: float | None = 300.0
    max_retries: int = 2
    retry_base_delay_seconds: float = 2.0
    max_concurrency: int = 8
    arbitration_name: str = DEFAULT_ARBITRATION_DOCUMENT_NAME
    decision_name: str = DEFAULT_DECISION_DOCUMENT_NAME

    @classmethod
    def from_settings(cls, settings: AppSettings) -> BoardConfig:
        return cls(
            fallback_models=settings.default_models,
            ceo_model=settings.ceo_model,
            worker_timeout_seconds=settings.worker_timeout_seconds,
            arbiter_timeout_seconds=settings.arbiter_timeout_seconds,
            max_retries=settings.max_retries,
            retry_base_delay_seconds=settings.retry_base_delay_seconds,
            max_concurrency=settings.max_concurrency,
            arbitration_name=settings.arbitration_document_name,
            decision_name=settings.decision_document_name,
        )

    def worker_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay_seconds=self.retry_base_delay_seconds,
            timeout_seconds=self.worker_timeout_seconds,
        )

    def arbiter_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            base_delay_seconds=self.retry_base_delay_seconds,
            timeout_seconds=self.arbiter_timeout_seconds,
        )
