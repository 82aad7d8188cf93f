"""Immutable values passed between board pipeline stages."""

from ceo_board.domain.arbitration_document import ArbitrationDocument
from ceo_board.domain.decision import Artifacts, Decision
from ceo_board.domain.decision_request import (
    DEFAULT_ARBITRATION_DOCUMENT_NAME,
    DEFAULT_DECISION_DOCUMENT_NAME,
    DecisionRequest,
)
from ceo_board.domain.model_identifier import normalize_model_identifier, split_model_identifier
from ceo_board.domain.worker_result import DispatchOutcome, WorkerResult, failure_marker

__all__ = [
    "ArbitrationDocument",
    "Artifacts",
    "Decision",
    "DEFAULT_ARBITRATION_DOCUMENT_NAME",
    "DEFAULT_DECISION_DOCUMENT_NAME",
    "DecisionRequest",
    "DispatchOutcome",
    "WorkerResult",
    "failure_marker",
    "normalize_model_identifier",
    "split_model_identifier",
]
