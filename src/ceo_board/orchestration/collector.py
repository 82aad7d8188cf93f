from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ceo_board.domain import DispatchOutcome, WorkerResult
from ceo_board.errors import CollectionMismatchError
from ceo_board.observability.logging import get_logger


@dataclass(slots=True, frozen=True)
class Collection:
    results: tuple[WorkerResult, ...]
    diagnostics: tuple[str, ...] = ()

    @property
    def answered(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return len(self.results) - self.answered


def _resolve_outcome(model: str, outcome: DispatchOutcome) -> WorkerResult:
    if outcome.error is not None or outcome.response_file is None:
        return WorkerResult.unanswered(model, outcome.error or "no response")

    try:
        text = outcome.response_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return WorkerResult.unanswered(
            model, f"could not read response file {outcome.response_file.name}: {exc}"
        )

    if not text.strip():
        return WorkerResult.unanswered(model, "empty response")
    return WorkerResult.answered(model, text)


def collect_worker_results(
    requested_models: Sequence[str],
    outcomes: Sequence[DispatchOutcome],
) -> Collection:
    """Turn dispatch outcomes into one WorkerResult per requested model.

    Results keep the requested identifiers and order. If the two sequences
    disagree in length the shorter one wins and the mismatch is reported as a
    diagnostic instead of an exception.
    """
    logger = get_logger("collector")
    diagnostics: list[str] = []

    if len(requested_models) != len(outcomes):
        mismatch = CollectionMismatchError(len(requested_models), len(outcomes))
        logger.warning(
            "collection_mismatch",
            requested=mismatch.requested,
            returned=mismatch.returned,
            kept=min(mismatch.requested, mismatch.returned),
        )
        diagnostics.append(str(mismatch))

    results: list[WorkerResult] = []
    for slot, (model, outcome) in enumerate(zip(requested_models, outcomes)):
        if outcome.model != model:
            diagnostics.append(
                f"slot {slot}: dispatch outcome is for {outcome.model!r}, expected {model!r}"
            )
        results.append(_resolve_outcome(model, outcome))

    collection = Collection(results=tuple(results), diagnostics=tuple(diagnostics))
    logger.info(
        "board_collected",
        answered=collection.answered,
        failed=collection.failed,
        diagnostics=len(collection.diagnostics),
    )
    return collection
