"""Error taxonomy for the board pipeline.

Each error carries the pipeline stage it belongs to so a failed run can be
reported as ``failed at <stage>``. Worker and collection errors are normally
absorbed into results rather than raised to callers.
"""

from __future__ import annotations

from ceo_board.types import PipelineStage


class BoardError(Exception):
    stage: PipelineStage = PipelineStage.RESOLVING

    def __init__(self, message: str, *, stage: PipelineStage | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigurationError(BoardError):
    stage = PipelineStage.RESOLVING


class InputNotFoundError(BoardError):
    stage = PipelineStage.RESOLVING


class WorkerInvocationError(BoardError):
    stage = PipelineStage.DISPATCHING

    def __init__(self, model: str, reason: str) -> None:
        super().__init__(f"{model} failed to respond: {reason}")
        self.model = model
        self.reason = reason


class CollectionMismatchError(BoardError):
    stage = PipelineStage.COLLECTING

    def __init__(self, requested: int, returned: int) -> None:
        super().__init__(
            f"dispatch returned {returned} result(s) for {requested} requested model(s); "
            f"truncated to {min(requested, returned)}"
        )
        self.requested = requested
        self.returned = returned


class ArbiterInvocationError(BoardError):
    stage = PipelineStage.ARBITRATING


class PersistenceError(BoardError):
    stage = PipelineStage.PERSISTING
