from __future__ import annotations

import tempfile
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from ceo_board.domain import Artifacts, Decision, DecisionRequest, WorkerResult
from ceo_board.errors import BoardError, InputNotFoundError
from ceo_board.gateway import PromptGateway
from ceo_board.observability.logging import get_logger
from ceo_board.orchestration.arbiter import ArbiterInvoker
from ceo_board.orchestration.artifact_store import ArtifactStore
from ceo_board.orchestration.board_config import BoardConfig
from ceo_board.orchestration.collector import collect_worker_results
from ceo_board.orchestration.dispatcher import Dispatcher
from ceo_board.orchestration.document_builder import build_arbitration_document
from ceo_board.orchestration.resolver import resolve_board
from ceo_board.types import PipelineStage, PipelineStatus


@dataclass(slots=True, frozen=True)
class PipelineResult:
    status: PipelineStatus
    stage: PipelineStage
    request: DecisionRequest | None = None
    results: tuple[WorkerResult, ...] = ()
    diagnostics: tuple[str, ...] = ()
    decision: Decision | None = None
    artifacts: Artifacts | None = None
    error: BoardError | None = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.status == PipelineStatus.PERSISTED

    def as_dict(self) -> dict[str, Any]:
        details: dict[str, Any] = {
            "status": self.status.value,
            "stage": self.stage.value,
            "board": [result.as_dict() for result in self.results],
            "diagnostics": list(self.diagnostics),
        }
        if self.request is not None:
            details["request"] = self.request.as_dict()
        if self.artifacts is not None:
            details["artifacts"] = self.artifacts.as_dict()
        if self.error is not None:
            details["error"] = str(self.error)
            details["error_type"] = type(self.error).__name__
        return details


def read_prompt(prompt_file: Path) -> str:
    try:
        prompt = prompt_file.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InputNotFoundError(f"prompt file not found: {prompt_file}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InputNotFoundError(f"prompt file is not readable: {prompt_file}: {exc}") from exc

    if not prompt.strip():
        raise InputNotFoundError(f"prompt file contains no prompt text: {prompt_file}")
    return prompt


class BoardPipeline:
    """Resolve the board, fan the prompt out, join, build, arbitrate, persist.

    ``run`` never raises for stage-fatal errors: they come back as a failed
    ``PipelineResult`` tagged with the stage that was running. Worker failures
    are not stage-fatal; they show up as failure markers in the document.
    Cancellation propagates and removes the scratch directory holding worker
    responses; final artifacts are only written after the decision exists.
    """

    def __init__(self, gateway: PromptGateway, config: BoardConfig) -> None:
        self._gateway = gateway
        self._config = config
        self._dispatcher = Dispatcher(
            gateway=gateway,
            retry=config.worker_retry_policy(),
            max_concurrency=config.max_concurrency,
        )
        self._arbiter = ArbiterInvoker(gateway=gateway, retry=config.arbiter_retry_policy())

    async def run(
        self,
        prompt_file: Path,
        output_dir: Path,
        *,
        models: Sequence[str] | None = None,
        ceo_model: str | None = None,
        arbitration_name: str | None = None,
        decision_name: str | None = None,
        overwrite: bool = False,
    ) -> PipelineResult:
        with structlog.contextvars.bound_contextvars(run_id=uuid.uuid4().hex[:12]):
            return await self._run(
                prompt_file,
                output_dir,
                models=models,
                ceo_model=ceo_model,
                arbitration_name=arbitration_name or self._config.arbitration_name,
                decision_name=decision_name or self._config.decision_name,
                overwrite=overwrite,
            )

    async def _run(
        self,
        prompt_file: Path,
        output_dir: Path,
        *,
        models: Sequence[str] | None,
        ceo_model: str | None,
        arbitration_name: str,
        decision_name: str,
        overwrite: bool,
    ) -> PipelineResult:
        logger = get_logger("pipeline")
        stage = PipelineStage.RESOLVING
        request: DecisionRequest | None = None
        results: tuple[WorkerResult, ...] = ()
        diagnostics: tuple[str, ...] = ()
        decision: Decision | None = None

        try:
            logger.info("pipeline_stage", stage=stage.value)
            selection = resolve_board(models, self._config, ceo_model=ceo_model)
            prompt = read_prompt(prompt_file)
            request = DecisionRequest(
                prompt=prompt,
                prompt_file=prompt_file,
                models=selection.models,
                ceo_model=selection.ceo_model,
                output_dir=output_dir,
                arbitration_name=arbitration_name,
                decision_name=decision_name,
            )

            with tempfile.TemporaryDirectory(prefix="ceo-board-") as scratch:
                stage = PipelineStage.DISPATCHING
                logger.info("pipeline_stage", stage=stage.value, board=list(request.models))
                outcomes = await self._dispatcher.dispatch(request, Path(scratch))

                stage = PipelineStage.COLLECTING
                logger.info("pipeline_stage", stage=stage.value)
                collection = collect_worker_results(request.models, outcomes)
                results = collection.results
                diagnostics = collection.diagnostics

            if results and collection.answered == 0:
                logger.warning("board_all_failed", board_size=len(results))

            stage = PipelineStage.BUILDING
            logger.info("pipeline_stage", stage=stage.value)
            document = build_arbitration_document(request.prompt, results)

            stage = PipelineStage.ARBITRATING
            logger.info("pipeline_stage", stage=stage.value, ceo_model=request.ceo_model)
            decision = await self._arbiter.decide(document, request.ceo_model)

            stage = PipelineStage.PERSISTING
            logger.info("pipeline_stage", stage=stage.value, output_dir=str(output_dir))
            store = ArtifactStore(
                output_dir=output_dir,
                arbitration_name=request.arbitration_name,
                decision_name=request.decision_name,
                overwrite=overwrite,
            )
            artifacts = store.persist(document, decision)
        except BoardError as exc:
            logger.error(
                "pipeline_failed",
                stage=stage.value,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return PipelineResult(
                status=PipelineStatus.FAILED,
                stage=stage,
                request=request,
                results=results,
                diagnostics=diagnostics,
                decision=decision,
                error=exc,
            )

        logger.info("pipeline_stage", stage=PipelineStage.PERSISTED.value)
        return PipelineResult(
            status=PipelineStatus.PERSISTED,
            stage=PipelineStage.PERSISTED,
            request=request,
            results=results,
            diagnostics=diagnostics,
            decision=decision,
            artifacts=artifacts,
        )


async def run_board_pipeline(
    gateway: PromptGateway,
    config: BoardConfig,
    prompt_file: Path,
    output_dir: Path,
    **options: Any,
) -> PipelineResult:
    return await BoardPipeline(gateway, config).run(prompt_file, output_dir, **options)
