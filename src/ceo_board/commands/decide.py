from __future__ import annotations

import asyncio
from argparse import Namespace
from pathlib import Path

from ceo_board.config import AppSettings
from ceo_board.gateway import ModelClientGateway, PromptGateway
from ceo_board.gateway.openai_client import OpenAICompatibleClient
from ceo_board.orchestration.board_config import BoardConfig
from ceo_board.orchestration.pipeline import BoardPipeline
from ceo_board.orchestration.resolver import parse_model_list
from ceo_board.types import CommandResult, CommandStatus


def build_default_gateway(settings: AppSettings) -> PromptGateway:
    return ModelClientGateway(client=OpenAICompatibleClient(settings))


def _optional_string(raw_value: object) -> str | None:
    if raw_value is None:
        return None
    normalized = str(raw_value).strip()
    return normalized or None


def run_decide(args: Namespace, settings: AppSettings) -> CommandResult:
    prompt_file = _optional_string(getattr(args, "prompt_file", None))
    output_dir = _optional_string(getattr(args, "output_dir", None))
    if prompt_file is None or output_dir is None:
        return CommandResult(
            command="decide",
            status=CommandStatus.FAILED,
            details={"error": "prompt_file and output_dir are required", "stage": "resolving"},
        )

    pipeline = BoardPipeline(build_default_gateway(settings), BoardConfig.from_settings(settings))
    result = asyncio.run(
        pipeline.run(
            Path(prompt_file),
            Path(output_dir),
            models=parse_model_list(_optional_string(getattr(args, "models", None))),
            ceo_model=_optional_string(getattr(args, "ceo_model", None)),
            arbitration_name=_optional_string(getattr(args, "arbitration_name", None)),
            decision_name=_optional_string(getattr(args, "decision_name", None)),
            overwrite=bool(getattr(args, "overwrite", False)),
        )
    )

    return CommandResult(
        command="decide",
        status=CommandStatus.EXECUTED if result.ok else CommandStatus.FAILED,
        details=result.as_dict(),
    )
