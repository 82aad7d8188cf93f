from __future__ import annotations

from argparse import Namespace

from ceo_board.config import AppSettings
from ceo_board.errors import ConfigurationError
from ceo_board.orchestration.board_config import BoardConfig
from ceo_board.orchestration.resolver import parse_model_list, resolve_board
from ceo_board.types import CommandResult, CommandStatus


def run_resolve_board(args: Namespace, settings: AppSettings) -> CommandResult:
    raw_models = getattr(args, "models", None)
    raw_ceo_model = getattr(args, "ceo_model", None)

    try:
        selection = resolve_board(
            parse_model_list(str(raw_models) if raw_models else None),
            BoardConfig.from_settings(settings),
            ceo_model=str(raw_ceo_model) if raw_ceo_model else None,
        )
    except ConfigurationError as exc:
        return CommandResult(
            command="resolve-board",
            status=CommandStatus.FAILED,
            details={"error": str(exc), "stage": exc.stage.value},
        )

    return CommandResult(
        command="resolve-board",
        status=CommandStatus.EXECUTED,
        details=selection.as_dict(),
    )
