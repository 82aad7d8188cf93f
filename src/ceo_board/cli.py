from __future__ import annotations

import json
from argparse import ArgumentParser, Namespace
from collections.abc import Callable, Sequence

from ceo_board.commands import run_decide, run_resolve_board
from ceo_board.config import AppSettings, get_settings
from ceo_board.observability.logging import configure_logging
from ceo_board.types import CommandResult, CommandStatus

CommandHandler = Callable[[Namespace, AppSettings], CommandResult]

COMMAND_HANDLERS: dict[str, CommandHandler] = {
    "decide": run_decide,
    "resolve-board": run_resolve_board,
}


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="ceo-board",
        description="Fan a prompt out to a board of models and let a CEO model decide",
    )
    parser.add_argument("--json", action="store_true", help="emit machine-readable JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    decide = subparsers.add_parser("decide")
    decide.add_argument("--prompt-file", required=True)
    decide.add_argument("--output-dir", required=True)
    decide.add_argument("--models", default="", help="comma-separated provider:model list")
    decide.add_argument("--ceo-model", default="")
    decide.add_argument("--arbitration-name", default="")
    decide.add_argument("--decision-name", default="")
    decide.add_argument("--overwrite", action="store_true")

    resolve = subparsers.add_parser("resolve-board")
    resolve.add_argument("--models", default="", help="comma-separated provider:model list")
    resolve.add_argument("--ceo-model", default="")

    return parser


def _emit_result(result: CommandResult, *, as_json: bool) -> None:
    if as_json:
        print(result.to_json())
        return

    print(f"{result.command}: {result.status.value}")
    if result.details:
        print(json.dumps(result.details, indent=2, sort_keys=True))


def entrypoint(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    settings = get_settings()
    configure_logging(settings.log_level)

    handler = COMMAND_HANDLERS[str(args.command)]
    result = handler(args, settings)
    _emit_result(result, as_json=bool(args.json))
    return 1 if result.status == CommandStatus.FAILED else 0


if __name__ == "__main__":
    raise SystemExit(entrypoint())
