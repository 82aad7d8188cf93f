"""Command handlers for the ceo-board CLI."""

from ceo_board.commands.decide import run_decide
from ceo_board.commands.resolve_board import run_resolve_board

__all__ = [
    "run_decide",
    "run_resolve_board",
]
