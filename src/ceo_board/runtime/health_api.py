from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from ceo_board.config import AppSettings, get_settings
from ceo_board.errors import ConfigurationError
from ceo_board.orchestration.board_config import BoardConfig
from ceo_board.orchestration.resolver import resolve_board


def build_health_app(settings: AppSettings, board: BoardConfig) -> FastAPI:
    app = FastAPI(title="ceo-board-health", version="0.1.0")

    @app.get("/livez")
    async def livez() -> dict[str, str]:
        return {"status": "ok", "app_env": settings.app_env}

    @app.get("/readyz")
    async def readyz() -> dict[str, Any]:
        try:
            selection = resolve_board(None, board)
        except ConfigurationError as exc:
            return {"status": "misconfigured", "error": str(exc)}
        return {"status": "ready", **selection.as_dict()}

    return app


def default_health_app() -> FastAPI:
    settings = get_settings()
    return build_health_app(settings, BoardConfig.from_settings(settings))
