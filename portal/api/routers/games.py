"""Game catalogue endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from ...core import Settings
from ...models import User
from ...services.games import load_games
from ..deps import get_current_user, get_settings

router = APIRouter(tags=["games"])

logger = logging.getLogger(__name__)


@router.get("/api/games")
def list_games(
    user: Optional[User] = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    """List the games found under the games directory."""

    if not user:
        return JSONResponse({"ok": False, "error": "Unauthorized"}, status_code=401)
    games = load_games(settings.games_dir)
    return {"ok": True, "items": [game.summary() for game in games.values()]}


@router.get("/play/{game_id}")
def play_game(
    game_id: str,
    user: Optional[User] = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    """Serve the entry HTML file of a game.

    Ids that are not numbers, or that match no game, redirect to ``/``.
    """

    if not user:
        return RedirectResponse("/login", status_code=302)

    try:
        numeric_id = int(game_id)
    except ValueError:
        numeric_id = None
    game = load_games(settings.games_dir).get(numeric_id) if numeric_id is not None else None
    if not game:
        logger.warning("/play/%s: game not found", game_id)
        return RedirectResponse("/", status_code=302)

    entry = settings.games_dir / game.folder / game.entry_file
    if not entry.is_file():
        logger.warning("Missing entry file: %s", entry)
        raise HTTPException(404, "Game not found")
    return FileResponse(entry)


__all__ = ["router"]
