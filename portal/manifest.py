"""Command-line helper that appends new games to the JSON game manifest."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

import click

DEFAULT_MANIFEST = Path("games") / "game-manifest.json"


class GameExistsError(ValueError):
    """The manifest already lists a game with this id."""


def game_template(game_id: str, title: str, today: Optional[date] = None) -> Dict[str, Any]:
    stamp = (today or date.today()).isoformat()
    return {
        "id": game_id,
        "file": f"{game_id}.html",
        "title": title,
        "description": "A fun game",
        "icon": "🎮",
        "version": "v1.0",
        "category": "Uncategorized",
        "tags": ["game"],
        "difficulty": "easy",
        "duration": "unknown",
        "players": "1 player",
        "image": f"/images/{game_id}.jpg",
        "color": "#3498db",
        "author": "Developer",
        "created": stamp,
        "updated": stamp,
        "requirements": {
            "camera": False,
            "gyroscope": False,
            "audio": False,
        },
    }


def load_manifest(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {"games": []}
    manifest = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(manifest, dict) or not isinstance(manifest.setdefault("games", []), list):
        raise ValueError("manifest must be an object with a 'games' list")
    return manifest


def add_game(path: Path, game_id: str, title: str, today: Optional[date] = None) -> Dict[str, Any]:
    """Append a templated entry for ``game_id`` and write the manifest back."""

    manifest = load_manifest(path)
    if any(game.get("id") == game_id for game in manifest["games"]):
        raise GameExistsError(f'Game id "{game_id}" already exists')

    entry = game_template(game_id, title, today)
    manifest["games"].append(entry)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False), encoding="utf-8")
    return entry


@click.command()
@click.argument("game_id")
@click.argument("title")
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_MANIFEST,
    show_default=True,
    help="Manifest file to update.",
)
def main(game_id: str, title: str, manifest_path: Path) -> None:
    """Add GAME_ID with display TITLE to the game manifest.

    Example:
        portal-add-game space-shooter "Space Shooter"
    """
    try:
        add_game(manifest_path, game_id, title)
    except GameExistsError as exc:
        raise click.ClickException(str(exc)) from exc
    except ValueError as exc:
        raise click.ClickException(f"Cannot read {manifest_path}: {exc}") from exc

    click.echo(f"[+] Added game: {title} ({game_id})")
    click.echo(f"[i] Now create the file: games/{game_id}.html")


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["GameExistsError", "add_game", "game_template", "load_manifest", "main"]
