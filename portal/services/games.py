"""Game catalogue built from the folders under the games directory."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ENTRY_CANDIDATES = ("index.html", "game.html", "main.html")
_HTML_RE = re.compile(r"\.html?$", re.IGNORECASE)


@dataclass(frozen=True)
class Game:
    id: int
    folder: str
    name: str
    description: str
    icon: str
    category: str
    difficulty: str
    entry_file: str

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
        }


def stable_id_from_folder(folder: str) -> int:
    """32-bit string hash (``h = 31*h + c``) of the folder name, made non-negative.

    ``c`` runs over UTF-16 code units, so characters outside the BMP count as
    their two surrogates.
    """

    data = str(folder).encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def _display_name(folder: str) -> str:
    spaced = re.sub(r"[-_]", " ", folder)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def _read_meta(meta_file: Path) -> Dict[str, Any]:
    if not meta_file.is_file():
        return {}
    try:
        meta = json.loads(meta_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Failed to parse %s: %s", meta_file, exc)
        return {}
    return meta if isinstance(meta, dict) else {}


def _find_entry_file(directory: Path, folder: str, meta: Dict[str, Any]) -> Optional[str]:
    if meta.get("entryFile"):
        return str(meta["entryFile"])
    for candidate in (*ENTRY_CANDIDATES, f"{folder}.html"):
        if (directory / candidate).is_file():
            return candidate
    for path in sorted(directory.iterdir()):
        if path.is_file() and _HTML_RE.search(path.name):
            return path.name
    return None


def load_games(games_dir: Path) -> Dict[int, Game]:
    """Scan ``games_dir`` and return games keyed by their stable id."""

    games: Dict[int, Game] = {}
    if not games_dir.is_dir():
        return games

    folders = sorted(entry.name for entry in games_dir.iterdir() if entry.is_dir())
    for folder in folders:
        directory = games_dir / folder
        meta = _read_meta(directory / "game.json")

        entry_file = _find_entry_file(directory, folder, meta)
        if not entry_file:
            logger.warning("Skip %s: no HTML entry found", folder)
            continue

        raw_name = str(meta.get("name") or "").strip()
        name = raw_name or _display_name(folder)
        game = Game(
            id=stable_id_from_folder(folder),
            folder=folder,
            name=name,
            description=meta.get("description") or f"A fun game: {name}",
            icon=meta.get("icon") or "🎮",
            category=meta.get("category") or "General",
            difficulty=meta.get("difficulty") or "medium",
            entry_file=entry_file,
        )
        games[game.id] = game
    return games


__all__ = ["Game", "load_games", "stable_id_from_folder"]
