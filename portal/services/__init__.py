"""Service layer helpers."""

from .games import Game, load_games
from .trophies import submit_trophy, trophy_to_dict

__all__ = ["Game", "load_games", "submit_trophy", "trophy_to_dict"]
