"""Infinite XO package exposing game logic, AI strategies, and the web application."""

from .ai import (
    MoveSelector,
    NoMovesAvailable,
    Strategy,
    best_move,
    medium_move,
    random_move,
)
from .game import BoardEngine, InvalidMove, MoveResult, Outcome, Status, check_outcome
from .ui import app

__all__ = [
    "BoardEngine",
    "InvalidMove",
    "MoveResult",
    "MoveSelector",
    "NoMovesAvailable",
    "Outcome",
    "Status",
    "Strategy",
    "app",
    "best_move",
    "check_outcome",
    "medium_move",
    "random_move",
]
