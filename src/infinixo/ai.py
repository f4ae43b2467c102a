"""Move selection for Infinite XO: full-depth minimax, block-or-win, and random."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional
import logging
import math
import random

from .game import EMPTY, WINNING_LINES, Player

logger = logging.getLogger(__name__)

Board = List[str]

WIN_SCORE = 10


class NoMovesAvailable(RuntimeError):
    """Raised when a strategy is asked to move on a board without empty cells."""


# ---- board helpers ----


def _empty_cells(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def _winner(board: Board) -> Optional[Player]:
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return v
    return None


@contextmanager
def _hypothetical(board: Board, index: int, mark: Player) -> Iterator[Board]:
    """Place ``mark`` at ``index`` for the duration of the block, then clear it."""
    board[index] = mark
    try:
        yield board
    finally:
        board[index] = EMPTY


# ---- optimal ----


def minimax(
    board: Board,
    depth: int,
    maximizing: bool,
    alpha: float,
    beta: float,
    ai_mark: Player,
    opponent_mark: Player,
) -> float:
    """Score ``board`` from ``ai_mark``'s point of view.

    Wins are worth ``10 - depth`` so faster wins score higher, losses
    ``depth - 10`` so slower losses score higher, and a full board is a draw.
    The lookahead never evicts: it explores an ordinary bounded board.
    """
    winner = _winner(board)
    if winner == ai_mark:
        return WIN_SCORE - depth
    if winner == opponent_mark:
        return depth - WIN_SCORE
    moves = _empty_cells(board)
    if not moves:
        return 0

    if maximizing:
        value = -math.inf
        for i in moves:
            with _hypothetical(board, i, ai_mark):
                score = minimax(
                    board, depth + 1, False, alpha, beta, ai_mark, opponent_mark
                )
            value = max(value, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return value

    value = math.inf
    for i in moves:
        with _hypothetical(board, i, opponent_mark):
            score = minimax(
                board, depth + 1, True, alpha, beta, ai_mark, opponent_mark
            )
        value = min(value, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return value


def best_move(board: Board, ai_mark: Player, opponent_mark: Player) -> int:
    """Optimal move for ``ai_mark``; ties go to the lowest index."""
    moves = _empty_cells(board)
    if not moves:
        raise NoMovesAvailable("No valid moves available")

    best_score = -math.inf
    best_index = moves[0]
    for i in moves:
        with _hypothetical(board, i, ai_mark):
            score = minimax(
                board, 0, False, -math.inf, math.inf, ai_mark, opponent_mark
            )
        if score > best_score:
            best_score, best_index = score, i
    return best_index


# ---- heuristic & random ----


def random_move(board: Board, rng: Optional[random.Random] = None) -> int:
    moves = _empty_cells(board)
    if not moves:
        raise NoMovesAvailable("No valid moves available")
    return (rng or random).choice(moves)


def _completing_move(board: Board, mark: Player) -> Optional[int]:
    for i in _empty_cells(board):
        with _hypothetical(board, i, mark):
            if _winner(board) == mark:
                return i
    return None


def medium_move(
    board: Board,
    ai_mark: Player,
    opponent_mark: Player,
    rng: Optional[random.Random] = None,
) -> int:
    """Win if possible, otherwise block the opponent, otherwise play at random."""
    win = _completing_move(board, ai_mark)
    if win is not None:
        return win
    block = _completing_move(board, opponent_mark)
    if block is not None:
        return block
    return random_move(board, rng)


# ---- strategy selection ----


class Strategy(str, Enum):
    OPTIMAL = "optimal"
    HEURISTIC = "heuristic"
    RANDOM = "random"

    @classmethod
    def parse(cls, name: str) -> "Strategy":
        """Accept strategy names and the difficulty labels shown to players."""
        key = name.strip().lower()
        if key in DIFFICULTY_ALIASES:
            return DIFFICULTY_ALIASES[key]
        try:
            return cls(key)
        except ValueError as exc:
            raise ValueError(f"Unknown strategy {name!r}") from exc


DIFFICULTY_ALIASES: Dict[str, Strategy] = {
    "hard": Strategy.OPTIMAL,
    "medium": Strategy.HEURISTIC,
    "easy": Strategy.RANDOM,
}


@dataclass
class MoveSelector:
    """Picks a cell for the AI using one of the three strategies.

    Callers hand in a board snapshot; the selector searches a private copy
    so the caller's list is never touched.
    """

    strategy: Strategy = Strategy.OPTIMAL
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        self._dispatch: Dict[Strategy, Callable[[Board, Player, Player], int]] = {
            Strategy.OPTIMAL: best_move,
            Strategy.HEURISTIC: lambda b, me, opp: medium_move(b, me, opp, self.rng),
            Strategy.RANDOM: lambda b, me, opp: random_move(b, self.rng),
        }

    def choose(self, board: Board, ai_mark: Player, opponent_mark: Player) -> int:
        if len(board) != 9:
            raise ValueError(f"Board must have 9 cells, got {len(board)}")
        snapshot = list(board)
        move = self._dispatch[self.strategy](snapshot, ai_mark, opponent_mark)
        logger.debug(
            "%s strategy picked cell %d for %s", self.strategy.value, move, ai_mark
        )
        return move
