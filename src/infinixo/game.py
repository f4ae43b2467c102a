"""Core rules for Infinite XO: a 3x3 board where the oldest mark is evicted."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)

Player = str  # "X" or "O"

EMPTY = " "
PLAYERS: Tuple[Player, Player] = ("X", "O")
MAX_MOVES = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class InvalidMove(ValueError):
    """Raised when a move targets a cell outside the board or an occupied one."""


def other_player(player: Player) -> Player:
    return "O" if player == "X" else "X"


# ---------- Outcome ----------


class Status(str, Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    status: Status
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @classmethod
    def in_progress(cls) -> "Outcome":
        return cls(Status.IN_PROGRESS)

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(Status.DRAW)

    @classmethod
    def win(cls, winner: Player, line: Tuple[int, int, int]) -> "Outcome":
        return cls(Status.WIN, winner, line)

    @property
    def is_over(self) -> bool:
        return self.status is not Status.IN_PROGRESS


def check_outcome(cells: Sequence[str]) -> Outcome:
    """Scan the winning lines in order; the first fully marked line wins.

    A board without a winner and without empty cells is a draw. The live
    engine never keeps a full board, but bounded boards (and callers
    holding a plain list) can still reach one.
    """
    for line in WINNING_LINES:
        a, b, c = line
        v = cells[a]
        if v != EMPTY and v == cells[b] == cells[c]:
            return Outcome.win(v, line)
    if all(c != EMPTY for c in cells):
        return Outcome.draw()
    return Outcome.in_progress()


# ---------- Engine ----------


@dataclass(frozen=True)
class MoveRecord:
    index: int
    mark: Player


@dataclass(frozen=True)
class MoveResult:
    index: int
    # Cell cleared to make room for this move, if any
    evicted: Optional[int] = None


@dataclass
class BoardEngine:
    """Board, move history and the eviction rule for one game."""

    _cells: List[str] = field(
        default_factory=lambda: [EMPTY] * 9, init=False, repr=False
    )
    _history: Deque[MoveRecord] = field(default_factory=deque, init=False, repr=False)

    # ---- read-only views ----

    @property
    def board(self) -> List[str]:
        """A copy of the cells, safe to hand to a move selector."""
        return list(self._cells)

    @property
    def history(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._history)

    @property
    def move_count(self) -> int:
        return len(self._history)

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self._cells) if c == EMPTY]

    def _pending_eviction(self) -> Optional[int]:
        if len(self._history) >= MAX_MOVES:
            return self._history[0].index
        return None

    def playable_board(self) -> List[str]:
        """The board the next move lands on: the eviction target already cleared."""
        cells = list(self._cells)
        pending = self._pending_eviction()
        if pending is not None:
            cells[pending] = EMPTY
        return cells

    def legal_moves(self) -> List[int]:
        return [i for i, c in enumerate(self.playable_board()) if c == EMPTY]

    # ---- API used by UI & AI ----

    def apply_move(self, index: int, mark: Player) -> MoveResult:
        """Write ``mark`` at ``index``, evicting the oldest mark once nine are down."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidMove(f"Cell index must be an integer, got {index!r}")
        if not 0 <= index < 9:
            raise InvalidMove(f"Cell index {index} is outside the board")
        if mark not in PLAYERS:
            raise InvalidMove(f"Unknown mark {mark!r}")
        # A full history frees its oldest cell before the new mark lands
        if self._cells[index] != EMPTY and index != self._pending_eviction():
            raise InvalidMove("Cell already occupied")

        evicted: Optional[int] = None
        if len(self._history) >= MAX_MOVES:
            oldest = self._history.popleft()
            self._cells[oldest.index] = EMPTY
            evicted = oldest.index
            logger.debug("Evicted %s from cell %d", oldest.mark, oldest.index)

        self._history.append(MoveRecord(index, mark))
        self._cells[index] = mark
        return MoveResult(index=index, evicted=evicted)

    def check_outcome(self) -> Outcome:
        outcome = check_outcome(self._cells)
        if outcome.status is Status.WIN:
            logger.debug("%s wins on line %s", outcome.winner, outcome.line)
        return outcome

    def oldest_index(self) -> Optional[int]:
        """Cell the next move will evict, once the board holds eight or more marks."""
        if len(self._history) >= MAX_MOVES - 1:
            return self._history[0].index
        return None

    def reset(self) -> None:
        self._cells[:] = [EMPTY] * 9
        self._history.clear()
