"""FastAPI-powered web UI for playing Infinite XO in the browser."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import DIFFICULTY_ALIASES, MoveSelector, Strategy
from .game import EMPTY, BoardEngine, InvalidMove, MoveResult, Outcome, Player, Status

logger = logging.getLogger(__name__)

GameMode = Literal["ai", "2p"]

FIRST_PLAYER: Player = "X"
HUMAN_MARK: Player = "X"
AI_MARK: Player = "O"
AI_THINK_DELAY: float = 0.3


@dataclass
class GameSession:
    """Container for one browser's game, its mode, and its score counter."""

    mode: GameMode
    difficulty: str
    selector: MoveSelector
    engine: BoardEngine = field(default_factory=BoardEngine)
    current_player: Player = FIRST_PLAYER
    outcome: Outcome = field(default_factory=Outcome.in_progress)
    scores: Dict[str, int] = field(
        default_factory=lambda: {"X": 0, "O": 0}
    )
    move_log: List[Dict[str, object]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def ai_turn(self) -> bool:
        return self.mode == "ai" and self.current_player == AI_MARK

    def new_game(self) -> None:
        self.engine.reset()
        self.current_player = FIRST_PLAYER
        self.outcome = Outcome.in_progress()
        self.move_log.clear()
        self.ai_pending = False


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="Infinite XO",
    description="Tic-tac-toe where the oldest mark disappears after nine moves",
)


def _validate_difficulty(value: str) -> str:
    key = value.strip().lower()
    if key not in DIFFICULTY_ALIASES:
        raise ValueError(
            f"Unsupported difficulty {value!r}. "
            f"Choose one of {', '.join(DIFFICULTY_ALIASES)}."
        )
    return key


class NewGameRequest(BaseModel):
    """Request payload for starting a new game session."""

    mode: GameMode = Field(default="ai", description="Play against the AI or a friend")
    difficulty: str = Field(default="hard", description="AI strength: hard, medium, easy")

    @field_validator("difficulty")
    @classmethod
    def ensure_supported_difficulty(cls, value: str) -> str:
        return _validate_difficulty(value)


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class ModeRequest(BaseModel):
    mode: GameMode


def _create_session(mode: GameMode, difficulty: str) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    selector = MoveSelector(strategy=Strategy.parse(difficulty))
    session = GameSession(mode=mode, difficulty=difficulty, selector=selector)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created %s session %s (%s)", mode, session_id, selector.strategy.value
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _record_move(session: GameSession, player: Player, result: MoveResult) -> None:
    """Log an applied move, settle the outcome, and hand the turn over.

    Callers must hold ``session.lock``.
    """
    session.move_log.append(
        {"player": player, "cellIndex": result.index, "evicted": result.evicted}
    )
    outcome = session.engine.check_outcome()
    if outcome.status is Status.WIN:
        session.outcome = outcome
        session.scores[outcome.winner] += 1
        logger.info("%s won on line %s", outcome.winner, outcome.line)
    # A full board is not a draw here: the next move evicts the oldest mark
    session.current_player = "O" if player == "X" else "X"


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        try:
            if not session.ai_pending:
                # A reset or mode switch landed while the AI was waiting
                return
            if session.outcome.is_over or not session.ai_turn:
                return
            board = session.engine.playable_board()
            cell = session.selector.choose(board, AI_MARK, HUMAN_MARK)
            result = session.engine.apply_move(cell, AI_MARK)
            _record_move(session, AI_MARK, result)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        engine = session.engine
        outcome = session.outcome
        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode,
            "difficulty": session.difficulty,
            "board": [c if c != EMPTY else "" for c in engine.board],
            "currentPlayer": session.current_player,
            "moveCount": engine.move_count,
            "oldestIndex": engine.oldest_index(),
            "legalMoves": [] if outcome.is_over else engine.legal_moves(),
            "status": outcome.status.value,
            "winner": outcome.winner,
            "winningLine": list(outcome.line) if outcome.line else None,
            "scores": dict(session.scores),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        if session.outcome.is_over:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.ai_turn:
            raise HTTPException(status_code=400, detail="It is the AI's turn")

        player = session.current_player
        try:
            result = session.engine.apply_move(cell_index, player)
        except InvalidMove as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        _record_move(session, player, result)

        should_schedule_ai = not session.outcome.is_over and session.ai_turn
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.new_game()
    logger.info("Reset session %s", game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/mode")
def set_mode(game_id: str, request: ModeRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.mode = request.mode
        session.new_game()
    logger.info("Session %s switched to %s mode", game_id, request.mode)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/scores/reset")
def reset_scores(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        for key in session.scores:
            session.scores[key] = 0
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Infinite XO</title>
    <style>
      :root {
        color-scheme: dark;
        --bg: #0f172a;
        --panel: #1e293b;
        --x: #38bdf8;
        --o: #f472b6;
        --muted: #94a3b8;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        align-items: center;
        justify-content: center;
        background: var(--bg);
        color: #e2e8f0;
        font-family: system-ui, sans-serif;
      }
      main {
        background: var(--panel);
        padding: 2rem;
        border-radius: 1rem;
        text-align: center;
        min-width: 320px;
      }
      .controls button {
        margin: 0 0.25rem 0.75rem;
        padding: 0.4rem 0.9rem;
        border-radius: 0.5rem;
        border: 1px solid var(--muted);
        background: transparent;
        color: inherit;
        cursor: pointer;
      }
      .controls button.active {
        background: var(--muted);
        color: var(--bg);
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 90px);
        gap: 8px;
        justify-content: center;
        margin: 1rem 0;
      }
      .cell {
        height: 90px;
        font-size: 2.5rem;
        font-weight: 700;
        border-radius: 0.75rem;
        border: none;
        background: #334155;
        color: inherit;
        cursor: pointer;
        transition: opacity 0.15s ease;
      }
      .cell.x { color: var(--x); }
      .cell.o { color: var(--o); }
      .cell.oldest { opacity: 0.45; outline: 2px dashed var(--muted); }
      .cell.winning { background: #15803d; }
      .scores span { margin: 0 0.75rem; }
      #status { min-height: 1.5rem; color: var(--muted); }
    </style>
  </head>
  <body>
    <main>
      <h1>Infinite XO</h1>
      <div class=\"controls\">
        <button id=\"aiModeBtn\" class=\"active\">vs AI</button>
        <button id=\"twoPlayerBtn\">2 Players</button>
        <select id=\"difficulty\">
          <option value=\"hard\">Hard</option>
          <option value=\"medium\">Medium</option>
          <option value=\"easy\">Easy</option>
        </select>
      </div>
      <div>Turn: <strong id=\"currentPlayer\">X</strong></div>
      <div class=\"board\" id=\"board\"></div>
      <div id=\"status\"></div>
      <div class=\"scores\">
        <span>X: <strong id=\"scoreX\">0</strong></span>
        <span>O: <strong id=\"scoreO\">0</strong></span>
      </div>
      <div class=\"controls\">
        <button id=\"newGameBtn\">New game</button>
        <button id=\"resetScoreBtn\">Reset scores</button>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById("board");
      const cells = [];
      let gameId = null;
      let state = null;

      for (let i = 0; i < 9; i++) {
        const cell = document.createElement("button");
        cell.className = "cell";
        cell.addEventListener("click", () => play(i));
        boardEl.appendChild(cell);
        cells.push(cell);
      }

      async function api(path, body) {
        const response = await fetch(path, {
          method: body === undefined ? "GET" : "POST",
          headers: { "Content-Type": "application/json" },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || "Request failed");
        }
        return payload;
      }

      function render(next) {
        state = next;
        next.board.forEach((mark, i) => {
          const cell = cells[i];
          cell.textContent = mark;
          cell.className = "cell" + (mark ? " " + mark.toLowerCase() : "");
          if (next.oldestIndex === i && next.status === "in_progress") {
            cell.classList.add("oldest");
          }
          if (next.winningLine && next.winningLine.includes(i)) {
            cell.classList.add("winning");
          }
        });
        document.getElementById("currentPlayer").textContent = next.currentPlayer;
        document.getElementById("scoreX").textContent = next.scores.X;
        document.getElementById("scoreO").textContent = next.scores.O;
        document.getElementById("aiModeBtn").classList.toggle("active", next.mode === "ai");
        document.getElementById("twoPlayerBtn").classList.toggle("active", next.mode === "2p");
        let status = "";
        if (next.status === "win") {
          status = next.mode === "ai" && next.winner === "O" ? "The computer wins!" : `Player ${next.winner} wins!`;
        } else if (next.aiPending) {
          status = "The computer is thinking...";
        }
        document.getElementById("status").textContent = status;
        if (next.aiPending) {
          setTimeout(refresh, 200);
        }
      }

      async function refresh() {
        render(await api(`/api/game/${gameId}`));
      }

      async function newSession(mode) {
        const difficulty = document.getElementById("difficulty").value;
        const created = await api("/api/game", { mode, difficulty });
        gameId = created.id;
        render(created);
      }

      async function play(index) {
        if (!state || state.aiPending || state.status !== "in_progress") return;
        try {
          render(await api(`/api/game/${gameId}/move`, { cellIndex: index }));
        } catch (err) {
          document.getElementById("status").textContent = err.message;
        }
      }

      document.getElementById("newGameBtn").addEventListener("click", async () => {
        render(await api(`/api/game/${gameId}/reset`, {}));
      });
      document.getElementById("resetScoreBtn").addEventListener("click", async () => {
        if (confirm("Reset all scores?")) {
          render(await api(`/api/game/${gameId}/scores/reset`, {}));
        }
      });
      document.getElementById("aiModeBtn").addEventListener("click", async () => {
        render(await api(`/api/game/${gameId}/mode`, { mode: "ai" }));
      });
      document.getElementById("twoPlayerBtn").addEventListener("click", async () => {
        render(await api(`/api/game/${gameId}/mode`, { mode: "2p" }));
      });
      document.getElementById("difficulty").addEventListener("change", () => {
        newSession(state ? state.mode : "ai");
      });

      newSession("ai");
    </script>
  </body>
</html>
"""
