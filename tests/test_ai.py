"""Tests for the Infinite XO move strategies."""

import random

import pytest

from infinixo.ai import (
    MoveSelector,
    NoMovesAvailable,
    Strategy,
    best_move,
    medium_move,
    minimax,
    random_move,
)
from infinixo.game import EMPTY, BoardEngine, Status, check_outcome

_ = EMPTY


def test_medium_prefers_own_win_over_block():
    board = ["X", "X", _, "O", "O", _, _, _, _]
    assert medium_move(board, "O", "X") == 5


def test_medium_blocks_opponent():
    board = ["X", "X", _, _, "O", _, _, _, _]
    assert medium_move(board, "O", "X") == 2


def test_medium_falls_back_to_random_empty_cell():
    board = ["X", _, _, _, "O", _, _, _, _]
    move = medium_move(board, "O", "X", random.Random(3))
    assert board[move] == _


def test_best_move_opening_is_corner_or_center():
    assert best_move([_] * 9, "O", "X") in {0, 2, 4, 6, 8}


def test_best_move_takes_immediate_win():
    board = ["X", "X", _, "O", "O", _, _, _, _]
    assert best_move(board, "O", "X") == 5


def test_best_move_blocks_threat():
    board = ["X", "X", _, _, "O", _, _, _, _]
    assert best_move(board, "O", "X") == 2


def test_minimax_scores_terminal_boards_by_depth():
    won = ["O", "O", "O", "X", "X", _, _, _, _]
    lost = ["X", "X", "X", "O", "O", _, _, _, _]
    drawn = ["X", "X", "O", "O", "O", "X", "X", "O", "X"]
    inf = float("inf")
    assert minimax(won, 2, True, -inf, inf, "O", "X") == 8
    assert minimax(lost, 3, True, -inf, inf, "O", "X") == -7
    assert minimax(drawn, 4, True, -inf, inf, "O", "X") == 0


@pytest.mark.parametrize(
    "strategy",
    [
        lambda b: best_move(b, "O", "X"),
        lambda b: medium_move(b, "O", "X", random.Random(0)),
        lambda b: random_move(b, random.Random(0)),
    ],
)
def test_strategies_leave_board_unchanged(strategy):
    board = ["X", _, _, _, "O", _, _, "X", _]
    before = list(board)
    strategy(board)
    assert board == before


def test_random_move_is_uniform_over_empty_cells():
    board = ["X", "O", _, "X", _, "O", _, "X", "O"]
    rng = random.Random(7)
    picks = {random_move(board, rng) for _i in range(200)}
    assert picks == {2, 4, 6}


@pytest.mark.parametrize(
    "strategy",
    [
        lambda b: best_move(b, "O", "X"),
        lambda b: medium_move(b, "O", "X"),
        lambda b: random_move(b),
    ],
)
def test_full_board_raises(strategy):
    board = ["X", "X", "O", "O", "O", "X", "X", "O", "X"]
    with pytest.raises(NoMovesAvailable):
        strategy(board)


def _assert_never_loses(board, to_move, ai_mark, opponent_mark):
    outcome = check_outcome(board)
    if outcome.is_over:
        assert outcome.winner != opponent_mark, board
        return
    if to_move == ai_mark:
        move = best_move(board, ai_mark, opponent_mark)
        board[move] = ai_mark
        _assert_never_loses(board, opponent_mark, ai_mark, opponent_mark)
        board[move] = _
        return
    for i in range(9):
        if board[i] == _:
            board[i] = opponent_mark
            _assert_never_loses(board, ai_mark, ai_mark, opponent_mark)
            board[i] = _


def test_optimal_never_loses_as_second_player():
    _assert_never_loses([_] * 9, "X", "O", "X")


def test_optimal_self_play_is_a_draw():
    board = [_] * 9
    mark, other = "X", "O"
    while not check_outcome(board).is_over:
        board[best_move(board, mark, other)] = mark
        mark, other = other, mark
    assert check_outcome(board).status is Status.DRAW


def test_strategy_parse_accepts_difficulty_labels():
    assert Strategy.parse("hard") is Strategy.OPTIMAL
    assert Strategy.parse("Medium") is Strategy.HEURISTIC
    assert Strategy.parse("easy") is Strategy.RANDOM
    assert Strategy.parse("random") is Strategy.RANDOM
    with pytest.raises(ValueError):
        Strategy.parse("impossible")


@pytest.mark.parametrize("strategy", list(Strategy))
def test_selector_returns_empty_cell_and_keeps_input(strategy):
    selector = MoveSelector(strategy=strategy, rng=random.Random(1))
    board = ["X", "X", _, _, "O", _, _, _, _]
    before = list(board)
    move = selector.choose(board, "O", "X")
    assert board == before
    assert board[move] == _


def test_selector_rejects_wrong_board_size():
    with pytest.raises(ValueError):
        MoveSelector().choose([_] * 8, "O", "X")


def test_selector_plays_the_evicted_cell_on_a_full_engine():
    engine = BoardEngine()
    for index, mark in [
        (0, "X"),
        (4, "O"),
        (8, "X"),
        (2, "O"),
        (6, "X"),
        (3, "O"),
        (5, "X"),
        (7, "O"),
        (1, "X"),
    ]:
        engine.apply_move(index, mark)
    move = MoveSelector().choose(engine.playable_board(), "O", "X")
    assert move == engine.oldest_index() == 0
    assert engine.apply_move(move, "O").evicted == 0
