"""Property-based checks for win detection, eviction, and side-effect-free search."""

from typing import List

from hypothesis import given, settings, strategies as st

from infinixo.ai import medium_move
from infinixo.game import EMPTY, BoardEngine, Status, check_outcome, other_player

marks = st.sampled_from(["X", "O", EMPTY])
boards = st.lists(marks, min_size=9, max_size=9)


@given(boards)
def test_win_needs_one_mark_across_its_line(board: List[str]):
    outcome = check_outcome(board)
    if outcome.status is not Status.WIN:
        return
    assert {board[i] for i in outcome.line} == {outcome.winner}
    for i in outcome.line:
        for replacement in (EMPTY, other_player(outcome.winner)):
            changed = list(board)
            changed[i] = replacement
            assert check_outcome(changed) != outcome


@given(st.lists(st.integers(min_value=0, max_value=100), max_size=40))
def test_occupied_cells_track_move_count(choices: List[int]):
    engine = BoardEngine()
    player = "X"
    for made, choice in enumerate(choices, start=1):
        legal = engine.legal_moves()
        engine.apply_move(legal[choice % len(legal)], player)
        occupied = sum(1 for c in engine.board if c != EMPTY)
        assert occupied == min(made, 9)
        assert engine.move_count == min(made, 9)
        player = other_player(player)


@settings(max_examples=50)
@given(boards.filter(lambda b: EMPTY in b), st.sampled_from(["X", "O"]))
def test_medium_move_does_not_mutate_board(board: List[str], ai_mark: str):
    before = list(board)
    move = medium_move(board, ai_mark, other_player(ai_mark))
    assert board == before
    assert board[move] == EMPTY
