"""Unit tests for /typechess/chess/state.py"""

from typing import Callable

import pytest

from typechess.chess.affinity import Affinity, Interaction
from typechess.chess.board import Board
from typechess.chess.pieces import Color, Piece, PieceType
from typechess.chess.square import Square, all_squares
from typechess.chess.state import ChessState
from typechess.core.exceptions import InvalidPromotionChoiceError, PromotionNotPendingError
from typechess.core.shared_types import InfoMessage, Status, Winner

BoardFactory = Callable[[dict[str, Piece]], Board]


def white(kind: PieceType, affinity: Affinity = Affinity.NORMAL) -> Piece:
    return Piece(kind, Color.WHITE, affinity)


def black(kind: PieceType, affinity: Affinity = Affinity.NORMAL) -> Piece:
    return Piece(kind, Color.BLACK, affinity)


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def play(state: ChessState, *moves: str) -> None:
    """Play moves like 'e2e4' and make sure each of them gets accepted"""
    for move in moves:
        assert state.move_piece(sq(move[:2]), sq(move[2:])), f"move {move} got rejected"


def targets(state: ChessState, square_name: str) -> set[str]:
    return {move.to_square.to_algebraic() for move in state.get_valid_moves(sq(square_name))}


# --- BASICS ---
def test_new_state(new_state: ChessState) -> None:
    assert new_state.player == Color.WHITE
    assert new_state.winner == Winner.NONE_YET
    assert new_state.status == Status.AWAITING_MOVE
    assert new_state.info_message is None
    assert new_state.turn_count == 0


def test_turns_alternate(new_state: ChessState) -> None:
    play(new_state, "e2e4")
    assert new_state.player == Color.BLACK
    assert new_state.turn_count == 1
    play(new_state, "e7e5")
    assert new_state.player == Color.WHITE
    assert new_state.turn_count == 2


def test_cannot_move_opponent_pieces(new_state: ChessState) -> None:
    assert not new_state.move_piece(sq("e7"), sq("e5"))
    assert new_state.player == Color.WHITE
    assert new_state.turn_count == 0
    assert len(new_state.board.history) == 0


def test_invalid_move_is_rejected_without_change(new_state: ChessState) -> None:
    before = new_state.to_dict()
    assert not new_state.move_piece(sq("e2"), sq("e5"))
    assert new_state.to_dict() == before


def test_dict_round_trip(new_state: ChessState) -> None:
    play(new_state, "e2e4", "d7d5", "g1f3")
    assert ChessState.from_dict(new_state.to_dict()) == new_state


# --- CHECK ---
def test_pinned_piece_may_only_move_along_the_pin(board_with_pieces: BoardFactory) -> None:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "e2": white(PieceType.ROOK),
            "e8": black(PieceType.ROOK),
            "h8": black(PieceType.KING),
        }
    )
    state = ChessState(board)
    assert targets(state, "e2") == {"e3", "e4", "e5", "e6", "e7", "e8"}
    assert not state.move_piece(sq("e2"), sq("a2"))


def test_valid_moves_never_leave_own_king_in_check(new_state: ChessState) -> None:
    play(new_state, "e2e4", "f7f6", "d1h5")
    # black king is in check now: e8 is attacked along h5-e8
    for square in all_squares():
        for move in new_state.get_valid_moves(square):
            after = new_state.board.execute_move(move.from_square, move.to_square)
            assert not after.is_king_in_check(Color.BLACK)


# --- SCENARIOS: CASTLING / EN PASSANT ---
@pytest.fixture
def ready_to_castle(new_state: ChessState) -> ChessState:
    """Clear f1 and g1. The black moves only land on empty squares, whatever the affinities"""
    play(new_state, "e2e4", "a7a6", "f1e2", "a6a5", "g1f3", "h7h6")
    return new_state


def test_castling(ready_to_castle: ChessState) -> None:
    king = ready_to_castle.board.piece(sq("e1"))
    rook = ready_to_castle.board.piece(sq("h1"))
    assert "g1" in targets(ready_to_castle, "e1")

    play(ready_to_castle, "e1g1")
    assert ready_to_castle.board.piece(sq("g1")) == king
    assert ready_to_castle.board.piece(sq("f1")) == rook
    assert ready_to_castle.board.piece(sq("e1")).is_empty
    assert ready_to_castle.board.piece(sq("h1")).is_empty
    assert ready_to_castle.player == Color.BLACK


def test_castling_invalidated_by_rook_movement(ready_to_castle: ChessState) -> None:
    play(ready_to_castle, "h1g1", "h6h5", "g1h1", "b7b6")
    assert not ready_to_castle.move_piece(sq("e1"), sq("g1"))
    assert ready_to_castle.board.piece(sq("e1")).type == PieceType.KING


def test_castling_survives_a_bounced_attack_on_the_rook(board_with_pieces: BoardFactory) -> None:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "h1": white(PieceType.ROOK, Affinity.GHOST),
            "a2": white(PieceType.PAWN),
            "c6": black(PieceType.BISHOP),
            "a8": black(PieceType.KING),
        }
    )
    state = ChessState(board)
    play(state, "a2a3", "c6h1")
    assert state.board.last_move_interaction() == Interaction.NO_EFFECT
    assert state.board.piece(sq("h1")) == white(PieceType.ROOK, Affinity.GHOST)
    assert "g1" in targets(state, "e1")

    play(state, "e1g1")
    assert state.board.piece(sq("f1")) == white(PieceType.ROOK, Affinity.GHOST)


def test_castling_invalidated_by_attacked_transit_square(board_with_pieces: BoardFactory) -> None:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "h1": white(PieceType.ROOK),
            "e8": black(PieceType.KING),
            "a6": black(PieceType.BISHOP),
        }
    )
    state = ChessState(board)
    assert not state.move_piece(sq("e1"), sq("g1"))
    assert state.board.piece(sq("e1")).type == PieceType.KING


def test_en_passant(new_state: ChessState) -> None:
    play(new_state, "e2e4", "a7a6", "e4e5", "d7d5")
    white_pawn = new_state.board.piece(sq("e5"))
    assert "d6" in targets(new_state, "e5")

    play(new_state, "e5d6")
    assert new_state.board.piece(sq("d6")) == white_pawn
    assert new_state.board.piece(sq("d5")).is_empty
    assert new_state.board.piece(sq("e5")).is_empty


@pytest.mark.parametrize(
    "black_moves",
    [
        ["d7d6", "a2a3", "d6d5"],  # single steps
        ["c7c5"],  # not adjacent
        ["d7d5", "a2a3", "a6a5"],  # not immediately after the double advance
    ],
)
def test_en_passant_rejected(new_state: ChessState, black_moves: list[str]) -> None:
    play(new_state, "e2e4", "a7a6", "e4e5", *black_moves)
    assert "d6" not in targets(new_state, "e5")
    assert not new_state.move_piece(sq("e5"), sq("d6"))


# --- SCENARIOS: TYPE INTERACTIONS ---
@pytest.fixture
def fire_knight_vs_grass_pawn(board_with_pieces: BoardFactory) -> ChessState:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "a2": white(PieceType.PAWN),
            "d4": white(PieceType.KNIGHT, Affinity.FIRE),
            "e6": black(PieceType.PAWN, Affinity.GRASS),
            "h8": black(PieceType.KING),
        }
    )
    return ChessState(board)


def test_super_effective_grants_bonus_turn(fire_knight_vs_grass_pawn: ChessState) -> None:
    state = fire_knight_vs_grass_pawn
    play(state, "d4e6")
    assert state.board.last_move_interaction() == Interaction.SUPER_EFFECTIVE
    assert state.player == Color.WHITE
    assert state.info_message == InfoMessage.SUPER_EFFECTIVE
    # only the knight may move
    assert targets(state, "a2") == set()
    assert not state.move_piece(sq("a2"), sq("a3"))
    assert targets(state, "e6") != set()

    # the bonus move itself is a normal one: the turn passes
    play(state, "e6c5")
    assert state.player == Color.BLACK
    assert state.info_message is None
    assert state.turn_count == 2


def test_super_effective_without_follow_up_moves_passes_turn(board_with_pieces: BoardFactory) -> None:
    """The pawn lands on e6, but cannot move on from there: e7 is blocked and there is nothing to take"""
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "d5": white(PieceType.PAWN, Affinity.FIRE),
            "e6": black(PieceType.PAWN, Affinity.GRASS),
            "e7": black(PieceType.KNIGHT, Affinity.NORMAL),
            "h8": black(PieceType.KING),
        }
    )
    state = ChessState(board)
    play(state, "d5e6")
    assert state.player == Color.BLACK
    assert state.info_message == InfoMessage.SUPER_EFFECTIVE_NO_MOVES
    # black is not restricted by white's super effective hit
    assert targets(state, "h8") != set()


def test_not_very_effective_removes_both_pieces(board_with_pieces: BoardFactory) -> None:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "d4": white(PieceType.KNIGHT, Affinity.FIRE),
            "e6": black(PieceType.PAWN, Affinity.WATER),
            "h8": black(PieceType.KING),
        }
    )
    state = ChessState(board)
    play(state, "d4e6")
    assert state.board.piece(sq("d4")).is_empty
    assert state.board.piece(sq("e6")).is_empty
    assert state.info_message == InfoMessage.NOT_VERY_EFFECTIVE
    assert state.player == Color.BLACK


def test_no_effect_leaves_board_unchanged(board_with_pieces: BoardFactory) -> None:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "a1": white(PieceType.ROOK, Affinity.NORMAL),
            "a7": black(PieceType.PAWN, Affinity.GHOST),
            "h8": black(PieceType.KING),
        }
    )
    state = ChessState(board)
    grid_before = [row[:] for row in state.board.grid]
    play(state, "a1a7")
    assert state.board.grid == grid_before
    assert state.info_message == InfoMessage.NO_EFFECT
    assert state.player == Color.BLACK


@pytest.mark.parametrize(
    "interaction, moves_available, expected",
    [
        (Interaction.SUPER_EFFECTIVE, True, InfoMessage.SUPER_EFFECTIVE),
        (Interaction.SUPER_EFFECTIVE, False, InfoMessage.SUPER_EFFECTIVE_NO_MOVES),
        (Interaction.NOT_VERY_EFFECTIVE, False, InfoMessage.NOT_VERY_EFFECTIVE),
        (Interaction.NO_EFFECT, False, InfoMessage.NO_EFFECT),
        (Interaction.NORMAL, True, None),
        (Interaction.EMPTY, False, None),
    ],
)
def test_info_message_for(
    interaction: Interaction, moves_available: bool, expected: InfoMessage | None
) -> None:
    assert ChessState.info_message_for(interaction, moves_available) == expected


# --- WINNER ---
def test_capturing_the_king_wins(board_with_pieces: BoardFactory) -> None:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "a1": white(PieceType.ROOK, Affinity.FIRE),
            "a8": black(PieceType.KING, Affinity.GRASS),
        }
    )
    state = ChessState(board)
    play(state, "a1a8")
    assert state.winner == Winner.WHITE
    assert state.status == Status.GAME_OVER
    assert state.get_valid_moves(sq("a8")) == []
    assert not state.move_piece(sq("e1"), sq("e2"))


def test_both_kings_fainting_is_a_tie(board_with_pieces: BoardFactory) -> None:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING, Affinity.FIRE),
            "e2": black(PieceType.KING, Affinity.WATER),
        }
    )
    state = ChessState(board)
    play(state, "e1e2")
    assert state.winner == Winner.TIE
    assert state.status == Status.GAME_OVER


# --- PROMOTION GATE ---
@pytest.fixture
def pawn_on_seventh(board_with_pieces: BoardFactory) -> ChessState:
    board = board_with_pieces(
        {
            "e1": white(PieceType.KING),
            "b7": white(PieceType.PAWN, Affinity.FIRE),
            "a8": black(PieceType.ROOK, Affinity.GRASS),
            "h5": black(PieceType.KING),
        }
    )
    return ChessState(board)


def test_promotion_gate(pawn_on_seventh: ChessState) -> None:
    state = pawn_on_seventh
    play(state, "b7b8")
    assert state.require_piece_selection
    assert state.status == Status.AWAITING_PROMOTION_CHOICE
    assert state.player == Color.WHITE
    # nothing moves until the choice is made
    assert not state.move_piece(sq("e1"), sq("e2"))

    state.select_pawn_promotion_piece("queen")
    assert state.board.piece(sq("b8")) == white(PieceType.QUEEN, Affinity.FIRE)
    assert not state.require_piece_selection
    assert state.player == Color.BLACK
    assert state.status == Status.AWAITING_MOVE


def test_promotion_after_super_effective_hit_keeps_the_turn(pawn_on_seventh: ChessState) -> None:
    """Gate first, then the bonus turn: the promoted piece moves again"""
    state = pawn_on_seventh
    play(state, "b7a8")
    assert state.require_piece_selection
    assert state.player == Color.WHITE
    # the pawn itself cannot move on, but the bonus turn is still open
    assert state.info_message == InfoMessage.SUPER_EFFECTIVE

    state.select_pawn_promotion_piece("rook")
    assert state.player == Color.WHITE
    assert state.info_message == InfoMessage.SUPER_EFFECTIVE
    assert targets(state, "a8") != set()
    assert targets(state, "e1") == set()


def test_promotion_not_pending(new_state: ChessState) -> None:
    with pytest.raises(PromotionNotPendingError):
        new_state.select_pawn_promotion_piece("queen")


def test_invalid_promotion_choice_keeps_gate_open(pawn_on_seventh: ChessState) -> None:
    state = pawn_on_seventh
    play(state, "b7b8")
    with pytest.raises(InvalidPromotionChoiceError):
        state.select_pawn_promotion_piece("king")
    assert state.require_piece_selection
    assert state.player == Color.WHITE
