"""
The Game board implements all rules that effect the `position` (the configuration of pieces on the board)
and how a single move changes it, type interactions included.
"""

import logging
import random
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Optional, Self

from typechess.chess.affinity import Interaction, matchup, random_affinities
from typechess.chess.history import MoveHistory
from typechess.chess.moves import Move, candidate_attacks, candidate_moves, promotion_row
from typechess.chess.pieces import (
    PLAYER_COLORS,
    Color,
    Piece,
    PieceType,
    promotion_choice,
)
from typechess.chess.square import BOARD_SIZE, Square, all_squares
from typechess.core.exceptions import GameStateError, IllegalMoveError, NoMoveToPromoteError
from typechess.core.shared_types import Winner

logger = logging.getLogger(__name__)

BACK_RANK: list[PieceType] = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]

WINNER_BY_COLOR: dict[Color, Winner] = {
    Color.WHITE: Winner.WHITE,
    Color.BLACK: Winner.BLACK,
}


def empty_grid() -> list[list[Piece]]:
    return [[Piece.empty() for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]


@dataclass
class Board:
    # row-major, row 0 is White's back rank. Always fully populated: an empty square holds Piece.empty()
    grid: list[list[Piece]] = field(default_factory=empty_grid)
    history: MoveHistory = field(default_factory=MoveHistory)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def starting_position(cls, rng: Optional[random.Random] = None) -> Self:
        """
        Standard chess set up. Every piece gets a random affinity; within one side no affinity is handed out twice.
        Pass in a seeded `rng` for a reproducible set up.
        """
        rng = rng or random.Random()
        board = cls()
        for color, back_row, pawn_row in [
            (Color.WHITE, 0, 1),
            (Color.BLACK, BOARD_SIZE - 1, BOARD_SIZE - 2),
        ]:
            affinities = random_affinities(2 * BOARD_SIZE, rng)
            for col, piece_type in enumerate(BACK_RANK):
                board.place_piece(Piece(piece_type, color, affinities.pop()), Square(back_row, col))
            for col in range(BOARD_SIZE):
                board.place_piece(Piece(PieceType.PAWN, color, affinities.pop()), Square(pawn_row, col))
        return board

    # --- POSITION ---
    def piece(self, square: Square) -> Piece:
        return self.grid[square.row][square.col]

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> None:
        self.grid[square.row][square.col] = Piece.empty()

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square in all_squares() if self.piece(square).belongs_to(color)]

    def locate_king(self, color: Color) -> Optional[Square]:
        """The king can be gone in this variant (type interactions), hence Optional"""
        return next(
            (
                square
                for square in self.locate_color(color)
                if self.piece(square).type == PieceType.KING
            ),
            None,
        )

    def empty_squares(self) -> list[Square]:
        return [square for square in all_squares() if self.piece(square).is_empty]

    # --- MOVE GENERATION ---
    def possible_moves_for_piece_unfiltered(self, square: Square, player: Color) -> list[Move]:
        """
        Pseudo-legal moves of the piece on the square, if it is one of the player's pieces.
        Every move is annotated with the type interaction: moving piece's affinity vs. affinity of what stands on the target square.
        (An empty square has no type, so moving there is always a normal interaction.)
        """
        piece = self.piece(square)
        if not piece.belongs_to(player):
            return []
        return [
            move.with_interaction(matchup(piece.affinity, self.piece(move.to_square).affinity))
            for move in candidate_moves(square, self)
        ]

    def possible_moves_for_piece(self, square: Square, player: Color) -> list[Move]:
        """
        Like `possible_moves_for_piece_unfiltered()`, plus the bonus turn rule:
        right after a super effective hit, the player may only move the piece that landed the hit.
        """
        moves = self.possible_moves_for_piece_unfiltered(square, player)
        bonus_square = self.history.super_effective_square()
        if bonus_square is not None and self.piece(bonus_square).belongs_to(player):
            moves = [move for move in moves if move.from_square == bonus_square]
        return moves

    def possible_moves(self, player: Color) -> list[Move]:
        """All possible moves of the player, over all of their pieces"""
        return [
            move
            for square in self.locate_color(player)
            for move in self.possible_moves_for_piece(square, player)
        ]

    def is_move_valid(self, from_square: Square, to_square: Square, player: Color) -> bool:
        return any(
            move.to_square == to_square
            for move in self.possible_moves_for_piece(from_square, player)
        )

    def find_move(self, from_square: Square, to_square: Square) -> Optional[Move]:
        """Look up the (annotated) move of the piece standing on from_square, for whichever color it has."""
        color = self.piece(from_square).color
        return next(
            (
                move
                for move in self.possible_moves_for_piece(from_square, color)
                if move.to_square == to_square
            ),
            None,
        )

    # --- MOVE EXECUTION ---
    def execute_move(self, from_square: Square, to_square: Square) -> Self:
        """
        Play the move on a copy of the board and return the copy.
        ---

        The type interaction decides what happens:
        * NOT VERY EFFECTIVE: both the attacker and the defender are removed.
        * NO EFFECT: the attack bounces off. Nothing changes on the board.
        * SUPER EFFECTIVE / NORMAL: regular chess move (capture, castling rook, moving the piece).

        In every case the move is appended to the history.
        """
        move = self.find_move(from_square, to_square)
        if move is None:
            raise IllegalMoveError(
                f"Move not allowed: {from_square.to_algebraic()}{to_square.to_algebraic()}"
            )

        board = deepcopy(self)
        board._apply(move)
        return board

    def _apply(self, move: Move) -> None:
        if move.interaction == Interaction.NOT_VERY_EFFECTIVE:
            self.remove_piece(move.from_square)
            self.remove_piece(move.to_square)
        elif move.interaction == Interaction.NO_EFFECT:
            pass
        else:
            self._relocate(move)
        self.history.add_move(move)

    def _relocate(self, move: Move) -> None:
        """Regular chess move: take (possibly en passant), move the rook along when castling, move the piece."""
        if move.capture:
            self.remove_piece(move.capture.square)

        if move.castle:
            rook = self.piece(move.castle.rook_from)
            self.remove_piece(move.castle.rook_from)
            self.place_piece(rook, move.castle.rook_to)

        moving_piece = self.piece(move.from_square)
        self.remove_piece(move.from_square)
        self.place_piece(moving_piece, move.to_square)

    def last_move_interaction(self) -> Interaction:
        return self.history.last_interaction()

    # --- CHECK / WINNER ---
    def is_square_attacked(self, square: Square, by_color: Color) -> bool:
        """Can any piece of `by_color` reach the square with a capture? (ignores type interactions)"""
        return any(
            attack.to_square == square
            for attacker_square in self.locate_color(by_color)
            for attack in candidate_attacks(attacker_square, self)
        )

    def is_king_in_check(self, player: Color) -> bool:
        king_square = self.locate_king(player)
        if king_square is None:
            return False
        return self.is_square_attacked(king_square, player.opponent)

    def get_winner(self, current_player: Color) -> Winner:
        """
        Decide whether the game is over.
        ---

        * no king left on the board: tie
        * one king left: its owner wins
        * both kings there: the current player lost if their king is in check AND the king itself cannot move.

        NOTE: only the king's own mobility is considered, not whether another piece could block or take the attacker.
        This is narrower than a standard checkmate test.
        """
        opponent = current_player.opponent
        current_king = self.locate_king(current_player)
        opponent_king = self.locate_king(opponent)

        if current_king is None and opponent_king is None:
            return Winner.TIE
        if opponent_king is None:
            return WINNER_BY_COLOR[current_player]
        if current_king is None:
            return WINNER_BY_COLOR[opponent]

        king_in_check = self.is_square_attacked(current_king, opponent)
        king_can_move = bool(self.possible_moves_for_piece_unfiltered(current_king, current_player))
        if king_in_check and not king_can_move:
            return WINNER_BY_COLOR[opponent]
        return Winner.NONE_YET

    # --- PROMOTION ---
    def requires_pawn_promotion(self) -> bool:
        """The last move brought a pawn to the farthest rank, and it is still standing there (an attack that fails does not count)."""
        last_move = self.history.last_move()
        if last_move is None or last_move.piece.type != PieceType.PAWN:
            return False
        if last_move.to_square.row != promotion_row(last_move.piece.color):
            return False
        return self.piece(last_move.to_square) == last_move.piece

    def select_pawn_promotion_piece(self, kind: str, player: Color) -> None:
        """Turn the piece on the last move's target square into `kind` (e.g. 'queen'). The affinity stays the same."""
        last_move = self.history.last_move()
        if last_move is None:
            raise NoMoveToPromoteError("No move has been played yet: there is no pawn to promote.")

        new_type = promotion_choice(kind)
        pawn = self.piece(last_move.to_square)
        if not pawn.belongs_to(player):
            raise NoMoveToPromoteError(
                f"No {player.value} piece on {last_move.to_square.to_algebraic()} to promote."
            )
        self.place_piece(pawn.promoted_to(new_type), last_move.to_square)
        logger.debug(f"Promoted piece on {last_move.to_square.to_algebraic()} to {new_type.value}")

    # --- ENCODING ---
    def to_dict(self) -> dict[str, Any]:
        return {
            "grid": [[piece.to_dict() for piece in row] for row in self.grid],
            "history": self.history.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        grid = [[Piece.from_dict(piece) for piece in row] for row in data["grid"]]
        if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
            raise GameStateError(f"A board must have {BOARD_SIZE}x{BOARD_SIZE} squares.")
        for color in PLAYER_COLORS:
            kings = [
                piece
                for row in grid
                for piece in row
                if piece.type == PieceType.KING and piece.color == color
            ]
            if len(kings) > 1:
                raise GameStateError(f"More than one {color.value} king on the board.")
        return cls(grid, MoveHistory.from_list(data["history"]))

    def render(self) -> str:
        """Text diagram (White at the bottom), handy in logs and when debugging"""
        separator = "-" * (10 * BOARD_SIZE) + "\n"
        lines: list[str] = []
        for row in reversed(range(BOARD_SIZE)):
            cells = "".join(f"|{self.piece(Square(row, col)).label()}| " for col in range(BOARD_SIZE))
            lines.append(f"{cells}\n{separator}")
        return "".join(lines)
