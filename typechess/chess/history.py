"""
The move log of a board.

Certain special moves need to know what happened before:
* en passant needs to know the last move
* castling needs to know if the king or rook has moved
* the bonus turn after a super effective hit needs to know where the attacking piece landed

Instead of keeping separate flags, everything is derived from the (append-only) list of executed moves.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Self

from typechess.chess.affinity import Interaction
from typechess.chess.castling import CASTLING_RULES, CastlingDirection
from typechess.chess.moves import Move, pawn_start_row
from typechess.chess.pieces import PieceType
from typechess.chess.square import Square


@dataclass
class MoveHistory:
    moves: list[Move] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self.moves)

    def add_move(self, move: Move) -> None:
        self.moves.append(move)

    def last_move(self) -> Optional[Move]:
        return self.moves[-1] if self.moves else None

    def last_interaction(self) -> Interaction:
        last_move = self.last_move()
        if last_move is None or last_move.interaction is None:
            return Interaction.EMPTY
        return last_move.interaction

    def double_advanced_pawn(self) -> Optional[Square]:
        """
        Where the pawn landed, if the last move was a pawn advancing two squares from its starting rank.
        (That pawn can now be taken en passant, but only during this very next move.)
        """
        last_move = self.last_move()
        if last_move is None or last_move.piece.type != PieceType.PAWN:
            return None

        from_row = last_move.from_square.row
        rows_moved = abs(last_move.to_square.row - from_row)
        if rows_moved == 2 and from_row == pawn_start_row(last_move.piece.color):
            return last_move.to_square
        return None

    def super_effective_square(self) -> Optional[Square]:
        """Where the attacking piece landed, if the last move was super effective"""
        last_move = self.last_move()
        if last_move is not None and last_move.interaction == Interaction.SUPER_EFFECTIVE:
            return last_move.to_square
        return None

    def is_untouched(self, square: Square) -> bool:
        """
        True if no move so far started on, landed on, or took on the square.
        A move with no effect bounced off its target and moved nothing, so it touches nothing.
        """
        for move in self.moves:
            if move.interaction == Interaction.NO_EFFECT:
                continue
            if square in (move.from_square, move.to_square):
                return False
            if move.capture and move.capture.square == square:
                return False
            if move.castle and square in (move.castle.rook_from, move.castle.rook_to):
                return False
        return True

    def can_castle(self, direction: CastlingDirection) -> bool:
        """Castling rights: neither the king nor the rook of this direction has left (or been taken on) its starting square"""
        rule = CASTLING_RULES[direction]
        return self.is_untouched(rule.king_from) and self.is_untouched(rule.rook_from)

    def to_list(self) -> list[dict[str, Any]]:
        return [move.to_dict() for move in self.moves]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> Self:
        return cls([Move.from_dict(move) for move in data])
