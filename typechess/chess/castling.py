"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from typechess.chess.pieces import Color
from typechess.chess.square import Square


class CastlingDirection(Enum):
    """The four castling directions."""

    WHITE_KING_SIDE = "white king side"
    WHITE_QUEEN_SIDE = "white queen side"
    BLACK_KING_SIDE = "black king side"
    BLACK_QUEEN_SIDE = "black queen side"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If neither starting square has been touched during the game, the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares strictly between king and rook: all must be empty before castling"""
        row = self.king_from.row
        low, high = sorted([self.king_from.col, self.rook_from.col])
        return [Square(row, col) for col in range(low + 1, high)]

    def king_path(self) -> list[Square]:
        """Squares the king starts on, passes through, and lands on: none of them may be under attack"""
        row = self.king_from.row
        step = 1 if self.king_to.col > self.king_from.col else -1
        return [
            Square(row, col)
            for col in range(self.king_from.col, self.king_to.col + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}

CASTLING_OPTIONS: dict[Color, tuple[CastlingDirection, CastlingDirection]] = {
    Color.WHITE: (CastlingDirection.WHITE_KING_SIDE, CastlingDirection.WHITE_QUEEN_SIDE),
    Color.BLACK: (CastlingDirection.BLACK_KING_SIDE, CastlingDirection.BLACK_QUEEN_SIDE),
}
