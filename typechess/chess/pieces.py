"""Defines the types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Self

from typechess.chess.affinity import Affinity
from typechess.core.exceptions import InvalidPromotionChoiceError


class PieceType(Enum):
    EMPTY = "empty"
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Color(Enum):
    NONE = "none"
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> Color:
        """White <-> Black. An empty square has no opponent."""
        if self == Color.WHITE:
            return Color.BLACK
        if self == Color.BLACK:
            return Color.WHITE
        return Color.NONE


PLAYER_COLORS: tuple[Color, Color] = (Color.WHITE, Color.BLACK)

# One-letter codes, only used for rendering the board as text
PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

# A pawn on the final rank may turn into any of these (staying a pawn included)
PROMOTION_OPTIONS: dict[str, PieceType] = {
    "queen": PieceType.QUEEN,
    "rook": PieceType.ROOK,
    "bishop": PieceType.BISHOP,
    "knight": PieceType.KNIGHT,
    "pawn": PieceType.PAWN,
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color
    affinity: Affinity = Affinity.NO_TYPE

    @classmethod
    def empty(cls) -> Self:
        return cls(PieceType.EMPTY, Color.NONE, Affinity.NO_TYPE)

    @property
    def is_empty(self) -> bool:
        return self.type == PieceType.EMPTY

    def belongs_to(self, color: Color) -> bool:
        return not self.is_empty and self.color == color

    def is_opponent_of(self, color: Color) -> bool:
        return not self.is_empty and self.color == color.opponent

    def promoted_to(self, new_type: PieceType) -> Piece:
        """Same piece (color, affinity) with a new type"""
        return replace(self, type=new_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "color": self.color.value,
            "affinity": self.affinity.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            PieceType(data["type"]), Color(data["color"]), Affinity(data["affinity"])
        )

    def label(self) -> str:
        """Short text label: color, piece letter and the first 4 letters of the affinity. ex) 'WK fire'"""
        if self.is_empty:
            return " " * 7
        color = "W" if self.color == Color.WHITE else "B"
        return f"{color}{PIECE_LETTERS[self.type]} {self.affinity.value[:4]:<4}"


def promotion_choice(name: str) -> PieceType:
    """Map a piece name ('queen', 'Knight', ...) onto the piece type a pawn promotes into."""
    piece_type = PROMOTION_OPTIONS.get(name.strip().lower())
    if piece_type is None:
        raise InvalidPromotionChoiceError(
            f"Cannot promote into {name!r}. Pick one from {', '.join(PROMOTION_OPTIONS)}."
        )
    return piece_type
