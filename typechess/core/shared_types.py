"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    AWAITING_MOVE = "awaiting move"
    AWAITING_PROMOTION_CHOICE = "awaiting promotion choice"
    GAME_OVER = "game over"


# --- Color and PieceType DO NOT contain options for empty squares. The domain versions live in typechess/chess/pieces.py
# --- NOTE Same names on purpose: the imports show which version is used in what part of the code


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Winner(StrEnum):
    WHITE = "white"
    BLACK = "black"
    TIE = "tie"
    NONE_YET = "none yet"


class InfoMessage(StrEnum):
    """Shown to the players after a move that triggered a type interaction."""

    SUPER_EFFECTIVE = "It's super effective! Move the same piece again."
    SUPER_EFFECTIVE_NO_MOVES = "It's super effective! ...but the piece has nowhere left to go."
    NOT_VERY_EFFECTIVE = "It's not very effective... Both pieces fainted."
    NO_EFFECT = "It had no effect!"
