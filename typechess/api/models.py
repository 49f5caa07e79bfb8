"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from typechess.chess.pieces import PROMOTION_OPTIONS
from typechess.chess.square import Square
from typechess.core.exceptions import InvalidRequestError, InvalidSquareError
from typechess.core.shared_types import Color, InfoMessage, PieceType, Status, Winner

SquareName = str


# --- REQUEST MODELS ---
class GameRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("A game needs a (non-empty) name.")
        return value


class StartGameRequest(GameRequest):
    local_play: bool = True
    critical_hits: bool = False
    misses: bool = False


class ValidMovesRequest(GameRequest):
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(GameRequest):
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class PromotionRequest(GameRequest):
    piece: str

    @field_validator("piece")
    @classmethod
    def validate_piece(cls, value: str) -> str:
        name = value.strip().lower()
        if name not in PROMOTION_OPTIONS:
            raise InvalidRequestError(
                f"Cannot promote into {value!r}. Pick one from {', '.join(PROMOTION_OPTIONS)}."
            )
        return name


def _validate_square_name(value: str) -> str:
    try:
        return Square.from_algebraic(value.strip().lower()).to_algebraic()
    except InvalidSquareError as exc:
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.") from exc


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    type: PieceType
    color: Color
    affinity: str


class MoveResponse(BaseModel):
    from_square: SquareName
    to_square: SquareName
    interaction: Optional[str]
    is_capture: bool
    is_castle: bool


class StateResponse(BaseModel):
    name: str
    status: Status
    player: Color
    winner: Winner
    info_message: Optional[InfoMessage]
    turn_count: int
    # occupied squares only
    board: dict[SquareName, PieceResponse]
    last_move: Optional[MoveResponse]
    can_undo: bool
    can_redo: bool


class ValidMovesResponse(BaseModel):
    name: str
    square: SquareName
    moves: list[MoveResponse]
