"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the (pseudo-legal) move sets for each piece type.

Two families of rules:
* MOVEMENT_RULES: everything a piece may attempt, special moves included (castling, en passant, double pawn push).
* ATTACK_RULES: only the squares a piece threatens. Used to answer "is this square attacked?" (check, castling through check).
  These never generate castling moves, so asking whether a square is attacked can never recurse back into castling.

Type interactions are not decided here: Board annotates the moves with the matchup of the two affinities.
Leaving your own king in check is filtered later by ChessState.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Protocol, Self

from typechess.chess.affinity import Interaction
from typechess.chess.castling import CASTLING_OPTIONS, CASTLING_RULES, CastlingDirection
from typechess.chess.pieces import Color, Piece, PieceType
from typechess.chess.square import BOARD_SIZE, Square


class History(Protocol):
    """Just the parts of the move history the movement strategies need"""

    def double_advanced_pawn(self) -> Optional[Square]: ...
    def can_castle(self, direction: CastlingDirection) -> bool: ...


class Board(Protocol):
    """Just the parts the movement strategies need"""

    @property
    def history(self) -> History: ...
    def piece(self, square: Square) -> Piece: ...
    def is_square_attacked(self, square: Square, by_color: Color) -> bool: ...


Vector = tuple[int, int]

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


@dataclass(frozen=True)
class Capture:
    """The piece taken by a move. NOTE: for en passant the square differs from the square the capturing pawn moves to."""

    square: Square
    piece: Piece

    def to_dict(self) -> dict[str, Any]:
        return {"square": self.square.to_algebraic(), "piece": self.piece.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(Square.from_algebraic(data["square"]), Piece.from_dict(data["piece"]))


@dataclass(frozen=True)
class Castle:
    """The rook relocation that comes along with a castling king move"""

    rook_from: Square
    rook_to: Square

    def to_dict(self) -> dict[str, Any]:
        return {
            "rook_from": self.rook_from.to_algebraic(),
            "rook_to": self.rook_to.to_algebraic(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            Square.from_algebraic(data["rook_from"]),
            Square.from_algebraic(data["rook_to"]),
        )


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    piece: Piece
    from_square: Square
    to_square: Square
    interaction: Optional[Interaction] = None
    capture: Optional[Capture] = None
    castle: Optional[Castle] = None

    def with_interaction(self, interaction: Interaction) -> Move:
        return replace(self, interaction=interaction)

    def to_dict(self) -> dict[str, Any]:
        return {
            "piece": self.piece.to_dict(),
            "from_square": self.from_square.to_algebraic(),
            "to_square": self.to_square.to_algebraic(),
            "interaction": self.interaction.value if self.interaction else None,
            "capture": self.capture.to_dict() if self.capture else None,
            "castle": self.castle.to_dict() if self.castle else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            piece=Piece.from_dict(data["piece"]),
            from_square=Square.from_algebraic(data["from_square"]),
            to_square=Square.from_algebraic(data["to_square"]),
            interaction=Interaction(data["interaction"]) if data.get("interaction") else None,
            capture=Capture.from_dict(data["capture"]) if data.get("capture") else None,
            castle=Castle.from_dict(data["castle"]) if data.get("castle") else None,
        )


# --- PAWN GEOMETRY ---
def pawn_direction(color: Color) -> int:
    """White moves UP the board (increasing rows), black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_start_row(color: Color) -> int:
    return 1 if color == Color.WHITE else BOARD_SIZE - 2


def promotion_row(color: Color) -> int:
    """The farthest rank as seen from the given color"""
    return BOARD_SIZE - 1 if color == Color.WHITE else 0


# --- MOVEMENT RULES ---
def _capture_on(square: Square, board: Board) -> Optional[Capture]:
    target = board.piece(square)
    return None if target.is_empty else Capture(square, target)


def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    An opponent's piece ends the ray but is included (capture attempt), your own piece ends the ray and is excluded.
    """
    piece = board.piece(square)
    moves: list[Move] = []
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            target = board.piece(target_square)
            if not target.is_empty:
                if target.is_opponent_of(piece.color):
                    moves.append(
                        Move(piece, square, target_square, capture=Capture(target_square, target))
                    )
                break

            moves.append(Move(piece, square, target_square))
            target_square = target_square.offset(d_row, d_col)
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    piece = board.piece(square)
    moves: list[Move] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        if not board.piece(target_square).belongs_to(piece.color):
            moves.append(
                Move(piece, square, target_square, capture=_capture_on(target_square, board))
            )

    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (onto an empty square only).
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally
    - takes en passant: right after an adjacent enemy pawn advanced two squares, as if it had only advanced one

    NOTE: Reaching the final rank does not promote here. The promotion choice is requested afterwards (see ChessState)
    """
    pawn = board.piece(square)
    direction = pawn_direction(pawn.color)
    moves: list[Move] = []

    # Pawn pushes
    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and board.piece(one_step).is_empty:
        moves.append(Move(pawn, square, one_step))

        two_steps = square.offset(2 * direction, 0)
        if square.row == pawn_start_row(pawn.color) and board.piece(two_steps).is_empty:
            moves.append(Move(pawn, square, two_steps))

    # pawns take diagonally
    for d_col in [-1, 1]:
        target_square = square.offset(direction, d_col)
        if not target_square.is_within_bounds():
            continue
        target = board.piece(target_square)
        if target.is_opponent_of(pawn.color):
            moves.append(
                Move(pawn, square, target_square, capture=Capture(target_square, target))
            )

    moves.extend(en_passant_moves(square, board))
    return moves


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always much such that |delta_row| + |delta_col| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_rook_moves(square, board) + candidate_bishop_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see `castling_moves()`).
    """
    return single_step_move(square, board, KING_DELTAS) + castling_moves(square, board)


def _no_moves(square: Square, board: Board) -> list[Move]:
    return []


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.EMPTY: _no_moves,
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def candidate_moves(square: Square, board: Board) -> list[Move]:
    """Pseudo-legal moves of whatever piece stands on the square (none for an empty square)"""
    return MOVEMENT_RULES[board.piece(square).type](square, board)


# --- CAPTURING RULES / ATTACKING RULES ---
def pawn_attacks(square: Square, board: Board) -> list[Move]:
    """
    Pawns threaten both forward diagonals, whether or not something stands there.
    (An empty square next to the king can be attacked by a pawn without the pawn being able to move there.)
    """
    pawn = board.piece(square)
    direction = pawn_direction(pawn.color)
    attacks: list[Move] = []
    for d_col in [-1, 1]:
        target_square = square.offset(direction, d_col)
        if target_square.is_within_bounds() and not board.piece(target_square).belongs_to(pawn.color):
            attacks.append(
                Move(pawn, square, target_square, capture=_capture_on(target_square, board))
            )
    return attacks


def king_attacks(square: Square, board: Board) -> list[Move]:
    """Only the single steps: a castling king does not attack anything"""
    return single_step_move(square, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
ATTACK_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.EMPTY: _no_moves,
    PieceType.PAWN: pawn_attacks,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: king_attacks,
}


def candidate_attacks(square: Square, board: Board) -> list[Move]:
    """Capture-only variant of `candidate_moves()`: the squares threatened by the piece on the square"""
    return ATTACK_RULES[board.piece(square).type](square, board)


# -- CASTLING MOVES ---
def castling_moves(square: Square, board: Board) -> list[Move]:
    """
    Castling moves for the king standing on the square
    ---

    **you are allowed to castle if**

    * Neither the king nor the rook has left (or been taken on) its starting square (the history tells).
    * The king and a rook of your color still stand on those squares.
    * All squares in between the two pieces are empty.
    * The king does not start on, pass through, or land on a square under attack (you cannot castle out of, through, or into check).
    """
    king = board.piece(square)
    moves: list[Move] = []
    for direction in CASTLING_OPTIONS.get(king.color, ()):
        rule = CASTLING_RULES[direction]
        if square != rule.king_from:
            continue

        # Cannot castle if rights previously revoked.
        if not board.history.can_castle(direction):
            continue

        if not _is_own_rook(board.piece(rule.rook_from), king.color):
            continue

        # Cannot castle if any of the squares in between is occupied
        if any(not board.piece(sq).is_empty for sq in rule.squares_between()):
            continue

        # Cannot castle if the king's path is under attack
        opponent = king.color.opponent
        if any(board.is_square_attacked(sq, opponent) for sq in rule.king_path()):
            continue

        moves.append(
            Move(
                king,
                rule.king_from,
                rule.king_to,
                castle=Castle(rook_from=rule.rook_from, rook_to=rule.rook_to),
            )
        )
    return moves


def _is_own_rook(piece: Piece, color: Color) -> bool:
    return piece.type == PieceType.ROOK and piece.color == color


# -- EN PASSANT MOVES ---
def en_passant_moves(square: Square, board: Board) -> list[Move]:
    """
    Given the pawn on the square: can it take en passant?

    The enemy pawn must have advanced two squares in the very last move, land right next to this pawn,
    and (checked against the current board, not just the move log) still be standing there.
    The capturing pawn moves diagonally behind it, the capture happens on the enemy pawn's square.
    """
    pawn = board.piece(square)
    landing_square = board.history.double_advanced_pawn()
    if landing_square is None:
        return []

    is_adjacent = landing_square.row == square.row and abs(landing_square.col - square.col) == 1
    if not is_adjacent:
        return []

    enemy_pawn = board.piece(landing_square)
    if enemy_pawn.type != PieceType.PAWN or not enemy_pawn.is_opponent_of(pawn.color):
        return []

    target_square = Square(square.row + pawn_direction(pawn.color), landing_square.col)
    if not target_square.is_within_bounds() or not board.piece(target_square).is_empty:
        return []

    return [
        Move(
            pawn,
            square,
            target_square,
            capture=Capture(landing_square, enemy_pawn),
        )
    ]
