"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from typechess.core.exceptions import InvalidSquareError

# Board is always 8x8. Row 0 is White's back rank, column 0 is the a-file.
BOARD_SIZE = 8
FILE_NAMES = "abcdefgh"


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0].lower() not in FILE_NAMES or not sq[1].isdigit():
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")
        square = cls(row=int(sq[1]) - 1, col=FILE_NAMES.index(sq[0].lower()))
        if not square.is_within_bounds():
            raise InvalidSquareError(f"Square {sq!r} is not on the board.")
        return square

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.col]}{self.row + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.col < BOARD_SIZE)

    def offset(self, d_row: int, d_col: int) -> Square:
        """The square reached by stepping (d_row, d_col). Might fall off the board: check with is_within_bounds()"""
        return Square(self.row + d_row, self.col + d_col)


def all_squares() -> list[Square]:
    """Every square of the board, row-major (a1, b1, ..., h8)"""
    return [Square(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)]
