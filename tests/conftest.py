"""
Pytest will auto-discover / import this file called 'conftest.py'. ]
This file defines fixtures/variables required for testing multiple layers.
"""

import random
from typing import Callable, Iterator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from typechess.chess.board import Board
from typechess.chess.pieces import Piece
from typechess.chess.square import Square
from typechess.chess.state import ChessState
from typechess.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def board_with_pieces() -> Callable[[dict[str, Piece]], Board]:
    """Call the inner function with the pieces to place, e.g. {'e1': Piece(PieceType.KING, Color.WHITE, Affinity.FIRE)}"""

    def _create_board(pieces: dict[str, Piece]) -> Board:
        board = Board.empty()
        for square_name, piece in pieces.items():
            board.place_piece(piece, Square.from_algebraic(square_name))
        return board

    return _create_board


@pytest.fixture
def rng() -> random.Random:
    """Seeded: the same affinities every run"""
    return random.Random(1234)


@pytest.fixture
def starting_board(rng: random.Random) -> Board:
    return Board.starting_position(rng)


@pytest.fixture
def new_state(rng: random.Random) -> ChessState:
    return ChessState.new(rng)
