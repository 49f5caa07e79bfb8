"""Unit tests for typechess/services/game_service.py"""

import random
import threading
from typing import Iterator
from unittest.mock import patch

import pytest
from sqlalchemy.orm import Session

from typechess.core.config import Settings
from typechess.core.exceptions import (
    GameAlreadyExistsError,
    GameError,
    GameNotFoundError,
    IllegalMoveError,
    PromotionNotPendingError,
    RepositoryError,
)
from typechess.core.models import GameModel
from typechess.core.shared_types import Color, PieceType, Status
from typechess.db.sql_repository import SQLGameRepository
from typechess.services.game_service import (
    GameRequest,
    GameService,
    MoveRequest,
    PromotionRequest,
    StartGameRequest,
    StateResponse,
    ValidMovesRequest,
    ValidMovesResponse,
    build_game_service,
)
from typechess.services.session_registry import SessionRegistry


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[str, GameModel] = {}
        self.saves = 0

    def get_game(self, name: str) -> GameModel | None:
        return self._games.get(name)

    def create_game(self, game: GameModel) -> GameModel:
        if game.name in self._games:
            raise GameAlreadyExistsError(f"A game named {game.name!r} already exists.")
        self._games[game.name] = game
        return game

    def update_game(self, name: str, game: GameModel) -> GameModel | None:
        if name not in self._games:
            return None
        self._games[name] = game
        return game

    def save_game(self, game: GameModel) -> GameModel:
        self.saves += 1
        self._games[game.name] = game
        return game

    def delete_game(self, name: str) -> GameModel | None:
        return self._games.pop(name, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Iterator[MockRepository]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> GameService:
    return GameService(mock_repository, SessionRegistry(), rng=random.Random(5))


@pytest.fixture
def started(service: GameService) -> StateResponse:
    return service.start_game(StartGameRequest(name="arena"))


# --- START / GET ---
def test_start_game(service: GameService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.start_game(StartGameRequest(name="arena", critical_hits=True))

    assert isinstance(response, StateResponse)
    assert response.name == "arena"
    assert response.status == Status.AWAITING_MOVE
    assert response.player == Color.WHITE
    assert response.turn_count == 0
    assert len(response.board) == 32
    assert response.board["e1"].type == PieceType.KING
    assert response.last_move is None
    assert not response.can_undo
    assert not response.can_redo

    stored_game = mock_repository.get_game("arena")
    assert stored_game is not None
    assert stored_game.settings == {"local_play": True, "critical_hits": True, "misses": False}
    assert len(stored_game.state_history) == 1


def test_start_game_name_taken(service: GameService, started: StateResponse) -> None:
    with pytest.raises(GameAlreadyExistsError):
        service.start_game(StartGameRequest(name="arena"))


def test_get_state(service: GameService, started: StateResponse) -> None:
    assert service.get_state(GameRequest(name="arena")) == started


def test_unknown_game(service: GameService) -> None:
    """Make sure service propagates the exceptions."""
    with pytest.raises(GameNotFoundError):
        service.get_state(GameRequest(name="nowhere"))
    with pytest.raises(GameError):
        service.move_piece(MoveRequest(name="nowhere", from_square="e2", to_square="e4"))


# --- MOVES ---
def test_valid_moves(service: GameService, started: StateResponse) -> None:
    response = service.valid_moves(ValidMovesRequest(name="arena", square="b1"))
    assert isinstance(response, ValidMovesResponse)
    assert {move.to_square for move in response.moves} == {"a3", "c3"}
    assert all(move.interaction == "normal" for move in response.moves)


def test_move_piece(service: GameService, started: StateResponse, mock_repository: MockRepository) -> None:
    response = service.move_piece(MoveRequest(name="arena", from_square="e2", to_square="e4"))
    assert response.player == Color.BLACK
    assert response.turn_count == 1
    assert "e4" in response.board
    assert "e2" not in response.board
    assert response.last_move is not None
    assert response.last_move.from_square == "e2"
    assert response.can_undo

    stored_game = mock_repository.get_game("arena")
    assert stored_game is not None
    assert len(stored_game.state_history) == 2
    assert stored_game.current_state_index == 1


def test_illegal_move(service: GameService, started: StateResponse, mock_repository: MockRepository) -> None:
    """A rejected move raises, and nothing gets stored"""
    with pytest.raises(IllegalMoveError):
        service.move_piece(MoveRequest(name="arena", from_square="e2", to_square="e5"))
    assert mock_repository.saves == 0
    assert len(mock_repository.get_game("arena").state_history) == 1


def test_promotion_not_pending(service: GameService, started: StateResponse) -> None:
    with pytest.raises(PromotionNotPendingError):
        service.select_promotion_piece(PromotionRequest(name="arena", piece="queen"))


# --- UNDO / REDO ---
def test_previous_and_next_state(service: GameService, started: StateResponse) -> None:
    service.move_piece(MoveRequest(name="arena", from_square="e2", to_square="e4"))

    undone = service.previous_state(GameRequest(name="arena"))
    assert undone.player == Color.WHITE
    assert "e2" in undone.board
    assert undone.can_redo
    assert not undone.can_undo

    redone = service.next_state(GameRequest(name="arena"))
    assert redone.player == Color.BLACK
    assert "e4" in redone.board
    assert not redone.can_redo


# --- DELETE ---
def test_delete_game(service: GameService, started: StateResponse, mock_repository: MockRepository) -> None:
    service.delete_game(GameRequest(name="arena"))
    assert mock_repository.get_game("arena") is None
    assert "arena" not in service.sessions
    with pytest.raises(GameNotFoundError):
        service.delete_game(GameRequest(name="arena"))


# --- CONCURRENCY ---
def test_moves_on_the_same_game_are_serialized(service: GameService, started: StateResponse) -> None:
    """Two clients send the same move at once: exactly one of them gets through"""
    barrier = threading.Barrier(2)
    results: list[str] = []

    def _send_move() -> None:
        barrier.wait()
        try:
            service.move_piece(MoveRequest(name="arena", from_square="e2", to_square="e4"))
            results.append("accepted")
        except IllegalMoveError:
            results.append("rejected")

    threads = [threading.Thread(target=_send_move) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == ["accepted", "rejected"]
    assert service.get_state(GameRequest(name="arena")).turn_count == 1


def test_unknown_names_leave_no_locks_behind(service: GameService) -> None:
    for number in range(100):
        with pytest.raises(GameNotFoundError):
            service.move_piece(MoveRequest(name=f"ghost-{number}", from_square="e2", to_square="e4"))
    with pytest.raises(GameNotFoundError):
        service.delete_game(GameRequest(name="ghost-0"))
    assert len(service.sessions) == 0


def test_repository_failure_propagates(service: GameService, started: StateResponse, mock_repository: MockRepository) -> None:
    with patch.object(
        mock_repository, "save_game", side_effect=RepositoryError("db down", retryable=True)
    ):
        with pytest.raises(RepositoryError) as exc_info:
            service.move_piece(MoveRequest(name="arena", from_square="e2", to_square="e4"))
    assert exc_info.value.retryable


# --- WIRING ---
def test_build_game_service(db_session_repo: Session) -> None:
    settings = Settings(database_url="sqlite:///:memory:", log_level="DEBUG", history_limit=5)
    with patch("typechess.services.game_service.setup_logging") as mock_setup_logging:
        service = build_game_service(db_session_repo, settings)
    mock_setup_logging.assert_called_once_with("DEBUG")
    assert isinstance(service.repo, SQLGameRepository)
    assert service.history_limit == 5

    service.start_game(StartGameRequest(name="wired"))
    response = service.move_piece(MoveRequest(name="wired", from_square="g1", to_square="f3"))
    assert response.turn_count == 1
    assert service.get_state(GameRequest(name="wired")).board["f3"].type == PieceType.KNIGHT
