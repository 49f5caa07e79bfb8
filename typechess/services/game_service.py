"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import random
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from typechess.api.models import (
    GameRequest,
    MoveRequest,
    MoveResponse,
    PieceResponse,
    PromotionRequest,
    StartGameRequest,
    StateResponse,
    ValidMovesRequest,
    ValidMovesResponse,
)
from typechess.chess.game import Game, GameSettings
from typechess.chess.moves import Move
from typechess.chess.square import Square, all_squares
from typechess.core.config import Settings, get_settings
from typechess.core.exceptions import GameAlreadyExistsError, GameNotFoundError, IllegalMoveError
from typechess.core.logging_config import setup_logging
from typechess.core.models import GameModel
from typechess.core.shared_types import Color, PieceType
from typechess.db.database import get_session_factory
from typechess.db.repository import GameRepository
from typechess.db.sql_repository import SQLGameRepository
from typechess.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


class GameService:
    """Orchestration of layers for the game."""

    def __init__(
        self,
        repository: GameRepository,
        sessions: Optional[SessionRegistry] = None,
        history_limit: int = 0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.sessions = sessions if sessions is not None else SessionRegistry()
        self.history_limit = history_limit
        self.rng = rng

    # -- API routes logic ---
    def start_game(self, request: StartGameRequest) -> StateResponse:
        """Create a new game under the requested name."""
        settings = GameSettings(
            local_play=request.local_play,
            critical_hits=request.critical_hits,
            misses=request.misses,
        )
        with self.sessions.lock(request.name):
            if self.repo.get_game(request.name) is not None:
                raise GameAlreadyExistsError(f"A game named {request.name!r} already exists.")
            game = Game.new_game(request.name, settings, self.rng, self.history_limit)
            self.repo.create_game(game.to_model())
        return self._create_state_response(game)

    def get_state(self, request: GameRequest) -> StateResponse:
        """Retrieve current game state (whatever snapshot the undo/redo cursor points at)."""
        game = self._load_game(request.name)
        return self._create_state_response(game)

    def valid_moves(self, request: ValidMovesRequest) -> ValidMovesResponse:
        """retrieve the moves the player on turn can make with the piece on the square."""
        game = self._load_game(request.name)
        moves = game.valid_moves(Square.from_algebraic(request.square))
        return ValidMovesResponse(
            name=request.name,
            square=request.square,
            moves=[self._create_move_response(move) for move in moves],
        )

    def move_piece(self, request: MoveRequest) -> StateResponse:
        """Make a move attempt. A move the game rejects raises IllegalMoveError"""
        from_square = Square.from_algebraic(request.from_square)
        to_square = Square.from_algebraic(request.to_square)
        with self._writing(request.name) as game:
            if not game.move_piece(from_square, to_square):
                state = game.current_state()
                raise IllegalMoveError(
                    f"Move not allowed: {request.from_square}{request.to_square} "
                    f"({state.player.value} to move, status: {state.status})"
                )
        return self._create_state_response(game)

    def select_promotion_piece(self, request: PromotionRequest) -> StateResponse:
        with self._writing(request.name) as game:
            game.select_pawn_promotion_piece(request.piece)
        return self._create_state_response(game)

    def previous_state(self, request: GameRequest) -> StateResponse:
        """Undo: move the cursor back one snapshot (stays put at the first one)"""
        with self._writing(request.name) as game:
            game.previous_state()
        return self._create_state_response(game)

    def next_state(self, request: GameRequest) -> StateResponse:
        """Redo: move the cursor forward one snapshot (stays put at the latest one)"""
        with self._writing(request.name) as game:
            game.next_state()
        return self._create_state_response(game)

    def delete_game(self, request: GameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self.sessions.lock(request.name):
            if self.repo.delete_game(request.name) is None:
                raise GameNotFoundError(f"Game {request.name!r} not found.")
        logger.info(f"Game {request.name!r} deleted")

    # -- Internal helpers --
    @contextmanager
    def _writing(self, name: str) -> Iterator[Game]:
        """
        Read-modify-write of a single game, under that game's lock.
        The game is only stored when the block finishes without an exception.
        """
        with self.sessions.lock(name):
            game = self._load_game(name)
            yield game
            self.repo.save_game(game.to_model())

    def _load_game(self, name: str) -> Game:
        return Game.from_model(self._fetch_game(name), self.history_limit)

    def _fetch_game(self, name: str) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(name)
        if game_model is None:
            raise GameNotFoundError(f"Game {name!r} not found.")
        return game_model

    def _create_state_response(self, game: Game) -> StateResponse:
        """Convert the current state of the game into a StateResponse"""
        state = game.current_state()
        board = {
            square.to_algebraic(): PieceResponse(
                type=PieceType(piece.type.value),
                color=Color(piece.color.value),
                affinity=piece.affinity.value,
            )
            for square in all_squares()
            if not (piece := state.board.piece(square)).is_empty
        }
        last_move = state.board.history.last_move()
        return StateResponse(
            name=game.name,
            status=state.status,
            player=Color(state.player.value),
            winner=state.winner,
            info_message=state.info_message,
            turn_count=state.turn_count,
            board=board,
            last_move=self._create_move_response(last_move) if last_move else None,
            can_undo=game.history.index > 0,
            can_redo=game.history.index < len(game.history) - 1,
        )

    def _create_move_response(self, move: Move) -> MoveResponse:
        return MoveResponse(
            from_square=move.from_square.to_algebraic(),
            to_square=move.to_square.to_algebraic(),
            interaction=move.interaction.value if move.interaction else None,
            is_capture=move.capture is not None,
            is_castle=move.castle is not None,
        )


def build_game_service(
    db_session: Optional[Session] = None, settings: Optional[Settings] = None
) -> GameService:
    """Wire up the service the way a transport process uses it: settings, logging and the SQL repository"""
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    session = db_session or get_session_factory()()
    return GameService(SQLGameRepository(session), history_limit=settings.history_limit)
