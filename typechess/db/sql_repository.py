"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from typing import Callable, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from typechess.core.exceptions import GameAlreadyExistsError, RepositoryError
from typechess.core.models import GameModel
from typechess.db.schema import DBGame

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, name: str) -> GameModel | None:
        """Get game by name, if record exists."""

        def _get() -> GameModel | None:
            game_db = self._fetch_game(name)
            if game_db:
                return self._to_model(game_db)
            return None

        return self._run(f"load game {name!r}", _get)

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game and return the stored data."""

        def _create() -> GameModel:
            if self._fetch_game(game.name):
                raise GameAlreadyExistsError(f"A game named {game.name!r} already exists.")
            game_db = DBGame(
                name=game.name,
                settings=game.settings,
                state_history=game.state_history,
                current_state_index=game.current_state_index,
            )
            self.db.add(game_db)
            self.db.commit()
            self.db.refresh(game_db)
            return self._to_model(game_db)

        return self._run(f"create game {game.name!r}", _create)

    def update_game(self, name: str, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""

        def _update() -> GameModel | None:
            game_db = self._fetch_game(name)
            if not game_db:
                return None
            self._copy_onto(game_db, game)
            self.db.commit()
            self.db.refresh(game_db)
            return self._to_model(game_db)

        return self._run(f"update game {name!r}", _update)

    def save_game(self, game: GameModel) -> GameModel:
        """Full-state overwrite: update the record, or create it when it is not there yet."""

        def _save() -> GameModel:
            game_db = self._fetch_game(game.name)
            if game_db is None:
                game_db = DBGame(name=game.name)
                self.db.add(game_db)
            self._copy_onto(game_db, game)
            self.db.commit()
            self.db.refresh(game_db)
            return self._to_model(game_db)

        return self._run(f"save game {game.name!r}", _save)

    def delete_game(self, name: str) -> GameModel | None:
        """Remove a game's record."""

        def _delete() -> GameModel | None:
            game_db = self._fetch_game(name)
            if not game_db:
                return None
            game_model = self._to_model(game_db)
            self.db.delete(game_db)
            self.db.commit()
            return game_model

        return self._run(f"delete game {name!r}", _delete)

    # -- Internal helpers --
    def _run(self, action: str, operation: Callable[[], T]) -> T:
        """
        Database failures are rolled back and reported as a retryable RepositoryError.
        (The caller decides whether to try again. Nothing is retried here.)
        """
        try:
            return operation()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception(f"Failed to {action}")
            raise RepositoryError(f"Failed to {action}: {exc}", retryable=True) from exc

    def _fetch_game(self, name: str) -> DBGame | None:
        query = select(DBGame).where(DBGame.name == name)
        return self.db.scalar(query)

    def _copy_onto(self, game_db: DBGame, game: GameModel) -> None:
        game_db.settings = game.settings
        game_db.state_history = game.state_history
        game_db.current_state_index = game.current_state_index

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            name=game_db.name,
            settings=game_db.settings,
            state_history=game_db.state_history,
            current_state_index=game_db.current_state_index,
        )
