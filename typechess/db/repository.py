"""Protocol repository (can implement later for SQL Alchemy / simple Excel table etc.)"""

from typing import Protocol

from typechess.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, name: str) -> GameModel | None:
        """Get game by name, if record exists."""
        ...

    def create_game(self, game: GameModel) -> GameModel:
        """Store new game and return the stored data. Raises GameAlreadyExistsError if the name is taken."""
        ...

    def update_game(self, name: str, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        ...

    def save_game(self, game: GameModel) -> GameModel:
        """Overwrite the full state of the game, creating the record if it does not exist yet."""
        ...

    def delete_game(self, name: str) -> GameModel | None:
        """Remove a game's record."""
        ...
