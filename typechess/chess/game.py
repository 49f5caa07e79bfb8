"""
The Game class will be the entrypoint into the domain layer for the service layer.
It bundles a named game session: its settings and every state it went through (so moves can be undone / redone).
It converts from / to the GameModel the service layer hands over.
"""

import logging
import random
from copy import deepcopy
from dataclasses import asdict, dataclass, field, fields
from typing import Optional, Self

from typechess.chess.moves import Move
from typechess.chess.square import Square
from typechess.chess.state import ChessState
from typechess.chess.state_history import StateHistory
from typechess.core.exceptions import GameStateError
from typechess.core.models import GameModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSettings:
    """Options picked when starting a game. The rules engine itself does not look at them."""

    local_play: bool = True
    critical_hits: bool = False
    misses: bool = False

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, bool]) -> Self:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise GameStateError(
                f"Unknown setting(s): {', '.join(sorted(unknown))}. Pick from {', '.join(sorted(known))}"
            )
        return cls(**data)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    name: str
    settings: GameSettings = field(default_factory=GameSettings)
    history: StateHistory = field(default_factory=StateHistory)

    @classmethod
    def new_game(
        cls,
        name: str,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
        history_limit: int = 0,
    ) -> Self:
        """Fresh game: the starting position (random affinities) is the first snapshot"""
        history = StateHistory(limit=history_limit)
        history.add(ChessState.new(rng))
        logger.info(f"New game {name!r} created")
        return cls(name, settings or GameSettings(), history)

    @classmethod
    def from_model(cls, model: GameModel, history_limit: int = 0) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        if not model.state_history:
            raise GameStateError(f"Game {model.name!r} has no stored states.")
        history = StateHistory.from_list(
            model.state_history, model.current_state_index, history_limit
        )
        return cls(model.name, GameSettings.from_dict(model.settings), history)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            name=self.name,
            settings=self.settings.to_dict(),
            state_history=self.history.to_list(),
            current_state_index=self.history.index,
        )

    def current_state(self) -> ChessState:
        return self.history.current()

    def valid_moves(self, square: Square) -> list[Move]:
        return self.current_state().get_valid_moves(square)

    def move_piece(self, from_square: Square, to_square: Square) -> bool:
        """
        Play the move on a copy of the current state.
        Only an accepted move adds a snapshot. (This also discards any states that were undone before)
        """
        state = deepcopy(self.current_state())
        if not state.move_piece(from_square, to_square):
            return False
        self.history.add(state)
        return True

    def select_pawn_promotion_piece(self, kind: str) -> None:
        state = deepcopy(self.current_state())
        state.select_pawn_promotion_piece(kind)
        self.history.add(state)

    def previous_state(self) -> Optional[ChessState]:
        return self.history.previous()

    def next_state(self) -> Optional[ChessState]:
        return self.history.next()
