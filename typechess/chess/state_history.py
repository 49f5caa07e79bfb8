"""Undo / redo: every accepted move adds a snapshot of the ChessState, a cursor points at the one currently shown."""

from dataclasses import dataclass, field
from typing import Any, Optional, Self

from typechess.chess.state import ChessState
from typechess.core.exceptions import GameStateError


@dataclass
class StateHistory:
    states: list[ChessState] = field(default_factory=list)
    index: int = 0
    # max number of snapshots kept (oldest ones are dropped first). 0 = keep everything
    limit: int = 0

    def __post_init__(self) -> None:
        if self.states and not 0 <= self.index < len(self.states):
            raise GameStateError(
                f"State index {self.index} out of range for a history of {len(self.states)} states."
            )

    def __len__(self) -> int:
        return len(self.states)

    def current(self) -> ChessState:
        if not self.states:
            raise GameStateError("The state history is empty.")
        return self.states[self.index]

    def add(self, state: ChessState) -> None:
        """Store a new snapshot. Anything that was undone (the states after the cursor) is discarded."""
        del self.states[self.index + 1 :]
        self.states.append(state)
        if self.limit and len(self.states) > self.limit:
            del self.states[: len(self.states) - self.limit]
        self.index = len(self.states) - 1

    def previous(self) -> Optional[ChessState]:
        """Step back one snapshot (None if already at the first one)"""
        if self.index == 0:
            return None
        self.index -= 1
        return self.states[self.index]

    def next(self) -> Optional[ChessState]:
        """Step forward one snapshot (None if already at the latest one)"""
        if self.index >= len(self.states) - 1:
            return None
        self.index += 1
        return self.states[self.index]

    def to_list(self) -> list[dict[str, Any]]:
        return [state.to_dict() for state in self.states]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]], index: int, limit: int = 0) -> Self:
        return cls([ChessState.from_dict(state) for state in data], index, limit)
