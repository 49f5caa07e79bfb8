"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any

# Type aliases to make GameModel easier to read
SettingName = str
StateSnapshot = dict[str, Any]


@dataclass
class GameModel:
    """Transport-safe (JSON-compatible) representation of a game session used between API, Service, DB, and Game layers."""

    name: str
    settings: dict[SettingName, bool]
    state_history: list[StateSnapshot] = field(default_factory=list)
    current_state_index: int = 0
