"""
Elemental affinities and the type-effectiveness chart.

Every piece carries one affinity for the whole game. When a piece attempts a capture, the matchup
(attacker affinity, defender affinity) decides what happens on the board (see Board.execute_move).

The chart is the standard 18-type chart (Fairy included), read as EFFECTIVENESS[attacker][defender].
It is NOT symmetric: Fire -> Grass is super effective, Grass -> Fire is not very effective.
Only the non-neutral entries are listed; every pair that is missing is NORMAL.
"""

import random
from enum import Enum
from typing import Optional


class Affinity(Enum):
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"
    # empty squares: interacts normally with everything
    NO_TYPE = "no type"


class Interaction(Enum):
    SUPER_EFFECTIVE = "super effective"
    NOT_VERY_EFFECTIVE = "not very effective"
    NO_EFFECT = "no effect"
    NORMAL = "normal"
    # no interaction was evaluated (e.g. no move has been played yet)
    EMPTY = "empty"


# The affinities handed out to pieces (everything but the sentinel)
PIECE_AFFINITIES: list[Affinity] = [
    affinity for affinity in Affinity if affinity != Affinity.NO_TYPE
]

_SUPER = Interaction.SUPER_EFFECTIVE
_NOT_VERY = Interaction.NOT_VERY_EFFECTIVE
_NONE = Interaction.NO_EFFECT

A = Affinity
EFFECTIVENESS: dict[Affinity, dict[Affinity, Interaction]] = {
    A.NORMAL: {A.ROCK: _NOT_VERY, A.GHOST: _NONE, A.STEEL: _NOT_VERY},
    A.FIRE: {
        A.FIRE: _NOT_VERY,
        A.WATER: _NOT_VERY,
        A.GRASS: _SUPER,
        A.ICE: _SUPER,
        A.BUG: _SUPER,
        A.ROCK: _NOT_VERY,
        A.DRAGON: _NOT_VERY,
        A.STEEL: _SUPER,
    },
    A.WATER: {
        A.FIRE: _SUPER,
        A.WATER: _NOT_VERY,
        A.GRASS: _NOT_VERY,
        A.GROUND: _SUPER,
        A.ROCK: _SUPER,
        A.DRAGON: _NOT_VERY,
    },
    A.ELECTRIC: {
        A.WATER: _SUPER,
        A.ELECTRIC: _NOT_VERY,
        A.GRASS: _NOT_VERY,
        A.GROUND: _NONE,
        A.FLYING: _SUPER,
        A.DRAGON: _NOT_VERY,
    },
    A.GRASS: {
        A.FIRE: _NOT_VERY,
        A.WATER: _SUPER,
        A.GRASS: _NOT_VERY,
        A.POISON: _NOT_VERY,
        A.GROUND: _SUPER,
        A.FLYING: _NOT_VERY,
        A.BUG: _NOT_VERY,
        A.ROCK: _SUPER,
        A.DRAGON: _NOT_VERY,
        A.STEEL: _NOT_VERY,
    },
    A.ICE: {
        A.FIRE: _NOT_VERY,
        A.WATER: _NOT_VERY,
        A.GRASS: _SUPER,
        A.ICE: _NOT_VERY,
        A.GROUND: _SUPER,
        A.FLYING: _SUPER,
        A.DRAGON: _SUPER,
        A.STEEL: _NOT_VERY,
    },
    A.FIGHTING: {
        A.NORMAL: _SUPER,
        A.ICE: _SUPER,
        A.POISON: _NOT_VERY,
        A.FLYING: _NOT_VERY,
        A.PSYCHIC: _NOT_VERY,
        A.BUG: _NOT_VERY,
        A.ROCK: _SUPER,
        A.GHOST: _NONE,
        A.DARK: _SUPER,
        A.STEEL: _SUPER,
        A.FAIRY: _NOT_VERY,
    },
    A.POISON: {
        A.GRASS: _SUPER,
        A.POISON: _NOT_VERY,
        A.GROUND: _NOT_VERY,
        A.ROCK: _NOT_VERY,
        A.GHOST: _NOT_VERY,
        A.STEEL: _NONE,
        A.FAIRY: _SUPER,
    },
    A.GROUND: {
        A.FIRE: _SUPER,
        A.ELECTRIC: _SUPER,
        A.GRASS: _NOT_VERY,
        A.POISON: _SUPER,
        A.FLYING: _NONE,
        A.BUG: _NOT_VERY,
        A.ROCK: _SUPER,
        A.STEEL: _SUPER,
    },
    A.FLYING: {
        A.ELECTRIC: _NOT_VERY,
        A.GRASS: _SUPER,
        A.FIGHTING: _SUPER,
        A.BUG: _SUPER,
        A.ROCK: _NOT_VERY,
        A.STEEL: _NOT_VERY,
    },
    A.PSYCHIC: {
        A.FIGHTING: _SUPER,
        A.POISON: _SUPER,
        A.PSYCHIC: _NOT_VERY,
        A.DARK: _NONE,
        A.STEEL: _NOT_VERY,
    },
    A.BUG: {
        A.FIRE: _NOT_VERY,
        A.GRASS: _SUPER,
        A.FIGHTING: _NOT_VERY,
        A.POISON: _NOT_VERY,
        A.FLYING: _NOT_VERY,
        A.PSYCHIC: _SUPER,
        A.GHOST: _NOT_VERY,
        A.DARK: _SUPER,
        A.STEEL: _NOT_VERY,
        A.FAIRY: _NOT_VERY,
    },
    A.ROCK: {
        A.FIRE: _SUPER,
        A.ICE: _SUPER,
        A.FIGHTING: _NOT_VERY,
        A.GROUND: _NOT_VERY,
        A.FLYING: _SUPER,
        A.BUG: _SUPER,
        A.STEEL: _NOT_VERY,
    },
    A.GHOST: {
        A.NORMAL: _NONE,
        A.PSYCHIC: _SUPER,
        A.GHOST: _SUPER,
        A.DARK: _NOT_VERY,
    },
    A.DRAGON: {A.DRAGON: _SUPER, A.STEEL: _NOT_VERY, A.FAIRY: _NONE},
    A.DARK: {
        A.FIGHTING: _NOT_VERY,
        A.PSYCHIC: _SUPER,
        A.GHOST: _SUPER,
        A.DARK: _NOT_VERY,
        A.FAIRY: _NOT_VERY,
    },
    A.STEEL: {
        A.FIRE: _NOT_VERY,
        A.WATER: _NOT_VERY,
        A.ELECTRIC: _NOT_VERY,
        A.ICE: _SUPER,
        A.ROCK: _SUPER,
        A.STEEL: _NOT_VERY,
        A.FAIRY: _SUPER,
    },
    A.FAIRY: {
        A.FIRE: _NOT_VERY,
        A.FIGHTING: _SUPER,
        A.POISON: _NOT_VERY,
        A.DRAGON: _SUPER,
        A.DARK: _SUPER,
        A.STEEL: _NOT_VERY,
    },
    A.NO_TYPE: {},
}
del A


def matchup(attacker: Affinity, defender: Affinity) -> Interaction:
    """Look up the outcome of `attacker` hitting `defender`. Total over all 19 x 19 pairs."""
    return EFFECTIVENESS[attacker].get(defender, Interaction.NORMAL)


def random_affinities(count: int, rng: Optional[random.Random] = None) -> list[Affinity]:
    """
    Draw `count` distinct affinities in random order.
    Used to hand out affinities to one side's pieces at the start of a game (no affinity repeats within a side).
    """
    if count > len(PIECE_AFFINITIES):
        raise ValueError(
            f"Only {len(PIECE_AFFINITIES)} distinct affinities exist, cannot draw {count}."
        )
    rng = rng or random.Random()
    return rng.sample(PIECE_AFFINITIES, count)
