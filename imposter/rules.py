"""Game rules and constants for Imposter."""

from enum import Enum


class Role(str, Enum):
    """Player roles in the game."""

    IMPOSTOR = "impostor"
    CREWMATE = "crewmate"


class KnowledgeLevel(str, Enum):
    """How much the impostors know about the secret word."""

    NONE = "none"
    LITTLE = "little"
    SOME = "some"


class Winner(str, Enum):
    """Winning side once the game has ended."""

    CREWMATES = "crewmates"
    IMPOSTORS = "impostors"


# Player count bounds (inclusive)
MIN_PLAYERS = 3
MAX_PLAYERS = 20

# At least one impostor, at most half the table
MIN_IMPOSTERS = 1

# Fixed key the game record is persisted under
GAME_STATE_KEY = "gameState"

# Word list category per knowledge level (keys of the word list JSON)
WORD_CATEGORIES = {
    KnowledgeLevel.NONE: "niets",
    KnowledgeLevel.LITTLE: "heel_klein_beetje",
    KnowledgeLevel.SOME: "een_beetje",
}

# Word used when no word list is available at all
DEFAULT_WORD = "APPEL"

# Used when the requested category has no entries
DEFAULT_WORDS = ("APPEL", "BOEK", "HUIS", "AUTO", "BED")


def max_imposters(player_count: int) -> int:
    """Largest allowed impostor count for a table of player_count."""
    return player_count // 2
