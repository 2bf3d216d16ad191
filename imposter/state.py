"""Game state types for Imposter."""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import TypeAdapter

from imposter.errors import ConfigurationError
from imposter.rules import (
    MAX_PLAYERS,
    MIN_IMPOSTERS,
    MIN_PLAYERS,
    KnowledgeLevel,
    Role,
    Winner,
    max_imposters,
)


@dataclass(frozen=True)
class GameConfig:
    """Table setup chosen before names are entered. Fixed for the whole game."""

    player_count: int
    imposter_count: int = 1
    knowledge_level: KnowledgeLevel = KnowledgeLevel.NONE

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ConfigurationError(
                f"player_count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {self.player_count}"
            )
        upper = max_imposters(self.player_count)
        if not MIN_IMPOSTERS <= self.imposter_count <= upper:
            raise ConfigurationError(
                f"imposter_count must be between {MIN_IMPOSTERS} and {upper} for {self.player_count} players, "
                f"got {self.imposter_count}"
            )
        object.__setattr__(self, "knowledge_level", KnowledgeLevel(self.knowledge_level))

    @property
    def crewmate_count(self) -> int:
        return self.player_count - self.imposter_count


@dataclass
class VoteResult:
    """Outcome of the most recent elimination."""

    voted_player_name: str
    was_impostor: bool


@dataclass
class RoleReveal:
    """What one player sees when the device is handed to them."""

    player_name: str
    role: Role
    word: Optional[str] = None  # only crewmates get the word


@dataclass
class FinalRole:
    """One line of the end-of-game reveal."""

    player_name: str
    role: Role
    eliminated: bool


@dataclass
class GameRecord:
    """Full game record for one session."""

    config: GameConfig
    players: list[str] = field(default_factory=list)
    roles: list[Role] = field(default_factory=list)  # parallel to players
    original_players: list[str] = field(default_factory=list)  # snapshot after role assignment
    original_roles: list[Role] = field(default_factory=list)
    secret_word: str = ""
    round: int = 1
    turn_index: int = 0
    remaining_imposter_count: int = 0
    last_vote_result: Optional[VoteResult] = None
    ended: bool = False
    winner: Optional[Winner] = None

    @property
    def roles_assigned(self) -> bool:
        return bool(self.original_roles)

    @property
    def remaining_crewmate_count(self) -> int:
        return len(self.players) - self.remaining_imposter_count

    @property
    def current_player(self) -> Optional[str]:
        """Name of the player whose turn it is, or None when nobody is left."""
        if 0 <= self.turn_index < len(self.players):
            return self.players[self.turn_index]
        return None

    def role_of(self, player_name: str) -> Optional[Role]:
        """Return the role of the first active player with this name, or None."""
        for name, role in zip(self.players, self.roles):
            if name == player_name:
                return role
        return None


_record_adapter = TypeAdapter(GameRecord)


def record_to_json(record: GameRecord) -> bytes:
    """Serialize a record to a JSON blob."""
    return _record_adapter.dump_json(record)


def record_from_json(data: str | bytes) -> GameRecord:
    """Parse a JSON blob produced by record_to_json. Raises pydantic.ValidationError on bad input."""
    return _record_adapter.validate_json(data)
