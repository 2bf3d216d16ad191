"""Game engine for Imposter."""

from imposter.engine import (
    configure_game,
    set_player_names,
    assign_roles,
    start_game,
    advance_turn,
    next_round,
    resolve_vote,
    replay_same_players,
    reveal_role,
    eliminated_players,
    final_roles,
    is_game_over,
    get_winner,
)
from imposter.errors import ConfigurationError, GameError, NoGameError, PersistenceError, PreconditionError
from imposter.rules import KnowledgeLevel, Role, Winner
from imposter.state import FinalRole, GameConfig, GameRecord, RoleReveal, VoteResult
from imposter.words import WordSource

__all__ = [
    "configure_game",
    "set_player_names",
    "assign_roles",
    "start_game",
    "advance_turn",
    "next_round",
    "resolve_vote",
    "replay_same_players",
    "reveal_role",
    "eliminated_players",
    "final_roles",
    "is_game_over",
    "get_winner",
    "ConfigurationError",
    "GameError",
    "NoGameError",
    "PersistenceError",
    "PreconditionError",
    "KnowledgeLevel",
    "Role",
    "Winner",
    "FinalRole",
    "GameConfig",
    "GameRecord",
    "RoleReveal",
    "VoteResult",
    "WordSource",
]
