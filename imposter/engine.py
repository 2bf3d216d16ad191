"""Game engine: pure state transitions over a GameRecord, no I/O."""

import copy
import logging
import random
from collections import Counter
from typing import Optional

from imposter.errors import ConfigurationError, PreconditionError
from imposter.rules import Role, Winner
from imposter.state import FinalRole, GameConfig, GameRecord, RoleReveal, VoteResult
from imposter.words import WordSource

logger = logging.getLogger(__name__)


def _require_running(record: GameRecord) -> None:
    if record.ended:
        raise PreconditionError("Game is over")


def _require_roles(record: GameRecord) -> None:
    if not record.roles_assigned:
        raise PreconditionError("Roles have not been assigned yet")


def _check_winner(record: GameRecord) -> None:
    """Set ended/winner from the remaining counts (mutates record)."""
    if record.remaining_imposter_count == 0:
        record.ended = True
        record.winner = Winner.CREWMATES
    elif record.remaining_imposter_count >= record.remaining_crewmate_count:
        # Impostors win on a tie
        record.ended = True
        record.winner = Winner.IMPOSTORS


def configure_game(
    config: GameConfig,
    words: WordSource,
    rng: Optional[random.Random] = None,
) -> GameRecord:
    """
    Create a new record for config with no players yet.
    The secret word is drawn here, once per game.
    """
    rng = rng or random.Random()
    return GameRecord(
        config=config,
        secret_word=words.word_for(config.knowledge_level, rng),
    )


def set_player_names(record: GameRecord, names: list[str]) -> GameRecord:
    """Store the collected player names. Returns new record."""
    if record.roles_assigned:
        raise PreconditionError("Player names cannot change after roles are assigned")
    cleaned = [name.strip() for name in names]
    if len(cleaned) != record.config.player_count:
        raise ConfigurationError(
            f"Expected {record.config.player_count} player names, got {len(cleaned)}"
        )
    if any(not name for name in cleaned):
        raise ConfigurationError("Player names must not be empty")
    duplicates = sorted(name for name, c in Counter(cleaned).items() if c > 1)
    if duplicates:
        # Votes match by name; only the first of each duplicate can be voted out
        logger.warning("Duplicate player names: %s", ", ".join(duplicates))
    record = copy.deepcopy(record)
    record.players = cleaned
    return record


def assign_roles(record: GameRecord, rng: Optional[random.Random] = None) -> GameRecord:
    """
    Deal roles to the named players with a uniform shuffle.
    Snapshots the original roster for the end-of-game reveal. Returns new record.
    """
    _require_running(record)
    if record.roles_assigned:
        raise PreconditionError("Roles have already been assigned for this game")
    config = record.config
    if len(record.players) != config.player_count:
        raise PreconditionError(
            f"Need {config.player_count} player names before assigning roles, have {len(record.players)}"
        )

    rng = rng or random.Random()
    roles = [Role.IMPOSTOR] * config.imposter_count + [Role.CREWMATE] * config.crewmate_count
    # random.shuffle is Fisher-Yates: every ordering of the multiset is equally likely
    rng.shuffle(roles)

    record = copy.deepcopy(record)
    record.roles = roles
    record.original_players = list(record.players)
    record.original_roles = list(roles)
    record.remaining_imposter_count = config.imposter_count
    return record


def start_game(
    config: GameConfig,
    player_names: list[str],
    words: WordSource,
    rng: Optional[random.Random] = None,
) -> GameRecord:
    """Configure, name and deal in one step."""
    rng = rng or random.Random()
    record = configure_game(config, words, rng)
    record = set_player_names(record, player_names)
    return assign_roles(record, rng)


def advance_turn(record: GameRecord) -> GameRecord:
    """Hand the device to the next player; wraps into a new round. Returns new record."""
    _require_running(record)
    _require_roles(record)
    if not record.players:
        raise PreconditionError("No players left")
    record = copy.deepcopy(record)
    record.turn_index += 1
    if record.turn_index >= len(record.players):
        record.turn_index = 0
        record.round += 1
    return record


def next_round(record: GameRecord) -> GameRecord:
    """Continue after a vote that did not end the game. Returns new record."""
    _require_running(record)
    _require_roles(record)
    record = copy.deepcopy(record)
    record.round += 1
    record.turn_index = 0
    return record


def resolve_vote(record: GameRecord, voted_player_name: str) -> GameRecord:
    """
    Eliminate the voted player and evaluate the win condition.
    With duplicate names only the first matching player is removed.
    Returns new state.
    """
    _require_running(record)
    _require_roles(record)
    voted_player_name = voted_player_name.strip()
    if voted_player_name not in record.players:
        raise PreconditionError(f"{voted_player_name!r} is not an active player")

    record = copy.deepcopy(record)
    idx = record.players.index(voted_player_name)
    was_impostor = record.roles[idx] == Role.IMPOSTOR
    del record.players[idx]
    del record.roles[idx]
    if was_impostor:
        record.remaining_imposter_count -= 1
    record.last_vote_result = VoteResult(
        voted_player_name=voted_player_name,
        was_impostor=was_impostor,
    )
    if record.turn_index >= len(record.players):
        record.turn_index = 0
    _check_winner(record)
    return record


def replay_same_players(
    record: GameRecord,
    words: WordSource,
    rng: Optional[random.Random] = None,
) -> GameRecord:
    """
    New game over the full original roster (eliminated players included),
    with a fresh secret word and a fresh role deal.
    """
    _require_roles(record)
    rng = rng or random.Random()
    fresh = configure_game(record.config, words, rng)
    fresh = set_player_names(fresh, list(record.original_players))
    return assign_roles(fresh, rng)


def reveal_role(record: GameRecord, index: int) -> RoleReveal:
    """What the player at index sees on the role reveal screen."""
    _require_roles(record)
    if not 0 <= index < len(record.players):
        raise PreconditionError(f"No active player at index {index}")
    role = record.roles[index]
    return RoleReveal(
        player_name=record.players[index],
        role=role,
        word=record.secret_word if role == Role.CREWMATE else None,
    )


def _active_flags(record: GameRecord) -> list[bool]:
    """
    For each original roster slot, whether that player is still active.
    Votes always remove the first remaining match, so the survivors of a
    duplicated name are its last occurrences.
    """
    active = Counter(record.players)
    flags = []
    for name in reversed(record.original_players):
        still_in = active[name] > 0
        if still_in:
            active[name] -= 1
        flags.append(still_in)
    flags.reverse()
    return flags


def eliminated_players(record: GameRecord) -> list[str]:
    """Names from the original roster that are no longer active, in roster order."""
    return [
        name
        for name, still_in in zip(record.original_players, _active_flags(record))
        if not still_in
    ]


def final_roles(record: GameRecord) -> list[FinalRole]:
    """Everyone's role for the results screen, eliminated players included."""
    if not record.original_players:
        return [
            FinalRole(player_name=name, role=role, eliminated=False)
            for name, role in zip(record.players, record.roles)
        ]
    return [
        FinalRole(player_name=name, role=role, eliminated=not still_in)
        for name, role, still_in in zip(
            record.original_players, record.original_roles, _active_flags(record)
        )
    ]


def is_game_over(record: GameRecord) -> bool:
    return record.ended


def get_winner(record: GameRecord) -> Optional[Winner]:
    """Return the winning side or None if the game is still running."""
    return record.winner if record.ended else None
