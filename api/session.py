"""Game session: holds the current record, runs engine steps and persists each result."""

import logging
import random
from threading import RLock
from typing import Optional

from imposter import engine
from imposter.errors import NoGameError, PersistenceError
from imposter.state import FinalRole, GameConfig, GameRecord, RoleReveal
from imposter.words import WordSource
from api.game_store import GameStore

logger = logging.getLogger(__name__)


class GameSession:
    """
    The one game on the shared device.
    Every step computes the new record first, then stores it. If storing fails
    the new record stays current in memory but is marked dirty (not durable)
    and PersistenceError is raised to the caller.
    Steps hold the session lock from read to store, so concurrent requests
    apply one after the other.
    """

    def __init__(self, store: GameStore, words: WordSource, rng: Optional[random.Random] = None):
        self.store = store
        self.words = words
        self.rng = rng or random.Random()
        self.record: Optional[GameRecord] = None
        self.dirty = False
        self._loaded = False
        self._lock = RLock()

    def load(self) -> Optional[GameRecord]:
        """Load the stored record (once); returns the current record or None."""
        with self._lock:
            if not self._loaded:
                self.record = self.store.load()
                self._loaded = True
            return self.record

    def require_record(self) -> GameRecord:
        with self._lock:
            record = self.load()
            if record is None:
                raise NoGameError("No game has been configured")
            return record

    def snapshot(self) -> tuple[GameRecord, bool]:
        """Current record and whether it is persisted, read together."""
        with self._lock:
            return self.require_record(), not self.dirty

    def _commit(self, record: GameRecord) -> GameRecord:
        # caller holds the lock
        self.record = record
        self._loaded = True
        try:
            self.store.store(record)
        except PersistenceError:
            self.dirty = True
            logger.warning("Game record kept in memory only; store failed")
            raise
        self.dirty = False
        return record

    def save(self) -> GameRecord:
        """Retry storing the current record (e.g. after a failed store)."""
        with self._lock:
            return self._commit(self.require_record())

    def configure(self, config: GameConfig) -> GameRecord:
        with self._lock:
            record = engine.configure_game(config, self.words, self.rng)
            logger.info(
                "New game: %d players, %d impostors, knowledge=%s",
                config.player_count,
                config.imposter_count,
                config.knowledge_level.value,
            )
            return self._commit(record)

    def set_player_names(self, names: list[str]) -> GameRecord:
        with self._lock:
            return self._commit(engine.set_player_names(self.require_record(), names))

    def assign_roles(self) -> GameRecord:
        with self._lock:
            record = engine.assign_roles(self.require_record(), self.rng)
            logger.info("Roles assigned to %d players", len(record.players))
            return self._commit(record)

    def advance_turn(self) -> GameRecord:
        with self._lock:
            return self._commit(engine.advance_turn(self.require_record()))

    def next_round(self) -> GameRecord:
        with self._lock:
            return self._commit(engine.next_round(self.require_record()))

    def resolve_vote(self, player_name: str) -> GameRecord:
        with self._lock:
            record = engine.resolve_vote(self.require_record(), player_name)
            logger.info(
                "%s voted out (%s); %d impostors left",
                record.last_vote_result.voted_player_name,
                "impostor" if record.last_vote_result.was_impostor else "crewmate",
                record.remaining_imposter_count,
            )
            if record.ended:
                logger.info("Game over: %s win after round %d", record.winner.value, record.round)
            return self._commit(record)

    def replay_same_players(self) -> GameRecord:
        with self._lock:
            record = engine.replay_same_players(self.require_record(), self.words, self.rng)
            logger.info("Replay with the same %d players", len(record.players))
            return self._commit(record)

    def replay_new(self) -> None:
        """Discard the game entirely; configuration and names must be collected again."""
        with self._lock:
            self.store.clear()
            self.record = None
            self.dirty = False
            self._loaded = True
            logger.info("Game reset")

    def reveal_role(self, index: int) -> RoleReveal:
        return engine.reveal_role(self.require_record(), index)

    def final_roles(self) -> list[FinalRole]:
        return engine.final_roles(self.require_record())
