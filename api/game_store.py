"""Game record persistence: one record under a fixed key."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from imposter.errors import ConfigurationError, PersistenceError
from imposter.rules import GAME_STATE_KEY
from imposter.state import GameRecord, record_from_json, record_to_json

logger = logging.getLogger(__name__)


class GameStore(ABC):
    """Load/store/clear the game record. Failures raise PersistenceError."""

    key = GAME_STATE_KEY

    @abstractmethod
    def load(self) -> GameRecord | None:
        """Return the stored record, or None when nothing is stored."""

    @abstractmethod
    def store(self, record: GameRecord) -> None:
        """Serialize and store the record, replacing any previous one."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored record. Succeeds when nothing is stored."""


def _decode(data: bytes, source: str) -> GameRecord:
    try:
        return record_from_json(data)
    except (ValidationError, ConfigurationError) as e:
        logger.warning("Stored game record in %s is invalid: %s", source, e)
        raise PersistenceError(f"Stored game record is invalid: {source}") from e


class MemoryGameStore(GameStore):
    """In-memory store. Keeps the serialized blob, so a stored record is a snapshot."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}

    def load(self) -> GameRecord | None:
        data = self._store.get(self.key)
        if data is None:
            return None
        return _decode(data, "memory")

    def store(self, record: GameRecord) -> None:
        self._store[self.key] = record_to_json(record)

    def clear(self) -> None:
        self._store.pop(self.key, None)


class FileGameStore(GameStore):
    """JSON file store at <directory>/<key>.json. Writes go through a temp file and os.replace."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def load(self) -> GameRecord | None:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Error reading game record %s: %s", self.path, e)
            raise PersistenceError(f"Could not read {self.path}") from e
        return _decode(data, str(self.path))

    def store(self, record: GameRecord) -> None:
        data = record_to_json(record)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{self.key}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.warning("Error writing game record %s: %s", self.path, e)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Could not write {self.path}") from e

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Error removing game record %s: %s", self.path, e)
            raise PersistenceError(f"Could not remove {self.path}") from e
