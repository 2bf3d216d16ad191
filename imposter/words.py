"""Word source: picks the secret word for a knowledge level."""

import logging
import random
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from imposter.rules import DEFAULT_WORD, DEFAULT_WORDS, WORD_CATEGORIES, KnowledgeLevel

logger = logging.getLogger(__name__)

DEFAULT_WORDS_PATH = Path(__file__).parent / "data" / "words.json"

# Used when the word list file cannot be read at all
FALLBACK_DATABASE: dict[str, list[str]] = {
    "niets": [],
    "heel_klein_beetje": ["APPEL", "BOEK", "HUIS", "AUTO", "BED", "DEUR", "TAS", "STOEL", "TAFEL", "FIETS"],
    "een_beetje": [
        "APPEL", "BOEK", "HUIS", "AUTO", "BED", "DEUR", "TAS", "STOEL", "TAFEL", "FIETS",
        "HOND", "KAT", "BLOEM", "BOOM", "WATER", "MELK", "BROOD", "KAAS", "VLEES", "VIS",
    ],
}

_database_adapter = TypeAdapter(dict[str, list[str]])


def _normalize(database: dict[str, list[str]]) -> dict[str, list[str]]:
    """Fill in categories missing from a loaded word list."""
    normalized = {key: [w.strip() for w in words if w.strip()] for key, words in database.items()}
    normalized.setdefault(WORD_CATEGORIES[KnowledgeLevel.NONE], [])
    normalized.setdefault(WORD_CATEGORIES[KnowledgeLevel.LITTLE], list(DEFAULT_WORDS))
    normalized.setdefault(WORD_CATEGORIES[KnowledgeLevel.SOME], list(DEFAULT_WORDS))
    return normalized


class WordSource:
    """
    Supplies secret words per knowledge level.
    Always returns a non-empty word: empty categories fall back to DEFAULT_WORDS,
    and a source without any database yields DEFAULT_WORD.
    """

    def __init__(self, database: Optional[dict[str, list[str]]] = None):
        self.database = _normalize(database) if database is not None else None

    @classmethod
    def from_file(cls, path: Path | str = DEFAULT_WORDS_PATH) -> "WordSource":
        """Load a word list JSON file; use the built-in fallback list if it is missing or malformed."""
        try:
            database = _database_adapter.validate_json(Path(path).read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning("Could not load word list %s: %s; using fallback words", path, e)
            database = FALLBACK_DATABASE
        return cls(database)

    def words_for(self, level: KnowledgeLevel) -> list[str]:
        """Candidate words for a knowledge level (never empty)."""
        if self.database is None:
            return [DEFAULT_WORD]
        words = self.database.get(WORD_CATEGORIES[KnowledgeLevel(level)], [])
        return words or list(DEFAULT_WORDS)

    def word_for(self, level: KnowledgeLevel, rng: Optional[random.Random] = None) -> str:
        """Pick one word for the given knowledge level."""
        return (rng or random).choice(self.words_for(level))
