"""Environment configuration for the Imposter API."""

import logging
import os
from pathlib import Path

from imposter.words import DEFAULT_WORDS_PATH

logger = logging.getLogger(__name__)

# Env var names
ENV_WORDS_PATH = "IMPOSTER_WORDS_PATH"
ENV_STORE_DIR = "IMPOSTER_STORE_DIR"
ENV_SEED = "IMPOSTER_SEED"
ENV_CORS_ORIGINS = "IMPOSTER_CORS_ORIGINS"

# Screens are served from the same device
DEFAULT_CORS_ORIGINS = ["http://localhost", "http://127.0.0.1"]


def get_words_path() -> Path:
    """Word list JSON; defaults to the packaged list."""
    return Path(os.environ.get(ENV_WORDS_PATH) or DEFAULT_WORDS_PATH)


def get_store_dir() -> Path | None:
    """Directory for the file store, or None for the in-memory store."""
    value = os.environ.get(ENV_STORE_DIR)
    return Path(value) if value else None


def get_seed() -> int | None:
    """Optional rng seed for reproducible games."""
    value = os.environ.get(ENV_SEED)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", ENV_SEED, value)
        return None


def get_cors_origins() -> list[str]:
    """Comma-separated origins allowed to call the API; defaults to this machine."""
    value = os.environ.get(ENV_CORS_ORIGINS)
    if not value:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in value.split(",") if origin.strip()]
