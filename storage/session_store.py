"""Persist session stats and filter criteria between runs.

Both are stored as JSON blobs in any KeyValueStore. The engine itself never
touches storage; main.py loads these before a session and saves after.
"""

from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from models import FilterCriteria, SessionStats

from .base import KeyValueStore

STATS_KEY = "prep_stats"
CRITERIA_KEY = "prep_filters"

M = TypeVar("M", bound=BaseModel)


class SessionStore:
    """Reads and writes SessionStats and FilterCriteria through a KeyValueStore."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    @property
    def persistent(self) -> bool:
        return self.kv.persistent

    def load_stats(self) -> SessionStats:
        return self._load(STATS_KEY, SessionStats)

    def save_stats(self, stats: SessionStats) -> None:
        self.kv.set(STATS_KEY, stats.model_dump_json())

    def load_criteria(self) -> FilterCriteria:
        return self._load(CRITERIA_KEY, FilterCriteria)

    def save_criteria(self, criteria: FilterCriteria) -> None:
        self.kv.set(CRITERIA_KEY, criteria.model_dump_json())

    def clear(self) -> None:
        self.kv.delete(STATS_KEY)
        self.kv.delete(CRITERIA_KEY)

    def _load(self, key: str, model: type[M]) -> M:
        """Load a model, falling back to its defaults if missing or unreadable."""
        raw = self.kv.get(key)
        if raw is None:
            return model()
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable {key!r} blob: {e.error_count()} error(s)")
            return model()
