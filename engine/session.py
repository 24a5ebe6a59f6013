"""Drill session: the single owner of all mutable drill state.

The UI calls into DrillSession and re-renders from `state`; it never holds
any drill logic of its own.
"""

import random
from typing import Any, Iterable

from loguru import logger

from engine.answer import AnswerMachine
from engine.choices import build_choices
from engine.config import DrillConfig
from engine.deck import pick_next
from engine.errors import EmptyPoolError
from engine.filters import FilterField, apply_filters, available_values
from engine.pool import ItemPool
from models import (
    DrillItem,
    FilterCriteria,
    ScoringEvent,
    SessionState,
    SessionStats,
    Step,
)


class DrillSession:
    """Ties the pool, filters, deck, choices, answer flow and stats together."""

    def __init__(
        self,
        pool: ItemPool | Iterable[DrillItem],
        criteria: FilterCriteria | None = None,
        stats: SessionStats | None = None,
        config: DrillConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.pool = pool if isinstance(pool, ItemPool) else ItemPool(pool)
        self.config = config or DrillConfig()
        self.rng = rng if rng is not None else random.Random()
        self.stats = stats or SessionStats()
        self.used_ids: set[str] = set()
        self.answer = AnswerMachine()
        self._choices_cache: dict[tuple[str, Step], list[str]] = {}

        self.criteria = FilterCriteria()
        self.active_pool: list[DrillItem] = []
        self.apply_filters(criteria or FilterCriteria())

    @property
    def current(self) -> DrillItem | None:
        return self.answer.item

    @property
    def state(self) -> SessionState:
        """A fresh snapshot of the session for rendering."""
        return SessionState(
            used_ids=set(self.used_ids),
            current=self.answer.item,
            step=self.answer.step,
            resolution=self.answer.resolution,
            stats=self.stats,
            criteria=self.criteria,
            active_count=len(self.active_pool),
            guesses=list(self.answer.guesses),
        )

    def apply_filters(self, criteria: FilterCriteria) -> list[DrillItem]:
        """Switch to new criteria and recompute the active pool.

        The current item is dropped so nothing from the old selection stays
        on screen. Used ids are kept; ids outside the new pool are ignored
        by the deck.
        """
        self.criteria = criteria
        self.active_pool = apply_filters(self.pool, criteria)
        self.answer.clear()
        self._choices_cache.clear()
        logger.debug(
            f"Filters {criteria.constraints() or 'none'}: "
            f"{len(self.active_pool)} of {len(self.pool)} items active"
        )
        return self.active_pool

    def available_values(self, field: FilterField) -> list[Any]:
        """Values the user can pick for a filter, taken from the full pool."""
        return available_values(self.pool, field)

    def next(self, clear_used: bool = False) -> DrillItem:
        """Draw the next item and make it current.

        Args:
            clear_used: Start a fresh cycle, forgetting which items were shown.

        Raises:
            EmptyPoolError: If no item matches the current filters. The
                current item is cleared first.
        """
        if clear_used:
            self.used_ids = set()

        self._choices_cache.clear()
        try:
            item, self.used_ids = pick_next(self.active_pool, self.used_ids, self.rng)
        except EmptyPoolError:
            self.answer.clear()
            logger.info("No items match the current filters")
            raise

        self.answer.next(item)
        logger.debug(f"Drew item {item.id} ({len(self.used_ids)}/{len(self.active_pool)} used)")
        return item

    def build_choices(self) -> list[str]:
        """Choices for the current item and step. Empty if there is no item.

        Cached per item and step so re-rendering keeps the same order.
        """
        item = self.answer.item
        if item is None:
            return []

        key = (item.id, self.answer.step)
        if key not in self._choices_cache:
            choice_config = self.config.choices
            fallback = (
                choice_config.fallback_secondary
                if self.answer.step == Step.SECONDARY
                else choice_config.fallback_primary
            )
            self._choices_cache[key] = build_choices(
                item,
                self.answer.step,
                self.pool,
                size=choice_config.size,
                rng=self.rng,
                fallback=fallback,
                shuffle=choice_config.shuffle,
            )
        return list(self._choices_cache[key])

    def submit(self, guess: str) -> ScoringEvent | None:
        """Answer the current step. Returns the scoring event, if any."""
        return self._record(self.answer.submit(guess))

    def reveal(self) -> ScoringEvent | None:
        """Reveal the answer for the current item. Scored as incorrect."""
        return self._record(self.answer.reveal())

    def reset_stats(self) -> SessionStats:
        self.stats = self.stats.reset()
        return self.stats

    def _record(self, event: ScoringEvent | None) -> ScoringEvent | None:
        if event is not None:
            self.stats = self.stats.apply(event)
        return event
