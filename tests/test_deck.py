"""Tests for the deck manager."""

import random

import pytest

from engine import EmptyPoolError, pick_next


class TestPickNext:
    """Tests for pick_next()."""

    def test_empty_pool_raises(self):
        with pytest.raises(EmptyPoolError):
            pick_next([], set())

    def test_draws_from_pool(self, sample_items, rng):
        item, used = pick_next(sample_items, set(), rng)
        assert item in sample_items
        assert used == {item.id}

    def test_input_set_not_mutated(self, sample_items, rng):
        used = {"Q1"}
        _, updated = pick_next(sample_items, used, rng)
        assert used == {"Q1"}
        assert len(updated) == 2

    def test_no_repeat_until_exhausted(self, sample_items):
        """Every item is drawn once before any repeats."""
        for seed in range(10):
            rng = random.Random(seed)
            used: set[str] = set()
            drawn = []
            for _ in range(len(sample_items)):
                item, used = pick_next(sample_items, used, rng)
                drawn.append(item.id)
            assert sorted(drawn) == sorted(item.id for item in sample_items)

    def test_cycle_restarts(self, sample_items, rng):
        used = {item.id for item in sample_items}
        item, updated = pick_next(sample_items, used, rng)
        assert updated == {item.id}

    def test_stale_ids_ignored(self, sample_items, rng):
        """Ids from a previous filter selection do not block the new pool."""
        active = sample_items[:2]
        item, updated = pick_next(active, {"Q5", "Q6"}, rng)
        assert item in active
        assert item.id in updated

    def test_single_item_pool(self, single_item, rng):
        for _ in range(3):
            item, used = pick_next([single_item], {single_item.id}, rng)
            assert item is single_item
            assert used == {"Q1"}

    def test_seeded_draws_reproducible(self, sample_items):
        first = [pick_next(sample_items, set(), random.Random(7))[0].id for _ in range(3)]
        assert len(set(first)) == 1
