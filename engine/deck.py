"""Deck manager: draw items without repeats until the pool is exhausted."""

import random
from typing import Sequence

from engine.errors import EmptyPoolError
from models import DrillItem


def pick_next(
    active_pool: Sequence[DrillItem],
    used_ids: set[str] | frozenset[str],
    rng: random.Random | None = None,
) -> tuple[DrillItem, set[str]]:
    """Draw the next item and return it with the updated set of used ids.

    Draws uniformly from the items not yet used in this cycle. Once every
    item has been used, the cycle restarts from the whole pool. Ids that
    are no longer in the pool (after a filter change) are simply ignored.
    The input set is not modified.

    Raises:
        EmptyPoolError: If active_pool is empty.
    """
    if not active_pool:
        raise EmptyPoolError()

    chooser = rng if rng is not None else random

    unused = [item for item in active_pool if item.id not in used_ids]
    if unused:
        updated = set(used_ids)
        item = chooser.choice(unused)
    else:
        # Cycle exhausted
        updated = set()
        item = chooser.choice(list(active_pool))

    updated.add(item.id)
    return item, updated
