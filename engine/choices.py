"""Multiple choice generation for drill items.

Candidates are collected in priority order until the set is full:

1. the correct answer for the step
2. the item's own choice override (primary step only)
3. answers of other items in the same contrast group (primary step) or
   with the same secondary key (secondary step)
4. every other answer in the pool for that step
5. the fallback vocabulary from ChoiceConfig

Candidates are deduplicated by their normalized form, and anything that
would also be accepted as correct is never offered as a distractor.
"""

import random
from typing import Iterable

from engine.config import FALLBACK_PRIMARY, FALLBACK_SECONDARY
from models import DrillItem, Step
from normalizer import normalize


def _shuffled(values: list[str], chooser) -> list[str]:
    values = list(values)
    chooser.shuffle(values)
    return values


def related_answers(item: DrillItem, step: Step, pool: Iterable[DrillItem]) -> list[str]:
    """Answers of the other items that share the item's grouping tag for this step."""
    if step == Step.PRIMARY:
        group = normalize(item.contrast_group)
        if not group:
            return []
        return [
            other.primary_answer
            for other in pool
            if other.id != item.id and normalize(other.contrast_group) == group
        ]

    key = normalize(item.secondary_key)
    if not key:
        return []
    return [
        other.secondary_answer
        for other in pool
        if other.id != item.id
        and other.is_two_step
        and normalize(other.secondary_key) == key
    ]


def pool_answers(item: DrillItem, step: Step, pool: Iterable[DrillItem]) -> list[str]:
    """Canonical answers for the step across the rest of the pool."""
    if step == Step.PRIMARY:
        return [other.primary_answer for other in pool if other.id != item.id]
    return [
        other.secondary_answer
        for other in pool
        if other.id != item.id and other.is_two_step
    ]


def build_choices(
    item: DrillItem,
    step: Step,
    pool: Iterable[DrillItem],
    size: int = 4,
    rng: random.Random | None = None,
    fallback: list[str] | None = None,
    shuffle: bool = True,
) -> list[str]:
    """Build up to `size` distinct choices, always including the correct answer.

    Args:
        item: The item being asked.
        step: Which answer the choices are for.
        pool: All loaded items (not just the filtered ones).
        size: Maximum number of choices.
        rng: Random source; pass a seeded random.Random for reproducible output.
        fallback: Vocabulary used when the pool runs out. Defaults to the
            built-in list for the step.
        shuffle: Whether to shuffle the final list.

    Returns:
        The choices. Fewer than `size` if not enough distinct candidates exist.
    """
    if size < 1:
        raise ValueError(f"size must be at least 1, got {size}")

    chooser = rng if rng is not None else random
    pool = list(pool)

    if fallback is None:
        fallback = FALLBACK_SECONDARY if step == Step.SECONDARY else FALLBACK_PRIMARY

    correct = item.correct_answer(step)
    choices = [correct]
    # Alternative accepted answers would be marked correct, so never offer them
    seen = {normalize(answer) for answer in item.accepted_answers(step)}

    def add(candidates: Iterable[str]) -> None:
        for candidate in candidates:
            if len(choices) >= size:
                return
            key = normalize(candidate)
            if not key or key in seen:
                continue
            seen.add(key)
            choices.append(candidate.strip())

    if step == Step.PRIMARY:
        add(item.choice_override)
    add(_shuffled(related_answers(item, step, pool), chooser))
    add(_shuffled(pool_answers(item, step, pool), chooser))
    add(_shuffled(fallback, chooser))

    if shuffle:
        chooser.shuffle(choices)
    return choices
