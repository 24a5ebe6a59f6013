"""Answer state machine for the current drill item.

Phases:

    PRIMARY --correct, single--> RESOLVED(CORRECT)     [scored]
    PRIMARY --correct, two-step--> SECONDARY           [not scored yet]
    PRIMARY --wrong--> RESOLVED(INCORRECT)             [scored]
    SECONDARY --guess--> RESOLVED(CORRECT|INCORRECT)   [scored]
    PRIMARY|SECONDARY --reveal--> RESOLVED(REVEALED)   [scored as wrong]
    any --next(item)--> PRIMARY

Each item produces at most one counted ScoringEvent. submit() and reveal()
after resolution are no-ops.
"""

from enum import Enum

from loguru import logger

from models import DrillItem, Resolution, ScoringEvent, Step
from normalizer import answers_match


class AnswerPhase(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    RESOLVED = "resolved"


class AnswerMachine:
    """Tracks the answer flow for one item at a time."""

    def __init__(self, item: DrillItem | None = None):
        self.item: DrillItem | None = None
        self.step = Step.PRIMARY
        self.resolution = Resolution.PENDING
        self.guesses: list[str] = []
        if item is not None:
            self.next(item)

    @property
    def phase(self) -> AnswerPhase:
        if self.resolution != Resolution.PENDING:
            return AnswerPhase.RESOLVED
        if self.step == Step.SECONDARY:
            return AnswerPhase.SECONDARY
        return AnswerPhase.PRIMARY

    @property
    def is_resolved(self) -> bool:
        return self.phase == AnswerPhase.RESOLVED

    @property
    def expected_answer(self) -> str:
        """Canonical answer for the step currently (or last) asked."""
        if self.item is None:
            return ""
        return self.item.correct_answer(self.step)

    def next(self, item: DrillItem) -> None:
        """Bind a new item and start again at the primary step."""
        self.item = item
        self.step = Step.PRIMARY
        self.resolution = Resolution.PENDING
        self.guesses = []

    def clear(self) -> None:
        """Drop the current item, e.g. after a filter change."""
        self.item = None
        self.step = Step.PRIMARY
        self.resolution = Resolution.PENDING
        self.guesses = []

    def submit(self, guess: str) -> ScoringEvent | None:
        """Check a guess for the current step.

        Returns:
            The scoring event if this guess completed the attempt, otherwise
            None (correct first step of a two-step item, already resolved,
            or no item bound).
        """
        if self.item is None or self.is_resolved:
            logger.debug("Ignoring submit: no pending item")
            return None

        guess = "" if guess is None else str(guess)
        self.guesses.append(guess)
        correct = answers_match(guess, self.item.accepted_answers(self.step))

        if self.step == Step.PRIMARY and correct and self.item.is_two_step:
            self.step = Step.SECONDARY
            return None

        return self._resolve(Resolution.CORRECT if correct else Resolution.INCORRECT)

    def reveal(self) -> ScoringEvent | None:
        """Give up on the current item. Counts as one incorrect attempt."""
        if self.item is None or self.is_resolved:
            logger.debug("Ignoring reveal: no pending item")
            return None
        return self._resolve(Resolution.REVEALED)

    def _resolve(self, resolution: Resolution) -> ScoringEvent:
        assert self.item is not None
        self.resolution = resolution
        logger.debug(f"Item {self.item.id} resolved as {resolution.value}")
        return ScoringEvent(
            counted=True,
            correct=resolution == Resolution.CORRECT,
            item_id=self.item.id,
            resolution=resolution,
        )
