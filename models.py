from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from normalizer import build_sentence, parse_piped_list


class DrillMode(str, Enum):
    SINGLE = "single"
    TWO_STEP = "two_step"


class Step(str, Enum):
    """Which sub-answer is being asked for."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class Resolution(str, Enum):
    """Outcome of an attempt at the current item."""

    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    REVEALED = "revealed"


_MODE_ALIASES = {
    "": DrillMode.SINGLE,
    "single": DrillMode.SINGLE,
    "twostep": DrillMode.TWO_STEP,
}


# ============================================================================
# Drill Items
# ============================================================================


class DrillItem(BaseModel):
    """One question: a sentence with a gap and the answer(s) that fill it.

    Items are frozen once loaded. Text fields never hold None; missing
    values become "". Alternative answers and choice overrides accept either
    a list or a pipe-separated string ("ata i|ataf i").
    """

    model_config = ConfigDict(frozen=True)

    id: str
    level: int | None = None  # None = unranked
    topic: str = ""
    contrast_group: str = ""  # e.g. the preposition being contrasted
    mode: DrillMode = DrillMode.SINGLE
    prompt_text: str = ""
    context_before: str = ""
    context_after: str = ""
    primary_answer: str
    primary_alt_answers: tuple[str, ...] = ()
    secondary_answer: str = ""
    secondary_key: str = ""  # e.g. grammatical person
    choice_override: tuple[str, ...] = ()
    hint: str = ""
    explanation: str = ""

    @field_validator(
        "id",
        "topic",
        "contrast_group",
        "prompt_text",
        "context_before",
        "context_after",
        "primary_answer",
        "secondary_answer",
        "secondary_key",
        "hint",
        "explanation",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        if value is None:
            return DrillMode.SINGLE
        if isinstance(value, str):
            key = value.strip().lower()
            for sep in ("-", "_", " "):
                key = key.replace(sep, "")
            return _MODE_ALIASES.get(key, value)
        return value

    @field_validator("primary_alt_answers", "choice_override", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(parse_piped_list(value))
        if isinstance(value, (list, tuple)):
            return tuple(str(v).strip() for v in value if v is not None and str(v).strip())
        return value

    @model_validator(mode="after")
    def _check_answers(self) -> "DrillItem":
        if not self.id:
            raise ValueError("id must not be empty")
        if not self.primary_answer:
            raise ValueError("primary_answer must not be empty")
        if self.mode == DrillMode.TWO_STEP and not self.secondary_answer:
            raise ValueError("two-step items need a secondary_answer")
        if self.mode == DrillMode.SINGLE and self.secondary_answer:
            raise ValueError("single-step items must not have a secondary_answer")
        return self

    @property
    def is_two_step(self) -> bool:
        return self.mode == DrillMode.TWO_STEP

    def correct_answer(self, step: Step) -> str:
        """Canonical answer for the given step."""
        if step == Step.SECONDARY:
            return self.secondary_answer
        return self.primary_answer

    def accepted_answers(self, step: Step) -> tuple[str, ...]:
        """All strings accepted as correct for the given step."""
        if step == Step.SECONDARY:
            return (self.secondary_answer,)
        return (self.primary_answer, *self.primary_alt_answers)

    def full_sentence(self) -> str:
        """The target sentence with the gap filled by the final answer."""
        final = self.secondary_answer if self.is_two_step else self.primary_answer
        return build_sentence(self.context_before, final, self.context_after)


# ============================================================================
# Filtering
# ============================================================================


class FilterCriteria(BaseModel):
    """User-selected filters. None means "no constraint" for that field.

    "all" and blank strings are accepted as "no constraint" too, so values
    coming straight from a menu or the command line can be passed through.
    """

    level: int | None = None
    topic: str | None = None
    contrast_group: str | None = None

    @field_validator("level", "topic", "contrast_group", mode="before")
    @classmethod
    def _any_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in ("", "all"):
            return None
        return value

    def constraints(self) -> dict[str, Any]:
        """Return only the fields that actually constrain the pool."""
        return {
            name: value
            for name, value in self.model_dump().items()
            if value is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.constraints()


# ============================================================================
# Scoring
# ============================================================================


class ScoringEvent(BaseModel):
    """Emitted by the answer state machine when an attempt completes."""

    model_config = ConfigDict(frozen=True)

    counted: bool = True
    correct: bool
    item_id: str = ""
    resolution: Resolution = Resolution.PENDING


class SessionStats(BaseModel):
    """Score counters. A pure reducer over scoring events."""

    score: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    attempts: int = Field(default=0, ge=0)

    def apply(self, event: ScoringEvent) -> "SessionStats":
        """Return the stats after folding in one event."""
        if not event.counted:
            return self.model_copy()
        if event.correct:
            return self.model_copy(
                update={
                    "score": self.score + 1,
                    "streak": self.streak + 1,
                    "attempts": self.attempts + 1,
                }
            )
        return self.model_copy(update={"streak": 0, "attempts": self.attempts + 1})

    def reset(self) -> "SessionStats":
        return SessionStats()

    @property
    def accuracy(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.score / self.attempts


class SessionState(BaseModel):
    """Snapshot of the session handed to the UI for rendering."""

    used_ids: set[str] = Field(default_factory=set)
    current: DrillItem | None = None
    step: Step = Step.PRIMARY
    resolution: Resolution = Resolution.PENDING
    stats: SessionStats = Field(default_factory=SessionStats)
    criteria: FilterCriteria = Field(default_factory=FilterCriteria)
    active_count: int = 0
    guesses: list[str] = Field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return self.resolution != Resolution.PENDING
