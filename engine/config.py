"""Configuration for the drill engine.

These models let callers tune choice generation and how answers are
collected (multiple choice or typed) without touching engine logic.
"""

from enum import Enum

from pydantic import BaseModel, Field

# Used when the pool itself cannot supply enough distractors.
FALLBACK_PRIMARY = [
    "i",
    "at",
    "o",
    "am",
    "ar",
    "gan",
    "gyda",
    "â",
    "heb",
    "wrth",
    "dros",
    "dan",
    "trwy",
    "yng",
    "yn",
]

FALLBACK_SECONDARY = [
    "arna i",
    "arnat ti",
    "arno fe",
    "arni hi",
    "arnon ni",
    "arnoch chi",
    "arnyn nhw",
]


class InputMode(str, Enum):
    """How the learner answers: pick from choices, or type the answer."""

    CHOICE = "choice"
    TYPED = "typed"


class ChoiceConfig(BaseModel):
    """Configuration for multiple choice generation."""

    size: int = Field(default=4, ge=2, le=6)
    shuffle: bool = True
    fallback_primary: list[str] = Field(default_factory=lambda: list(FALLBACK_PRIMARY))
    fallback_secondary: list[str] = Field(
        default_factory=lambda: list(FALLBACK_SECONDARY)
    )


class DrillConfig(BaseModel):
    """Master configuration for a drill session."""

    choices: ChoiceConfig = Field(default_factory=ChoiceConfig)
    input_mode: InputMode = InputMode.CHOICE
    lang: str = "en"
