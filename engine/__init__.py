"""Question engine for the preposition drill.

Architecture:
- ItemPool validates records into frozen DrillItems
- apply_filters/available_values derive the active pool from FilterCriteria
- pick_next draws items without repeats until the pool is exhausted
- build_choices assembles multiple choice candidates for a step
- AnswerMachine runs the one- or two-step answer flow and emits scoring events
- DrillSession owns the session state and wires the pieces together

Everything here is synchronous and UI-agnostic. Randomness is injected
through `rng` arguments so tests can seed it.
"""

from engine.answer import AnswerMachine, AnswerPhase
from engine.choices import build_choices
from engine.config import ChoiceConfig, DrillConfig, InputMode
from engine.deck import pick_next
from engine.errors import (
    DrillError,
    DuplicateIdWarning,
    EmptyPoolError,
    InvalidItemError,
)
from engine.filters import FILTER_FIELDS, apply_filters, available_values
from engine.pool import ItemPool, shape_record
from engine.session import DrillSession

__all__ = [
    # Pool and filters
    "ItemPool",
    "shape_record",
    "apply_filters",
    "available_values",
    "FILTER_FIELDS",
    # Drawing and choices
    "pick_next",
    "build_choices",
    # Answer flow
    "AnswerMachine",
    "AnswerPhase",
    # Session
    "DrillSession",
    # Configuration
    "ChoiceConfig",
    "DrillConfig",
    "InputMode",
    # Errors
    "DrillError",
    "EmptyPoolError",
    "InvalidItemError",
    "DuplicateIdWarning",
]
