"""Preposition Drill UI Module - terminal interface built on rich."""

from ui.app import Action, DrillUI, parse_choice_input, parse_typed_input
from ui.components import (
    DrillPanel,
    FeedbackPanel,
    FilterMenu,
    FilterTable,
    SessionSummary,
    StatsBar,
    WelcomeScreen,
)
from ui.styles import (
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    SUCCESS_GREEN,
    WELSH_GREEN,
    WELSH_RED,
)

__all__ = [
    "DrillUI",
    "Action",
    "parse_choice_input",
    "parse_typed_input",
    "DrillPanel",
    "FeedbackPanel",
    "FilterMenu",
    "FilterTable",
    "SessionSummary",
    "StatsBar",
    "WelcomeScreen",
    "WELSH_RED",
    "WELSH_GREEN",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
