from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from engine.config import InputMode
from models import FilterCriteria, SessionState, SessionStats
from ui.components import (
    DrillPanel,
    FeedbackPanel,
    FilterMenu,
    FilterTable,
    SessionSummary,
    StatsBar,
    WelcomeScreen,
)
from ui.styles import ERROR_RED, INFO_BLUE, MUTED_GRAY, SUCCESS_GREEN, label


class Action(str, Enum):
    """What the learner asked for at the prompt."""

    ANSWER = "answer"
    HINT = "hint"
    REVEAL = "reveal"
    NEXT = "next"
    FILTER = "filter"
    RESET_STATS = "reset_stats"
    NEW_CYCLE = "new_cycle"
    QUIT = "quit"


# Single letters only work in choice mode: "i", "o" and "am" are answers.
CHOICE_COMMANDS = {
    "q": Action.QUIT,
    "h": Action.HINT,
    "r": Action.REVEAL,
    "n": Action.NEXT,
    "f": Action.FILTER,
    "s": Action.RESET_STATS,
    "c": Action.NEW_CYCLE,
}
SLASH_COMMANDS = {f"/{key}": action for key, action in CHOICE_COMMANDS.items()}


def parse_choice_input(user_input: str, choices: list[str]) -> tuple[Action, str] | None:
    """Parse input in choice mode: a choice number or a command letter.

    Returns:
        (action, chosen text), or None if the input is not valid.
    """
    user_input = user_input.strip().lower()
    if user_input in SLASH_COMMANDS:
        return SLASH_COMMANDS[user_input], ""
    if user_input in CHOICE_COMMANDS:
        return CHOICE_COMMANDS[user_input], ""
    if user_input.isdigit():
        index = int(user_input) - 1
        if 0 <= index < len(choices):
            return Action.ANSWER, choices[index]
    return None


def parse_typed_input(user_input: str) -> tuple[Action, str]:
    """Parse input in typed mode: anything that is not a slash command is an answer."""
    command = user_input.strip().lower()
    if command in SLASH_COMMANDS:
        return SLASH_COMMANDS[command], ""
    return Action.ANSWER, user_input


class DrillUI:
    """Main UI orchestrator for the preposition drill."""

    def __init__(self, console: Optional[Console] = None, lang: str = "en"):
        self.console = console or Console()
        self.lang = lang

    def show_welcome(
        self,
        item_count: int,
        active_count: int,
        criteria: FilterCriteria,
    ) -> None:
        """Display the welcome screen and wait for user to press Enter."""
        welcome = WelcomeScreen(
            item_count=item_count,
            active_count=active_count,
            criteria=criteria,
            lang=self.lang,
        )
        self.console.print(welcome)
        self.console.print()
        self.console.input(Text("Press Enter to start...", style=f"bold {MUTED_GRAY}"))

    def show_item(
        self,
        state: SessionState,
        choices: list[str],
        input_mode: InputMode = InputMode.CHOICE,
        show_hint: bool = False,
    ) -> None:
        """Display the current item with its gap and choices."""
        if state.current is None:
            return
        panel = DrillPanel(
            item=state.current,
            step=state.step,
            choices=choices,
            input_mode=input_mode,
            show_hint=show_hint,
            lang=self.lang,
        )
        self.console.print(panel)
        self.console.print(StatsBar(state.stats, lang=self.lang))
        self.console.print()

    def get_action(
        self,
        choices: list[str],
        input_mode: InputMode = InputMode.CHOICE,
    ) -> tuple[Action, str]:
        """Read one action from the user, re-prompting on invalid choice input."""
        while True:
            user_input = self.console.input(
                Text(f"{label('answer', self.lang)}: ", style=f"bold {MUTED_GRAY}")
            )

            if input_mode == InputMode.TYPED:
                return parse_typed_input(user_input)

            parsed = parse_choice_input(user_input, choices)
            if parsed is not None:
                return parsed

            self.console.print(
                Text(
                    f"Please enter 1-{len(choices)}, or h / r / n / f / s / c / q\n",
                    style=ERROR_RED,
                )
            )

    def show_feedback(self, state: SessionState) -> None:
        """Display the outcome of the attempt at the current item."""
        if state.current is None:
            return
        feedback = FeedbackPanel(
            item=state.current,
            resolution=state.resolution,
            guesses=state.guesses,
            lang=self.lang,
        )
        self.console.print(feedback)
        self.console.print(StatsBar(state.stats, lang=self.lang))
        self.console.print()

    def show_filters(self, values: dict[str, list[Any]], criteria: FilterCriteria) -> None:
        """Display available filter values and the current selection."""
        self.console.print(FilterTable(values, criteria, lang=self.lang))

    def choose_filters(
        self,
        values: dict[str, list[Any]],
        criteria: FilterCriteria,
    ) -> FilterCriteria | None:
        """Ask for a value per filter field.

        Enter keeps the current value, 0 clears the field and x clears every
        field at once.

        Returns:
            The new criteria, or None if the user typed q to quit.
        """
        selected = criteria.model_dump()

        for field, options in values.items():
            self.console.print(
                FilterMenu(field, options, current=selected.get(field), lang=self.lang)
            )

            while True:
                user_input = self.console.input(
                    Text(f"{label('filters', self.lang)}: ", style=f"bold {MUTED_GRAY}")
                ).strip().lower()

                if user_input in ("q", "/q"):
                    return None
                if user_input in ("x", "/x"):
                    return FilterCriteria()
                if user_input == "":
                    break
                if user_input.isdigit() and int(user_input) <= len(options):
                    index = int(user_input)
                    selected[field] = None if index == 0 else options[index - 1]
                    break

                self.console.print(
                    Text(f"Please enter 0-{len(options)}, Enter, x or q\n", style=ERROR_RED)
                )

        return FilterCriteria.model_validate(selected)

    def show_load_report(self, loaded: int, rejected: int, duplicates: int) -> None:
        """Summarize what happened when the data file was loaded."""
        message = f"Loaded {loaded} items."
        if rejected:
            message += f" Skipped {rejected} invalid rows."
        if duplicates:
            message += f" Ignored {duplicates} duplicate ids."
        self.console.print(
            Text(message, style=ERROR_RED if rejected or duplicates else SUCCESS_GREEN)
        )

    def show_empty_pool(self, criteria: FilterCriteria) -> None:
        """Display the "no items match" state."""
        details = ", ".join(f"{k}={v}" for k, v in criteria.constraints().items())
        body = label("no_items", self.lang)
        if details:
            body += f"\n\n({details})"
        self.console.print(
            Panel(
                Text(body, style=INFO_BLUE),
                title="Nothing to practise",
                border_style=INFO_BLUE,
            )
        )

    def show_session_complete(self, stats: SessionStats) -> None:
        """Display session completion summary."""
        self.console.print(SessionSummary(stats, lang=self.lang))

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_quit_message(self, saved: bool = True) -> None:
        """Display the quit message."""
        note = label("saved" if saved else "not_saved", self.lang)
        self.console.print()
        self.console.print(Text(f"👋 Hwyl! {note}", style=MUTED_GRAY))

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()

    def wait_for_continue(self) -> bool:
        """Wait for Enter. Returns False if the user typed q to quit."""
        user_input = self.console.input(
            Text("Press Enter to continue (q to quit)...", style=f"bold {MUTED_GRAY}")
        )
        return user_input.strip().lower() not in ("q", "/q")
