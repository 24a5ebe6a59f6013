from typing import Any, Optional

from rich import box
from rich.align import Align
from rich.columns import Columns
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from engine.config import InputMode
from models import DrillItem, FilterCriteria, Resolution, SessionStats, Step
from ui.styles import (
    ERROR_RED,
    GAP_INDIGO,
    INFO_BLUE,
    MUTED_GRAY,
    SUCCESS_GREEN,
    TEXT_WHITE,
    WELSH_GREEN,
    WELSH_RED,
    create_welcome_banner,
    get_resolution_style,
    label,
)

GAP = "____"


def item_meta_line(item: DrillItem, lang: str = "en") -> str:
    """Topic, level and focus, joined with bullets."""
    parts = []
    if item.topic:
        parts.append(item.topic)
    if item.level is not None:
        parts.append(f"{label('level', lang)} {item.level}")
    if item.contrast_group:
        parts.append(f"{label('focus', lang)}: {item.contrast_group}")
    return " • ".join(parts)


class DrillPanel:
    """A styled panel showing the current item, its gap and the choices."""

    def __init__(
        self,
        item: DrillItem,
        step: Step,
        choices: list[str],
        input_mode: InputMode = InputMode.CHOICE,
        show_hint: bool = False,
        lang: str = "en",
    ):
        self.item = item
        self.step = step
        self.choices = choices
        self.input_mode = input_mode
        self.show_hint = show_hint
        self.lang = lang

    def render(self) -> Panel:
        content = Text()

        content.append(
            self.item.prompt_text or "(missing prompt)",
            Style(color=TEXT_WHITE, bold=True),
        )
        content.append("\n")
        meta = item_meta_line(self.item, self.lang)
        if meta:
            content.append(meta + "\n", Style(color=MUTED_GRAY))
        content.append("\n")

        if self.item.context_before:
            content.append(self.item.context_before.rstrip() + " ", Style(color=MUTED_GRAY))
        if self.step == Step.SECONDARY:
            content.append(f"[{self.item.primary_answer} → {GAP}]", Style(color=GAP_INDIGO, bold=True))
        else:
            content.append(GAP, Style(color=GAP_INDIGO, bold=True))
        if self.item.context_after:
            content.append(" " + self.item.context_after.lstrip(), Style(color=MUTED_GRAY))
        content.append("\n\n")

        if self.step == Step.SECONDARY:
            content.append(f"✓ {label('now_form', self.lang)}\n\n", Style(color=SUCCESS_GREEN))

        if self.input_mode == InputMode.CHOICE:
            for i, choice in enumerate(self.choices, 1):
                content.append(f"{i}. ", Style(color=WELSH_GREEN, bold=True))
                content.append(choice, Style(color=TEXT_WHITE))
                content.append("\n")

        if self.show_hint:
            content.append("\n")
            content.append(f"{label('hint', self.lang)}: ", Style(color=WELSH_GREEN, bold=True))
            content.append(self.item.hint or label("no_hint", self.lang), Style(color=MUTED_GRAY))
            content.append("\n")

        prefix = "" if self.input_mode == InputMode.CHOICE else "/"
        content.append("\n")
        content.append(
            f"{prefix}f filters · {prefix}s reset stats · {prefix}c new round",
            Style(color=MUTED_GRAY),
        )

        if self.input_mode == InputMode.CHOICE:
            subtitle = f"1-{len(self.choices)} to answer · h hint · r reveal · n next · q quit"
        else:
            subtitle = "Type your answer · /h hint · /r reveal · /n next · /q quit"

        return Panel(
            Align.left(content),
            title=label("title", self.lang),
            subtitle=subtitle,
            border_style=WELSH_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for the outcome of an attempt."""

    def __init__(
        self,
        item: DrillItem,
        resolution: Resolution,
        guesses: Optional[list[str]] = None,
        lang: str = "en",
    ):
        self.item = item
        self.resolution = resolution
        self.guesses = guesses or []
        self.lang = lang

    def render(self) -> Panel:
        content = Text()
        style = get_resolution_style(self.resolution)

        headline = {
            Resolution.CORRECT: label("correct", self.lang),
            Resolution.INCORRECT: label("incorrect", self.lang),
            Resolution.REVEALED: label("revealed", self.lang),
        }.get(self.resolution, "")
        content.append(headline + "\n", style)

        if self.resolution == Resolution.INCORRECT and self.guesses:
            last = self.guesses[-1].strip() or label("blank", self.lang)
            content.append(
                f"{label('you_answered', self.lang)}: {last}\n", Style(color=MUTED_GRAY)
            )

        content.append("\n")
        answer = (
            self.item.secondary_answer if self.item.is_two_step else self.item.primary_answer
        )
        if self.item.context_before:
            content.append(self.item.context_before.rstrip() + " ", Style(color=TEXT_WHITE))
        content.append(answer, Style(color=GAP_INDIGO, bold=True, underline=True))
        if self.item.context_after:
            content.append(" " + self.item.context_after.lstrip(), Style(color=TEXT_WHITE))

        if self.item.explanation:
            content.append("\n\n")
            content.append(self.item.explanation, Style(color=MUTED_GRAY))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=SUCCESS_GREEN if self.resolution == Resolution.CORRECT else ERROR_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class StatsBar:
    """One-line score summary."""

    def __init__(self, stats: SessionStats, lang: str = "en"):
        self.stats = stats
        self.lang = lang

    def render(self) -> Text:
        text = Text()
        text.append(f"{label('score', self.lang)} ", Style(color=MUTED_GRAY))
        text.append(str(self.stats.score), Style(color=SUCCESS_GREEN, bold=True))
        text.append(f"  ·  {label('streak', self.lang)} ", Style(color=MUTED_GRAY))
        text.append(str(self.stats.streak), Style(color=WELSH_GREEN, bold=True))
        text.append(f"  ·  {label('done', self.lang)} ", Style(color=MUTED_GRAY))
        text.append(str(self.stats.attempts), Style(color=INFO_BLUE, bold=True))
        if self.stats.attempts:
            text.append(f"  ({self.stats.accuracy:.0%})", Style(color=MUTED_GRAY))
        return text

    def __rich__(self) -> Text:
        return self.render()


class FilterTable:
    """Table of filter fields, their available values and the current selection."""

    FIELD_TITLES = {
        "level": "Level",
        "topic": "Topic",
        "contrast_group": "Focus",
    }

    def __init__(
        self,
        values: dict[str, list[Any]],
        criteria: FilterCriteria,
        lang: str = "en",
    ):
        self.values = values
        self.criteria = criteria
        self.lang = lang

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=WELSH_RED, bold=True),
            border_style=MUTED_GRAY,
            box=box.HEAVY,
        )
        table.add_column("Filter")
        table.add_column("Selected", style=Style(color=WELSH_GREEN, bold=True))
        table.add_column("Available", style=Style(color=TEXT_WHITE))

        selected = self.criteria.model_dump()
        for field, values in self.values.items():
            current = selected.get(field)
            table.add_row(
                self.FIELD_TITLES.get(field, field),
                label("all", self.lang) if current is None else str(current),
                ", ".join(str(v) for v in values) or "-",
            )

        return Panel(
            Align.center(table),
            title="Filters",
            border_style=WELSH_GREEN,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FilterMenu:
    """Numbered values for one filter field, with the current one marked."""

    def __init__(
        self,
        field: str,
        values: list[Any],
        current: Any = None,
        lang: str = "en",
    ):
        self.field = field
        self.values = values
        self.current = current
        self.lang = lang

    def render(self) -> Panel:
        content = Text()
        title = FilterTable.FIELD_TITLES.get(self.field, self.field)
        content.append(f"{title}\n\n", Style(color=WELSH_RED, bold=True))

        options = [(0, label("all", self.lang), None)]
        options += [(i, str(value), value) for i, value in enumerate(self.values, 1)]
        for key, text, value in options:
            selected = value == self.current
            content.append(f"[{key}] ", Style(color=WELSH_GREEN, bold=True))
            content.append(text, Style(color=TEXT_WHITE, bold=selected))
            if selected:
                content.append("  ◀", Style(color=INFO_BLUE))
            content.append("\n")

        return Panel(
            Align.left(content),
            title=label("filters", self.lang),
            subtitle=label("keep", self.lang),
            border_style=WELSH_GREEN,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class WelcomeScreen:
    """Welcome screen with banner and pool info."""

    def __init__(
        self,
        item_count: int,
        active_count: int,
        criteria: FilterCriteria,
        lang: str = "en",
    ):
        self.item_count = item_count
        self.active_count = active_count
        self.criteria = criteria
        self.lang = lang

    def render(self) -> Panel:
        banner = create_welcome_banner(self.lang)
        banner.append("\n\n")
        banner.append("Type 'q' at any time to save and quit.\n", Style(color=MUTED_GRAY))

        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.ROUNDED)
        stats.add_column("Label", justify="center")
        stats.add_column("Value", justify="center")
        stats.add_row(
            Text("Total Items", style=Style(color=MUTED_GRAY)),
            Text(str(self.item_count), style=Style(color=WELSH_GREEN, bold=True)),
        )
        stats.add_row(
            Text("In Pool", style=Style(color=MUTED_GRAY)),
            Text(str(self.active_count), style=Style(color=WELSH_GREEN, bold=True)),
        )
        for field, value in self.criteria.constraints().items():
            stats.add_row(
                Text(FilterTable.FIELD_TITLES.get(field, field), style=Style(color=MUTED_GRAY)),
                Text(str(value), style=Style(color=INFO_BLUE)),
            )

        return Panel(
            Columns(
                [Align.center(banner), Align.center(stats)],
                align="center",
                padding=(3, 3),
            ),
            border_style=WELSH_RED,
            box=box.HEAVY,
            padding=(1, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SessionSummary:
    """End-of-session summary panel."""

    def __init__(self, stats: SessionStats, lang: str = "en"):
        self.stats = stats
        self.lang = lang

    def render(self) -> Panel:
        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.SIMPLE)
        stats.add_column("Label", style=Style(color=MUTED_GRAY))
        stats.add_column("Value", justify="right")

        stats.add_row(label("done", self.lang), str(self.stats.attempts))
        stats.add_row(
            label("score", self.lang),
            Text(str(self.stats.score), style=Style(color=SUCCESS_GREEN)),
        )
        stats.add_row(
            label("streak", self.lang),
            Text(str(self.stats.streak), style=Style(color=WELSH_GREEN)),
        )
        stats.add_row(
            "Accuracy",
            Text(f"{self.stats.accuracy:.0%}", style=Style(color=WELSH_GREEN, bold=True)),
        )

        return Panel(
            Align.center(stats),
            title="Session Summary",
            border_style=WELSH_GREEN,
            box=box.HEAVY,
            padding=(1, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()
