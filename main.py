import argparse
import random
import signal
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError
from rich.console import Console

from engine import (
    ChoiceConfig,
    DrillConfig,
    DrillSession,
    EmptyPoolError,
    FILTER_FIELDS,
    InputMode,
    ItemPool,
)
from models import FilterCriteria
from storage import (
    DEFAULT_DATA_PATH,
    DEFAULT_DB_PATH,
    SessionStore,
    get_session_store,
    load_records,
)
from ui import Action, DrillUI
from ui.styles import DEFAULT_THEME, label


def configure_logging(verbose: bool = False) -> None:
    """Send log output to stderr; quiet by default so it stays out of the UI."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def level_arg(value: str) -> str | int:
    """argparse type for --level: a whole number, or "all" to clear the filter."""
    if value.strip().lower() == "all":
        return "all"
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a level number or 'all', got {value!r}")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Practise choosing the right preposition in a sentence."
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=DEFAULT_DATA_PATH,
        help=f"CSV file with drill items (default: {DEFAULT_DATA_PATH})",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"SQLite file for saved stats and filters (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Keep stats and filters in memory only",
    )
    parser.add_argument(
        "--level",
        type=level_arg,
        default=None,
        help="Only this level ('all' clears)",
    )
    parser.add_argument("--topic", type=str, default=None, help="Only this topic ('all' clears)")
    parser.add_argument(
        "--group",
        type=str,
        default=None,
        help="Only this preposition / contrast group ('all' clears)",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in InputMode],
        default=InputMode.CHOICE.value,
        help="choice: pick from options; typed: type the answer (default: choice)",
    )
    parser.add_argument(
        "--lang",
        choices=["en", "cy"],
        default="en",
        help="Language for prompts, hints and labels (default: en)",
    )
    parser.add_argument(
        "--size",
        type=int,
        choices=range(2, 7),
        metavar="{2..6}",
        default=4,
        help="Number of choices in choice mode, 2-6 (default: 4)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--reset-stats",
        action="store_true",
        help="Start from zero score, streak and attempts",
    )
    parser.add_argument(
        "--list-filters",
        action="store_true",
        help="Show the available filter values and exit",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print debug logging to stderr",
    )
    return parser


def criteria_from_args(args, saved: FilterCriteria) -> FilterCriteria:
    """Overlay command-line filters on the saved ones."""
    overrides = {
        "level": args.level,
        "topic": args.topic,
        "contrast_group": args.group,
    }
    values = saved.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return FilterCriteria.model_validate(values)


def build_config(args) -> DrillConfig:
    """Build the drill configuration from command-line arguments."""
    return DrillConfig(
        choices=ChoiceConfig(size=args.size),
        input_mode=InputMode(args.mode),
        lang=args.lang,
    )


def load_pool(data_path: Path, lang: str = "en") -> ItemPool:
    """Load drill items from a CSV file."""
    return ItemPool.load(load_records(data_path, lang=lang))


def save_session(store: SessionStore, session: DrillSession) -> None:
    """Save stats and filters."""
    store.save_stats(session.stats)
    store.save_criteria(session.criteria)


def quit_session(session: DrillSession, ui: DrillUI, store: SessionStore) -> None:
    """Save stats and filters and say goodbye."""
    save_session(store, session)
    ui.show_quit_message(saved=store.persistent)


def create_sigint_handler(ui: DrillUI, session: DrillSession, store: SessionStore):
    """Create a SIGINT handler that saves state before exiting."""

    def sigint_handler(signum, frame):
        quit_session(session, ui, store)
        sys.exit(0)

    return sigint_handler


def change_filters(session: DrillSession, ui: DrillUI, store: SessionStore) -> bool:
    """Let the user pick new filters. Returns False if they chose to quit."""
    values = {field: session.available_values(field) for field in FILTER_FIELDS}
    criteria = ui.choose_filters(values, session.criteria)
    if criteria is None:
        return False
    session.apply_filters(criteria)
    store.save_criteria(session.criteria)
    return True


def run_drill_loop(session: DrillSession, ui: DrillUI, store: SessionStore) -> None:
    """Ask items until the user quits.

    When no item matches the filters, the filter menu opens so the user can
    widen them (or quit from there).
    """
    input_mode = session.config.input_mode
    clear_used = False

    while True:
        try:
            session.next(clear_used=clear_used)
        except EmptyPoolError:
            ui.show_empty_pool(session.criteria)
            if not change_filters(session, ui, store):
                quit_session(session, ui, store)
                return
            continue
        clear_used = False

        show_hint = False
        while not session.state.is_resolved:
            ui.clear_screen()
            choices = session.build_choices() if input_mode == InputMode.CHOICE else []
            ui.show_item(session.state, choices, input_mode, show_hint)

            action, value = ui.get_action(choices, input_mode)
            if action == Action.QUIT:
                quit_session(session, ui, store)
                return
            if action == Action.HINT:
                show_hint = not show_hint
            elif action == Action.NEXT:
                break
            elif action == Action.NEW_CYCLE:
                clear_used = True
                break
            elif action == Action.FILTER:
                if not change_filters(session, ui, store):
                    quit_session(session, ui, store)
                    return
                break
            elif action == Action.RESET_STATS:
                session.reset_stats()
                store.save_stats(session.stats)
            elif action == Action.REVEAL:
                session.reveal()
            else:
                session.submit(value)

        state = session.state
        if not state.is_resolved:
            # Skipped, or the filters changed
            continue

        save_session(store, session)
        ui.show_feedback(state)
        if not ui.wait_for_continue():
            quit_session(session, ui, store)
            return


def run_interactive(args) -> int:
    """Run the interactive drill. Returns the process exit status."""
    console = Console(theme=DEFAULT_THEME)
    ui = DrillUI(console, lang=args.lang)

    try:
        pool = load_pool(args.data, lang=args.lang)
    except FileNotFoundError:
        ui.show_error(f"Data file not found: {args.data}")
        return 1

    ui.show_load_report(len(pool), len(pool.rejects), len(pool.duplicates))
    if not pool:
        ui.show_error("No valid drill items found. Check the data file.")
        return 1

    store = get_session_store(None if args.no_save else args.db)
    try:
        criteria = criteria_from_args(args, store.load_criteria())
        config = build_config(args)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        ui.show_error(f"Invalid option {field}: {error['msg']}")
        return 2

    session = DrillSession(
        pool,
        criteria=criteria,
        stats=store.load_stats(),
        config=config,
        rng=random.Random(args.seed),
    )

    if args.list_filters:
        ui.show_filters(
            {field: session.available_values(field) for field in FILTER_FIELDS},
            session.criteria,
        )
        return 0

    if args.reset_stats:
        session.reset_stats()
        ui.show_info(label("stats_reset", args.lang))
    save_session(store, session)

    signal.signal(signal.SIGINT, create_sigint_handler(ui, session, store))

    ui.clear_screen()
    ui.show_welcome(
        item_count=len(pool),
        active_count=len(session.active_pool),
        criteria=session.criteria,
    )

    run_drill_loop(session, ui, store)
    ui.show_session_complete(session.stats)
    return 0


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(args.verbose)
    sys.exit(run_interactive(args))


if __name__ == "__main__":
    main()
