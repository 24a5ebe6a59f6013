"""Integration tests for the command line entry point in main.py.

These tests simulate user input through stdin by mocking Console.input().
"""

import random
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

import main
from engine import DrillSession, InputMode
from models import DrillItem, FilterCriteria, SessionStats
from storage import get_session_store


class InputSequence:
    """Callable providing sequential inputs for mocked Console.input().

    Tracks all prompts received for debugging failed tests.
    """

    def __init__(self, inputs: list[str]):
        self.inputs = inputs
        self.index = 0
        self.call_history: list[tuple[int, Any]] = []

    def __call__(self, prompt: Any = "") -> str:
        """Return next input in sequence, tracking prompts received."""
        self.call_history.append((self.index, prompt))
        if self.index >= len(self.inputs):
            history = "\n".join(f"  {i}: {p}" for i, p in self.call_history)
            raise StopIteration(
                f"Ran out of inputs at call {self.index}.\n"
                f"Prompt: {prompt}\n"
                f"History:\n{history}"
            )
        result = self.inputs[self.index]
        self.index += 1
        return result

    @property
    def remaining(self) -> int:
        """Number of unused inputs remaining."""
        return len(self.inputs) - self.index


class TestParser:
    """Tests for command line parsing."""

    def test_defaults(self):
        args = main.create_parser().parse_args([])
        assert args.data == main.DEFAULT_DATA_PATH
        assert args.db == main.DEFAULT_DB_PATH
        assert args.mode == "choice"
        assert args.lang == "en"
        assert args.size == 4
        assert not args.no_save

    def test_flags(self):
        args = main.create_parser().parse_args(
            ["--level", "2", "--group", "ar", "--mode", "typed", "--lang", "cy", "--seed", "3"]
        )
        assert args.level == 2
        assert args.group == "ar"
        assert args.mode == "typed"
        assert args.lang == "cy"
        assert args.seed == 3

    def test_bad_mode_rejected(self):
        with pytest.raises(SystemExit):
            main.create_parser().parse_args(["--mode", "voice"])

    @pytest.mark.parametrize(
        "argv",
        [
            ["--size", "9"],
            ["--size", "1"],
            ["--size", "four"],
            ["--level", "abc"],
            ["--level", "1.5"],
        ],
    )
    def test_bad_numbers_rejected_by_parser(self, argv, capsys):
        """Out-of-range or non-numeric values get a usage error, not a traceback."""
        with pytest.raises(SystemExit) as exc_info:
            main.create_parser().parse_args(argv)
        assert exc_info.value.code == 2
        assert "Traceback" not in capsys.readouterr().err

    def test_level_all_accepted(self):
        assert main.create_parser().parse_args(["--level", "ALL"]).level == "all"
        assert main.create_parser().parse_args(["--level", "3"]).level == 3

    def test_size_range(self):
        for size in range(2, 7):
            assert main.create_parser().parse_args(["--size", str(size)]).size == size


class TestCriteriaFromArgs:
    """Tests for merging saved and command line filters."""

    def test_saved_kept_when_not_overridden(self):
        args = main.create_parser().parse_args([])
        saved = FilterCriteria(topic="Travel")
        assert main.criteria_from_args(args, saved) == saved

    def test_override(self):
        args = main.create_parser().parse_args(["--level", "1"])
        criteria = main.criteria_from_args(args, FilterCriteria(topic="Travel"))
        assert criteria.level == 1
        assert criteria.topic == "Travel"

    def test_all_clears_saved(self):
        args = main.create_parser().parse_args(["--topic", "all"])
        criteria = main.criteria_from_args(args, FilterCriteria(topic="Travel"))
        assert criteria.topic is None


class TestBuildConfig:
    """Tests for build_config()."""

    def test_from_args(self):
        args = main.create_parser().parse_args(["--size", "3", "--mode", "typed"])
        config = main.build_config(args)
        assert config.choices.size == 3
        assert config.input_mode == InputMode.TYPED

    def test_config_rejects_bad_size(self):
        args = main.create_parser().parse_args([])
        args.size = 9
        with pytest.raises(ValueError):
            main.build_config(args)


@pytest.fixture
def quiet_console(monkeypatch):
    """Patch Console so nothing touches the terminal."""
    monkeypatch.setattr(Console, "clear", lambda self: None)
    monkeypatch.setattr("signal.signal", lambda *args, **kwargs: None)


def run_with_inputs(monkeypatch, argv: list[str], inputs: list[str]) -> int | None:
    """Run main.run_interactive with scripted input. Returns the exit status."""
    monkeypatch.setattr(Console, "input", InputSequence(inputs))
    args = main.create_parser().parse_args(argv)
    try:
        return main.run_interactive(args)
    except StopIteration:
        return None


class TestDrillLoop:
    """Tests for run_drill_loop() with a scripted UI."""

    def _session(self, items, config=None):
        return DrillSession(items, config=config, rng=random.Random(0))

    def test_correct_answer_saved(self, single_item, monkeypatch, quiet_console):
        store = get_session_store(None)
        # Unshuffled, so the correct answer is always choice 1
        config = main.DrillConfig(choices=main.ChoiceConfig(shuffle=False))
        session = self._session([single_item], config=config)
        ui = main.DrillUI(Console(quiet=True))

        monkeypatch.setattr(Console, "input", InputSequence(["1", "q"]))
        main.run_drill_loop(session, ui, store)

        assert store.load_stats() == SessionStats(score=1, streak=1, attempts=1)

    def test_two_step_typed(self, two_step_item, monkeypatch, quiet_console):
        store = get_session_store(None)
        config = main.DrillConfig(input_mode=InputMode.TYPED)
        session = self._session([two_step_item], config=config)
        ui = main.DrillUI(Console(quiet=True))

        monkeypatch.setattr(Console, "input", InputSequence(["ar", "ar fi", "q"]))
        main.run_drill_loop(session, ui, store)

        stats = store.load_stats()
        assert stats.attempts == 1
        assert stats.streak == 0

    def test_reveal_then_quit(self, single_item, monkeypatch, quiet_console):
        store = get_session_store(None)
        session = self._session([single_item])
        ui = main.DrillUI(Console(quiet=True))

        monkeypatch.setattr(Console, "input", InputSequence(["h", "r", "", "q"]))
        main.run_drill_loop(session, ui, store)

        assert store.load_stats() == SessionStats(score=0, streak=0, attempts=1)

    def test_skip_not_scored(self, sample_items, monkeypatch, quiet_console):
        store = get_session_store(None)
        session = self._session(sample_items)
        ui = main.DrillUI(Console(quiet=True))

        monkeypatch.setattr(Console, "input", InputSequence(["n", "n", "q"]))
        main.run_drill_loop(session, ui, store)

        assert store.load_stats() == SessionStats()
        assert len(session.used_ids) == 3

    def test_empty_pool_quit_from_filter_menu(self, sample_items, monkeypatch, quiet_console):
        store = get_session_store(None)
        session = DrillSession(sample_items, criteria=FilterCriteria(topic="Weather"))
        ui = main.DrillUI(Console(quiet=True))

        inputs = InputSequence(["q"])
        monkeypatch.setattr(Console, "input", inputs)
        main.run_drill_loop(session, ui, store)

        assert inputs.remaining == 0
        assert session.current is None
        assert store.load_criteria().topic == "Weather"

    def test_empty_pool_opens_filter_menu(self, sample_items, monkeypatch, quiet_console):
        """Clearing the filters from the menu gets the drill going again."""
        store = get_session_store(None)
        session = DrillSession(
            sample_items,
            criteria=FilterCriteria(topic="Weather"),
            rng=random.Random(0),
        )
        ui = main.DrillUI(Console(quiet=True))

        # x clears every filter, then quit at the first item
        monkeypatch.setattr(Console, "input", InputSequence(["x", "q"]))
        main.run_drill_loop(session, ui, store)

        assert session.criteria == FilterCriteria()
        assert session.current is not None
        assert store.load_criteria() == FilterCriteria()

    def test_filter_action_mid_session(self, sample_items, monkeypatch, quiet_console):
        store = get_session_store(None)
        session = self._session(sample_items)
        ui = main.DrillUI(Console(quiet=True))

        # Topics are listed as Communication, Feelings, Time, Travel.
        # Keep level, pick Travel, keep group, then quit at the next item.
        monkeypatch.setattr(Console, "input", InputSequence(["f", "", "4", "", "q"]))
        main.run_drill_loop(session, ui, store)

        assert session.criteria == FilterCriteria(topic="Travel")
        assert session.current.topic == "Travel"
        assert store.load_criteria().topic == "Travel"
        assert store.load_stats() == SessionStats()

    def test_filter_action_typed_mode(self, sample_items, monkeypatch, quiet_console):
        store = get_session_store(None)
        config = main.DrillConfig(input_mode=InputMode.TYPED)
        session = self._session(sample_items, config=config)
        ui = main.DrillUI(Console(quiet=True))

        # Level 2 (second listed value), keep topic and group
        monkeypatch.setattr(Console, "input", InputSequence(["/f", "2", "", "", "/q"]))
        main.run_drill_loop(session, ui, store)

        assert session.criteria.level == 2
        assert session.current.level == 2

    def test_reset_stats_action(self, sample_items, monkeypatch, quiet_console):
        store = get_session_store(None)
        session = DrillSession(
            sample_items,
            stats=SessionStats(score=3, streak=3, attempts=4),
            rng=random.Random(0),
        )
        ui = main.DrillUI(Console(quiet=True))

        monkeypatch.setattr(Console, "input", InputSequence(["s", "q"]))
        main.run_drill_loop(session, ui, store)

        assert session.stats == SessionStats()
        assert store.load_stats() == SessionStats()

    def test_new_cycle_action(self, sample_items, monkeypatch, quiet_console):
        store = get_session_store(None)
        session = self._session(sample_items)
        ui = main.DrillUI(Console(quiet=True))

        monkeypatch.setattr(Console, "input", InputSequence(["n", "n", "c", "q"]))
        main.run_drill_loop(session, ui, store)

        # Three items were drawn; the new round forgets all but the current one
        assert session.used_ids == {session.current.id}
        assert store.load_stats() == SessionStats()


class TestRunInteractive:
    """End-to-end runs against CSV files and a temporary database."""

    def test_missing_data_file(self, tmp_path, monkeypatch, quiet_console):
        status = run_with_inputs(
            monkeypatch, ["--data", str(tmp_path / "nope.csv"), "--no-save"], []
        )
        assert status == 1

    def test_session_persists_stats(self, sample_csv, tmp_path, monkeypatch, quiet_console):
        db_path = tmp_path / "drill.db"
        argv = ["--data", str(sample_csv), "--db", str(db_path), "--mode", "typed", "--seed", "1"]

        # Welcome, reveal, continue, quit
        status = run_with_inputs(monkeypatch, argv, ["", "/r", "", "/q"])
        assert status == 0

        stats = get_session_store(db_path).load_stats()
        assert stats.attempts == 1
        assert stats.score == 0

    def test_filters_from_args_saved(self, sample_csv, tmp_path, monkeypatch, quiet_console):
        db_path = tmp_path / "drill.db"
        argv = ["--data", str(sample_csv), "--db", str(db_path), "--topic", "Feelings"]

        status = run_with_inputs(monkeypatch, argv, ["", "q"])
        assert status == 0
        assert get_session_store(db_path).load_criteria().topic == "Feelings"

    def test_list_filters(self, sample_csv, monkeypatch, quiet_console):
        status = run_with_inputs(
            monkeypatch, ["--data", str(sample_csv), "--no-save", "--list-filters"], []
        )
        assert status == 0

    def test_reset_stats(self, sample_csv, tmp_path, monkeypatch, quiet_console):
        db_path = tmp_path / "drill.db"
        get_session_store(db_path).save_stats(SessionStats(score=5, streak=5, attempts=5))

        argv = ["--data", str(sample_csv), "--db", str(db_path), "--reset-stats"]
        run_with_inputs(monkeypatch, argv, ["", "q"])

        assert get_session_store(db_path).load_stats() == SessionStats()

    def test_no_save_quit_message(self, sample_csv, monkeypatch, quiet_console, capsys):
        argv = ["--data", str(sample_csv), "--no-save"]
        status = run_with_inputs(monkeypatch, argv, ["", "q"])

        assert status == 0
        output = capsys.readouterr().out
        assert "Nothing was saved" in output
        assert "has been saved" not in output

    def test_saved_quit_message(self, sample_csv, tmp_path, monkeypatch, quiet_console, capsys):
        argv = ["--data", str(sample_csv), "--db", str(tmp_path / "drill.db")]
        run_with_inputs(monkeypatch, argv, ["", "q"])
        assert "Your progress has been saved." in capsys.readouterr().out

    def test_list_filters_writes_nothing(self, sample_csv, tmp_path, monkeypatch, quiet_console):
        db_path = tmp_path / "drill.db"
        store = get_session_store(db_path)
        store.save_stats(SessionStats(score=2, streak=1, attempts=3))
        store.save_criteria(FilterCriteria(level=2))

        argv = [
            "--data", str(sample_csv), "--db", str(db_path),
            "--list-filters", "--reset-stats", "--topic", "Travel",
        ]
        status = run_with_inputs(monkeypatch, argv, [])

        assert status == 0
        store = get_session_store(db_path)
        assert store.load_stats() == SessionStats(score=2, streak=1, attempts=3)
        assert store.load_criteria() == FilterCriteria(level=2)

    @pytest.mark.parametrize("option, value", [("size", 9), ("level", "abc")])
    def test_invalid_option_exits_cleanly(
        self, sample_csv, monkeypatch, quiet_console, capsys, option, value
    ):
        """Values that get past the parser are reported, not raised."""
        monkeypatch.setattr(Console, "input", InputSequence([]))
        args = main.create_parser().parse_args(["--data", str(sample_csv), "--no-save"])
        setattr(args, option, value)

        assert main.run_interactive(args) == 2
        assert "Invalid option" in capsys.readouterr().out

    def test_bad_size_on_command_line(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main.create_parser().parse_args(["--size", "9"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_empty_pool_filter_menu(self, sample_csv, tmp_path, monkeypatch, quiet_console):
        db_path = tmp_path / "drill.db"
        argv = ["--data", str(sample_csv), "--db", str(db_path), "--topic", "Weather"]

        # Welcome, then the filter menu opens on the empty pool: x clears, quit at the item
        status = run_with_inputs(monkeypatch, argv, ["", "x", "q"])

        assert status == 0
        assert get_session_store(db_path).load_criteria() == FilterCriteria()

class TestLoadPool:
    """Tests for load_pool()."""

    def test_loads_csv(self, sample_csv):
        pool = main.load_pool(sample_csv)
        assert len(pool) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            main.load_pool(Path(tmp_path / "missing.csv"))

    def test_bundled_items_are_valid(self):
        pool = main.load_pool(main.DEFAULT_DATA_PATH)
        assert all(isinstance(item, DrillItem) for item in pool)
