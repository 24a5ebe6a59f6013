"""Shared pytest fixtures for the preposition drill test suite."""

import random
import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from engine import ItemPool
from models import DrillItem, DrillMode
from storage import init_schema


@pytest.fixture
def single_item() -> DrillItem:
    """A single-step item: "Anfon lythyr at Sioned."."""
    return DrillItem(
        id="Q1",
        level=1,
        topic="Communication",
        contrast_group="at",
        mode=DrillMode.SINGLE,
        prompt_text="Send a letter to Sioned.",
        context_before="Anfon lythyr ",
        context_after=" Sioned.",
        primary_answer="at",
        hint="Sending something to a person.",
        explanation='"At" is used for sending or writing to a person.',
    )


@pytest.fixture
def two_step_item() -> DrillItem:
    """A two-step item: choose "ar", then the inflected form "arna i"."""
    return DrillItem(
        id="Q2",
        level=2,
        topic="Feelings",
        contrast_group="ar",
        mode=DrillMode.TWO_STEP,
        prompt_text="I've got a cold.",
        context_before="Mae annwyd",
        context_after=".",
        primary_answer="ar",
        secondary_answer="arna i",
        secondary_key="1s",
    )


@pytest.fixture
def sample_items(single_item, two_step_item) -> list[DrillItem]:
    """A small mixed pool covering several levels, topics and groups."""
    return [
        single_item,
        two_step_item,
        DrillItem(
            id="Q3",
            level=1,
            topic="Travel",
            contrast_group="i",
            context_before="Dw i'n mynd",
            context_after="Gaerdydd.",
            primary_answer="i",
        ),
        DrillItem(
            id="Q4",
            level=1,
            topic="Travel",
            contrast_group="o",
            context_before="Mae hi'n dod",
            context_after="Fangor.",
            primary_answer="o",
        ),
        DrillItem(
            id="Q5",
            level=2,
            topic="Time",
            contrast_group="am",
            context_before="Byddwn ni'n aros",
            context_after="awr.",
            primary_answer="am",
        ),
        DrillItem(
            id="Q6",
            level=2,
            topic="Communication",
            contrast_group="â",
            context_before="Siarada",
            context_after="fe.",
            primary_answer="â",
            primary_alt_answers=("ag",),
            choice_override=("gyda", "wrth"),
        ),
        DrillItem(
            id="Q7",
            level=2,
            topic="Feelings",
            contrast_group="ar",
            mode=DrillMode.TWO_STEP,
            context_before="Mae ofn",
            context_after=".",
            primary_answer="ar",
            secondary_answer="arnyn nhw",
            secondary_key="3p",
        ),
    ]


@pytest.fixture
def sample_pool(sample_items) -> ItemPool:
    """An ItemPool built from sample_items."""
    return ItemPool(sample_items)


@pytest.fixture
def rng() -> random.Random:
    """A seeded random source for reproducible draws and shuffles."""
    return random.Random(42)


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_drill.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def sample_csv(tmp_path) -> Path:
    """A small CSV file using the spreadsheet header spellings."""
    path = tmp_path / "prep.csv"
    path.write_text(
        "id,level,topic_en,topic_cy,prompt_en,before_cy,after_cy,answer_cy,"
        "answer_alt,prep,distractors,hint_en,hint_cy,why_en,answer2,person\n"
        "Q1,1,Communication,Cyfathrebu,Send a letter to Sioned.,Anfon lythyr,"
        "Sioned.,at,,at,i|o|am,To a person.,At berson.,Sending to someone.,,\n"
        "Q2,2,Feelings,Teimladau,I've got a cold.,Mae annwyd,.,ar,,ar,,"
        "Illness.,Salwch.,Illness is on you.,arna i,1s\n"
        ",,,,,,,,,,,,,,,\n"
        ",1,Travel,Teithio,I'm going to Cardiff.,Dw i'n mynd,Gaerdydd.,i,,,,"
        ",,,,\n",
        encoding="utf-8",
    )
    return path
