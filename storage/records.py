"""Record source: read spreadsheet rows and map their columns to item records.

Spreadsheets in the wild use many header spellings ("answer_cy", "Answer",
"target"...). coerce_record() picks the first matching header for each
field and returns a record ItemPool.load() understands. Parsing is left to
csv.DictReader.
"""

import csv
from pathlib import Path
from typing import Any, Mapping

LANGUAGES = ("en", "cy")

# field -> accepted headers, most specific first
COLUMN_ALIASES: dict[str, list[str]] = {
    "id": ["id", "cardid", "card_id", "item_id"],
    "level": ["level", "lvl"],
    "mode": ["mode", "type", "kind"],
    "context_before": ["before_cy", "before", "welsh_before"],
    "context_after": ["after_cy", "after", "welsh_after"],
    "primary_answer": ["answer_cy", "answer", "target", "expected"],
    "primary_alt_answers": ["answer_alt", "alts", "alt", "accepted"],
    "secondary_answer": ["answer2", "secondary_answer", "form", "answer_form"],
    "secondary_key": ["person", "secondary_key", "key"],
    "contrast_group": ["prep", "preposition", "arddodiad", "contrast_group"],
    "choice_override": ["distractors", "choices", "options"],
}

# field -> headers per language; the other language is the fallback
LOCALIZED_ALIASES: dict[str, dict[str, list[str]]] = {
    "topic": {
        "en": ["topic_en", "topic", "topic (en)"],
        "cy": ["topic_cy", "topic (cy)", "pwnc"],
    },
    "prompt_text": {
        "en": ["prompt_en", "english", "en", "meaning_en", "translate_en"],
        "cy": ["prompt_cy", "welsh_prompt", "cy"],
    },
    "hint": {
        "en": ["hint_en", "hint (en)", "hint"],
        "cy": ["hint_cy", "hint (cy)"],
    },
    "explanation": {
        "en": ["why_en", "why (en)", "why"],
        "cy": ["why_cy", "why (cy)"],
    },
}


def get_value(row: Mapping[str, Any], names: list[str]) -> str:
    """Return the first non-empty value whose header matches one of `names`.

    Headers are compared trimmed and case-insensitively.
    """
    lookup: dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            continue
        lookup.setdefault(str(key).strip().lower(), value)

    for name in names:
        value = lookup.get(name.lower())
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def coerce_record(
    row: Mapping[str, Any],
    lang: str = "en",
    index: int = 0,
) -> dict[str, Any]:
    """Map one spreadsheet row to the DrillItem record shape.

    Args:
        row: Raw row, keyed by header.
        lang: "en" or "cy"; selects which localized columns win.
        index: Row position, used to build an id when the row has none.

    Returns:
        A record dict for ItemPool.load(). Invalid values are passed through
        untouched so the pool can reject them with a reason.
    """
    if lang not in LANGUAGES:
        raise ValueError(f"Unsupported language: {lang!r}")
    other = "cy" if lang == "en" else "en"

    record: dict[str, Any] = {
        field: get_value(row, aliases) for field, aliases in COLUMN_ALIASES.items()
    }
    for field, by_lang in LOCALIZED_ALIASES.items():
        record[field] = get_value(row, by_lang[lang]) or get_value(row, by_lang[other])

    if not record["id"]:
        record["id"] = f"row_{index}"
    if not record["contrast_group"] and record["primary_answer"]:
        record["contrast_group"] = record["primary_answer"].split(" ")[0]
    if not record["mode"]:
        record["mode"] = "two_step" if record["secondary_answer"] else "single"
    if not record["level"]:
        record["level"] = None

    return record


def read_csv_records(path: Path) -> list[dict[str, Any]]:
    """Read a CSV file with a header row into a list of dicts.

    Rows where every cell is blank are skipped.
    """
    with open(path, encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return [
            row
            for row in reader
            if any(value and str(value).strip() for value in row.values())
        ]


def load_records(path: Path, lang: str = "en") -> list[dict[str, Any]]:
    """Read a CSV file and map every row to an item record."""
    return [
        coerce_record(row, lang=lang, index=index)
        for index, row in enumerate(read_csv_records(path))
    ]
