"""Text normalization used for answer matching and choice deduplication.

Every comparison between a learner's guess and an accepted answer goes
through normalize(), so "At", " at " and "ât" all compare equal to "at".
"""

import re
import unicodedata
from typing import Any, Iterable

# Typographic apostrophes folded to ASCII "'"
APOSTROPHE_VARIANTS = "’‘ʼ′´`"

_APOSTROPHE_TABLE = str.maketrans({ch: "'" for ch in APOSTROPHE_VARIANTS})
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.;:!?])")


def normalize(text: Any) -> str:
    """Fold text to a canonical comparable form.

    Applies canonical decomposition and drops combining marks (so "â" and
    "a" compare equal), unifies apostrophe variants, case-folds, trims and
    collapses internal whitespace. Never raises: None becomes "" and other
    non-string values are converted with str().
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)

    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    folded = stripped.translate(_APOSTROPHE_TABLE).casefold()
    # casefold() can itself produce combining marks (e.g. "İ")
    folded = "".join(
        ch
        for ch in unicodedata.normalize("NFD", folded)
        if not unicodedata.combining(ch)
    )
    return _WHITESPACE_RE.sub(" ", folded).strip()


def answers_match(guess: Any, accepted: Iterable[str]) -> bool:
    """Return True if the guess matches any accepted answer after normalization.

    An empty guess never matches.
    """
    normalized_guess = normalize(guess)
    if not normalized_guess:
        return False
    return any(normalize(answer) == normalized_guess for answer in accepted)


def parse_piped_list(text: Any) -> list[str]:
    """Split a pipe-separated field ("ata i|ataf i") into trimmed entries."""
    if text is None:
        return []
    return [part.strip() for part in str(text).split("|") if part.strip()]


def build_sentence(before: str, insert: str, after: str) -> str:
    """Join the sentence fragments around the gap into one tidy sentence.

    Fragments are joined with single spaces and no space is left before
    closing punctuation: ("Anfon lythyr ", "at", " Sioned.") gives
    "Anfon lythyr at Sioned."
    """
    parts = [
        (before or "").rstrip(),
        (insert or "").strip(),
        (after or "").lstrip(),
    ]
    sentence = " ".join(part for part in parts if part)
    sentence = _WHITESPACE_RE.sub(" ", sentence).strip()
    return _SPACE_BEFORE_PUNCT_RE.sub(r"\1", sentence)
