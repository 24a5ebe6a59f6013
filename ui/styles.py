from rich.style import Style
from rich.text import Text
from rich.theme import Theme

from models import Resolution

WELSH_RED = "#C8102E"
WELSH_GREEN = "#00AB39"
GAP_INDIGO = "#5C6BC0"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=WELSH_RED, bold=True),
        "secondary": Style(color=WELSH_GREEN, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "gap": Style(color=GAP_INDIGO, bold=True),
        "option_label": Style(color=WELSH_GREEN, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=WELSH_RED, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)


# Short UI labels, English and Welsh
LABELS = {
    "en": {
        "title": "Preposition Drill",
        "correct": "✅ Correct!",
        "incorrect": "❌ Not quite",
        "revealed": "👀 Revealed",
        "you_answered": "You answered",
        "blank": "(blank)",
        "level": "Level",
        "focus": "Focus",
        "hint": "Hint",
        "no_hint": "No hint.",
        "answer": "Answer",
        "now_form": "Now choose the right form",
        "score": "Score",
        "streak": "Streak",
        "done": "Done",
        "no_items": "No items match your filters.",
        "all": "All",
        "filters": "Filters",
        "keep": "Enter keeps the current value · 0 for all · x clears every filter · q quits",
        "stats_reset": "Stats reset.",
        "new_cycle": "Starting a new round.",
        "saved": "Your progress has been saved.",
        "not_saved": "Nothing was saved (--no-save).",
    },
    "cy": {
        "title": "Ymarfer Arddodiaid",
        "correct": "✅ Cywir!",
        "incorrect": "❌ Dim yn hollol",
        "revealed": "👀 Datgelwyd",
        "you_answered": "Eich ateb",
        "blank": "(gwag)",
        "level": "Lefel",
        "focus": "Ffocws",
        "hint": "Awgrym",
        "no_hint": "Dim awgrym.",
        "answer": "Ateb",
        "now_form": "Nawr dewiswch y ffurf gywir",
        "score": "Sgôr",
        "streak": "Rhediad",
        "done": "Wedi gwneud",
        "no_items": "Does dim eitemau'n cyfateb i'ch hidlwyr.",
        "all": "Pob un",
        "filters": "Hidlwyr",
        "keep": "Enter i gadw'r gwerth · 0 am bob un · x i glirio pob hidlydd · q i adael",
        "stats_reset": "Ystadegau wedi'u hailosod.",
        "new_cycle": "Dechrau rownd newydd.",
        "saved": "Mae eich cynnydd wedi'i gadw.",
        "not_saved": "Ni chadwyd dim (--no-save).",
    },
}


def label(key: str, lang: str = "en") -> str:
    """Look up a UI label, falling back to English."""
    return LABELS.get(lang, LABELS["en"]).get(key, LABELS["en"][key])


def get_resolution_style(resolution: Resolution) -> Style:
    """Get color style for an attempt outcome."""
    if resolution == Resolution.CORRECT:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif resolution == Resolution.REVEALED:
        return Style(color=INFO_BLUE, bold=True)
    else:
        return Style(color=ERROR_RED, bold=True)


def create_welcome_banner(lang: str = "en") -> Text:
    """Create the welcome banner text."""
    banner = Text()
    banner.append("╔══════════════════════════════════════╗\n", Style(color=WELSH_RED))
    banner.append(
        f"║{label('title', lang).center(38)}║\n", Style(color=WELSH_GREEN, bold=True)
    )
    banner.append("╚══════════════════════════════════════╝", Style(color=WELSH_RED))
    return banner
