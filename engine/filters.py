"""Filter engine: derive the active pool from user criteria.

Pure functions; callers re-run apply_filters() whenever criteria change.
"""

from typing import Any, Iterable, Literal

from models import DrillItem, FilterCriteria

FilterField = Literal["level", "topic", "contrast_group"]

FILTER_FIELDS: tuple[str, ...] = ("level", "topic", "contrast_group")


def apply_filters(
    items: Iterable[DrillItem],
    criteria: FilterCriteria,
) -> list[DrillItem]:
    """Return the items matching every constrained field exactly, in pool order."""
    constraints = criteria.constraints()
    return [
        item
        for item in items
        if all(getattr(item, name) == value for name, value in constraints.items())
    ]


def available_values(items: Iterable[DrillItem], field: FilterField) -> list[Any]:
    """Distinct non-empty values of a filter field, sorted for display.

    Levels sort numerically; text values sort case-insensitively.
    """
    if field not in FILTER_FIELDS:
        raise ValueError(f"Unknown filter field: {field!r}")

    values = {getattr(item, field) for item in items}
    values.discard(None)
    values.discard("")

    if field == "level":
        return sorted(values)
    return sorted(values, key=lambda v: (v.casefold(), v))
