"""Exceptions raised by the drill engine.

None of these are fatal: the UI is expected to fall back to an empty or
disabled state and let the user change filters or reload data.
"""


class DrillError(Exception):
    """Base class for drill engine errors."""


class EmptyPoolError(DrillError):
    """Raised when no item matches the current filters."""

    def __init__(self, message: str = "No items match the current filters."):
        super().__init__(message)


class InvalidItemError(DrillError):
    """A record that could not be turned into a DrillItem.

    Collected by ItemPool.load() rather than raised, so a single bad record
    never aborts loading.
    """

    def __init__(self, index: int, item_id: str, reasons: list[str]):
        self.index = index
        self.item_id = item_id
        self.reasons = reasons
        label = f"record {index}" + (f" ({item_id})" if item_id else "")
        super().__init__(f"{label}: {'; '.join(reasons)}")


class DuplicateIdWarning(UserWarning):
    """A record reused an id already in the pool. The first record wins."""
