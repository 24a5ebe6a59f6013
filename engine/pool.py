"""Item pool: validated, immutable set of drill items.

Records arrive as loosely-typed mappings (already mapped from whatever file
or table they came from). Keys are matched loosely, so "primaryAnswer",
"primary_answer" and "Primary Answer" all land on the same field.
"""

import warnings
from typing import Any, Iterable, Iterator, Mapping

from loguru import logger
from pydantic import ValidationError

from engine.errors import DuplicateIdWarning, InvalidItemError
from models import DrillItem


def _key(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch not in "_- ")


_FIELD_KEYS = {_key(name): name for name in DrillItem.model_fields}


def shape_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Map a record's keys onto DrillItem field names, dropping unknown keys.

    When two keys map to the same field, the first non-empty value wins.
    """
    shaped: dict[str, Any] = {}
    for raw_key, value in record.items():
        if raw_key is None:
            continue
        field = _FIELD_KEYS.get(_key(str(raw_key)))
        if field is None:
            continue
        if field in shaped and shaped[field] not in (None, ""):
            continue
        shaped[field] = value
    return shaped


def _validation_reasons(exc: ValidationError) -> list[str]:
    reasons = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        reasons.append(f"{location}: {message}" if location else message)
    return reasons


class ItemPool:
    """The full, ordered set of accepted drill items.

    Use ItemPool.load() to build one from records. Rejected records are kept
    in `rejects` (InvalidItemError instances) and repeated ids in
    `duplicates`; neither stops the rest of the load.
    """

    def __init__(
        self,
        items: Iterable[DrillItem] = (),
        rejects: list[InvalidItemError] | None = None,
        duplicates: list[str] | None = None,
    ):
        self._items: tuple[DrillItem, ...] = tuple(items)
        self._by_id = {item.id: item for item in self._items}
        if len(self._by_id) != len(self._items):
            raise ValueError("ItemPool items must have unique ids")
        self.rejects: list[InvalidItemError] = rejects or []
        self.duplicates: list[str] = duplicates or []

    @classmethod
    def load(cls, records: Iterable[Mapping[str, Any]]) -> "ItemPool":
        """Validate records and build a pool from the ones that pass.

        Duplicate ids: the first record wins, later ones are dropped with a
        DuplicateIdWarning.
        """
        items: list[DrillItem] = []
        seen: set[str] = set()
        rejects: list[InvalidItemError] = []
        duplicates: list[str] = []

        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                error = InvalidItemError(
                    index, "", [f"expected a mapping, got {type(record).__name__}"]
                )
                logger.warning(f"Rejected {error}")
                rejects.append(error)
                continue

            shaped = shape_record(record)
            item_id = str(shaped.get("id") or "").strip()
            try:
                item = DrillItem.model_validate(shaped)
            except ValidationError as e:
                error = InvalidItemError(index, item_id, _validation_reasons(e))
                logger.warning(f"Rejected {error}")
                rejects.append(error)
                continue

            if item.id in seen:
                duplicates.append(item.id)
                message = f"Duplicate item id {item.id!r} at record {index}; keeping the first"
                logger.warning(message)
                warnings.warn(message, DuplicateIdWarning, stacklevel=2)
                continue

            seen.add(item.id)
            items.append(item)

        logger.info(
            f"Loaded {len(items)} drill items "
            f"({len(rejects)} rejected, {len(duplicates)} duplicate ids)"
        )
        return cls(items, rejects=rejects, duplicates=duplicates)

    @property
    def items(self) -> tuple[DrillItem, ...]:
        return self._items

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self._items]

    def get(self, item_id: str) -> DrillItem | None:
        return self._by_id.get(item_id)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[DrillItem]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
