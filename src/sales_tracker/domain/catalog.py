"""
The drink catalog: the deduplicated menu.

Entries are keyed by (name, size). Lookups ignore case and surrounding
whitespace, so "caffe latte" / " GRANDE " finds "Caffe Latte" / "Grande".
The first entry loaded for a key wins; later duplicates are dropped.

The catalog is shared by reference: promotions that need menu prices hold
the same instance, so entries added later are visible to them.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from sales_tracker.domain.errors import DrinkNotFoundError, InputError, InvalidMenuRowError
from sales_tracker.domain.models import Category, DrinkCatalogEntry, DrinkKey

logger = logging.getLogger(__name__)


class MenuRow(BaseModel):
    """One externally-parsed menu row: {name, category, size, price}."""

    name: str
    category: str
    size: str
    price: float

    def to_entry(self) -> DrinkCatalogEntry:
        category = Category.parse(self.category)
        try:
            return DrinkCatalogEntry(name=self.name, size=self.size, category=category, unit_price=self.price)
        except ValidationError as exc:
            raise InvalidMenuRowError(f"Invalid menu row {self.model_dump()}: {exc.error_count()} error(s)") from exc


def _lookup_key(name: str, size: str) -> tuple[str, str]:
    return (name.strip().casefold(), size.strip().casefold())


class Catalog:
    """Ordered, deduplicated collection of DrinkCatalogEntry."""

    def __init__(self, entries: Iterable[DrinkCatalogEntry] = ()) -> None:
        self._entries: dict[tuple[str, str], DrinkCatalogEntry] = {}
        for entry in entries:
            self.add(entry)

    @classmethod
    def load(cls, rows: Iterable[Mapping[str, Any]]) -> "Catalog":
        """Build a catalog from rows with keys name, category, size, price.

        Rows that cannot become an entry (unknown category, blank name or
        size, bad price) are logged and skipped, as are duplicates.
        """
        catalog = cls()
        skipped = 0
        for row in rows:
            try:
                entry = MenuRow.model_validate(dict(row)).to_entry()
            except ValidationError as exc:
                logger.warning("Skipping malformed menu row %r (%d error(s))", dict(row), exc.error_count())
                skipped += 1
                continue
            except InputError as exc:
                logger.warning("Skipping menu row: %s", exc)
                skipped += 1
                continue
            if not catalog.add(entry):
                skipped += 1
        logger.info("Catalog loaded: %d entries, %d rows skipped", len(catalog), skipped)
        return catalog

    def add(self, entry: DrinkCatalogEntry) -> bool:
        """Add `entry` unless its (name, size) is already present."""
        key = _lookup_key(entry.name, entry.size)
        if key in self._entries:
            logger.warning("Skipping duplicate menu entry %s (%s)", entry.name, entry.size)
            return False
        self._entries[key] = entry
        return True

    def find(self, name: str, size: str) -> DrinkCatalogEntry | None:
        return self._entries.get(_lookup_key(name, size))

    def get(self, name: str, size: str) -> DrinkCatalogEntry:
        entry = self.find(name, size)
        if entry is None:
            raise DrinkNotFoundError(name, size)
        return entry

    def by_name(self, name: str) -> list[DrinkCatalogEntry]:
        """Every size of the drink called `name`, in catalog order."""
        wanted = name.strip().casefold()
        return [entry for entry in self if entry.name.casefold() == wanted]

    def by_category(self, category: Category) -> list[DrinkCatalogEntry]:
        return [entry for entry in self if entry.category is category]

    def cheapest_price(self, name: str) -> float | None:
        prices = [entry.unit_price for entry in self.by_name(name)]
        return min(prices) if prices else None

    def names(self) -> list[str]:
        """Distinct drink names, in order of first appearance."""
        seen: dict[str, str] = {}
        for entry in self:
            seen.setdefault(entry.name.casefold(), entry.name)
        return list(seen.values())

    def categories(self) -> list[Category]:
        return sorted({entry.category for entry in self}, key=lambda c: c.value)

    def keys(self) -> list[DrinkKey]:
        return [entry.key for entry in self]

    def __iter__(self) -> Iterator[DrinkCatalogEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
