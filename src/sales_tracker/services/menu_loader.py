"""
CSV menu loader.

Reads a menu file with the columns "Drink Name, Drink Type, Size, Price"
(header required, any column order). Header names are matched after
lower-casing and removing spaces, so "drink name" and "DrinkName" both work.

Blank lines, short rows and rows whose price is not a number are logged and
skipped. The remaining rows go through `Catalog.load`, which rejects unknown
drink types and duplicate (name, size) pairs.
"""

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from sales_tracker.domain.catalog import Catalog
from sales_tracker.domain.errors import MenuFormatError

logger = logging.getLogger(__name__)

# normalized header -> Catalog.load row key
COLUMNS: dict[str, str] = {
    "drinkname": "name",
    "drinktype": "category",
    "size": "size",
    "price": "price",
}


def normalize_header(raw: str) -> str:
    return raw.strip().lower().replace(" ", "")


class MenuLoader:
    """Turns CSV text into a Catalog."""

    def load(self, path: str | Path) -> Catalog:
        path = Path(path)
        try:
            with path.open(newline="", encoding="utf-8") as handle:
                catalog = self.parse(handle)
        except OSError as exc:
            raise MenuFormatError(f"Cannot read menu file {path}: {exc}") from exc
        logger.info("Loaded %d menu items from %s", len(catalog), path)
        return catalog

    def parse(self, lines: Iterable[str]) -> Catalog:
        reader = csv.reader(lines)
        header = next(reader, None)
        if header is None:
            raise MenuFormatError("Menu is empty (no header row)")

        index = {normalize_header(col): i for i, col in enumerate(header)}
        missing = [col for col in COLUMNS if col not in index]
        if missing:
            raise MenuFormatError(
                "Menu is missing required columns: expected Drink Name, Drink Type, Size, Price "
                f"(missing {', '.join(missing)})"
            )
        return Catalog.load(self._rows(reader, index))

    def _rows(self, reader: Iterable[list[str]], index: dict[str, int]) -> Iterable[dict[str, object]]:
        widest = max(index[col] for col in COLUMNS)
        for fields in reader:
            if not any(field.strip() for field in fields):
                continue
            if len(fields) <= widest:
                logger.warning("Skipping short menu row: %s", ",".join(fields))
                continue
            row: dict[str, object] = {key: fields[index[col]].strip() for col, key in COLUMNS.items()}
            try:
                row["price"] = float(str(row["price"]))
            except ValueError:
                logger.warning("Skipping row with bad price: %s", ",".join(fields))
                continue
            yield row
