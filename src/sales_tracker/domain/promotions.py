"""
Promotion strategies (Strategy pattern) and best-promotion selection.

Every promotion satisfies the `Promotion` protocol: a pure applicability
predicate, a discount calculation and a display name. Discounts only ever
apply to drink base prices, never to add-ons. At most one promotion is
applied per checkout: `PromotionSelector` picks the one with the largest
discount.

The set of promotions is closed (see `PromotionKind`). To add a new rule,
add a kind, implement the protocol and register it with the selector.
"""

import logging
from collections.abc import Sequence
from datetime import time
from enum import Enum
from typing import Protocol

from sales_tracker.domain.catalog import Catalog
from sales_tracker.domain.clock import Clock, SystemClock
from sales_tracker.domain.models import CartLine, Category

logger = logging.getLogger(__name__)


class PromotionKind(str, Enum):
    BULK_QUANTITY = "bulk_quantity"
    TIME_WINDOW_CATEGORY = "time_window_category"
    BUY_N_GET_CHEAPEST_FREE = "buy_n_get_cheapest_free"


class Promotion(Protocol):
    """Interface for a discount rule evaluated against a cart.

    `calculate_discount` returns 0.0 whenever `is_applicable` is False, and
    a positive amount whenever it is True.
    """

    kind: PromotionKind

    def is_applicable(self, lines: Sequence[CartLine]) -> bool: ...

    def calculate_discount(self, lines: Sequence[CartLine], base_total: float, addons_total: float) -> float: ...

    def display_name(self) -> str: ...


class BulkQuantityPromotion:
    """10% off drink prices when the cart holds 4 or more drinks.

    Example: 4x Latte (Tall) at $3.50 -> base $14.00 -> discount $1.40
    """

    kind = PromotionKind.BULK_QUANTITY

    MIN_ITEMS: int = 4
    DISCOUNT_RATE: float = 0.10

    def is_applicable(self, lines: Sequence[CartLine]) -> bool:
        return sum(line.quantity for line in lines) >= self.MIN_ITEMS

    def calculate_discount(self, lines: Sequence[CartLine], base_total: float, addons_total: float) -> float:
        if not self.is_applicable(lines):
            return 0.0
        return base_total * self.DISCOUNT_RATE

    def display_name(self) -> str:
        return "Bulk Order 10% (drinks only)"


class HappyHourPromotion:
    """20% off Tea drinks between 2:00 PM and 4:00 PM.

    The clock is read on every call, so the same cart can become eligible
    (or stop being eligible) while the program runs.
    """

    kind = PromotionKind.TIME_WINDOW_CATEGORY

    def __init__(
        self,
        clock: Clock | None = None,
        start: time = time(14, 0),
        end: time = time(16, 0),
        category: Category = Category.TEA,
        rate: float = 0.20,
    ) -> None:
        self.clock: Clock = clock or SystemClock()
        self.start = start
        self.end = end
        self.category = category
        self.rate = rate

    def in_window(self) -> bool:
        # half-open: [start, end)
        now = self.clock.now().time()
        return self.start <= now < self.end

    def _category_lines(self, lines: Sequence[CartLine]) -> list[CartLine]:
        return [line for line in lines if line.drink.category is self.category]

    def is_applicable(self, lines: Sequence[CartLine]) -> bool:
        if not self._category_lines(lines):
            return False
        return self.in_window()

    def calculate_discount(self, lines: Sequence[CartLine], base_total: float, addons_total: float) -> float:
        if not self.is_applicable(lines):
            return 0.0
        return self.rate * sum(line.base_price() for line in self._category_lines(lines))

    def display_name(self) -> str:
        return "Happy Hour: Tea 20% (drinks only, 2-4 PM)"


class BuyNGetCheapestFreePromotion:
    """Buy 3 of the same drink (any sizes) and get the cheapest size free.

    The free drink is worth the lowest menu price among all sizes of the
    qualifying name, whichever sizes were actually bought. It is returned as
    a flat discount; the cart is not changed.

    When several names qualify, the one listed first in the catalog wins.
    Names missing from the catalog never qualify, since there is no price
    to give away.
    """

    kind = PromotionKind.BUY_N_GET_CHEAPEST_FREE

    REQUIRED_QUANTITY: int = 3

    def __init__(self, catalog: Catalog) -> None:
        # Shared reference: later catalog additions are seen here too.
        self.catalog = catalog

    def _quantities_by_name(self, lines: Sequence[CartLine]) -> dict[str, int]:
        counts: dict[str, int] = {}
        for line in lines:
            name = line.drink.name.casefold()
            counts[name] = counts.get(name, 0) + line.quantity
        return counts

    def qualifying_name(self, lines: Sequence[CartLine]) -> str | None:
        counts = self._quantities_by_name(lines)
        for name in self.catalog.names():
            if counts.get(name.casefold(), 0) >= self.REQUIRED_QUANTITY:
                return name
        return None

    def is_applicable(self, lines: Sequence[CartLine]) -> bool:
        return self.qualifying_name(lines) is not None

    def calculate_discount(self, lines: Sequence[CartLine], base_total: float, addons_total: float) -> float:
        name = self.qualifying_name(lines)
        if name is None:
            return 0.0
        return self.catalog.cheapest_price(name) or 0.0

    def display_name(self) -> str:
        return f"Buy {self.REQUIRED_QUANTITY} Get 1 Free (cheapest size)"


class PromotionSelector:
    """Holds the active promotions and picks the best one for a cart."""

    def __init__(self, promotions: Sequence[Promotion] = ()) -> None:
        self._promotions: tuple[Promotion, ...] = tuple(promotions)

    @classmethod
    def default(cls, catalog: Catalog, clock: Clock | None = None) -> "PromotionSelector":
        """Bulk, happy hour, then buy-3-get-1, in that registration order."""
        return cls(
            [
                BulkQuantityPromotion(),
                HappyHourPromotion(clock=clock),
                BuyNGetCheapestFreePromotion(catalog),
            ]
        )

    @property
    def promotions(self) -> tuple[Promotion, ...]:
        return self._promotions

    def select(
        self, lines: Sequence[CartLine], base_total: float, addons_total: float
    ) -> tuple[Promotion | None, float]:
        """Best promotion together with the discount it was chosen for.

        The discount is the one computed during selection, so a
        time-dependent rule is evaluated once per checkout.
        """
        best: Promotion | None = None
        best_discount = 0.0
        for promotion in self._promotions:
            if not promotion.is_applicable(lines):
                continue
            discount = promotion.calculate_discount(lines, base_total, addons_total)
            logger.debug("Promotion %s applicable, discount %.4f", promotion.kind.value, discount)
            if discount > best_discount:
                best, best_discount = promotion, discount
        return best, best_discount

    def select_best(
        self, lines: Sequence[CartLine], base_total: float, addons_total: float
    ) -> Promotion | None:
        """Return the promotion with the strictly largest positive discount.

        Ties go to the promotion registered first. Returns None when nothing
        applies.
        """
        return self.select(lines, base_total, addons_total)[0]
