"""
Sales statistics: running totals folded from completed orders.

One `SalesAggregator` lives for the whole process (see ServiceFactory). It is
only ever changed by `fold()`, one order at a time; everything else is a
read-only query.

Two figures are measured differently:
  - category revenue uses each line's pre-discount base price,
  - total revenue uses the order's final (discounted, taxed) total.
So category revenue does not add up to total revenue. This is a known
reporting simplification.

`fold()` is not thread-safe. Callers that share an aggregator across threads
must serialize calls to it.
"""

import logging

from sales_tracker.domain.catalog import Catalog
from sales_tracker.domain.models import AddOn, Category, DrinkKey, Order, SalesSummary

logger = logging.getLogger(__name__)


class SalesAggregator:
    """Accumulates popularity, category, add-on and revenue statistics.

    Counters are insertion-ordered dicts, so "first encountered" breaks ties
    in `most_popular()` and `top_addons()`.
    """

    TOP_ADDONS: int = 3

    def __init__(self) -> None:
        self.drink_counts: dict[DrinkKey, int] = {}
        self.addon_counts: dict[AddOn, int] = {}
        self.addon_revenue: dict[AddOn, float] = {}
        self.category_item_count: dict[Category, int] = {}
        self.category_revenue: dict[Category, float] = {}
        self.categories_sold: set[Category] = set()
        self.total_discount_given: float = 0.0
        self.orders_with_promotions: int = 0
        self.total_drinks_sold: int = 0
        self.total_revenue: float = 0.0
        self.order_count: int = 0

    def fold(self, order: Order) -> None:
        """Record one completed order."""
        self.order_count += 1
        self.total_revenue += order.final_total
        self.total_discount_given += order.discount_amount
        if order.discount_amount > 0:
            self.orders_with_promotions += 1

        for line in order.lines:
            drink = line.drink
            self.drink_counts[drink.key] = self.drink_counts.get(drink.key, 0) + line.quantity

            self.categories_sold.add(drink.category)
            self.category_item_count[drink.category] = self.category_item_count.get(drink.category, 0) + line.quantity
            self.category_revenue[drink.category] = self.category_revenue.get(drink.category, 0.0) + line.base_price()

            for addon in AddOn:
                count = line.addon_count(addon)
                if count > 0:
                    self.addon_counts[addon] = self.addon_counts.get(addon, 0) + count
                    self.addon_revenue[addon] = self.addon_revenue.get(addon, 0.0) + count * addon.price

            self.total_drinks_sold += line.quantity

        logger.debug(
            "Folded order #%d: %d drink(s), revenue now %.2f",
            self.order_count,
            order.total_quantity,
            self.total_revenue,
        )

    # ── Queries ──────────────────────────────────────────────────────

    def most_popular(self) -> tuple[DrinkKey, int] | None:
        """(name, size) with the highest count; None before any sale."""
        best: tuple[DrinkKey, int] | None = None
        for key, count in self.drink_counts.items():
            if best is None or count > best[1]:
                best = (key, count)
        return best

    def top_addons(self, limit: int = TOP_ADDONS) -> list[AddOn]:
        # sorted() is stable: equal counts keep first-encountered order
        ranked = sorted(self.addon_counts.items(), key=lambda item: item[1], reverse=True)
        return [addon for addon, _ in ranked[:limit]]

    def unsold(self, catalog: Catalog) -> list[DrinkKey]:
        return [key for key in catalog.keys() if key not in self.drink_counts]

    def total_addon_revenue(self) -> float:
        return sum(self.addon_revenue.values())

    def average_order_value(self) -> float:
        if not self.order_count:
            return 0.0
        return self.total_revenue / self.order_count

    def summary(self, catalog: Catalog) -> SalesSummary:
        popular = self.most_popular()
        return SalesSummary(
            orders=self.order_count,
            total_drinks_sold=self.total_drinks_sold,
            total_revenue=self.total_revenue,
            total_discount_given=self.total_discount_given,
            orders_with_promotions=self.orders_with_promotions,
            average_order_value=self.average_order_value(),
            most_popular=popular[0] if popular else None,
            most_popular_count=popular[1] if popular else 0,
            top_addons=self.top_addons(),
            total_addon_revenue=self.total_addon_revenue(),
            category_item_count=dict(self.category_item_count),
            category_revenue=dict(self.category_revenue),
            categories_sold=sorted(self.categories_sold, key=lambda c: c.value),
            unsold=self.unsold(catalog),
        )
