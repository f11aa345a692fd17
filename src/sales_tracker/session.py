"""
Ordering session: one register's cart, order history and statistics.

The session is the orchestrator around the pure core:

    add_item() ... add_item()      cart is accumulating
    checkout()                     1. CheckoutCalculator prices the cart
                                   2. order appended to history
                                   3. order folded into SalesAggregator
                                   4. cart cleared
                                   5. optional receipt saved

If checkout fails (empty cart) nothing after step 1 happens, so the
statistics never see a failed order.
"""

import logging

from sales_tracker.domain.catalog import Catalog
from sales_tracker.domain.checkout import Cart, CheckoutCalculator
from sales_tracker.domain.clock import Clock, SystemClock
from sales_tracker.domain.models import CartLine, Order
from sales_tracker.domain.promotions import PromotionSelector
from sales_tracker.services.factory import ServiceFactory
from sales_tracker.services.receipts import ReceiptWriter
from sales_tracker.services.statistics import SalesAggregator

logger = logging.getLogger(__name__)


class OrderSession:
    def __init__(
        self,
        catalog: Catalog,
        clock: Clock | None = None,
        selector: PromotionSelector | None = None,
        aggregator: SalesAggregator | None = None,
        receipts: ReceiptWriter | None = None,
    ) -> None:
        self.catalog = catalog
        self.clock: Clock = clock or SystemClock()
        self.selector = selector or PromotionSelector.default(catalog, self.clock)
        self.calculator = CheckoutCalculator(self.selector, self.clock)
        self.aggregator = aggregator or ServiceFactory.get_sales_aggregator()
        self.receipts = receipts or ServiceFactory.get_receipt_writer()
        self.cart = Cart()
        self.history: list[Order] = []

    # ── Cart ─────────────────────────────────────────────────────────

    def add_item(
        self,
        name: str,
        size: str,
        quantity: int = 1,
        vanilla_shots: int = 0,
        espresso_shots: int = 0,
    ) -> CartLine:
        """Add a menu drink to the cart. Raises DrinkNotFoundError."""
        drink = self.catalog.get(name, size)
        line = self.cart.add(
            CartLine(drink=drink, quantity=quantity, vanilla_shots=vanilla_shots, espresso_shots=espresso_shots)
        )
        logger.info("Added %s [%s] to cart", line.display_name(), line.addons_label())
        return line

    def remove_last(self) -> CartLine | None:
        return self.cart.remove_last()

    # ── Checkout ─────────────────────────────────────────────────────

    def checkout(self, save_receipt: bool = False) -> Order:
        """Finalize the cart. Raises EmptyCartError if there is nothing in it.

        An OSError from the receipt write propagates, but the order is
        already recorded and the cart already cleared by then.
        """
        order = self.calculator.checkout(self.cart)
        self.history.append(order)
        self.aggregator.fold(order)
        self.cart.clear()
        if save_receipt:
            self.receipts.save(order)
        return order

    # ── Query ────────────────────────────────────────────────────────

    def status(self) -> dict:
        return {
            "cart_lines": len(self.cart),
            "cart_quantity": self.cart.total_quantity,
            "orders": len(self.history),
            "total_revenue": round(self.aggregator.total_revenue, 2),
            "last_promotion": self.history[-1].promotion_label if self.history else None,
        }
