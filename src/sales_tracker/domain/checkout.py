"""
Cart and checkout.

A `Cart` accumulates lines while the customer shops. `CheckoutCalculator`
turns a non-empty cart into an immutable `Order`:

    base/add-on totals -> best promotion -> tax -> final total

The calculator has no side effects: it does not clear the cart, store the
order or update statistics. The ordering session does that with the Order
it gets back.
"""

import logging
from collections.abc import Iterator

from sales_tracker.domain.clock import Clock, SystemClock
from sales_tracker.domain.errors import EmptyCartError
from sales_tracker.domain.models import CartLine, Order, OrderLine
from sales_tracker.domain.promotions import PromotionSelector

logger = logging.getLogger(__name__)


class Cart:
    """Ordered cart lines for the order in progress."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    def add(self, line: CartLine) -> CartLine:
        self._lines.append(line)
        return line

    def remove_last(self) -> CartLine | None:
        return self._lines.pop() if self._lines else None

    def clear(self) -> None:
        self._lines.clear()

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self._lines)


class CheckoutCalculator:
    """Prices a cart and produces the Order snapshot."""

    TAX_RATE: float = 0.0825
    NO_PROMOTION: str = "None"

    def __init__(self, selector: PromotionSelector, clock: Clock | None = None) -> None:
        self.selector = selector
        self.clock: Clock = clock or SystemClock()

    def checkout(self, cart: Cart) -> Order:
        if cart.is_empty:
            raise EmptyCartError()

        # Frozen copies: neither cart edits nor callers can change the Order.
        lines = tuple(OrderLine.from_cart_line(line) for line in cart.lines)

        base_total = sum(line.base_price() for line in lines)
        addons_total = sum(line.addons_cost() for line in lines)

        promotion, discount = self.selector.select(lines, base_total, addons_total)
        label = self.NO_PROMOTION if promotion is None else promotion.display_name()

        subtotal = base_total + addons_total - discount
        tax = subtotal * self.TAX_RATE
        order = Order(
            lines=lines,
            base_total=base_total,
            addons_total=addons_total,
            discount_amount=discount,
            promotion_label=label,
            subtotal_before_tax=subtotal,
            tax=tax,
            final_total=subtotal + tax,
            timestamp=self.clock.now(),
        )
        logger.info(
            "Checked out %d drink(s): base %.2f, add-ons %.2f, discount %.2f (%s), total %.2f",
            order.total_quantity,
            base_total,
            addons_total,
            discount,
            label,
            order.final_total,
        )
        return order
