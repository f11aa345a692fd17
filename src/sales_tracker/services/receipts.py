"""
Receipt rendering and saving.

Receipts are plain text, appended to a single file (receipt.txt by default)
so the day's receipts accumulate in one place. Everything printed comes
straight from the Order; nothing is recomputed here.
"""

import logging
from pathlib import Path

from sales_tracker.domain.models import Order

logger = logging.getLogger(__name__)

DEFAULT_RECEIPT_PATH = "receipt.txt"


class ReceiptWriter:
    """Formats Orders as text receipts and appends them to a file."""

    def __init__(self, path: str | Path = DEFAULT_RECEIPT_PATH) -> None:
        self.path = Path(path)

    def render(self, order: Order) -> str:
        ts = order.timestamp
        out = [
            "==== Starbucks Receipt ====",
            f"Date: {ts:%Y-%m-%d}  Time: {ts:%H:%M:%S}",
            "",
        ]
        for line in order.lines:
            out.append(
                f"{line.display_name():<32}  base ${line.base_price():6.2f}"
                f"  add-ons [{line.addons_label()}] ${line.addons_cost():5.2f}"
            )
        out += [
            "",
            f"Drinks total:     ${order.base_total:.2f}",
            f"Add-ons total:    ${order.addons_total:.2f}",
            f"Promotion:  {order.promotion_label}  (-${order.discount_amount:.2f})",
            f"Subtotal:         ${order.subtotal_before_tax:.2f}",
            f"Tax:              ${order.tax:.2f}",
            f"TOTAL DUE:        ${order.final_total:.2f}",
            "===========================",
            "",
        ]
        return "\n".join(out) + "\n"

    def save(self, order: Order) -> Path:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(self.render(order))
        logger.info("Receipt appended to %s", self.path)
        return self.path
