"""
Interactive CLI: browse the menu, place orders, view the day's sales.

This module is a thin text front end over OrderSession. It parses user
input, calls into the session and prints what comes back; all pricing and
statistics live in the domain and service layers.

Usage:
    # Load menu.csv from the working directory:
    sales-tracker

    # Use another menu and receipt file, with debug logging:
    sales-tracker --menu data/menu.csv --receipt out/receipts.txt --log-level DEBUG
"""

import argparse
import logging
from collections.abc import Callable

from sales_tracker.domain.catalog import Catalog
from sales_tracker.domain.errors import InputError, StateError
from sales_tracker.domain.models import AddOn, Category, Order, format_drink_key, format_drink_label
from sales_tracker.services.factory import ServiceFactory
from sales_tracker.services.receipts import DEFAULT_RECEIPT_PATH
from sales_tracker.session import OrderSession

logger = logging.getLogger(__name__)

DEFAULT_MENU_PATH = "menu.csv"

MENU_TEXT = """
Welcome to Starbucks!
1) Show all available drinks
2) Search drinks by type
3) Place an order
4) View today's sales summary
5) Quit"""


class Console:
    """Menu loop bound to one session. `read`/`write` are swappable for tests."""

    def __init__(
        self,
        session: OrderSession,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.session = session
        self.read = read
        self.write = write

    def ask(self, prompt: str) -> str:
        return self.read(prompt).strip()

    def ask_count(self, prompt: str) -> int:
        while True:
            raw = self.ask(prompt)
            try:
                value = int(raw)
            except ValueError:
                self.write("Please enter a valid integer.")
                continue
            if value < 0:
                self.write("Please enter 0 or a positive integer.")
                continue
            return value

    def run(self) -> None:
        actions = {
            "1": self.show_all_drinks,
            "2": self.search_by_type,
            "3": self.place_order,
            "4": self.print_sales_summary,
        }
        while True:
            self.write(MENU_TEXT)
            choice = self.ask("Choose: ")
            if choice == "5":
                self.write("Thank you for choosing Starbucks!")
                return
            action = actions.get(choice)
            if action is None:
                self.write("Invalid option.")
                continue
            action()

    # ── Browsing ─────────────────────────────────────────────────────

    def show_all_drinks(self) -> None:
        catalog = self.session.catalog
        if not catalog:
            self.write("(Menu is empty)")
            return
        self.write("\n=== All Available Drinks ===")
        for i, drink in enumerate(catalog, start=1):
            self.write(
                f"{i:2d}) {drink.name:<28} | {drink.size:<6} | ${drink.unit_price:5.2f} | Type: {drink.category.value}"
            )

    def search_by_type(self) -> None:
        raw = self.ask("Enter a drink type (e.g., Coffee, Tea, Refresher, Frappuccino): ")
        if not raw:
            self.write("(No type entered)")
            return
        catalog = self.session.catalog
        try:
            drinks = catalog.by_category(Category.parse(raw))
        except InputError:
            drinks = []
        self.write(f"\n=== Results for type: {raw} ===")
        if not drinks:
            self.write("(No drinks found for that type)")
            if catalog:
                self.write("Try one of: " + ", ".join(c.value for c in catalog.categories()))
            return
        for drink in drinks:
            self.write(f"- {format_drink_label(drink)}")

    # ── Ordering ─────────────────────────────────────────────────────

    def place_order(self) -> None:
        if not self.session.catalog:
            self.write("Menu is empty. Load menu first.")
            return
        self.session.cart.clear()
        more = "Y"
        while more.upper() == "Y":
            name = self.ask("Drink name (as shown): ")
            size = self.ask("Size (Tall, Grande, Venti): ")
            if self.session.catalog.find(name, size) is None:
                self.write("Not found. Tip: use option 1 to list the exact names and sizes.")
            else:
                quantity = self.ask_count("Quantity: ")
                vanilla = self.ask_count(
                    f"How many shots of vanilla syrup? (each ${AddOn.VANILLA_SYRUP.price:.2f}): "
                )
                espresso = self.ask_count(f"How many extra espresso shots? (each ${AddOn.EXTRA_SHOT.price:.2f}): ")
                line = self.session.add_item(name, size, quantity, vanilla, espresso)
                self.write(f"Added: {line.display_name()} - ${line.base_price():.2f} [{line.addons_label()}]")
            more = self.ask("Add another item? (Y/N): ")

        if self.session.cart.is_empty:
            self.write("(Cart was empty; nothing to checkout.)")
            return
        try:
            order = self.session.checkout()
        except StateError as exc:
            self.write(f"Checkout failed: {exc}")
            return
        self.print_checkout(order)
        if self.ask("Save receipt? (Y/N): ").upper() == "Y":
            try:
                path = self.session.receipts.save(order)
            except OSError as exc:
                logger.error("Error writing receipt to %s: %s", self.session.receipts.path, exc)
                self.write(f"Error writing receipt: {exc}")
                return
            self.write(f"Receipt appended to {path}")

    def print_checkout(self, order: Order) -> None:
        self.write("\n===== CHECKOUT =====")
        for line in order.lines:
            self.write(
                f"- {line.display_name()}  base ${line.base_price():.2f}"
                f"  | add-ons [{line.addons_label()}] ${line.addons_cost():.2f}"
            )
        self.write(f"Drinks total:     ${order.base_total:.2f}")
        self.write(f"Add-ons total:    ${order.addons_total:.2f}")
        self.write(f"Promotion:  {order.promotion_label}  (-${order.discount_amount:.2f})")
        self.write(f"Tax:              ${order.tax:.2f}")
        self.write(f"Amount due:       ${order.final_total:.2f}")
        self.write("====================\n")

    # ── Reporting ────────────────────────────────────────────────────

    def print_sales_summary(self) -> None:
        summary = self.session.aggregator.summary(self.session.catalog)
        self.write("\n=== Today's Sales Summary ===")
        self.write(f"Total Sales: ${summary.total_revenue:.2f}")
        if summary.most_popular is None:
            self.write("No drinks sold yet.")
            return
        self.write(f"Orders: {summary.orders} (avg ${summary.average_order_value:.2f})")
        self.write(f"Drinks sold: {summary.total_drinks_sold}")
        self.write(f"Most Popular Drink: {format_drink_key(summary.most_popular)} ({summary.most_popular_count} sold)")
        for category, count in summary.category_item_count.items():
            revenue = summary.category_revenue.get(category, 0.0)
            self.write(f"  {category.value:<12} {count:3d} sold  ${revenue:.2f}")
        if summary.top_addons:
            self.write("Top add-ons: " + ", ".join(addon.value for addon in summary.top_addons))
        self.write(f"Add-on revenue: ${summary.total_addon_revenue:.2f}")
        self.write(
            f"Discounts given: ${summary.total_discount_given:.2f} "
            f"across {summary.orders_with_promotions} order(s)"
        )
        if summary.unsold:
            self.write("Drinks not sold yet: " + ", ".join(format_drink_key(key) for key in summary.unsold))


def load_catalog(path: str) -> Catalog:
    try:
        return ServiceFactory.get_menu_loader().load(path)
    except InputError as exc:
        logger.error("%s", exc)
        return Catalog()


def main() -> None:
    parser = argparse.ArgumentParser(description="Drink ordering and daily sales tracker")
    parser.add_argument("--menu", default=DEFAULT_MENU_PATH, help="CSV menu file (Drink Name, Drink Type, Size, Price)")
    parser.add_argument("--receipt", default=DEFAULT_RECEIPT_PATH, help="File receipts are appended to")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    catalog = load_catalog(args.menu)
    session = OrderSession(catalog, receipts=ServiceFactory.get_receipt_writer(args.receipt))
    Console(session).run()


if __name__ == "__main__":
    main()
