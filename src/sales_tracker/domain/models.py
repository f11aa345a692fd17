"""
Domain models for the drink sales tracker.

All models use Pydantic v2 BaseModel for validation and serialization. Catalog
entries, orders and summaries are frozen: once built they are never mutated.
Cart lines stay mutable while the customer is still shopping, so they validate
on assignment and re-apply the same clamping rules as on construction.

Enums inherit from (str, Enum) so they serialize as plain strings in JSON
(e.g. "Tea" instead of {"value": "Tea"}).
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sales_tracker.domain.errors import UnknownCategoryError


class Category(str, Enum):
    """Drink categories sold on the menu."""

    COFFEE = "Coffee"
    TEA = "Tea"
    REFRESHER = "Refresher"
    FRAPPUCCINO = "Frappuccino"
    SEASONAL = "Seasonal"

    @classmethod
    def parse(cls, raw: str) -> "Category":
        """Case-insensitive lookup, e.g. " tea " -> Category.TEA."""
        normalized = raw.strip().lower()
        for category in cls:
            if category.value.lower() == normalized:
                return category
        raise UnknownCategoryError(raw)


class AddOn(str, Enum):
    """Paid customizations, priced per shot per drink."""

    VANILLA_SYRUP = "vanilla syrup"
    EXTRA_SHOT = "extra shot"

    @property
    def price(self) -> float:
        return ADDON_PRICES[self]

    @property
    def short_label(self) -> str:
        return "vanilla" if self is AddOn.VANILLA_SYRUP else "extra shot"


ADDON_PRICES: dict[AddOn, float] = {
    AddOn.VANILLA_SYRUP: 0.60,  # $0.60 per shot
    AddOn.EXTRA_SHOT: 0.50,     # $0.50 per shot
}

# (name, size): identity of a catalog entry and the popularity key
DrinkKey = tuple[str, str]


class DrinkCatalogEntry(BaseModel):
    """A purchasable drink: one (name, size) pair with its price."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    category: Category
    unit_price: float = Field(..., ge=0, allow_inf_nan=False)

    @field_validator("name", "size")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @property
    def key(self) -> DrinkKey:
        return (self.name, self.size)


def format_drink_label(entry: DrinkCatalogEntry) -> str:
    """Display label shared by every category, e.g. "Caffe Latte (Grande) - $4.25"."""
    return f"{entry.name} ({entry.size}) - ${entry.unit_price:.2f}"


def format_drink_key(key: DrinkKey) -> str:
    name, size = key
    return f"{name} ({size})"


class CartLine(BaseModel):
    """One drink selection in the cart, with quantity and add-on shots.

    Quantities below 1 become 1 and negative shot counts become 0, both at
    construction and on later assignment.
    """

    model_config = ConfigDict(validate_assignment=True)

    drink: DrinkCatalogEntry
    quantity: int = 1
    vanilla_shots: int = 0
    espresso_shots: int = 0

    @field_validator("quantity")
    @classmethod
    def _clamp_quantity(cls, value: int) -> int:
        return max(1, value)

    @field_validator("vanilla_shots", "espresso_shots")
    @classmethod
    def _clamp_shots(cls, value: int) -> int:
        return max(0, value)

    def shots(self, addon: AddOn) -> int:
        """Shots of `addon` per drink."""
        return self.vanilla_shots if addon is AddOn.VANILLA_SYRUP else self.espresso_shots

    def addon_count(self, addon: AddOn) -> int:
        """Shots of `addon` across the whole line (shots x quantity)."""
        return self.shots(addon) * self.quantity

    def base_price(self) -> float:
        return self.quantity * self.drink.unit_price

    def addons_cost(self) -> float:
        per_drink = sum(self.shots(addon) * addon.price for addon in AddOn)
        return self.quantity * per_drink

    def line_subtotal(self) -> float:
        return self.base_price() + self.addons_cost()

    def addons_label(self) -> str:
        parts = [f"{self.shots(addon)}x {addon.short_label}" for addon in AddOn if self.shots(addon) > 0]
        return ", ".join(parts) if parts else "no add-ons"

    def display_name(self) -> str:
        label = format_drink_key(self.drink.key)
        if self.quantity > 1:
            return f"{self.quantity}x {label}"
        return label


# ── Checkout output ──────────────────────────────────────────────────


class OrderLine(CartLine):
    """A cart line frozen into an Order. Assigning to it raises."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderLine":
        return cls(
            drink=line.drink,
            quantity=line.quantity,
            vanilla_shots=line.vanilla_shots,
            espresso_shots=line.espresso_shots,
        )


class Order(BaseModel):
    """Immutable record of a finalized checkout.

    Carries every figure a receipt needs so collaborators never recompute
    totals.
    """

    model_config = ConfigDict(frozen=True)

    lines: tuple[OrderLine, ...]
    base_total: float = Field(..., ge=0)          # drinks only, before discount
    addons_total: float = Field(..., ge=0)        # add-ons only, never discounted
    discount_amount: float = Field(..., ge=0)
    promotion_label: str = "None"
    subtotal_before_tax: float = Field(..., ge=0)
    tax: float = Field(..., ge=0)
    final_total: float = Field(..., ge=0)
    timestamp: datetime

    @property
    def has_promotion(self) -> bool:
        return self.discount_amount > 0

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)


class SalesSummary(BaseModel):
    """Read-only snapshot of the sales statistics, for reporting."""

    model_config = ConfigDict(frozen=True)

    orders: int
    total_drinks_sold: int
    total_revenue: float
    total_discount_given: float
    orders_with_promotions: int
    average_order_value: float
    most_popular: DrinkKey | None
    most_popular_count: int
    top_addons: list[AddOn]
    total_addon_revenue: float
    category_item_count: dict[Category, int]
    category_revenue: dict[Category, float]
    categories_sold: list[Category]
    unsold: list[DrinkKey]
