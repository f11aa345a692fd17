"""Tests for the promotion strategies and the best-promotion selector."""

from datetime import datetime

import pytest

from conftest import drink
from sales_tracker.domain.catalog import Catalog
from sales_tracker.domain.clock import FixedClock
from sales_tracker.domain.models import CartLine, Category
from sales_tracker.domain.promotions import (
    BulkQuantityPromotion,
    BuyNGetCheapestFreePromotion,
    HappyHourPromotion,
    PromotionKind,
    PromotionSelector,
)


def lines_for(catalog, *items):
    """items: (name, size, quantity) or (name, size, quantity, vanilla, espresso)."""
    out = []
    for name, size, qty, *shots in items:
        vanilla, espresso = shots or (0, 0)
        out.append(CartLine(drink=catalog.get(name, size), quantity=qty, vanilla_shots=vanilla, espresso_shots=espresso))
    return out


def totals(lines):
    return sum(l.base_price() for l in lines), sum(l.addons_cost() for l in lines)


class TestBulkQuantity:
    def test_needs_four_drinks(self, catalog):
        promo = BulkQuantityPromotion()
        assert not promo.is_applicable(lines_for(catalog, ("Latte", "Tall", 3)))
        assert promo.is_applicable(lines_for(catalog, ("Latte", "Tall", 2), ("Mocha", "Tall", 2)))

    def test_discounts_base_only(self, catalog):
        lines = lines_for(catalog, ("Latte", "Tall", 4, 2, 1))
        base, addons = totals(lines)
        assert BulkQuantityPromotion().calculate_discount(lines, base, addons) == pytest.approx(1.40)

    def test_inapplicable_is_zero(self, catalog):
        lines = lines_for(catalog, ("Latte", "Tall", 1))
        assert BulkQuantityPromotion().calculate_discount(lines, *totals(lines)) == 0.0

    def test_empty_cart(self):
        assert not BulkQuantityPromotion().is_applicable([])


class TestHappyHour:
    @pytest.mark.parametrize(
        "hour, minute, expected",
        [(13, 59, False), (14, 0, True), (15, 59, True), (16, 0, False)],
    )
    def test_window_is_half_open(self, catalog, hour, minute, expected):
        promo = HappyHourPromotion(clock=FixedClock(datetime(2024, 5, 6, hour, minute)))
        assert promo.is_applicable(lines_for(catalog, ("Green Tea", "Tall", 1))) is expected

    def test_needs_tea(self, catalog, happy_hour_clock):
        promo = HappyHourPromotion(clock=happy_hour_clock)
        assert not promo.is_applicable(lines_for(catalog, ("Latte", "Tall", 2)))

    def test_discounts_tea_lines_only(self, catalog, happy_hour_clock):
        lines = lines_for(catalog, ("Green Tea", "Tall", 2, 1, 0), ("Latte", "Grande", 1))
        promo = HappyHourPromotion(clock=happy_hour_clock)
        # 0.20 * (2 * 3.00)
        assert promo.calculate_discount(lines, *totals(lines)) == pytest.approx(1.20)

    def test_clock_read_on_every_call(self, catalog):
        clock = FixedClock(datetime(2024, 5, 6, 15, 30))
        promo = HappyHourPromotion(clock=clock)
        lines = lines_for(catalog, ("Green Tea", "Tall", 1))
        assert promo.is_applicable(lines)
        clock.set(datetime(2024, 5, 6, 16, 5))
        assert not promo.is_applicable(lines)

    def test_idempotent(self, catalog, happy_hour_clock):
        promo = HappyHourPromotion(clock=happy_hour_clock)
        lines = lines_for(catalog, ("Green Tea", "Tall", 1))
        assert promo.is_applicable(lines) == promo.is_applicable(lines)


class TestBuyNGetCheapestFree:
    def test_cheapest_size_is_free_even_if_not_bought(self, catalog):
        lines = lines_for(catalog, ("Latte", "Grande", 3))
        promo = BuyNGetCheapestFreePromotion(catalog)
        assert promo.is_applicable(lines)
        assert promo.calculate_discount(lines, *totals(lines)) == pytest.approx(3.50)

    def test_counts_across_sizes(self, catalog):
        lines = lines_for(catalog, ("Latte", "Grande", 2), ("Latte", "Tall", 1))
        assert BuyNGetCheapestFreePromotion(catalog).is_applicable(lines)

    def test_two_of_a_name_is_not_enough(self, catalog):
        lines = lines_for(catalog, ("Latte", "Grande", 2), ("Mocha", "Tall", 2))
        promo = BuyNGetCheapestFreePromotion(catalog)
        assert not promo.is_applicable(lines)
        assert promo.calculate_discount(lines, *totals(lines)) == 0.0

    def test_tie_break_is_catalog_order(self, catalog):
        # Green Tea is listed after Latte in the catalog, so Latte wins
        # even though the Green Tea line comes first in the cart.
        lines = lines_for(catalog, ("Green Tea", "Grande", 3), ("Latte", "Grande", 3))
        promo = BuyNGetCheapestFreePromotion(catalog)
        assert promo.qualifying_name(lines) == "Latte"
        assert promo.calculate_discount(lines, *totals(lines)) == pytest.approx(3.50)

    def test_sees_catalog_updates(self, catalog):
        promo = BuyNGetCheapestFreePromotion(catalog)
        lines = lines_for(catalog, ("Latte", "Grande", 3))
        catalog.add(drink("Latte", "Short", Category.COFFEE, 2.95))
        assert promo.calculate_discount(lines, *totals(lines)) == pytest.approx(2.95)

    def test_name_missing_from_catalog_never_applies(self, catalog):
        lines = lines_for(catalog, ("Latte", "Grande", 3))
        assert not BuyNGetCheapestFreePromotion(Catalog()).is_applicable(lines)


class TestPromotionSelector:
    def test_no_promotion(self, catalog, morning_clock):
        selector = PromotionSelector.default(catalog, morning_clock)
        lines = lines_for(catalog, ("Latte", "Tall", 1))
        assert selector.select_best(lines, *totals(lines)) is None

    def test_picks_largest_discount(self, catalog, happy_hour_clock):
        selector = PromotionSelector.default(catalog, happy_hour_clock)
        lines = lines_for(catalog, ("Green Tea", "Tall", 3))
        # bulk n/a, happy hour 1.80, buy-3 gives 3.00 (cheapest Green Tea)
        best = selector.select_best(lines, *totals(lines))
        assert best.kind is PromotionKind.BUY_N_GET_CHEAPEST_FREE

    def test_happy_hour_beats_bulk(self, catalog, happy_hour_clock):
        selector = PromotionSelector([BulkQuantityPromotion(), HappyHourPromotion(clock=happy_hour_clock)])
        lines = lines_for(catalog, ("Green Tea", "Tall", 3), ("Latte", "Tall", 1))
        # bulk: 0.10 * 12.50 = 1.25; happy hour: 0.20 * 9.00 = 1.80
        assert selector.select_best(lines, *totals(lines)).kind is PromotionKind.TIME_WINDOW_CATEGORY

    def test_tie_goes_to_first_registered(self, catalog):
        first, second = BulkQuantityPromotion(), BulkQuantityPromotion()
        lines = lines_for(catalog, ("Latte", "Tall", 4))
        assert PromotionSelector([first, second]).select_best(lines, *totals(lines)) is first

    def test_zero_discount_never_wins(self, catalog):
        free = Catalog([drink("Water", "Tall", Category.REFRESHER, 0.0)])
        lines = [CartLine(drink=free.get("Water", "Tall"), quantity=5)]
        selector = PromotionSelector([BulkQuantityPromotion(), BuyNGetCheapestFreePromotion(free)])
        assert selector.select_best(lines, *totals(lines)) is None

    def test_default_registration_order(self, catalog):
        kinds = [p.kind for p in PromotionSelector.default(catalog).promotions]
        assert kinds == [
            PromotionKind.BULK_QUANTITY,
            PromotionKind.TIME_WINDOW_CATEGORY,
            PromotionKind.BUY_N_GET_CHEAPEST_FREE,
        ]

    def test_select_returns_discount_with_promotion(self, catalog, morning_clock):
        selector = PromotionSelector.default(catalog, morning_clock)
        assert selector.select(lines_for(catalog, ("Latte", "Tall", 1)), 3.50, 0.0) == (None, 0.0)
        lines = lines_for(catalog, ("Latte", "Tall", 2), ("Mocha", "Tall", 2))
        best, discount = selector.select(lines, *totals(lines))
        # 0.10 * (2 * 3.50 + 2 * 4.00)
        assert best.kind is PromotionKind.BULK_QUANTITY
        assert discount == pytest.approx(1.50)
