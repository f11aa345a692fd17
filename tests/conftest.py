from datetime import datetime

import pytest

from sales_tracker.domain.catalog import Catalog
from sales_tracker.domain.clock import FixedClock
from sales_tracker.domain.models import Category, DrinkCatalogEntry
from sales_tracker.services.factory import ServiceFactory

MORNING = datetime(2024, 5, 6, 9, 30)
HAPPY_HOUR = datetime(2024, 5, 6, 15, 0)


def drink(name: str, size: str, category: Category, price: float) -> DrinkCatalogEntry:
    return DrinkCatalogEntry(name=name, size=size, category=category, unit_price=price)


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        [
            drink("Latte", "Tall", Category.COFFEE, 3.50),
            drink("Latte", "Grande", Category.COFFEE, 4.50),
            drink("Green Tea", "Tall", Category.TEA, 3.00),
            drink("Green Tea", "Grande", Category.TEA, 3.75),
            drink("Mocha", "Tall", Category.COFFEE, 4.00),
            drink("Strawberry Acai", "Grande", Category.REFRESHER, 4.25),
            drink("Caramel Frappuccino", "Venti", Category.FRAPPUCCINO, 5.45),
        ]
    )


@pytest.fixture
def morning_clock() -> FixedClock:
    return FixedClock(MORNING)


@pytest.fixture
def happy_hour_clock() -> FixedClock:
    return FixedClock(HAPPY_HOUR)


@pytest.fixture(autouse=True)
def _reset_services():
    ServiceFactory.reset()
    yield
    ServiceFactory.reset()
