"""
Simple factory for service singletons.

The session and CLI call `ServiceFactory.get_*()` instead of instantiating
services themselves. The sales aggregator in particular is process-wide:
every order checked out during a run is folded into the same instance.

Tests call `ServiceFactory.reset()` to start from a clean slate.
"""

from pathlib import Path

from sales_tracker.services.menu_loader import MenuLoader
from sales_tracker.services.receipts import DEFAULT_RECEIPT_PATH, ReceiptWriter
from sales_tracker.services.statistics import SalesAggregator


class ServiceFactory:
    """Lazily creates and caches service instances (class-level singletons)."""

    _menu_loader: MenuLoader | None = None
    _receipt_writer: ReceiptWriter | None = None
    _sales_aggregator: SalesAggregator | None = None

    @classmethod
    def get_menu_loader(cls) -> MenuLoader:
        if cls._menu_loader is None:
            cls._menu_loader = MenuLoader()
        return cls._menu_loader

    @classmethod
    def get_receipt_writer(cls, path: str | Path = DEFAULT_RECEIPT_PATH) -> ReceiptWriter:
        """Process-wide receipt writer.

        `path` only counts on the first call, when the writer is created;
        later calls return the cached writer whatever path they pass.
        The CLI makes that first call with `--receipt`.
        """
        if cls._receipt_writer is None:
            cls._receipt_writer = ReceiptWriter(path)
        return cls._receipt_writer

    @classmethod
    def get_sales_aggregator(cls) -> SalesAggregator:
        if cls._sales_aggregator is None:
            cls._sales_aggregator = SalesAggregator()
        return cls._sales_aggregator

    @classmethod
    def reset(cls) -> None:
        cls._menu_loader = None
        cls._receipt_writer = None
        cls._sales_aggregator = None
