"""
Exception hierarchy for the sales tracker.

Two families:
  - **InputError**: bad menu data. Loaders catch these per row, log a warning
    and skip the row; only `MenuFormatError` rejects a whole file.
  - **StateError**: an operation that makes no sense in the current state
    (checking out an empty cart, ordering a drink that is not on the menu).
    Raised to the caller, who reports it and carries on.

Nothing here is fatal to the process.
"""


class SalesTrackerError(Exception):
    """Base class for every error raised by this package."""


# ── Input errors ─────────────────────────────────────────────────────


class InputError(SalesTrackerError):
    pass


class UnknownCategoryError(InputError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"Unknown drink category: {raw!r}")
        self.raw = raw


class InvalidMenuRowError(InputError):
    """A menu row that cannot become a catalog entry."""


class MenuFormatError(InputError):
    """The menu source as a whole is unusable (missing file or columns)."""


# ── State errors ─────────────────────────────────────────────────────


class StateError(SalesTrackerError):
    pass


class CheckoutError(StateError):
    pass


class EmptyCartError(CheckoutError):
    def __init__(self) -> None:
        super().__init__("Cannot check out an empty cart")


class DrinkNotFoundError(StateError):
    def __init__(self, name: str, size: str) -> None:
        super().__init__(f"No drink named {name!r} in size {size!r} on the menu")
        self.name = name
        self.size = size
