"""
Exceptions raised by the checkout flow.

Every error derives from ``CheckoutError`` (itself a ``ValueError``) so
callers such as the CLI can catch the whole family in one place.  The
user-facing explanation is printed by the raising code before the error
propagates; the exception message is the short technical reason.
"""

from __future__ import annotations


class CheckoutError(ValueError):
    """Base class for all checkout failures."""


class EmptyCartError(CheckoutError):
    def __init__(self) -> None:
        super().__init__("Cart is empty.")


class ProductExpiredError(CheckoutError):
    def __init__(self, product_name: str) -> None:
        super().__init__(f"Product expired: {product_name}")
        self.product_name = product_name


class OutOfStockError(CheckoutError):
    """Raised at checkout when stock dropped below the quantity in the cart."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Out of stock: {product_name} (requested {requested}, available {available})"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InsufficientStockError(CheckoutError):
    """Raised by ``Cart.add`` when the requested quantity exceeds stock."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Not enough in stock: {product_name} (requested {requested}, available {available})"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InsufficientFundsError(CheckoutError):
    def __init__(self, balance: float, amount: float) -> None:
        super().__init__(f"Insufficient funds: balance {balance:.2f}, required {amount:.2f}")
        self.balance = balance
        self.amount = amount
