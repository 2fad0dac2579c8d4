"""
Product catalogue model.

A product may be able to expire, may need shipping, both, or neither.
Rather than one class per combination, a single ``Product`` carries two
optional capability fields:

* ``expiry`` - when set, the product cannot be sold after this moment.
* ``weight`` - when set (in kg), the product is shipped and incurs the
  flat shipping fee at checkout.

The ``plain``/``expirable``/``shippable``/``expirable_shippable``
constructors build the four variants explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(eq=False)
class Product:
    """A sellable item with mutable stock.

    Products are long-lived and shared between carts; only checkout
    reduces ``quantity``.  Products compare by identity.
    """
    name: str
    price: float
    quantity: int
    expiry: Optional[datetime] = None
    weight: Optional[float] = None

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"Quantity cannot be negative for {self.name}")
        if self.price < 0:
            raise ValueError(f"Price cannot be negative for {self.name}")
        if self.weight is not None and self.weight < 0:
            raise ValueError(f"Weight cannot be negative for {self.name}")

    # ---- Variant constructors ----

    @classmethod
    def plain(cls, name: str, price: float, quantity: int) -> "Product":
        return cls(name, price, quantity)

    @classmethod
    def expirable(cls, name: str, price: float, quantity: int, expiry: datetime) -> "Product":
        return cls(name, price, quantity, expiry=expiry)

    @classmethod
    def shippable(cls, name: str, price: float, quantity: int, weight: float) -> "Product":
        return cls(name, price, quantity, weight=weight)

    @classmethod
    def expirable_shippable(
        cls, name: str, price: float, quantity: int, expiry: datetime, weight: float
    ) -> "Product":
        return cls(name, price, quantity, expiry=expiry, weight=weight)

    # ---- Capabilities ----

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True if the expiry moment has passed.

        :param now: Reference time; defaults to the current local time.
            Products without an expiry never expire.
        """
        if self.expiry is None:
            return False
        if now is None:
            now = datetime.now(self.expiry.tzinfo)
        return now > self.expiry

    def requires_shipping(self) -> bool:
        return self.weight is not None

    @property
    def shipping_weight(self) -> float:
        """Weight in kg for shippable products, 0.0 otherwise."""
        return self.weight if self.weight is not None else 0.0

    # ---- Stock ----

    def reduce_quantity(self, qty: int) -> None:
        """Decrement stock by ``qty``.

        Raises ``ValueError`` rather than letting stock go negative;
        callers are expected to have checked availability first.
        """
        if qty <= 0:
            raise ValueError("Quantity must be positive.")
        if qty > self.quantity:
            raise ValueError(
                f"Cannot reduce {self.name} by {qty}; only {self.quantity} in stock"
            )
        self.quantity -= qty
