"""
Shopping cart.

The cart keeps line items in the order they were added.  Adding checks
stock at that moment but does not reserve it, so availability can change
before checkout; ``CheckoutService`` re-validates every line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List

from errors import InsufficientStockError
from products import Product

logger = logging.getLogger(__name__)


@dataclass
class CartItem:
    """A line in the shopping cart: a product reference and a quantity."""
    product: Product
    quantity: int

    @property
    def total_price(self) -> float:
        return self.product.price * self.quantity


class Cart:
    def __init__(self) -> None:
        self._items: List[CartItem] = []

    def add(self, product: Product, qty: int) -> CartItem:
        """Append ``qty`` units of ``product`` to the cart.

        :raises ValueError: if ``qty`` is not positive.
        :raises InsufficientStockError: if ``qty`` exceeds the product's
            current stock.
        """
        if qty <= 0:
            raise ValueError("Quantity must be positive.")
        if qty > product.quantity:
            print(f"Sorry, not enough in stock: {product.name}")
            logger.warning(
                "Add to cart rejected",
                extra={"extra": {"product": product.name, "requested": qty, "available": product.quantity}},
            )
            raise InsufficientStockError(product.name, qty, product.quantity)
        item = CartItem(product=product, quantity=qty)
        self._items.append(item)
        logger.debug("Added %d x %s to cart", qty, product.name)
        return item

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def subtotal(self) -> float:
        return sum(item.total_price for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self._items)
