"""
Checkout orchestration.

``CheckoutService.checkout`` validates every cart line, reduces stock,
charges the customer, hands shippable products to the shipping service
and prints the receipt.  Steps:

1. Reject an empty cart.
2. Walk the lines in cart order.  An expired product or a line whose
   quantity now exceeds stock aborts the checkout.  Otherwise the stock
   is reduced immediately, the line total is added to the subtotal and,
   for shippable products, the flat shipping fee is added and the
   product is queued for shipment.
3. Deduct ``subtotal + shipping`` from the customer's balance.
4. Print the shipment notice (if anything ships) and the receipt.

Stock reductions are not rolled back when a later line or the payment
fails.  Callers that need all-or-nothing semantics must check the cart
and balance themselves before calling ``checkout``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from cart import Cart
from config import load_shipping_fee
from customer import Customer
from errors import (
    CheckoutError,
    EmptyCartError,
    InsufficientFundsError,
    OutOfStockError,
    ProductExpiredError,
)
from metrics import CHECKOUT_DURATION_SECONDS, CHECKOUT_ERROR_TOTAL, CHECKOUT_TOTAL
from products import Product
from shipping_service import ShippingService, shipping_service

logger = logging.getLogger(__name__)

_ERROR_TYPES = {
    EmptyCartError: "empty_cart",
    ProductExpiredError: "expired",
    OutOfStockError: "out_of_stock",
    InsufficientFundsError: "insufficient_funds",
}


@dataclass(frozen=True)
class ReceiptLine:
    quantity: int
    name: str
    line_total: float


@dataclass(frozen=True)
class Receipt:
    """Outcome of a successful checkout."""
    lines: Tuple[ReceiptLine, ...]
    subtotal: float
    shipping: float
    total: float
    balance: float
    shipped: Tuple[Product, ...] = ()

    def render(self) -> str:
        out = ["** Checkout receipt **"]
        for line in self.lines:
            out.append(f"{line.quantity}x {line.name} = {float(line.line_total)}")
        out.append("----------------------")
        out.append(f"Subtotal: {float(self.subtotal)}")
        out.append(f"Shipping: {float(self.shipping)}")
        out.append(f"Total: {float(self.total)}")
        out.append(f"Balance left: {float(self.balance)}")
        return "\n".join(out)


class CheckoutService:
    """Turns a customer's cart into a paid, shipped order."""

    def __init__(
        self,
        shipping_fee: Optional[float] = None,
        shipping: Optional[ShippingService] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        :param shipping_fee: Flat fee per shippable line item.  Defaults to
            ``CHECKOUT_SHIPPING_FEE`` from the environment (15.0).
        :param shipping: Service that prints the shipment notice.
        :param clock: Returns the time used for expiry checks; None means
            each product compares against the current time.
        """
        self.shipping_fee = load_shipping_fee() if shipping_fee is None else shipping_fee
        self.shipping = shipping or shipping_service
        self.clock = clock

    def checkout(self, customer: Customer, cart: Cart) -> Receipt:
        """Run the checkout for ``customer`` and return the printed receipt.

        :raises EmptyCartError: the cart has no lines.
        :raises ProductExpiredError: a product's expiry has passed.
        :raises OutOfStockError: a line asks for more than is in stock.
        :raises InsufficientFundsError: the balance does not cover the total.
        """
        start = time.perf_counter()
        try:
            receipt = self._checkout(customer, cart)
        except CheckoutError as exc:
            error_type = _ERROR_TYPES.get(type(exc), "other")
            CHECKOUT_TOTAL.inc(outcome="failed")
            CHECKOUT_ERROR_TOTAL.inc(type=error_type)
            logger.warning(
                "Checkout rejected",
                extra={"extra": {"customer": customer.name, "error_type": error_type, "reason": str(exc)}},
            )
            raise
        except Exception:
            CHECKOUT_TOTAL.inc(outcome="failed")
            CHECKOUT_ERROR_TOTAL.inc(type="other")
            logger.exception("Checkout failed unexpectedly", extra={"extra": {"customer": customer.name}})
            raise
        finally:
            CHECKOUT_DURATION_SECONDS.observe(time.perf_counter() - start)
        CHECKOUT_TOTAL.inc(outcome="success")
        logger.info(
            "Checkout completed",
            extra={
                "extra": {
                    "customer": customer.name,
                    "lines": len(receipt.lines),
                    "total": receipt.total,
                    "balance": receipt.balance,
                }
            },
        )
        return receipt

    def _checkout(self, customer: Customer, cart: Cart) -> Receipt:
        if cart.is_empty():
            print("Your cart is empty!")
            raise EmptyCartError()

        now = self.clock() if self.clock else None
        subtotal = 0.0
        shipping = 0.0
        to_ship: List[Product] = []
        lines: List[ReceiptLine] = []

        for item in cart:
            product = item.product
            if product.is_expired(now):
                print(f"Oops! Product expired: {product.name}")
                raise ProductExpiredError(product.name)
            if product.quantity < item.quantity:
                print(f"Not enough stock for: {product.name}")
                raise OutOfStockError(product.name, item.quantity, product.quantity)

            # Earlier lines stay reduced if a later line or the payment fails.
            product.reduce_quantity(item.quantity)
            subtotal += item.total_price
            lines.append(ReceiptLine(item.quantity, product.name, item.total_price))

            if product.requires_shipping():
                to_ship.append(product)
                shipping += self.shipping_fee

        total = subtotal + shipping
        customer.deduct(total)

        if to_ship:
            self.shipping.ship(to_ship)

        receipt = Receipt(
            lines=tuple(lines),
            subtotal=subtotal,
            shipping=shipping,
            total=total,
            balance=customer.balance,
            shipped=tuple(to_ship),
        )
        print()
        print(receipt.render())
        return receipt
