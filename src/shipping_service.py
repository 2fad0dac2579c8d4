"""
Shipment notice for items that need to be physically delivered.

In a real deployment this is where a courier API would be called to
book a pickup.  Here the service only prints the shipment summary to
stdout and records how many items went out.
"""

from __future__ import annotations

import logging
from typing import Iterable

from metrics import SHIPPED_ITEMS_TOTAL
from products import Product

logger = logging.getLogger(__name__)


class ShippingService:
    """Print a shipment notice listing each shippable product.

    Weight is reported once per line item, regardless of the quantity
    ordered on that line.
    """

    def ship(self, items: Iterable[Product]) -> float:
        """Print the notice and return the total package weight in kg."""
        print("** Shipment notice **")
        total_weight = 0.0
        count = 0
        for item in items:
            print(f"- {item.name} {float(item.shipping_weight)}kg")
            total_weight += item.shipping_weight
            count += 1
        print(f"Total package weight: {float(total_weight)}kg")
        SHIPPED_ITEMS_TOTAL.inc(count)
        logger.info(
            "Shipment created",
            extra={"extra": {"items": count, "total_weight": round(total_weight, 3)}},
        )
        return total_weight


# Default instance shared by the checkout service
shipping_service = ShippingService()
