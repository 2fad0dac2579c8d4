"""
Command-line interface for the checkout application.

By default the script runs the demo order: a customer with a balance of
1000 buys two Cheese, one Biscuits and one Scratch Card.  With
``--interactive`` it opens a menu loop over the same catalogue so the
cart can be filled by hand.  The business logic lives in
``CheckoutService``; this module only wires it to stdin/stdout.
"""

import sys
from datetime import datetime, timedelta
from typing import List, Optional

from cart import Cart
from checkout_service import CheckoutService
from config import load_settings
from customer import Customer
from errors import CheckoutError
from logging_config import configure_logging
from metrics import generate_metrics_text
from products import Product


def build_catalogue(now: Optional[datetime] = None) -> List[Product]:
    """Return the demo products; expirable ones expire one day after ``now``."""
    tomorrow = (now or datetime.now()) + timedelta(days=1)
    return [
        Product.expirable_shippable("Cheese", 100, 5, tomorrow, 0.4),
        Product.expirable("Biscuits", 150, 3, tomorrow),
        Product.shippable("TV", 3000, 2, 5.0),
        Product.plain("Scratch Card", 50, 10),
    ]


def run_demo(service: CheckoutService) -> None:
    cheese, biscuits, _tv, scratch_card = build_catalogue()
    customer = Customer("Reham", 1000)
    cart = Cart()
    cart.add(cheese, 2)
    cart.add(biscuits, 1)
    cart.add(scratch_card, 1)
    service.checkout(customer, cart)


def interactive_cli(service: CheckoutService) -> None:
    """Menu loop over the demo catalogue for a single customer."""
    products = build_catalogue()
    customer = Customer("Reham", 1000)
    cart = Cart()

    def print_menu() -> None:
        print("\n-- Checkout --")
        print("1. List Products")
        print("2. Add Product to Cart")
        print("3. View Cart")
        print("4. Checkout")
        print("5. Show Metrics")
        print("0. Exit")

    while True:
        print_menu()
        choice = input("Select an option: ").strip()
        if choice == "1":
            print("\nAvailable Products:")
            for idx, p in enumerate(products, start=1):
                tags = []
                if p.expiry is not None:
                    tags.append(f"expires {p.expiry:%Y-%m-%d}")
                if p.requires_shipping():
                    tags.append(f"ships {float(p.shipping_weight)}kg")
                suffix = f" [{', '.join(tags)}]" if tags else ""
                print(f"{idx}. {p.name} - ${p.price:.2f} (Stock: {p.quantity}){suffix}")
        elif choice == "2":
            try:
                idx = int(input("Enter Product number: "))
                qty = int(input("Enter quantity: "))
            except ValueError:
                print("Please enter valid numeric values.")
                continue
            if not 1 <= idx <= len(products):
                print("Product not found.")
                continue
            try:
                cart.add(products[idx - 1], qty)
            except ValueError as e:
                # InsufficientStockError has already printed its message
                if not isinstance(e, CheckoutError):
                    print(e)
                continue
            print(f"Added {qty} x {products[idx - 1].name} to cart")
        elif choice == "3":
            if cart.is_empty():
                print("Cart is empty.")
            else:
                print("\nCart Contents:")
                for item in cart:
                    print(f"{item.product.name} x {item.quantity} = ${item.total_price:.2f}")
                print(f"Subtotal: ${cart.subtotal():.2f}")
                print(f"Balance: ${customer.balance:.2f}")
        elif choice == "4":
            try:
                service.checkout(customer, cart)
            except CheckoutError as e:
                # a failed attempt keeps the stock it already took; the cart is never retried
                print(f"Checkout failed: {e}")
                print("Cart cleared.")
            cart = Cart()
        elif choice == "5":
            print(generate_metrics_text())
        elif choice == "0":
            print("Exiting application.")
            break
        else:
            print("Invalid option. Please try again.")


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    configure_logging(settings.log_dir, settings.log_level)
    service = CheckoutService(shipping_fee=settings.shipping_fee)
    try:
        if "--interactive" in args:
            interactive_cli(service)
            return 0
        run_demo(service)
    except CheckoutError as e:
        print(f"Checkout failed: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
