"""Customer wallet."""

from __future__ import annotations

import logging

from errors import InsufficientFundsError

logger = logging.getLogger(__name__)


class Customer:
    """A named customer holding a spendable balance."""

    def __init__(self, name: str, balance: float) -> None:
        if balance < 0:
            raise ValueError("Balance cannot be negative.")
        self.name = name
        self._balance = balance

    @property
    def balance(self) -> float:
        return self._balance

    def deduct(self, amount: float) -> None:
        """Withdraw ``amount`` from the balance.

        :raises InsufficientFundsError: if the balance does not cover it;
            the balance is left untouched in that case.
        """
        if self._balance < amount:
            print("Oops! Your balance is not enough for this order.")
            raise InsufficientFundsError(self._balance, amount)
        self._balance -= amount
        logger.debug("Deducted %.2f from %s", amount, self.name)

    def __repr__(self) -> str:
        return f"Customer(name={self.name!r}, balance={self._balance!r})"
