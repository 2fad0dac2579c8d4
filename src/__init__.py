"""Top-level package for the checkout application.

The domain lives in :mod:`products`, :mod:`cart` and :mod:`customer`;
:mod:`checkout_service` orchestrates a purchase and :mod:`cli` runs it
from the command line.
"""
