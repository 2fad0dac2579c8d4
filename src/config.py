"""
Environment-driven settings for the checkout application.

Variables:

* ``CHECKOUT_SHIPPING_FEE`` - flat fee charged per shippable line (15.0)
* ``CHECKOUT_LOG_LEVEL`` - logging level name (INFO)
* ``CHECKOUT_LOG_DIR`` - directory for the rotating log file; when unset
  logs only go to the console
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SHIPPING_FEE = 15.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    shipping_fee: float = DEFAULT_SHIPPING_FEE
    log_level: int = logging.INFO
    log_dir: Optional[str] = None


def _parse_fee(raw: str) -> float:
    try:
        fee = float(raw)
    except ValueError:
        raise ValueError(f"CHECKOUT_SHIPPING_FEE must be a number, got {raw!r}") from None
    if fee < 0:
        raise ValueError("CHECKOUT_SHIPPING_FEE cannot be negative")
    return fee


def _parse_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"CHECKOUT_LOG_LEVEL is not a logging level: {raw!r}")
    return level


def load_shipping_fee(environ: Optional[Mapping[str, str]] = None) -> float:
    """Read only ``CHECKOUT_SHIPPING_FEE``; other variables are not validated."""
    env = os.environ if environ is None else environ
    return _parse_fee(env.get("CHECKOUT_SHIPPING_FEE", str(DEFAULT_SHIPPING_FEE)))


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    return Settings(
        shipping_fee=load_shipping_fee(env),
        log_level=_parse_level(env.get("CHECKOUT_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        log_dir=env.get("CHECKOUT_LOG_DIR") or None,
    )
