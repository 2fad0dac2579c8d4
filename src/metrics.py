"""In-process checkout metrics using only the Python standard library.

Counters and histograms are registered in a module-level registry and
can be dumped in the Prometheus text exposition format with
``generate_metrics_text()``.  The CLI prints this dump on request; no
exporter or HTTP endpoint is involved.
"""

from collections import defaultdict
from threading import Lock
from typing import Dict, Iterable, List, Tuple


class Metric:
    """Base class for all metrics."""

    def __init__(self, name: str, description: str, label_names: Iterable[str] = ()):
        self.name = name
        self.description = description
        self.label_names = list(label_names)
        self._lock = Lock()
        _METRIC_REGISTRY.append(self)

    def _label_tuple(self, labels: Dict[str, str]) -> Tuple[str, ...]:
        unknown = set(labels) - set(self.label_names)
        if unknown:
            raise ValueError(f"Unknown labels for {self.name}: {sorted(unknown)}")
        return tuple(str(labels.get(k, "")) for k in self.label_names)

    def _format_labels(self, label_values: Tuple[str, ...], **more: str) -> str:
        pairs = [f'{name}="{value}"' for name, value in zip(self.label_names, label_values)]
        pairs.extend(f'{name}="{value}"' for name, value in more.items())
        return "{" + ",".join(pairs) + "}" if pairs else ""

    def to_prometheus(self) -> List[str]:
        raise NotImplementedError


class Counter(Metric):
    """Monotonic counter.  ``CHECKOUT_TOTAL.inc(outcome="success")``"""

    def __init__(self, name: str, description: str, label_names: Iterable[str] = ()):
        super().__init__(name, description, label_names)
        self._values: Dict[Tuple[str, ...], float] = defaultdict(float)

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        if amount < 0:
            raise ValueError("Counters can only be incremented.")
        key = self._label_tuple(labels)
        with self._lock:
            self._values[key] += amount

    def value(self, **labels: str) -> float:
        key = self._label_tuple(labels)
        with self._lock:
            return self._values.get(key, 0.0)

    def to_prometheus(self) -> List[str]:
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} counter"]
        with self._lock:
            for label_values, value in self._values.items():
                lines.append(f"{self.name}{self._format_labels(label_values)} {value}")
        return lines


class Histogram(Metric):
    """Histogram with fixed ascending bucket upper bounds.

    Observations above the largest bucket only show up in ``+Inf``.
    """

    def __init__(self, name: str, description: str, buckets: Iterable[float], label_names: Iterable[str] = ()):
        super().__init__(name, description, label_names)
        self.buckets = sorted(float(b) for b in buckets)
        self._counts: Dict[Tuple[str, ...], List[int]] = defaultdict(lambda: [0] * len(self.buckets))
        self._sums: Dict[Tuple[str, ...], float] = defaultdict(float)
        self._totals: Dict[Tuple[str, ...], int] = defaultdict(int)

    def observe(self, value: float, **labels: str) -> None:
        key = self._label_tuple(labels)
        with self._lock:
            for idx, upper in enumerate(self.buckets):
                if value <= upper:
                    self._counts[key][idx] += 1
            self._totals[key] += 1
            self._sums[key] += float(value)

    def count(self, **labels: str) -> int:
        key = self._label_tuple(labels)
        with self._lock:
            return self._totals.get(key, 0)

    def to_prometheus(self) -> List[str]:
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} histogram"]
        with self._lock:
            for label_values, total in self._totals.items():
                # counts are already cumulative: each observation lands in every bucket >= value
                for idx, upper in enumerate(self.buckets):
                    bucket_labels = self._format_labels(label_values, le=str(upper))
                    lines.append(f"{self.name}_bucket{bucket_labels} {self._counts[label_values][idx]}")
                inf_labels = self._format_labels(label_values, le="+Inf")
                lines.append(f"{self.name}_bucket{inf_labels} {total}")
                label_str = self._format_labels(label_values)
                lines.append(f"{self.name}_sum{label_str} {self._sums[label_values]}")
                lines.append(f"{self.name}_count{label_str} {total}")
        return lines


_METRIC_REGISTRY: List[Metric] = []


def generate_metrics_text() -> str:
    """Render every registered metric in Prometheus text format."""
    lines: List[str] = []
    for metric in _METRIC_REGISTRY:
        lines.extend(metric.to_prometheus())
    return "\n".join(lines)


# -----------------------------------------------------------------------------
# Metrics used by the checkout flow.
# -----------------------------------------------------------------------------

# Checkout attempts by outcome ("success" or "failed")
CHECKOUT_TOTAL = Counter(
    name="checkout_total",
    description="Total number of checkout attempts, labelled by outcome",
    label_names=["outcome"],
)

# Rejected checkouts by error type (empty_cart, expired, out_of_stock, insufficient_funds)
CHECKOUT_ERROR_TOTAL = Counter(
    name="checkout_error_total",
    description="Total number of checkout errors, labelled by type",
    label_names=["type"],
)

CHECKOUT_DURATION_SECONDS = Histogram(
    name="checkout_duration_seconds",
    description="Duration of checkout operations in seconds",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

SHIPPED_ITEMS_TOTAL = Counter(
    name="shipped_items_total",
    description="Total number of line items handed to the shipping service",
)
