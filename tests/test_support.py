# --- path/bootstrap (keep this at the very top) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for p in (SRC, ROOT):
    if p.is_dir() and str(p) not in sys.path:
        sys.path.insert(0, str(p))
# --- end path/bootstrap ---

import io
import json
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import cli
from checkout_service import CheckoutService
from config import Settings, load_settings, load_shipping_fee
from logging_config import LOG_FILE_NAME, JsonFormatter, configure_logging
from metrics import Counter, Histogram, generate_metrics_text
from products import Product


class RootLoggerIsolation(unittest.TestCase):
    """Restore the root logger after tests that reconfigure it."""

    def setUp(self):
        root = logging.getLogger()
        self._handlers = list(root.handlers)
        self._level = root.level

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            if handler not in self._handlers:
                handler.close()
        for handler in self._handlers:
            root.addHandler(handler)
        root.setLevel(self._level)


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(load_settings({}), Settings(shipping_fee=15.0, log_level=logging.INFO, log_dir=None))

    def test_overrides(self):
        s = load_settings({
            "CHECKOUT_SHIPPING_FEE": "9.5",
            "CHECKOUT_LOG_LEVEL": "debug",
            "CHECKOUT_LOG_DIR": "/tmp/checkout-logs",
        })
        self.assertEqual(s.shipping_fee, 9.5)
        self.assertEqual(s.log_level, logging.DEBUG)
        self.assertEqual(s.log_dir, "/tmp/checkout-logs")

    def test_invalid_values(self):
        with self.assertRaises(ValueError) as ctx:
            load_settings({"CHECKOUT_SHIPPING_FEE": "free"})
        self.assertIn("CHECKOUT_SHIPPING_FEE", str(ctx.exception))
        with self.assertRaises(ValueError):
            load_settings({"CHECKOUT_SHIPPING_FEE": "-1"})
        with self.assertRaises(ValueError) as ctx:
            load_settings({"CHECKOUT_LOG_LEVEL": "LOUD"})
        self.assertIn("CHECKOUT_LOG_LEVEL", str(ctx.exception))

    def test_service_reads_fee_from_environment(self):
        with mock.patch.dict(os.environ, {"CHECKOUT_SHIPPING_FEE": "20"}):
            self.assertEqual(CheckoutService().shipping_fee, 20.0)

    def test_service_ignores_unrelated_bad_variables(self):
        env = {"CHECKOUT_LOG_LEVEL": "LOUD"}
        with mock.patch.dict(os.environ, env):
            os.environ.pop("CHECKOUT_SHIPPING_FEE", None)
            self.assertEqual(CheckoutService().shipping_fee, 15.0)
        self.assertEqual(load_shipping_fee({"CHECKOUT_SHIPPING_FEE": "4.5", "CHECKOUT_LOG_LEVEL": "LOUD"}), 4.5)
        with self.assertRaises(ValueError):
            load_shipping_fee({"CHECKOUT_SHIPPING_FEE": "free"})


class TestLogging(RootLoggerIsolation):

    def test_json_formatter_merges_extra(self):
        record = logging.LogRecord("checkout", logging.WARNING, __file__, 1, "Checkout %s", ("rejected",), None)
        record.extra = {"customer": "Reham", "error_type": "expired"}
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["message"], "Checkout rejected")
        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["customer"], "Reham")
        self.assertEqual(payload["error_type"], "expired")
        self.assertIn("timestamp", payload)

    def test_configure_logging_writes_file(self):
        with tempfile.TemporaryDirectory() as log_dir:
            configure_logging(log_dir, logging.INFO)
            root = logging.getLogger()
            self.assertEqual(len(root.handlers), 2)
            logging.getLogger("checkout_service").info("hello", extra={"extra": {"k": 1}})
            for handler in root.handlers:
                handler.flush()
            with open(os.path.join(log_dir, LOG_FILE_NAME), encoding="utf-8") as f:
                line = json.loads(f.readline())
            self.assertEqual(line["message"], "hello")
            self.assertEqual(line["k"], 1)
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()

    def test_configure_logging_console_only(self):
        configure_logging(None, logging.WARNING)
        root = logging.getLogger()
        self.assertEqual(len(root.handlers), 1)
        self.assertEqual(root.level, logging.WARNING)


class TestMetrics(unittest.TestCase):

    def test_counter_labels_and_export(self):
        c = Counter("test_orders_total", "Orders placed in tests", ["outcome"])
        c.inc(outcome="success")
        c.inc(2, outcome="success")
        self.assertEqual(c.value(outcome="success"), 3)
        self.assertEqual(c.value(outcome="failed"), 0)
        with self.assertRaises(ValueError):
            c.inc(-1, outcome="success")
        with self.assertRaises(ValueError):
            c.inc(status="x")
        self.assertIn('test_orders_total{outcome="success"} 3.0', generate_metrics_text())

    def test_histogram_buckets_are_cumulative(self):
        h = Histogram("test_latency_seconds", "Latency in tests", buckets=[0.1, 1.0])
        h.observe(0.05)
        h.observe(0.5)
        h.observe(5.0)
        self.assertEqual(h.count(), 3)
        lines = h.to_prometheus()
        self.assertIn('test_latency_seconds_bucket{le="0.1"} 1', lines)
        self.assertIn('test_latency_seconds_bucket{le="1.0"} 2', lines)
        self.assertIn('test_latency_seconds_bucket{le="+Inf"} 3', lines)
        self.assertIn("test_latency_seconds_count 3", lines)


class TestCli(RootLoggerIsolation):

    def setUp(self):
        super().setUp()
        env = mock.patch.dict(os.environ, {"CHECKOUT_LOG_LEVEL": "CRITICAL"})
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop("CHECKOUT_LOG_DIR", None)
        os.environ.pop("CHECKOUT_SHIPPING_FEE", None)

    def test_demo_prints_receipt(self):
        buf = io.StringIO()
        with redirect_stdout(buf):
            code = cli.main([])
        out = buf.getvalue()
        self.assertEqual(code, 0)
        self.assertIn("** Shipment notice **", out)
        self.assertIn("- Cheese 0.4kg", out)
        self.assertIn("Total: 415.0", out)
        self.assertIn("Balance left: 585.0", out)

    def test_demo_failure_exits_non_zero(self):
        with mock.patch.object(cli, "run_demo", side_effect=cli.CheckoutError("boom")):
            err = io.StringIO()
            with mock.patch("sys.stderr", err):
                self.assertEqual(cli.main([]), 1)
        self.assertIn("Checkout failed: boom", err.getvalue())

    def test_ctrl_c_exits_cleanly(self):
        buf = io.StringIO()
        with mock.patch.object(cli, "run_demo", side_effect=KeyboardInterrupt), redirect_stdout(buf):
            self.assertEqual(cli.main([]), 0)
        self.assertIn("Interrupted by user. Exiting.", buf.getvalue())

    def test_interactive_failed_checkout_clears_cart(self):
        tv = Product.shippable("TV", 3000, 2, 5.0)
        # add one TV the customer cannot afford, then check out three times
        answers = ["2", "1", "1", "4", "4", "4", "0"]
        buf = io.StringIO()
        with mock.patch.object(cli, "build_catalogue", return_value=[tv]), \
                mock.patch("builtins.input", side_effect=answers), redirect_stdout(buf):
            self.assertEqual(cli.main(["--interactive"]), 0)
        out = buf.getvalue()
        self.assertIn("Oops! Your balance is not enough for this order.", out)
        self.assertEqual(out.count("Cart cleared."), 3)
        self.assertEqual(out.count("Oops! Your balance is not enough"), 1)
        # only the first attempt touched stock
        self.assertEqual(tv.quantity, 1)

    def test_interactive_add_and_checkout(self):
        # add 2 Cheese, view cart, checkout, view the now empty cart, exit
        answers = ["2", "1", "2", "3", "4", "3", "0"]
        buf = io.StringIO()
        with mock.patch("builtins.input", side_effect=answers), redirect_stdout(buf):
            self.assertEqual(cli.main(["--interactive"]), 0)
        out = buf.getvalue()
        self.assertIn("Added 2 x Cheese to cart", out)
        self.assertIn("Subtotal: $200.00", out)
        self.assertIn("Total: 215.0", out)
        self.assertIn("Balance left: 785.0", out)
        self.assertIn("Cart is empty.", out)
        self.assertIn("Exiting application.", out)

    def test_interactive_rejects_over_stock(self):
        answers = ["2", "3", "9", "4", "0"]
        buf = io.StringIO()
        with mock.patch("builtins.input", side_effect=answers), redirect_stdout(buf):
            cli.main(["--interactive"])
        out = buf.getvalue()
        self.assertIn("Sorry, not enough in stock: TV", out)
        self.assertIn("Your cart is empty!", out)
        self.assertIn("Checkout failed: Cart is empty.", out)


if __name__ == "__main__":
    unittest.main(verbosity=2)
