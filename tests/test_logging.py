"""Tests for the structured logging system (inventory_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from inventory_engines.valuation import ValuationMethod
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _handler_into(stream: StringIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler


@pytest.fixture
def emitted():
    """Configure logging into a buffer; calling the fixture returns the parsed lines."""
    stream = StringIO()
    configure_logging(handler=_handler_into(stream))

    def lines() -> list[dict]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line]

    return lines


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self, emitted):
        logger = get_logger("test")
        logger.info("hello")

        record = emitted()[0]
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "inventory_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self, emitted):
        get_logger("test").info("appended", extra={"quantity": 42, "type": "IN"})

        record = emitted()[0]
        assert record["quantity"] == 42
        assert record["type"] == "IN"

    def test_context_fields_included(self, emitted):
        LogContext.set(report_id="r-1", product_id="p1")
        get_logger("test").info("test_msg")

        record = emitted()[0]
        assert record["report_id"] == "r-1"
        assert record["product_id"] == "p1"

    def test_decimal_date_and_enum_serialized(self, emitted):
        get_logger("test").info("typed", extra={
            "value": Decimal("1500.25"),
            "as_of": date(2023, 10, 20),
            "valuation_method": ValuationMethod.LIFO,
        })

        record = emitted()[0]
        assert record["value"] == "1500.25"
        assert record["as_of"] == "2023-10-20"
        assert record["valuation_method"] == "LIFO"

    def test_uuid_serialized(self, emitted):
        uid = uuid4()
        get_logger("test").info("with_uuid", extra={"batch_id": uid})

        assert emitted()[0]["batch_id"] == str(uid)

    def test_exception_fields(self, emitted):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = emitted()[0]
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_kernel_exception_code_extracted(self, emitted):
        """Kernel exceptions carry a .code attribute and structured fields."""
        from inventory_kernel.exceptions import OverConsumptionError

        try:
            raise OverConsumptionError("p1", "t9", 8, 5)
        except OverConsumptionError:
            get_logger("test").error("valuation_failed", exc_info=True)

        record = emitted()[0]
        assert record["exc_code"] == "OVER_CONSUMPTION"
        assert record["exc_type"] == "OverConsumptionError"
        assert record["exc_transaction_id"] == "t9"
        assert record["exc_requested_quantity"] == 8
        assert record["exc_available_quantity"] == 5

    def test_no_context_fields_when_empty(self, emitted):
        get_logger("test").info("bare_message")

        record = emitted()[0]
        assert "report_id" not in record
        assert "product_id" not in record

    def test_valid_json_every_line(self, emitted):
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = emitted()
        # default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= set(record)


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", method="FIFO")
        assert LogContext.get_all() == {"correlation_id": "x", "method": "FIFO"}

    def test_clear(self):
        LogContext.set(report_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(product_id="outer")
        with LogContext.bind(product_id="inner"):
            assert LogContext.get_all()["product_id"] == "inner"
        assert LogContext.get_all()["product_id"] == "outer"

    def test_bind_restores_none(self):
        assert "report_id" not in LogContext.get_all()
        with LogContext.bind(report_id="temp"):
            assert LogContext.get_all()["report_id"] == "temp"
        assert "report_id" not in LogContext.get_all()

    def test_bind_ignores_unknown_fields(self):
        with LogContext.bind(method="LIFO", tenant="acme"):
            assert LogContext.get_all() == {"method": "LIFO"}

    def test_all_fields(self):
        LogContext.set(correlation_id="c", report_id="r", product_id="p", method="AVERAGE")
        ctx = LogContext.get_all()
        assert len(ctx) == 4
        assert ctx["method"] == "AVERAGE"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        configure_logging(handler=_handler_into(StringIO()))
        configure_logging(handler=_handler_into(StringIO()))  # second call is no-op
        assert len(logging.getLogger("inventory_kernel").handlers) == 1

    def test_get_logger_returns_child(self):
        assert get_logger("engines.valuation.report").name == "inventory_kernel.engines.valuation.report"

    def test_logger_hierarchy(self):
        stream = StringIO()
        configure_logging(handler=_handler_into(stream), level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = json.loads(stream.getvalue().splitlines()[0])
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "inventory_kernel.deep.nested.module"

    def test_reset_restores_propagation(self):
        configure_logging(stream=StringIO())
        reset_logging()
        root = logging.getLogger("inventory_kernel")
        assert root.handlers == []
        assert root.propagate is True
