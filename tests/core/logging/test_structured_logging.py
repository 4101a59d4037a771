"""Tests for structured logging with trace propagation."""

from __future__ import annotations

import io
import json
from collections.abc import Iterator

import pytest

from climaseries.core.logging import LogConfig, StructuredLogger, configure_logging, get_logger
from climaseries.core.series import Climate


def _read_records(stream: io.StringIO) -> list[dict[str, object]]:
    stream.seek(0)
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


@pytest.fixture
def buffer() -> Iterator[io.StringIO]:
    stream = io.StringIO()
    yield stream
    configure_logging()


def _logger(buffer: io.StringIO, level: str = "INFO") -> StructuredLogger:
    return StructuredLogger(LogConfig(console_stream=buffer, console_output=True, file_output=False, level=level))


def test_structured_log_contains_trace_and_context(buffer) -> None:
    logger = _logger(buffer)

    with logger.context(trace_id="trace-123", climate="Berlin", error_code="MALFORMED_VALUE", request_id="req-42"):
        logger.logger.info("climate loaded", count=365)

    records = _read_records(buffer)
    assert len(records) == 1
    record = records[0]
    assert record["trace_id"] == "trace-123"
    assert record["climate"] == "Berlin"
    assert record["error_code"] == "MALFORMED_VALUE"
    assert record["context"]["request_id"] == "req-42"
    assert record["context"]["count"] == 365


def test_trace_id_propagates_within_context(buffer) -> None:
    logger = _logger(buffer)

    with logger.context() as trace_id:
        logger.logger.info("first event")
        logger.logger.info("second event")

    logger.logger.info("outside context")

    records = _read_records(buffer)
    assert len(records) == 3
    assert records[0]["trace_id"] == records[1]["trace_id"] == trace_id
    assert records[2]["trace_id"] != records[0]["trace_id"]


def test_trace_id_generated_when_missing(buffer) -> None:
    logger = _logger(buffer)

    logger.logger.info("single message")

    trace_id = _read_records(buffer)[0]["trace_id"]
    assert isinstance(trace_id, str)
    assert len(trace_id) == 32
    assert all(character in "0123456789abcdef" for character in trace_id)


def test_named_logger_and_level(buffer) -> None:
    _logger(buffer, level="WARNING")
    named = get_logger("climaseries.test")

    named.info("dropped")
    named.warning("kept")

    records = _read_records(buffer)
    assert [record["message"] for record in records] == ["kept"]
    assert records[0]["level"] == "WARNING"
    assert records[0]["logger"] == "climaseries.test"
    assert "context" not in records[0]


def test_failed_load_is_logged(buffer, climate_row) -> None:
    _logger(buffer)
    climate = Climate()

    climate.load_records([climate_row("Berlin", "2020-01-01", max_temp="warm")])

    records = _read_records(buffer)
    warning = next(record for record in records if record["message"] == "climate load stopped")
    assert warning["level"] == "WARNING"
    assert warning["climate"] == "Berlin"
    assert warning["error_code"] == "MALFORMED_VALUE"
    assert warning["context"]["inserted"] == 0


def test_file_sink_and_exceptions(buffer, tmp_path) -> None:
    path = tmp_path / "logs" / "climaseries.jsonl"
    StructuredLogger(LogConfig(console_output=False, file_output=True, file_path=str(path)))

    try:
        raise ValueError("bad row")
    except ValueError:
        get_logger("climaseries.test").exception("load failed")

    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert records[0]["message"] == "load failed"
    assert records[0]["level"] == "ERROR"
    assert records[0]["exception"] == "ValueError: bad row"
