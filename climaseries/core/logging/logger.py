"""JSON-lines logging on top of loguru.

Every line carries a trace id. Code that loads or fetches a climate wraps the
work in :func:`log_context` so nested events share the trace id and report
the climate they belong to.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger
from loguru._logger import Logger as _LoguruLogger  # type: ignore[attr-defined]

from climaseries.core.logging.config import LogConfig

_TRACE_ID: ContextVar[str | None] = ContextVar("climaseries_trace_id", default=None)
_CONTEXT: ContextVar[dict[str, Any]] = ContextVar("climaseries_log_context", default={})

_RESERVED = frozenset({"trace_id", "logger_name"})


def _new_trace_id() -> str:
    return uuid4().hex


def current_trace_id() -> str:
    """Trace id of the running context, created on first use."""

    trace_id = _TRACE_ID.get()
    if trace_id is None:
        trace_id = _new_trace_id()
        _TRACE_ID.set(trace_id)
    return trace_id


def _merge_context(record: dict[str, Any]) -> None:
    # explicit keyword arguments of a log call win over the surrounding context
    extra = record["extra"]
    extra.setdefault("trace_id", current_trace_id())
    for key, value in _CONTEXT.get().items():
        if extra.get(key) is None:
            extra[key] = value


def _to_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


class JsonLineSink:
    """Writes each record as one JSON object per line.

    Accepts an open text stream or a file path; the file is appended to and
    its directory created if needed.
    """

    def __init__(self, target: IO[str] | str | Path, promoted_keys: tuple[str, ...]) -> None:
        self._stream: IO[str] | None = None
        self._path: Path | None = None
        if isinstance(target, (str, Path)):
            self._path = Path(target)
            self._path.parent.mkdir(parents=True, exist_ok=True)
        else:
            self._stream = target
        self._promoted = promoted_keys

    def payload(self, record: dict[str, Any]) -> dict[str, Any]:
        extra = record["extra"]
        payload: dict[str, Any] = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "message": record["message"],
            "logger": extra.get("logger_name"),
            "trace_id": extra.get("trace_id"),
        }
        for key in self._promoted:
            payload[key] = extra.get(key)
        context = {k: v for k, v in extra.items() if k not in _RESERVED and k not in self._promoted}
        if context:
            payload["context"] = context
        exception = record["exception"]
        if exception is not None:
            payload["exception"] = f"{exception.type.__name__}: {exception.value}"
        return payload

    def __call__(self, message: Any) -> None:
        line = json.dumps(self.payload(message.record), default=_to_json) + "\n"
        if self._path is not None:
            with self._path.open("a", encoding="utf-8") as file:
                file.write(line)
            return
        self._stream.write(line)
        self._stream.flush()


def _apply(config: LogConfig) -> None:
    handlers: list[dict[str, Any]] = []
    if config.console_output:
        sink = JsonLineSink(config.console_stream or sys.stderr, config.promoted_keys)
        handlers.append({"sink": sink, "level": config.level})
    if config.file_output and config.file_path:
        handlers.append({"sink": JsonLineSink(config.file_path, config.promoted_keys), "level": config.level})
    logger.configure(handlers=handlers, patcher=_merge_context, extra=dict(config.extra))


def configure_logging(level: str = "INFO", **kwargs: Any) -> None:
    """Replace all log handlers, see :class:`LogConfig` for the options."""

    _apply(LogConfig(level=level, **kwargs))


class StructuredLogger:
    """Owns a logging setup and hands out the configured loguru logger."""

    def __init__(self, config: LogConfig | None = None) -> None:
        self.config = config or LogConfig()
        _apply(self.config)
        self.logger: _LoguruLogger = logger

    def configure(self, **kwargs: Any) -> None:
        self.config = self.config.model_copy(update=kwargs)
        _apply(self.config)

    @contextmanager
    def context(self, *, trace_id: str | None = None, **extra: Any) -> Iterator[str]:
        with log_context(trace_id=trace_id, **extra) as active:
            yield active


def get_logger(name: str | None = None) -> _LoguruLogger:
    """Module logger; ``name`` ends up in the ``logger`` column."""

    if name:
        return logger.bind(logger_name=name)
    return logger


@contextmanager
def log_context(*, trace_id: str | None = None, **extra: Any) -> Iterator[str]:
    """Attach a trace id (new unless given) and ``extra`` to nested events.

    Contexts nest; inner values override outer ones until the block exits.
    """

    context_token = _CONTEXT.set({**_CONTEXT.get(), **extra})
    active = trace_id or _new_trace_id()
    trace_token = _TRACE_ID.set(active)
    try:
        yield active
    finally:
        _TRACE_ID.reset(trace_token)
        _CONTEXT.reset(context_token)


configure_logging()


__all__ = [
    "JsonLineSink",
    "StructuredLogger",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "logger",
]
