"""Settings of the JSON log output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# context keys written at the top level of every JSON line
DEFAULT_PROMOTED_KEYS = ("climate", "error_code")


class LogConfig(BaseModel):
    """Where JSON log lines go and which context keys get their own column.

    ``console_stream`` defaults to ``sys.stderr``. A ``file_path`` adds a
    JSON-lines file next to the console output.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: str = "INFO"
    console_output: bool = True
    console_stream: Any = None
    file_output: bool = False
    file_path: str | None = None
    promoted_keys: tuple[str, ...] = DEFAULT_PROMOTED_KEYS
    extra: dict[str, Any] = Field(default_factory=dict)


__all__ = ["DEFAULT_PROMOTED_KEYS", "LogConfig"]
