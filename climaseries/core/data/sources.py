"""Record sources reading CSV exports."""

from __future__ import annotations

import csv
import gzip
import io
from collections.abc import Iterator
from typing import IO

GZIP_MAGIC = b"\x1f\x8b"

Row = dict[str, str]


def open_text(stream: IO[bytes], encoding: str = "utf-8-sig") -> io.TextIOWrapper:
    """Wrap a binary stream as text, gunzipping it when it is gzip data."""

    buffered = stream if isinstance(stream, io.BufferedReader) else io.BufferedReader(stream)  # type: ignore[arg-type]
    raw: IO[bytes] = buffered
    if buffered.peek(2)[:2] == GZIP_MAGIC:
        raw = gzip.GzipFile(fileobj=buffered, mode="rb")
    return io.TextIOWrapper(raw, encoding=encoding, newline="")


def read_csv_records(stream: IO[bytes], *, delimiter: str = ",") -> Iterator[Row]:
    """Yield each CSV row of ``stream`` as a column name to value mapping.

    Cells missing at the end of short rows are returned as empty strings.
    """

    text = open_text(stream)
    reader = csv.DictReader(text, delimiter=delimiter, restval="")
    for row in reader:
        row.pop(None, None)  # surplus cells of long rows
        yield row


def parse_csv_text(text: str, *, delimiter: str = ",") -> list[Row]:
    """Parse an already decoded CSV document."""

    reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=delimiter, restval="")
    rows: list[Row] = []
    for row in reader:
        row.pop(None, None)
        rows.append(row)
    return rows


__all__ = ["GZIP_MAGIC", "Row", "open_text", "parse_csv_text", "read_csv_records"]
