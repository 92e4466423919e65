"""
Dispatch files: the record source and sink used by the CLI.

A dispatch is newline-delimited JSON where each line is an object mapping one
or more record keys to their values::

    {"/_components/foo/instances/bar": {"a": "b"}}
    {"/_pages/abc": {"main": ["/_components/foo/instances/bar"]}}

YAML documents with a top-level mapping of keys to values are also accepted.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import IO, Any

import yaml

from claycli.prefixes.transform import Record

logger = logging.getLogger(__name__)


class DispatchError(ValueError):
    """Raised when a dispatch line or document cannot be parsed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


def records_from_dispatches(dispatches: Iterable[Mapping[str, Any]]) -> Iterator[Record]:
    """Flatten dispatch objects into records, preserving key order."""
    for dispatch in dispatches:
        for key, value in dispatch.items():
            yield Record(key, value)


def read_dispatch(lines: Iterable[str]) -> Iterator[Record]:
    """Lazily parse newline-delimited JSON into records.

    Args:
        lines: Any iterable of text lines (an open file, stdin, a list).

    Yields:
        One Record per key, in document order.

    Raises:
        DispatchError: On the first malformed or non-object line. Records
            from earlier lines have already been yielded by then.
    """
    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text:
            logger.debug("Skipping blank line %d", lineno)
            continue

        try:
            dispatch = json.loads(text)
        except json.JSONDecodeError as e:
            raise DispatchError(f"invalid JSON ({e.msg})", line=lineno) from e

        if not isinstance(dispatch, dict):
            raise DispatchError(
                f"expected an object, got {type(dispatch).__name__}", line=lineno
            )

        yield from records_from_dispatches([dispatch])


def read_yaml(text: str) -> Iterator[Record]:
    """Parse a YAML document mapping record keys to values.

    Raises:
        DispatchError: If the YAML is invalid or not a mapping.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DispatchError(f"invalid YAML: {e}") from e

    if data is None:
        return iter(())
    if not isinstance(data, dict):
        raise DispatchError(f"expected a mapping, got {type(data).__name__}")

    return records_from_dispatches([data])


def format_dispatch(record: tuple[str, Any]) -> str:
    """Format a record as a single dispatch line (no trailing newline)."""
    key, value = record
    return json.dumps({key: value}, ensure_ascii=False, separators=(",", ":"))


def format_yaml(record: tuple[str, Any]) -> str:
    """Format a record as a top-level YAML mapping entry."""
    key, value = record
    return yaml.safe_dump({key: value}, default_flow_style=False, sort_keys=False, allow_unicode=True)


def write_yaml(records: Iterable[tuple[str, Any]], stream: IO[str]) -> int:
    """Write records to *stream* as one YAML mapping, a record at a time.

    Returns:
        Number of records written.
    """
    count = 0
    for record in records:
        stream.write(format_yaml(record))
        stream.flush()
        count += 1
    return count


def write_dispatch(records: Iterable[tuple[str, Any]], stream: IO[str]) -> int:
    """Write records to *stream* one line at a time.

    Each record is flushed as soon as it is written so downstream readers
    see output while the source is still being consumed.

    Returns:
        Number of records written.
    """
    count = 0
    for record in records:
        stream.write(format_dispatch(record))
        stream.write("\n")
        stream.flush()
        count += 1
    return count
