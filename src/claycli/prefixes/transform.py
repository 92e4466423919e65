"""
Site prefix rewriting for Clay records.

A record is a ``(key, value)`` pair where the key is a path such as
``/_components/foo/instances/bar`` and the value is arbitrarily nested data.
Adding a prefix turns that key into ``domain.com/_components/foo/instances/bar``
and rewrites every structural reference inside the value the same way.
Removing a prefix is the inverse.

Only two positions inside a value are treated as references:

  - the string value of a ``_ref`` key in a mapping
  - a reference-shaped string element of a list (page areas such as ``main``)

Any other string is content and is never touched, even when it contains a URL
that looks like a component path.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from enum import Enum
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

REF_KEY = "_ref"
REFERENCE_SEGMENTS = ("/_components/", "/_pages/")


class Record(NamedTuple):
    """A single keyed record from a Clay data stream."""

    key: str
    value: Any


class Shape(Enum):
    """Structural shape of a value, used to dispatch the traversal."""

    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


def shape_of(value: Any) -> Shape:
    """Classify a value as a mapping, an ordered sequence or a scalar.

    Strings are scalars even though they are sequences of characters.
    """
    if isinstance(value, Mapping):
        return Shape.MAPPING
    if isinstance(value, (list, tuple)):
        return Shape.SEQUENCE
    return Shape.SCALAR


def is_reference(value: Any) -> bool:
    """Check whether a value is a component or page path.

    The segment may appear anywhere in the string, since references can
    already carry some other site's prefix.
    """
    return isinstance(value, str) and any(seg in value for seg in REFERENCE_SEGMENTS)


def add_prefix(value: str, prefix: str) -> str:
    """Prepend *prefix* unless *value* already starts with it."""
    if value.startswith(prefix):
        return value
    return prefix + value


def remove_prefix(value: str, prefix: str) -> str:
    """Strip a leading *prefix*; values without it are returned as-is."""
    if prefix and value.startswith(prefix):
        return value[len(prefix):]
    return value


def rewrite_value(value: Any, rewrite: Callable[[str], str]) -> Any:
    """Return a copy of *value* with every structural reference rewritten.

    Args:
        value: Record value (mappings, lists, strings, numbers, bools, None).
        rewrite: String operation applied to each reference.

    Returns:
        New value of the same shape. The input is never mutated.
    """
    shape = shape_of(value)

    if shape is Shape.MAPPING:
        result = {}
        for key, child in value.items():
            if key == REF_KEY and isinstance(child, str):
                result[key] = rewrite(child)
            else:
                if key == REF_KEY:
                    logger.debug("Leaving non-string _ref unchanged: %r", child)
                result[key] = rewrite_value(child, rewrite)
        return result

    if shape is Shape.SEQUENCE:
        return [
            rewrite(item) if is_reference(item) else rewrite_value(item, rewrite)
            for item in value
        ]

    return value


def _rewrite_records(
    records: Iterable[tuple[str, Any]],
    rewrite_key: Callable[[str], str],
    rewrite: Callable[[str], str],
) -> Iterator[Record]:
    for key, value in records:
        yield Record(rewrite_key(key), rewrite_value(value, rewrite))


def add(records: Iterable[tuple[str, Any]], prefix: str) -> Iterator[Record]:
    """Add a site prefix to each record's key and embedded references.

    Records are consumed lazily and emitted in input order, one at a time.
    Keys are prefixed by plain concatenation; references are only prefixed
    when they don't already start with *prefix*.

    Args:
        records: Iterable of ``(key, value)`` pairs; may be unbounded.
        prefix: Site identifier such as ``domain.com`` (no scheme, no
            trailing slash).

    Yields:
        Rewritten records.
    """

    def rewrite_key(key: str) -> str:
        if not key.startswith("/"):
            logger.debug("Key does not start with '/': %s", key)
        return prefix + key

    return _rewrite_records(records, rewrite_key, lambda ref: add_prefix(ref, prefix))


def remove(records: Iterable[tuple[str, Any]], prefix: str) -> Iterator[Record]:
    """Remove a site prefix from each record's key and embedded references.

    Keys and references that don't start with *prefix* pass through
    unchanged.

    Args:
        records: Iterable of ``(key, value)`` pairs; may be unbounded.
        prefix: Site identifier that was previously added.

    Yields:
        Rewritten records.
    """

    def rewrite_key(key: str) -> str:
        if not key.startswith(prefix):
            logger.debug("Key is not prefixed with %s: %s", prefix, key)
        return remove_prefix(key, prefix)

    return _rewrite_records(records, rewrite_key, lambda ref: remove_prefix(ref, prefix))
