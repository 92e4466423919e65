"""
Site prefix tools for Clay data.

Provides:
- Adding and removing a site prefix across a stream of records
- Reading and writing newline-delimited dispatch files
"""

from claycli.prefixes.dispatch import (
    DispatchError,
    format_dispatch,
    format_yaml,
    read_dispatch,
    read_yaml,
    records_from_dispatches,
    write_dispatch,
    write_yaml,
)
from claycli.prefixes.transform import (
    Record,
    Shape,
    add,
    add_prefix,
    is_reference,
    remove,
    remove_prefix,
    rewrite_value,
    shape_of,
)

__all__ = [
    # Transform
    "Record",
    "Shape",
    "add",
    "remove",
    "add_prefix",
    "remove_prefix",
    "is_reference",
    "rewrite_value",
    "shape_of",
    # Dispatch
    "DispatchError",
    "read_dispatch",
    "read_yaml",
    "records_from_dispatches",
    "format_dispatch",
    "write_dispatch",
    "format_yaml",
    "write_yaml",
]
