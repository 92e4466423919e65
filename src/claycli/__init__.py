"""claycli: site prefix and build helpers for Clay content."""

__version__ = "0.4.0"
