"""Asset compilation helpers."""
