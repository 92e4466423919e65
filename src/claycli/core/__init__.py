"""Core utilities for claycli."""

from claycli.core.backup import (
    DEFAULT_KEEP_COUNT,
    DEFAULT_KEEP_DAYS,
    backup_dir_for,
    create_backup,
    list_backups,
    rotate_backups,
    safe_write_text,
)
from claycli.core.config import get_paths, get_project_root

__all__ = [
    # Backup
    "backup_dir_for",
    "create_backup",
    "list_backups",
    "rotate_backups",
    "safe_write_text",
    "DEFAULT_KEEP_COUNT",
    "DEFAULT_KEEP_DAYS",
    # Config
    "get_project_root",
    "get_paths",
]
