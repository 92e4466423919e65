"""
Backups for dispatch files rewritten in place.

Before ``clay prefix --in-place`` replaces a file, its old contents are copied
to ``.clay/backups/<stem>_<YYYYmmdd_HHMMSS><suffix>``. Outside an initialized
project the copy goes to a ``backups/`` folder next to the file instead.

Rotation only ever looks at backups of the file being written, so
``site.ndjson`` never prunes the backups of ``site_other.ndjson``.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import shutil
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

from claycli.core.config import get_paths

logger = logging.getLogger(__name__)

DEFAULT_KEEP_COUNT = 10
DEFAULT_KEEP_DAYS = 30
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
TIMESTAMP_PATTERN = re.compile(r"_(\d{8}_\d{6})(?:\.|$)")


def parse_backup_timestamp(filename: str) -> datetime | None:
    """Extract the timestamp from a name like 'site_20251212_144234.ndjson'."""
    match = TIMESTAMP_PATTERN.search(filename)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1), TIMESTAMP_FORMAT)
    except ValueError:
        return None


def backup_dir_for(file_path: Path) -> Path:
    """Where backups of *file_path* go: the project's .clay/backups if any."""
    try:
        return get_paths().backups
    except FileNotFoundError:
        return Path(file_path).parent / "backups"


def backup_name_pattern(file_path: Path) -> re.Pattern[str]:
    """Match backup names of exactly *file_path* and no other file."""
    file_path = Path(file_path)
    return re.compile(
        rf"^{re.escape(file_path.stem)}_\d{{8}}_\d{{6}}{re.escape(file_path.suffix)}$"
    )


def create_backup(file_path: Path, backup_dir: Path) -> Path:
    """Copy *file_path* into *backup_dir* under a timestamped name.

    Raises:
        FileNotFoundError: If file_path doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Cannot backup non-existent file: {file_path}")

    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    backup_path = backup_dir / f"{file_path.stem}_{stamp}{file_path.suffix}"
    shutil.copy2(file_path, backup_path)
    logger.debug("backed up %s to %s", file_path, backup_path)
    return backup_path


def list_backups(file_path: Path, backup_dir: Path) -> list[Path]:
    """Backups of *file_path* in *backup_dir*, newest first."""
    backup_dir = Path(backup_dir)
    if not backup_dir.is_dir():
        return []

    pattern = backup_name_pattern(file_path)
    found = [p for p in backup_dir.iterdir() if pattern.match(p.name)]
    return sorted(found, key=lambda p: p.name, reverse=True)


def rotate_backups(
    file_path: Path,
    backup_dir: Path,
    keep_last: int = DEFAULT_KEEP_COUNT,
    keep_days: int | None = DEFAULT_KEEP_DAYS,
) -> list[Path]:
    """Delete old backups of *file_path*.

    The newest *keep_last* backups always survive. Past those, a backup is
    deleted once it is older than *keep_days*, or straight away when
    *keep_days* is None. Backups with an unreadable date are left alone.

    Returns:
        The deleted backup paths
    """
    cutoff = None if keep_days is None else datetime.now() - timedelta(days=keep_days)
    removed = []

    for backup in list_backups(file_path, backup_dir)[keep_last:]:
        if cutoff is not None:
            stamp = parse_backup_timestamp(backup.name)
            if stamp is None or stamp >= cutoff:
                continue
        backup.unlink()
        removed.append(backup)

    if removed:
        logger.debug("removed %d old backups of %s", len(removed), file_path)
    return removed


def _replace_text(file_path: Path, text: str) -> None:
    fd, temp_path = tempfile.mkstemp(prefix=f".{file_path.name}.", dir=file_path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, file_path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_path)
        raise


def safe_write_text(
    file_path: Path,
    text: str,
    backup_dir: Path | None = None,
    keep_last: int = DEFAULT_KEEP_COUNT,
    keep_days: int | None = DEFAULT_KEEP_DAYS,
) -> Path | None:
    """Replace *file_path* with *text*, backing up what was there.

    The new contents are written to a temporary file beside the target and
    swapped in with os.replace, so readers never see a half-written file.
    The backup just taken is never rotated away.

    Args:
        file_path: File to write
        text: New contents
        backup_dir: Backup location (default: see backup_dir_for)
        keep_last: Number of most recent backups to always keep
        keep_days: Age after which older backups are deleted

    Returns:
        The backup path, or None if the file did not exist yet
    """
    file_path = Path(file_path)
    backup_path = None

    if file_path.exists():
        backup_dir = Path(backup_dir) if backup_dir else backup_dir_for(file_path)
        backup_path = create_backup(file_path, backup_dir)
        rotate_backups(file_path, backup_dir, max(keep_last, 1), keep_days)

    _replace_text(file_path, text)
    return backup_path
