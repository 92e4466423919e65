"""
Helpers shared by the asset compilation scripts.

Covers timing output, alphabet bucketing of files into bundles, change
detection and file-watch reporting, and config-backed browser targets.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from claycli.config.commands import get_config_value

# Six buckets is the sweet spot for file size vs. bundle count over http/1.1
# and http/2. Non-alphabetic names go in the last bucket, which is the
# smallest in practice.
BUCKETS = ("a-d", "e-h", "i-l", "m-p", "q-t", "u-z")

# Used by styles and script transpilation when the config sets no targets
BROWSERSLIST = {"browsers": ["> 3%", "not and_uc > 0"]}

IGNORED_CHANGES = (".DS_Store",)

# Per-component files that share a basename across every component directory
COMPONENT_FILES = ("model", "template", "kiln", "client")


def format_duration(t2: float, t1: float) -> str:
    """Format how long a compilation task took.

    Args:
        t2: End timestamp in milliseconds
        t1: Start timestamp in milliseconds

    Returns:
        e.g. "4.20s", or "1m 4.20s" when longer than a minute
    """
    diff = int(t2 - t1)
    minutes, rest = divmod(diff, 60 * 1000)
    seconds, millis = divmod(rest, 1000)
    formatted = f"{seconds}.{millis // 10:02d}s"

    if diff > 60 * 1000:
        return f"{minutes}m {formatted}"
    return formatted


def bucket(name: str) -> str:
    """Find which alphabet bucket the first letter of *name* falls into.

    Returns:
        One of 'a-d', 'e-h', 'i-l', 'm-p', 'q-t', 'u-z'
    """
    first = name[:1].lower()
    for matcher in BUCKETS[:-1]:
        start, end = matcher.split("-")
        if start <= first <= end:
            return matcher
    return BUCKETS[-1]


def unbucket(name: str) -> str | None:
    """Find the bucket id contained in a bundle name like '_templates-a-d'."""
    return next((matcher for matcher in BUCKETS if matcher in name), None)


def generate_bundles(prefix: str, ext: str) -> dict[str, str]:
    """Map each bundle filename to the glob of files it collects.

    Args:
        prefix: Bundle name prefix without trailing hyphen
        ext: File extension without dot
    """
    return {f"{prefix}-{matcher}.{ext}": f"**/[{matcher}]*.{ext}" for matcher in BUCKETS}


def component_file_name(filepath: str) -> str:
    """Name a per-component file after its component.

    Every component keeps its model in 'components/<name>/model.js', so
    bundling needs the component name in front: 'components/article/model.js'
    becomes 'components/article/article.model.js'. Other files are unchanged.
    """
    path = Path(filepath)
    stem = path.name.split(".")[0]
    if stem not in COMPONENT_FILES or not path.parent.name:
        return filepath
    return str(path.with_name(f"{path.parent.name}.{path.name}"))


def transform_path(
    prefix: str, dest_path: str | Path, should_minify: bool
) -> Callable[[str], str]:
    """Build a path transform for compiled output.

    When minifying, each file is routed into one of the six bucket bundles
    based on the first letter of its name. Otherwise paths are unchanged.

    Args:
        prefix: Bundle prefix, e.g. '_templates', '_models'
        dest_path: Destination directory
        should_minify: Whether files are being bundled
    """

    def _transform(filepath: str) -> str:
        if not should_minify:
            return filepath
        name = os.path.basename(filepath).lower().split(".")[0]
        return os.path.join(str(dest_path), f"{prefix}-{bucket(name)}.js")

    return _transform


def has_changed(source: Path, target: Path) -> bool:
    """Check whether *source* needs recompiling into *target*.

    A missing target always counts as changed.
    """
    try:
        target_stat = Path(target).stat()
    except FileNotFoundError:
        return True
    return Path(source).stat().st_ctime > target_stat.st_ctime


def is_ignored_change(filepath: str) -> bool:
    """Return True for file-watch events that shouldn't be reported."""
    return any(ignored in filepath for ignored in IGNORED_CHANGES)


def describe_change(filepath: str, cwd: str | None = None) -> str:
    """Render a changed file path relative to the working directory."""
    if cwd is None:
        cwd = os.getcwd()
    return filepath.replace(cwd, "")


def get_config_or_browserslist(key: str) -> Any:
    """Get a config value, falling back to the default browsers list."""
    value = get_config_value(key)
    return value if value else BROWSERSLIST
