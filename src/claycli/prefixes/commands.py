"""
Prefix CLI commands.

Adds or removes a site prefix across a dispatch file, streaming records from
the input to the output one at a time.
"""

from __future__ import annotations

import contextlib
import io
import re
import sys
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import IO, Any

import click
from rich.console import Console
from rich.table import Table

from claycli.config.commands import get_config_value
from claycli.core.backup import DEFAULT_KEEP_COUNT, DEFAULT_KEEP_DAYS, safe_write_text
from claycli.prefixes.dispatch import (
    DispatchError,
    read_dispatch,
    read_yaml,
    write_dispatch,
    write_yaml,
)
from claycli.prefixes.transform import Record, add, remove

# Records go to stdout, so status output goes to stderr
console = Console(stderr=True)

FORMATS = ["ndjson", "yaml"]
SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)

Transform = Callable[[Iterable[tuple[str, Any]], str], Iterator[Record]]


def normalize_prefix(value: str) -> str:
    """Turn a site URL into a bare prefix.

    Examples:
        "https://domain.com/" -> "domain.com"
        "domain.com/blog/" -> "domain.com/blog"
    """
    return SCHEME_PATTERN.sub("", value.strip()).rstrip("/")


def detect_format(input_path: str) -> str:
    """Pick a format from the file extension (stdin is ndjson)."""
    if Path(input_path).suffix.lower() in (".yml", ".yaml"):
        return "yaml"
    return "ndjson"


def _default_prefix() -> str | None:
    try:
        return get_config_value("prefix.default")
    except FileNotFoundError:
        return None


def _resolve_prefix(prefix_value: str | None) -> str:
    value = normalize_prefix(prefix_value or _default_prefix() or "")
    if not value:
        console.print("[red]No prefix given.[/red]")
        console.print("[dim]Pass --prefix or run 'clay config set prefix.default <site>'.[/dim]")
        raise SystemExit(1)
    return value


def _retention() -> tuple[int, int]:
    try:
        keep_count = int(get_config_value("backup.keep_count", DEFAULT_KEEP_COUNT))
        keep_days = int(get_config_value("backup.keep_days", DEFAULT_KEEP_DAYS))
    except FileNotFoundError:
        return DEFAULT_KEEP_COUNT, DEFAULT_KEEP_DAYS
    return keep_count, keep_days


@contextlib.contextmanager
def _open_input(input_path: str) -> Iterator[IO[str]]:
    if input_path == "-":
        yield sys.stdin
    else:
        with open(input_path, encoding="utf-8") as f:
            yield f


def _read_records(stream: IO[str], fmt: str) -> Iterator[Record]:
    if fmt == "yaml":
        return read_yaml(stream.read())
    return read_dispatch(stream)


def _print_summary(originals: list[Record], results: list[Record], prefix_value: str) -> None:
    keys_changed = sum(1 for o, r in zip(originals, results) if o.key != r.key)
    values_changed = sum(1 for o, r in zip(originals, results) if o.value != r.value)

    table = Table(title=f"Prefix [bold]{prefix_value}[/bold]", show_header=True, header_style="bold cyan")
    table.add_column("Records", justify="right")
    table.add_column("Keys rewritten", justify="right", style="green")
    table.add_column("Values rewritten", justify="right", style="green")
    table.add_row(str(len(originals)), str(keys_changed), str(values_changed))
    console.print(table)


def run_prefix(
    transform: Transform,
    prefix_value: str | None,
    input_path: str,
    output: str | None,
    in_place: bool,
    fmt: str | None,
    dry_run: bool,
) -> None:
    """Shared body of the add and remove commands."""
    value = _resolve_prefix(prefix_value)

    if in_place and (input_path == "-" or output):
        console.print("[red]--in-place needs an input file and no --output[/red]")
        raise SystemExit(1)

    fmt = fmt or detect_format(input_path)
    writer = write_yaml if fmt == "yaml" else write_dispatch

    try:
        with _open_input(input_path) as stream:
            records = _read_records(stream, fmt)

            if dry_run:
                originals = list(records)
                _print_summary(originals, list(transform(originals, value)), value)
                console.print("[yellow]DRY RUN - no changes made[/yellow]")
                return

            if in_place:
                buffer = io.StringIO()
                writer(transform(records, value), buffer)
                text = buffer.getvalue()
            elif output:
                with open(output, "w", encoding="utf-8") as out:
                    count = writer(transform(records, value), out)
                console.print(f"[green]Wrote {count} records to {output}[/green]")
                return
            else:
                writer(transform(records, value), sys.stdout)
                return
    except DispatchError as e:
        console.print(f"[red]Could not read {input_path}: {e}[/red]")
        raise SystemExit(1) from None

    keep_count, keep_days = _retention()
    backup_path = safe_write_text(Path(input_path), text, keep_last=keep_count, keep_days=keep_days)
    console.print(f"[green]Updated {input_path}[/green]")
    if backup_path:
        console.print(f"[dim]Backup: {backup_path}[/dim]")


def _prefix_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "-f", "--format", "fmt", type=click.Choice(FORMATS), default=None,
        help="Input/output format (default: from file extension)",
    )(func)
    func = click.option("-i", "--in-place", is_flag=True, help="Rewrite INPUT, keeping a backup")(func)
    func = click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write records to a file")(func)
    func = click.option("-p", "--prefix", "prefix_value", help="Site prefix, e.g. domain.com")(func)
    func = click.argument("input_path", default="-", type=click.Path(allow_dash=True, dir_okay=False))(func)
    return func


@click.group()
def prefix():
    """Add or remove a site prefix from Clay data.

    Rewrites record keys, _ref values and component lists in page areas.
    Text content is left alone.
    """
    pass


@prefix.command(name="add")
@_prefix_options
@click.pass_obj
def add_cmd(ctx, input_path: str, prefix_value: str | None, output: str | None, in_place: bool, fmt: str | None):
    """Add a site prefix to records in INPUT (default: stdin).

    Examples:
        clay prefix add site.ndjson -p domain.com
        cat site.ndjson | clay prefix add -p https://domain.com/ > prefixed.ndjson
    """
    dry_run = ctx.dry_run if ctx else False
    run_prefix(add, prefix_value, input_path, output, in_place, fmt, dry_run)


@prefix.command(name="remove")
@_prefix_options
@click.pass_obj
def remove_cmd(ctx, input_path: str, prefix_value: str | None, output: str | None, in_place: bool, fmt: str | None):
    """Remove a site prefix from records in INPUT (default: stdin).

    Records without the prefix pass through unchanged.

    Examples:
        clay prefix remove export.ndjson -p domain.com -o local.ndjson
    """
    dry_run = ctx.dry_run if ctx else False
    run_prefix(remove, prefix_value, input_path, output, in_place, fmt, dry_run)
