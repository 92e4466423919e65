"""
Compilation helper CLI commands.

Exposes bundle bucketing and change detection used by asset build scripts.
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from claycli.compilation.helpers import (
    BROWSERSLIST,
    bucket,
    component_file_name,
    describe_change,
    generate_bundles,
    get_config_or_browserslist,
    has_changed,
    is_ignored_change,
    transform_path,
)
from claycli.config.commands import get_config_value

console = Console()


def _should_minify(minify: bool | None) -> bool:
    if minify is not None:
        return minify
    try:
        return bool(get_config_value("compile.minify", False))
    except FileNotFoundError:
        return False


@click.group(name="compile")
def compile_group():
    """Helpers for compiling and bundling assets."""
    pass


@compile_group.command(name="bucket")
@click.argument("names", nargs=-1, required=True)
def bucket_cmd(names: tuple[str, ...]):
    """Show the alphabet bucket for each NAME."""
    for name in names:
        console.print(f"{name} [cyan]{bucket(name)}[/cyan]")


@compile_group.command(name="bundles")
@click.argument("prefix")
@click.argument("ext")
def bundles_cmd(prefix: str, ext: str):
    """Show the bundle files generated for PREFIX and EXT.

    Examples:
        clay compile bundles _templates js
    """
    table = Table(title="Bundles", show_header=True, header_style="bold cyan")
    table.add_column("Bundle", style="green")
    table.add_column("Glob", style="dim")

    for bundle_name, glob in generate_bundles(prefix, ext).items():
        table.add_row(bundle_name, escape(glob))

    console.print(table)


@compile_group.command(name="path")
@click.argument("files", nargs=-1, required=True)
@click.option("--prefix", default="_models", show_default=True, help="Bundle prefix")
@click.option("--dest", default="public/js", show_default=True, help="Destination directory")
@click.option("--minify/--no-minify", default=None, help="Override compile.minify")
def path_cmd(files: tuple[str, ...], prefix: str, dest: str, minify: bool | None):
    """Show where each compiled file ends up.

    Component files like components/article/model.js are bucketed by their
    component name.

    Examples:
        clay compile path components/article/model.js --minify
    """
    transform = transform_path(prefix, dest, _should_minify(minify))
    for filepath in files:
        target = transform(component_file_name(filepath))
        console.print(f"{filepath} [dim]->[/dim] [green]{target}[/green]")


@compile_group.command(name="changed")
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--dest", required=True, type=click.Path(file_okay=False), help="Compiled output directory")
def changed_cmd(sources: tuple[str, ...], dest: str):
    """List SOURCES that are newer than their compiled copy in DEST."""
    dest_dir = Path(dest)
    count = 0

    for source in sources:
        if is_ignored_change(source):
            continue
        if has_changed(Path(source), dest_dir / Path(source).name):
            console.print(f"[green]✓[/green] [dim]{describe_change(source)}[/dim]")
            count += 1

    if count == 0:
        console.print("[dim]Everything is up to date.[/dim]")


@compile_group.command(name="browsers")
@click.option("--key", default="compile.browsers", show_default=True, help="Config key to read")
def browsers_cmd(key: str):
    """Show the browser targets used for compilation."""
    try:
        targets = get_config_or_browserslist(key)
    except FileNotFoundError:
        targets = BROWSERSLIST
    console.print(targets)
