"""
Main CLI dispatcher for claycli.

Usage:
    clay init                               # Initialize .clay/ directory
    clay prefix [add|remove]
    clay compile [bucket|bundles|path|changed|browsers]
    clay config [show|get|set|reset|path]
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from claycli import __version__

console = Console()
err_console = Console(stderr=True)


class Context:
    """Shared context for all commands."""

    def __init__(self, verbose: bool = False, dry_run: bool = False):
        self.verbose = verbose
        self.dry_run = dry_run
        self.console = console


def setup_logging(verbose: bool) -> None:
    """Send claycli debug logs to stderr through rich."""
    logger = logging.getLogger("claycli")
    if not verbose:
        logger.setLevel(logging.WARNING)
        return
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.setLevel(logging.DEBUG)
        return
    handler = RichHandler(console=err_console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


@click.group()
@click.version_option(version=__version__, prog_name="clay")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-n", "--dry-run", is_flag=True, help="Preview without making changes")
@click.pass_context
def main(ctx: click.Context, verbose: bool, dry_run: bool) -> None:
    """Clay site tools.

    Add or remove site prefixes in Clay data and help with asset builds.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj = Context(verbose=verbose, dry_run=dry_run)

    if dry_run:
        err_console.print("[yellow]DRY RUN MODE - No changes will be made[/yellow]")


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing .clay/ directory")
@click.pass_obj
def init(ctx, force: bool) -> None:
    """Initialize .clay/ directory structure.

    Creates the .clay/ directory used for settings and backups.
    """
    from claycli.core.config import get_project_root

    dry_run = ctx.dry_run if ctx else False

    try:
        project_root = get_project_root()
    except FileNotFoundError:
        # .clay/ doesn't exist yet, so use cwd
        from pathlib import Path
        project_root = Path.cwd()

    clay_dir = project_root / ".clay"

    if clay_dir.exists() and not force:
        console.print(f"[yellow].clay/ directory already exists at {clay_dir}[/yellow]")
        console.print("[dim]Use --force to reinitialize.[/dim]")
        return

    console.print(f"[cyan]Initializing .clay/ directory at {project_root}[/cyan]")

    for dir_path in (clay_dir, clay_dir / "backups"):
        if not dry_run:
            dir_path.mkdir(parents=True, exist_ok=True)
        console.print(f"  [green]Created[/green] {dir_path.relative_to(project_root)}")

    gitignore_path = project_root / ".gitignore"
    gitignore_entry = ".clay/backups/"

    if gitignore_path.exists():
        content = gitignore_path.read_text()
        if gitignore_entry not in content:
            if not dry_run:
                with open(gitignore_path, "a") as f:
                    f.write(f"\n# claycli backups\n{gitignore_entry}\n")
            console.print(f"  [green]Updated[/green] .gitignore with {gitignore_entry}")

    console.print()
    if dry_run:
        console.print("[yellow]DRY RUN - no changes made[/yellow]")
    else:
        console.print("[green]Done![/green] .clay/ directory initialized.")


# Import and register command groups (imports after main definition intentional)
from claycli.compilation.commands import compile_group  # noqa: E402
from claycli.config.commands import config  # noqa: E402
from claycli.prefixes.commands import prefix  # noqa: E402

main.add_command(prefix)
main.add_command(compile_group)
main.add_command(config)


if __name__ == "__main__":
    main()
