"""
Configuration management CLI commands.

Settings live in .clay/config.yaml as nested sections (``prefix``, ``backup``,
``compile``) and are addressed by dotted keys such as ``prefix.default``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from claycli.core.backup import DEFAULT_KEEP_COUNT, DEFAULT_KEEP_DAYS
from claycli.core.config import get_paths

console = Console()

TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class Setting:
    """A known configuration key."""

    default: Any
    kind: type
    description: str

    def parse(self, raw: str) -> Any:
        """Convert a command-line string to this setting's type.

        Raises:
            ValueError: If raw isn't a valid value
        """
        if self.kind is bool:
            return raw.strip().lower() in TRUE_VALUES
        if self.kind is list:
            return [item.strip() for item in raw.split(",") if item.strip()]
        return self.kind(raw)


SETTINGS: dict[str, Setting] = {
    "prefix.default": Setting(None, str, "Site prefix used when 'clay prefix' gets none"),
    "backup.keep_count": Setting(DEFAULT_KEEP_COUNT, int, "Dispatch backups always kept per file"),
    "backup.keep_days": Setting(DEFAULT_KEEP_DAYS, int, "Age in days before older dispatch backups go"),
    "compile.minify": Setting(False, bool, "Bundle compiled files into alphabet buckets"),
    "compile.browsers": Setting(None, list, "Browser targets, comma separated (default: built-in list)"),
}


def get_config_path() -> Path:
    """Get path to config file."""
    return get_paths().config_file


def load_config() -> dict[str, Any]:
    """Load .clay/config.yaml, treating a missing or empty file as no settings."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    return loaded if isinstance(loaded, dict) else {}


def save_config(cfg: dict[str, Any]) -> None:
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(yaml.safe_dump(cfg, default_flow_style=False, sort_keys=False), encoding="utf-8")


def _section(cfg: dict[str, Any], key: str, create: bool = False) -> tuple[dict[str, Any] | None, str]:
    """Find the mapping holding the last part of a dotted key."""
    *parents, leaf = key.split(".")
    current: Any = cfg
    for part in parents:
        if not isinstance(current.get(part), dict):
            if not create:
                return None, leaf
            current[part] = {}
        current = current[part]
    return current, leaf


def get_config_value(key: str, default: Any = None) -> Any:
    """Get a configuration value by dotted key."""
    section, leaf = _section(load_config(), key)
    if section is None or leaf not in section:
        return default
    return section[leaf]


def set_config_value(key: str, value: Any) -> None:
    """Set a configuration value by dotted key.

    A scalar standing where a section is needed is replaced by the section.
    """
    cfg = load_config()
    section, leaf = _section(cfg, key, create=True)
    section[leaf] = value
    save_config(cfg)


def unset_config_value(key: str) -> bool:
    """Remove a dotted key, dropping its section if that leaves it empty.

    Returns:
        False if the key wasn't set
    """
    cfg = load_config()
    section, leaf = _section(cfg, key)
    if section is None or leaf not in section:
        return False

    del section[leaf]
    head = key.split(".")[0]
    if head != leaf and cfg.get(head) == {}:
        del cfg[head]
    save_config(cfg)
    return True


def _lookup(key: str) -> Setting | None:
    setting = SETTINGS.get(key)
    if setting is None:
        console.print(f"[red]Unknown setting: {key}[/red]")
        console.print("\nAvailable settings:")
        for name in SETTINGS:
            console.print(f"  - {name}")
    return setting


@click.group()
def config():
    """Manage claycli configuration.

    Settings are stored in .clay/config.yaml.
    """
    pass


@config.command(name="show")
@click.option("--all", "show_all", is_flag=True, help="Show all settings including defaults")
def show_cmd(show_all: bool):
    """Show current configuration.

    Without --all, only shows settings that differ from defaults.
    """
    rows = []
    for key, setting in SETTINGS.items():
        current = get_config_value(key)
        is_custom = current is not None and current != setting.default
        if show_all or is_custom:
            shown = str(current) if current is not None else f"[dim]{setting.default}[/dim]"
            rows.append((key, shown, str(setting.default), setting.description))

    if not rows:
        console.print("[dim]No custom configuration set. Using defaults.[/dim]")
        console.print(f"[dim]Config file: {get_config_path()}[/dim]")
        console.print("\n[dim]Use 'clay config show --all' to see all settings.[/dim]")
        return

    table = Table(title="Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value", style="green")
    table.add_column("Default", style="dim")
    table.add_column("Description", style="dim")
    for row in rows:
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[dim]Config file: {get_config_path()}[/dim]")


@config.command(name="get")
@click.argument("key")
def get_cmd(key: str):
    """Get a configuration value.

    Examples:
        clay config get prefix.default
        clay config get backup.keep_days
    """
    setting = _lookup(key)
    if setting is None:
        return

    value = get_config_value(key)
    if value is None:
        console.print(f"{key} = {setting.default} [dim](default)[/dim]")
    else:
        console.print(f"{key} = {value}")


@config.command(name="set")
@click.argument("key")
@click.argument("value")
def set_cmd(key: str, value: str):
    """Set a configuration value.

    Examples:
        clay config set prefix.default domain.com
        clay config set backup.keep_count 5
        clay config set compile.browsers "> 1%, last 2 versions"
    """
    setting = _lookup(key)
    if setting is None:
        return

    try:
        typed_value = setting.parse(value)
    except ValueError:
        console.print(f"[red]Invalid value type. Expected {setting.kind.__name__}[/red]")
        return

    set_config_value(key, typed_value)
    console.print(f"[green]Set {key} = {escape(str(typed_value))}[/green]")


@config.command(name="reset")
@click.argument("key", required=False)
@click.option("--all", "reset_all", is_flag=True, help="Reset all settings to defaults")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
def reset_cmd(key: str | None, reset_all: bool, force: bool):
    """Reset configuration to defaults.

    Examples:
        clay config reset prefix.default   # Reset single setting
        clay config reset --all            # Reset all settings
    """
    if reset_all:
        if not force and not click.confirm("Reset all settings to defaults?"):
            console.print("[yellow]Cancelled[/yellow]")
            return
        get_config_path().unlink(missing_ok=True)
        console.print("[green]All settings reset to defaults[/green]")
        return

    if not key:
        console.print("[red]Specify a key or use --all to reset all settings[/red]")
        return

    setting = _lookup(key)
    if setting is None:
        return

    if unset_config_value(key):
        console.print(f"[green]Reset {key} to default ({setting.default})[/green]")
    else:
        console.print(f"[dim]{key} is already at default[/dim]")


@config.command(name="path")
def path_cmd():
    """Show path to config file."""
    console.print(str(get_config_path()))
