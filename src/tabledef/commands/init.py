"""Init Command - Write a default configuration file."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from tabledef.config import write_default_config

console = Console()


def run_init(config_path: Path, force: bool = False, out: Console | None = None) -> None:
    """Create ``config_path`` with commented defaults

    Raises:
        ConfigError: If the file exists and ``force`` is not set
    """
    out = out or console
    write_default_config(config_path, force=force)
    out.print(f"[green]✓[/green] Created configuration file: {escape(str(config_path))}")
    out.print()
    out.print("Next steps:")
    out.print(f"  1. Edit {escape(str(config_path))} and set your workgroup (SQL warehouse ID)")
    out.print("  2. Export existing tables: tabledef export")
    out.print("  3. Review pending changes: tabledef plan")
