"""Rich console output and terminal prompts."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from arcana_installer import __version__

if TYPE_CHECKING:
    from arcana_installer.types import BundleOutcome

_STATUS_STYLES = {
    "installed": "green",
    "removed": "green",
    "skipped": "yellow",
    "warned": "yellow",
    "failed": "red",
}


class RichInputProvider:
    """Reads responses from the terminal using rich prompts."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    @property
    def interactive(self) -> bool:
        """True when stdin is attached to a terminal."""
        return sys.stdin.isatty()

    def ask(self, prompt: str) -> str:
        """Read one line of input; closed stdin reads as an empty line."""
        try:
            return Prompt.ask(prompt, default="", show_default=False, console=self.console)
        except EOFError:
            self.console.print()
            return ""

    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Ask a yes/no question; closed stdin answers with the default."""
        try:
            return Confirm.ask(prompt, default=default, console=self.console)
        except EOFError:
            self.console.print()
            return default


class TUI:
    """Text User Interface for arcana-installer (non-interactive output)."""

    def __init__(self, console: Console | None = None) -> None:
        """Create the output helper; defaults to a stdout console."""
        self.console = console or Console()

    def show_banner(self, title: str, style: str = "blue") -> None:
        """Display the start-of-run banner."""
        self.console.print(
            Panel(
                f"[bold {style}]{title}[/bold {style}] v{__version__}\n"
                "Skill bundles for Claude Code",
                border_style=style,
            )
        )

    def show_menu(self, heading: str, choices: Sequence[str], all_label: str) -> None:
        """Display a numbered selection menu.

        Args:
            heading: Line shown above the menu.
            choices: Entries numbered from 1.
            all_label: Description of the "a" option.
        """
        self.console.print()
        self.console.print(f"[bold]{heading}[/bold]")
        self.console.print()
        for number, choice in enumerate(choices, 1):
            self.console.print(f"  {number}) {choice}")
        self.console.print()
        self.console.print(f"  a) {all_label}")
        self.console.print("  q) Quit")
        self.console.print()

    def show_bundles(self, bundles: Sequence[str], installed: set[str], target_dir: Path) -> None:
        """Display the registry with installed status.

        Args:
            bundles: Registry bundles in order.
            installed: Identifiers present in the target directory.
            target_dir: Installation root.
        """
        table = Table(title=f"Skill bundles ({target_dir})")
        table.add_column("#", justify="right")
        table.add_column("Bundle", style="cyan")
        table.add_column("Status")

        for number, bundle in enumerate(bundles, 1):
            status = "[green]✓ installed[/green]" if bundle in installed else "[dim]○ not installed[/dim]"
            table.add_row(str(number), bundle, status)

        self.console.print(table)

    def show_summary(
        self,
        title: str,
        outcomes: Sequence[BundleOutcome],
        target_dir: Path,
    ) -> None:
        """Display the end-of-run summary table.

        Args:
            title: Table title.
            outcomes: Per-bundle results in processing order.
            target_dir: Installation root shown below the table.
        """
        self.console.print()
        if outcomes:
            table = Table(title=title)
            table.add_column("Bundle", style="cyan")
            table.add_column("Result")
            table.add_column("Details")

            for outcome in outcomes:
                style = _STATUS_STYLES.get(outcome.status.value, "")
                table.add_row(
                    outcome.bundle,
                    f"[{style}]{outcome.status.value}[/{style}]",
                    outcome.message or "",
                )
            self.console.print(table)
        else:
            self.console.print(f"[bold]{title}[/bold]: no bundles processed")

        self.show_info(f"Skills directory: {target_dir}")

    def show_success(self, message: str) -> None:
        """Print a green check line."""
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Print a red cross line."""
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")
