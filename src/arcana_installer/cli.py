"""CLI commands using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

from arcana_installer import __version__
from arcana_installer.bridge import EnvironmentBridge
from arcana_installer.config import load_settings
from arcana_installer.context import AppContext, create_context
from arcana_installer.errors import InstallerError
from arcana_installer.host_config import HostConfigurator
from arcana_installer.install import BundleInstaller
from arcana_installer.prereqs import PrerequisiteChecker
from arcana_installer.report import EXIT_INTERRUPTED, Reporter
from arcana_installer.selector import Selection, Selector
from arcana_installer.source import NeedsFetch, ScratchArea, SourceResolver
from arcana_installer.tui import TUI
from arcana_installer.types import OutcomeStatus
from arcana_installer.uninstall import BundleUninstaller

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="arcana-installer",
    help="Install, update and remove Arcana skill bundles for Claude Code",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h", "-Help"]},
)

console = Console()

def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"arcana-installer v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    cli_ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="YAML settings file", dir_okay=False),
    ] = None,
) -> None:
    """Install, update and remove Arcana skill bundles for Claude Code."""
    configure_logging(verbose)
    cli_ctx.obj = {"config": config}


def _load_context(cli_ctx: typer.Context | None, **overrides: Any) -> AppContext:
    """Build the production context from the config file and CLI overrides.

    Args:
        cli_ctx: Click context carrying the top-level options in obj.
        **overrides: Settings fields given on the command line.
    """
    options = (cli_ctx.obj if cli_ctx is not None else None) or {}
    settings = load_settings(options.get("config")).with_overrides(**overrides)
    return create_context(settings)


def _create_bridge(ctx: AppContext) -> EnvironmentBridge:
    return EnvironmentBridge(
        platform=ctx.platform,
        command_template=ctx.settings.bridge_command,
        script_base_url=ctx.settings.script_base_url,
    )


def _delegate_to_wsl(ctx: AppContext, action: str, select_all: bool) -> None:
    """Run the whole operation inside WSL and exit with its status.

    Raises:
        typer.Exit: Always; carries the WSL exit code.
        BridgeError: If WSL is unavailable.
    """
    ctx.tui.show_info("Delegating to WSL...")
    code = _create_bridge(ctx).delegate(action, select_all)
    if code == 0:
        ctx.tui.show_success("WSL run completed")
    else:
        ctx.tui.show_error(f"WSL run exited with code {code}")
    raise typer.Exit(code)


def _cancel(ctx: AppContext, message: str) -> None:
    """Report a user cancellation and exit successfully."""
    ctx.tui.show_info(message)
    raise typer.Exit(0)


# ============================================================================
# Install
# ============================================================================


def _run_install(
    ctx: AppContext,
    reporter: Reporter,
    select_all: bool,
    wsl: bool,
    source: Path | None,
    skip_config: bool,
) -> None:
    """Install pipeline: prerequisites, bridge, source, selection, copy."""
    resolver = SourceResolver(
        registry=ctx.registry,
        gitops=ctx.gitops,
        repo_url=ctx.settings.repo_url,
        ref=ctx.settings.ref,
        marker_file=ctx.settings.marker_file,
    )
    location = resolver.locate(ctx.script_dir, source)

    if wsl:
        _delegate_to_wsl(ctx, "install", select_all)

    checker = PrerequisiteChecker(
        platform=ctx.platform,
        input_provider=ctx.input,
        tui=ctx.tui,
        auto_install=ctx.settings.auto_install,
    )
    for warning in checker.check(require_vcs=isinstance(location, NeedsFetch)).warnings:
        reporter.warn(warning)

    if not select_all and not ctx.input.interactive:
        ctx.tui.show_info("Detected pipe mode (stdin is not a terminal), installing all skills...")
        select_all = True

    with ScratchArea() as scratch:
        if isinstance(location, NeedsFetch):
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=ctx.tui.console,
            ) as progress:
                progress.add_task(f"Cloning {ctx.settings.repo_url}...", total=None)
                source_root = resolver.resolve(location, scratch)
        else:
            source_root = resolver.resolve(location, scratch)
        logger.debug("Source root: %s (%s)", source_root.path, source_root.provenance.value)

        selection = Selector(ctx.input, ctx.tui).select(ctx.registry.bundles, select_all)
        if selection.cancelled:
            _cancel(ctx, "Installation cancelled")

        installer = BundleInstaller.create(
            target_dir=ctx.target_dir,
            platform=ctx.platform,
            exclude=ctx.settings.exclude,
            marker_file=ctx.settings.marker_file,
            filesystem=ctx.filesystem,
        )
        if selection.identifiers:
            ctx.tui.show_info(f"Installing {len(selection)} skill(s)...")
        for bundle in selection.identifiers:
            reporter.record(installer.install_bundle(source_root, bundle))

        installed_any = any(
            o.status in (OutcomeStatus.INSTALLED, OutcomeStatus.WARNED) for o in reporter.outcomes
        )
        if installed_any and not skip_config:
            HostConfigurator(
                host_dir=ctx.host_dir,
                filesystem=ctx.filesystem,
                input_provider=ctx.input,
                reporter=reporter,
                start_marker=ctx.settings.config_marker,
                end_marker=ctx.settings.config_end_marker,
            ).apply(source_root.path, ctx.registry.bundles)

    reporter.summarize("Installation Complete", ctx.target_dir)
    if installed_any:
        ctx.tui.show_info("To verify installation, run Claude Code and ask: 'What Skills are available?'")


@app.command()
def install(
    select_all: Annotated[
        bool, typer.Option("--all", "-a", "-All", help="Install all skills without prompting")
    ] = False,
    wsl: Annotated[
        bool, typer.Option("--wsl", "-WSL", help="Run the installation inside WSL")
    ] = False,
    source: Annotated[
        Path | None,
        typer.Option("--source", "-s", help="Local checkout of the skills repository", file_okay=False),
    ] = None,
    target: Annotated[
        Path | None, typer.Option("--target", "-t", help="Skills directory", file_okay=False)
    ] = None,
    skip_config: Annotated[
        bool, typer.Option("--skip-config", help="Do not merge settings, CLAUDE.md or hooks")
    ] = False,
    no_auto_install: Annotated[
        bool, typer.Option("--no-auto-install", help="Never offer to install missing tools")
    ] = False,
    _context=None,
    cli_ctx: typer.Context = None,
) -> None:
    """Install or update skill bundles."""
    try:
        ctx = _context or _load_context(
            cli_ctx, target_dir=target, auto_install=False if no_auto_install else None
        )
    except InstallerError as e:
        Reporter(TUI(console)).record_fatal(e)
        raise typer.Exit(1) from e

    reporter = Reporter(ctx.tui)
    ctx.tui.show_banner("Arcana Skills Installer")
    try:
        _run_install(ctx, reporter, select_all, wsl, source, skip_config)
    except InstallerError as e:
        reporter.record_fatal(e)
        raise typer.Exit(reporter.exit_code) from e
    except KeyboardInterrupt as e:
        ctx.tui.show_error("Interrupted")
        raise typer.Exit(EXIT_INTERRUPTED) from e


# ============================================================================
# Uninstall
# ============================================================================


def _run_uninstall(
    ctx: AppContext,
    reporter: Reporter,
    select_all: bool,
    wsl: bool,
    yes: bool,
) -> None:
    """Uninstall pipeline: bridge, selection, confirmation, removal."""
    if wsl:
        _delegate_to_wsl(ctx, "uninstall", select_all)

    target_dir = ctx.target_dir
    if not ctx.filesystem.is_dir(target_dir):
        _cancel(ctx, "Skills directory does not exist. Nothing to uninstall.")

    installed = ctx.registry.installed_in(target_dir)
    if not installed:
        _cancel(ctx, "No Arcana skills are currently installed.")

    selection = Selector(ctx.input, ctx.tui).select(
        installed,
        select_all,
        heading="Installed Arcana skills:",
        all_label="Uninstall all skills",
    )
    if selection.cancelled:
        _cancel(ctx, "Uninstall cancelled")
    if selection.all_selected and not yes:
        _confirm_bulk_removal(ctx, selection)

    uninstaller = BundleUninstaller(target_dir, ctx.filesystem)
    if selection.identifiers:
        ctx.tui.show_info(f"Uninstalling {len(selection)} skill(s)...")
    for bundle in selection.identifiers:
        reporter.record(uninstaller.uninstall_bundle(bundle))

    reporter.summarize("Uninstall Complete", target_dir)


def _confirm_bulk_removal(ctx: AppContext, selection: Selection) -> None:
    """Ask once before removing every installed bundle; exit 0 on decline."""
    ctx.tui.show_warning(f"This will remove ALL {len(selection)} Arcana skills!")
    if not ctx.input.interactive:
        _cancel(ctx, "No terminal to confirm bulk removal; pass --yes to proceed. Uninstall cancelled")
    if not ctx.input.confirm("Are you sure?", default=False):
        _cancel(ctx, "Uninstall cancelled")


@app.command()
def uninstall(
    select_all: Annotated[
        bool, typer.Option("--all", "-a", "-All", help="Uninstall all Arcana skills")
    ] = False,
    wsl: Annotated[
        bool, typer.Option("--wsl", "-WSL", help="Run the uninstall inside WSL")
    ] = False,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip the confirmation for removing all skills")
    ] = False,
    target: Annotated[
        Path | None, typer.Option("--target", "-t", help="Skills directory", file_okay=False)
    ] = None,
    _context=None,
    cli_ctx: typer.Context = None,
) -> None:
    """Remove installed skill bundles."""
    try:
        ctx = _context or _load_context(cli_ctx, target_dir=target)
    except InstallerError as e:
        Reporter(TUI(console)).record_fatal(e)
        raise typer.Exit(1) from e

    reporter = Reporter(ctx.tui)
    ctx.tui.show_banner("Arcana Skills Uninstaller", style="red")
    try:
        _run_uninstall(ctx, reporter, select_all, wsl, yes)
    except InstallerError as e:
        reporter.record_fatal(e)
        raise typer.Exit(reporter.exit_code) from e
    except KeyboardInterrupt as e:
        ctx.tui.show_error("Interrupted")
        raise typer.Exit(EXIT_INTERRUPTED) from e


# ============================================================================
# Status
# ============================================================================


@app.command("list")
def list_bundles(
    target: Annotated[
        Path | None, typer.Option("--target", "-t", help="Skills directory", file_okay=False)
    ] = None,
    _context=None,
    cli_ctx: typer.Context = None,
) -> None:
    """List known skill bundles and whether they are installed."""
    try:
        ctx = _context or _load_context(cli_ctx, target_dir=target)
    except InstallerError as e:
        Reporter(TUI(console)).record_fatal(e)
        raise typer.Exit(1) from e

    installed = set(ctx.registry.installed_in(ctx.target_dir))
    ctx.tui.show_bundles(ctx.registry.bundles, installed, ctx.target_dir)


if __name__ == "__main__":
    app()
