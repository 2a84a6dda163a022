"""Outcome accumulation and exit-code policy."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from arcana_installer.errors import InstallerError
from arcana_installer.tui import TUI
from arcana_installer.types import BundleOutcome, OutcomeStatus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130


class Reporter:
    """Collects per-bundle outcomes and decides the process exit code.

    Per-bundle warnings are printed as they happen and never affect the exit
    code; only a recorded fatal error does.
    """

    def __init__(self, tui: TUI) -> None:
        self.tui = tui
        self.outcomes: list[BundleOutcome] = []
        self.warnings: list[str] = []
        self.fatal: InstallerError | None = None

    def record(self, outcome: BundleOutcome) -> None:
        """Record and echo a per-bundle outcome."""
        self.outcomes.append(outcome)
        if outcome.status is OutcomeStatus.INSTALLED:
            self.tui.show_success(f"Installed: {outcome.bundle}")
        elif outcome.status is OutcomeStatus.REMOVED:
            self.tui.show_success(f"Removed: {outcome.bundle}")
        elif outcome.status is OutcomeStatus.FAILED:
            self.tui.show_error(f"{outcome.bundle}: {outcome.message}")
        else:
            self.tui.show_warning(f"{outcome.bundle}: {outcome.message}")

    def warn(self, message: str) -> None:
        """Record a warning that is not tied to a bundle outcome."""
        self.warnings.append(message)
        self.tui.show_warning(message)

    def info(self, message: str) -> None:
        """Print an informational message."""
        self.tui.show_info(message)

    def record_fatal(self, error: InstallerError) -> None:
        """Record the fatal error that ended the run and print remediation."""
        self.fatal = error
        logger.debug("Fatal error: %s", error)
        self.tui.show_error(str(error))
        if error.remediation:
            self.tui.show_info(error.remediation)

    def counts(self) -> Counter[OutcomeStatus]:
        """Count outcomes by status."""
        return Counter(outcome.status for outcome in self.outcomes)

    @property
    def exit_code(self) -> int:
        """0 unless a fatal condition was recorded."""
        return EXIT_FATAL if self.fatal is not None else EXIT_OK

    def summarize(self, title: str, target_dir: Path) -> None:
        """Print the final summary and the installation target."""
        self.tui.show_summary(title, self.outcomes, target_dir)
        counts = self.counts()
        done = counts[OutcomeStatus.INSTALLED] + counts[OutcomeStatus.REMOVED]
        warned = sum(1 for o in self.outcomes if o.is_warning) + len(self.warnings)
        failed = counts[OutcomeStatus.FAILED]
        self.tui.show_info(
            f"{done} bundle(s) processed, {warned} warning(s), {failed} failure(s)"
        )
