"""Turn command-line flags or menu input into a concrete Selection."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from arcana_installer.protocols import InputProvider
from arcana_installer.tui import TUI

logger = logging.getLogger(__name__)

QUIT_TOKENS = {"q", "quit"}
ALL_TOKENS = {"a", "all"}


@dataclass(frozen=True)
class Selection:
    """Bundles chosen for an operation.

    Attributes:
        identifiers: Chosen bundles in menu order of entry.
        all_selected: True when the user (or a flag) chose every bundle.
        invalid_tokens: Tokens that did not name a menu entry.
        cancelled: True when the user quit the menu.
    """

    identifiers: tuple[str, ...] = ()
    all_selected: bool = False
    invalid_tokens: tuple[str, ...] = field(default_factory=tuple)
    cancelled: bool = False

    @classmethod
    def everything(cls, choices: Sequence[str]) -> Selection:
        """Select every choice."""
        return cls(identifiers=tuple(choices), all_selected=True)

    @classmethod
    def cancel(cls) -> Selection:
        """A selection the user quit out of."""
        return cls(cancelled=True)

    def __len__(self) -> int:
        return len(self.identifiers)


def parse_selection(text: str, choices: Sequence[str]) -> Selection:
    """Parse menu input against a numbered list of choices.

    Accepts "q" to quit, "a" for all, or comma-separated 1-based numbers.
    Invalid tokens are collected and skipped; the remaining valid tokens are
    still honored.

    Args:
        text: Raw input line.
        choices: Menu entries, numbered from 1.

    Returns:
        The parsed Selection.

    Example:
        >>> parse_selection("1,99,abc,2", ["a", "b", "c"]).identifiers
        ('a', 'b')
    """
    stripped = text.strip().lower()
    if stripped in QUIT_TOKENS:
        return Selection.cancel()
    if stripped in ALL_TOKENS:
        return Selection.everything(choices)

    chosen: list[str] = []
    invalid: list[str] = []
    for raw in text.split(","):
        token = raw.strip()
        if not token:
            continue
        if token.isascii() and token.isdigit() and 1 <= int(token) <= len(choices):
            name = choices[int(token) - 1]
            if name not in chosen:
                chosen.append(name)
        else:
            invalid.append(token)

    return Selection(identifiers=tuple(chosen), invalid_tokens=tuple(invalid))


class Selector:
    """Builds selections from flags or an interactive menu."""

    def __init__(self, input_provider: InputProvider, tui: TUI) -> None:
        self.input = input_provider
        self.tui = tui

    def select(
        self,
        choices: Sequence[str],
        select_all: bool,
        heading: str = "Available skills:",
        all_label: str = "Install all skills",
        prompt: str = "Enter skill numbers (comma-separated) or 'a' for all",
    ) -> Selection:
        """Produce a Selection.

        Args:
            choices: Menu entries in order.
            select_all: Skip the menu and select everything.
            heading: Menu heading.
            all_label: Description of the "a" option.
            prompt: Input prompt text.

        Returns:
            Selection; invalid tokens are already reported to the user.
        """
        if select_all:
            return Selection.everything(choices)

        self.tui.show_menu(heading, choices, all_label)
        selection = parse_selection(self.input.ask(prompt), choices)
        logger.debug("Parsed selection: %s", selection)

        for token in selection.invalid_tokens:
            self.tui.show_warning(f"Invalid selection: {token}")
        return selection
