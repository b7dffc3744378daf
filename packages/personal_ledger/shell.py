"""Interface between the application core and the interactive shell.

The core (menu dispatch, load/save flows, deletion) only talks to a
:class:`Shell`. The prompt_toolkit implementation lives in ``term_ui``; tests
use a scripted fake.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

YES = "Yes"
NO = "No"
OK = "OK"

type BrowseAction = Literal["delete", "back"]


@dataclass(frozen=True, slots=True)
class BrowseResult:
    """How the user left the operations table.

    ``row`` is the selected table row (``0`` is the header) or ``None`` when
    nothing was selectable.
    """

    action: BrowseAction
    row: int | None


@dataclass(frozen=True, slots=True)
class FormField:
    label: str
    default: str = ""


@dataclass(frozen=True, slots=True)
class MenuItem:
    key: str
    label: str
    description: str


class Shell(Protocol):
    def notify(self, title: str, message: str) -> None:
        """Show a notice and wait for acknowledgement."""

    def choose(self, title: str, message: str, choices: Sequence[str]) -> str | None:
        """Ask the user to pick one of ``choices``; ``None`` when dismissed."""

    def prompt_form(self, title: str, fields: Sequence[FormField]) -> list[str] | None:
        """Collect one text value per field; ``None`` when cancelled."""

    def browse(
        self,
        title: str,
        rows: Sequence[Sequence[str]],
        *,
        selected_row: int | None = None,
    ) -> BrowseResult:
        """Show ``rows`` (header first) and return the user's intent."""

    def select_menu(self, title: str, items: Sequence[MenuItem]) -> str | None:
        """Return the chosen item's key; ``None`` on end of input."""


__all__ = ["Shell", "BrowseResult", "FormField", "MenuItem", "YES", "NO", "OK"]
