"""Terminal UI helpers (prompt_toolkit-based).

Small, focused prompt helpers kept apart from the ledger logic so they can be
tested in isolation with pipe input. Each helper accepts an optional
``PromptSession``; when given, a fresh session is created on the same
input/output so key bindings never leak between prompts.

The operations table is a small ``Application`` with a fixed header and a
scrolling body: arrows (or ``k``/``j``) move the selection, ``d`` or Delete
asks to delete the highlighted row, Escape or ``q`` goes back.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.application import Application
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.data_structures import Point
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.output import Output
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from .shell import OK, BrowseResult, FormField, MenuItem
from .table import render_lines

STYLE = Style.from_dict(
    {
        "title": "bold",
        "header": "bold fg:ansiyellow",
        "selected": "reverse",
        "hint": "fg:#888888",
        "key": "bold",
    }
)


def _new_session(session: PromptSession | None, kb: KeyBindings | None = None) -> PromptSession:
    if session is None:
        return PromptSession(key_bindings=kb)
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
        key_bindings=kb,
    )


def _cancel_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("escape")
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    @kb.add("c-c", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    return kb


def _print(sess: PromptSession, fragments: list[tuple[str, str]]) -> None:
    print_formatted_text(FormattedText(fragments), style=STYLE, output=sess.output)


def _prompt_or_none(sess: PromptSession, message: str, **kwargs: Any) -> str | None:
    # Ctrl+D on an empty line raises EOFError; treat it like Escape.
    try:
        return sess.prompt(message, **kwargs)
    except (EOFError, KeyboardInterrupt):
        return None


def _match_choice(text: str, choices: Sequence[str]) -> str | None:
    """Resolve typed text to a choice: exact (case-insensitive) or unique prefix."""

    t = text.strip().lower()
    if not t:
        return None
    for c in choices:
        if c.lower() == t:
            return c
    hits = [c for c in choices if c.lower().startswith(t)]
    return hits[0] if len(hits) == 1 else None


class _ChoiceValidator(Validator):
    def __init__(self, choices: Sequence[str]) -> None:
        self._choices = list(choices)

    def validate(self, document) -> None:
        if _match_choice(document.text, self._choices) is None:
            raise ValidationError(message="Choose one of: " + ", ".join(self._choices))


# ----------------------------------------------------------------------------
# Modals
# ----------------------------------------------------------------------------


def choose(
    message: str,
    choices: Sequence[str],
    *,
    title: str = "",
    session: PromptSession | None = None,
) -> str | None:
    """Show ``message`` and return the chosen label, or ``None`` when dismissed.

    Choices can be typed in full or by an unambiguous prefix (``y`` for
    ``Yes``). Escape, Ctrl+C or Ctrl+D dismiss.
    """

    sess = _new_session(session, _cancel_bindings())
    fragments: list[tuple[str, str]] = []
    if title:
        fragments += [("class:title", title), ("", "\n")]
    fragments += [("", message), ("", "\n")]
    _print(sess, fragments)

    completer = WordCompleter(list(choices), ignore_case=True, sentence=True)
    value = _prompt_or_none(
        sess,
        "[" + " / ".join(choices) + "] ",
        completer=completer,
        validator=_ChoiceValidator(choices),
        validate_while_typing=False,
    )
    if value is None:
        return None
    return _match_choice(value, choices)


def notify(title: str, message: str, *, session: PromptSession | None = None) -> None:
    """Show a notice and wait for Enter (Escape, Ctrl+C and Ctrl+D also dismiss)."""

    sess = _new_session(session, _cancel_bindings())
    _print(sess, [("class:title", title), ("", "\n"), ("", message), ("", "\n")])
    _prompt_or_none(sess, f"[{OK}] ")


def prompt_fields(
    fields: Sequence[FormField],
    *,
    title: str = "",
    session: PromptSession | None = None,
) -> list[str] | None:
    """Collect one value per field; Escape, Ctrl+C or Ctrl+D cancels the whole form."""

    sess = _new_session(session, _cancel_bindings())
    if title:
        _print(sess, [("class:title", title), ("class:hint", "  (Esc to cancel)")])
    values: list[str] = []
    for field in fields:
        value = _prompt_or_none(sess, f"{field.label} ", default=field.default)
        if value is None:
            return None
        values.append(value)
    return values


def select_menu(
    title: str,
    items: Sequence[MenuItem],
    *,
    session: PromptSession | None = None,
) -> str | None:
    """Print the menu and return the chosen item's key.

    Accepts the key or the item label. End of input (Ctrl+D) or Ctrl+C returns
    ``None``.
    """

    sess = _new_session(session)
    fragments: list[tuple[str, str]] = [("class:title", title), ("", "\n")]
    for it in items:
        fragments += [
            ("class:key", f"  {it.key}. "),
            ("", it.label),
            ("class:hint", f"  {it.description}"),
            ("", "\n"),
        ]
    _print(sess, fragments)

    keys = [it.key for it in items]
    by_label = {it.label.lower(): it.key for it in items}

    class _MenuValidator(Validator):
        def validate(self, document) -> None:
            t = document.text.strip().lower()
            if t not in keys and t not in by_label:
                raise ValidationError(message=f"Choose {keys[0]}-{keys[-1]}")

    value = _prompt_or_none(
        sess,
        "Choice: ",
        completer=WordCompleter([it.label for it in items], ignore_case=True, sentence=True),
        validator=_MenuValidator(),
        validate_while_typing=False,
    )
    if value is None:
        return None
    t = value.strip().lower()
    return t if t in keys else by_label[t]


# ----------------------------------------------------------------------------
# Operations table
# ----------------------------------------------------------------------------


def browse_table(
    rows: Sequence[Sequence[str]],
    *,
    title: str = "",
    selected_row: int | None = None,
    input: Input | None = None,
    output: Output | None = None,
) -> BrowseResult:
    """Show ``rows`` (header first) and return how the user left the table.

    Only data rows (``1..len(rows)-1``) are selectable. The initial selection
    is clamped into that range; with no data rows nothing is selected.
    """

    lines = render_lines(rows)
    header = lines[0] if lines else ""
    body = lines[1:]
    n = len(body)

    state: dict[str, int | None] = {"row": None}
    if n:
        start = selected_row if selected_row is not None else 1
        state["row"] = max(1, min(start, n))

    def _body_fragments() -> list[tuple[str, str]]:
        if not n:
            return [("class:hint", "(no operations)")]
        out: list[tuple[str, str]] = []
        for i, line in enumerate(body, start=1):
            style = "class:selected" if i == state["row"] else ""
            out.append((style, line))
            out.append(("", "\n"))
        return out

    def _cursor() -> Point:
        row = state["row"]
        return Point(x=0, y=(row - 1) if row else 0)

    kb = KeyBindings()

    def _move(delta: int) -> None:
        row = state["row"]
        if row is not None:
            state["row"] = max(1, min(row + delta, n))

    @kb.add("up")
    @kb.add("k")
    def _(event: Any) -> None:
        _move(-1)

    @kb.add("down")
    @kb.add("j")
    def _(event: Any) -> None:
        _move(1)

    @kb.add("d")
    @kb.add("D")
    @kb.add("delete")
    def _(event: Any) -> None:
        event.app.exit(result=BrowseResult("delete", state["row"]))

    @kb.add("escape")
    @kb.add("q")
    @kb.add("c-c")
    def _(event: Any) -> None:
        event.app.exit(result=BrowseResult("back", state["row"]))

    hint = "↑/↓ move • d/Del delete • Esc/q back"
    parts = []
    if title:
        parts.append(Window(FormattedTextControl([("class:title", title)]), height=1))
    parts += [
        Window(FormattedTextControl([("class:header", header)]), height=1),
        Window(
            FormattedTextControl(_body_fragments, focusable=True, get_cursor_position=_cursor),
            always_hide_cursor=True,
        ),
        Window(FormattedTextControl([("class:hint", hint)]), height=1),
    ]

    app: Application[BrowseResult] = Application(
        layout=Layout(HSplit(parts)),
        key_bindings=kb,
        style=STYLE,
        full_screen=False,
        input=input,
        output=output,
    )
    return app.run()


# ----------------------------------------------------------------------------
# Shell adapter
# ----------------------------------------------------------------------------


class PromptToolkitShell:
    """:class:`~personal_ledger.shell.Shell` implemented with the helpers above."""

    def __init__(self, session: PromptSession | None = None) -> None:
        self.session = session if session is not None else PromptSession()

    def notify(self, title: str, message: str) -> None:
        notify(title, message, session=self.session)

    def choose(self, title: str, message: str, choices: Sequence[str]) -> str | None:
        return choose(message, choices, title=title, session=self.session)

    def prompt_form(self, title: str, fields: Sequence[FormField]) -> list[str] | None:
        return prompt_fields(fields, title=title, session=self.session)

    def browse(
        self,
        title: str,
        rows: Sequence[Sequence[str]],
        *,
        selected_row: int | None = None,
    ) -> BrowseResult:
        return browse_table(
            rows,
            title=title,
            selected_row=selected_row,
            input=self.session.input,
            output=self.session.output,
        )

    def select_menu(self, title: str, items: Sequence[MenuItem]) -> str | None:
        return select_menu(title, items, session=self.session)


__all__ = [
    "choose",
    "notify",
    "prompt_fields",
    "select_menu",
    "browse_table",
    "PromptToolkitShell",
    "STYLE",
]
