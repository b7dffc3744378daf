"""Console entry point for ``personal_ledger``.

The CLI has a single job: load ``.env`` (``python-dotenv``, without
overriding variables already set), configure logging, and run the
interactive shell. There are no options besides ``--help``.

Exit status is ``0`` when the user quits from the menu and ``1`` when the
interactive shell cannot be started.
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from dotenv import load_dotenv

from .config import load_settings
from .logging_setup import configure_logging, get_logger

app = typer.Typer(
    add_completion=False,
    help="Personal ledger: record dated debits and credits, list them with a running balance.",
)

_logger = get_logger("personal_ledger.cli")


def run_interactive() -> int:
    """Build the prompt_toolkit shell and run the menu loop."""

    from .app import LedgerApp
    from .term_ui import PromptToolkitShell

    settings = load_settings()
    shell = PromptToolkitShell()
    return LedgerApp(shell, settings=settings).run()


@app.command()
def main() -> None:
    """Launch the interactive ledger."""

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    settings = load_settings()
    configure_logging(settings.log_level, log_file=settings.log_file)

    try:
        code = run_interactive()
    except Exception as e:
        _logger.error("shell:startup_failed error=%s", e, exc_info=True)
        print(f"Error running application: {e}", file=sys.stderr)
        raise typer.Exit(1) from e
    raise typer.Exit(code)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    # Running as a module: `python -m personal_ledger.cli`
    app()
