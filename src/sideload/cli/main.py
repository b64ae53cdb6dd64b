from __future__ import annotations

import typer

from .base import configure_logging
from .commands.db import app as db_app
from .commands.import_csv import import_command
from .commands.media import app as media_app

configure_logging()
app = typer.Typer(
    help="Bulk import media from URLs listed in a CSV file",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(db_app, name="db")
app.add_typer(media_app, name="media")
app.command("import")(import_command)


def main() -> None:
    """Main entry point for package CLI.

    Invokes the Typer application, which handles command parsing and
    execution.
    """
    app()


if __name__ == "__main__":
    main()
