"""invokelog CLI -- typer-based command interface.

Commands:
    invokelog target check <class>              Show which invoker a configuration binds
    invokelog target send <class> <message>...  Log messages through a CustomHandler
"""

from __future__ import annotations

import typer

from invokelog.cli import target

app = typer.Typer(
    name="invokelog",
    help="Check and exercise append targets for invokelog handlers.",
    no_args_is_help=True,
)

app.add_typer(target.app, name="target")


@app.callback()
def _setup() -> None:
    """Route status reports through the configured formatter and destination."""
    from invokelog.observability import setup_status_logging

    setup_status_logging()


def main() -> None:
    """Entry point for the invokelog CLI."""
    app()
