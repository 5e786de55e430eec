"""CLI error handling."""

from __future__ import annotations

from typing import NoReturn

import typer

from invokelog.errors import InvokeLogError


def handle_error(error: InvokeLogError | str, *, note: str = "") -> NoReturn:
    """Print ``Error: ...`` to stderr and exit 1.

    The chained cause is shown when the message does not already carry it,
    so a DeliveryError points at what the target actually raised.
    """
    msg = str(error)
    cause = getattr(error, "__cause__", None)
    if cause is not None and str(cause) not in msg:
        msg = f"{msg} (caused by {cause!r})"
    if note:
        msg = f"{msg} {note}"
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)
