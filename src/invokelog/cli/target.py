"""CLI commands for checking and exercising append targets."""

from __future__ import annotations

import logging
from typing import List

import typer

from invokelog.cli._errors import handle_error
from invokelog.errors import ConfigurationError, DeliveryError

app = typer.Typer(help="Check and exercise append targets.", no_args_is_help=True)

_CLASS_HELP = "Import path of the class or module (pkg.mod.Class or pkg.mod:Class)"


def _describe_invoker(invoker: object) -> list[str]:
    from invokelog.invokers import CachedAppendInvoker, ReacquireAppendInvoker
    from invokelog.resolve import describe

    if isinstance(invoker, CachedAppendInvoker):
        mode = "static" if invoker.is_static else "cached instance"
        lines = [f"Strategy: cached ({mode})", f"Append:   {describe(invoker.method)}"]
        if not invoker.is_static:
            lines.append(f"Instance: {describe(invoker.instance)}")
        return lines
    if isinstance(invoker, ReacquireAppendInvoker):
        return [
            "Strategy: reacquire",
            f"Factory:  {describe(invoker.factory)}",
            f"Append:   {invoker.append_name!r} (resolved on each instance)",
        ]
    return [f"Strategy: {invoker!r}"]


@app.command("check")
def check(
    class_name: str = typer.Argument(..., metavar="CLASS", help=_CLASS_HELP),
    append: str = typer.Option("append", "--append", "-a", help="Append method name"),
    append_instance: str = typer.Option(
        None, "--append-instance", "-i", help="Zero-argument factory returning the target"
    ),
    cache_instance: bool = typer.Option(
        True, "--cache-instance/--no-cache-instance", help="Call the factory once, or per record"
    ),
) -> None:
    """Resolve a target and show which invoker it binds.

    Cached factories are called once, exactly as a handler would.

    Examples:
        invokelog target check myapp.sinks.Console
        invokelog target check myapp.audit:Trail -i current --no-cache-instance
    """
    from invokelog.handler import TargetDescriptor, build_invoker

    descriptor = TargetDescriptor(
        class_name=class_name,
        append=append,
        append_instance=append_instance,
        cache_instance=cache_instance,
    )
    try:
        invoker = build_invoker(descriptor)
    except ConfigurationError as e:
        handle_error(e)

    for line in _describe_invoker(invoker):
        typer.echo(line)


@app.command("send")
def send(
    class_name: str = typer.Argument(..., metavar="CLASS", help=_CLASS_HELP),
    messages: List[str] = typer.Argument(..., help="Messages to log, one record each"),
    append: str = typer.Option("append", "--append", "-a", help="Append method name"),
    append_instance: str = typer.Option(
        None, "--append-instance", "-i", help="Zero-argument factory returning the target"
    ),
    cache_instance: bool = typer.Option(
        True, "--cache-instance/--no-cache-instance", help="Call the factory once, or per record"
    ),
    ignore_exceptions: bool = typer.Option(
        True,
        "--ignore-exceptions/--no-ignore-exceptions",
        help="Report delivery failures and continue, or stop at the first one",
    ),
    pattern: str = typer.Option(
        None, "--pattern", "-p", help="%-style layout pattern (default: message + newline)"
    ),
) -> None:
    """Log MESSAGES at INFO through a CustomHandler bound to CLASS.

    Examples:
        invokelog target send myapp.sinks.Console "hello" "world"
        invokelog target send myapp.audit:Trail -i current -p "%(levelname)s %(message)s" hi
    """
    from invokelog.handler import build_handler

    try:
        handler = build_handler(
            name="cli",
            class_name=class_name,
            append=append,
            append_instance=append_instance,
            cache_instance=cache_instance,
            ignore_exceptions=ignore_exceptions,
            layout=pattern,
        )
    except ConfigurationError as e:
        handle_error(e)

    log = logging.getLogger("invokelog.cli.send")
    log.propagate = False
    log.setLevel(logging.INFO)
    log.addHandler(handler)
    sent = 0
    try:
        for message in messages:
            log.info(message)
            sent += 1
    except DeliveryError as e:
        handle_error(e, note=f"(after {sent} record(s))")
    finally:
        log.removeHandler(handler)
        handler.close()

    typer.echo(f"Sent {sent} record(s) via {handler!r}")
