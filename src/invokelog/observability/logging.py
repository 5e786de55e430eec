"""Status logging: swappable formatter × destination for internal errors.

invokelog reports its own problems (a handler that could not be built, a
record the target refused) on a dedicated status logger rather than through
the logging tree it serves. The status logger never propagates, so a report
can never loop back into a CustomHandler attached to the root logger.

Architecture:
    LogFormatter  — HOW records are structured (structlog, stdlib)
    LogDestination — WHERE output goes (stderr, JSONL file)

    setup_status_logging(config) composes them: formatter.setup() returns a
    logging.Formatter, destination.create_handler() returns a logging.Handler,
    the handler gets the formatter, and it's attached to the status logger.

Swapping:
    INVOKELOG_STATUS_FORMATTER=structlog   (default)
    INVOKELOG_STATUS_DESTINATION=stderr    (default)

    Or register your own:
        from invokelog.observability.logging import register_destination
        register_destination("syslog", MySyslogDestination)

structlog is wired per logger with structlog.wrap_logger(); the global
structlog.configure() state belongs to the host application and is left alone.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from functools import partialmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from invokelog.observability.config import StatusConfig

STATUS_LOGGER = "invokelog.status"

# Reports must never re-enter the handlers they are reporting on.
logging.getLogger(STATUS_LOGGER).propagate = False


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class LogFormatter(Protocol):
    """Strategy: how status records are structured.

    setup() configures the formatting pipeline and returns a
    logging.Formatter that handlers will use.

    get_logger() returns a logger with a kwargs API:
    logger.error("handler.delivery_failed", handler="audit", exc_info=True).
    """

    def setup(self, config: StatusConfig) -> logging.Formatter: ...

    def get_logger(self, name: str, **kwargs: Any) -> Any: ...


@runtime_checkable
class LogDestination(Protocol):
    """Strategy: where formatted status output is shipped."""

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler: ...

    def shutdown(self) -> None: ...


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class StructlogFormatter:
    """structlog processor pipeline on top of the stdlib status logger."""

    def __init__(self) -> None:
        self._processors: list = []

    def setup(self, config: StatusConfig) -> logging.Formatter:
        import structlog

        shared_processors: list = [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

        if config.format == "json":
            renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
            # JSON needs the traceback as a string; the console renderer
            # pretty-prints exc_info itself.
            shared_processors.append(structlog.processors.format_exc_info)
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=False)

        self._processors = [
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]

        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        import structlog

        return structlog.wrap_logger(
            logging.getLogger(name),
            processors=self._processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            **kwargs,
        )


class StdlibFormatter:
    """Pure stdlib logging with JSON or console formatting."""

    def setup(self, config: StatusConfig) -> logging.Formatter:
        if config.format == "json":
            return _StatusJsonFormatter()
        return _StatusConsoleFormatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    def get_logger(self, name: str, **kwargs: Any) -> Any:
        return _StructuredStdlibLogger(logging.getLogger(name), kwargs)


class _StatusJsonFormatter(logging.Formatter):
    """One JSON object per record, keyed like structlog's JSONRenderer output."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "event": record.getMessage(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            **getattr(record, "_structured", {}),
        }
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _StatusConsoleFormatter(logging.Formatter):
    """Console formatter that appends structured kwargs as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        structured = getattr(record, "_structured", None)
        if not structured:
            return line
        pairs = " ".join(f"{k}={v!r}" for k, v in structured.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


class _StructuredStdlibLogger:
    """structlog-style kwargs API over a plain stdlib logger.

    Keyword context travels on the record as ``_structured`` (via ``extra``),
    where the status formatters pick it up. ``exc_info`` keeps its stdlib
    meaning.
    """

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None) -> None:
        self._logger = logger
        self._context = dict(context or {})

    def bind(self, **kw: Any) -> _StructuredStdlibLogger:
        return type(self)(self._logger, {**self._context, **kw})

    def _log(self, level: int, event: str, **kw: Any) -> None:
        exc_info = kw.pop("exc_info", None)
        self._logger.log(
            level,
            event,
            exc_info=exc_info,
            extra={"_structured": {**self._context, **kw}},
        )

    debug = partialmethod(_log, logging.DEBUG)
    info = partialmethod(_log, logging.INFO)
    warning = partialmethod(_log, logging.WARNING)
    error = partialmethod(_log, logging.ERROR)
    critical = partialmethod(_log, logging.CRITICAL)

    def exception(self, event: str, **kw: Any) -> None:
        kw.setdefault("exc_info", True)
        self._log(logging.ERROR, event, **kw)


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------


class StderrDestination:
    """Write to stderr. Default."""

    def __init__(self, config: StatusConfig | None = None) -> None:
        pass

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        return handler

    def shutdown(self) -> None:
        pass


class JsonlFileDestination:
    """Append status records to a file, one per line."""

    def __init__(self, config: StatusConfig) -> None:
        path = config.jsonl_path or "invokelog-status.jsonl"
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handler: logging.Handler | None = None

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.FileHandler(str(self._path), mode="a", encoding="utf-8")
        handler.setFormatter(formatter)
        self._handler = handler
        return handler

    def shutdown(self) -> None:
        if self._handler is not None:
            self._handler.close()
            self._handler = None


class _LastResortHandler(logging.Handler):
    """Stands in for logging.lastResort on the status logger.

    Writes only while it is the status logger's sole handler, and keeps the
    keyword context the bare lastResort output would drop.
    """

    def __init__(self) -> None:
        super().__init__(logging.WARNING)
        self.setFormatter(_StatusConsoleFormatter("%(levelname)s %(name)s: %(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        if logging.getLogger(STATUS_LOGGER).handlers != [self]:
            return
        try:
            sys.stderr.write(self.format(record) + "\n")
        except Exception:
            self.handleError(record)


logging.getLogger(STATUS_LOGGER).addHandler(_LastResortHandler())


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------

_FORMATTERS: dict[str, type] = {
    "structlog": StructlogFormatter,
    "stdlib": StdlibFormatter,
}

_DESTINATIONS: dict[str, type] = {
    "stderr": StderrDestination,
    "jsonl": JsonlFileDestination,
}


def register_formatter(name: str, cls: type) -> None:
    """Register a custom status formatter. Call before setup_status_logging()."""
    _FORMATTERS[name] = cls


def register_destination(name: str, cls: type) -> None:
    """Register a custom status destination. Instantiated as ``cls(config)``."""
    _DESTINATIONS[name] = cls


def _lookup_strategy(registry: dict[str, type], kind: str, name: str) -> type:
    try:
        return registry[name]
    except KeyError:
        raise ValueError(
            f"Unknown status {kind}: {name!r}. Available: {sorted(registry)}. "
            f"Register custom {kind}s with register_{kind}()."
        ) from None


def _detach_managed(status_logger: logging.Logger) -> None:
    for h in list(status_logger.handlers):
        if getattr(h, "_invokelog_managed", False):
            status_logger.removeHandler(h)


# ---------------------------------------------------------------------------
# Module state
# ---------------------------------------------------------------------------

_active_formatter: LogFormatter | None = None
_active_destination: LogDestination | None = None


def setup_status_logging(config: StatusConfig | None = None) -> None:
    """Compose formatter × destination from config and wire to the status logger.

    The new handler is fully built before the current one is torn down, so a
    bad config (unknown name, unwritable JSONL path) raises and leaves the
    current setup in place. Calling it again replaces only the handler it
    installed; handlers the host attached are kept.
    """
    global _active_formatter, _active_destination

    from invokelog.observability.config import StatusConfig

    config = config or StatusConfig()
    formatter_cls = _lookup_strategy(_FORMATTERS, "formatter", config.formatter)
    dest_cls = _lookup_strategy(_DESTINATIONS, "destination", config.destination)

    formatter = formatter_cls()
    destination = dest_cls(config)
    try:
        handler = destination.create_handler(formatter.setup(config))
    except Exception:
        destination.shutdown()
        raise
    handler._invokelog_managed = True  # type: ignore[attr-defined]

    shutdown_status_logging()

    status_logger = logging.getLogger(STATUS_LOGGER)
    status_logger.addHandler(handler)
    status_logger.setLevel(getattr(logging, config.level.upper(), logging.WARNING))

    _active_formatter = formatter
    _active_destination = destination


def get_logger(name: str = "", **kwargs: Any) -> Any:
    """Get a status logger, namespaced under ``invokelog.status``.

    Returns a structlog BoundLogger (default) or a _StructuredStdlibLogger,
    both of which accept logger.error("event", key=value) kwargs.

    Falls back to a _StructuredStdlibLogger before setup_status_logging() is
    called. Until some handler is attached, warnings and errors still reach
    stderr, key=value context included.
    """
    full_name = f"{STATUS_LOGGER}.{name}" if name else STATUS_LOGGER
    if _active_formatter is not None:
        return _active_formatter.get_logger(full_name, **kwargs)
    return _StructuredStdlibLogger(logging.getLogger(full_name), kwargs)


def shutdown_status_logging() -> None:
    """Detach our handler and close the active destination."""
    global _active_formatter, _active_destination

    status_logger = logging.getLogger(STATUS_LOGGER)
    _detach_managed(status_logger)
    status_logger.setLevel(logging.NOTSET)
    if _active_destination is not None:
        _active_destination.shutdown()
    _active_formatter = None
    _active_destination = None
