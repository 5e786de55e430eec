"""CustomHandler: a logging.Handler that calls a user-named method per record.

The target is named by attributes only, so it needs no knowledge of logging:

    =================  ========  ========  =====================================
    Attribute          Required  Default   Meaning
    =================  ========  ========  =====================================
    name               x                   Handler name.
    class              x                   Import path of the class (or module)
                                           holding ``appendInstance``, if given,
                                           otherwise ``append``.
    append                       "append"  Callable taking one ``str``. Without
                                           ``appendInstance`` it must be callable
                                           on the class itself (staticmethod,
                                           classmethod or module function).
    appendInstance                         Zero-argument callable on ``class``
                                           returning the object whose ``append``
                                           is called.
    cacheInstance                True      If false, call ``appendInstance``
                                           again for every record. No effect
                                           without ``appendInstance``.
    ignoreExceptions             True      If false, delivery failures propagate
                                           to the logging call site; otherwise
                                           they are reported on the status
                                           logger and dropped.
    filter                                 logging.Filter (or filter callable).
    layout                                 logging.Formatter or %-pattern string.
                                           Defaults to "%(message)s" + newline.
    level                        NOTSET    Handler level.
    =================  ========  ========  =====================================

The invoker strategy is chosen exactly once, in build_invoker():

    appendInstance, cacheInstance  → CachedAppendInvoker(factory(), instance.append)
    appendInstance, !cacheInstance → ReacquireAppendInvoker(factory, "append")
    no appendInstance              → CachedAppendInvoker(None, Class.append)

create_handler() is the registration point: it accepts the attribute names
above verbatim (so it works as a logging.config.dictConfig "()" factory),
reports configuration errors on the status logger and returns None instead of
raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from invokelog.errors import ConfigurationError, DeliveryError
from invokelog.invokers import AppendInvoker, CachedAppendInvoker, ReacquireAppendInvoker
from invokelog.layout import PatternLayout, default_layout
from invokelog.observability.logging import get_logger
from invokelog.resolve import describe, resolve_append, resolve_factory, resolve_target

_TRUTHY = {"1", "true", "on", "yes"}
_FALSY = {"0", "false", "off", "no"}

_ATTRIBUTE_ALIASES = {
    "name": "name",
    "class": "class_name",
    "className": "class_name",
    "class_name": "class_name",
    "append": "append",
    "appendInstance": "append_instance",
    "append_instance": "append_instance",
    "cacheInstance": "cache_instance",
    "cache_instance": "cache_instance",
    "ignoreExceptions": "ignore_exceptions",
    "ignore_exceptions": "ignore_exceptions",
    "filter": "filter",
    "layout": "layout",
    "level": "level",
}
_BOOLEAN_OPTIONS = {"cache_instance", "ignore_exceptions"}


@dataclass(frozen=True)
class TargetDescriptor:
    """Where records go, by name. Immutable once built."""

    class_name: str
    append: str = "append"
    append_instance: str | None = None
    cache_instance: bool = True


def build_invoker(descriptor: TargetDescriptor) -> AppendInvoker:
    """Resolve the descriptor and bind the matching invoker strategy.

    Raises ConfigurationError when the class or a method cannot be found, has
    the wrong signature, or a cached factory fails or returns None.
    """
    owner = resolve_target(descriptor.class_name)

    if descriptor.append_instance is None:
        return CachedAppendInvoker(None, resolve_append(owner, descriptor.append))

    factory = resolve_factory(owner, descriptor.append_instance)
    if not descriptor.cache_instance:
        return ReacquireAppendInvoker(factory, descriptor.append)

    try:
        instance = factory()
    except Exception as exc:
        raise ConfigurationError(f"appendInstance {describe(factory)} failed: {exc!r}") from exc
    if instance is None:
        raise ConfigurationError(f"appendInstance {describe(factory)} cannot return None")
    return CachedAppendInvoker(instance, resolve_append(instance, descriptor.append))


class CustomHandler(logging.Handler):
    """Format each record and hand the text to a bound AppendInvoker.

    The invoker is fixed for the handler's lifetime. ``ignore_exceptions``
    is the only runtime decision: report-and-drop, or raise DeliveryError.
    """

    def __init__(
        self,
        name: str,
        invoker: AppendInvoker,
        *,
        ignore_exceptions: bool = True,
        layout: logging.Formatter | None = None,
        level: int | str = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self.set_name(name)
        self._invoker = invoker
        self.ignore_exceptions = ignore_exceptions
        self.setFormatter(layout if layout is not None else default_layout())

    @property
    def invoker(self) -> AppendInvoker:
        return self._invoker

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._invoker.append(self.format(record))
        except Exception as exc:
            if not self.ignore_exceptions:
                if isinstance(exc, DeliveryError):
                    raise
                raise DeliveryError(
                    f"Handler {self.name!r} could not render record: {exc!r}"
                ) from exc
            get_logger("handler").error(
                "handler.delivery_failed",
                handler=self.name,
                invoker=repr(self._invoker),
                logger_name=record.name,
                exc_info=True,
            )

    def __repr__(self) -> str:
        level = logging.getLevelName(self.level)
        return (
            f"<{type(self).__name__} {self.name!r} {self._invoker!r} "
            f"ignore_exceptions={self.ignore_exceptions} ({level})>"
        )


def _coerce_layout(layout: Any) -> logging.Formatter:
    if layout is None:
        return default_layout()
    if isinstance(layout, str):
        try:
            return PatternLayout(layout)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid layout pattern {layout!r}: {exc}") from exc
    if isinstance(layout, logging.Formatter):
        return layout
    raise ConfigurationError(
        f"layout must be a logging.Formatter or a pattern string, got {type(layout).__name__}"
    )


def build_handler(
    name: str | None,
    class_name: str | None,
    append: str = "append",
    append_instance: str | None = None,
    cache_instance: bool = True,
    ignore_exceptions: bool = True,
    filter: logging.Filter | Callable[[logging.LogRecord], Any] | None = None,
    layout: logging.Formatter | str | None = None,
    level: int | str = logging.NOTSET,
) -> CustomHandler:
    """Typed construction: returns a handler or raises ConfigurationError."""
    if not name:
        raise ConfigurationError("CustomHandler must specify a name")
    if not class_name:
        raise ConfigurationError("CustomHandler must specify a class")

    descriptor = TargetDescriptor(
        class_name=class_name,
        append=append,
        append_instance=append_instance,
        cache_instance=cache_instance,
    )
    invoker = build_invoker(descriptor)
    formatter = _coerce_layout(layout)

    try:
        handler = CustomHandler(
            name,
            invoker,
            ignore_exceptions=ignore_exceptions,
            layout=formatter,
            level=level,
        )
    except (TypeError, ValueError) as exc:
        # Handler.setLevel rejects unknown level names
        raise ConfigurationError(f"Invalid level {level!r}: {exc}") from exc

    if filter is not None:
        handler.addFilter(filter)
    return handler


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


def _normalize(attributes: dict[str, Any]) -> dict[str, Any]:
    """Map attribute names (original or snake_case) to build_handler kwargs."""
    options: dict[str, Any] = {}
    for key, value in attributes.items():
        option = _ATTRIBUTE_ALIASES.get(key)
        if option is None:
            raise ConfigurationError(
                f"Unknown CustomHandler attribute {key!r}. "
                f"Available: {sorted(set(_ATTRIBUTE_ALIASES))}"
            )
        if option in _BOOLEAN_OPTIONS:
            value = _as_bool(key, value)
        options[option] = value
    options.setdefault("name", None)
    options.setdefault("class_name", None)
    # An explicit null means "use the default", as for omitted attributes.
    if options.get("append") is None:
        options.pop("append", None)
    return options


def create_handler(**attributes: Any) -> CustomHandler | None:
    """Build a CustomHandler from configuration attributes, or report and return None.

    Usable directly, or from logging.config.dictConfig::

        "handlers": {
            "audit": {
                "()": "invokelog.create_handler",
                "name": "audit",
                "class": "myapp.audit.AuditTrail",
                "appendInstance": "current",
                "cacheInstance": "false",
            }
        }

    A misconfigured entry is still reported here first, but the None handed
    back makes dictConfig itself fail with "Unable to configure handler".
    Use build_handler() to get the ConfigurationError directly.
    """
    try:
        handler = build_handler(**_normalize(attributes))
    except ConfigurationError as exc:
        get_logger("handler").error(
            "handler.create_failed",
            handler=attributes.get("name"),
            target=attributes.get("class", attributes.get("class_name")),
            error=str(exc),
        )
        return None

    get_logger("handler").debug(
        "handler.created", handler=handler.name, invoker=repr(handler.invoker)
    )
    return handler
