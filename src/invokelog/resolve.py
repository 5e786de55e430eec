"""Name-to-handle lookup for append targets.

Targets are named by import path and attribute name only:

    resolve_target("myapp.sinks.Console")      # class
    resolve_target("myapp.sinks:Console")      # same, entry-point style
    resolve_target("myapp.sinks")              # module; its functions act as statics

resolve_append() and resolve_factory() then find the callable on the owner and
check its call signature up front, so a bad attribute name or arity is a
ConfigurationError at build time rather than a surprise on the first record.
"""

from __future__ import annotations

import inspect
import pkgutil
from typing import Any, Callable

from invokelog.errors import ConfigurationError

# Stand-in argument used to check that an append callable takes one positional.
_PROBE_TEXT = ""


def resolve_target(path: str | None) -> Any:
    """Import and return the object named by ``path``."""
    if not path:
        raise ConfigurationError("target path must be a non-empty string")
    try:
        return pkgutil.resolve_name(path)
    except Exception as exc:
        # Importing runs arbitrary module code; any failure there is a bad target.
        raise ConfigurationError(f"Cannot resolve target {path!r}: {exc}") from exc


def _lookup(owner: Any, name: str | None, role: str) -> Callable[..., Any]:
    if not name:
        raise ConfigurationError(f"{role} name must be a non-empty string")
    try:
        attr = getattr(owner, name)
    except AttributeError as exc:
        raise ConfigurationError(
            f"{describe(owner)} has no {role} attribute {name!r}"
        ) from exc
    except Exception as exc:
        # Properties and __getattr__ hooks run user code.
        raise ConfigurationError(
            f"Reading {role} attribute {name!r} on {describe(owner)} failed: {exc!r}"
        ) from exc
    if not callable(attr):
        raise ConfigurationError(
            f"{role} {describe(owner)}.{name} is not callable "
            f"(got {type(attr).__name__})"
        )
    return attr


def _check_arity(func: Callable[..., Any], args: tuple, what: str) -> None:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # Some builtins carry no signature metadata; trust the call.
        return
    try:
        sig.bind(*args)
    except TypeError as exc:
        raise ConfigurationError(
            f"{describe(func)}{sig} cannot be called {what}: {exc}"
        ) from exc


def resolve_append(owner: Any, name: str | None) -> Callable[[str], Any]:
    """Find ``owner.<name>`` and check it accepts exactly one text argument.

    ``owner`` may be a class (static/class method), a module (function) or an
    instance (bound method). An instance method looked up on its class fails
    here, because the unbound function still expects ``self``.
    """
    func = _lookup(owner, name, "append")
    _check_arity(func, (_PROBE_TEXT,), "with a single text argument")
    return func


def resolve_factory(owner: Any, name: str | None) -> Callable[[], Any]:
    """Find ``owner.<name>`` and check it can be called with no arguments."""
    func = _lookup(owner, name, "appendInstance")
    _check_arity(func, (), "without arguments")
    return func


def describe(obj: Any) -> str:
    """Readable qualified name for classes, modules, functions and instances."""
    if inspect.ismodule(obj):
        return obj.__name__
    if inspect.isclass(obj) or inspect.isroutine(obj):
        module = getattr(obj, "__module__", None)
        qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", repr(obj))
        return f"{module}.{qualname}" if module else qualname
    return f"<{describe(type(obj))} instance>"
