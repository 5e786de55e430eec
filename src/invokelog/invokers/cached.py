"""Cached invoker: target resolved once, reused for every record."""

from __future__ import annotations

from typing import Any, Callable

from invokelog.errors import ConfigurationError, DeliveryError
from invokelog.resolve import describe


class CachedAppendInvoker:
    """Call a fixed append callable.

    ``instance`` is the object the callable was resolved on, or None when the
    callable is a static, class-level or module-level function. Both fields are
    fixed at construction, so concurrent append() calls need no locking.
    """

    __slots__ = ("_instance", "_method")

    def __init__(self, instance: Any, method: Callable[[str], Any] | None) -> None:
        if method is None:
            raise ConfigurationError("method cannot be None")
        if not callable(method):
            raise ConfigurationError(f"method must be callable, got {type(method).__name__}")
        self._instance = instance
        self._method = method

    @property
    def instance(self) -> Any:
        return self._instance

    @property
    def method(self) -> Callable[[str], Any]:
        return self._method

    @property
    def is_static(self) -> bool:
        return self._instance is None

    def append(self, text: str) -> None:
        try:
            self._method(text)
        except Exception as exc:
            raise DeliveryError(f"{describe(self._method)} failed: {exc!r}") from exc

    def __repr__(self) -> str:
        mode = "static" if self._instance is None else describe(self._instance)
        return f"CachedAppendInvoker({describe(self._method)}, {mode})"
