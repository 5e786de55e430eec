"""Reacquiring invoker: fresh instance, fresh lookup, on every record.

For factories that hand out pooled or rotating objects, possibly of different
types from one call to the next. The append callable therefore cannot be bound
once; it is looked up by name on each instance the factory returns.
"""

from __future__ import annotations

from typing import Any, Callable

from invokelog.errors import ConfigurationError, DeliveryError
from invokelog.resolve import describe, resolve_append


class ReacquireAppendInvoker:
    """Call ``factory()``, then ``<instance>.<append>(text)``, per record."""

    def __init__(self, factory: Callable[[], Any] | None, append: str | None) -> None:
        if factory is None:
            raise ConfigurationError("factory cannot be None")
        if not callable(factory):
            raise ConfigurationError(f"factory must be callable, got {type(factory).__name__}")
        if not append:
            raise ConfigurationError("append cannot be empty")
        self._factory = factory
        self._append = append

    @property
    def factory(self) -> Callable[[], Any]:
        return self._factory

    @property
    def append_name(self) -> str:
        return self._append

    def append(self, text: str) -> None:
        try:
            instance = self._factory()
        except Exception as exc:
            raise DeliveryError(f"{describe(self._factory)} failed: {exc!r}") from exc

        # A None instance is not special-cased; it fails the lookup below.
        try:
            method = resolve_append(instance, self._append)
        except ConfigurationError as exc:
            raise DeliveryError(str(exc)) from exc

        try:
            method(text)
        except Exception as exc:
            raise DeliveryError(f"{describe(method)} failed: {exc!r}") from exc

    def __repr__(self) -> str:
        return f"ReacquireAppendInvoker({describe(self._factory)}, {self._append!r})"
