"""AppendInvoker protocol: strategy for handing formatted text to a target."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AppendInvoker(Protocol):
    """Deliver one formatted record to the target callable.

    Implementations raise DeliveryError on any failure, whether the target
    itself raised or the lookup leading up to the call failed.
    """

    def append(self, text: str) -> None: ...
