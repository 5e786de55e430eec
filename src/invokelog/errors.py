"""Error taxonomy: configuration-time vs. delivery-time failures."""

from __future__ import annotations


class InvokeLogError(Exception):
    """Base class for invokelog errors."""


class ConfigurationError(InvokeLogError):
    """A handler could not be built from its attributes.

    Raised while resolving the target, selecting the invoker, or calling a
    cached instance factory. Terminal for the handler being built.
    """


class DeliveryError(InvokeLogError):
    """A formatted record could not be handed to the target.

    The original failure (target raised, attribute missing on a reacquired
    instance, layout blew up) is chained as ``__cause__``.
    """
