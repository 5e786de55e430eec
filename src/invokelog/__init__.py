"""invokelog: route log records into any method named by import path.

Public API:
    create_handler(**attributes) — Registration point; reports errors, returns None on failure
    build_handler(...)           — Typed construction; raises ConfigurationError
    build_invoker(descriptor)    — Bind the invoker strategy for a TargetDescriptor
    CustomHandler                — The logging.Handler itself

Invokers:
    AppendInvoker          — Protocol: append(text) -> None, raises DeliveryError
    CachedAppendInvoker    — Target resolved once (static or cached instance)
    ReacquireAppendInvoker — Instance and method re-resolved per record
"""

from invokelog.errors import ConfigurationError, DeliveryError, InvokeLogError
from invokelog.handler import (
    CustomHandler,
    TargetDescriptor,
    build_handler,
    build_invoker,
    create_handler,
)
from invokelog.invokers import AppendInvoker, CachedAppendInvoker, ReacquireAppendInvoker
from invokelog.layout import PatternLayout, default_layout

__version__ = "0.1.0"

__all__ = [
    # Handler
    "CustomHandler",
    "TargetDescriptor",
    "create_handler",
    "build_handler",
    "build_invoker",
    # Invokers
    "AppendInvoker",
    "CachedAppendInvoker",
    "ReacquireAppendInvoker",
    # Layout
    "PatternLayout",
    "default_layout",
    # Errors
    "InvokeLogError",
    "ConfigurationError",
    "DeliveryError",
]
