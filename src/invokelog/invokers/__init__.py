"""Invokers: strategy pattern for calling the append target."""

from invokelog.invokers.base import AppendInvoker
from invokelog.invokers.cached import CachedAppendInvoker
from invokelog.invokers.reacquire import ReacquireAppendInvoker

__all__ = ["AppendInvoker", "CachedAppendInvoker", "ReacquireAppendInvoker"]
