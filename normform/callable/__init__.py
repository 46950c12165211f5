"""Callable protocol for normform."""

from normform.callable.execute import execute
from normform.callable.result import CallableResult

__all__ = ["CallableResult", "execute"]
