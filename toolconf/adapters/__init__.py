"""Adapters — bindings for external executables.

Public re-exports for convenient access.
"""

from toolconf.adapters.base import Adapter, ExecutionContext
from toolconf.adapters.mock import MockAdapter
from toolconf.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
