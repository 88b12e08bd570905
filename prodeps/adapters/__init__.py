"""Adapters — tool bindings for external integrations."""

from prodeps.adapters.base import Adapter, ExecutionContext

__all__ = [
    "Adapter",
    "ExecutionContext",
]
