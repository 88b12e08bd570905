"""
Domain models — Pydantic types for the resolver.

    from prodeps.core.models import Action, Receipt, DependencyNode, ResolverConfig
"""

from prodeps.core.models.action import Action, Receipt
from prodeps.core.models.config import ResolverConfig
from prodeps.core.models.tree import DependencyNode, WorkspaceEntry

__all__ = [
    "Action",
    "DependencyNode",
    "Receipt",
    "ResolverConfig",
    "WorkspaceEntry",
]
