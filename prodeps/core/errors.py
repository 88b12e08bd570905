"""
Resolver errors — the fatal failure taxonomy.

Soft failures (a node without a path, an unresolvable hoisted link,
a missing overlay directory) are never raised; they are handled by
fallback and skip rules in the services.
"""

from __future__ import annotations


class ResolverError(Exception):
    """Base class for production dependency resolution failures."""


class SourceUnavailable(ResolverError):
    """The package-manager query produced no usable output."""

    def __init__(self, folder: str, detail: str = "") -> None:
        self.folder = folder
        self.detail = detail
        message = f"Dependency tree unavailable for {folder}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class TreeParseError(ResolverError):
    """The query output could not be decoded into workspace entries."""

    def __init__(self, message: str, raw: str) -> None:
        self.raw = raw
        super().__init__(message)

    def excerpt(self, limit: int = 200) -> str:
        """Leading slice of the offending output, for diagnostics."""
        if len(self.raw) <= limit:
            return self.raw
        return self.raw[:limit] + "…"
