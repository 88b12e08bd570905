"""
Dependency tree models — the decoded shape of ``pnpm ls --json``.

A dependency's name is the key it appears under in its parent's
mapping; ``from`` repeats it. ``path`` is the store path, the
identity of the physical package. The same path can appear under
many parents.

Models validate one level at a time: ``children`` and
``dependencies`` hold raw mappings until ``parse_tree`` replaces
them with DependencyNode values, so tree depth is unbounded.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DependencyNode(BaseModel):
    """One occurrence of a package in the dependency tree."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(default="", alias="from")
    version: str = ""
    store_path: str | None = Field(default=None, alias="path")
    children: dict[str, Any] = Field(default_factory=dict, alias="dependencies")

    @field_validator("children", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class WorkspaceEntry(BaseModel):
    """A top-level workspace package reported by the query."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    version: str = ""
    path: str = ""
    private: bool = False
    dependencies: dict[str, Any] = Field(default_factory=dict)

    @field_validator("dependencies", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value
