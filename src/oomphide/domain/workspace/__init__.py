"""Workspace registry exports."""

from .registry import WorkspaceRegistry, WorkspaceRegistryError
from .value_objects import WorkspaceEntry

__all__ = ["WorkspaceEntry", "WorkspaceRegistry", "WorkspaceRegistryError"]
