"""Port definitions for the package provisioning engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from oomphide.domain.ide.value_objects import NativePlatform, P2Model


class DirectorError(RuntimeError):
    """Raised when the installer fails to materialise an install."""


@dataclass(frozen=True)
class DirectorRequest:
    """One p2 director install action."""

    model: P2Model
    destination: Path
    profile: str
    bundle_pool: Path
    platform: NativePlatform
    console_log: bool = True


class PackageInstaller(ABC):
    @abstractmethod
    def install(self, request: DirectorRequest) -> None:
        """Install every IU of ``request.model`` into ``request.destination``."""
