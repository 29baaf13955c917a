"""Fingerprinting and the on-disk staleness token."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from oomphide.domain.ide.value_objects import P2Model, TargetPlatform

STALE_TOKEN = "token_stale"


def fingerprint(ide_dir: Path, target_platform: TargetPlatform, p2: P2Model, project_files: Iterable[Path]) -> str:
    """Canonical snapshot of every input that shapes the install."""

    projects = [path.as_posix() for path in sorted(project_files)]
    return "\n".join([ide_dir.as_posix(), str(target_platform), str(p2), str(projects)])


class StalenessToken:
    """Marker written into an install once setup fully succeeded."""

    def __init__(self, ide_dir: Path) -> None:
        self._path = ide_dir / STALE_TOKEN

    @property
    def path(self) -> Path:
        return self._path

    def matches(self, state: str) -> bool:
        # Unreadable or missing tokens mean "rebuild", never an error.
        try:
            return self._path.read_text(encoding="utf-8") == state
        except (OSError, UnicodeDecodeError):
            return False

    def write(self, state: str) -> None:
        self._path.write_text(state, encoding="utf-8")


__all__ = ["STALE_TOKEN", "StalenessToken", "fingerprint"]
