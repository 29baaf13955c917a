"""Value objects describing registered workspaces."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


@dataclass(frozen=True)
class WorkspaceEntry:
    """Workspace directory owned by one (owner, install dir) pair."""

    name: str
    owner: str
    ide_dir: Path
    path: Path
    created_at: str

    @property
    def is_live(self) -> bool:
        return self.ide_dir.exists()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "owner": self.owner,
            "ide_dir": self.ide_dir.as_posix(),
            "path": self.path.as_posix(),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkspaceEntry":
        return cls(
            name=data["name"],
            owner=data["owner"],
            ide_dir=Path(data["ide_dir"]),
            path=Path(data["path"]),
            created_at=data.get("created_at", datetime.now(timezone.utc).isoformat()),
        )


__all__ = ["WorkspaceEntry"]
