"""Registry handing out one workspace directory per IDE install."""

from __future__ import annotations

import json
import os
import re
import shutil
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from hashlib import sha256
from pathlib import Path
from typing import Dict, Iterator, List

from filelock import FileLock

from .value_objects import WorkspaceEntry

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_LOCK_SUFFIX = ".lock"


class WorkspaceRegistryError(RuntimeError):
    """Raised when the workspace index cannot be read."""


class WorkspaceRegistry:
    """Tracks workspace directories shared by every install on this machine.

    The JSON index is the source of truth: each allocation or cleanup
    re-reads it under an exclusive lock on a sidecar ``.lock`` file, so
    registries living in different processes never clean up a workspace
    that another one has just handed out.
    """

    def __init__(self, root: Path, index_path: Path) -> None:
        self._root = root
        self._path = index_path
        self._lock = threading.RLock()
        self._file_lock = FileLock(str(index_path.with_name(index_path.name + _LOCK_SUFFIX)))

    @property
    def root(self) -> Path:
        return self._root

    @property
    def path(self) -> Path:
        return self._path

    def list(self) -> List[WorkspaceEntry]:
        with self._locked():
            return list(self._load().values())

    def workspace_dir(self, owner: str, ide_dir: Path) -> Path:
        ide_dir = ide_dir.resolve()
        name = self._workspace_name(owner, ide_dir)
        with self._locked():
            entries = self._load()
            entry = entries.get(name)
            if entry is None:
                entry = WorkspaceEntry(
                    name=name,
                    owner=owner,
                    ide_dir=ide_dir,
                    path=self._root / name,
                    created_at=datetime.now(timezone.utc).isoformat(),
                )
                entries[name] = entry
                self._persist(entries)
            return entry.path

    def clean(self) -> List[Path]:
        """Deletes workspaces whose install is gone, plus unregistered leftovers."""

        removed: List[Path] = []
        with self._locked():
            entries = self._load()
            for name, entry in list(entries.items()):
                if entry.is_live:
                    continue
                del entries[name]
                if entry.path.exists():
                    shutil.rmtree(entry.path)
                    removed.append(entry.path)
            if self._root.exists():
                for candidate in sorted(self._root.iterdir()):
                    if candidate.is_dir() and candidate.name not in entries:
                        shutil.rmtree(candidate)
                        removed.append(candidate)
            self._persist(entries)
        return removed

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._file_lock:
                yield

    def _workspace_name(self, owner: str, ide_dir: Path) -> str:
        digest = sha256(f"{owner}\n{ide_dir.as_posix()}".encode("utf-8")).hexdigest()[:12]
        safe_owner = _UNSAFE_CHARS.sub("_", owner).strip("_") or "ide"
        return f"{safe_owner}-{digest}"

    def _load(self) -> Dict[str, WorkspaceEntry]:
        entries: Dict[str, WorkspaceEntry] = {}
        if not self._path.exists():
            return entries
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            items = raw.get("workspaces", []) if isinstance(raw, dict) else []
            for item in items:
                entry = WorkspaceEntry.from_dict(item)
                entries[entry.name] = entry
        except (OSError, UnicodeDecodeError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise WorkspaceRegistryError(f"workspace index {self._path} is unreadable: {exc}") from exc
        return entries

    def _persist(self, entries: Dict[str, WorkspaceEntry]) -> None:
        payload = {
            "workspaces": [entry.to_dict() for entry in entries.values()],
        }
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._path)


__all__ = ["WorkspaceRegistry", "WorkspaceRegistryError"]
