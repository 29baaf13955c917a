"""Runtime settings for oomphide."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    state_dir: Path
    log_dir: Path
    director: str = "eclipsec"

    @property
    def bundle_pool_dir(self) -> Path:
        return self.home_dir / "shared-bundles"

    @property
    def workspace_dir(self) -> Path:
        return self.home_dir / "ide-workspaces"

    @property
    def workspace_index_file(self) -> Path:
        return self.state_dir / "workspaces.json"


def _default_home_dir() -> Path:
    override = os.environ.get("OOMPHIDE_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".goomph"


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    return RuntimeSettings(
        home_dir=base,
        state_dir=base / "state",
        log_dir=base / "logs",
        director=os.environ.get("OOMPHIDE_DIRECTOR", "eclipsec"),
    )


SETTINGS = load_settings()
