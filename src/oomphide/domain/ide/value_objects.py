"""Value objects describing what goes into an IDE install."""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, TypeVar

T = TypeVar("T")

FEATURE_GROUP_SUFFIX = ".feature.group"


@dataclass(frozen=True)
class NativePlatform:
    """p2 platform triple (os, windowing system, arch)."""

    os: str
    ws: str
    arch: str

    @classmethod
    def running(cls) -> "NativePlatform":
        system = platform.system()
        machine = platform.machine().lower()
        arch = "aarch64" if machine in {"arm64", "aarch64"} else "x86_64"
        if system == "Windows":
            return cls("win32", "win32", arch)
        if system == "Darwin":
            return cls("macosx", "cocoa", arch)
        return cls("linux", "gtk", arch)

    def __str__(self) -> str:
        return f"{self.os}/{self.ws}/{self.arch}"


@dataclass(frozen=True)
class IdeLayout:
    """Where things live inside an install for one OS family."""

    family: str

    @classmethod
    def native(cls) -> "IdeLayout":
        return cls.for_platform(NativePlatform.running())

    @classmethod
    def for_platform(cls, native: NativePlatform) -> "IdeLayout":
        if native.os == "win32":
            return cls("win")
        if native.os == "macosx":
            return cls("mac")
        return cls("linux")

    @property
    def is_mac(self) -> bool:
        return self.family == "mac"

    def win_mac_linux(self, win: T, mac: T, linux: T) -> T:
        return {"win": win, "mac": mac, "linux": linux}[self.family]

    @property
    def app_suffix(self) -> str:
        return ".app" if self.is_mac else ""

    @property
    def content_root(self) -> str:
        # p2 nests the whole install inside the application bundle on mac
        return "Contents/Eclipse/" if self.is_mac else ""

    @property
    def launcher(self) -> str:
        return self.win_mac_linux("eclipse.exe", "Contents/MacOS/eclipse", "eclipse")

    def content_path(self, ide_dir: Path, relative: str) -> Path:
        return ide_dir / (self.content_root + relative)

    def ini_path(self, ide_dir: Path) -> Path:
        return self.content_path(ide_dir, "eclipse.ini")


def _add_unique(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)


@dataclass
class P2Model:
    """Repositories and installable units handed to the p2 director."""

    ius: List[str] = field(default_factory=list)
    repos: List[str] = field(default_factory=list)
    metadata_repos: List[str] = field(default_factory=list)
    artifact_repos: List[str] = field(default_factory=list)

    def add_iu(self, iu: str) -> None:
        _add_unique(self.ius, iu)

    def add_feature(self, feature: str) -> None:
        if not feature.endswith(FEATURE_GROUP_SUFFIX):
            feature = feature + FEATURE_GROUP_SUFFIX
        self.add_iu(feature)

    def add_repo(self, repo: str) -> None:
        _add_unique(self.repos, repo)

    def add_metadata_repo(self, repo: str) -> None:
        _add_unique(self.metadata_repos, repo)

    def add_artifact_repo(self, repo: str) -> None:
        _add_unique(self.artifact_repos, repo)

    def add_artifact_repo_bundle_pool(self, bundle_pool: Path) -> None:
        """Lets the director reuse artifacts already present in the shared pool."""

        self.add_artifact_repo(bundle_pool.resolve().as_uri())

    def copy(self) -> "P2Model":
        return P2Model(
            ius=list(self.ius),
            repos=list(self.repos),
            metadata_repos=list(self.metadata_repos),
            artifact_repos=list(self.artifact_repos),
        )

    def __str__(self) -> str:
        return "\n".join(
            [
                f"ius: {sorted(self.ius)}",
                f"repos: {sorted(self.repos)}",
                f"metadataRepo: {sorted(self.metadata_repos)}",
                f"artifactRepo: {sorted(self.artifact_repos)}",
            ]
        )


@dataclass
class TargetPlatform:
    """PDE target definition: a name plus the installations it points at."""

    root: Path
    name: str | None = None
    installations: List[Path] = field(default_factory=list)

    def add_installation(self, installation: Path | str) -> None:
        path = Path(installation).expanduser()
        if not path.is_absolute():
            path = self.root / path
        path = path.resolve()
        if path not in self.installations:
            self.installations.append(path)

    def __str__(self) -> str:
        installs = [path.as_posix() for path in self.installations]
        return f"targetplatform: {self.name} {installs}"


__all__ = [
    "FEATURE_GROUP_SUFFIX",
    "IdeLayout",
    "NativePlatform",
    "P2Model",
    "TargetPlatform",
]
