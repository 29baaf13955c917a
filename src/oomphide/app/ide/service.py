"""Application service that builds and launches an IDE install."""

from __future__ import annotations

import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict

from oomphide.adapters.eclipse_ini import EclipseIni
from oomphide.app.ide.internal_setup import InternalSetupDelegate, project_importer, target_platform_setter
from oomphide.domain.ide import IdeModel, NativePlatform, StalenessToken
from oomphide.domain.ide.model import WORKSPACE_SETTINGS, ContentProducer
from oomphide.domain.workspace import WorkspaceRegistry
from oomphide.ports.package_installer import DirectorRequest, PackageInstaller
from oomphide.resources import SPLASH, splash_bytes
from oomphide.settings import RuntimeSettings
from oomphide.utils.properties import props_producer
from oomphide.utils.telemetry import record_structured_event

PROFILE = "OomphIde"

DelegateFactory = Callable[[Path], InternalSetupDelegate]


class IdeSetupError(RuntimeError):
    """Raised when the setup pipeline refuses to run."""


def _clean_dir(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)


@dataclass
class IdeSetupService:
    """Idempotent setup pipeline plus launcher for one :class:`IdeModel`.

    The install is rebuilt from scratch whenever its staleness token does
    not match the model's current state; the token is written last, so any
    failure along the way leaves an install that the next run rebuilds.
    """

    model: IdeModel
    registry: WorkspaceRegistry
    installer: PackageInstaller
    settings: RuntimeSettings
    delegate_factory: DelegateFactory = InternalSetupDelegate
    native: NativePlatform = field(default_factory=NativePlatform.running)

    def state(self) -> str:
        return self.model.state()

    def is_clean(self) -> bool:
        return StalenessToken(self.model.ide_dir).matches(self.state())

    def workspace_dir(self) -> Path:
        return self.registry.workspace_dir(self.model.name, self.model.ide_dir)

    def ide_setup(self) -> bool:
        """Brings the install up to date; returns False when it already was.

        A skipped run leaves the install and its workspace untouched; the
        only write is the ``skip`` event appended to the telemetry log under
        ``settings.log_dir``.
        """

        event_context = {"ide_dir": str(self.model.ide_dir), "owner": self.model.name}
        if self.is_clean():
            record_structured_event(self.settings, "ide.setup", status="skip", component="ide", payload=event_context)
            return False
        record_structured_event(self.settings, "ide.setup", status="start", component="ide", payload=event_context)
        start = time.perf_counter()
        try:
            self._run_pipeline()
        except Exception as exc:
            record_structured_event(
                self.settings,
                "ide.setup",
                status="error",
                level="error",
                component="ide",
                duration_ms=(time.perf_counter() - start) * 1000,
                payload=event_context | {"error": f"{type(exc).__name__}: {exc}"},
            )
            raise
        record_structured_event(
            self.settings,
            "ide.setup",
            status="success",
            component="ide",
            duration_ms=(time.perf_counter() - start) * 1000,
            payload=event_context,
        )
        return True

    def ide(self) -> subprocess.Popen:
        """Launches the install prepared by :meth:`ide_setup`, without waiting."""

        ide_dir = self.model.ide_dir
        launcher = ide_dir / self.model.layout.launcher
        event_context = {"ide_dir": str(ide_dir), "launcher": str(launcher)}
        record_structured_event(self.settings, "ide.launch", status="start", component="ide", payload=event_context)
        try:
            removed = self.registry.clean()
            process = subprocess.Popen([str(launcher), "-showsplash", SPLASH], cwd=ide_dir)
        except Exception as exc:
            record_structured_event(
                self.settings,
                "ide.launch",
                status="error",
                level="error",
                component="ide",
                payload=event_context | {"error": f"{type(exc).__name__}: {exc}"},
            )
            raise
        record_structured_event(
            self.settings,
            "ide.launch",
            status="success",
            component="ide",
            payload=event_context | {"cleaned_workspaces": len(removed)},
        )
        return process

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _run_pipeline(self) -> None:
        ide_dir = self.model.ide_dir
        workspace = self.workspace_dir()
        self._ensure_safe_target(ide_dir)
        _clean_dir(ide_dir)
        _clean_dir(workspace)
        self._install(ide_dir)
        generated = self.model.generated_files
        generated.update(self._initial_workspace(workspace))
        self._setup_eclipse_ini(ide_dir, workspace)
        self._write_generated(ide_dir, generated)
        self._internal_setup(ide_dir)
        (ide_dir / SPLASH).write_bytes(splash_bytes())
        StalenessToken(ide_dir).write(self.state())

    def _ensure_safe_target(self, ide_dir: Path) -> None:
        root = self.model.project_root
        if ide_dir == root or ide_dir in root.parents:
            raise IdeSetupError(f"Refusing to wipe {ide_dir}: it contains the project at {root}")

    def _install(self, ide_dir: Path) -> None:
        p2 = self.model.p2.copy()
        p2.add_artifact_repo_bundle_pool(self.settings.bundle_pool_dir)
        request = DirectorRequest(
            model=p2,
            destination=ide_dir,
            profile=PROFILE,
            bundle_pool=self.settings.bundle_pool_dir,
            platform=self.native,
        )
        self.installer.install(request)

    def _initial_workspace(self, workspace: Path) -> Dict[str, ContentProducer]:
        _clean_dir(workspace)
        recent = str(workspace.resolve())

        def workspace_prefs(props: Dict[str, str]) -> None:
            props["eclipse.preferences.version"] = "1"
            props["MAX_RECENT_WORKSPACES"] = "5"
            props["RECENT_WORKSPACES"] = recent
            props["RECENT_WORKSPACES_PROTOCOL"] = "3"
            props["SHOW_RECENT_WORKSPACES"] = "false"
            props["SHOW_WORKSPACE_SELECTION_DIALOG"] = "false"

        # turn off quickstarts and tipsAndTricks
        def first_run_prefs(props: Dict[str, str]) -> None:
            props["eclipse.preferences.version"] = "1"
            props["PROBLEMS_FILTERS_MIGRATE"] = "true"
            props["TASKS_FILTERS_MIGRATE"] = "true"
            props["platformState"] = str(int(time.time()))
            props["quickStart"] = "false"
            props["tipsAndTricks"] = "false"

        return {
            "configuration/.settings/org.eclipse.ui.ide.prefs": props_producer(workspace_prefs),
            WORKSPACE_SETTINGS + "org.eclipse.ui.ide.prefs": props_producer(first_run_prefs),
        }

    def _setup_eclipse_ini(self, ide_dir: Path, workspace: Path) -> None:
        ini_path = self.model.layout.ini_path(ide_dir)
        ini = EclipseIni.parse_from(ini_path)
        ini.set("-data", workspace.resolve())
        # p2 director leaves these pointing at the wrong place inside the .app
        if self.model.layout.is_mac:
            ini.set("-install", ide_dir / "Contents" / "MacOS")
            ini.set("-configuration", ide_dir / "Contents" / "Eclipse" / "configuration")
        action = self.model.eclipse_ini_action
        if action is not None:
            action(ini)
        ini.write_to(ini_path)

    def _write_generated(self, ide_dir: Path, generated: Dict[str, ContentProducer]) -> None:
        for relative, producer in generated.items():
            target = self.model.layout.content_path(ide_dir, relative)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(producer())

    def _internal_setup(self, ide_dir: Path) -> None:
        delegate = self.delegate_factory(ide_dir)
        delegate.add(project_importer(self.model.project_files))
        target_platform = self.model.resolve_target_platform()
        if target_platform is not None:
            delegate.add(target_platform_setter(target_platform.name, target_platform.installations))
        delegate.run()


__all__ = ["IdeSetupError", "IdeSetupService", "PROFILE"]
