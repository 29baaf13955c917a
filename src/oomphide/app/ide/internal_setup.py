"""Out-of-process delegate for setup steps that need the installed IDE."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List

import oomphide

RUNNER_MODULE = "oomphide.runtime.internal_setup"


class InternalSetupError(RuntimeError):
    """Raised when the setup subprocess does not complete every action."""


@dataclass(frozen=True)
class SetupAction:
    type: str
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "params": self.params}


def project_importer(project_files: Iterable[Path]) -> SetupAction:
    return SetupAction("import_projects", {"projects": [path.as_posix() for path in sorted(project_files)]})


def target_platform_setter(name: str | None, installations: Iterable[Path]) -> SetupAction:
    return SetupAction(
        "set_target_platform",
        {"name": name, "installations": [path.as_posix() for path in installations]},
    )


class InternalSetupDelegate:
    """Collects ordered actions and runs them all in one subprocess."""

    def __init__(self, ide_dir: Path, *, python: str | None = None) -> None:
        self._ide_dir = ide_dir
        self._python = python or sys.executable
        self._actions: List[SetupAction] = []

    @property
    def actions(self) -> List[SetupAction]:
        return list(self._actions)

    def add(self, action: SetupAction) -> None:
        self._actions.append(action)

    def payload(self) -> Dict[str, Any]:
        return {
            "ide_dir": self._ide_dir.as_posix(),
            "actions": [action.to_dict() for action in self._actions],
        }

    def run(self) -> List[Dict[str, Any]]:
        try:
            result = subprocess.run(
                [self._python, "-m", RUNNER_MODULE],
                input=json.dumps(self.payload()),
                cwd=self._ide_dir,
                env=self._build_env(),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as exc:
            raise InternalSetupError(f"Unable to start internal setup: {exc}") from exc
        outcome = self._parse_outcome(result.stdout)
        if result.returncode != 0 or outcome.get("status") != "ok":
            reason = outcome.get("error") or result.stderr.strip() or f"exit code {result.returncode}"
            raise InternalSetupError(f"Internal setup failed in {self._ide_dir}: {reason}")
        return list(outcome.get("actions", []))

    def _parse_outcome(self, stdout: str) -> Dict[str, Any]:
        lines = [line for line in stdout.splitlines() if line.strip()]
        if not lines:
            return {}
        try:
            outcome = json.loads(lines[-1])
        except json.JSONDecodeError:
            return {}
        return outcome if isinstance(outcome, dict) else {}

    def _build_env(self) -> Dict[str, str]:
        env = os.environ.copy()
        package_root = str(Path(oomphide.__file__).resolve().parents[1])
        pythonpath = env.get("PYTHONPATH")
        if pythonpath:
            env["PYTHONPATH"] = f"{package_root}{os.pathsep}{pythonpath}"
        else:
            env["PYTHONPATH"] = package_root
        env["OOMPHIDE_IDE_DIR"] = str(self._ide_dir)
        env.setdefault("PYTHONUNBUFFERED", "1")
        return env


__all__ = [
    "InternalSetupDelegate",
    "InternalSetupError",
    "SetupAction",
    "project_importer",
    "target_platform_setter",
]
