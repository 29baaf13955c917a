#!/usr/bin/env python3
"""Entry point for the oomphide CLI."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from textwrap import dedent

from oomphide import __version__
from oomphide.adapters.p2_director import P2DirectorInstaller
from oomphide.app.ide import IdeSetupError, IdeSetupService, InternalSetupError, load_model
from oomphide.domain.ide import IdeConfigurationError
from oomphide.domain.workspace import WorkspaceRegistry, WorkspaceRegistryError
from oomphide.ports.package_installer import DirectorError
from oomphide.settings import SETTINGS

HELP_OVERVIEW = dedent(
    """
    Builds an Eclipse IDE described by oomphide.yaml and keeps it up to date.

      - oomphide setup   - (re)provision the install when its inputs changed
      - oomphide launch  - start the prepared IDE
      - oomphide status  - report whether the install is up to date
    """
)

SETUP_ERRORS = (
    IdeConfigurationError,
    IdeSetupError,
    DirectorError,
    InternalSetupError,
    WorkspaceRegistryError,
    OSError,
)


def _default_project_path(path_arg: str | None) -> Path:
    if path_arg:
        return Path(path_arg).expanduser().resolve()
    return Path(os.getcwd())


def _build_registry() -> WorkspaceRegistry:
    return WorkspaceRegistry(SETTINGS.workspace_dir, SETTINGS.workspace_index_file)


def _build_service(project_path: Path, registry: WorkspaceRegistry) -> IdeSetupService:
    return IdeSetupService(
        model=load_model(project_path),
        registry=registry,
        installer=P2DirectorInstaller(SETTINGS.director),
        settings=SETTINGS,
    )


def _setup_cmd(args: argparse.Namespace) -> int:
    project_path = _default_project_path(getattr(args, "path", None))
    try:
        service = _build_service(project_path, _build_registry())
        rebuilt = service.ide_setup()
    except SETUP_ERRORS as exc:
        print(f"setup failed: {exc}", file=sys.stderr)
        return 1
    if rebuilt:
        print(f"setup: provisioned {service.model.ide_dir}")
    else:
        print(f"setup: {service.model.ide_dir} is up to date")
    return 0


def _launch_cmd(args: argparse.Namespace) -> int:
    project_path = _default_project_path(getattr(args, "path", None))
    try:
        service = _build_service(project_path, _build_registry())
        if getattr(args, "setup", False):
            service.ide_setup()
        process = service.ide()
    except SETUP_ERRORS as exc:
        print(f"launch failed: {exc}", file=sys.stderr)
        return 1
    print(f"launch: started {service.model.ide_dir} (pid {process.pid})")
    return 0


def _status_cmd(args: argparse.Namespace) -> int:
    project_path = _default_project_path(getattr(args, "path", None))
    try:
        service = _build_service(project_path, _build_registry())
    except IdeConfigurationError as exc:
        print(f"status failed: {exc}", file=sys.stderr)
        return 1
    model = service.model
    target = model.resolve_target_platform()
    payload = {
        "ide_dir": str(model.ide_dir),
        "clean": service.is_clean(),
        "projects": [str(path) for path in model.project_files],
        "ius": list(model.p2.ius),
        "target_platform": target.name if target else None,
    }
    if getattr(args, "json", False):
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(f"ide: {payload['ide_dir']}")
        print(f"  state: {'clean' if payload['clean'] else 'stale'}")
        print(f"  projects: {len(payload['projects'])}")
        if payload["target_platform"]:
            print(f"  target platform: {payload['target_platform']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oomphide",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"oomphide {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    setup_cmd = sub.add_parser("setup", help="Provision the IDE if its inputs changed")
    setup_cmd.add_argument("path", nargs="?", help="Project path (default: current directory)")
    setup_cmd.set_defaults(func=_setup_cmd)

    launch_cmd = sub.add_parser("launch", help="Launch the provisioned IDE")
    launch_cmd.add_argument("path", nargs="?", help="Project path (default: current directory)")
    launch_cmd.add_argument("--setup", action="store_true", help="Run setup first")
    launch_cmd.set_defaults(func=_launch_cmd)

    status_cmd = sub.add_parser("status", help="Report whether the install is up to date")
    status_cmd.add_argument("path", nargs="?", help="Project path (default: current directory)")
    status_cmd.add_argument("--json", action="store_true", help="Emit machine-readable output")
    status_cmd.set_defaults(func=_status_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
