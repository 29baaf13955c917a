"""Setup actions executed inside the freshly installed IDE's context.

Run as ``python -m oomphide.runtime.internal_setup`` with the install as
working directory. Reads the action payload from stdin and prints a
single JSON result line on stdout.
"""

from __future__ import annotations

import json
import sys
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List

from oomphide.adapters.eclipse_ini import EclipseIni
from oomphide.utils.properties import render_properties

RESOURCES_PLUGIN = ".metadata/.plugins/org.eclipse.core.resources/.projects"
PDE_PLUGIN = ".metadata/.plugins/org.eclipse.pde.core"
PDE_PREFS = ".metadata/.plugins/org.eclipse.core.runtime/.settings/org.eclipse.pde.core.prefs"


class SetupActionError(RuntimeError):
    """Raised when a setup action cannot be applied."""


@dataclass(frozen=True)
class RuntimeContext:
    """Startup context of an install, as read from its own `eclipse.ini`."""

    ide_dir: Path
    ini_path: Path
    workspace: Path

    @classmethod
    def from_install(cls, ide_dir: Path) -> "RuntimeContext":
        ide_dir = ide_dir.resolve()
        candidates = [ide_dir / "Contents" / "Eclipse" / "eclipse.ini", ide_dir / "eclipse.ini"]
        ini_path = next((path for path in candidates if path.exists()), None)
        if ini_path is None:
            raise SetupActionError(f"No eclipse.ini found under {ide_dir}")
        data = EclipseIni.parse_from(ini_path).get("-data")
        if not data:
            raise SetupActionError(f"{ini_path} does not define a -data workspace")
        return cls(ide_dir=ide_dir, ini_path=ini_path, workspace=Path(data))


def _project_name(descriptor: Path) -> str:
    try:
        root = ET.parse(descriptor).getroot()
    except (ET.ParseError, OSError) as exc:
        raise SetupActionError(f"Cannot read project descriptor {descriptor}: {exc}") from exc
    name = root.findtext("name")
    if not name or not name.strip():
        raise SetupActionError(f"Project descriptor {descriptor} has no <name>")
    return name.strip()


def import_projects(context: RuntimeContext, params: Dict[str, Any]) -> Dict[str, Any]:
    imported: List[str] = []
    for raw in params.get("projects", []):
        descriptor = Path(raw)
        name = _project_name(descriptor)
        meta_dir = context.workspace / RESOURCES_PLUGIN / name
        meta_dir.mkdir(parents=True, exist_ok=True)
        location = "URI//" + descriptor.parent.resolve().as_uri()
        (meta_dir / ".location").write_text(location, encoding="utf-8")
        imported.append(name)
    return {"projects": imported}


def set_target_platform(context: RuntimeContext, params: Dict[str, Any]) -> Dict[str, Any]:
    name = params.get("name")
    if not name:
        raise SetupActionError("Target platform action requires a name")
    target = ET.Element("target", {"name": name, "sequenceNumber": "1"})
    locations = ET.SubElement(target, "locations")
    for installation in params.get("installations", []):
        ET.SubElement(locations, "location", {"path": str(installation), "type": "Directory"})
    ET.indent(target)
    body = ET.tostring(target, encoding="unicode")
    header = '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n<?pde version="3.8"?>\n'
    target_file = context.workspace / PDE_PLUGIN / f"{name}.target"
    target_file.parent.mkdir(parents=True, exist_ok=True)
    target_file.write_text(header + body + "\n", encoding="utf-8")

    prefs = context.workspace / PDE_PREFS
    prefs.parent.mkdir(parents=True, exist_ok=True)
    prefs.write_bytes(
        render_properties(
            {
                "eclipse.preferences.version": "1",
                "workspace_target_handle": f"local:{target_file.name}",
            }
        )
    )
    return {"target": target_file.as_posix()}


ActionHandler = Callable[[RuntimeContext, Dict[str, Any]], Dict[str, Any]]

ACTIONS: Dict[str, ActionHandler] = {
    "import_projects": import_projects,
    "set_target_platform": set_target_platform,
}


def run_actions(context: RuntimeContext, actions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    unknown = [action.get("type") for action in actions if action.get("type") not in ACTIONS]
    if unknown:
        raise SetupActionError(f"Unknown setup action(s): {', '.join(map(str, unknown))}")
    results: List[Dict[str, Any]] = []
    for action in actions:
        kind = action["type"]
        outcome = ACTIONS[kind](context, action.get("params", {}))
        results.append({"type": kind, **outcome})
    return results


def main() -> int:
    try:
        payload = json.loads(sys.stdin.read())
        context = RuntimeContext.from_install(Path(payload["ide_dir"]))
        results = run_actions(context, list(payload.get("actions", [])))
    except (SetupActionError, OSError, KeyError, TypeError, json.JSONDecodeError) as exc:
        print(json.dumps({"status": "error", "error": f"{type(exc).__name__}: {exc}"}))
        return 1
    print(json.dumps({"status": "ok", "actions": results}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
