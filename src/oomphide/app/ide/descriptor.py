"""Loading `oomphide.yaml` descriptors into an :class:`IdeModel`."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml

from oomphide.adapters.eclipse_ini import EclipseIni
from oomphide.domain.ide import IdeConfigurationError, IdeModel, TargetPlatform

DESCRIPTOR_FILENAME = "oomphide.yaml"


def _string_list(raw: object, field_name: str) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise IdeConfigurationError(f"'{field_name}' must be a list of strings")
    return list(raw)


def _mapping(raw: object, field_name: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise IdeConfigurationError(f"'{field_name}' must be a mapping")
    return raw


def load_descriptor(project_root: Path) -> Dict[str, Any]:
    path = project_root / DESCRIPTOR_FILENAME
    if not path.exists():
        raise IdeConfigurationError(f"descriptor not found: {path}")
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:  # pragma: no cover - upstream message
        raise IdeConfigurationError(f"descriptor invalid YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise IdeConfigurationError("descriptor must be a mapping")
    return payload


def build_model(project_root: Path, payload: Dict[str, Any]) -> IdeModel:
    """Applies a parsed descriptor to a fresh model."""

    name = payload.get("name")
    if name is not None and not isinstance(name, str):
        raise IdeConfigurationError("'name' must be a string")
    model = IdeModel(project_root, name=name)

    ide_dir = payload.get("ide_dir")
    if ide_dir is not None:
        if not isinstance(ide_dir, str):
            raise IdeConfigurationError("'ide_dir' must be a string")
        model.set_ide_dir(ide_dir)

    p2 = _mapping(payload.get("p2"), "p2")
    for repo in _string_list(p2.get("repos"), "p2.repos"):
        model.p2.add_repo(repo)
    for repo in _string_list(p2.get("metadata_repos"), "p2.metadata_repos"):
        model.p2.add_metadata_repo(repo)
    for repo in _string_list(p2.get("artifact_repos"), "p2.artifact_repos"):
        model.p2.add_artifact_repo(repo)
    for iu in _string_list(p2.get("ius"), "p2.ius"):
        model.p2.add_iu(iu)
    for feature in _string_list(p2.get("features"), "p2.features"):
        model.p2.add_feature(feature)

    if "target_platform" in payload:
        target = _mapping(payload["target_platform"], "target_platform")
        installations = _string_list(target.get("installations"), "target_platform.installations")

        def configure(platform: TargetPlatform) -> None:
            for installation in installations:
                platform.add_installation(installation)

        model.target_platform(str(target.get("name") or ""), configure)

    if payload.get("all_projects"):
        model.add_all_projects()
    for project_file in _string_list(payload.get("projects"), "projects"):
        model.add_project_file(project_file)

    if "eclipse_ini" in payload:
        ini_conf = _mapping(payload["eclipse_ini"], "eclipse_ini")
        settings = {str(key): value for key, value in _mapping(ini_conf.get("set"), "eclipse_ini.set").items()}
        vmargs = _string_list(ini_conf.get("vmargs"), "eclipse_ini.vmargs")

        def customise(ini: EclipseIni) -> None:
            for key, value in settings.items():
                ini.set(key, None if value is None else str(value))
            for arg in vmargs:
                ini.add_vmarg(arg)

        model.eclipse_ini(customise)

    for path, props in _mapping(payload.get("config_props"), "config_props").items():
        entries = {str(key): str(value) for key, value in _mapping(props, f"config_props.{path}").items()}
        model.config_prop(str(path), lambda target, entries=entries: target.update(entries))

    if payload.get("classic_theme"):
        model.classic_theme()
    nice_text = payload.get("nice_text")
    if nice_text:
        model.nice_text(None if nice_text is True else str(nice_text))
    return model


def load_model(project_root: Path) -> IdeModel:
    project_root = project_root.expanduser().resolve()
    return build_model(project_root, load_descriptor(project_root))


__all__ = ["DESCRIPTOR_FILENAME", "build_model", "load_descriptor", "load_model"]
