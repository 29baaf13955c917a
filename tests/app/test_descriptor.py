from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from oomphide.adapters.eclipse_ini import EclipseIni
from oomphide.app.ide.descriptor import DESCRIPTOR_FILENAME, load_model
from oomphide.domain.ide import IdeConfigurationError
from tests._support import write_project


def _write(project: Path, payload: object) -> None:
    project.mkdir(parents=True, exist_ok=True)
    (project / DESCRIPTOR_FILENAME).write_text(yaml.safe_dump(payload, sort_keys=True), encoding="utf-8")


def test_full_descriptor_builds_model(tmp_path: Path) -> None:
    project = tmp_path / "proj"
    write_project(project / "core", "core")
    _write(
        project,
        {
            "name": "demo",
            "ide_dir": "out/ide",
            "p2": {
                "repos": ["https://download.eclipse.org/releases/2023-12/"],
                "ius": ["org.eclipse.platform.ide"],
                "features": ["org.eclipse.jdt"],
            },
            "target_platform": {"name": "deps", "installations": ["libs"]},
            "all_projects": True,
            "eclipse_ini": {"set": {"-showsplash": "splash.bmp"}, "vmargs": ["-Xmx2g"]},
            "config_props": {"configuration/custom.prefs": {"answer": 42}},
            "classic_theme": True,
            "nice_text": "12.0",
        },
    )

    model = load_model(project)

    assert model.name == "demo"
    assert model.ide_dir == (project / "out" / "ide").resolve()
    assert model.p2.ius == ["org.eclipse.platform.ide", "org.eclipse.jdt.feature.group"]
    target = model.resolve_target_platform()
    assert target is not None and target.name == "deps"
    assert [path.parent.name for path in model.project_files] == ["core"]
    assert model.generated_files["configuration/custom.prefs"]() == b"answer=42\n"
    assert len(model.generated_files) == 4

    ini = EclipseIni.parse("-showsplash\norg.eclipse.platform\n")
    assert model.eclipse_ini_action is not None
    model.eclipse_ini_action(ini)
    assert ini.get("-showsplash") == "splash.bmp"
    assert ini.vmargs == ["-Xmx2g"]


def test_empty_descriptor_uses_defaults(tmp_path: Path) -> None:
    project = tmp_path / "proj"
    project.mkdir()
    (project / DESCRIPTOR_FILENAME).write_text("", encoding="utf-8")
    model = load_model(project)
    assert model.name == "proj"
    assert model.resolve_target_platform() is None
    assert model.project_files == ()


def test_missing_descriptor_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(IdeConfigurationError, match="descriptor not found"):
        load_model(tmp_path)


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "a", "mapping"],
        {"p2": {"ius": "ok", "repos": [1, 2]}},
        {"projects": ["sub/build.gradle"]},
        {"target_platform": {"installations": ["libs"]}},
        {"config_props": {"a.prefs": "nope"}},
    ],
)
def test_invalid_descriptors_are_rejected(tmp_path: Path, payload: object) -> None:
    _write(tmp_path / "proj", payload)
    with pytest.raises(IdeConfigurationError):
        load_model(tmp_path / "proj")
