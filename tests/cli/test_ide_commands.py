from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from oomphide.cli import main as cli_main
from oomphide.domain.ide import STALE_TOKEN, IdeLayout
from oomphide.settings import RuntimeSettings
from tests._support import FakeInstaller, make_runtime_settings, write_project


@pytest.fixture()
def runtime_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    settings = make_runtime_settings(tmp_path / "runtime")
    monkeypatch.setattr(cli_main, "SETTINGS", settings, raising=False)
    monkeypatch.setattr(cli_main, "P2DirectorInstaller", lambda director: FakeInstaller())
    return settings


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    write_project(root / "core", "core")
    (root / "oomphide.yaml").write_text(
        yaml.safe_dump({"p2": {"ius": ["org.eclipse.platform.ide"]}, "projects": ["core/.project"]}),
        encoding="utf-8",
    )
    return root


def test_setup_then_status(project: Path, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_main.main(["status", str(project), "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["clean"] is False

    assert cli_main.main(["setup", str(project)]) == 0
    assert "provisioned" in capsys.readouterr().out
    ide_dir = project / "build" / IdeLayout.native().win_mac_linux("oomph-ide", "oomph-ide.app", "oomph-ide")
    assert (ide_dir / STALE_TOKEN).exists()

    assert cli_main.main(["setup", str(project)]) == 0
    assert "up to date" in capsys.readouterr().out

    assert cli_main.main(["status", str(project), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["clean"] is True
    assert payload["projects"] == [str((project / "core" / ".project").resolve())]


def test_setup_reports_configuration_errors(tmp_path: Path, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_main.main(["setup", str(tmp_path / "nowhere")]) == 1
    assert "setup failed: descriptor not found" in capsys.readouterr().err


@pytest.mark.parametrize("command", ["setup", "launch"])
def test_corrupt_workspace_index_is_reported(
    command: str, project: Path, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    runtime_settings.workspace_index_file.write_text("{not json", encoding="utf-8")

    assert cli_main.main([command, str(project)]) == 1
    err = capsys.readouterr().err
    assert f"{command} failed: workspace index" in err
    assert "unreadable" in err
