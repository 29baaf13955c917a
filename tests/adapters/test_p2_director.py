from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from oomphide.adapters import p2_director
from oomphide.adapters.p2_director import DIRECTOR_APPLICATION, P2DirectorInstaller
from oomphide.domain.ide import NativePlatform, P2Model
from oomphide.ports.package_installer import DirectorError, DirectorRequest


def _request(tmp_path: Path, model: P2Model | None = None) -> DirectorRequest:
    if model is None:
        model = P2Model()
        model.add_repo("https://download.eclipse.org/releases/2023-12/")
        model.add_feature("org.eclipse.jdt")
        model.add_iu("org.eclipse.platform.ide")
    return DirectorRequest(
        model=model,
        destination=tmp_path / "ide",
        profile="OomphIde",
        bundle_pool=tmp_path / "pool",
        platform=NativePlatform("linux", "gtk", "x86_64"),
    )


def test_build_args_describes_install(tmp_path: Path) -> None:
    args = P2DirectorInstaller("eclipsec").build_args(_request(tmp_path))
    assert args[:4] == ["eclipsec", "-nosplash", "-application", DIRECTOR_APPLICATION]
    assert args[args.index("-installIU") + 1] == "org.eclipse.jdt.feature.group,org.eclipse.platform.ide"
    assert args[args.index("-destination") + 1] == str(tmp_path / "ide")
    assert args[args.index("-bundlepool") + 1] == str(tmp_path / "pool")
    assert args[args.index("-p2.ws") + 1] == "gtk"
    assert args[-1] == "-consoleLog"
    assert "-metadataRepository" not in args


def test_install_runs_director_synchronously(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append(args)
        assert kwargs["check"] is True
        return subprocess.CompletedProcess(args, 0, stdout="ok")

    monkeypatch.setattr(p2_director.subprocess, "run", fake_run)
    P2DirectorInstaller("eclipsec").install(_request(tmp_path))
    assert len(calls) == 1
    assert (tmp_path / "pool").is_dir()


def test_install_wraps_director_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise subprocess.CalledProcessError(13, args, output="Cannot complete the install")

    monkeypatch.setattr(p2_director.subprocess, "run", fake_run)
    with pytest.raises(DirectorError, match="Cannot complete the install"):
        P2DirectorInstaller("eclipsec").install(_request(tmp_path))


def test_install_reports_missing_director(tmp_path: Path) -> None:
    installer = P2DirectorInstaller(str(tmp_path / "no-such-director"))
    with pytest.raises(DirectorError, match="missing"):
        installer.install(_request(tmp_path))


def test_install_requires_ius(tmp_path: Path) -> None:
    with pytest.raises(DirectorError):
        P2DirectorInstaller("eclipsec").install(_request(tmp_path, P2Model()))
