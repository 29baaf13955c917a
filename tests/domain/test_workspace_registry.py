from __future__ import annotations

from pathlib import Path

import pytest

from oomphide.domain.workspace import WorkspaceRegistry, WorkspaceRegistryError


def _registry(tmp_path: Path) -> WorkspaceRegistry:
    return WorkspaceRegistry(tmp_path / "workspaces", tmp_path / "state" / "workspaces.json")


def test_workspace_dir_is_deterministic(tmp_path: Path) -> None:
    ide_dir = tmp_path / "ide"
    first = _registry(tmp_path).workspace_dir("proj", ide_dir)
    again = _registry(tmp_path).workspace_dir("proj", ide_dir)
    assert first == again
    assert first.parent == tmp_path / "workspaces"
    assert first.name.startswith("proj-")


def test_workspace_dir_differs_per_owner_and_install(tmp_path: Path) -> None:
    registry = _registry(tmp_path)
    base = registry.workspace_dir("proj", tmp_path / "ide")
    assert registry.workspace_dir("other", tmp_path / "ide") != base
    assert registry.workspace_dir("proj", tmp_path / "ide2") != base


def test_workspace_dir_does_not_create_directory(tmp_path: Path) -> None:
    path = _registry(tmp_path).workspace_dir("proj", tmp_path / "ide")
    assert not path.exists()


def test_clean_removes_workspaces_of_deleted_installs(tmp_path: Path) -> None:
    registry = _registry(tmp_path)
    live_ide = tmp_path / "live"
    live_ide.mkdir()
    live = registry.workspace_dir("proj", live_ide)
    dead = registry.workspace_dir("proj", tmp_path / "dead")
    live.mkdir(parents=True)
    dead.mkdir(parents=True)
    orphan = tmp_path / "workspaces" / "unknown-123"
    orphan.mkdir()

    removed = registry.clean()

    assert set(removed) == {dead, orphan}
    assert live.exists()
    assert not dead.exists()
    assert not orphan.exists()
    assert [entry.path for entry in _registry(tmp_path).list()] == [live]


def test_clean_without_root_is_a_noop(tmp_path: Path) -> None:
    assert _registry(tmp_path).clean() == []


def test_clean_keeps_workspace_registered_by_another_instance(tmp_path: Path) -> None:
    setup_side = _registry(tmp_path)
    launcher_side = _registry(tmp_path)
    live_ide = tmp_path / "live"
    live_ide.mkdir()

    workspace = setup_side.workspace_dir("proj", live_ide)
    workspace.mkdir(parents=True)
    removed = launcher_side.clean()

    assert removed == []
    assert workspace.exists()
    assert [entry.path for entry in _registry(tmp_path).list()] == [workspace]


def test_allocations_from_separate_instances_are_merged(tmp_path: Path) -> None:
    first = _registry(tmp_path)
    second = _registry(tmp_path)

    a = first.workspace_dir("a", tmp_path / "ide-a")
    b = second.workspace_dir("b", tmp_path / "ide-b")

    assert sorted(entry.path for entry in first.list()) == sorted([a, b])


def test_corrupt_index_raises_registry_error(tmp_path: Path) -> None:
    index = tmp_path / "state" / "workspaces.json"
    index.parent.mkdir(parents=True)
    index.write_text("{not json", encoding="utf-8")
    registry = _registry(tmp_path)

    with pytest.raises(WorkspaceRegistryError, match="unreadable"):
        registry.workspace_dir("proj", tmp_path / "ide")
    with pytest.raises(WorkspaceRegistryError):
        registry.clean()
    assert index.read_text(encoding="utf-8") == "{not json"
