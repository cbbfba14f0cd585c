from __future__ import annotations

from pathlib import Path

import pytest

from jumon.core.paths import Scope, ScopePaths


@pytest.fixture()
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated home directory with JUMON_HOME pointing inside it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("JUMON_HOME", str(home / ".jumon"))
    for var in ("GH_TOKEN", "GITHUB_TOKEN", "JUMON_GITHUB_API_URL"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture()
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, home_dir: Path) -> Path:
    """Current working directory of a project that has a .claude directory."""
    project = tmp_path / "project"
    (project / ".claude").mkdir(parents=True)
    monkeypatch.chdir(project)
    return project


@pytest.fixture()
def bare_project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, home_dir: Path) -> Path:
    """Current working directory without a .claude directory."""
    project = tmp_path / "bare"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture()
def local_paths(project_dir: Path) -> ScopePaths:
    return ScopePaths.for_scope(Scope.LOCAL)


@pytest.fixture()
def global_paths(home_dir: Path, project_dir: Path) -> ScopePaths:
    (home_dir / ".claude").mkdir(exist_ok=True)
    return ScopePaths.for_scope(Scope.GLOBAL)
