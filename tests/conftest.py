"""Shared test fixtures."""

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from githooks.repository import Repository


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory, monkeypatch) -> Path:
    """Keep the user's git config and shell profile out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for var in ("GIT_DIR", "GIT_WORK_TREE", "GIT_CONFIG_GLOBAL"):
        monkeypatch.delenv(var, raising=False)
    return home


def _git(*args: str) -> None:
    subprocess.run(["git", *args], check=True, capture_output=True)


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    """Fresh non-bare repository under tmp_path/repo."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    root = tmp_path / "repo"
    _git("init", "-q", str(root))
    return Repository.discover(root)


@pytest.fixture
def bare_repo(tmp_path: Path) -> Repository:
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    root = tmp_path / "bare.git"
    _git("init", "-q", "--bare", str(root))
    return Repository.discover(root)


@pytest.fixture
def set_config() -> Callable[[Repository, str, str], None]:
    """Set a key in the repository's local git config."""

    def _set(repo: Repository, key: str, value: str) -> None:
        _git("--git-dir", str(repo.git_dir), "config", key, value)

    return _set


@pytest.fixture
def create_hook() -> Callable[..., Path]:
    """Write an executable hook script, by default into .git/hooks."""

    def _create(repo: Repository, name: str, script: str, directory: Path | None = None) -> Path:
        target_dir = directory if directory is not None else repo.git_dir / "hooks"
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        path.write_text(script)
        path.chmod(0o755)
        return path

    return _create
