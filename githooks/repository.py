"""Minimal git repository access: discovery, layout and config lookup."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import RepositoryNotFoundError

logger = logging.getLogger(__name__)

GITDIR_PREFIX = "gitdir:"


def _looks_like_git_dir(path: Path) -> bool:
    """Same heuristic git uses: HEAD file plus objects/ and refs/ directories."""
    return (path / "HEAD").is_file() and (path / "objects").is_dir() and (path / "refs").is_dir()


def _read_gitdir_file(dot_git: Path) -> Path | None:
    """Resolve a `.git` file (worktrees, submodules) to the git dir it points at."""
    try:
        content = dot_git.read_text().strip()
    except OSError:
        return None
    if not content.startswith(GITDIR_PREFIX):
        return None
    target = Path(content[len(GITDIR_PREFIX) :].strip())
    if not target.is_absolute():
        target = dot_git.parent / target
    return target.resolve()


class Repository:
    """A git repository located on disk."""

    def __init__(self, git_dir: Path, workdir: Path | None):
        self.git_dir = git_dir
        self.workdir = workdir

    @classmethod
    def discover(cls, path: Path | str) -> Repository:
        """Find the repository containing ``path``, walking up the tree."""
        start = Path(path).expanduser().resolve()
        if start.is_file():
            start = start.parent

        for candidate in (start, *start.parents):
            dot_git = candidate / ".git"
            if dot_git.is_dir():
                return cls(dot_git, candidate)
            if dot_git.is_file():
                git_dir = _read_gitdir_file(dot_git)
                if git_dir is not None:
                    return cls(git_dir, candidate)
            if _looks_like_git_dir(candidate):
                # Inside a git dir: bare repository or the .git of a worktree
                if candidate.name == ".git":
                    return cls(candidate, candidate.parent)
                return cls(candidate, None)

        raise RepositoryNotFoundError(f"No git repository found at or above {start}")

    @property
    def is_bare(self) -> bool:
        return self.workdir is None

    def config_string(self, key: str) -> str | None:
        """Read a string from git config. Any failure counts as "not set"."""
        try:
            result = subprocess.run(
                ["git", "--git-dir", str(self.git_dir), "config", "--get", key],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.debug(f"git config lookup for {key} failed: {e}")
            return None
        if result.returncode != 0:
            return None
        return result.stdout.rstrip("\n")

    def __repr__(self) -> str:
        return f"Repository(git_dir={str(self.git_dir)!r}, workdir={str(self.workdir)!r})"
