"""Hook path resolution and timeout-bounded hook execution."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .backoff import timeoutWithQuadraticBackoff
from .models import HookFailed, HookOk, HookOutcome, HookTimedOut, NoHookFound
from .process import HookProcess
from .repository import Repository
from .shell import expandPath, isExecutable

logger = logging.getLogger(__name__)

CONFIG_HOOKS_PATH = "core.hooksPath"
DEFAULT_HOOKS_PATH = "hooks"

HOOK_PRE_COMMIT = "pre-commit"
HOOK_POST_COMMIT = "post-commit"
HOOK_COMMIT_MSG = "commit-msg"
HOOK_PREPARE_COMMIT_MSG = "prepare-commit-msg"
COMMIT_MSG_TEMP_FILE = "COMMIT_EDITMSG"

Spawner = Callable[[Path, Path, list[str]], HookProcess]


class HookPaths(BaseModel):
    """Where a hook lives and where it runs. Resolved fresh for every call."""

    model_config = ConfigDict(frozen=True)

    git: Path
    hook: Path
    pwd: Path

    @classmethod
    def resolve(
        cls,
        repo: Repository,
        hook: str,
        other_paths: Sequence[str] | None = None,
    ) -> HookPaths:
        """Resolve ``hook`` for ``repo``.

        ``core.hooksPath`` always wins: if it is set, a missing hook there is
        not a reason to look anywhere else. Otherwise search ``.git/hooks``
        and then each of ``other_paths`` (relative to the git dir), falling
        back to ``.git/hooks/<hook>`` when nothing exists.
        """
        pwd = repo.workdir or repo.git_dir
        git_dir = repo.git_dir

        config_path = repo.config_string(CONFIG_HOOKS_PATH)
        if config_path:
            hook_path = Path(expandPath(str(Path(config_path) / hook)))
            if not hook_path.is_absolute():
                hook_path = pwd / hook_path
            logger.debug(f"{hook}: using {CONFIG_HOOKS_PATH} -> {hook_path}")
            return cls(git=git_dir, hook=hook_path, pwd=pwd)

        return cls(git=git_dir, hook=cls._find_hook(git_dir, other_paths, hook), pwd=pwd)

    @staticmethod
    def _find_hook(git_dir: Path, other_paths: Sequence[str] | None, hook: str) -> Path:
        candidates = [DEFAULT_HOOKS_PATH]
        candidates.extend(p.rstrip("/\\") for p in other_paths or [])

        for directory in candidates:
            path = git_dir / directory / hook
            if path.exists():
                logger.debug(f"{hook}: found {path}")
                return path

        return git_dir / DEFAULT_HOOKS_PATH / hook

    def found(self) -> bool:
        """Was a hook file found and is it executable."""
        return self.hook.exists() and isExecutable(self.hook)

    def run_hook(
        self,
        args: Sequence[str] = (),
        timeout: float | None = None,
        spawn: Spawner = HookProcess.spawn,
    ) -> HookOutcome:
        """Run the hook following https://git-scm.com/docs/githooks conventions.

        With a positive ``timeout`` (seconds) the hook is polled with
        quadratic back-off and killed once the deadline passes. Collecting
        its output after it exits is bounded by what is left of the deadline.
        ``None`` or ``0`` waits for completion.
        """
        if not self.found():
            logger.debug(f"no runnable hook at {self.hook}")
            return NoHookFound()

        process = spawn(self.pwd, self.hook, list(args))

        if not timeout:
            code, stdout, stderr = process.wait_with_output()
            return classifyOutput(self.hook, code, stdout, stderr)

        start = time.monotonic()
        if not timeoutWithQuadraticBackoff(timeout, process.poll):
            process.kill()
            return HookTimedOut(hook=self.hook)

        remaining = max(timeout - (time.monotonic() - start), 0.0)
        code, stdout, stderr = process.wait_with_output(remaining)
        return classifyOutput(self.hook, code, stdout, stderr)


def classifyOutput(hook: Path, code: int, stdout: bytes, stderr: bytes) -> HookOutcome:
    """Map a finished process to HookOk / HookFailed."""
    if code == 0:
        return HookOk(hook=hook)
    return HookFailed(
        hook=hook,
        # Negative return codes mean the process died from a signal
        code=code if code >= 0 else None,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
