"""Git lifecycle hooks: one function per event.

Each function discovers the repository containing ``repo_path``, resolves
the hook, runs it and reduces the outcome to a HookResult. A missing hook is
a success. ``timeout`` is in seconds; ``None`` or ``0`` waits for the hook to
finish however long it takes.
"""

import logging
import time
from collections.abc import Sequence
from pathlib import Path

from .models import CommitMessage, HookOutcome, HookResult, PrepareCommitMsgSource
from .paths import (
    COMMIT_MSG_TEMP_FILE,
    HOOK_COMMIT_MSG,
    HOOK_POST_COMMIT,
    HOOK_PRE_COMMIT,
    HOOK_PREPARE_COMMIT_MSG,
    HookPaths,
)
from .repository import Repository

logger = logging.getLogger(__name__)


def runHook(
    repo_path: Path | str,
    hook_name: str,
    args: Sequence[str] = (),
    *,
    timeout: float | None = None,
    other_paths: Sequence[str] | None = None,
) -> HookOutcome:
    """Resolve and run any hook, returning the runner's outcome unreduced."""
    start = time.monotonic()
    repo = Repository.discover(repo_path)
    hook = HookPaths.resolve(repo, hook_name, other_paths)
    outcome = hook.run_hook(args, timeout=timeout)
    logger.debug(f"{hook_name}: {outcome.kind} in {(time.monotonic() - start) * 1000:.1f}ms")
    return outcome


def _runWithMessage(
    repo_path: Path | str,
    hook_name: str,
    msg: CommitMessage,
    extra_args: Sequence[str],
    timeout: float | None,
    other_paths: Sequence[str] | None,
) -> HookResult:
    """Run a hook that may rewrite the commit message via a temp file.

    ``msg.text`` is replaced with the file contents afterwards unless the
    hook timed out. The temp file is removed on every path.
    """
    start = time.monotonic()
    repo = Repository.discover(repo_path)
    hook = HookPaths.resolve(repo, hook_name, other_paths)

    temp_file = hook.git / COMMIT_MSG_TEMP_FILE
    temp_file.write_text(msg.text, encoding="utf-8")
    try:
        outcome = hook.run_hook([str(temp_file), *extra_args], timeout=timeout)
        if not outcome.is_timeout:
            msg.text = temp_file.read_text(encoding="utf-8", errors="replace")
    finally:
        temp_file.unlink(missing_ok=True)

    logger.debug(f"{hook_name}: {outcome.kind} in {(time.monotonic() - start) * 1000:.1f}ms")
    return HookResult.from_outcome(outcome)


def hooksPreCommit(
    repo_path: Path | str,
    *,
    timeout: float | None = None,
    other_paths: Sequence[str] | None = None,
) -> HookResult:
    """Run the pre-commit hook."""
    outcome = runHook(repo_path, HOOK_PRE_COMMIT, timeout=timeout, other_paths=other_paths)
    return HookResult.from_outcome(outcome)


def hooksPostCommit(
    repo_path: Path | str,
    *,
    timeout: float | None = None,
    other_paths: Sequence[str] | None = None,
) -> HookResult:
    """Run the post-commit hook."""
    outcome = runHook(repo_path, HOOK_POST_COMMIT, timeout=timeout, other_paths=other_paths)
    return HookResult.from_outcome(outcome)


def hooksCommitMsg(
    repo_path: Path | str,
    msg: CommitMessage,
    *,
    timeout: float | None = None,
    other_paths: Sequence[str] | None = None,
) -> HookResult:
    """Run the commit-msg hook, letting it edit ``msg``."""
    return _runWithMessage(repo_path, HOOK_COMMIT_MSG, msg, (), timeout, other_paths)


def hooksPrepareCommitMsg(
    repo_path: Path | str,
    source: PrepareCommitMsgSource,
    msg: CommitMessage,
    *,
    sha: str | None = None,
    timeout: float | None = None,
    other_paths: Sequence[str] | None = None,
) -> HookResult:
    """Run the prepare-commit-msg hook, letting it edit ``msg``.

    ``sha`` is required for PrepareCommitMsgSource.COMMIT.
    """
    return _runWithMessage(
        repo_path, HOOK_PREPARE_COMMIT_MSG, msg, source.hook_args(sha), timeout, other_paths
    )
