"""githooks - resolve and run git hooks with optional timeouts."""

__version__ = "0.1.0"
__author__ = "githooks Contributors"

from .config import loadConfig, writeConfig
from .errors import (
    ConfigError,
    HookKillError,
    HooksError,
    HookSpawnError,
    InvalidHookPathError,
    RepositoryNotFoundError,
)
from .hooks import hooksCommitMsg, hooksPostCommit, hooksPreCommit, hooksPrepareCommitMsg, runHook
from .models import (
    CommitMessage,
    HookFailed,
    HookOk,
    HookOutcome,
    HookResult,
    HooksConfig,
    HookTimedOut,
    NoHookFound,
    PrepareCommitMsgSource,
)
from .paths import HookPaths
from .repository import Repository

__all__ = [
    "CommitMessage",
    "ConfigError",
    "HookFailed",
    "HookKillError",
    "HookOk",
    "HookOutcome",
    "HookPaths",
    "HookResult",
    "HookSpawnError",
    "HookTimedOut",
    "HooksConfig",
    "HooksError",
    "InvalidHookPathError",
    "NoHookFound",
    "PrepareCommitMsgSource",
    "Repository",
    "RepositoryNotFoundError",
    "hooksCommitMsg",
    "hooksPostCommit",
    "hooksPreCommit",
    "hooksPrepareCommitMsg",
    "loadConfig",
    "runHook",
    "writeConfig",
]
