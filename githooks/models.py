"""Pydantic models for hook outcomes, caller results and configuration."""

import warnings
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class _StrictConfig(_Frozen):
    """Base config: frozen, warns on unknown keys."""

    @model_validator(mode="before")
    @classmethod
    def _warn_unknown_keys(cls, values: dict) -> dict:
        if not isinstance(values, dict):
            return values
        known = set(cls.model_fields.keys())
        unknown = set(values.keys()) - known
        for key in sorted(unknown):
            warnings.warn(f"Unknown config key: {key!r}", UserWarning, stacklevel=2)
        return values


# Runner outcomes


class _Outcome(_Frozen):
    @property
    def is_ok(self) -> bool:
        """True for outcomes that let the git operation proceed."""
        return False

    @property
    def is_timeout(self) -> bool:
        return False


class HookOk(_Outcome):
    """Hook ran and exited 0."""

    kind: Literal["ok"] = "ok"
    hook: Path

    @property
    def is_ok(self) -> bool:
        return True


class NoHookFound(_Outcome):
    """Nothing executable at the resolved path, so nothing was run."""

    kind: Literal["no_hook"] = "no_hook"

    @property
    def is_ok(self) -> bool:
        return True


class HookFailed(_Outcome):
    """Hook ran and exited non-zero."""

    kind: Literal["failed"] = "failed"
    hook: Path
    code: int | None = None
    stdout: str = ""
    stderr: str = ""


class HookTimedOut(_Outcome):
    """Hook was killed after running past its deadline."""

    kind: Literal["timed_out"] = "timed_out"
    hook: Path

    @property
    def is_timeout(self) -> bool:
        return True


HookOutcome = Annotated[
    HookOk | NoHookFound | HookFailed | HookTimedOut,
    Field(discriminator="kind"),
]


# Caller-facing result


class HookResult(_Frozen):
    """Result handed back to callers of the event functions.

    ``message`` holds the hook's stdout followed by its stderr when
    ``status`` is ``"not_ok"`` and is empty otherwise.
    """

    status: Literal["ok", "not_ok", "timed_out"] = "ok"
    message: str = ""

    @classmethod
    def ok(cls) -> "HookResult":
        return cls()

    @classmethod
    def not_ok(cls, message: str) -> "HookResult":
        return cls(status="not_ok", message=message)

    @classmethod
    def timed_out(cls) -> "HookResult":
        return cls(status="timed_out")

    @classmethod
    def from_outcome(cls, outcome: HookOutcome) -> "HookResult":
        if outcome.is_ok:
            return cls.ok()
        if outcome.is_timeout:
            return cls.timed_out()
        return cls.not_ok(f"{outcome.stdout}{outcome.stderr}")

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @property
    def is_timeout(self) -> bool:
        return self.status == "timed_out"

    def timeout_as_failure(self) -> "HookResult":
        """Collapse a timeout into a plain failure for callers with no timeout branch."""
        if self.is_timeout:
            return HookResult.not_ok("hook timed out")
        return self


# Commit message exchange


class CommitMessage(BaseModel):
    """Mutable commit message buffer owned by the caller."""

    text: str = ""


class PrepareCommitMsgSource(str, Enum):
    """Where the commit message came from, as passed to prepare-commit-msg."""

    MESSAGE = "message"
    TEMPLATE = "template"
    MERGE = "merge"
    SQUASH = "squash"
    COMMIT = "commit"

    def hook_args(self, sha: str | None = None) -> list[str]:
        """Arguments following the message file path."""
        if self is PrepareCommitMsgSource.COMMIT:
            if not sha:
                raise ValueError("the 'commit' source requires a commit sha")
            return [self.value, sha]
        return [self.value]


# Configuration


class HooksConfig(_StrictConfig):
    """Top-level githooks.toml schema."""

    timeout: float = Field(default=0.0, ge=0)
    search_paths: list[str] = []
    timeouts: dict[str, Annotated[float, Field(ge=0)]] = {}

    def timeout_for(self, hook: str) -> float:
        """Deadline in seconds for ``hook``; 0 means no limit."""
        return self.timeouts.get(hook, self.timeout)
