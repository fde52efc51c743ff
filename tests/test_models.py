"""Tests for pydantic models."""

import warnings
from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from githooks.models import (
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

HOOK = Path("/repo/.git/hooks/pre-commit")


class TestHookOutcome:
    def test_ok_variants(self):
        assert HookOk(hook=HOOK).is_ok
        assert NoHookFound().is_ok
        assert not HookFailed(hook=HOOK, code=1).is_ok
        assert not HookTimedOut(hook=HOOK).is_ok

    def test_timeout_only_for_timed_out(self):
        assert HookTimedOut(hook=HOOK).is_timeout
        assert not HookFailed(hook=HOOK).is_timeout

    def test_discriminated_by_kind(self):
        adapter = TypeAdapter(HookOutcome)
        outcome = adapter.validate_python({"kind": "failed", "hook": str(HOOK), "code": 2})
        assert outcome == HookFailed(hook=HOOK, code=2)
        assert adapter.validate_python({"kind": "no_hook"}) == NoHookFound()

    def test_failed_defaults(self):
        failed = HookFailed(hook=HOOK)
        assert failed.code is None
        assert failed.stdout == ""
        assert failed.stderr == ""

    def test_frozen(self):
        failed = HookFailed(hook=HOOK, code=1)
        with pytest.raises(ValidationError):
            failed.code = 0


class TestHookResult:
    def test_from_ok(self):
        assert HookResult.from_outcome(HookOk(hook=HOOK)) == HookResult.ok()

    def test_no_hook_is_ok(self):
        assert HookResult.from_outcome(NoHookFound()).is_ok

    def test_failed_concatenates_stdout_then_stderr(self):
        outcome = HookFailed(hook=HOOK, code=1, stdout="out\n", stderr="err\n")
        assert HookResult.from_outcome(outcome) == HookResult.not_ok("out\nerr\n")

    def test_timed_out(self):
        result = HookResult.from_outcome(HookTimedOut(hook=HOOK))
        assert result.is_timeout
        assert not result.is_ok
        assert result.message == ""

    def test_timeout_as_failure(self):
        assert HookResult.timed_out().timeout_as_failure() == HookResult.not_ok("hook timed out")

    def test_timeout_as_failure_leaves_others(self):
        assert HookResult.ok().timeout_as_failure() == HookResult.ok()
        assert HookResult.not_ok("x").timeout_as_failure() == HookResult.not_ok("x")


class TestCommitMessage:
    def test_mutable(self):
        msg = CommitMessage(text="a")
        msg.text = "b"
        assert msg.text == "b"

    def test_default_empty(self):
        assert CommitMessage().text == ""


class TestPrepareCommitMsgSource:
    @pytest.mark.parametrize(
        "source,expected",
        [
            (PrepareCommitMsgSource.MESSAGE, ["message"]),
            (PrepareCommitMsgSource.TEMPLATE, ["template"]),
            (PrepareCommitMsgSource.MERGE, ["merge"]),
            (PrepareCommitMsgSource.SQUASH, ["squash"]),
        ],
    )
    def test_args(self, source, expected):
        assert source.hook_args() == expected

    def test_commit_carries_sha(self):
        assert PrepareCommitMsgSource.COMMIT.hook_args("deadbeef") == ["commit", "deadbeef"]

    def test_commit_without_sha(self):
        with pytest.raises(ValueError):
            PrepareCommitMsgSource.COMMIT.hook_args()


class TestHooksConfig:
    def test_defaults(self):
        cfg = HooksConfig()
        assert cfg.timeout == 0.0
        assert cfg.search_paths == []
        assert cfg.timeouts == {}

    def test_timeout_for(self):
        cfg = HooksConfig(timeout=5, timeouts={"post-commit": 0.5})
        assert cfg.timeout_for("post-commit") == 0.5
        assert cfg.timeout_for("pre-commit") == 5

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError):
            HooksConfig(timeout=-1)
        with pytest.raises(ValidationError):
            HooksConfig(timeouts={"pre-commit": -1})

    def test_unknown_key_warns(self):
        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            HooksConfig(bogus="val")
            assert any("bogus" in str(warning.message) for warning in w)
