"""Typer-based CLI interface for githooks."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from .config import configExists, configPath, loadConfig, writeConfig
from .errors import HooksError
from .hooks import hooksCommitMsg, hooksPostCommit, hooksPreCommit, hooksPrepareCommitMsg, runHook
from .models import CommitMessage, HookResult, HooksConfig, PrepareCommitMsgSource
from .paths import (
    HOOK_COMMIT_MSG,
    HOOK_POST_COMMIT,
    HOOK_PRE_COMMIT,
    HOOK_PREPARE_COMMIT_MSG,
    HookPaths,
)
from .repository import Repository

EXIT_HOOK_FAILED = 1
EXIT_ERROR = 2
EXIT_TIMED_OUT = 124

app = typer.Typer(
    name="githooks",
    help="Resolve and run git hooks with optional timeouts",
    epilog="Honors core.hooksPath; a missing or non-executable hook counts as success.",
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

REPO_OPTION = typer.Option(Path("."), "-C", "--repo", help="Path inside the repository")
TIMEOUT_OPTION = typer.Option(
    None, "-t", "--timeout", min=0, help="Deadline in seconds (0 = none, default from config)"
)
MESSAGE_OPTION = typer.Option(None, "-m", "--message", help="Commit message text")
FILE_OPTION = typer.Option(None, "-F", "--file", help="Read the message from (and write it back to) FILE")


def _setupLogging(verbose: bool) -> None:
    """Attach a console handler to the githooks logger."""
    logger = logging.getLogger("githooks")
    if not verbose or logger.handlers:
        return
    logger.setLevel(logging.DEBUG)
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)


class GithooksCLI:
    """Repository and config for one CLI invocation."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path
        self.repo = Repository.discover(repo_path)
        self.root = self.repo.workdir or self.repo.git_dir
        self.config: HooksConfig = loadConfig(configPath(self.root))

    def timeout_for(self, hook: str, override: float | None) -> float:
        return override if override is not None else self.config.timeout_for(hook)

    @property
    def other_paths(self) -> list[str]:
        return list(self.config.search_paths)


@contextmanager
def _exitOnError() -> Iterator[None]:
    """Report hard errors, including unreadable message files, and exit with EXIT_ERROR."""
    try:
        yield
    except (HooksError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(EXIT_ERROR) from e


def _loadCLI(repo_path: Path) -> GithooksCLI:
    with _exitOnError():
        return GithooksCLI(repo_path)


def _finish(hook: str, result: HookResult) -> None:
    """Report a hook result and exit with the matching status."""
    if result.is_ok:
        console.print(f"[green]{hook}[/green]: ok")
        return
    if result.is_timeout:
        err_console.print(f"[yellow]{hook}[/yellow]: timed out")
        raise typer.Exit(EXIT_TIMED_OUT)
    typer.echo(result.message, nl=False, err=True)
    err_console.print(f"[red]{hook}[/red]: rejected")
    raise typer.Exit(EXIT_HOOK_FAILED)


def _readMessage(message: str | None, file: Path | None) -> CommitMessage:
    if file is not None:
        with _exitOnError():
            return CommitMessage(text=file.read_text(encoding="utf-8"))
    return CommitMessage(text=message or "")


def _writeMessage(msg: CommitMessage, file: Path | None) -> None:
    if file is not None:
        with _exitOnError():
            file.write_text(msg.text, encoding="utf-8")
    else:
        typer.echo(msg.text, nl=False)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log resolution and process details"),
):
    """Resolve and run git hooks."""
    _setupLogging(verbose)


@app.command()
def which(
    hook: str = typer.Argument(..., help="Hook name, e.g. pre-commit"),
    repo: Path = REPO_OPTION,
):
    """Show where a hook resolves to and whether it would run."""
    cli = _loadCLI(repo)
    with _exitOnError():
        paths = HookPaths.resolve(cli.repo, hook, cli.other_paths)
    state = "[green]runnable[/green]" if paths.found() else "[dim]not found[/dim]"
    console.print(f"{escape(str(paths.hook))} ({state})", soft_wrap=True)


@app.command()
def run(
    hook: str = typer.Argument(..., help="Hook name, e.g. pre-push"),
    args: list[str] | None = typer.Argument(None, help="Arguments passed to the hook"),
    repo: Path = REPO_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Run any hook with the given arguments."""
    cli = _loadCLI(repo)
    with _exitOnError():
        outcome = runHook(
            repo,
            hook,
            args or [],
            timeout=cli.timeout_for(hook, timeout),
            other_paths=cli.other_paths,
        )
    _finish(hook, HookResult.from_outcome(outcome))


@app.command("pre-commit")
def pre_commit(
    repo: Path = REPO_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Run the pre-commit hook."""
    cli = _loadCLI(repo)
    with _exitOnError():
        result = hooksPreCommit(
            repo, timeout=cli.timeout_for(HOOK_PRE_COMMIT, timeout), other_paths=cli.other_paths
        )
    _finish(HOOK_PRE_COMMIT, result)


@app.command("post-commit")
def post_commit(
    repo: Path = REPO_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Run the post-commit hook."""
    cli = _loadCLI(repo)
    with _exitOnError():
        result = hooksPostCommit(
            repo, timeout=cli.timeout_for(HOOK_POST_COMMIT, timeout), other_paths=cli.other_paths
        )
    _finish(HOOK_POST_COMMIT, result)


@app.command("commit-msg")
def commit_msg(
    message: str | None = MESSAGE_OPTION,
    file: Path | None = FILE_OPTION,
    repo: Path = REPO_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Run the commit-msg hook and print the (possibly edited) message."""
    cli = _loadCLI(repo)
    msg = _readMessage(message, file)
    with _exitOnError():
        result = hooksCommitMsg(
            repo, msg, timeout=cli.timeout_for(HOOK_COMMIT_MSG, timeout), other_paths=cli.other_paths
        )
    _writeMessage(msg, file)
    _finish(HOOK_COMMIT_MSG, result)


@app.command("prepare-commit-msg")
def prepare_commit_msg(
    source: PrepareCommitMsgSource = typer.Option(
        PrepareCommitMsgSource.MESSAGE, "-s", "--source", help="Origin of the message"
    ),
    sha: str | None = typer.Option(None, "--sha", help="Commit sha (required for --source commit)"),
    message: str | None = MESSAGE_OPTION,
    file: Path | None = FILE_OPTION,
    repo: Path = REPO_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Run the prepare-commit-msg hook and print the (possibly edited) message."""
    if source is PrepareCommitMsgSource.COMMIT and not sha:
        err_console.print("[red]Error:[/red] --sha is required with --source commit")
        raise typer.Exit(EXIT_ERROR)

    cli = _loadCLI(repo)
    msg = _readMessage(message, file)
    with _exitOnError():
        result = hooksPrepareCommitMsg(
            repo,
            source,
            msg,
            sha=sha,
            timeout=cli.timeout_for(HOOK_PREPARE_COMMIT_MSG, timeout),
            other_paths=cli.other_paths,
        )
    _writeMessage(msg, file)
    _finish(HOOK_PREPARE_COMMIT_MSG, result)


@app.command()
def init(
    repo: Path = REPO_OPTION,
    timeout: float = typer.Option(0.0, "-t", "--timeout", min=0, help="Default deadline in seconds"),
):
    """Write a githooks.toml at the repository root."""
    cli = _loadCLI(repo)
    path = configPath(cli.root)
    if configExists(path):
        console.print(f"Config already exists: {escape(str(path))}", soft_wrap=True)
        return
    writeConfig(path, HooksConfig(timeout=timeout))
    console.print(f"Created {escape(str(path))}", soft_wrap=True)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
