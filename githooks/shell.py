"""Platform specifics for launching hooks: executable checks, shell discovery, path expansion."""

from __future__ import annotations

import logging
import os
import re
import shlex
import shutil
import subprocess
import sys
from pathlib import Path

from .errors import InvalidHookPathError

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

# See https://learn.microsoft.com/en-us/windows/win32/procthread/process-creation-flags
CREATE_NO_WINDOW = 0x08000000

# Any variable works; setting one makes Windows resolve PATH for the child correctly
WINDOWS_PATH_FIX_ENV = ("DUMMY_ENV_TO_FIX_WINDOWS_CMD_RUNS", "FixPathHandlingOnWindows")

_VAR_RE = re.compile(
    r"""\$(?:
        \{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}
        |(?P<plain>[A-Za-z_][A-Za-z0-9_]*)
    )""",
    re.VERBOSE,
)


def isExecutable(path: Path) -> bool:
    """Whether ``path`` may be run as a hook.

    Windows does not gate scripts on permission bits, so everything counts.
    """
    if IS_WINDOWS:
        return True
    try:
        mode = path.stat().st_mode
    except OSError as e:
        logger.error(f"metadata error: {e}")
        return False
    return mode & 0o111 != 0


def findBashExecutable() -> Path | None:
    """Locate the bash shipped with Git for Windows (never WSL's bash). None elsewhere."""
    if not IS_WINDOWS:
        return None
    git = shutil.which("git")
    if git is None:
        return None
    # <install>/cmd/git.exe -> <install>/usr/bin/bash.exe
    bash = Path(git).parent.parent / "usr" / "bin" / "bash.exe"
    return bash if bash.exists() else None


def findDefaultUnixShell() -> Path | None:
    shell = os.environ.get("SHELL")
    return Path(shell) if shell else None


def findShell() -> str:
    """Shell used to run hooks, falling back to plain ``bash``."""
    shell = findBashExecutable() or findDefaultUnixShell()
    return str(shell) if shell else "bash"


def buildCommand(hook: Path, args: list[str]) -> str:
    """Command line handed to ``<shell> -c``."""
    return " ".join(shlex.quote(part) for part in [hook.as_posix() if IS_WINDOWS else str(hook), *args])


def popenOptions() -> dict:
    """Extra ``subprocess.Popen`` keyword arguments for the current platform."""
    if IS_WINDOWS:
        env = dict(os.environ)
        env[WINDOWS_PATH_FIX_ENV[0]] = WINDOWS_PATH_FIX_ENV[1]
        return {
            "creationflags": getattr(subprocess, "CREATE_NO_WINDOW", CREATE_NO_WINDOW),
            "env": env,
        }
    # Own process group so a timed out hook can be killed with its children
    return {"start_new_session": True}


def expandPath(raw: str) -> str:
    """Expand ``~``, ``$VAR``, ``${VAR}`` and ``${VAR:-default}`` like a shell would.

    Raises InvalidHookPathError when a variable without default is undefined.
    """

    def substitute(match: re.Match) -> str:
        name = match.group("braced") or match.group("plain")
        value = os.environ.get(name)
        if value:
            return value
        default = match.group("default")
        if default is not None:
            return default
        if value is not None:
            return value
        raise InvalidHookPathError(f"error looking up variable {name!r} in {raw!r}")

    expanded = _VAR_RE.sub(substitute, raw)
    return os.path.expanduser(expanded)
