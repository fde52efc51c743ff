"""Hook child process: spawn with piped output, poll, kill, collect."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from functools import partial
from pathlib import Path
from typing import IO

from .errors import HookKillError, HookSpawnError
from .shell import IS_WINDOWS, buildCommand, findShell, popenOptions

logger = logging.getLogger(__name__)

READ_CHUNK = 65536
# How long to wait for the pipes to close once the process group is dead
KILL_DRAIN_TIMEOUT = 0.5


def _drain(stream: IO[bytes], sink: bytearray) -> None:
    """Copy ``stream`` into ``sink`` until EOF, then close it."""
    try:
        for chunk in iter(partial(stream.read1, READ_CHUNK), b""):
            sink.extend(chunk)
    except (OSError, ValueError) as e:
        logger.debug(f"stopped reading hook output: {e}")
    finally:
        stream.close()


class HookProcess:
    """A running hook, started through a login shell.

    Both pipes are drained by background threads from the moment the hook
    starts, so a chatty hook never blocks on a full pipe while it is being
    polled. Every exit path either collects the output or kills and reaps
    the process.
    """

    def __init__(self, popen: subprocess.Popen):
        self.popen = popen
        self._stdout = bytearray()
        self._stderr = bytearray()
        self._readers = [
            threading.Thread(target=_drain, args=(stream, sink), daemon=True)
            for stream, sink in ((popen.stdout, self._stdout), (popen.stderr, self._stderr))
            if stream is not None
        ]
        for reader in self._readers:
            reader.start()

    @classmethod
    def spawn(cls, pwd: Path, hook: Path, args: list[str]) -> HookProcess:
        """Run ``<shell> -l -c "<hook> <args>"`` in ``pwd``."""
        shell = findShell()
        # -l so hooks see the same profile setup as under git
        argv = [shell, "-l", "-c", buildCommand(hook, args)]
        logger.debug(f"run hook {hook} in {pwd} with {shell}")
        try:
            popen = subprocess.Popen(
                argv,
                cwd=pwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                **popenOptions(),
            )
        except OSError as e:
            raise HookSpawnError(f"Failed to start {shell} for hook {hook}: {e}") from e
        return cls(popen)

    @property
    def pid(self) -> int:
        return self.popen.pid

    def poll(self) -> bool:
        """Non-blocking: has the process exited?"""
        return self.popen.poll() is not None

    def wait_with_output(self, timeout: float | None = None) -> tuple[int, bytes, bytes]:
        """Wait for exit and for both pipes to close. Returns (returncode, stdout, stderr).

        ``timeout`` bounds only the wait for the pipes: anything the hook left
        running in the background that still holds them is killed along with
        the rest of the process group, and the output read so far is returned.
        """
        code = self.popen.wait()
        if not self._join_readers(timeout):
            logger.debug(f"hook {self.pid} exited but its pipes are still open, killing its group")
            self._signal_group()
            self._join_readers(KILL_DRAIN_TIMEOUT)
        return code, bytes(self._stdout), bytes(self._stderr)

    def kill(self) -> None:
        """Force-kill the hook and everything it started, then reap it.

        Output is discarded. Raises HookKillError if the OS refuses.
        """
        logger.debug(f"killing hook process {self.pid}")
        self._signal_group()
        self.popen.wait()
        self._join_readers(KILL_DRAIN_TIMEOUT)

    def _signal_group(self) -> None:
        try:
            if IS_WINDOWS:
                self.popen.kill()
            else:
                os.killpg(self.popen.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        except OSError as e:
            raise HookKillError(f"Failed to kill hook process {self.pid}: {e}") from e

    def _join_readers(self, timeout: float | None) -> bool:
        """Join the reader threads within ``timeout`` seconds overall. True if both finished."""
        if timeout is None:
            for reader in self._readers:
                reader.join()
            return True

        deadline = time.monotonic() + timeout
        for reader in self._readers:
            reader.join(max(deadline - time.monotonic(), 0.0))
        return not any(reader.is_alive() for reader in self._readers)
