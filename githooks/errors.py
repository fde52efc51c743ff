"""Hard errors raised by githooks.

A hook that exits non-zero or runs past its deadline is not an error: those
are reported as data (see ``githooks.models``).
"""


class HooksError(Exception):
    """Base class for all githooks errors."""


class RepositoryNotFoundError(HooksError):
    """No git repository could be discovered from the given path."""


class InvalidHookPathError(HooksError):
    """The configured hooks path could not be expanded."""


class HookSpawnError(HooksError):
    """The shell running the hook could not be started."""


class HookKillError(HooksError):
    """A hook that ran past its deadline could not be terminated."""


class ConfigError(HooksError):
    """githooks.toml is invalid."""
