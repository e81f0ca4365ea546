"""Exception hierarchy for opensdk.

Every error that reaches the CLI process boundary is either an
:class:`OpensdkError` or a click exception. Handlers raise; only the
dispatcher in ``opensdk.cli.main`` turns exceptions into exit codes.

Hierarchy
---------
OpensdkError
├── InvalidEnvironmentVariableError
├── ConfigError
│   ├── ConfigFileNotFoundError
│   └── ConfigLoadError
├── FlagValueError
└── CommandError
"""

from pathlib import Path
from typing import Optional, Sequence


class OpensdkError(Exception):
    """Base exception for all opensdk errors."""

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class InvalidEnvironmentVariableError(OpensdkError):
    """Raised when an environment assignment is not of the form KEY=VALUE."""

    def __init__(self, assignment: str) -> None:
        super().__init__(f'invalid environment variable "{assignment}"')
        self.assignment = assignment


class ConfigError(OpensdkError):
    """Base class for configuration file problems."""


class ConfigFileNotFoundError(ConfigError):
    """Raised when no configuration file could be located.

    The resolver treats this as a normal outcome, not a failure.
    """

    def __init__(self, name: str, locations: Sequence[Path]) -> None:
        searched = ", ".join(str(p) for p in locations) or "<none>"
        super().__init__(f'config file "{name}" not found in [{searched}]')
        self.name = name
        self.locations = list(locations)


class ConfigLoadError(ConfigError):
    """Raised when a configuration file exists but cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"error loading config file {path}: {reason}")
        self.path = path
        self.reason = reason


class FlagValueError(OpensdkError):
    """Raised when a flag holds a value outside its allowed set."""

    def __init__(self, flag: str, value: object, allowed: Sequence[str]) -> None:
        super().__init__(
            f'flag "{flag}" has invalid value "{value}"',
            hint=f"Allowed values: {', '.join(allowed)}",
        )
        self.flag = flag
        self.value = value
        self.allowed = list(allowed)


class CommandError(OpensdkError):
    """Raised by command handlers for user-facing failures."""
