"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    RUNTIME_ERROR = 4
    GIT_ERROR = 5
    TERMINAL_ERROR = 6


@dataclass
class GbtError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


@dataclass
class GitCommandError(GbtError):
    """A git invocation exited unsuccessfully or could not be started."""

    code: ExitCode = ExitCode.GIT_ERROR
    command: tuple[str, ...] = ()

    def __str__(self) -> str:
        # Shown verbatim in the error banner.
        return self.message


@dataclass
class RepositoryUnavailableError(GitCommandError):
    """The working directory is not inside a git work tree."""


CANNOT_DELETE_CURRENT = "You can’t delete the currently checked-out branch."


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
