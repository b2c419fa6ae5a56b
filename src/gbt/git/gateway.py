"""Synchronous git queries and mutations behind the branch browser."""

from __future__ import annotations

import logging as py_logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from gbt.core.messages import Branch
from gbt.errors import GitCommandError, RepositoryUnavailableError

logger = py_logging.getLogger(__name__)

DEFAULT_COMMIT_LIMIT = 5
_NO_UPSTREAM_MARKERS = (
    "no upstream configured",
    "does not point to a branch",
    "no such branch",
)


class SubprocessRunner(Protocol):
    def __call__(
        self,
        args: list[str],
        *,
        capture_output: bool = False,
        text: bool = False,
        check: bool = False,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess[str]: ...


@dataclass(frozen=True)
class BranchListing:
    branches: tuple[Branch, ...] = field(default_factory=tuple)
    current: str = ""


def _failure_message(completed: subprocess.CompletedProcess[str]) -> str:
    stderr = (completed.stderr or "").strip()
    if stderr:
        return stderr
    return f"git exited with status {completed.returncode}"


def parse_branch_listing(raw: str) -> BranchListing:
    """Parse ``%(HEAD)%(refname:short)`` lines; the head marker is ``*``."""
    branches: list[Branch] = []
    current = ""
    for line in raw.splitlines():
        line = line.rstrip("\r")
        if not line.strip():
            continue
        is_current = line.startswith("*")
        name = line[1:].strip()
        if not name:
            continue
        if is_current:
            current = name
        branches.append(Branch(name=name, is_current=is_current))
    return BranchListing(branches=tuple(branches), current=current)


class GitGateway:
    def __init__(
        self,
        repo_path: str | Path = ".",
        *,
        runner: SubprocessRunner = subprocess.run,
        timeout_seconds: float | None = None,
    ) -> None:
        self.repo_path = Path(repo_path)
        self._runner = runner
        self._timeout = timeout_seconds

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        env.setdefault("GIT_TERMINAL_PROMPT", "0")
        env.setdefault("LC_ALL", "C")
        return env

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        cmd = ["git", "-C", str(self.repo_path), *args]
        logger.debug("git-run command=%s", " ".join(cmd))
        try:
            return self._runner(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                env=self._env(),
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning("git-timeout command=%s timeout=%s", " ".join(cmd), self._timeout)
            raise GitCommandError(
                f"git {args[0]} timed out after {self._timeout:g}s",
                hint="Raise git_timeout_seconds in the config file.",
                command=tuple(cmd),
            ) from exc
        except OSError as exc:
            logger.error("git-start-failed command=%s error=%s", " ".join(cmd), exc)
            raise GitCommandError(
                f"Unable to run git: {exc}",
                hint="Install git and make sure it is on PATH.",
                command=tuple(cmd),
            ) from exc

    def _checked(self, args: list[str]) -> str:
        completed = self._run(args)
        if completed.returncode != 0:
            message = _failure_message(completed)
            logger.warning("git-failed args=%s stderr=%s", args, message)
            raise GitCommandError(message, command=tuple(args))
        return (completed.stdout or "").rstrip("\n")

    def repo_name(self) -> str:
        """Best-effort display name; never raises."""
        try:
            completed = self._run(["rev-parse", "--show-toplevel"])
        except GitCommandError:
            completed = None
        if completed is not None and completed.returncode == 0 and completed.stdout.strip():
            return Path(completed.stdout.strip()).name
        try:
            return self.repo_path.resolve().name
        except OSError:
            return ""

    def list_branches(self) -> BranchListing:
        logger.debug("Listing local branches repo=%s", self.repo_path)
        inside = self._run(["rev-parse", "--is-inside-work-tree"])
        if inside.returncode != 0:
            logger.error("Repository is not accessible repo=%s", self.repo_path)
            raise RepositoryUnavailableError(
                _failure_message(inside),
                hint="Run gbt inside a git working tree.",
                command=("rev-parse", "--is-inside-work-tree"),
            )

        raw = self._checked(["for-each-ref", "--format=%(HEAD)%(refname:short)", "refs/heads"])
        listing = parse_branch_listing(raw)
        logger.debug(
            "Discovered %s local branches repo=%s current=%s",
            len(listing.branches),
            self.repo_path,
            listing.current or "<detached>",
        )
        return listing

    def resolve_upstream(self, branch: str) -> str:
        """Return the upstream short name, or an empty string when none is configured."""
        completed = self._run(
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{upstream}}"]
        )
        if completed.returncode != 0:
            message = _failure_message(completed)
            if any(marker in message.lower() for marker in _NO_UPSTREAM_MARKERS):
                logger.debug("No upstream configured branch=%s", branch)
                return ""
            raise GitCommandError(message, command=("rev-parse", f"{branch}@{{upstream}}"))
        return completed.stdout.strip()

    def recent_commits(self, ref: str, limit: int = DEFAULT_COMMIT_LIMIT) -> list[str]:
        raw = self._checked(
            ["log", "--no-color", f"-n{max(1, limit)}", "--pretty=format:%h %s", ref, "--"]
        )
        return [line for line in raw.splitlines() if line.strip()]

    def checkout(self, branch: str) -> None:
        logger.info("Checking out branch=%s repo=%s", branch, self.repo_path)
        self._checked(["checkout", branch])

    def delete_branch(self, branch: str) -> None:
        # -d refuses unmerged branches; force deletion is not offered.
        logger.info("Deleting branch=%s repo=%s", branch, self.repo_path)
        self._checked(["branch", "-d", branch])
