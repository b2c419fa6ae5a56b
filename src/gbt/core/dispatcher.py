"""Runs gateway calls off the UI thread, one result message per command."""

from __future__ import annotations

import logging as py_logging
import threading
from collections.abc import Callable, Iterable
from typing import Protocol

from typing_extensions import assert_never

from gbt.core.commands import Checkout, Command, DeleteBranch, ListBranches, LoadLog, ResolveUpstream
from gbt.core.messages import (
    BranchesLoaded,
    CheckoutCompleted,
    CheckoutFailed,
    DeletionCompleted,
    DeletionFailed,
    LogLoaded,
    Message,
    UpstreamResolved,
)
from gbt.errors import GbtError
from gbt.git.gateway import DEFAULT_COMMIT_LIMIT, BranchListing

logger = py_logging.getLogger(__name__)


class Gateway(Protocol):
    def list_branches(self) -> BranchListing: ...

    def resolve_upstream(self, branch: str) -> str: ...

    def recent_commits(self, ref: str, limit: int = ...) -> list[str]: ...

    def checkout(self, branch: str) -> None: ...

    def delete_branch(self, branch: str) -> None: ...


Spawner = Callable[[Callable[[], None]], None]


def spawn_daemon_thread(target: Callable[[], None]) -> None:
    threading.Thread(target=target, daemon=True).start()


def _error_text(exc: Exception) -> str:
    if isinstance(exc, GbtError):
        return exc.message
    return str(exc) or exc.__class__.__name__


class Dispatcher:
    """Fire-and-forget executor for controller commands.

    Tasks share nothing with each other or with the controller; each posts
    exactly one message and gateway failures become that message's error.
    There is no cancellation: superseded results are dropped by the
    controller on arrival.
    """

    def __init__(
        self,
        gateway: Gateway,
        post: Callable[[Message], None],
        *,
        commit_limit: int = DEFAULT_COMMIT_LIMIT,
        spawn: Spawner = spawn_daemon_thread,
    ) -> None:
        self._gateway = gateway
        self._post = post
        self._commit_limit = commit_limit
        self._spawn = spawn
        self._lock = threading.Lock()
        self._inflight = 0

    def has_pending(self) -> bool:
        with self._lock:
            return self._inflight > 0

    def submit(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self._start(command)

    def request_branch_list(self) -> None:
        self._start(ListBranches())

    def request_checkout(self, branch: str) -> None:
        self._start(Checkout(branch))

    def request_delete(self, branch: str) -> None:
        self._start(DeleteBranch(branch))

    def request_upstream(self, branch: str) -> None:
        self._start(ResolveUpstream(branch))

    def request_log(self, ref: str) -> None:
        self._start(LoadLog(ref))

    def _start(self, command: Command) -> None:
        logger.debug("dispatch command=%s", command)
        with self._lock:
            self._inflight += 1

        def _run() -> None:
            try:
                message = self.execute(command)
                self._post(message)
            finally:
                with self._lock:
                    self._inflight -= 1

        self._spawn(_run)

    def execute(self, command: Command) -> Message:
        """Run one command synchronously and wrap the outcome."""
        try:
            return self._call(command)
        except GbtError as exc:
            logger.warning("Gateway call failed command=%s error=%s", command, exc.message)
            return self._failure(command, _error_text(exc))
        except Exception as exc:
            logger.exception("Unexpected gateway failure command=%s", command)
            return self._failure(command, _error_text(exc))

    def _call(self, command: Command) -> Message:
        match command:
            case ListBranches():
                listing = self._gateway.list_branches()
                return BranchesLoaded(branches=tuple(listing.branches), current=listing.current)
            case Checkout(branch=branch):
                self._gateway.checkout(branch)
                return CheckoutCompleted(branch=branch)
            case DeleteBranch(branch=branch):
                self._gateway.delete_branch(branch)
                return DeletionCompleted(branch=branch)
            case ResolveUpstream(branch=branch):
                return UpstreamResolved(for_branch=branch, upstream=self._gateway.resolve_upstream(branch))
            case LoadLog(ref=ref):
                lines = self._gateway.recent_commits(ref, limit=self._commit_limit)
                return LogLoaded(for_ref=ref, text="\n".join(lines))
            case _:
                assert_never(command)

    @staticmethod
    def _failure(command: Command, error: str) -> Message:
        match command:
            case ListBranches():
                return BranchesLoaded(error=error)
            case Checkout():
                return CheckoutFailed(error=error)
            case DeleteBranch():
                return DeletionFailed(error=error)
            case ResolveUpstream(branch=branch):
                return UpstreamResolved(for_branch=branch, error=error)
            case LoadLog(ref=ref):
                return LogLoaded(for_ref=ref, error=error)
            case _:
                assert_never(command)
