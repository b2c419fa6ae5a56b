"""Requests the controller hands to the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from gbt.core.state import ControllerState


@dataclass(frozen=True)
class ListBranches:
    pass


@dataclass(frozen=True)
class Checkout:
    branch: str


@dataclass(frozen=True)
class DeleteBranch:
    branch: str


@dataclass(frozen=True)
class ResolveUpstream:
    branch: str


@dataclass(frozen=True)
class LoadLog:
    ref: str


Command = Union[ListBranches, Checkout, DeleteBranch, ResolveUpstream, LoadLog]


def request_branch_list() -> ListBranches:
    return ListBranches()


def request_checkout(branch: str) -> Checkout:
    return Checkout(branch)


def request_delete(branch: str) -> DeleteBranch:
    return DeleteBranch(branch)


def request_upstream(branch: str) -> ResolveUpstream:
    return ResolveUpstream(branch)


def request_log(ref: str) -> LoadLog:
    return LoadLog(ref)


@dataclass(frozen=True)
class Transition:
    """Result of applying one message: the next state plus commands to run.

    Multiple commands form a batch with no ordering guarantee between their
    completions.
    """

    state: ControllerState
    commands: tuple[Command, ...] = ()
