"""Immutable values passed into the controller."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class Branch:
    name: str
    is_current: bool = False


class Key(str, Enum):
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page-up"
    PAGE_DOWN = "page-down"
    HOME = "home"
    END = "end"
    ACTIVATE = "activate"
    DELETE = "delete"
    CANCEL = "cancel"
    FILTER = "filter"
    CHAR = "char"
    QUIT = "quit"
    INTERRUPT = "interrupt"


@dataclass(frozen=True)
class BranchesLoaded:
    branches: tuple[Branch, ...] = ()
    current: str = ""
    error: str = ""


@dataclass(frozen=True)
class UpstreamResolved:
    for_branch: str
    upstream: str = ""
    error: str = ""


@dataclass(frozen=True)
class LogLoaded:
    for_ref: str
    text: str = ""
    error: str = ""


@dataclass(frozen=True)
class CheckoutCompleted:
    branch: str


@dataclass(frozen=True)
class CheckoutFailed:
    error: str


@dataclass(frozen=True)
class DeletionCompleted:
    branch: str


@dataclass(frozen=True)
class DeletionFailed:
    error: str


@dataclass(frozen=True)
class StatusUpdate:
    text: str


@dataclass(frozen=True)
class KeyInput:
    """A logical key press.

    ``char`` carries the typed character for ``Key.CHAR`` and the raw
    character for letter bindings, so filter input can still receive it.
    """

    key: Key
    char: str = ""


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


Message = Union[
    BranchesLoaded,
    UpstreamResolved,
    LogLoaded,
    CheckoutCompleted,
    CheckoutFailed,
    DeletionCompleted,
    DeletionFailed,
    StatusUpdate,
    KeyInput,
    Resize,
]
