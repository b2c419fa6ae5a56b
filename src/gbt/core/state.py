"""Controller-owned state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from gbt.core.messages import Branch
from gbt.ui.selectable_list import SelectableList

LOADING_STATUS = "Loading…"
LOG_LOADING_TEXT = "Loading…"

# Header, divider and footer are drawn outside the list body.
RESERVED_LINES = 3


@dataclass(frozen=True)
class Browsing:
    pass


@dataclass(frozen=True)
class ConfirmingDelete:
    target: str


Mode = Union[Browsing, ConfirmingDelete]

BROWSING = Browsing()


@dataclass(frozen=True)
class SidePanel:
    """Upstream/log details for ``branch``, the current selection token."""

    branch: str = ""
    upstream: str = ""
    log_text: str = ""
    log_error: str = ""


@dataclass(frozen=True)
class ControllerState:
    branches: tuple[Branch, ...] = ()
    current: str = ""
    status: str = LOADING_STATUS
    error: str = ""
    mode: Mode = BROWSING
    width: int = 0
    height: int = 0
    repo_name: str = ""
    panel: SidePanel = field(default_factory=SidePanel)
    branch_list: SelectableList = field(default_factory=SelectableList)
    quitting: bool = False

    @property
    def selected(self) -> Branch | None:
        return self.branch_list.selected()

    @property
    def list_height(self) -> int:
        return max(0, self.height - RESERVED_LINES)

    @property
    def pending_delete(self) -> str:
        if isinstance(self.mode, ConfirmingDelete):
            return self.mode.target
        return ""


def initial_state(repo_name: str = "") -> ControllerState:
    return ControllerState(repo_name=repo_name)
