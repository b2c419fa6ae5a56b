"""Two-step guard in front of branch deletion.

Confirmation style: the delete keystroke pressed a second time confirms.
Deleting the checked-out branch is rejected before the confirming state is
ever entered.
"""

from __future__ import annotations

import logging as py_logging
from dataclasses import replace

from gbt.core.commands import Transition, request_branch_list, request_delete
from gbt.core.messages import Key, KeyInput
from gbt.core.state import BROWSING, ConfirmingDelete, ControllerState
from gbt.errors import CANNOT_DELETE_CURRENT

logger = py_logging.getLogger(__name__)


def begin_delete(state: ControllerState) -> Transition:
    selected = state.selected
    if selected is None:
        return Transition(state)
    if selected.is_current or selected.name == state.current:
        logger.info("Rejected delete of checked-out branch=%s", selected.name)
        return Transition(replace(state, error=CANNOT_DELETE_CURRENT))
    return Transition(replace(state, mode=ConfirmingDelete(target=selected.name), error=""))


def on_confirming_key(state: ControllerState, key_input: KeyInput) -> Transition:
    """Key table while a deletion is pending; everything but confirm, cancel and quit is dropped."""
    if not isinstance(state.mode, ConfirmingDelete):
        return Transition(state)
    target = state.mode.target

    if key_input.key is Key.DELETE:
        logger.info("Confirmed delete branch=%s", target)
        return Transition(
            replace(state, mode=BROWSING),
            (request_delete(target), request_branch_list()),
        )
    if key_input.key is Key.CANCEL:
        return Transition(replace(state, mode=BROWSING))
    if key_input.key in (Key.QUIT, Key.INTERRUPT):
        return Transition(replace(state, quitting=True))
    return Transition(state)


def reconcile(state: ControllerState) -> ControllerState:
    """Drop a pending confirmation whose target is gone or became current."""
    if not isinstance(state.mode, ConfirmingDelete):
        return state
    target = state.mode.target
    names = {branch.name for branch in state.branches}
    if target in names and target != state.current:
        return state
    logger.debug("Abandoning delete confirmation target=%s", target)
    return replace(state, mode=BROWSING)
