"""Single consumer of every message; the only writer of ControllerState."""

from __future__ import annotations

import logging as py_logging
import queue
from collections.abc import Iterable
from dataclasses import replace
from typing import Protocol

from typing_extensions import assert_never

from gbt.core import confirmation, selection
from gbt.core.commands import Command, Transition, request_branch_list, request_checkout
from gbt.core.messages import (
    BranchesLoaded,
    CheckoutCompleted,
    CheckoutFailed,
    DeletionCompleted,
    DeletionFailed,
    Key,
    KeyInput,
    LogLoaded,
    Message,
    Resize,
    StatusUpdate,
    UpstreamResolved,
)
from gbt.core.state import Browsing, ConfirmingDelete, ControllerState, initial_state
from gbt.ui.selectable_list import SelectableList

logger = py_logging.getLogger(__name__)

NOT_A_REPOSITORY_STATUS = "Not a repository"

_NAVIGATION = {
    Key.UP: lambda items: items.move(-1),
    Key.DOWN: lambda items: items.move(1),
    Key.PAGE_UP: lambda items: items.page(-1),
    Key.PAGE_DOWN: lambda items: items.page(1),
    Key.HOME: lambda items: items.first(),
    Key.END: lambda items: items.last(),
}


def _quit(state: ControllerState) -> Transition:
    return Transition(replace(state, quitting=True))


def _with_list(state: ControllerState, branch_list: SelectableList) -> Transition:
    """Store a list update and reload the side panel if the selection moved."""
    before = state.branch_list.selected_name()
    updated = replace(state, branch_list=branch_list)
    if branch_list.selected_name() != before:
        return selection.on_selection_changed(updated)
    return Transition(updated)


def _on_branches_loaded(state: ControllerState, message: BranchesLoaded) -> Transition:
    if message.error:
        logger.warning("Branch listing failed error=%s", message.error)
        return Transition(replace(state, error=message.error, status=NOT_A_REPOSITORY_STATUS))

    branch_list = state.branch_list.with_items(message.branches).with_height(state.list_height)
    if message.current:
        branch_list = branch_list.select_name(message.current)
    status = f"On {message.current}" if message.current else "HEAD detached"
    updated = replace(
        state,
        error="",
        branches=tuple(message.branches),
        current=message.current,
        status=status,
        branch_list=branch_list,
    )
    updated = confirmation.reconcile(updated)
    return selection.on_selection_changed(updated)


def _activate(state: ControllerState) -> Transition:
    selected = state.selected
    if selected is None:
        return Transition(state)
    if selected.name == state.current:
        return Transition(replace(state, status=f"Already on “{selected.name}”", error=""))
    logger.info("Checkout requested branch=%s", selected.name)
    return Transition(
        replace(state, status=f"Switching to “{selected.name}”…", error=""),
        (request_checkout(selected.name), request_branch_list()),
    )


def _on_filter_key(state: ControllerState, key_input: KeyInput) -> Transition:
    branch_list = state.branch_list
    if key_input.char and key_input.char.isprintable():
        return _with_list(state, branch_list.set_filter(branch_list.filter_text + key_input.char))
    if key_input.key is Key.DELETE:
        return _with_list(state, branch_list.set_filter(branch_list.filter_text[:-1]))
    if key_input.key is Key.ACTIVATE:
        return _with_list(state, branch_list.stop_filter(keep=True))
    if key_input.key is Key.CANCEL:
        return _with_list(state, branch_list.stop_filter(keep=False))
    move = _NAVIGATION.get(key_input.key)
    if move is not None:
        return _with_list(state, move(branch_list))
    return Transition(state)


def _on_browse_key(state: ControllerState, key_input: KeyInput) -> Transition:
    if key_input.key is Key.INTERRUPT:
        return _quit(state)
    if state.branch_list.filtering:
        return _on_filter_key(state, key_input)

    key = key_input.key
    if key is Key.QUIT:
        return _quit(state)
    if key is Key.ACTIVATE:
        return _activate(state)
    if key is Key.DELETE:
        return confirmation.begin_delete(state)
    if key is Key.FILTER:
        return Transition(replace(state, branch_list=state.branch_list.start_filter()))
    if key is Key.CANCEL and state.branch_list.filter_text:
        return _with_list(state, state.branch_list.stop_filter(keep=False))
    move = _NAVIGATION.get(key)
    if move is not None:
        return _with_list(state, move(state.branch_list))
    return Transition(state)


def _on_key(state: ControllerState, key_input: KeyInput) -> Transition:
    mode = state.mode
    if isinstance(mode, ConfirmingDelete):
        return confirmation.on_confirming_key(state, key_input)
    if isinstance(mode, Browsing):
        return _on_browse_key(state, key_input)
    assert_never(mode)


def reduce(state: ControllerState, message: Message, *, exit_on_checkout: bool = False) -> Transition:
    """Apply one message. Never performs I/O; gateway work is returned as commands."""
    match message:
        case Resize(width=width, height=height):
            resized = replace(state, width=width, height=height)
            return Transition(
                replace(resized, branch_list=resized.branch_list.with_height(resized.list_height))
            )
        case BranchesLoaded():
            return _on_branches_loaded(state, message)
        case UpstreamResolved():
            return selection.on_upstream_resolved(state, message)
        case LogLoaded():
            return selection.on_log_loaded(state, message)
        case CheckoutCompleted(branch=branch):
            if exit_on_checkout:
                return _quit(state)
            return Transition(
                replace(state, status=f"Switched to “{branch}”", error=""),
                (request_branch_list(),),
            )
        case CheckoutFailed(error=error):
            return Transition(replace(state, error=error))
        case DeletionCompleted(branch=branch):
            return Transition(
                replace(state, status=f"Deleted “{branch}”", error=""),
                (request_branch_list(),),
            )
        case DeletionFailed(error=error):
            return Transition(replace(state, error=error))
        case StatusUpdate(text=text):
            return Transition(replace(state, status=text, error=""))
        case KeyInput():
            return _on_key(state, message)
        case _:
            assert_never(message)


class CommandSink(Protocol):
    def submit(self, commands: Iterable[Command]) -> None: ...

    def has_pending(self) -> bool: ...


class Controller:
    """Owns the state and drains the inbox that every producer posts into."""

    def __init__(
        self,
        dispatcher: CommandSink,
        *,
        inbox: queue.Queue[Message] | None = None,
        state: ControllerState | None = None,
        exit_on_checkout: bool = False,
    ) -> None:
        self.state = state if state is not None else initial_state()
        self._dispatcher = dispatcher
        self._inbox: queue.Queue[Message] = inbox if inbox is not None else queue.Queue()
        self._exit_on_checkout = exit_on_checkout

    @property
    def quitting(self) -> bool:
        return self.state.quitting

    def post(self, message: Message) -> None:
        self._inbox.put(message)

    def start(self) -> None:
        self._dispatcher.submit((request_branch_list(),))

    def has_pending(self) -> bool:
        return not self._inbox.empty() or self._dispatcher.has_pending()

    def handle(self, message: Message) -> ControllerState:
        transition = reduce(self.state, message, exit_on_checkout=self._exit_on_checkout)
        self.state = transition.state
        if transition.commands:
            self._dispatcher.submit(transition.commands)
        return self.state

    def pump(self, *, max_items: int = 50) -> int:
        """Apply queued messages in arrival order without blocking."""
        processed = 0
        while processed < max_items and not self.state.quitting:
            try:
                message = self._inbox.get_nowait()
            except queue.Empty:
                break
            self.handle(message)
            processed += 1
        return processed
