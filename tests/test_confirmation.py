from __future__ import annotations

from dataclasses import replace

import pytest
from helpers import FEATURE, loaded_state

from gbt.core.confirmation import begin_delete, on_confirming_key, reconcile
from gbt.core.controller import reduce
from gbt.core.messages import Branch, Key, KeyInput
from gbt.core.state import BROWSING, ConfirmingDelete


def _confirming():
    state = reduce(loaded_state(), KeyInput(Key.DOWN)).state
    return begin_delete(state).state


def test_begin_delete_enters_confirmation_and_clears_error() -> None:
    state = reduce(loaded_state(), KeyInput(Key.DELETE)).state
    assert state.error

    state = reduce(state, KeyInput(Key.DOWN)).state
    transition = begin_delete(state)

    assert transition.state.mode == ConfirmingDelete(target=FEATURE.name)
    assert transition.state.error == ""
    assert transition.state.pending_delete == FEATURE.name


def test_branch_flagged_current_is_rejected_even_if_current_name_differs() -> None:
    state = loaded_state((Branch("main"), Branch("odd", is_current=True)), current="main")
    state = reduce(state, KeyInput(Key.DOWN)).state

    transition = begin_delete(state)

    assert transition.state.mode == BROWSING
    assert transition.commands == ()


@pytest.mark.parametrize("presses", [1, 2, 5])
def test_cancel_always_returns_to_browsing_without_commands(presses: int) -> None:
    state = _confirming()
    for _ in range(presses):
        transition = on_confirming_key(state, KeyInput(Key.CANCEL))
        assert transition.commands == ()
        state = transition.state
    assert state.mode == BROWSING


def test_n_key_cancels() -> None:
    transition = reduce(_confirming(), KeyInput(Key.CANCEL, char="n"))

    assert transition.state.mode == BROWSING
    assert transition.commands == ()


@pytest.mark.parametrize(
    "key_input",
    [
        KeyInput(Key.UP),
        KeyInput(Key.DOWN),
        KeyInput(Key.ACTIVATE),
        KeyInput(Key.FILTER, char="/"),
        KeyInput(Key.CHAR, char="x"),
        KeyInput(Key.END),
    ],
)
def test_confirmation_swallows_other_keys(key_input: KeyInput) -> None:
    state = _confirming()

    transition = reduce(state, key_input)

    assert transition.state == state
    assert transition.commands == ()


def test_quit_is_honoured_while_confirming() -> None:
    transition = reduce(_confirming(), KeyInput(Key.QUIT, char="q"))

    assert transition.state.quitting is True
    assert transition.commands == ()


def test_confirming_key_outside_confirmation_is_ignored() -> None:
    state = loaded_state()

    assert on_confirming_key(state, KeyInput(Key.DELETE)).state is state


def test_reconcile_keeps_valid_target() -> None:
    state = _confirming()

    assert reconcile(state) is state


def test_reconcile_drops_target_that_became_current() -> None:
    state = replace(_confirming(), current=FEATURE.name)

    assert reconcile(state).mode == BROWSING
