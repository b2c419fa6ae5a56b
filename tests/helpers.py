from __future__ import annotations

from gbt.core.commands import Transition
from gbt.core.controller import reduce
from gbt.core.messages import Branch, BranchesLoaded, Message, Resize
from gbt.core.state import ControllerState, initial_state

MAIN = Branch("main", is_current=True)
FEATURE = Branch("feature/x")


def apply_all(state: ControllerState, *messages: Message) -> Transition:
    transition = Transition(state)
    for message in messages:
        transition = reduce(transition.state, message)
    return transition


def loaded_state(
    branches: tuple[Branch, ...] = (MAIN, FEATURE),
    *,
    current: str = "main",
    width: int = 120,
    height: int = 30,
) -> ControllerState:
    return apply_all(
        initial_state("repo"),
        Resize(width=width, height=height),
        BranchesLoaded(branches=branches, current=current),
    ).state
