"""Selection-driven side panel loading with stale result suppression.

The side panel carries two identity tokens: ``panel.branch`` (the selection a
request was made for) and ``panel.upstream`` (the ref a log request was made
for). Every asynchronous result is compared against the live token before it
may touch state, so completion order never matters.
"""

from __future__ import annotations

import logging as py_logging
from dataclasses import replace

from gbt.core.commands import Transition, request_log, request_upstream
from gbt.core.messages import LogLoaded, UpstreamResolved
from gbt.core.state import LOG_LOADING_TEXT, ControllerState, SidePanel

logger = py_logging.getLogger(__name__)


def on_selection_changed(state: ControllerState) -> Transition:
    """Retarget the side panel at the current selection and request its upstream."""
    selected = state.selected
    if selected is None:
        return Transition(replace(state, panel=SidePanel()))
    panel = SidePanel(branch=selected.name)
    return Transition(replace(state, panel=panel), (request_upstream(selected.name),))


def on_upstream_resolved(state: ControllerState, message: UpstreamResolved) -> Transition:
    if message.for_branch != state.panel.branch:
        logger.debug(
            "Discarding stale upstream branch=%s selection=%s",
            message.for_branch,
            state.panel.branch,
        )
        return Transition(state)

    upstream = message.upstream.strip()
    if message.error or not upstream:
        if message.error:
            logger.debug("Upstream lookup failed branch=%s error=%s", message.for_branch, message.error)
        return Transition(replace(state, panel=SidePanel(branch=message.for_branch)))

    panel = SidePanel(branch=message.for_branch, upstream=upstream, log_text=LOG_LOADING_TEXT)
    return Transition(replace(state, panel=panel), (request_log(upstream),))


def on_log_loaded(state: ControllerState, message: LogLoaded) -> Transition:
    if not state.panel.upstream or message.for_ref != state.panel.upstream:
        logger.debug("Discarding stale log ref=%s upstream=%s", message.for_ref, state.panel.upstream)
        return Transition(state)

    if message.error:
        panel = replace(state.panel, log_text="", log_error=message.error)
    else:
        panel = replace(state.panel, log_text=message.text, log_error="")
    return Transition(replace(state, panel=panel))
