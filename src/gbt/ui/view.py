"""Pure mapping from controller state to a screen description."""

from __future__ import annotations

from dataclasses import dataclass

from gbt.core.state import ControllerState
from gbt.ui.keys import HELP_TEXT

BRAND = "gbt"
NO_UPSTREAM_HINT = "Select a branch with an upstream to see commits."
EMPTY_LOG_TEXT = "No commits to show."
MIN_LIST_WIDTH = 50
MIN_PANEL_WIDTH = 24
LIST_SHARE = 0.70


@dataclass(frozen=True)
class Row:
    text: str
    selected: bool = False
    current: bool = False


@dataclass(frozen=True)
class PanelView:
    title: str
    lines: tuple[str, ...]
    width: int
    is_error: bool = False


@dataclass(frozen=True)
class Screen:
    width: int
    height: int
    header_left: str
    header_right: str
    rows: tuple[Row, ...]
    list_width: int
    panel: PanelView | None
    confirm: str
    footer: str
    footer_is_error: bool


def truncate_line(text: str, max_len: int) -> str:
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    if max_len == 1:
        return "…"
    return text[: max_len - 1] + "…"


def split_widths(width: int) -> tuple[int, int]:
    """Return (list width, panel width); panel width 0 means no side panel."""
    left = max(MIN_LIST_WIDTH, int(width * LIST_SHARE))
    right = width - left
    if right < MIN_PANEL_WIDTH:
        return width, 0
    return left, right


def _rows(state: ControllerState, width: int) -> tuple[Row, ...]:
    branch_list = state.branch_list
    if state.pending_delete and branch_list.height > 1:
        # The confirmation prompt takes the last body line.
        branch_list = branch_list.with_height(branch_list.height - 1)
    selected_name = branch_list.selected_name()
    rows: list[Row] = []
    for branch in branch_list.window():
        marker = "▶ " if branch.is_current else "  "
        rows.append(
            Row(
                text=truncate_line(marker + branch.name, max(0, width - 3)),
                selected=branch.name == selected_name,
                current=branch.is_current,
            )
        )
    return tuple(rows)


def _panel(state: ControllerState, width: int) -> PanelView:
    panel = state.panel
    upstream = panel.upstream.strip()
    if not panel.branch:
        title = "No branch selected"
    else:
        title = f"{panel.branch} — {upstream or 'no upstream'}"

    max_line = width - 4
    if not upstream:
        lines: tuple[str, ...] = (NO_UPSTREAM_HINT,)
        is_error = False
    elif panel.log_error:
        lines = (truncate_line("⚠ " + panel.log_error, max_line),)
        is_error = True
    elif not panel.log_text.strip():
        lines = (EMPTY_LOG_TEXT,)
        is_error = False
    else:
        lines = tuple(truncate_line(line, max_line) for line in panel.log_text.split("\n"))
        is_error = False
    return PanelView(title=truncate_line(title, max_line), lines=lines, width=width, is_error=is_error)


def _footer(state: ControllerState) -> tuple[str, bool]:
    if state.error:
        return "⚠ " + state.error, True
    branch_list = state.branch_list
    if branch_list.filtering:
        return f"filter: /{branch_list.filter_text}   enter keep   esc clear", False
    text = f"{HELP_TEXT}   •   {state.status}"
    if branch_list.filter_text:
        text += f"   /{branch_list.filter_text}"
    return text, False


def build_screen(state: ControllerState) -> Screen:
    list_width, panel_width = split_widths(state.width)
    confirm = ""
    if state.pending_delete:
        confirm = f"Press ⌫ again to delete “{state.pending_delete}” (Esc to cancel)"
    footer, footer_is_error = _footer(state)
    return Screen(
        width=state.width,
        height=state.height,
        header_left=f"{BRAND}  {state.repo_name}".rstrip(),
        header_right=f"{len(state.branches)} branches",
        rows=_rows(state, list_width),
        list_width=list_width,
        panel=_panel(state, panel_width) if panel_width else None,
        confirm=confirm,
        footer=footer,
        footer_is_error=footer_is_error,
    )
