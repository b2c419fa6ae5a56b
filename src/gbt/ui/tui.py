"""Curses front end: draws screens and feeds keys into the controller."""

from __future__ import annotations

import curses
import logging as py_logging
from dataclasses import dataclass

from gbt.core.controller import Controller
from gbt.core.messages import Resize
from gbt.ui.keys import translate_key
from gbt.ui.view import Screen, build_screen, truncate_line

logger = py_logging.getLogger(__name__)

POLL_INTERVAL_MS = 80


@dataclass(frozen=True)
class Theme:
    header: int
    muted: int
    selected: int
    current: int
    accent: int
    danger: int


def _init_theme() -> Theme:
    # Fallback theme (no color support).
    fallback = Theme(
        header=curses.A_REVERSE,
        muted=curses.A_DIM,
        selected=curses.A_REVERSE | curses.A_BOLD,
        current=curses.A_BOLD,
        accent=curses.A_BOLD,
        danger=curses.A_BOLD,
    )
    if not curses.has_colors():
        return fallback
    try:
        curses.start_color()
        curses.use_default_colors()
    except curses.error:
        return fallback

    try:
        curses.init_pair(1, curses.COLOR_CYAN, -1)
        curses.init_pair(2, curses.COLOR_MAGENTA, -1)
        curses.init_pair(3, curses.COLOR_WHITE, curses.COLOR_BLUE)
    except curses.error:
        return fallback
    accent = curses.color_pair(1)
    return Theme(
        header=curses.A_REVERSE,
        muted=curses.A_DIM,
        selected=curses.color_pair(3) | curses.A_BOLD,
        current=accent | curses.A_BOLD,
        accent=accent,
        danger=curses.color_pair(2) | curses.A_BOLD,
    )


def _safe_addstr(win: curses.window, y: int, x: int, s: str, attr: int = 0) -> None:
    try:
        win.addstr(y, x, s, attr)
    except curses.error:
        # Ignore drawing errors at borders / tiny terminals.
        return


def _pad(text: str, width: int) -> str:
    text = truncate_line(text, width)
    return text + " " * max(0, width - len(text))


def draw(stdscr: curses.window, screen: Screen, theme: Theme) -> None:
    width, height = screen.width, screen.height
    stdscr.erase()
    if width <= 0 or height <= 0:
        stdscr.noutrefresh()
        return

    right = screen.header_right
    space = max(1, width - len(screen.header_left) - len(right))
    _safe_addstr(stdscr, 0, 0, _pad(screen.header_left + " " * space + right, width), theme.header)
    if height > 1:
        _safe_addstr(stdscr, 1, 0, "─" * width, theme.muted)

    body_top = 2
    body_height = max(0, height - 3)
    if screen.confirm and body_height > 0:
        body_height -= 1
        _safe_addstr(stdscr, body_top + body_height, 0, _pad(screen.confirm, width), theme.danger)
    for offset, row in enumerate(screen.rows[:body_height]):
        if row.selected:
            attr = theme.selected
            prefix = "│"
        else:
            attr = theme.current if row.current else theme.muted
            prefix = " "
        _safe_addstr(stdscr, body_top + offset, 0, prefix, theme.accent)
        _safe_addstr(stdscr, body_top + offset, 1, _pad(row.text, screen.list_width - 1), attr)

    panel = screen.panel
    if panel is not None and body_height >= 3:
        _draw_panel(stdscr, screen, theme, body_top, body_height)

    if height > 2:
        footer_attr = theme.danger if screen.footer_is_error else theme.header
        # The bottom-right cell cannot be written without scrolling.
        _safe_addstr(stdscr, height - 1, 0, _pad(screen.footer, width - 1), footer_attr)
    stdscr.noutrefresh()


def _draw_panel(stdscr: curses.window, screen: Screen, theme: Theme, top: int, height: int) -> None:
    panel = screen.panel
    assert panel is not None
    x = screen.list_width
    try:
        win = stdscr.derwin(height, panel.width, top, x)
        win.box()
    except curses.error:
        return
    inner = panel.width - 4
    _safe_addstr(win, 1, 2, truncate_line(panel.title, inner), theme.accent)
    _safe_addstr(win, 2, 2, "─" * max(0, inner), theme.muted)
    attr = theme.danger if panel.is_error else 0
    for offset, line in enumerate(panel.lines[: max(0, height - 4)]):
        _safe_addstr(win, 3 + offset, 2, truncate_line(line, inner), attr)


def run_tui(stdscr: curses.window, controller: Controller) -> None:
    """Render, read one key, drain the inbox; repeat until the state quits."""
    try:
        curses.curs_set(0)
    except curses.error:
        # Some terminals (or TERM/terminfo combinations) don't support this.
        pass
    stdscr.keypad(True)
    theme = _init_theme()

    max_y, max_x = stdscr.getmaxyx()
    controller.post(Resize(width=max_x, height=max_y))
    controller.start()
    controller.pump()

    while not controller.quitting:
        draw(stdscr, build_screen(controller.state), theme)
        curses.doupdate()

        # Poll while background work is in progress, otherwise block on input.
        stdscr.timeout(POLL_INTERVAL_MS if controller.has_pending() else -1)
        try:
            ch = stdscr.get_wch()
        except curses.error:
            # No input before the poll interval ran out.
            ch = None
        if ch == curses.KEY_RESIZE:
            max_y, max_x = stdscr.getmaxyx()
            controller.post(Resize(width=max_x, height=max_y))
        elif ch is not None:
            key_input = translate_key(ch)
            if key_input is not None:
                controller.post(key_input)
        controller.pump()
    logger.debug("TUI loop finished")
