"""Wire config, gateway, dispatcher and controller into the curses app."""

from __future__ import annotations

import logging as py_logging
import queue
from pathlib import Path

from gbt.config import AppConfig, load_config
from gbt.core.controller import Controller
from gbt.core.dispatcher import Dispatcher, Gateway, Spawner, spawn_daemon_thread
from gbt.core.messages import Message
from gbt.core.state import initial_state
from gbt.errors import ExitCode, GbtError
from gbt.git.gateway import GitGateway

logger = py_logging.getLogger(__name__)


def build_controller(
    gateway: Gateway,
    config: AppConfig,
    *,
    repo_name: str = "",
    spawn: Spawner = spawn_daemon_thread,
) -> Controller:
    inbox: queue.Queue[Message] = queue.Queue()
    dispatcher = Dispatcher(gateway, inbox.put, commit_limit=config.commit_limit, spawn=spawn)
    return Controller(
        dispatcher,
        inbox=inbox,
        state=initial_state(repo_name),
        exit_on_checkout=config.exit_on_checkout,
    )


def launch_app(
    *,
    repo_path: str | Path = ".",
    config: AppConfig | None = None,
    config_path: str | Path | None = None,
) -> int:
    """Run the branch browser until the user quits."""
    try:
        import curses
    except ImportError as exc:  # pragma: no cover - platform edge path
        raise GbtError(
            "Terminal support is unavailable on this platform.",
            code=ExitCode.TERMINAL_ERROR,
            hint="Install the curses module (windows-curses on Windows).",
        ) from exc

    from gbt.ui.tui import run_tui

    resolved = config if config is not None else load_config(config_path)
    gateway = GitGateway(repo_path, timeout_seconds=resolved.git_timeout_seconds)
    controller = build_controller(gateway, resolved, repo_name=gateway.repo_name())
    logger.info("Starting branch browser repo=%s", Path(repo_path))
    try:
        curses.wrapper(run_tui, controller)
    except KeyboardInterrupt:
        logger.debug("Interrupted; leaving branch browser")
    except curses.error as exc:
        raise GbtError(
            f"Terminal could not be initialised: {exc}",
            code=ExitCode.TERMINAL_ERROR,
            hint="Run gbt in an interactive terminal with TERM set.",
        ) from exc
    return int(ExitCode.SUCCESS)
