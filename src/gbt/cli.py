"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .config import AppConfig, load_config
from .errors import ExitCode, GbtError, user_facing_error
from .logging import configure_logging, default_log_path

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

AppLauncher = Callable[..., "int | None"]


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def _repo_type(value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_dir():
        raise argparse.ArgumentTypeError(f"--repo must be an existing directory: {value}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gbt",
        description="Browse, switch and delete local git branches.",
    )
    parser.add_argument("-C", "--repo", type=_repo_type, default=Path("."))
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    parser.add_argument("--log-level", type=_log_level_type, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


def launch_tui(*, repo_path: Path, config: AppConfig) -> int:
    from gbt.ui.app import launch_app

    return launch_app(repo_path=repo_path, config=config)


def main(
    argv: Sequence[str] | None = None,
    *,
    app_launcher: AppLauncher | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    config = load_config(namespace.config)
    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    level = namespace.log_level or config.log_level
    logger = configure_logging(level=level, log_file=log_path)

    launcher = app_launcher or launch_tui
    try:
        logger.debug("Starting branch browser repo=%s", namespace.repo)
        result = launcher(repo_path=namespace.repo, config=config)
        if isinstance(result, int):
            return result
        return int(ExitCode.SUCCESS)
    except GbtError as exc:
        logger.error(
            "Handled GbtError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
