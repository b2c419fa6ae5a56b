"""XDG config loading."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from gbt.git.gateway import DEFAULT_COMMIT_LIMIT

DEFAULT_CONFIG_PATH = Path("~/.config/gbt/config.toml").expanduser()
CONFIG_PATH_ENV = "GBT_CONFIG"
DEFAULT_LOG_LEVEL: Literal["DEBUG", "INFO", "WARN", "ERROR"] = "INFO"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARN", "ERROR"}


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    commit_limit: int = Field(default=DEFAULT_COMMIT_LIMIT, ge=1, le=50)
    exit_on_checkout: bool = False
    git_timeout_seconds: float | None = Field(default=None, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = DEFAULT_LOG_LEVEL

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            normalized = value.strip().upper()
            return "WARN" if normalized == "WARNING" else normalized
        return value


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        env_path = os.getenv(CONFIG_PATH_ENV, "").strip()
        if env_path:
            return Path(env_path).expanduser()
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    commit_limit = raw.get("commit_limit", cfg.commit_limit)
    if isinstance(commit_limit, int) and not isinstance(commit_limit, bool) and 1 <= commit_limit <= 50:
        cfg.commit_limit = commit_limit

    exit_on_checkout = raw.get("exit_on_checkout", cfg.exit_on_checkout)
    if isinstance(exit_on_checkout, bool):
        cfg.exit_on_checkout = exit_on_checkout

    timeout = raw.get("git_timeout_seconds")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        cfg.git_timeout_seconds = float(timeout)

    log_level = raw.get("log_level", cfg.log_level)
    if isinstance(log_level, str):
        normalized = log_level.strip().upper()
        if normalized == "WARNING":
            normalized = "WARN"
        if normalized in _VALID_LOG_LEVELS:
            cfg.log_level = cast(Literal["DEBUG", "INFO", "WARN", "ERROR"], normalized)

    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return AppConfig()
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _sanitize(raw)
