from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from gbt.config import AppConfig, get_config_path, load_config


def test_load_defaults_when_config_missing(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "config.toml")

    assert cfg.commit_limit == 5
    assert cfg.exit_on_checkout is False
    assert cfg.git_timeout_seconds is None
    assert cfg.log_level == "INFO"


def test_load_reads_all_known_keys(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        'commit_limit = 12\nexit_on_checkout = true\ngit_timeout_seconds = 2.5\nlog_level = "debug"\n',
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.commit_limit == 12
    assert cfg.exit_on_checkout is True
    assert cfg.git_timeout_seconds == 2.5
    assert cfg.log_level == "DEBUG"


def test_load_ignores_invalid_values_per_key(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        'commit_limit = 500\nexit_on_checkout = "yes"\ngit_timeout_seconds = -1\nlog_level = "loud"\n',
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg == AppConfig()


def test_load_accepts_warning_alias(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('log_level = "warning"\n', encoding="utf-8")

    assert load_config(path).log_level == "WARN"


def test_malformed_toml_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("commit_limit = [", encoding="utf-8")

    assert load_config(path) == AppConfig()


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('theme = "dark"\ncommit_limit = 3\n', encoding="utf-8")

    assert load_config(path).commit_limit == 3


def test_config_path_honours_environment(monkeypatch, tmp_path: Path) -> None:
    target = tmp_path / "custom.toml"
    monkeypatch.setenv("GBT_CONFIG", str(target))

    assert get_config_path() == target
    assert get_config_path(tmp_path / "explicit.toml") == tmp_path / "explicit.toml"


def test_config_path_defaults_under_home(monkeypatch) -> None:
    monkeypatch.delenv("GBT_CONFIG", raising=False)

    path = get_config_path()

    assert path.parts[-3:] == (".config", "gbt", "config.toml")


@pytest.mark.parametrize("limit", [0, 51])
def test_commit_limit_bounds_are_validated(limit: int) -> None:
    with pytest.raises(ValidationError):
        AppConfig(commit_limit=limit)


def test_assignment_is_validated() -> None:
    cfg = AppConfig()

    with pytest.raises(ValidationError):
        cfg.git_timeout_seconds = 0


def test_default_commit_limit_matches_gateway_default() -> None:
    from gbt.git.gateway import DEFAULT_COMMIT_LIMIT

    assert AppConfig().commit_limit == DEFAULT_COMMIT_LIMIT
