from __future__ import annotations

import io
import logging as py_logging
from contextlib import redirect_stderr
from pathlib import Path

import pytest

from gbt import cli
from gbt.config import AppConfig
from gbt.errors import ExitCode, GbtError


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("GBT_CONFIG", raising=False)


def test_cli_help_includes_public_flags() -> None:
    help_text = cli.build_parser().format_help()

    assert "--repo" in help_text
    assert "--config" in help_text
    assert "--log-level" in help_text
    assert "--log-file" in help_text


def test_invalid_log_level_returns_error_code() -> None:
    with redirect_stderr(io.StringIO()):
        code = cli.main(["--log-level", "loud"], app_launcher=lambda **_: 0)

    assert code == int(ExitCode.INVALID_ARGS)


def test_missing_repo_directory_is_rejected(tmp_path: Path) -> None:
    with redirect_stderr(io.StringIO()):
        code = cli.main(["-C", str(tmp_path / "missing")], app_launcher=lambda **_: 0)

    assert code == int(ExitCode.INVALID_ARGS)


def test_launcher_receives_repo_and_loaded_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("commit_limit = 9\n", encoding="utf-8")
    seen: dict[str, object] = {}

    def fake_launcher(*, repo_path: Path, config: AppConfig) -> int:
        seen["repo_path"] = repo_path
        seen["config"] = config
        return 0

    code = cli.main(["-C", str(tmp_path), "--config", str(config_path)], app_launcher=fake_launcher)

    assert code == 0
    assert seen["repo_path"] == tmp_path
    assert isinstance(seen["config"], AppConfig)
    assert seen["config"].commit_limit == 9


def test_log_level_flag_overrides_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('log_level = "ERROR"\n', encoding="utf-8")

    code = cli.main(
        ["--config", str(config_path), "--log-level", "debug", "--log-file", str(tmp_path / "gbt.log")],
        app_launcher=lambda **_: None,
    )

    assert code == 0
    assert py_logging.getLogger("gbt").level == py_logging.DEBUG
    assert (tmp_path / "gbt.log").exists()


def test_launcher_error_is_reported_to_stderr() -> None:
    def fake_launcher(**_: object) -> int:
        raise GbtError(
            "Terminal could not be initialised",
            code=ExitCode.TERMINAL_ERROR,
            hint="Run gbt in an interactive terminal.",
        )

    stream = io.StringIO()
    with redirect_stderr(stream):
        code = cli.main([], app_launcher=fake_launcher)

    assert code == int(ExitCode.TERMINAL_ERROR)
    assert "Terminal could not be initialised" in stream.getvalue()
    assert "Next step" in stream.getvalue()


def test_unexpected_exception_maps_to_runtime_error() -> None:
    def fake_launcher(**_: object) -> int:
        raise RuntimeError("boom")

    stream = io.StringIO()
    with redirect_stderr(stream):
        code = cli.main([], app_launcher=fake_launcher)

    assert code == int(ExitCode.RUNTIME_ERROR)
    assert "Unexpected runtime failure" in stream.getvalue()
