from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from gbt.core.messages import Branch
from gbt.errors import GitCommandError, RepositoryUnavailableError
from gbt.git.gateway import GitGateway

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

_IDENTITY = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
}


def _git(repo: Path, *args: str) -> str:
    completed = subprocess.run(
        ["git", "-C", str(repo), *args],
        capture_output=True,
        text=True,
        check=True,
        env={**os.environ, **_IDENTITY},
    )
    return completed.stdout.strip()


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    _git(path, "init", "-q", "-b", "main")
    for index in range(3):
        (path / "file.txt").write_text(f"{index}\n", encoding="utf-8")
        _git(path, "add", "file.txt")
        _git(path, "commit", "-q", "-m", f"commit {index}")
    _git(path, "branch", "topic")
    _git(path, "branch", "tracking")
    _git(path, "config", "branch.tracking.remote", ".")
    _git(path, "config", "branch.tracking.merge", "refs/heads/main")
    return path


def test_lists_branches_and_current(repo: Path) -> None:
    listing = GitGateway(repo).list_branches()

    assert listing.current == "main"
    assert set(listing.branches) == {
        Branch("main", is_current=True),
        Branch("topic"),
        Branch("tracking"),
    }


def test_upstream_and_commits(repo: Path) -> None:
    gateway = GitGateway(repo)

    assert gateway.resolve_upstream("topic") == ""
    upstream = gateway.resolve_upstream("tracking")
    assert upstream == "main"

    commits = gateway.recent_commits(upstream, limit=2)
    assert len(commits) == 2
    assert commits[0].endswith("commit 2")


def test_checkout_then_delete(repo: Path) -> None:
    gateway = GitGateway(repo)

    gateway.checkout("topic")
    assert gateway.list_branches().current == "topic"

    gateway.checkout("main")
    gateway.delete_branch("topic")
    assert "topic" not in {branch.name for branch in gateway.list_branches().branches}


def test_unmerged_branch_delete_surfaces_git_error(repo: Path) -> None:
    gateway = GitGateway(repo)
    _git(repo, "checkout", "-q", "-b", "wip")
    (repo / "file.txt").write_text("wip\n", encoding="utf-8")
    _git(repo, "commit", "-q", "-am", "wip")
    _git(repo, "checkout", "-q", "main")

    with pytest.raises(GitCommandError) as excinfo:
        gateway.delete_branch("wip")

    assert "not fully merged" in excinfo.value.message


def test_outside_a_repository(tmp_path: Path) -> None:
    plain = tmp_path / "plain"
    plain.mkdir()

    with pytest.raises(RepositoryUnavailableError):
        GitGateway(plain).list_branches()
