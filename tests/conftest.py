"""Pytest configuration and fixtures for branchdawg tests."""

from __future__ import annotations

import subprocess
from collections.abc import Iterator
from pathlib import Path

import pytest
from git import Repo

from branchdawg.models import CommitId


def run_git(*args: str, cwd: Path) -> str:
    """Run git command safely without shell=True and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        check=True,
        text=True,
    )
    return result.stdout.strip()


class GitRepo:
    """Small driver for building commit graphs in a scratch repository."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._counter = 0

    def git(self, *args: str) -> str:
        return run_git(*args, cwd=self.path)

    def commit(self, message: str | None = None) -> CommitId:
        """Create a commit on the checked-out branch and return its id."""
        self._counter += 1
        message = message or f"commit {self._counter}"
        (self.path / "file.txt").write_text(f"{message}\n")
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.rev("HEAD")

    def rev(self, rev: str) -> CommitId:
        return CommitId.from_hex(self.git("rev-parse", f"{rev}^{{commit}}"))

    def checkout(self, *args: str) -> None:
        self.git("checkout", "-q", *args)


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's global and system git config out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    # GitPython reads /etc/gitconfig regardless of GIT_CONFIG_NOSYSTEM
    monkeypatch.setattr(Repo, "config_level", ("user", "global", "repository"))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@test.com")
    return home


@pytest.fixture
def tmp_repo(tmp_path: Path, git_env: Path) -> Iterator[GitRepo]:
    """Create a temporary git repository with one commit on ``main``.

    Yields:
        GitRepo driving the temporary repository
    """
    path = tmp_path / "repo"
    path.mkdir()
    run_git("init", "-q", "-b", "main", cwd=path)
    run_git("config", "user.email", "test@test.com", cwd=path)
    run_git("config", "user.name", "Test", cwd=path)

    repo = GitRepo(path)
    repo.commit("Initial commit")
    yield repo
