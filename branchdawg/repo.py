"""Thin helpers for opening a repo and walking its commit graph."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from git import InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import BadName, BadObject, GitCommandError

from branchdawg.errors import DecodeError, GraphAccessError, RepositoryNotFound, UnknownReference
from branchdawg.models import CommitId

logger = logging.getLogger(__name__)

# Everything GitPython raises for unreadable objects or failed rev-list runs
GIT_ERRORS = (GitCommandError, BadName, BadObject, ValueError)


def open_repo(path: str | Path = ".") -> Repo:
    """Open a git repository at *path* (or any of its parents)."""
    try:
        repo = Repo(str(path), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise RepositoryNotFound(str(path)) from None
    return repo


def decode_ref_name(name: str | bytes) -> str:
    """Return *name* as strict UTF-8 text.

    Names read from the filesystem arrive as ``str`` with undecodable bytes
    smuggled through ``surrogateescape``; those are turned back into bytes
    first so the offset in the :class:`DecodeError` points at the real byte.
    """
    raw = name if isinstance(name, bytes) else os.fsencode(name)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(raw, e.start) from None


class CommitGraph:
    """Read-only view of a repository's commit graph.

    All walks use ``git rev-list --topo-order`` so every traversal visits
    commits in the same order and "nearest" means the same thing everywhere.
    """

    def __init__(self, repo: Repo) -> None:
        self.repo = repo

    def resolve_branch(self, name: str) -> CommitId:
        """Return the tip commit of the local branch *name*."""
        try:
            head = self.repo.heads[name]
        except IndexError:
            raise UnknownReference(name) from None
        try:
            return CommitId(head.commit.binsha)
        except GIT_ERRORS as e:
            raise GraphAccessError(f"unable to read tip of branch {name}", e) from e

    def walk(self, start: CommitId, include_start: bool = False) -> Iterator[CommitId]:
        """Yield the ancestors of *start*, nearest first.

        The generator is lazy and cannot be rewound; call again for a new walk.
        """
        commits = self.repo.iter_commits(start.hex, topo_order=True)
        try:
            first = True
            for commit in commits:
                if first:
                    first = False
                    if not include_start and commit.binsha == start.raw:
                        continue
                yield CommitId(commit.binsha)
        except GIT_ERRORS as e:
            raise GraphAccessError(f"unable to walk history of {start.short}", e) from e

    def walk_until(self, start: CommitId, stop: CommitId) -> Iterator[CommitId]:
        """Yield commits after *start* up to, not including, the first *stop*."""
        for commit in self.walk(start):
            if commit == stop:
                return
            yield commit

    def current_commit(self) -> CommitId | None:
        """Return HEAD's commit when HEAD is on a branch, else ``None``."""
        head = self.repo.head
        if head.is_detached:
            return None
        try:
            return CommitId(head.commit.binsha)
        except ValueError:
            # unborn branch, nothing committed yet
            return None


if __name__ == "__main__":
    import sys

    from branchdawg.config import default_branch_name

    path = sys.argv[1] if len(sys.argv) > 1 else "."
    r = open_repo(path)
    graph = CommitGraph(r)
    main_branch = default_branch_name(r)
    tip = graph.resolve_branch(main_branch)
    print(f"Repo: {r.working_dir}")
    print(f"Default branch: {main_branch} ({tip.short})")
    print(f"Commits on {main_branch}: {sum(1 for _ in graph.walk(tip, include_start=True))}")
