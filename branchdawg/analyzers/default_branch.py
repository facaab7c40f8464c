"""Number every commit reachable from the default branch tip."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from branchdawg.config import DEFAULT_BRANCH_HINT, default_branch_name
from branchdawg.errors import UnknownReference
from branchdawg.models import CommitId
from branchdawg.repo import CommitGraph, open_repo

logger = logging.getLogger(__name__)


class DefaultBranchIndex:
    """Commits on the default branch, keyed to their walk position.

    Position 0 is the tip itself; positions grow with distance from the tip
    in the graph's walk order, so a lower position is closer to the tip.
    """

    def __init__(self, name: str, tip: CommitId, commits: Iterable[CommitId]) -> None:
        self.name = name
        self.tip = tip
        self._positions: dict[CommitId, int] = {}
        for commit in commits:
            self._positions.setdefault(commit, len(self._positions))

    @classmethod
    def build(cls, graph: CommitGraph, name: str) -> DefaultBranchIndex:
        """Resolve branch *name* and index everything reachable from its tip.

        Raises :class:`UnknownReference` (with a config hint) when *name* is
        not a local branch.
        """
        try:
            tip = graph.resolve_branch(name)
        except UnknownReference as e:
            raise UnknownReference(e.name, hint=DEFAULT_BRANCH_HINT) from None
        index = cls(name, tip, graph.walk(tip, include_start=True))
        logger.debug("default branch %s at %s: %d commit(s)", name, tip.short, len(index))
        return index

    def __contains__(self, commit: object) -> bool:
        return commit in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[CommitId]:
        return iter(self._positions)

    def position(self, commit: CommitId) -> int | None:
        return self._positions.get(commit)


if __name__ == "__main__":
    repo_path = sys.argv[1] if len(sys.argv) > 1 else "."

    r = open_repo(Path(repo_path))
    index = DefaultBranchIndex.build(CommitGraph(r), default_branch_name(r))
    print(f"{len(index)} commit(s) reachable from '{index.name}' ({index.tip.short})")
