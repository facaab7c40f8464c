"""Find the closest named ancestor of each local branch.

For every branch that is not the default branch, walk its history (nearest
commit first, skipping the tip) until a commit that is the tip of another
branch or tag turns up. Then:

- if that commit is not reachable from the default branch, report it as a
  **named** parent (``refs/heads/x`` or ``refs/tags/x``);
- if it is reachable from the default branch, the branch is better described
  as **detached** from the default branch. The reported commit is the first
  commit between the tip and the match that is already on the default branch,
  which is where a rebased branch rejoins it, or the match itself.

A walk that never meets a referenced commit yields **no parent**.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from git import Repo

from branchdawg.analyzers.default_branch import DefaultBranchIndex
from branchdawg.analyzers.references import build_catalog, build_reference_index
from branchdawg.config import default_branch_name
from branchdawg.errors import GraphAccessError
from branchdawg.models import (
    BranchReport,
    CommitId,
    DetachedOnDefault,
    NamedParent,
    NoParent,
    ParentResolution,
    Reference,
    ReferenceCatalog,
    ReferenceInfo,
    branch_sort_key,
    to_json,
)
from branchdawg.repo import CommitGraph, open_repo

logger = logging.getLogger(__name__)


def resolve_parent(
    graph: CommitGraph,
    branch: ReferenceInfo,
    reference_index: dict[CommitId, Reference],
    default_index: DefaultBranchIndex,
) -> ParentResolution:
    """Return the :data:`ParentResolution` for *branch*.

    Parameters
    ----------
    graph:
        Commit graph to walk; anything with ``walk`` and ``walk_until``.
    branch:
        The branch to resolve. Its own tip is never reported as its parent.
    reference_index:
        Commit → reference map from :func:`build_reference_index`.
    default_index:
        Commits reachable from the default branch tip.

    Graph failures propagate as :class:`GraphAccessError`.
    """
    if branch.commit == default_index.tip:
        return DetachedOnDefault(branch.commit)

    parent: CommitId | None = None
    for commit in graph.walk(branch.commit):
        if commit in reference_index:
            parent = commit
            break

    if parent is None:
        return NoParent()

    if parent not in default_index:
        return NamedParent(reference_index[parent], parent)

    if branch.commit == parent:
        return DetachedOnDefault(parent)

    # The match is on the default branch; prefer the first commit that rejoined it.
    for commit in graph.walk_until(branch.commit, parent):
        if commit in default_index:
            return DetachedOnDefault(commit)
    return DetachedOnDefault(parent)


def describe(
    graph: CommitGraph,
    catalog: ReferenceCatalog,
    default_index: DefaultBranchIndex,
    current: CommitId | None = None,
) -> list[BranchReport]:
    """Resolve every branch in *catalog* except those sitting on the default tip.

    A :class:`GraphAccessError` while resolving one branch is recorded on
    that branch's report and the remaining branches are still resolved.
    """
    reference_index = build_reference_index(catalog.branches, catalog.tags, default_tip=default_index.tip)

    results: list[BranchReport] = []
    for branch in sorted(catalog.branches, key=branch_sort_key):
        if branch.commit == default_index.tip:
            continue

        report = BranchReport(branch=branch, is_current=current is not None and current == branch.commit)
        try:
            resolution = resolve_parent(graph, branch, reference_index, default_index)
        except GraphAccessError as e:
            logger.warning("unable to resolve parent of %s: %s", branch.name, e)
            report.error = str(e)
        else:
            report.resolution = resolution
            if isinstance(resolution, DetachedOnDefault):
                report.position = default_index.position(resolution.commit)
            logger.debug("%s -> %s", branch.name, resolution)
        results.append(report)

    return results


def describe_branches(repo: Repo, default_branch: str | None = None) -> list[BranchReport]:
    """Return a :class:`BranchReport` per non-default local branch of *repo*.

    Catalog and index failures (unknown default branch, undecodable names,
    unreadable refs) are raised; they would make every answer suspect.
    """
    graph = CommitGraph(repo)
    default_index = DefaultBranchIndex.build(graph, default_branch_name(repo, default_branch))
    catalog = build_catalog(repo)
    return describe(graph, catalog, default_index, current=graph.current_commit())


if __name__ == "__main__":
    repo_path = sys.argv[1] if len(sys.argv) > 1 else "."
    branch_arg = sys.argv[2] if len(sys.argv) > 2 else None

    r = open_repo(Path(repo_path))
    reports = describe_branches(r, default_branch=branch_arg)
    print(f"Resolved {len(reports)} branch(es) against '{default_branch_name(r, branch_arg)}':\n")
    print(to_json(reports))
