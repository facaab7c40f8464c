"""Collect local branches and tags, and index them by commit."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from git import Repo

from branchdawg.errors import DecodeError, GraphAccessError
from branchdawg.models import CommitId, Reference, ReferenceCatalog, ReferenceInfo, to_json
from branchdawg.repo import GIT_ERRORS, decode_ref_name, open_repo

logger = logging.getLogger(__name__)


def _peel_to_commit(ref) -> CommitId | None:
    """Follow *ref* (through annotated tag objects) to a commit; None for trees/blobs."""
    obj = ref.object
    while obj.type == "tag":
        obj = obj.object
    if obj.type != "commit":
        return None
    return CommitId(obj.binsha)


_NAME_PREFIXES = (b"refs/heads/", b"refs/tags/")


def _packed_refs_decode_error(repo: Repo, error: UnicodeDecodeError) -> DecodeError:
    """Turn GitPython's failure to read ``packed-refs`` into a per-name DecodeError.

    GitPython decodes the whole file as text, so *error* only locates the bad
    byte within a chunk of it. Re-read the file as bytes and decode each
    branch/tag name on its own to find the offending name and offset.
    """
    path = Path(repo.common_dir) / "packed-refs"
    try:
        data = path.read_bytes()
    except OSError:
        return DecodeError(bytes(error.object), error.start)
    for line in data.splitlines():
        if not line or line.startswith((b"#", b"^")):
            continue
        _, _, ref_path = line.partition(b" ")
        for prefix in _NAME_PREFIXES:
            if ref_path.startswith(prefix):
                try:
                    decode_ref_name(ref_path[len(prefix):])
                except DecodeError as e:
                    return e
    return DecodeError(bytes(error.object), error.start)


def get_branches(repo: Repo) -> list[ReferenceInfo]:
    """Return every local branch as a :class:`ReferenceInfo`, sorted.

    Raises :class:`DecodeError` on the first branch whose name is not UTF-8.
    """
    results: list[ReferenceInfo] = []
    try:
        for head in repo.branches:
            name = decode_ref_name(head.name)
            try:
                commit = CommitId(head.commit.binsha)
            except GIT_ERRORS as e:
                raise GraphAccessError(f"unable to read tip of branch {name}", e) from e
            results.append(ReferenceInfo(name=name, commit=commit))
    except UnicodeDecodeError as e:
        raise _packed_refs_decode_error(repo, e) from None
    results.sort()
    return results


def get_tags(repo: Repo) -> list[ReferenceInfo]:
    """Return every tag that points (possibly via a tag object) at a commit."""
    results: list[ReferenceInfo] = []
    try:
        for tag in repo.tags:
            name = decode_ref_name(tag.name)
            try:
                commit = _peel_to_commit(tag)
            except GIT_ERRORS as e:
                raise GraphAccessError(f"unable to read tag {name}", e) from e
            if commit is None:
                logger.debug("skipping tag %s: does not point at a commit", name)
                continue
            results.append(ReferenceInfo(name=name, commit=commit))
    except UnicodeDecodeError as e:
        raise _packed_refs_decode_error(repo, e) from None
    results.sort()
    return results


def build_catalog(repo: Repo) -> ReferenceCatalog:
    catalog = ReferenceCatalog(branches=get_branches(repo), tags=get_tags(repo))
    logger.debug("catalog: %d branch(es), %d tag(s)", len(catalog.branches), len(catalog.tags))
    return catalog


def build_reference_index(
    branches: Iterable[ReferenceInfo],
    tags: Iterable[ReferenceInfo],
    default_tip: CommitId | None = None,
) -> dict[CommitId, Reference]:
    """Map each referenced commit to the one reference reported for it.

    Branches claim commits first, so a branch always beats a tag on the same
    commit whatever order the catalog lists them in. The synthetic default
    marker only fills a commit nothing else claims.
    """
    index: dict[CommitId, Reference] = {}
    for info in branches:
        index.setdefault(info.commit, Reference.branch(info.name))
    for info in tags:
        index.setdefault(info.commit, Reference.tag(info.name))
    if default_tip is not None:
        index.setdefault(default_tip, Reference.default())
    return index


if __name__ == "__main__":
    repo_path = sys.argv[1] if len(sys.argv) > 1 else "."

    r = open_repo(Path(repo_path))
    catalog = build_catalog(r)
    print(f"Found {len(catalog.branches)} branch(es) and {len(catalog.tags)} tag(s):\n")
    print(to_json(catalog))
