"""Shared dataclasses for references, commit ids and resolution results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union

from git.util import bin_to_hex, hex_to_bin


@dataclass(frozen=True, order=True)
class CommitId:
    """Raw object id of one commit. Compares and hashes by its bytes only."""

    raw: bytes

    @classmethod
    def from_hex(cls, hexsha: str) -> CommitId:
        return cls(hex_to_bin(hexsha))

    @property
    def hex(self) -> str:
        return bin_to_hex(self.raw).decode("ascii")

    @property
    def short(self) -> str:
        return self.hex[:8]

    def __str__(self) -> str:
        return self.hex


BRANCH = "branch"
TAG = "tag"
DEFAULT = "default"


@dataclass(frozen=True)
class Reference:
    kind: str  # "branch" | "tag" | "default"
    name: str = ""

    @classmethod
    def branch(cls, name: str) -> Reference:
        return cls(BRANCH, name)

    @classmethod
    def tag(cls, name: str) -> Reference:
        return cls(TAG, name)

    @classmethod
    def default(cls) -> Reference:
        return cls(DEFAULT)

    def __str__(self) -> str:
        if self.kind == BRANCH:
            return f"refs/heads/{self.name}"
        if self.kind == TAG:
            return f"refs/tags/{self.name}"
        return "refs/default"


@dataclass(frozen=True, order=True)
class ReferenceInfo:
    """A local branch or tag as it was when the catalog was built."""

    name: str
    commit: CommitId


@dataclass(frozen=True)
class ReferenceCatalog:
    branches: list[ReferenceInfo] = field(default_factory=list)
    tags: list[ReferenceInfo] = field(default_factory=list)


@dataclass(frozen=True)
class NoParent:
    kind: str = field(default="none", init=False)


@dataclass(frozen=True)
class DetachedOnDefault:
    """The branch diverged from the default branch at *commit*."""

    commit: CommitId
    kind: str = field(default="detached", init=False)


@dataclass(frozen=True)
class NamedParent:
    reference: Reference
    commit: CommitId
    kind: str = field(default="named", init=False)


ParentResolution = Union[NoParent, DetachedOnDefault, NamedParent]


@dataclass
class BranchReport:
    branch: ReferenceInfo
    resolution: ParentResolution | None = None
    error: str | None = None  # set instead of resolution when the walk failed
    is_current: bool = False
    position: int | None = None  # distance from the default tip for detached results


def branch_sort_key(info: ReferenceInfo) -> tuple[str, bytes]:
    """Order used for every branch listing.

    Plain lexicographic by name; swap this out to change listing order.
    """
    return (info.name, info.commit.raw)


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, (CommitId, Reference)):
        return str(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def _as_plain(item: Any) -> Any:
    # asdict() recurses into CommitId/Reference; serialize those as strings instead
    if isinstance(item, (CommitId, Reference)):
        return str(item)
    if hasattr(item, "__dataclass_fields__"):
        return {name: _as_plain(getattr(item, name)) for name in item.__dataclass_fields__}
    if isinstance(item, list):
        return [_as_plain(i) for i in item]
    return item


def to_json(data: Any, indent: int = 2) -> str:
    if isinstance(data, list):
        serializable = [_as_plain(item) for item in data]
    elif hasattr(data, "__dataclass_fields__"):
        serializable = _as_plain(data)
    else:
        serializable = data
    return json.dumps(serializable, indent=indent, default=_default_serializer)
