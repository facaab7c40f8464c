"""Exceptions raised while cataloguing references and walking history."""

from __future__ import annotations


class BranchDawgError(Exception):
    """Base class for every error raised by branchdawg."""


class RepositoryNotFound(BranchDawgError, ValueError):
    def __init__(self, path: str) -> None:
        super().__init__(f"No git repository found at or above: {path}")
        self.path = path


class UnknownReference(BranchDawgError, LookupError):
    """A named branch does not exist in the repository."""

    def __init__(self, name: str, hint: str | None = None) -> None:
        super().__init__(f"unknown reference: {name}")
        self.name = name
        self.hint = hint


class DecodeError(BranchDawgError, ValueError):
    """A reference name is not valid UTF-8."""

    def __init__(self, raw: bytes, offset: int) -> None:
        super().__init__(f"Unable to convert UTF-8 at index {offset}")
        self.raw = raw
        self.offset = offset


class GraphAccessError(BranchDawgError):
    """Reading an object or walking the commit graph failed."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause
