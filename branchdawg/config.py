"""Work out which branch is the repository's default branch."""

from __future__ import annotations

import configparser
import logging

from git import Repo

logger = logging.getLogger(__name__)

FALLBACK_DEFAULT_BRANCH = "main"
DEFAULT_BRANCH_HINT = "see git config init.defaultBranch"


def configured_default_branch(repo: Repo) -> str | None:
    """Return ``init.defaultBranch`` from the repository/global/system config."""
    reader = repo.config_reader()
    try:
        # get() keeps the raw text; get_value() would turn "007" into 7
        value = reader.get("init", "defaultBranch")
    except (configparser.NoSectionError, configparser.NoOptionError):
        return None
    except (configparser.Error, OSError) as e:
        logger.debug("unable to read init.defaultBranch: %s", e)
        return None
    value = value.strip()
    return value or None


def default_branch_name(repo: Repo, explicit: str | None = None) -> str:
    """Return *explicit* if given, else the configured default, else 'main'."""
    if explicit:
        return explicit
    configured = configured_default_branch(repo)
    if configured:
        logger.debug("default branch %r taken from init.defaultBranch", configured)
        return configured
    return FALLBACK_DEFAULT_BRANCH
