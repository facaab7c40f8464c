"""CLI entrypoint for branch-dawg.

Usage:
    python main.py [--repo PATH] [--default-branch NAME] [--json] [--output FILE] <command>

Commands:
    list         List all local branches, marking the current one
    describe     Show the closest named ancestor of every non-default branch

Options:
    --repo PATH              Path to the git repository (default: current directory)
    --default-branch NAME    Default branch (default: init.defaultBranch, else main)
    --output FILE            Write JSON output to FILE (default: print to stdout)
    --json                   Print JSON instead of the colored listing
    --no-color               Disable colored output
    -v, --verbose            Log debug details to stderr
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.text import Text

from branchdawg.analyzers import build_catalog, describe_branches
from branchdawg.config import default_branch_name
from branchdawg.errors import BranchDawgError, UnknownReference
from branchdawg.models import BranchReport, DetachedOnDefault, NamedParent, branch_sort_key, to_json
from branchdawg.repo import CommitGraph, open_repo

logger = logging.getLogger("branchdawg")


def format_report(report: BranchReport, default_branch: str) -> str:
    """Return the ``<branch> -> <parent>`` line for one describe result."""
    prefix = f"{report.branch.name} -> "
    if report.error is not None:
        return f"{prefix}error: {report.error}"
    resolution = report.resolution
    if isinstance(resolution, NamedParent):
        return f"{prefix}{resolution.reference} ({resolution.commit})"
    if isinstance(resolution, DetachedOnDefault):
        return f"{prefix}refs/heads/{default_branch} (detached {resolution.commit})"
    return prefix


def _marked(line: str, is_current: bool, style: str | None = None) -> Text:
    if is_current:
        return Text.assemble("* ", (line, style or "green"))
    return Text.assemble("  ", (line, style or ""))


def cmd_list(args: argparse.Namespace, console: Console) -> int:
    repo = open_repo(args.repo)
    current = CommitGraph(repo).current_commit()
    branches = sorted(build_catalog(repo).branches, key=branch_sort_key)
    if args.json or args.output:
        _emit(to_json(branches), args.output, console)
        return 0
    for branch in branches:
        console.print(_marked(branch.name, current is not None and current == branch.commit))
    return 0


def cmd_describe(args: argparse.Namespace, console: Console) -> int:
    repo = open_repo(args.repo)
    default_branch = default_branch_name(repo, args.default_branch)
    reports = describe_branches(repo, default_branch=default_branch)
    failed = sum(1 for r in reports if r.error is not None)

    if args.json or args.output:
        payload = {"default_branch": default_branch, "branches": json.loads(to_json(reports))}
        _emit(json.dumps(payload, indent=2), args.output, console)
    else:
        for report in reports:
            style = "red" if report.error is not None else None
            console.print(_marked(format_report(report, default_branch), report.is_current, style))

    if failed:
        logger.error("%d branch(es) could not be resolved", failed)
        return 1
    return 0


def _emit(text: str, output_path: str | None, console: Console) -> None:
    if output_path:
        Path(output_path).write_text(text)
        console.print(f"Output written to: {output_path}", markup=False, highlight=False)
    else:
        # plain print keeps JSON free of console wrapping
        print(text)


def _common_flags(suppress_defaults: bool = False) -> argparse.ArgumentParser:
    """Flags accepted both before and after the command.

    The subcommand copies suppress their defaults, otherwise argparse would
    reset anything given before the command back to its default.
    """

    def default(value):
        return argparse.SUPPRESS if suppress_defaults else value

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--repo", default=default("."), metavar="PATH", help="Path to the git repo (default: current directory)"
    )
    common.add_argument(
        "--default-branch",
        default=default(None),
        metavar="NAME",
        help="Default branch (default: git config init.defaultBranch, else main)",
    )
    common.add_argument("--output", default=default(None), metavar="FILE", help="Write JSON output to FILE")
    common.add_argument("--json", action="store_true", default=default(False), help="Force JSON output")
    common.add_argument("--no-color", action="store_true", default=default(False), help="Disable colored output")
    common.add_argument(
        "-v", "--verbose", action="store_true", default=default(False), help="Log debug details to stderr"
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="branch-dawg",
        description="Show where each local git branch diverged from.",
        parents=[_common_flags()],
    )

    sub_common = _common_flags(suppress_defaults=True)
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list", parents=[sub_common], help="List all local branches")
    sub.add_parser("describe", parents=[sub_common], help="Describe the parent of every local branch")

    return parser


_COMMANDS = {
    "list": cmd_list,
    "describe": cmd_describe,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    console = Console(no_color=args.no_color, highlight=False, soft_wrap=True)
    err_console = Console(stderr=True, no_color=args.no_color, highlight=False, soft_wrap=True)

    try:
        return _COMMANDS[args.command](args, console)
    except UnknownReference as e:
        if e.hint:
            err_console.print(f"hint: {e.hint}", style="yellow", markup=False)
        err_console.print(f"error: {e}", style="red", markup=False)
        return 1
    except BranchDawgError as e:
        err_console.print(f"error: {e}", style="red", markup=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
