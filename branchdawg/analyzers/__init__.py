"""Reference catalog, default-branch index and ancestry resolution."""

# Lazy re-exports: import only when the package itself is imported (not when
# individual modules are run via `python -m`), which prevents a harmless but
# noisy RuntimeWarning from runpy.
from importlib import import_module as _im


def __getattr__(name: str):  # noqa: N807
    _map = {
        "build_catalog": ("references", "build_catalog"),
        "build_reference_index": ("references", "build_reference_index"),
        "DefaultBranchIndex": ("default_branch", "DefaultBranchIndex"),
        "resolve_parent": ("ancestry", "resolve_parent"),
        "describe": ("ancestry", "describe"),
        "describe_branches": ("ancestry", "describe_branches"),
    }
    if name in _map:
        mod_name, attr = _map[name]
        mod = _im(f"branchdawg.analyzers.{mod_name}")
        return getattr(mod, attr)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "build_catalog",
    "build_reference_index",
    "DefaultBranchIndex",
    "resolve_parent",
    "describe",
    "describe_branches",
]
