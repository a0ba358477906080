"""Directories that type discovery and the watcher never descend into.

Two tiers:
- ``HARDCODED_DIRS``: version control internals and typefit's own data.
  Always pruned.
- ``DEFAULT_PRUNABLE_DIRS``: dependency installs, build output, tool caches
  and editor state. ``node_modules`` is the only entry that configuration can
  bring back (``index.include_node_modules``), since ambient ``.d.ts`` types
  live there.
"""

from __future__ import annotations

HARDCODED_DIRS: frozenset[str] = frozenset({".git", ".hg", ".svn", ".bzr", ".typefit"})

NODE_MODULES = "node_modules"

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    {
        # package managers
        NODE_MODULES,
        "bower_components",
        ".npm",
        ".pnpm-store",
        ".yarn",
        # framework and bundler output
        ".angular",
        ".next",
        ".nuxt",
        ".svelte-kit",
        ".turbo",
        "build",
        "dist",
        "out",
        # test coverage
        "coverage",
        ".nyc_output",
        # python environments sharing the repo
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".venv",
        "venv",
        # editors
        ".idea",
        ".vs",
        ".vscode",
        # scratch
        ".cache",
        "temp",
        "tmp",
    }
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_hardcoded_dir(dirname: str) -> bool:
    return dirname in HARDCODED_DIRS


def should_prune_dir(dirname: str, *, include_node_modules: bool = False) -> bool:
    """Whether a directory named ``dirname`` is skipped."""
    if dirname == NODE_MODULES:
        return not include_node_modules
    return dirname in PRUNABLE_DIRS
