"""Package manager detection."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

# Checked in order; the first lockfile present wins.
LOCKFILES = {
    "pnpm-lock.yaml": "pnpm",
    "yarn.lock": "yarn",
    "bun.lockb": "bun",
    "bun.lock": "bun",
    "package-lock.json": "npm",
}

SUPPORTED_MANAGERS = ("pnpm", "npm", "yarn", "bun")
PREFERRED_MANAGERS = ("pnpm", "npm")
FALLBACK_MANAGER = "npm"


def detect_from_lockfiles(root: Path) -> str | None:
    """Return the package manager whose lockfile exists under ``root``."""
    root = root.resolve()
    for lockfile, manager in LOCKFILES.items():
        if (root / lockfile).is_file():
            return manager
    return None


def detect_package_manager(
    root: Path,
    which: Callable[[str], str | None] = shutil.which,
) -> str:
    """Pick the package manager for ``root``.

    Lockfiles take priority, then the first installed of the preferred
    managers, then npm.
    """
    manager = detect_from_lockfiles(root)
    if manager:
        return manager

    for candidate in PREFERRED_MANAGERS:
        if which(candidate):
            return candidate

    return FALLBACK_MANAGER
