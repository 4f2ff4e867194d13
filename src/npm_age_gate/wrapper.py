"""Package-manager command line handling.

Extracts the packages an install command would add and forwards the command
to the real package manager once validation has passed.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

import structlog

from .models import PackageSpec

logger = structlog.get_logger(__name__)

INSTALL_COMMANDS = ("install", "i", "add")


def is_install_command(args: Sequence[str]) -> bool:
    return any(arg in INSTALL_COMMANDS for arg in args)


def extract_packages(args: Sequence[str]) -> list[PackageSpec]:
    """Return the package arguments that follow the first install command.

    Flags are skipped; ``name`` without a version is requested as ``latest``.
    """
    packages: list[PackageSpec] = []
    found_install = False

    for arg in args:
        if arg in INSTALL_COMMANDS:
            found_install = True
            continue
        if arg.startswith("-") or not found_install:
            continue
        try:
            packages.append(PackageSpec.parse(arg))
        except ValueError:
            logger.warning("package_argument_ignored", argument=arg)

    return packages


def run_package_manager(manager: str, args: Sequence[str]) -> int:
    """Run ``manager`` with ``args`` and return its exit code."""
    command = [manager, *args]
    logger.debug("package_manager_started", command=command)
    try:
        completed = subprocess.run(command, check=False)
    except FileNotFoundError:
        logger.error("package_manager_not_found", manager=manager)
        return 127
    return completed.returncode
