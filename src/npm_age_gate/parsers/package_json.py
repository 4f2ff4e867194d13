"""Parse package.json and merge its dependency sections."""

from __future__ import annotations

from pathlib import Path

from ..models import LATEST, PackageSpec
from .version import strip_range_operator

# Later sections override earlier ones on name collisions.
SECTIONS = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
)


def merge_dependencies(data: dict[str, object]) -> dict[str, str]:
    """Return a single name -> version-range mapping across all sections."""
    merged: dict[str, str] = {}
    for section in SECTIONS:
        deps = data.get(section) or {}
        if not isinstance(deps, dict):
            raise ValueError(f"'{section}' must be an object")
        for name, version in deps.items():
            merged[str(name)] = str(version)
    return merged


def to_spec(name: str, expr: str) -> PackageSpec:
    """Map a declared range onto a request.

    A range with a leading operator is approximated as ``latest``; a bare
    version is requested exactly.
    """
    cleaned = strip_range_operator(expr)
    return PackageSpec(name=name, requested_version=cleaned if cleaned == expr else LATEST)


def parse(path: Path) -> list[PackageSpec]:
    """Return one PackageSpec per declared dependency, in merge order."""
    import json

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("package.json must contain a JSON object")
    return [to_spec(name, expr) for name, expr in merge_dependencies(data).items()]
