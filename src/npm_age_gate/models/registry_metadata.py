"""Registry metadata snapshot for a single package."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any


@dataclass(frozen=True)
class RegistryMetadata:
    """Versions and publish times of one package, as served by the registry.

    ``version_timestamps`` holds the per-version ``time`` field (``None`` when
    the registry omitted it) and ``created_timestamps`` the top-level ``time``
    mapping. The snapshot is never refreshed once built.
    """

    name: str
    latest_tag: str
    version_timestamps: Mapping[str, str | None]
    created_timestamps: Mapping[str, str]

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")
        if not self.latest_tag:
            raise ValueError("latest tag must be non-empty")

    @property
    def versions(self) -> tuple[str, ...]:
        return tuple(self.version_timestamps)

    def has_version(self, version: str) -> bool:
        return version in self.version_timestamps

    def publish_time(self, version: str) -> str | None:
        """Return the publish timestamp of ``version``.

        The per-version timestamp wins; the top-level ``time`` entry is the
        fallback.
        """
        return self.version_timestamps.get(version) or self.created_timestamps.get(version)

    @classmethod
    def from_payload(cls, name: str, payload: Mapping[str, Any]) -> RegistryMetadata:
        """Build a snapshot from an already shape-checked registry document."""
        versions = payload["versions"]
        return cls(
            name=name,
            latest_tag=payload["dist-tags"]["latest"],
            version_timestamps={
                str(version): (info or {}).get("time") for version, info in versions.items()
            },
            created_timestamps={str(k): str(v) for k, v in payload["time"].items()},
        )
