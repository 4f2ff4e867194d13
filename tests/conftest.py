"""Shared pytest fixtures and test helpers for npm-age-gate tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from npm_age_gate.config import Config
from npm_age_gate.models import RegistryMetadata
from npm_age_gate.registry import FetchError, parse_metadata
from npm_age_gate.validator import PackageValidator

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def iso(days_ago: float) -> str:
    """ISO timestamp ``days_ago`` days before NOW, in the registry's format."""
    moment = NOW - timedelta(days=days_ago)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def registry_payload(
    ages: dict[str, float],
    latest: str | None = None,
    *,
    per_version_time: bool = False,
) -> dict[str, Any]:
    """Build a registry document where each version is ``ages[version]`` days old."""
    versions: dict[str, dict[str, Any]] = {}
    for version, age in ages.items():
        info: dict[str, Any] = {"name": "pkg", "version": version}
        if per_version_time:
            info["time"] = iso(age)
        versions[version] = info
    times = {"created": iso(max(ages.values(), default=0)), "modified": iso(0)}
    if not per_version_time:
        times.update({version: iso(age) for version, age in ages.items()})
    return {
        "name": "pkg",
        "dist-tags": {"latest": latest or list(ages)[-1]},
        "versions": versions,
        "time": times,
    }


def make_metadata(name: str, ages: dict[str, float], latest: str | None = None) -> RegistryMetadata:
    return parse_metadata(name, registry_payload(ages, latest))


class FakeFetcher:
    """In-memory metadata source; unknown packages fail like an unreachable registry."""

    def __init__(self, packages: dict[str, RegistryMetadata]) -> None:
        self.packages = packages
        self.calls: list[str] = []

    def fetch_metadata(self, package_name: str) -> RegistryMetadata:
        self.calls.append(package_name)
        try:
            return self.packages[package_name]
        except KeyError:
            raise FetchError(f"Failed to fetch metadata for {package_name}") from None


class RecordingReporter:
    """Collect reporter calls as (event, args) tuples."""

    def __init__(self) -> None:
        self.events: list[tuple[str, tuple[Any, ...]]] = []

    def __getattr__(self, event: str):
        def record(*args: Any, **kwargs: Any) -> None:
            self.events.append((event, args + tuple(kwargs.values())))

        return record

    def names(self) -> list[str]:
        return [event for event, _ in self.events]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def make_validator(reporter: RecordingReporter):
    """Factory for validators over an in-memory registry with a fixed clock."""

    def factory(
        packages: dict[str, RegistryMetadata],
        minimum_age_days: int = 7,
        max_workers: int = 4,
    ) -> PackageValidator:
        return PackageValidator(
            FakeFetcher(packages),
            Config(minimum_age_days=minimum_age_days),
            reporter=reporter,
            clock=lambda: NOW,
            max_workers=max_workers,
        )

    return factory
