"""Release-age validation engine.

This module MUST NOT spawn processes or exit the interpreter: every operation
returns a value (or raises a ``ValidationError`` for whole-run failures) and
the command line decides what to do with it.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol

from .age import calculate_age, parse_timestamp
from .config import DEFAULT_MAX_WORKERS, ConfigSource
from .models import (
    FETCH_FAILED,
    INVALID_TIMESTAMP,
    LATEST,
    NOT_FOUND,
    TOO_RECENT,
    FailedPackage,
    PackageSpec,
    RegistryMetadata,
    ValidationResult,
)
from .parsers import package_json
from .parsers.version import parse_leading_int, sort_versions
from .registry import RegistryError
from .reporting import LogReporter, Reporter

MANIFEST_NAME = "package.json"

AgeCalculator = Callable[..., int]


class MetadataFetcher(Protocol):
    def fetch_metadata(self, package_name: str) -> RegistryMetadata: ...


class ValidationError(RuntimeError):
    """Base error for whole-run validation failures."""


class ManifestError(ValidationError):
    """Raised when the project manifest is missing or unreadable."""


class ProjectValidationError(ValidationError):
    """Raised when at least one declared dependency failed the age gate."""

    def __init__(self, result: ValidationResult) -> None:
        names = ", ".join(entry.name for entry in result.failed_packages)
        super().__init__(f"Packages do not meet the minimum release age: {names}")
        self.result = result


@dataclass(frozen=True)
class _Outcome:
    """Decision for one package; ``reason`` is None when it passed."""

    version: str
    reason: str | None = None


def resolve_version(requested_version: str | None, metadata: RegistryMetadata) -> str:
    """Map a request onto the concrete version to check.

    ``latest`` (or nothing) follows the dist-tag, a known version is used
    verbatim, and anything starting with an integer is treated as a major
    line, so ``"9.9.9"`` resolves to the newest ``9.x`` when absent. When no
    version of that major exists, ``"<major>.0.0"`` is returned, which then
    fails the existence check.
    """
    if not requested_version or requested_version == LATEST:
        return metadata.latest_tag
    if metadata.has_version(requested_version):
        return requested_version

    major = parse_leading_int(requested_version)
    if major is None:
        return requested_version

    prefix = f"{major}."
    matching = [v for v in metadata.versions if v.startswith(prefix)]
    if not matching:
        return f"{major}.0.0"
    return sort_versions(matching)[-1]


class PackageValidator:
    """Check requested packages against the minimum release age."""

    def __init__(
        self,
        fetcher: MetadataFetcher,
        config: ConfigSource,
        age_calculator: AgeCalculator = calculate_age,
        reporter: Reporter | None = None,
        clock: Callable[[], datetime] | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._fetcher = fetcher
        self._config = config
        self._age = age_calculator
        self._reporter = reporter or LogReporter()
        self._clock = clock
        self._max_workers = max_workers

    # ---- single package -----------------------------------------------------------------

    def validate_package(self, name: str, requested_version: str | None = None) -> bool:
        """Return True when the resolved version is at least the minimum age."""
        metadata = self._fetch(name)
        if metadata is None:
            return False
        minimum_age = self._config.get_minimum_age_days()
        return self._evaluate(metadata, requested_version, minimum_age).reason is None

    def suggest_version(self, metadata: RegistryMetadata, minimum_age_days: int) -> str | None:
        """Return the newest version, across all majors, old enough to install."""
        now = self._now()
        for version in sort_versions(metadata.versions, descending=True):
            published = self._published(metadata, version)
            if published is None:
                continue
            if self._age(published, now) >= minimum_age_days:
                return version
        return None

    # ---- batches ------------------------------------------------------------------------

    def validate_packages(self, specs: Sequence[PackageSpec]) -> ValidationResult:
        """Validate every spec concurrently; failures keep the input order."""
        specs = list(specs)
        minimum_age = self._config.get_minimum_age_days()
        self._reporter.run_started(packages=len(specs), minimum_age_days=minimum_age)

        failures: list[FailedPackage] = []
        if specs:
            workers = min(self._max_workers, len(specs))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = pool.map(lambda spec: self._check_spec(spec, minimum_age), specs)
                failures = [failure for failure in results if failure is not None]

        result = ValidationResult.from_failures(failures, checked=len(specs))
        self._reporter.run_finished(checked=result.checked, failed=len(result.failed_packages))
        return result

    def validate_all_packages_in_project(self, root: Path | str | None = None) -> ValidationResult:
        """Validate every dependency declared in ``<root>/package.json``.

        All dependencies are checked before failing.

        Raises:
            ManifestError: If the manifest is missing or cannot be parsed.
            ProjectValidationError: If any dependency failed.
        """
        manifest = Path(root or Path.cwd()) / MANIFEST_NAME
        specs = load_manifest_specs(manifest)
        result = self.validate_packages(specs)
        if not result.is_valid:
            raise ProjectValidationError(result)
        return result

    # ---- internals ----------------------------------------------------------------------

    def _now(self) -> datetime | None:
        return self._clock() if self._clock is not None else None

    def _fetch(self, name: str) -> RegistryMetadata | None:
        try:
            return self._fetcher.fetch_metadata(name)
        except RegistryError as exc:
            self._reporter.fetch_failed(name, exc)
            return None

    @staticmethod
    def _published(metadata: RegistryMetadata, version: str) -> datetime | None:
        value = metadata.publish_time(version)
        if value is None:
            return None
        try:
            return parse_timestamp(value)
        except ValueError:
            return None

    def _evaluate(
        self,
        metadata: RegistryMetadata,
        requested_version: str | None,
        minimum_age: int,
    ) -> _Outcome:
        version = resolve_version(requested_version, metadata)
        if not metadata.has_version(version):
            self._reporter.version_not_found(metadata.name, requested_version or version)
            return _Outcome(version, NOT_FOUND)

        published = self._published(metadata, version)
        if published is None:
            self._reporter.invalid_timestamp(
                metadata.name, version, metadata.publish_time(version)
            )
            return _Outcome(version, INVALID_TIMESTAMP)

        age = self._age(published, self._now())
        if age < minimum_age:
            self._reporter.package_too_recent(metadata.name, version, age, minimum_age)
            return _Outcome(version, TOO_RECENT)

        self._reporter.package_passed(metadata.name, version, age, minimum_age)
        return _Outcome(version)

    def _check_spec(self, spec: PackageSpec, minimum_age: int) -> FailedPackage | None:
        metadata = self._fetch(spec.name)
        if metadata is None:
            return FailedPackage(
                name=spec.name,
                requested_version=spec.requested_version,
                reason=FETCH_FAILED,
            )

        outcome = self._evaluate(metadata, spec.requested_version, minimum_age)
        if outcome.reason is None:
            return None

        suggested = self.suggest_version(metadata, minimum_age)
        self._reporter.suggestion(spec.name, spec.requested_version, suggested)
        return FailedPackage(
            name=spec.name,
            requested_version=spec.requested_version,
            suggested_version=suggested,
            reason=outcome.reason,
        )


def load_manifest_specs(path: Path) -> list[PackageSpec]:
    """Read a manifest into specs, converting every failure into ManifestError."""
    if not path.exists():
        raise ManifestError(f"{path.name} not found: {path}")
    try:
        return package_json.parse(path)
    except OSError as exc:
        raise ManifestError(f"Failed to read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
    except ValueError as exc:
        raise ManifestError(f"Invalid manifest {path}: {exc}") from exc

