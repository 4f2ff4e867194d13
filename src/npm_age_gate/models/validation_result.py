"""Validation outcome models."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable

TOO_RECENT = "too-recent"
NOT_FOUND = "not-found"
FETCH_FAILED = "fetch-failed"
INVALID_TIMESTAMP = "invalid-timestamp"

_VALID_REASONS = {TOO_RECENT, NOT_FOUND, FETCH_FAILED, INVALID_TIMESTAMP}


@dataclass(frozen=True)
class FailedPackage:
    """A requested package that did not pass the age gate."""

    name: str
    requested_version: str
    suggested_version: str | None = None
    reason: str = TOO_RECENT

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")
        if self.reason not in _VALID_REASONS:
            raise ValueError(f"Invalid failure reason: {self.reason}")

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "requestedVersion": self.requested_version,
            "reason": self.reason,
        }
        if self.suggested_version is not None:
            data["suggestedVersion"] = self.suggested_version
        return data


@dataclass(frozen=True)
class ValidationResult:
    """Aggregate outcome of a batch validation, in input order."""

    failed_packages: tuple[FailedPackage, ...] = ()
    checked: int = 0

    def __post_init__(self) -> None:
        if self.checked < 0:
            raise ValueError("checked must be non-negative")
        if len(self.failed_packages) > self.checked:
            raise ValueError("More failed packages than packages checked")

    @property
    def is_valid(self) -> bool:
        return not self.failed_packages

    @classmethod
    def from_failures(cls, failures: Iterable[FailedPackage], *, checked: int) -> ValidationResult:
        return cls(failed_packages=tuple(failures), checked=checked)
