"""Data models for the release-age gate."""

from __future__ import annotations

from .package_spec import LATEST, PackageSpec
from .registry_metadata import RegistryMetadata
from .validation_result import (
    FETCH_FAILED,
    INVALID_TIMESTAMP,
    NOT_FOUND,
    TOO_RECENT,
    FailedPackage,
    ValidationResult,
)

__all__ = [
    "FETCH_FAILED",
    "INVALID_TIMESTAMP",
    "LATEST",
    "NOT_FOUND",
    "TOO_RECENT",
    "FailedPackage",
    "PackageSpec",
    "RegistryMetadata",
    "ValidationResult",
]
