"""Tests for data models."""

import pytest

from npm_age_gate.models import (
    NOT_FOUND,
    FailedPackage,
    PackageSpec,
    RegistryMetadata,
    ValidationResult,
)


class TestPackageSpec:
    @pytest.mark.parametrize(
        ("token", "name", "version"),
        [
            ("lodash", "lodash", "latest"),
            ("lodash@4.17.21", "lodash", "4.17.21"),
            ("@types/node", "@types/node", "latest"),
            ("@types/node@20", "@types/node", "20"),
            ("react@^18.2.0", "react", "^18.2.0"),
        ],
    )
    def test_parse(self, token: str, name: str, version: str) -> None:
        spec = PackageSpec.parse(token)
        assert (spec.name, spec.requested_version) == (name, version)

    def test_parse_rejects_dangling_at(self) -> None:
        with pytest.raises(ValueError):
            PackageSpec.parse("lodash@")

    def test_empty_version_means_latest(self) -> None:
        assert PackageSpec("left-pad", "").is_latest

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            PackageSpec("")


class TestRegistryMetadata:
    def test_per_version_time_wins(self) -> None:
        metadata = RegistryMetadata(
            name="pkg",
            latest_tag="1.0.0",
            version_timestamps={"1.0.0": "2024-01-01T00:00:00Z", "0.9.0": None},
            created_timestamps={"1.0.0": "2020-01-01T00:00:00Z", "0.9.0": "2019-01-01T00:00:00Z"},
        )
        assert metadata.publish_time("1.0.0") == "2024-01-01T00:00:00Z"
        assert metadata.publish_time("0.9.0") == "2019-01-01T00:00:00Z"
        assert metadata.publish_time("3.0.0") is None
        assert metadata.versions == ("1.0.0", "0.9.0")


class TestValidationResult:
    def test_valid_iff_no_failures(self) -> None:
        assert ValidationResult(checked=3).is_valid
        failed = FailedPackage(name="pkg", requested_version="1", reason=NOT_FOUND)
        result = ValidationResult.from_failures([failed], checked=1)
        assert not result.is_valid

    def test_to_dict_omits_missing_suggestion(self) -> None:
        failed = FailedPackage(name="pkg", requested_version="latest")
        assert "suggestedVersion" not in failed.to_dict()
        with_hint = FailedPackage(name="pkg", requested_version="latest", suggested_version="1.0.0")
        assert with_hint.to_dict()["suggestedVersion"] == "1.0.0"

    def test_rejects_unknown_reason(self) -> None:
        with pytest.raises(ValueError):
            FailedPackage(name="pkg", requested_version="1", reason="bogus")

    def test_rejects_more_failures_than_checked(self) -> None:
        failed = FailedPackage(name="pkg", requested_version="1")
        with pytest.raises(ValueError):
            ValidationResult(failed_packages=(failed,), checked=0)
