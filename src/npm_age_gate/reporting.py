"""Reporting port for validation decisions.

The engine announces each decision here and nothing else; return values alone
drive control flow.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class Reporter(Protocol):
    def run_started(self, *, packages: int, minimum_age_days: int) -> None: ...

    def package_passed(self, name: str, version: str, age: int, minimum_age_days: int) -> None: ...

    def package_too_recent(
        self, name: str, version: str, age: int, minimum_age_days: int
    ) -> None: ...

    def version_not_found(self, name: str, requested_version: str) -> None: ...

    def invalid_timestamp(self, name: str, version: str, value: str | None) -> None: ...

    def fetch_failed(self, name: str, error: Exception) -> None: ...

    def suggestion(self, name: str, requested_version: str, suggested_version: str | None) -> None: ...

    def run_finished(self, *, checked: int, failed: int) -> None: ...


class LogReporter:
    """Send every decision to structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._log = logger or structlog.get_logger("npm_age_gate.validator")

    def run_started(self, *, packages: int, minimum_age_days: int) -> None:
        self._log.info("validation_started", packages=packages, minimum_age_days=minimum_age_days)

    def package_passed(self, name: str, version: str, age: int, minimum_age_days: int) -> None:
        self._log.info(
            "package_passed",
            package=name,
            version=version,
            age_days=age,
            minimum_age_days=minimum_age_days,
        )

    def package_too_recent(self, name: str, version: str, age: int, minimum_age_days: int) -> None:
        self._log.error(
            "package_too_recent",
            package=name,
            version=version,
            age_days=age,
            minimum_age_days=minimum_age_days,
        )

    def version_not_found(self, name: str, requested_version: str) -> None:
        self._log.error("version_not_found", package=name, version=requested_version)

    def invalid_timestamp(self, name: str, version: str, value: str | None) -> None:
        self._log.error("publish_time_invalid", package=name, version=version, value=value)

    def fetch_failed(self, name: str, error: Exception) -> None:
        self._log.error(
            "metadata_fetch_failed",
            package=name,
            error=str(error),
            error_type=type(error).__name__,
        )

    def suggestion(self, name: str, requested_version: str, suggested_version: str | None) -> None:
        if suggested_version is None:
            self._log.warning("no_suggestion", package=name, requested=requested_version)
        else:
            self._log.warning(
                "suggested_version",
                package=name,
                requested=requested_version,
                suggested=suggested_version,
                hint=f"{name}@{suggested_version}",
            )

    def run_finished(self, *, checked: int, failed: int) -> None:
        if failed:
            self._log.error("validation_failed", checked=checked, failed=failed)
        else:
            self._log.info("validation_passed", checked=checked)


class NullReporter:
    """Discard every decision."""

    def run_started(self, *, packages: int, minimum_age_days: int) -> None:
        pass

    def package_passed(self, name: str, version: str, age: int, minimum_age_days: int) -> None:
        pass

    def package_too_recent(self, name: str, version: str, age: int, minimum_age_days: int) -> None:
        pass

    def version_not_found(self, name: str, requested_version: str) -> None:
        pass

    def invalid_timestamp(self, name: str, version: str, value: str | None) -> None:
        pass

    def fetch_failed(self, name: str, error: Exception) -> None:
        pass

    def suggestion(self, name: str, requested_version: str, suggested_version: str | None) -> None:
        pass

    def run_finished(self, *, checked: int, failed: int) -> None:
        pass
