"""Report aggregation for JSON output."""

from __future__ import annotations

from typing import Any

from .models import ValidationResult


def build_report(result: ValidationResult, minimum_age_days: int) -> dict[str, Any]:
    """Turn a validation result into a JSON-friendly report.

    ``failedPackages`` keeps the order in which packages were requested.
    """
    failed = [entry.to_dict() for entry in result.failed_packages]

    report: dict[str, Any] = {
        "isValid": result.is_valid,
        "minimumAgeDays": minimum_age_days,
        "failedPackages": failed,
        "totals": {
            "checked": result.checked,
            "failed": len(failed),
            "withSuggestion": sum(1 for entry in failed if "suggestedVersion" in entry),
        },
    }

    return report
