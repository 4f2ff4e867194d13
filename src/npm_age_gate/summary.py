"""Human-readable summary rendering for CI step summaries."""

from __future__ import annotations

from typing import Any

_REASONS = {
    "too-recent": "Published too recently",
    "not-found": "Version not found",
    "fetch-failed": "Registry unreachable",
    "invalid-timestamp": "No valid publish time",
}


def render_summary(report: dict[str, Any]) -> str:
    """Return a Markdown string with totals and a table of rejected packages."""
    totals = report.get("totals", {})
    failed = report.get("failedPackages", [])

    lines = []
    lines.append("# npm-age-gate Summary")
    lines.append("")
    lines.append(
        f"Minimum age: {report.get('minimumAgeDays', '?')} days | "
        f"Checked: {totals.get('checked', 0)} | Failed: {totals.get('failed', 0)}"
    )
    lines.append("")
    lines.append("| Package | Requested | Reason | Suggested |")
    lines.append("| --- | --- | --- | --- |")

    if not failed:
        lines.append("| (all packages) | n/a | Meets the minimum age | n/a |")

    for entry in failed:
        name = entry.get("name", "")
        requested = entry.get("requestedVersion", "")
        reason = _REASONS.get(entry.get("reason", ""), entry.get("reason", ""))
        suggested = entry.get("suggestedVersion") or "none"
        lines.append(f"| {name} | {requested} | {reason} | {suggested} |")

    return "\n".join(lines) + "\n"
