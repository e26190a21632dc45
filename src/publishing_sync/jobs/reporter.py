"""Run report formatting functions.

- ``format_run_report`` -- human-readable summary of a runner pass.
- ``report_to_json`` -- structured dict for logs or CLI ``--json`` output.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import RunReport


def format_run_report(report: RunReport) -> str:
    """Format a runner pass as human-readable text.

    Sections are only included when they contain at least one result.

    Args:
        report: The completed run report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    total = len(report.results)
    lines.append(
        f"Ran {total} jobs: "
        f"{len(report.succeeded)} succeeded, "
        f"{len(report.failed)} failed, "
        f"{len(report.retried)} retried"
    )

    by_kind = Counter(r.job.kind.value for r in report.results)
    if by_kind:
        lines.append(
            "By kind: "
            + ", ".join(f"{kind}={n}" for kind, n in sorted(by_kind.items()))
        )
    lines.append("")

    if report.failed:
        lines.append("Failed:")
        for r in report.failed:
            lines.append(
                f"  {r.job.describe()} after {r.attempts} attempts: {r.error}"
            )
        lines.append("")

    return "\n".join(lines).rstrip()


def report_to_json(report: RunReport) -> dict:
    """Convert a run report to a structured dict for JSON serialisation."""
    results_list = []
    for r in report.results:
        entry: dict = {
            "kind": r.job.kind.value,
            "queue": r.job.queue_name,
            "args": [str(a) for a in r.job.args],
            "success": r.success,
            "attempts": r.attempts,
        }
        if r.error:
            entry["error"] = r.error
        results_list.append(entry)

    return {
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "succeeded": len(report.succeeded),
            "failed": len(report.failed),
            "retried": len(report.retried),
        },
        "results": results_list,
    }
