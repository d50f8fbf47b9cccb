from __future__ import annotations

from ..models.processing_result import ProcessResult, SplitStats

"""SUMMARY line rendering.

Format (one line per processed file):
SUMMARY file={name} status={ok|failed} rows={rows} weight_ranges={n} box_ranges={n}
unsupported={n} warnings={n} elapsed_sec={sec}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny durations
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: ProcessResult, file_name: str = "") -> str:
    """Render the SUMMARY line for one ProcessResult.

    Examples:
        >>> stats = SplitStats("a.xlsx", rows=12, weight_ranges=2, box_ranges=1,
        ...                    unsupported=0, warnings=1, elapsed_seconds=0.5)
        >>> render_summary_line(ProcessResult(True, "a_拆分表.xlsx", "ok", stats=stats))
        'SUMMARY file=a.xlsx status=ok rows=12 weight_ranges=2 box_ranges=1 unsupported=0 warnings=1 elapsed_sec=0.5'
    """
    stats = result.stats
    if stats is None:
        stats = SplitStats(
            file_name=file_name,
            rows=0,
            weight_ranges=0,
            box_ranges=0,
            unsupported=0,
            warnings=len(result.issues),
            elapsed_seconds=0.0,
        )
    status = "ok" if result.success else "failed"
    return (
        f"SUMMARY file={stats.file_name or file_name} "
        f"status={status} "
        f"rows={stats.rows} "
        f"weight_ranges={stats.weight_ranges} "
        f"box_ranges={stats.box_ranges} "
        f"unsupported={stats.unsupported} "
        f"warnings={stats.warnings} "
        f"elapsed_sec={_format_seconds(stats.elapsed_seconds)}"
    )
