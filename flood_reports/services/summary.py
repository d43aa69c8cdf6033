from __future__ import annotations

from ..models.run_result import RunResult
from .stats import format_2dp

"""SUMMARY line rendering.

The CLI logs one SUMMARY line per successful run so that operators (and
tests) can grep a single, stable line instead of parsing summary.json.
"""


def _format_seconds(value: float) -> str:
    # 整数秒は小数なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}"


def render_summary_line(result: RunResult) -> str:
    """Render the SUMMARY line for a finished run.

    Format:
    SUMMARY rows={accepted}/{raw} rejected={rejected} projects={n}
    contractors={n} regions={n} avg_delay={x.xx} savings={x.xx} elapsed_sec={s}

    Examples:
        >>> from datetime import datetime, timezone
        >>> from flood_reports.models.report_rows import ReportSummary
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> summary = ReportSummary(10, 2, 3, 12.5, 1000.0)
        >>> result = RunResult(
        ...     raw_rows=12, accepted_rows=10, rejected_rows=2, summary=summary,
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)  # doctest: +ELLIPSIS
        'SUMMARY rows=10/12 rejected=2 projects=10 contractors=2 regions=3 ...'
    """
    s = result.summary
    return (
        f"SUMMARY rows={result.accepted_rows}/{result.raw_rows} "
        f"rejected={result.rejected_rows} "
        f"projects={s.total_projects} "
        f"contractors={s.total_contractors} "
        f"regions={s.total_regions} "
        f"avg_delay={format_2dp(s.avg_global_delay)} "
        f"savings={format_2dp(s.total_savings)} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
