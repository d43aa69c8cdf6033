from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .report_rows import ReportSummary

"""Run result model returned by the orchestrator.

Holds the row accounting of one run (raw / accepted / rejected), the
paths of every written artifact and the summary, for the CLI to log.
"""


@dataclass(frozen=True)
class RunResult:
    raw_rows: int  # 読込行数
    accepted_rows: int  # 正規化後の行数
    rejected_rows: int
    summary: ReportSummary
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    rejection_reasons: dict[str, int] = field(default_factory=dict)
    artifacts: list[Path] = field(default_factory=list)  # 書き出し順
    skipped_lines: int = 0  # CSV として壊れていた行
