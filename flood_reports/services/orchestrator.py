from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ReportConfig
from ..models.project_record import ProjectRecord
from ..models.report_rows import (
    CONTRACTOR_REPORT_COLUMNS,
    REGION_REPORT_COLUMNS,
    WORK_TYPE_REPORT_COLUMNS,
    ContractorReliabilityRow,
    RegionEfficiencyRow,
    ReportSummary,
    WorkTypeTrendRow,
)
from ..models.run_result import RunResult
from ..tabular.reader import (
    MissingColumnsError,
    TableData,
    TableReadError,
    normalize_table,
    read_csv_file,
)
from ..tabular.writer import TableWriteError, write_csv_report, write_json_document
from .normalizer import REQUIRED_COLUMNS, normalize_rows
from .progress import ProgressTracker
from .reports import (
    generate_contractor_report,
    generate_region_report,
    generate_summary,
    generate_work_type_report,
)

logger = logging.getLogger(__name__)

"""Pipeline orchestration: load -> normalize -> aggregate -> persist.

Everything is computed in memory before the first artifact is written, so a
load failure never leaves partial reports behind. Each artifact write is
atomic (see tabular.writer).
"""


class ProcessingError(Exception):
    """Base exception for fatal pipeline errors."""
    pass


class LoadError(ProcessingError):
    """Source table missing, unreadable or lacking required columns."""


class WriteError(ProcessingError):
    """An output artifact could not be written."""


@dataclass(frozen=True)
class ReportSet:
    region: list[RegionEfficiencyRow]
    contractor: list[ContractorReliabilityRow]
    work_type: list[WorkTypeTrendRow]
    summary: ReportSummary


def load_table(config: ReportConfig) -> TableData:
    """Read the configured input file into RawRows.

    Raises:
        LoadError: file missing / unreadable / malformed, or required
            columns absent from the header
    """
    path = Path(config.input_file)
    try:
        df = read_csv_file(path, encoding=config.encoding)
        return normalize_table(df, path.name, expected_columns=REQUIRED_COLUMNS)
    except (TableReadError, MissingColumnsError) as e:
        raise LoadError(str(e)) from e


def build_reports(records: list[ProjectRecord]) -> ReportSet:
    region = generate_region_report(records)
    contractor = generate_contractor_report(records)
    work_type = generate_work_type_report(records)
    summary = generate_summary(records, contractor, region)
    return ReportSet(region=region, contractor=contractor, work_type=work_type, summary=summary)


def write_reports(config: ReportConfig, reports: ReportSet) -> list[Path]:
    """Persist the three CSV reports and summary.json, in that order.

    Raises:
        WriteError: on the first artifact that cannot be written
    """
    outputs = config.outputs
    jobs = [
        (outputs.region_report, REGION_REPORT_COLUMNS, [r.to_row() for r in reports.region]),
        (outputs.contractor_report, CONTRACTOR_REPORT_COLUMNS, [r.to_row() for r in reports.contractor]),
        (outputs.work_type_report, WORK_TYPE_REPORT_COLUMNS, [r.to_row() for r in reports.work_type]),
    ]
    written: list[Path] = []
    with ProgressTracker(len(jobs) + 1) as progress:
        try:
            for name, columns, rows in jobs:
                progress.start(name)
                path = write_csv_report(config.output_path(name), columns, rows)
                logger.info(f"Saved {path} ({len(rows)} rows)")
                written.append(path)
                progress.finish()

            progress.start(outputs.summary)
            path = write_json_document(config.output_path(outputs.summary), reports.summary.to_dict())
            logger.info(f"Saved {path}")
            written.append(path)
            progress.finish()
        except TableWriteError as e:
            raise WriteError(str(e)) from e
    return written


def run(config: ReportConfig) -> RunResult:
    """Run the whole pipeline once for ``config``.

    Raises:
        ProcessingError: LoadError / WriteError (fatal for the run)
    """
    start_time = datetime.now(UTC)

    logger.info(f"Loading data from {config.input_file}")
    table = load_table(config)
    logger.info(f"Loaded {len(table.rows)} raw rows")
    if table.skipped_lines:
        logger.warning(f"Skipped {table.skipped_lines} malformed lines in {table.source} (too many fields)")

    records, stats = normalize_rows(table.rows)
    logger.info(f"Filtered & cleaned: {stats.accepted} rows")
    if stats.rejected:
        detail = " ".join(f"{k}={v}" for k, v in sorted(stats.reasons.items()))
        logger.info(f"Rejected {stats.rejected} rows ({detail})")

    reports = build_reports(records)
    artifacts = write_reports(config, reports)

    end_time = datetime.now(UTC)
    return RunResult(
        raw_rows=stats.total,
        accepted_rows=stats.accepted,
        rejected_rows=stats.rejected,
        summary=reports.summary,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        rejection_reasons=dict(stats.reasons),
        artifacts=artifacts,
        skipped_lines=table.skipped_lines,
    )
