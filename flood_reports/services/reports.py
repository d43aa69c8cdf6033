from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models.project_record import ProjectRecord
from ..models.report_rows import (
    ContractorReliabilityRow,
    RegionEfficiencyRow,
    ReportSummary,
    WorkTypeTrendRow,
)
from .stats import average, bounded_score, median, rate_percent

"""Report aggregators.

Each generator is a pure function of the normalized record sequence. Groups
are collected in insertion-ordered dicts of small accumulator objects and
the output is always re-sorted on the numeric value, so group order never
leaks into the reports.
"""

__all__ = [
    "DELAY_THRESHOLD_DAYS",
    "MIN_CONTRACTOR_PROJECTS",
    "TOP_CONTRACTORS",
    "DELAY_HORIZON_DAYS",
    "BASELINE_YEAR",
    "generate_region_report",
    "generate_contractor_report",
    "generate_work_type_report",
    "generate_summary",
]

DELAY_THRESHOLD_DAYS = 30
MIN_CONTRACTOR_PROJECTS = 5
TOP_CONTRACTORS = 15
DELAY_HORIZON_DAYS = 90
BASELINE_YEAR = 2021


@dataclass
class _RegionGroup:
    budgets: list[float] = field(default_factory=list)
    savings: list[float] = field(default_factory=list)
    delays: list[int] = field(default_factory=list)


@dataclass
class _ContractorGroup:
    projects: int = 0
    delays: list[int] = field(default_factory=list)
    total_savings: float = 0.0
    total_cost: float = 0.0


def generate_region_report(records: Sequence[ProjectRecord]) -> list[RegionEfficiencyRow]:
    """Regional efficiency per (region, main island), best score first.

    EfficiencyScore = 100 * median(savings) / average(delays), bounded to
    [0, 100]; an average delay of 0 scores 0.
    """
    groups: dict[tuple[str, str], _RegionGroup] = {}
    for r in records:
        grp = groups.setdefault((r.region, r.main_island), _RegionGroup())
        grp.budgets.append(r.approved_budget)
        grp.savings.append(r.cost_savings)
        grp.delays.append(r.completion_delay_days)

    rows: list[RegionEfficiencyRow] = []
    for (region, main_island), grp in groups.items():
        median_savings = median(grp.savings)
        avg_delay = average(grp.delays)
        late = sum(1 for d in grp.delays if d > DELAY_THRESHOLD_DAYS)
        raw_score = median_savings / avg_delay * 100 if avg_delay else float("nan")
        rows.append(
            RegionEfficiencyRow(
                region=region,
                main_island=main_island,
                total_approved_budget=sum(grp.budgets),
                median_cost_savings=median_savings,
                avg_completion_delay_days=avg_delay,
                delay_over_30_percent=rate_percent(late, len(grp.delays)),
                efficiency_score=bounded_score(raw_score),
            )
        )

    # 数値で降順 (文字列比較しない)
    rows.sort(key=lambda row: row.efficiency_score, reverse=True)
    return rows


def generate_contractor_report(records: Sequence[ProjectRecord]) -> list[ContractorReliabilityRow]:
    """Top contractors (5+ projects) by total cost savings, at most 15 rows."""
    groups: dict[str, _ContractorGroup] = {}
    for r in records:
        if not r.contractor:
            continue
        grp = groups.setdefault(r.contractor, _ContractorGroup())
        grp.projects += 1
        grp.delays.append(r.completion_delay_days)
        grp.total_savings += r.cost_savings
        grp.total_cost += r.contract_cost

    rows: list[ContractorReliabilityRow] = []
    for contractor, grp in groups.items():
        if grp.projects < MIN_CONTRACTOR_PROJECTS:
            continue
        avg_delay = average(grp.delays)
        savings_ratio = grp.total_savings / grp.total_cost if grp.total_cost else float("nan")
        raw_index = (1 - avg_delay / DELAY_HORIZON_DAYS) * savings_ratio * 100
        rows.append(
            ContractorReliabilityRow(
                contractor=contractor,
                projects=grp.projects,
                avg_delay=avg_delay,
                total_cost_savings=grp.total_savings,
                reliability_index=bounded_score(raw_index),
            )
        )

    rows.sort(key=lambda row: row.total_cost_savings, reverse=True)
    return rows[:TOP_CONTRACTORS]


def generate_work_type_report(records: Sequence[ProjectRecord]) -> list[WorkTypeTrendRow]:
    """Cost-savings trend per (funding year, type of work).

    YoYChangePercent compares each year's mean of group averages with the
    2021 mean of group averages (unweighted by project count). 2021 rows are
    fixed at 0; a zero baseline is divided by 1 instead.
    """
    groups: dict[tuple[int, str], list[float]] = {}
    for r in records:
        groups.setdefault((r.funding_year, r.type_of_work), []).append(r.cost_savings)

    group_avgs: dict[tuple[int, str], float] = {key: average(savings) for key, savings in groups.items()}

    avgs_by_year: dict[int, list[float]] = {}
    for (year, _), avg in group_avgs.items():
        avgs_by_year.setdefault(year, []).append(avg)

    baseline = average(avgs_by_year.get(BASELINE_YEAR, [0.0]))
    divisor = abs(baseline) if baseline else 1.0

    rows: list[WorkTypeTrendRow] = []
    for (year, type_of_work), savings in groups.items():
        if year == BASELINE_YEAR:
            change = 0.0
        else:
            change = (average(avgs_by_year[year]) - baseline) / divisor * 100
        overruns = sum(1 for s in savings if s < 0)
        rows.append(
            WorkTypeTrendRow(
                funding_year=year,
                type_of_work=type_of_work,
                total_projects=len(savings),
                avg_cost_savings=group_avgs[(year, type_of_work)],
                overrun_rate=rate_percent(overruns, len(savings)),
                yoy_change_percent=change,
            )
        )

    rows.sort(key=lambda row: (row.funding_year, -row.avg_cost_savings))
    return rows


def generate_summary(
    records: Sequence[ProjectRecord],
    contractor_rows: Sequence[ContractorReliabilityRow],
    region_rows: Sequence[RegionEfficiencyRow],
) -> ReportSummary:
    """Summary over all records.

    Contractor and region counts come from the report outputs, so only
    contractors that made it into the reliability report are counted.
    """
    return ReportSummary(
        total_projects=len(records),
        total_contractors=len({row.contractor for row in contractor_rows}),
        total_regions=len({(row.region, row.main_island) for row in region_rows}),
        avg_global_delay=average([r.completion_delay_days for r in records]),
        total_savings=sum(r.cost_savings for r in records),
    )
