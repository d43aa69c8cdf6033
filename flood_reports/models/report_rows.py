from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..services.stats import format_2dp

"""Output row models for the three reports and the summary document.

Rows keep their numeric values as floats so that sorting and threshold
checks work on numbers; the fixed two-decimal text only appears in
``to_row()`` / ``to_dict()``. Column tuples double as the CSV headers.
"""

__all__ = [
    "REGION_REPORT_COLUMNS",
    "CONTRACTOR_REPORT_COLUMNS",
    "WORK_TYPE_REPORT_COLUMNS",
    "HIGH_RISK_THRESHOLD",
    "RegionEfficiencyRow",
    "ContractorReliabilityRow",
    "WorkTypeTrendRow",
    "ReportSummary",
]

REGION_REPORT_COLUMNS = (
    "Region",
    "MainIsland",
    "TotalApprovedBudget",
    "MedianCostSavings",
    "AvgCompletionDelayDays",
    "DelayOver30Percent",
    "EfficiencyScore",
)

CONTRACTOR_REPORT_COLUMNS = (
    "Contractor",
    "Projects",
    "AvgDelay",
    "TotalCostSavings",
    "ReliabilityIndex",
    "RiskFlag",
)

WORK_TYPE_REPORT_COLUMNS = (
    "FundingYear",
    "TypeOfWork",
    "TotalProjects",
    "AvgCostSavings",
    "OverrunRate",
    "YoYChangePercent",
)

HIGH_RISK_THRESHOLD = 50.0


@dataclass(frozen=True)
class RegionEfficiencyRow:
    """One (region, main island) group of the regional efficiency report."""
    region: str
    main_island: str
    total_approved_budget: float
    median_cost_savings: float
    avg_completion_delay_days: float
    delay_over_30_percent: float
    efficiency_score: float  # [0, 100]

    def to_row(self) -> dict[str, Any]:
        return {
            "Region": self.region,
            "MainIsland": self.main_island,
            "TotalApprovedBudget": format_2dp(self.total_approved_budget),
            "MedianCostSavings": format_2dp(self.median_cost_savings),
            "AvgCompletionDelayDays": format_2dp(self.avg_completion_delay_days),
            "DelayOver30Percent": format_2dp(self.delay_over_30_percent),
            "EfficiencyScore": format_2dp(self.efficiency_score),
        }


@dataclass(frozen=True)
class ContractorReliabilityRow:
    """One contractor of the reliability report (only contractors with 5+ projects)."""
    contractor: str
    projects: int
    avg_delay: float
    total_cost_savings: float
    reliability_index: float  # [0, 100]

    @property
    def risk_flag(self) -> str:
        # 数値で判定 (文字列化前)
        return "High Risk" if self.reliability_index < HIGH_RISK_THRESHOLD else "OK"

    def to_row(self) -> dict[str, Any]:
        return {
            "Contractor": self.contractor,
            "Projects": self.projects,
            "AvgDelay": format_2dp(self.avg_delay),
            "TotalCostSavings": format_2dp(self.total_cost_savings),
            "ReliabilityIndex": format_2dp(self.reliability_index),
            "RiskFlag": self.risk_flag,
        }


@dataclass(frozen=True)
class WorkTypeTrendRow:
    funding_year: int
    type_of_work: str
    total_projects: int
    avg_cost_savings: float
    overrun_rate: float
    yoy_change_percent: float

    def to_row(self) -> dict[str, Any]:
        return {
            "FundingYear": self.funding_year,
            "TypeOfWork": self.type_of_work,
            "TotalProjects": self.total_projects,
            "AvgCostSavings": format_2dp(self.avg_cost_savings),
            "OverrunRate": format_2dp(self.overrun_rate),
            "YoYChangePercent": format_2dp(self.yoy_change_percent),
        }


@dataclass(frozen=True)
class ReportSummary:
    """Whole-dataset summary written as summary.json.

    Counts stay integers; the two money/day figures use the same
    two-decimal text as the CSV reports.
    """
    total_projects: int
    total_contractors: int
    total_regions: int
    avg_global_delay: float
    total_savings: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalProjects": self.total_projects,
            "totalContractors": self.total_contractors,
            "totalRegions": self.total_regions,
            "avgGlobalDelay": format_2dp(self.avg_global_delay),
            "totalSavings": format_2dp(self.total_savings),
        }
