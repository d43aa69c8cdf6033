"""Domain models for the flood-control report generator.

ProjectRecord is the typed input row; the *Row classes are the output rows
of the three reports; ReportSummary and RunResult describe a whole run.
"""

from .project_record import ProjectRecord
from .report_rows import (
    ContractorReliabilityRow,
    RegionEfficiencyRow,
    ReportSummary,
    WorkTypeTrendRow,
)
from .run_result import RunResult

__all__ = [
    # Input model
    "ProjectRecord",
    # Report rows
    "RegionEfficiencyRow",
    "ContractorReliabilityRow",
    "WorkTypeTrendRow",
    "ReportSummary",
    # Run
    "RunResult",
]
