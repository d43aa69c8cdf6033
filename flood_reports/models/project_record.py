from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

"""ProjectRecord model.

A ProjectRecord is one source row after validation: typed fields plus the
two derived measures (cost savings, completion delay). Only rows with a
funding year in the accepted range and two parseable dates become records.
"""

__all__ = [
    "ProjectRecord",
]


@dataclass(frozen=True)
class ProjectRecord:
    """Validated, typed representation of one project row.

    ``cost_savings`` and ``completion_delay_days`` are derived in
    ``__post_init__`` and cannot be passed in.
    """
    approved_budget: float
    contract_cost: float
    start_date: date
    actual_completion_date: date
    funding_year: int
    region: str
    main_island: str
    contractor: str  # 空文字あり (Report 2 では除外)
    type_of_work: str
    row_number: int = 0  # 1-based data row in the source file (diagnostics only)
    cost_savings: float = field(init=False)
    completion_delay_days: int = field(init=False)

    def __post_init__(self) -> None:
        # frozen のため object.__setattr__ で派生値を設定
        object.__setattr__(self, "cost_savings", self.approved_budget - self.contract_cost)
        object.__setattr__(
            self,
            "completion_delay_days",
            (self.actual_completion_date - self.start_date).days,
        )
