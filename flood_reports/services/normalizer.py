from __future__ import annotations

import logging
import math
import re
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

import pandas as pd

from ..models.project_record import ProjectRecord

"""Record normalizer: RawRow -> ProjectRecord or rejection.

This is the only place that touches untyped, string-keyed row data.
Rejected rows are dropped; the reason is counted in NormalizationStats and
logged at DEBUG per row.

Rejection rules (checked in this order):
- funding_year: FundingYear missing, zero or outside [2021, 2023]
- start_date: StartDate empty or unparseable
- completion_date: ActualCompletionDate empty or unparseable
"""

logger = logging.getLogger(__name__)

__all__ = [
    "REQUIRED_COLUMNS",
    "MIN_FUNDING_YEAR",
    "MAX_FUNDING_YEAR",
    "NormalizationStats",
    "parse_amount",
    "parse_year",
    "parse_date",
    "normalize_row",
    "normalize_rows",
]

REQUIRED_COLUMNS = (
    "ApprovedBudgetForContract",
    "ContractCost",
    "StartDate",
    "ActualCompletionDate",
    "FundingYear",
    "Region",
    "MainIsland",
    "Contractor",
    "TypeOfWork",
)

MIN_FUNDING_YEAR = 2021
MAX_FUNDING_YEAR = 2023

# pandas が実行時刻に解決してしまう語
_RELATIVE_DATE_WORDS = frozenset({"now", "today"})

REJECT_FUNDING_YEAR = "funding_year"
REJECT_START_DATE = "start_date"
REJECT_COMPLETION_DATE = "completion_date"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class NormalizationStats:
    total: int = 0
    accepted: int = 0
    reasons: Counter[str] = field(default_factory=Counter)

    @property
    def rejected(self) -> int:
        return self.total - self.accepted


def parse_amount(text: str | None) -> float:
    """Parse a money figure such as ``"1,234,567.89"``.

    Thousands separators are removed; empty, non-numeric and non-finite
    text all yield 0.0.
    """
    if text is None:
        return 0.0
    cleaned = str(text).replace(",", "").strip()
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def parse_year(text: str | None) -> int:
    """Leading integer of the text (``"2022"``, ``"2022.0"`` -> 2022), else 0."""
    if text is None:
        return 0
    m = _LEADING_INT.match(str(text))
    return int(m.group(1)) if m else 0


def parse_date(text: str | None) -> date | None:
    """Permissive date parse; time-of-day is dropped. Invalid -> None.

    ``now`` / ``today`` are refused: pandas would resolve them to the clock.
    """
    if text is None or not str(text).strip():
        return None
    value = str(text).strip()
    if value.lower() in _RELATIVE_DATE_WORDS:
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def _text(raw: Mapping[str, str], column: str) -> str:
    value = raw.get(column)
    return "" if value is None else str(value).strip()


def _classify_row(raw: Mapping[str, str], row_number: int) -> tuple[ProjectRecord | None, str | None]:
    funding_year = parse_year(raw.get("FundingYear"))
    if not funding_year or not MIN_FUNDING_YEAR <= funding_year <= MAX_FUNDING_YEAR:
        return None, REJECT_FUNDING_YEAR

    start_date = parse_date(raw.get("StartDate"))
    if start_date is None:
        return None, REJECT_START_DATE
    completion_date = parse_date(raw.get("ActualCompletionDate"))
    if completion_date is None:
        return None, REJECT_COMPLETION_DATE

    record = ProjectRecord(
        approved_budget=parse_amount(raw.get("ApprovedBudgetForContract")),
        contract_cost=parse_amount(raw.get("ContractCost")),
        start_date=start_date,
        actual_completion_date=completion_date,
        funding_year=funding_year,
        region=_text(raw, "Region"),
        main_island=_text(raw, "MainIsland"),
        contractor=_text(raw, "Contractor"),
        type_of_work=_text(raw, "TypeOfWork"),
        row_number=row_number,
    )
    return record, None


def normalize_row(raw: Mapping[str, str], row_number: int = 0) -> ProjectRecord | None:
    """Normalize one RawRow; returns None when the row is rejected."""
    record, _ = _classify_row(raw, row_number)
    return record


def normalize_rows(rows: Iterable[Mapping[str, str]]) -> tuple[list[ProjectRecord], NormalizationStats]:
    """Normalize a row sequence, preserving source order.

    Returns:
        (accepted records, stats with per-reason rejection counts)
    """
    stats = NormalizationStats()
    records: list[ProjectRecord] = []
    for row_number, raw in enumerate(rows, start=1):
        stats.total += 1
        record, reason = _classify_row(raw, row_number)
        if record is None:
            stats.reasons[reason or "unknown"] += 1
            logger.debug(f"row {row_number} rejected: {reason}")
            continue
        stats.accepted += 1
        records.append(record)
    return records, stats
