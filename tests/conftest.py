# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from datetime import date, timedelta
from pathlib import Path

import pandas as pd
import pytest

from flood_reports.models.project_record import ProjectRecord

CSV_COLUMNS = [
    "ProjectId",
    "ApprovedBudgetForContract",
    "ContractCost",
    "StartDate",
    "ActualCompletionDate",
    "FundingYear",
    "Region",
    "MainIsland",
    "Contractor",
    "TypeOfWork",
]


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FLOOD_REPORTS_INPUT", raising=False)
    monkeypatch.delenv("FLOOD_REPORTS_OUTPUT_DIR", raising=False)
    return tmp_path


def _raw_row(**overrides: str) -> dict[str, str]:
    row = {
        "ProjectId": "P-0001",
        "ApprovedBudgetForContract": "1,000,000.00",
        "ContractCost": "900,000.00",
        "StartDate": "2022-01-10",
        "ActualCompletionDate": "2022-03-11",
        "FundingYear": "2022",
        "Region": "Region III",
        "MainIsland": "Luzon",
        "Contractor": "Acme Builders",
        "TypeOfWork": "Construction of Flood Mitigation Structure",
    }
    row.update(overrides)
    return row


@pytest.fixture()
def raw_row() -> Callable[..., dict[str, str]]:
    """Factory for a valid RawRow; keyword arguments override columns."""
    return _raw_row


@pytest.fixture()
def sample_rows() -> list[dict[str, str]]:
    rows = []
    # 5 projects for Acme in Region III / Luzon (2021 + 2022)
    for i in range(5):
        rows.append(
            _raw_row(
                ProjectId=f"A-{i}",
                FundingYear="2021" if i < 3 else "2022",
                StartDate="2021-02-01",
                ActualCompletionDate="2021-03-13" if i % 2 else "2021-02-21",
                ApprovedBudgetForContract="1,000,000.00",
                ContractCost="950,000.00",
            )
        )
    # 2 projects for a small contractor in Region VII / Visayas
    for i in range(2):
        rows.append(
            _raw_row(
                ProjectId=f"B-{i}",
                Region="Region VII",
                MainIsland="Visayas",
                Contractor="Bantay Corp",
                FundingYear="2023",
                ApprovedBudgetForContract="500,000.00",
                ContractCost="520,000.00",
                TypeOfWork="Rehabilitation of Drainage",
            )
        )
    # rejected rows
    rows.append(_raw_row(ProjectId="X-1", FundingYear="2020"))
    rows.append(_raw_row(ProjectId="X-2", StartDate="not a date"))
    rows.append(_raw_row(ProjectId="X-3", ActualCompletionDate=""))
    return rows


@pytest.fixture()
def write_csv(temp_workdir: Path) -> Callable[..., Path]:
    def _write(rows: list[dict[str, str]], name: str = "data/projects.csv") -> Path:
        path = temp_workdir / name
        pd.DataFrame(rows, columns=CSV_COLUMNS).to_csv(path, index=False)
        return path

    return _write


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input_file: data/projects.csv
output_directory: out
outputs:
  region_report: regions.csv
  contractor_report: contractors.csv
  work_type_report: work_types.csv
  summary: summary.json
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "reports.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _record(
    *,
    budget: float = 1000.0,
    cost: float = 900.0,
    delay: int = 10,
    year: int = 2022,
    region: str = "Region III",
    island: str = "Luzon",
    contractor: str = "Acme Builders",
    work: str = "Flood Control",
    start: date = date(2022, 1, 1),
) -> ProjectRecord:
    return ProjectRecord(
        approved_budget=budget,
        contract_cost=cost,
        start_date=start,
        actual_completion_date=start + timedelta(days=delay),
        funding_year=year,
        region=region,
        main_island=island,
        contractor=contractor,
        type_of_work=work,
    )


@pytest.fixture()
def make_record() -> Callable[..., ProjectRecord]:
    """Factory for ProjectRecord; savings = budget - cost, delay in days."""
    return _record
