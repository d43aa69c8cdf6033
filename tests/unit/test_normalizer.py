from __future__ import annotations

from datetime import date

import pytest

from flood_reports.services.normalizer import (
    normalize_row,
    normalize_rows,
    parse_amount,
    parse_date,
    parse_year,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1,234,567.89", 1234567.89),
        ("  2500 ", 2500.0),
        ("", 0.0),
        (None, 0.0),
        ("n/a", 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
        ("-1,000", -1000.0),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("2021", 2021), ("2022.0", 2022), (" 2023 ", 2023), ("", 0), ("FY", 0), (None, 0)],
)
def test_parse_year(text, expected):
    assert parse_year(text) == expected


def test_parse_date_accepts_common_formats():
    assert parse_date("2022-03-15") == date(2022, 3, 15)
    assert parse_date("03/15/2022") == date(2022, 3, 15)
    assert parse_date("2022-03-15 08:30:00") == date(2022, 3, 15)


@pytest.mark.parametrize("text", ["", "   ", None, "not a date"])
def test_parse_date_invalid_is_none(text):
    assert parse_date(text) is None


@pytest.mark.parametrize("year", ["2020", "2024", "0", ""])
def test_out_of_range_funding_year_rejected(raw_row, year):
    assert normalize_row(raw_row(FundingYear=year)) is None


@pytest.mark.parametrize("year", ["2021", "2022", "2023"])
def test_in_range_funding_year_accepted(raw_row, year):
    record = normalize_row(raw_row(FundingYear=year))
    assert record is not None
    assert record.funding_year == int(year)


def test_unparsable_start_date_rejected(raw_row):
    assert normalize_row(raw_row(StartDate="31/31/2022")) is None


@pytest.mark.parametrize("text", ["now", "today", "NOW", " Today "])
def test_parse_date_refuses_clock_words(text):
    assert parse_date(text) is None


def test_start_date_now_rejected(raw_row):
    assert normalize_row(raw_row(StartDate="now")) is None
    assert normalize_row(raw_row(ActualCompletionDate="today")) is None


def test_missing_completion_date_rejected(raw_row):
    row = raw_row()
    del row["ActualCompletionDate"]
    assert normalize_row(row) is None


def test_accepted_row_is_typed_and_derived(raw_row):
    record = normalize_row(
        raw_row(
            ApprovedBudgetForContract="1,000,000.00",
            ContractCost="1,050,000.00",
            StartDate="2022-01-10",
            ActualCompletionDate="2022-03-11",
            Region="  Region III ",
            Contractor=" Acme Builders\t",
        ),
        row_number=7,
    )
    assert record is not None
    assert record.approved_budget == 1_000_000.0
    assert record.contract_cost == 1_050_000.0
    assert record.cost_savings == -50_000.0
    assert record.completion_delay_days == 60
    assert record.region == "Region III"
    assert record.contractor == "Acme Builders"
    assert record.row_number == 7


def test_non_numeric_amounts_become_zero(raw_row):
    record = normalize_row(raw_row(ApprovedBudgetForContract="TBA", ContractCost=""))
    assert record is not None
    assert record.approved_budget == 0.0
    assert record.contract_cost == 0.0
    assert record.cost_savings == 0.0


def test_completion_before_start_gives_negative_delay(raw_row):
    record = normalize_row(raw_row(StartDate="2022-05-10", ActualCompletionDate="2022-05-01"))
    assert record is not None
    assert record.completion_delay_days == -9


def test_missing_string_column_is_empty(raw_row):
    row = raw_row()
    del row["Contractor"]
    record = normalize_row(row)
    assert record is not None
    assert record.contractor == ""


def test_normalize_rows_counts_rejections(sample_rows):
    records, stats = normalize_rows(sample_rows)
    assert stats.total == len(sample_rows)
    assert stats.accepted == len(records) == 7
    assert stats.rejected == 3
    assert stats.reasons == {"funding_year": 1, "start_date": 1, "completion_date": 1}
    # source order preserved, row numbers are 1-based
    assert [r.row_number for r in records] == [1, 2, 3, 4, 5, 6, 7]
