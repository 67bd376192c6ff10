"""
Multi-Year Tax Comparison

Runs the tax-year aggregation once per calendar year and reports
year-over-year changes.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from app.calculations.aggregation import (
    TaxYearSummary,
    summarize_tax_year,
    validate_tax_year,
)
from app.calculations.money import ZERO, percentage
from app.calculations.records import LedgerTransaction
from app.errors import ValidationError

MAX_SPAN_YEARS = 5


@dataclass
class YearlyTaxData:
    """One year of a multi-year comparison."""

    year: int
    total_income: Decimal
    total_deductible_expenses: Decimal
    taxable_income: Decimal
    year_over_year_income_change: Decimal
    year_over_year_expense_change: Decimal


def validate_year_range(start_year: int, end_year: int) -> None:
    """
    Reject unrepresentable years, reversed ranges and spans beyond MAX_SPAN_YEARS.

    Raises:
        ValidationError: If a year is out of range or the range is reversed or too wide
    """
    validate_tax_year(start_year)
    validate_tax_year(end_year)
    if start_year > end_year:
        raise ValidationError(
            f"Start year {start_year} must be less than or equal to end year {end_year}"
        )
    if end_year - start_year > MAX_SPAN_YEARS:
        raise ValidationError(
            f"Maximum range is {MAX_SPAN_YEARS} years "
            f"(requested {start_year}-{end_year})"
        )


def year_over_year_change(current: Decimal, previous: Optional[Decimal]) -> Decimal:
    """Percentage change from the previous year; 0 without a positive base."""
    if previous is None or previous <= 0:
        return ZERO
    return percentage(current - previous, previous)


def compare_tax_years(
    transactions: Sequence[LedgerTransaction], start_year: int, end_year: int
) -> List[YearlyTaxData]:
    """
    Build the year-by-year comparison for an inclusive year range.

    Args:
        transactions: Ledger covering at least the requested years
        start_year: First calendar year
        end_year: Last calendar year

    Returns:
        One YearlyTaxData per year, in ascending order

    Raises:
        ValidationError: If the year range is invalid
    """
    validate_year_range(start_year, end_year)

    yearly_data: List[YearlyTaxData] = []
    previous: Optional[TaxYearSummary] = None
    for year in range(start_year, end_year + 1):
        summary = summarize_tax_year(transactions, year)
        yearly_data.append(
            YearlyTaxData(
                year=year,
                total_income=summary.total_income,
                total_deductible_expenses=summary.total_deductible_expenses,
                taxable_income=summary.taxable_income,
                year_over_year_income_change=year_over_year_change(
                    summary.total_income,
                    previous.total_income if previous else None,
                ),
                year_over_year_expense_change=year_over_year_change(
                    summary.total_deductible_expenses,
                    previous.total_deductible_expenses if previous else None,
                ),
            )
        )
        previous = summary

    return yearly_data
