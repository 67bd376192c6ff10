"""
Report assembly.

Fetches a read-only snapshot from the property registry and ledger, runs the
pure calculations over it and returns the report records the API serializes.
Nothing is cached: every call recomputes from the current ledger.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from app.calculations.aggregation import (
    FinancialSummary,
    TaxYearSummary,
    summarize_financials,
    summarize_tax_year,
    validate_tax_year,
)
from app.calculations.classification import (
    CashFlowStatement,
    build_cash_flow_statement,
    trailing_window,
)
from app.calculations.comparison import (
    YearlyTaxData,
    compare_tax_years,
    validate_year_range,
)
from app.calculations.money import ZERO
from app.calculations.performance import PropertyPerformance, calculate_performance
from app.calculations.records import PropertySnapshot
from app.calculations.tax import (
    BracketCalculation,
    FlatTaxEstimate,
    TaxBracket,
    adjust_taxable_income,
    calculate_bracket_tax,
    estimate_flat_tax,
    validate_brackets,
)
from app.config import get_settings
from app.db.repositories import CategoryDirectory, LedgerStore, PropertyRegistry
from app.services.clock import Clock

logger = logging.getLogger(__name__)


@dataclass
class FinancialReport(FinancialSummary):
    property_id: str = ""
    property_name: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class CashFlowReport(CashFlowStatement):
    property_id: str = ""
    property_name: str = ""
    year: int = 0
    month: int = 0


@dataclass
class TaxReport(TaxYearSummary):
    property_id: str = ""
    property_name: str = ""


@dataclass
class MultiYearTaxComparison:
    property_id: str
    property_name: str
    yearly_data: List[YearlyTaxData] = field(default_factory=list)


@dataclass
class TaxEstimation(FlatTaxEstimate):
    property_id: str = ""
    property_name: str = ""
    tax_year: int = 0


@dataclass
class TaxBracketReport(BracketCalculation):
    property_id: str = ""
    property_name: str = ""
    tax_year: int = 0


class ReportService:
    """Builds financial, performance and tax reports for properties."""

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize report service.

        Args:
            db: Database session used for the read-only fetches
            clock: Time source for "today"; defaults to the wall clock
            max_workers: Bound on parallel per-property computations
        """
        self.properties = PropertyRegistry(db)
        self.categories = CategoryDirectory(db)
        self.ledger = LedgerStore(db, self.categories)
        self.clock = clock or Clock()
        self.max_workers = max_workers or get_settings().portfolio_max_workers

    # === Financial reports ===

    def financial_report(
        self,
        property_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> FinancialReport:
        """
        Income statement for a property over a date range.

        Omitted bounds default to the start and end of the current year.
        """
        prop = self.properties.get_property(property_id)
        today = self.clock.today()
        start = start_date or date(today.year, 1, 1)
        end = end_date or date(today.year, 12, 31)
        logger.info(f"Financial report for property {property_id} ({start} to {end})")

        transactions = self.ledger.list_transactions(property_id, start, end)
        return self._financial_report(prop, transactions, start, end)

    def _financial_report(
        self, prop: PropertySnapshot, transactions, start: date, end: date
    ) -> FinancialReport:
        summary = summarize_financials(transactions, start, end)
        return FinancialReport(
            **vars(summary),
            property_id=prop.id,
            property_name=prop.name,
            start_date=start,
            end_date=end,
        )

    def general_financial_report(self, owner_id: str) -> List[FinancialReport]:
        """Trailing-year financial report for every property of an owner."""
        end = self.clock.today()
        start = end - relativedelta(years=1)
        logger.info(f"General financial report for owner {owner_id} ({start} to {end})")

        return [
            self._financial_report(
                prop, self.ledger.list_transactions(prop.id, start, end), start, end
            )
            for prop in self.properties.list_owner_properties(owner_id)
        ]

    def cash_flow_report(
        self, property_id: str, report_date: Optional[date] = None
    ) -> CashFlowReport:
        """Cash flow statement for one month (default: the current month)."""
        prop = self.properties.get_property(property_id)
        report_date = report_date or self.clock.today()
        logger.info(
            f"Cash flow report for property {property_id} "
            f"({report_date.year}-{report_date.month:02d})"
        )

        window_start, window_end = trailing_window(report_date)
        transactions = self.ledger.list_transactions(
            property_id, window_start, window_end
        )
        statement = build_cash_flow_statement(transactions, prop, report_date)
        return CashFlowReport(
            **vars(statement),
            property_id=prop.id,
            property_name=prop.name,
            year=report_date.year,
            month=report_date.month,
        )

    # === Performance ===

    def property_performance(self, property_id: str) -> PropertyPerformance:
        """Lifetime performance metrics for a property."""
        prop = self.properties.get_property(property_id)
        logger.info(f"Performance for property {property_id}")
        transactions = self.ledger.list_transactions(property_id)
        return calculate_performance(prop, transactions, self.clock.today())

    def portfolio_performance(self, owner_id: str) -> List[PropertyPerformance]:
        """
        Performance metrics for every property of an owner.

        Snapshots are fetched sequentially on the request's session; the
        calculations then run in parallel. Results follow registry order.
        """
        as_of = self.clock.today()
        snapshots = [
            (prop, self.ledger.list_transactions(prop.id))
            for prop in self.properties.list_owner_properties(owner_id)
        ]
        logger.info(
            f"Portfolio performance for owner {owner_id} ({len(snapshots)} properties)"
        )
        if not snapshots:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(
                pool.map(
                    lambda snapshot: calculate_performance(
                        snapshot[0], snapshot[1], as_of
                    ),
                    snapshots,
                )
            )

    # === Tax ===

    def tax_report(self, property_id: str, tax_year: int) -> TaxReport:
        """Taxable income and category breakdown for a calendar year."""
        self._check_tax_year(property_id, tax_year)
        prop = self.properties.get_property(property_id)
        logger.info(f"Tax report for property {property_id} ({tax_year})")
        return self._tax_report(prop, tax_year)

    def _check_tax_year(self, subject_id: str, tax_year: int) -> None:
        try:
            validate_tax_year(tax_year)
        except ValueError as e:
            logger.warning(f"Rejected tax year for {subject_id}: {e}")
            raise

    def _tax_report(self, prop: PropertySnapshot, tax_year: int) -> TaxReport:
        transactions = self.ledger.list_transactions(
            prop.id, date(tax_year, 1, 1), date(tax_year, 12, 31)
        )
        summary = summarize_tax_year(transactions, tax_year)
        return TaxReport(**vars(summary), property_id=prop.id, property_name=prop.name)

    def all_properties_tax_report(self, owner_id: str, tax_year: int) -> List[TaxReport]:
        """Tax report for every property of an owner."""
        self._check_tax_year(owner_id, tax_year)
        logger.info(f"Tax reports for owner {owner_id} ({tax_year})")
        return [
            self._tax_report(prop, tax_year)
            for prop in self.properties.list_owner_properties(owner_id)
        ]

    def multi_year_tax_comparison(
        self, property_id: str, start_year: int, end_year: int
    ) -> MultiYearTaxComparison:
        """
        Year-by-year tax figures with year-over-year changes.

        Raises:
            ValidationError: If the range is reversed or longer than allowed
        """
        try:
            validate_year_range(start_year, end_year)
        except ValueError as e:
            logger.warning(f"Rejected year range for property {property_id}: {e}")
            raise

        prop = self.properties.get_property(property_id)
        logger.info(
            f"Multi-year tax comparison for property {property_id} "
            f"({start_year}-{end_year})"
        )

        transactions = self.ledger.list_transactions(
            property_id, date(start_year, 1, 1), date(end_year, 12, 31)
        )
        return MultiYearTaxComparison(
            property_id=prop.id,
            property_name=prop.name,
            yearly_data=compare_tax_years(transactions, start_year, end_year),
        )

    def estimate_taxes(
        self,
        property_id: str,
        tax_year: int,
        tax_rate: Decimal,
        additional_income: Decimal = ZERO,
        additional_deductions: Decimal = ZERO,
    ) -> TaxEstimation:
        """Flat-rate tax estimate on the tax year's taxable income."""
        report = self.tax_report(property_id, tax_year)
        estimate = estimate_flat_tax(
            report.taxable_income, tax_rate, additional_income, additional_deductions
        )
        return TaxEstimation(
            **vars(estimate),
            property_id=report.property_id,
            property_name=report.property_name,
            tax_year=tax_year,
        )

    def calculate_with_brackets(
        self,
        property_id: str,
        tax_year: int,
        brackets: Sequence[TaxBracket],
        additional_income: Decimal = ZERO,
        additional_deductions: Decimal = ZERO,
    ) -> TaxBracketReport:
        """
        Progressive tax on the tax year's taxable income.

        Raises:
            ValidationError: If the bracket table is malformed
        """
        try:
            validate_brackets(brackets)
        except ValueError as e:
            logger.warning(f"Rejected bracket table for property {property_id}: {e}")
            raise

        report = self.tax_report(property_id, tax_year)
        taxable_income = adjust_taxable_income(
            report.taxable_income, additional_income, additional_deductions
        )
        calculation = calculate_bracket_tax(brackets, taxable_income)
        return TaxBracketReport(
            **vars(calculation),
            property_id=report.property_id,
            property_name=report.property_name,
            tax_year=tax_year,
        )
