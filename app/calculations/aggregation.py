"""
Transaction Aggregation

Groups a property's ledger by category and by calendar month and derives the
income statement totals used by the financial and tax reports.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from app.calculations.money import ZERO, percentage, total
from app.calculations.records import LedgerTransaction, TransactionType
from app.errors import ValidationError


@dataclass
class CategorySummary:
    """Total of one category within an income or expense group."""

    category_id: str
    category_name: str
    amount: Decimal
    percentage: Decimal


@dataclass
class MonthlySummary:
    """Income statement for one calendar month."""

    year: int
    month: int
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    net_operating_income: Decimal = ZERO
    cash_flow: Decimal = ZERO


@dataclass
class FinancialSummary:
    """Aggregated income statement over a date range."""

    total_income: Decimal
    total_expenses: Decimal
    net_operating_income: Decimal
    cash_flow: Decimal
    expense_ratio: Decimal
    income_by_category: List[CategorySummary] = field(default_factory=list)
    expenses_by_category: List[CategorySummary] = field(default_factory=list)
    monthly_summary: List[MonthlySummary] = field(default_factory=list)


@dataclass
class TaxCategorySummary:
    """Category total on a tax report."""

    category_id: str
    category_name: str
    amount: Decimal
    is_tax_deductible: bool


@dataclass
class TaxYearSummary:
    """Taxable income for a single tax year."""

    tax_year: int
    total_income: Decimal
    total_deductible_expenses: Decimal
    taxable_income: Decimal
    income_categories: List[TaxCategorySummary] = field(default_factory=list)
    expense_categories: List[TaxCategorySummary] = field(default_factory=list)


def filter_by_date_range(
    transactions: Sequence[LedgerTransaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[LedgerTransaction]:
    """Keep transactions dated within [start_date, end_date]; either bound may be open."""
    return [
        txn
        for txn in transactions
        if (start_date is None or txn.date >= start_date)
        and (end_date is None or txn.date <= end_date)
    ]


def filter_by_type(
    transactions: Sequence[LedgerTransaction], txn_type: TransactionType
) -> List[LedgerTransaction]:
    """Keep transactions of a single type."""
    return [txn for txn in transactions if txn.type == txn_type]


def group_by_category(
    transactions: Sequence[LedgerTransaction],
) -> "OrderedDict[str, List[LedgerTransaction]]":
    """Group transactions by category, in order of first appearance."""
    groups: "OrderedDict[str, List[LedgerTransaction]]" = OrderedDict()
    for txn in transactions:
        groups.setdefault(txn.category_id, []).append(txn)
    return groups


def summarize_by_category(
    transactions: Sequence[LedgerTransaction],
) -> List[CategorySummary]:
    """
    Total each category and express it as a share of the group total.

    Percentages sum to 100 when the group total is positive and are all 0
    when it is zero.
    """
    group_total = total(txn.amount for txn in transactions)

    summaries = []
    for category_id, members in group_by_category(transactions).items():
        amount = total(txn.amount for txn in members)
        summaries.append(
            CategorySummary(
                category_id=category_id,
                category_name=members[0].category_name,
                amount=amount,
                percentage=percentage(amount, group_total),
            )
        )
    return summaries


def _month_key(txn: LedgerTransaction) -> Tuple[int, int]:
    return txn.date.year, txn.date.month


def build_monthly_summary(
    year: int, month: int, transactions: Sequence[LedgerTransaction]
) -> MonthlySummary:
    """Build one month's income statement. Cash flow equals NOI at this level."""
    income = total(
        txn.amount for txn in transactions if txn.type == TransactionType.income
    )
    expenses = total(
        txn.amount for txn in transactions if txn.type == TransactionType.expense
    )
    noi = income - expenses
    return MonthlySummary(
        year=year,
        month=month,
        income=income,
        expenses=expenses,
        net_operating_income=noi,
        cash_flow=noi,
    )


def summarize_by_month(
    transactions: Sequence[LedgerTransaction],
) -> List[MonthlySummary]:
    """One row per calendar month that has at least one transaction, oldest first."""
    by_month: Dict[Tuple[int, int], List[LedgerTransaction]] = {}
    for txn in transactions:
        by_month.setdefault(_month_key(txn), []).append(txn)

    return [
        build_monthly_summary(year, month, by_month[(year, month)])
        for year, month in sorted(by_month)
    ]


def summarize_financials(
    transactions: Sequence[LedgerTransaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> FinancialSummary:
    """
    Aggregate a ledger into an income statement.

    Args:
        transactions: Ledger transactions for one property
        start_date: Optional inclusive lower date bound
        end_date: Optional inclusive upper date bound

    Returns:
        FinancialSummary with category and monthly breakdowns
    """
    in_range = filter_by_date_range(transactions, start_date, end_date)
    income_txns = filter_by_type(in_range, TransactionType.income)
    expense_txns = filter_by_type(in_range, TransactionType.expense)

    total_income = total(txn.amount for txn in income_txns)
    total_expenses = total(txn.amount for txn in expense_txns)
    noi = total_income - total_expenses

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_operating_income=noi,
        # No financing subtraction at this level
        cash_flow=noi,
        expense_ratio=percentage(total_expenses, total_income),
        income_by_category=summarize_by_category(income_txns),
        expenses_by_category=summarize_by_category(expense_txns),
        monthly_summary=summarize_by_month(in_range),
    )


def validate_tax_year(tax_year: int) -> None:
    """
    Reject years that cannot be expressed as calendar dates.

    Raises:
        ValidationError: If tax_year is outside MINYEAR-MAXYEAR
    """
    if not (MINYEAR <= tax_year <= MAXYEAR):
        raise ValidationError(
            f"Tax year {tax_year} must be between {MINYEAR} and {MAXYEAR}"
        )


def summarize_tax_year(
    transactions: Sequence[LedgerTransaction], tax_year: int
) -> TaxYearSummary:
    """
    Compute taxable income for a calendar year.

    Only expenses flagged tax deductible reduce taxable income. Expense
    category rows are marked deductible when every transaction in them is.
    """
    validate_tax_year(tax_year)
    in_year = filter_by_date_range(
        transactions, date(tax_year, 1, 1), date(tax_year, 12, 31)
    )
    income_txns = filter_by_type(in_year, TransactionType.income)
    expense_txns = filter_by_type(in_year, TransactionType.expense)

    total_income = total(txn.amount for txn in income_txns)
    total_deductible = total(
        txn.amount for txn in expense_txns if txn.is_tax_deductible
    )

    income_categories = [
        TaxCategorySummary(
            category_id=category_id,
            category_name=members[0].category_name,
            amount=total(txn.amount for txn in members),
            is_tax_deductible=False,
        )
        for category_id, members in group_by_category(income_txns).items()
    ]
    expense_categories = [
        TaxCategorySummary(
            category_id=category_id,
            category_name=members[0].category_name,
            amount=total(txn.amount for txn in members),
            is_tax_deductible=all(txn.is_tax_deductible for txn in members),
        )
        for category_id, members in group_by_category(expense_txns).items()
    ]

    return TaxYearSummary(
        tax_year=tax_year,
        total_income=total_income,
        total_deductible_expenses=total_deductible,
        taxable_income=total_income - total_deductible,
        income_categories=income_categories,
        expense_categories=expense_categories,
    )
