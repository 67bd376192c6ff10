"""
Cash Flow Classification

Buckets a month of ledger activity into cash flow statement lines and derives
NOI, financing costs, cash flow and the headline return ratios.

Categories carry an explicit cash flow role resolved once when they are
created. Names are matched only for categories that have no role yet, using
a fixed priority order: the first keyword bucket that matches wins, so
"Property Tax Insurance" is a Tax line, never both Tax and Insurance.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from app.calculations.aggregation import (
    MonthlySummary,
    build_monthly_summary,
    filter_by_date_range,
)
from app.calculations.money import ZERO, percentage, total
from app.calculations.records import (
    INCOME_ROLES,
    CashFlowRole,
    CategoryType,
    LedgerTransaction,
    PropertySnapshot,
    TransactionType,
)

MONTHS_PER_YEAR = 12
TRAILING_MONTHS = 12

# Word-start match: "Rental Income" is rent, "Current Year Adjustment" is not
RENT_PATTERN = re.compile(r"\brent", re.IGNORECASE)

# Priority order matters: first match wins.
EXPENSE_ROLE_KEYWORDS: Tuple[Tuple[CashFlowRole, Tuple[str, ...]], ...] = (
    (CashFlowRole.vacancy, ("vacancy",)),
    (CashFlowRole.management, ("management",)),
    (CashFlowRole.tax, ("tax",)),
    (CashFlowRole.insurance, ("insurance",)),
    (CashFlowRole.maintenance, ("maintenance",)),
    (CashFlowRole.utilities, ("utilit",)),
    (CashFlowRole.mortgage, ("mortgage",)),
    (CashFlowRole.other_financing, ("interest", "loan", "financing")),
)

OPERATING_ROLES = (
    CashFlowRole.vacancy,
    CashFlowRole.management,
    CashFlowRole.tax,
    CashFlowRole.insurance,
    CashFlowRole.maintenance,
    CashFlowRole.utilities,
    CashFlowRole.other,
)
FINANCING_ROLES = (CashFlowRole.mortgage, CashFlowRole.other_financing)


def classify_income_name(name: str) -> CashFlowRole:
    """Rental income if a word in the name starts with "rent", other income otherwise."""
    if RENT_PATTERN.search(name or ""):
        return CashFlowRole.rental_income
    return CashFlowRole.other_income


def classify_expense_name(name: str) -> CashFlowRole:
    """Match an expense category name against the keyword buckets in priority order."""
    lowered = (name or "").lower()
    for role, keywords in EXPENSE_ROLE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return role
    return CashFlowRole.other


def classify_category_name(name: str, category_type: CategoryType) -> CashFlowRole:
    """Resolve the cash flow role for a category from its name and type."""
    if category_type == CategoryType.income:
        return classify_income_name(name)
    return classify_expense_name(name)


def resolve_role(txn: LedgerTransaction) -> Optional[CashFlowRole]:
    """
    Cash flow line for a transaction.

    Uses the category's stored role when it fits the transaction type and
    falls back to name matching otherwise. Investment and transfer entries
    belong to no line.
    """
    role = txn.cash_flow_role
    if txn.type == TransactionType.income:
        if role in INCOME_ROLES:
            return role
        return classify_income_name(txn.category_name)
    if txn.type == TransactionType.expense:
        if role is not None and role not in INCOME_ROLES:
            return role
        return classify_expense_name(txn.category_name)
    return None


@dataclass
class CashFlowStatement:
    """Monthly cash flow statement with annualized ratios."""

    monthly_rental_income: Decimal = ZERO
    other_monthly_income: Decimal = ZERO
    total_monthly_income: Decimal = ZERO
    vacancy_loss: Decimal = ZERO
    property_management: Decimal = ZERO
    property_tax: Decimal = ZERO
    insurance: Decimal = ZERO
    maintenance: Decimal = ZERO
    utilities: Decimal = ZERO
    other_expenses: Decimal = ZERO
    total_operating_expenses: Decimal = ZERO
    net_operating_income: Decimal = ZERO
    mortgage_payment: Decimal = ZERO
    other_financing_costs: Decimal = ZERO
    total_financing_costs: Decimal = ZERO
    monthly_cash_flow: Decimal = ZERO
    annual_cash_flow: Decimal = ZERO
    cash_on_cash_return: Decimal = ZERO
    cap_rate: Decimal = ZERO
    monthly_cash_flows: List[MonthlySummary] = field(default_factory=list)


def month_bounds(report_date: date) -> Tuple[date, date]:
    """First and last day of the month containing report_date."""
    start = report_date.replace(day=1)
    return start, start + relativedelta(day=31)


def trailing_window(report_date: date, months: int = TRAILING_MONTHS) -> Tuple[date, date]:
    """Date range covering the report month and the months - 1 before it."""
    month_start, month_end = month_bounds(report_date)
    return month_start - relativedelta(months=months - 1), month_end


def bucket_totals(
    transactions: Sequence[LedgerTransaction],
) -> Dict[CashFlowRole, Decimal]:
    """Sum transaction amounts per cash flow role. Every role is present."""
    buckets = {role: ZERO for role in CashFlowRole}
    for txn in transactions:
        role = resolve_role(txn)
        if role is not None:
            buckets[role] += txn.amount
    return buckets


def trailing_monthly_series(
    transactions: Sequence[LedgerTransaction],
    report_date: date,
    months: int = TRAILING_MONTHS,
) -> List[MonthlySummary]:
    """
    Month-by-month income statement for the trailing window, oldest first.

    Months without activity appear as zero rows so charts get a continuous axis.
    """
    window_start, window_end = trailing_window(report_date, months)
    in_window = filter_by_date_range(transactions, window_start, window_end)

    by_month: Dict[Tuple[int, int], List[LedgerTransaction]] = {}
    for txn in in_window:
        by_month.setdefault((txn.date.year, txn.date.month), []).append(txn)

    series = []
    for offset in range(months):
        month_start = window_start + relativedelta(months=offset)
        key = (month_start.year, month_start.month)
        series.append(build_monthly_summary(key[0], key[1], by_month.get(key, [])))
    return series


def build_cash_flow_statement(
    transactions: Sequence[LedgerTransaction],
    prop: PropertySnapshot,
    report_date: date,
) -> CashFlowStatement:
    """
    Build the cash flow statement for the month containing report_date.

    Args:
        transactions: Ledger transactions covering at least the trailing window
        prop: Property snapshot supplying value and acquisition price
        report_date: Any date in the report month

    Returns:
        CashFlowStatement including the trailing monthly series
    """
    month_start, month_end = month_bounds(report_date)
    month_txns = filter_by_date_range(transactions, month_start, month_end)
    buckets = bucket_totals(month_txns)

    rental_income = buckets[CashFlowRole.rental_income]
    other_income = buckets[CashFlowRole.other_income]
    total_income = rental_income + other_income

    operating_expenses = total(buckets[role] for role in OPERATING_ROLES)
    noi = total_income - operating_expenses
    financing_costs = total(buckets[role] for role in FINANCING_ROLES)
    monthly_cash_flow = noi - financing_costs
    annual_cash_flow = monthly_cash_flow * MONTHS_PER_YEAR

    return CashFlowStatement(
        monthly_rental_income=rental_income,
        other_monthly_income=other_income,
        total_monthly_income=total_income,
        vacancy_loss=buckets[CashFlowRole.vacancy],
        property_management=buckets[CashFlowRole.management],
        property_tax=buckets[CashFlowRole.tax],
        insurance=buckets[CashFlowRole.insurance],
        maintenance=buckets[CashFlowRole.maintenance],
        utilities=buckets[CashFlowRole.utilities],
        other_expenses=buckets[CashFlowRole.other],
        total_operating_expenses=operating_expenses,
        net_operating_income=noi,
        mortgage_payment=buckets[CashFlowRole.mortgage],
        other_financing_costs=buckets[CashFlowRole.other_financing],
        total_financing_costs=financing_costs,
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=annual_cash_flow,
        cash_on_cash_return=percentage(annual_cash_flow, prop.acquisition_price),
        cap_rate=percentage(noi * MONTHS_PER_YEAR, prop.current_value),
        monthly_cash_flows=trailing_monthly_series(transactions, report_date),
    )
