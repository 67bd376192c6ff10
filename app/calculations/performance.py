"""
Investment Performance

Lifetime return metrics for a property: appreciation, cap rate, cash-on-cash
return and compound annualized returns.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from app.calculations.money import (
    ZERO,
    HUNDRED,
    annualize_growth,
    percentage,
    total,
)
from app.calculations.records import (
    LedgerTransaction,
    PropertySnapshot,
    TransactionType,
)

DAYS_PER_YEAR = Decimal("365.25")


@dataclass
class PropertyPerformance:
    """Lifetime performance snapshot for one property."""

    property_id: str
    property_name: str
    purchase_price: Decimal
    current_value: Decimal
    appreciation: Decimal
    appreciation_percentage: Decimal
    annualized_appreciation: Decimal
    total_cash_invested: Decimal
    net_operating_income: Decimal
    annual_cash_flow: Decimal
    cash_on_cash_return: Decimal
    cap_rate: Decimal
    total_return: Decimal
    total_return_percentage: Decimal
    annualized_return: Decimal
    expense_ratio: Decimal
    occupancy_rate: Decimal


def calculate_years_owned(acquisition_date: Optional[date], as_of: date) -> Decimal:
    """Fractional years between acquisition and as_of (365.25-day years)."""
    if acquisition_date is None:
        return ZERO
    return Decimal((as_of - acquisition_date).days) / DAYS_PER_YEAR


def calculate_occupancy_rate(total_units: int, occupied_units: int) -> Decimal:
    """Occupied share of units as percentage; 100 for a property without units."""
    if total_units <= 0:
        return HUNDRED
    return Decimal(occupied_units) / Decimal(total_units) * HUNDRED


def per_year(amount: Decimal, years: Decimal) -> Decimal:
    """Average an amount over the holding period; 0 when no time has passed."""
    if years <= 0:
        return ZERO
    return amount / years


def calculate_performance(
    prop: PropertySnapshot,
    transactions: Sequence[LedgerTransaction],
    as_of: date,
) -> PropertyPerformance:
    """
    Calculate lifetime performance metrics.

    Args:
        prop: Property acquisition, valuation and occupancy data
        transactions: All-time ledger for the property
        as_of: Valuation date (normally today)

    Returns:
        PropertyPerformance with all ratios expressed as percentages
    """
    years_owned = calculate_years_owned(prop.acquisition_date, as_of)

    appreciation = prop.current_value - prop.acquisition_price
    appreciation_pct = percentage(appreciation, prop.acquisition_price)

    total_income = total(
        txn.amount for txn in transactions if txn.type == TransactionType.income
    )
    total_expenses = total(
        txn.amount for txn in transactions if txn.type == TransactionType.expense
    )
    total_investment = total(
        txn.amount for txn in transactions if txn.type == TransactionType.investment
    )

    total_cash_invested = prop.acquisition_price + total_investment
    noi = total_income - total_expenses

    annual_cash_flow = per_year(noi, years_owned)
    total_return = appreciation + noi
    total_return_pct = percentage(total_return, total_cash_invested)

    return PropertyPerformance(
        property_id=prop.id,
        property_name=prop.name,
        purchase_price=prop.acquisition_price,
        current_value=prop.current_value,
        appreciation=appreciation,
        appreciation_percentage=appreciation_pct,
        annualized_appreciation=annualize_growth(appreciation_pct, years_owned),
        total_cash_invested=total_cash_invested,
        net_operating_income=noi,
        annual_cash_flow=annual_cash_flow,
        cash_on_cash_return=percentage(annual_cash_flow, total_cash_invested),
        cap_rate=percentage(per_year(noi, years_owned), prop.current_value),
        total_return=total_return,
        total_return_percentage=total_return_pct,
        annualized_return=annualize_growth(total_return_pct, years_owned),
        expense_ratio=percentage(total_expenses, total_income),
        occupancy_rate=calculate_occupancy_rate(prop.total_units, prop.occupied_units),
    )
