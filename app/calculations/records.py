"""
Ledger Records

In-memory snapshots of ledger, category and property data. The calculation
modules only ever see these records, never ORM rows, so every report is a
pure function of the snapshot fetched for it.
"""

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


class TransactionType(str, enum.Enum):
    """Ledger transaction type."""

    income = "Income"
    expense = "Expense"
    investment = "Investment"
    transfer = "Transfer"


class CategoryType(str, enum.Enum):
    """Category type."""

    income = "Income"
    expense = "Expense"


class CashFlowRole(str, enum.Enum):
    """Cash flow statement line a category feeds into."""

    rental_income = "RentalIncome"
    other_income = "OtherIncome"
    vacancy = "Vacancy"
    management = "Management"
    tax = "Tax"
    insurance = "Insurance"
    maintenance = "Maintenance"
    utilities = "Utilities"
    mortgage = "Mortgage"
    other_financing = "OtherFinancing"
    other = "Other"


INCOME_ROLES = frozenset({CashFlowRole.rental_income, CashFlowRole.other_income})


@dataclass(frozen=True)
class CategoryRecord:
    """Category reference data."""

    id: str
    name: str
    type: CategoryType
    is_tax_deductible: bool = False
    cash_flow_role: Optional[CashFlowRole] = None


@dataclass(frozen=True)
class LedgerTransaction:
    """A ledger transaction joined with its category."""

    id: str
    property_id: str
    category_id: str
    category_name: str
    type: TransactionType
    date: date
    amount: Decimal
    unit_id: Optional[str] = None
    is_tax_deductible: bool = False
    is_paid: bool = False
    cash_flow_role: Optional[CashFlowRole] = None


@dataclass(frozen=True)
class PropertySnapshot:
    """Property acquisition, valuation and occupancy data."""

    id: str
    name: str
    acquisition_date: Optional[date]
    acquisition_price: Decimal
    current_value: Decimal
    total_units: int = 0
    occupied_units: int = 0
