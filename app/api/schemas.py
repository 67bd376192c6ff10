"""
Response schemas for report endpoints.

Reports are computed in Decimal; every Decimal is rounded to cents
(banker's rounding) when it is serialized here and nowhere earlier.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.calculations.money import round_currency


class ReportModel(BaseModel):
    """Base schema that reads report records and rounds Decimals to cents."""

    @field_validator("*", mode="before")
    @classmethod
    def round_decimals(cls, value):
        if isinstance(value, Decimal):
            return float(round_currency(value))
        return value

    class Config:
        from_attributes = True


class CategorySummaryResponse(ReportModel):
    category_id: str
    category_name: str
    amount: float
    percentage: float


class MonthlySummaryResponse(ReportModel):
    year: int
    month: int
    income: float
    expenses: float
    net_operating_income: float
    cash_flow: float


class FinancialReportResponse(ReportModel):
    """Income statement for a property over a date range."""

    property_id: str
    property_name: str
    start_date: Optional[date]
    end_date: Optional[date]
    total_income: float
    total_expenses: float
    net_operating_income: float
    cash_flow: float
    expense_ratio: float
    income_by_category: List[CategorySummaryResponse]
    expenses_by_category: List[CategorySummaryResponse]
    monthly_summary: List[MonthlySummaryResponse]


class CashFlowReportResponse(ReportModel):
    """Monthly cash flow statement."""

    property_id: str
    property_name: str
    year: int
    month: int

    # Income
    monthly_rental_income: float
    other_monthly_income: float
    total_monthly_income: float

    # Operating expenses
    vacancy_loss: float
    property_management: float
    property_tax: float
    insurance: float
    maintenance: float
    utilities: float
    other_expenses: float
    total_operating_expenses: float
    net_operating_income: float

    # Financing
    mortgage_payment: float
    other_financing_costs: float
    total_financing_costs: float

    # Cash flow
    monthly_cash_flow: float
    annual_cash_flow: float
    cash_on_cash_return: float
    cap_rate: float
    monthly_cash_flows: List[MonthlySummaryResponse]


class PropertyPerformanceResponse(ReportModel):
    """Lifetime investment performance."""

    property_id: str
    property_name: str
    purchase_price: float
    current_value: float
    appreciation: float
    appreciation_percentage: float
    annualized_appreciation: float
    total_cash_invested: float
    net_operating_income: float
    annual_cash_flow: float
    cash_on_cash_return: float
    cap_rate: float
    total_return: float
    total_return_percentage: float
    annualized_return: float
    expense_ratio: float
    occupancy_rate: float


class TaxCategoryResponse(ReportModel):
    category_id: str
    category_name: str
    amount: float
    is_tax_deductible: bool


class TaxReportResponse(ReportModel):
    """Taxable income for one tax year."""

    property_id: str
    property_name: str
    tax_year: int
    total_income: float
    total_deductible_expenses: float
    taxable_income: float
    income_categories: List[TaxCategoryResponse]
    expense_categories: List[TaxCategoryResponse]


class YearlyTaxDataResponse(ReportModel):
    year: int
    total_income: float
    total_deductible_expenses: float
    taxable_income: float
    year_over_year_income_change: float
    year_over_year_expense_change: float


class MultiYearTaxComparisonResponse(ReportModel):
    property_id: str
    property_name: str
    yearly_data: List[YearlyTaxDataResponse]


class TaxEstimationResponse(ReportModel):
    """Flat-rate tax estimate."""

    property_id: str
    property_name: str
    tax_year: int
    current_taxable_income: float
    estimated_taxable_income: float
    tax_rate: float
    current_tax_liability: float
    estimated_tax_liability: float
    additional_income: float
    additional_deductions: float
    projected_savings: float


class TaxBracketBreakdownResponse(ReportModel):
    lower_bound: float
    upper_bound: float
    rate: float
    income_in_bracket: float
    tax_for_bracket: float


class TaxBracketCalculationResponse(ReportModel):
    """Progressive bracket tax calculation."""

    property_id: str
    property_name: str
    tax_year: int
    taxable_income: float
    estimated_tax_liability: float
    effective_tax_rate: float
    bracket_breakdown: List[TaxBracketBreakdownResponse]
