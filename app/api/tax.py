"""
Tax report API endpoints.

Tax-year reports, multi-year comparisons, flat-rate estimates and a
progressive bracket calculator.
"""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from app.api.dependencies import domain_errors, get_report_service
from app.api.schemas import (
    MultiYearTaxComparisonResponse,
    TaxBracketCalculationResponse,
    TaxEstimationResponse,
    TaxReportResponse,
)
from app.calculations.tax import TaxBracket
from app.services.reports import ReportService

router = APIRouter()


class TaxEstimationInput(BaseModel):
    """Input for a flat-rate tax estimate."""

    property_id: str
    tax_year: int
    tax_rate: Decimal = Field(ge=0, le=100)
    additional_income: Decimal = Decimal("0")
    additional_deductions: Decimal = Decimal("0")


class TaxBracketInput(BaseModel):
    """One bracket of a progressive table; rate is a percentage."""

    lower_bound: Decimal
    upper_bound: Decimal
    rate: Decimal


class TaxBracketCalculationInput(BaseModel):
    """Input for a progressive bracket calculation."""

    property_id: str
    tax_year: int
    brackets: List[TaxBracketInput] = []
    additional_income: Decimal = Decimal("0")
    additional_deductions: Decimal = Decimal("0")


@router.get(
    "/property/{property_id}/comparison",
    response_model=MultiYearTaxComparisonResponse,
)
async def get_multi_year_tax_comparison(
    property_id: str,
    start_year: int = Query(...),
    end_year: int = Query(...),
    service: ReportService = Depends(get_report_service),
):
    """Compare tax figures across up to five years."""
    with domain_errors():
        comparison = service.multi_year_tax_comparison(property_id, start_year, end_year)
    return MultiYearTaxComparisonResponse.model_validate(comparison)


@router.get("/property/{property_id}/{tax_year}", response_model=TaxReportResponse)
async def get_property_tax_report(
    property_id: str,
    tax_year: int,
    service: ReportService = Depends(get_report_service),
):
    """Tax report for a property and year."""
    with domain_errors():
        report = service.tax_report(property_id, tax_year)
    return TaxReportResponse.model_validate(report)


@router.get(
    "/all-properties/{owner_id}/{tax_year}", response_model=List[TaxReportResponse]
)
async def get_all_properties_tax_report(
    owner_id: str,
    tax_year: int,
    service: ReportService = Depends(get_report_service),
):
    """Tax report for every property of an owner."""
    with domain_errors():
        reports = service.all_properties_tax_report(owner_id, tax_year)
    return [TaxReportResponse.model_validate(r) for r in reports]


@router.post("/estimate", response_model=TaxEstimationResponse)
async def estimate_taxes(
    inputs: TaxEstimationInput,
    service: ReportService = Depends(get_report_service),
):
    """Estimate tax at a flat rate with optional extra income and deductions."""
    with domain_errors():
        estimation = service.estimate_taxes(
            inputs.property_id,
            inputs.tax_year,
            inputs.tax_rate,
            inputs.additional_income,
            inputs.additional_deductions,
        )
    return TaxEstimationResponse.model_validate(estimation)


@router.post("/calculate-with-brackets", response_model=TaxBracketCalculationResponse)
async def calculate_with_brackets(
    inputs: TaxBracketCalculationInput,
    service: ReportService = Depends(get_report_service),
):
    """Calculate tax over a user-supplied progressive bracket table."""
    brackets = [
        TaxBracket(lower_bound=b.lower_bound, upper_bound=b.upper_bound, rate=b.rate)
        for b in inputs.brackets
    ]
    with domain_errors():
        calculation = service.calculate_with_brackets(
            inputs.property_id,
            inputs.tax_year,
            brackets,
            inputs.additional_income,
            inputs.additional_deductions,
        )
    return TaxBracketCalculationResponse.model_validate(calculation)
