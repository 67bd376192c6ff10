"""
Financial report API endpoints.

Income statements, cash flow statements and investment performance for
properties and owner portfolios.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import domain_errors, get_report_service
from app.api.schemas import (
    CashFlowReportResponse,
    FinancialReportResponse,
    PropertyPerformanceResponse,
)
from app.services.reports import ReportService

router = APIRouter()


@router.get("/reports/property/{property_id}", response_model=FinancialReportResponse)
async def get_financial_report(
    property_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    service: ReportService = Depends(get_report_service),
):
    """Income statement for a property. Dates default to the current year."""
    with domain_errors():
        report = service.financial_report(property_id, start_date, end_date)
    return FinancialReportResponse.model_validate(report)


@router.get("/reports/general/{owner_id}", response_model=List[FinancialReportResponse])
async def get_general_financial_report(
    owner_id: str,
    service: ReportService = Depends(get_report_service),
):
    """Trailing-year income statement for every property of an owner."""
    reports = service.general_financial_report(owner_id)
    return [FinancialReportResponse.model_validate(r) for r in reports]


@router.get("/cashflow/property/{property_id}", response_model=CashFlowReportResponse)
async def get_cash_flow_report(
    property_id: str,
    report_date: Optional[date] = Query(None, alias="date"),
    service: ReportService = Depends(get_report_service),
):
    """Cash flow statement for the month containing `date` (default: this month)."""
    with domain_errors():
        report = service.cash_flow_report(property_id, report_date)
    return CashFlowReportResponse.model_validate(report)


@router.get(
    "/performance/property/{property_id}", response_model=PropertyPerformanceResponse
)
async def get_property_performance(
    property_id: str,
    service: ReportService = Depends(get_report_service),
):
    """Lifetime performance metrics for a property."""
    with domain_errors():
        performance = service.property_performance(property_id)
    return PropertyPerformanceResponse.model_validate(performance)


@router.get(
    "/performance/portfolio/{owner_id}",
    response_model=List[PropertyPerformanceResponse],
)
async def get_portfolio_performance(
    owner_id: str,
    service: ReportService = Depends(get_report_service),
):
    """Performance metrics for every property of an owner."""
    performances = service.portfolio_performance(owner_id)
    return [PropertyPerformanceResponse.model_validate(p) for p in performances]
