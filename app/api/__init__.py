"""
API routes for property financial and tax reports.
"""

from fastapi import APIRouter

from app.api import financial, tax

router = APIRouter()

# Include sub-routers
router.include_router(financial.router, prefix="/financial", tags=["financial"])
router.include_router(tax.router, prefix="/tax-reports", tags=["tax"])
