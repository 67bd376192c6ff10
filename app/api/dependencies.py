"""
FastAPI dependencies and error translation for report endpoints.
"""

import logging
from contextlib import contextmanager

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.errors import NotFoundError, ValidationError
from app.services.clock import Clock, get_clock
from app.services.reports import ReportService

logger = logging.getLogger(__name__)


def get_report_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ReportService:
    """Report service bound to the request's session and clock."""
    return ReportService(db, clock)


@contextmanager
def domain_errors():
    """
    Translate domain errors into HTTP errors.

    NotFoundError -> 404, ValidationError -> 400. Anything else propagates.
    """
    try:
        yield
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        logger.info(f"Rejected report request: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
