"""
Application services module.
"""

from app.services.clock import Clock, FixedClock, get_clock
from app.services.reports import ReportService

__all__ = ["Clock", "FixedClock", "get_clock", "ReportService"]
