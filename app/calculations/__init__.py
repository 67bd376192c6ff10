"""
Financial & Tax Analytics Engine

Pure calculation modules that turn a property's ledger snapshot into reports.
Nothing here performs I/O; callers fetch the records and pass them in.
"""

from app.calculations import (
    aggregation,
    classification,
    comparison,
    money,
    performance,
    records,
    tax,
)

__all__ = [
    "aggregation",
    "classification",
    "comparison",
    "money",
    "performance",
    "records",
    "tax",
]
