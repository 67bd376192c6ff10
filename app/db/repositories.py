"""
Read-only access to the property registry, category directory and ledger.

Each repository converts ORM rows into the immutable records consumed by
the calculation modules.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.calculations.money import ZERO, to_decimal
from app.calculations.records import (
    CategoryRecord,
    LedgerTransaction,
    PropertySnapshot,
)
from app.db.models import Category, Property, Transaction, Unit
from app.errors import NotFoundError, property_not_found


def _money(value) -> Decimal:
    return to_decimal(value) if value is not None else ZERO


class PropertyRegistry:
    """Property acquisition data, valuation and unit occupancy."""

    def __init__(self, db: Session):
        self.db = db

    def _to_snapshot(self, prop: Property) -> PropertySnapshot:
        occupancy = (
            self.db.query(Unit.is_occupied)
            .filter(Unit.property_id == prop.id, Unit.is_deleted == False)
            .all()
        )
        return PropertySnapshot(
            id=prop.id,
            name=prop.name,
            acquisition_date=prop.acquisition_date,
            acquisition_price=_money(prop.acquisition_price),
            current_value=_money(prop.current_value),
            total_units=len(occupancy),
            occupied_units=sum(1 for (is_occupied,) in occupancy if is_occupied),
        )

    def get_property(self, property_id: str) -> PropertySnapshot:
        """
        Get a property snapshot.

        Raises:
            NotFoundError: If the property does not exist or is deleted
        """
        prop = (
            self.db.query(Property)
            .filter(Property.id == property_id, Property.is_deleted == False)
            .first()
        )
        if not prop:
            raise NotFoundError(property_not_found(property_id))
        return self._to_snapshot(prop)

    def list_owner_properties(self, owner_id: str) -> List[PropertySnapshot]:
        """Snapshots of an owner's properties, ordered by name then ID."""
        properties = (
            self.db.query(Property)
            .filter(Property.owner_id == owner_id, Property.is_deleted == False)
            .order_by(Property.name, Property.id)
            .all()
        )
        return [self._to_snapshot(p) for p in properties]


class CategoryDirectory:
    """Category names, types and cash flow roles."""

    def __init__(self, db: Session):
        self.db = db

    def get_categories(self, category_ids: Iterable[str]) -> Dict[str, CategoryRecord]:
        """Look up categories by ID. Unknown IDs are absent from the result."""
        ids = set(category_ids)
        if not ids:
            return {}

        categories = self.db.query(Category).filter(Category.id.in_(ids)).all()
        return {
            c.id: CategoryRecord(
                id=c.id,
                name=c.name,
                type=c.type,
                is_tax_deductible=bool(c.is_tax_deductible),
                cash_flow_role=c.cash_flow_role,
            )
            for c in categories
        }


class LedgerStore:
    """Property ledger transactions joined with their categories."""

    def __init__(self, db: Session, categories: Optional[CategoryDirectory] = None):
        self.db = db
        self.categories = categories or CategoryDirectory(db)

    def list_transactions(
        self,
        property_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        unit_id: Optional[str] = None,
    ) -> List[LedgerTransaction]:
        """
        List a property's transactions, oldest first.

        Args:
            property_id: Property ID
            start_date: Optional inclusive lower date bound
            end_date: Optional inclusive upper date bound
            unit_id: Optional unit to restrict to

        Returns:
            LedgerTransaction records
        """
        query = self.db.query(Transaction).filter(
            Transaction.property_id == property_id,
            Transaction.is_deleted == False,
        )

        if start_date:
            query = query.filter(Transaction.date >= start_date)
        if end_date:
            query = query.filter(Transaction.date <= end_date)
        if unit_id:
            query = query.filter(Transaction.unit_id == unit_id)

        rows = query.order_by(Transaction.date, Transaction.id).all()
        categories = self.categories.get_categories(row.category_id for row in rows)

        records = []
        for row in rows:
            category = categories.get(row.category_id)
            records.append(
                LedgerTransaction(
                    id=row.id,
                    property_id=row.property_id,
                    unit_id=row.unit_id,
                    category_id=row.category_id,
                    category_name=category.name if category else "",
                    cash_flow_role=category.cash_flow_role if category else None,
                    type=row.type,
                    date=row.date,
                    amount=_money(row.amount),
                    is_tax_deductible=bool(row.is_tax_deductible),
                    is_paid=bool(row.is_paid),
                )
            )
        return records
