"""
SQLAlchemy ORM models for the property ledger.

The analytics engine only reads these tables; they are owned by the
property registry and ledger services.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Numeric,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    event,
    inspect,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid

from app.calculations.classification import classify_category_name
from app.calculations.records import CashFlowRole, CategoryType, TransactionType

Base = declarative_base()

MONEY = Numeric(14, 2)


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    created_by = Column(String(255), nullable=True)
    updated_by = Column(String(255), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)


class Property(AuditMixin, Base):
    """Property model representing a real estate asset."""

    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)

    # Owner (portfolio grouping)
    owner_id = Column(String, nullable=True, index=True)

    # Acquisition and valuation
    acquisition_date = Column(Date)
    acquisition_price = Column(MONEY, default=0, nullable=False)
    current_value = Column(MONEY, default=0, nullable=False)

    # Relationships
    units = relationship(
        "Unit",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )
    transactions = relationship(
        "Transaction",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )


class Unit(AuditMixin, Base):
    """Rentable unit within a property."""

    __tablename__ = "units"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)
    unit_number = Column(String(50), nullable=False)
    is_occupied = Column(Boolean, default=False, nullable=False)

    # Relationships
    property = relationship("Property", back_populates="units")


class Category(AuditMixin, Base):
    """Transaction category reference data."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    type = Column(SQLEnum(CategoryType), nullable=False)
    is_tax_deductible = Column(Boolean, default=False, nullable=False)

    # Cash flow statement line, resolved from the name when not given explicitly
    cash_flow_role = Column(SQLEnum(CashFlowRole), nullable=True)

    # Relationships
    transactions = relationship("Transaction", back_populates="category", lazy="dynamic")


class Transaction(AuditMixin, Base):
    """Ledger transaction."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)
    unit_id = Column(String, ForeignKey("units.id"), nullable=True)
    category_id = Column(String, ForeignKey("categories.id"), nullable=False)

    type = Column(SQLEnum(TransactionType), nullable=False)
    date = Column(Date, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)

    is_tax_deductible = Column(Boolean, default=False, nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)

    # Relationships
    property = relationship("Property", back_populates="transactions")
    unit = relationship("Unit")
    category = relationship("Category", back_populates="transactions")


@event.listens_for(Category, "before_insert")
@event.listens_for(Category, "before_update")
def resolve_cash_flow_role(mapper, connection, target):
    """Assign the cash flow role on creation or rename unless one was set explicitly."""
    state = inspect(target)
    renamed = state.attrs.name.history.has_changes()
    role_set = state.attrs.cash_flow_role.history.has_changes()
    if target.cash_flow_role is None or (renamed and not role_set):
        target.cash_flow_role = classify_category_name(target.name, target.type)
