"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from datetime import date
from decimal import Decimal

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import get_db
from app.db.models import Base, Category, Property, Transaction, Unit
from app.calculations.records import (
    CategoryType,
    TransactionType,
)
from app.services.clock import FixedClock, get_clock

TODAY = date(2026, 6, 30)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks integration tests")


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_clock():
    """Pin report dates for testing."""
    return FixedClock(TODAY)


# Override the dependencies globally for all tests
app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_clock] = override_get_clock


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def categories(db_session):
    """Standard income and expense categories."""
    specs = [
        ("Rent", CategoryType.income, False),
        ("Other Income", CategoryType.income, False),
        ("Mortgage", CategoryType.expense, True),
        ("Property Tax", CategoryType.expense, True),
        ("Insurance", CategoryType.expense, True),
        ("Maintenance", CategoryType.expense, True),
        ("Utilities", CategoryType.expense, True),
        ("Property Management", CategoryType.expense, True),
        ("Vacancy", CategoryType.expense, True),
        ("Landscaping", CategoryType.expense, False),
    ]
    created = {}
    for name, category_type, deductible in specs:
        category = Category(name=name, type=category_type, is_tax_deductible=deductible)
        db_session.add(category)
        created[name] = category
    db_session.commit()
    for category in created.values():
        db_session.refresh(category)
    return created


@pytest.fixture
def test_property(db_session):
    """A duplex bought for 200,000 now worth 250,000; one of two units occupied."""
    prop = Property(
        name="Maple Street Duplex",
        owner_id="owner-1",
        acquisition_date=date(2021, 6, 30),
        acquisition_price=Decimal("200000"),
        current_value=Decimal("250000"),
    )
    db_session.add(prop)
    db_session.flush()
    db_session.add_all(
        [
            Unit(property_id=prop.id, unit_number="A", is_occupied=True),
            Unit(property_id=prop.id, unit_number="B", is_occupied=False),
        ]
    )
    db_session.commit()
    db_session.refresh(prop)
    return prop


@pytest.fixture
def add_transaction(db_session):
    """Persist a ledger transaction for a property."""

    def _add(prop, category, txn_type, amount, on, **kwargs):
        txn = Transaction(
            property_id=prop.id,
            category_id=category.id if category is not None else None,
            type=txn_type,
            date=on,
            amount=Decimal(str(amount)),
            **kwargs,
        )
        db_session.add(txn)
        db_session.commit()
        return txn

    return _add


@pytest.fixture
def ledger(test_property, categories, add_transaction):
    """June 2026 activity plus prior-year history for the test property."""
    entries = [
        # June 2026
        ("Rent", TransactionType.income, 2400, date(2026, 6, 1), False),
        ("Other Income", TransactionType.income, 100, date(2026, 6, 5), False),
        ("Property Tax", TransactionType.expense, 300, date(2026, 6, 10), True),
        ("Insurance", TransactionType.expense, 100, date(2026, 6, 10), True),
        ("Maintenance", TransactionType.expense, 200, date(2026, 6, 12), True),
        ("Mortgage", TransactionType.expense, 900, date(2026, 6, 15), True),
        ("Landscaping", TransactionType.expense, 50, date(2026, 6, 20), False),
        # May 2026
        ("Rent", TransactionType.income, 2400, date(2026, 5, 1), False),
        ("Utilities", TransactionType.expense, 150, date(2026, 5, 8), True),
        # 2025
        ("Rent", TransactionType.income, 20000, date(2025, 3, 1), False),
        ("Maintenance", TransactionType.expense, 4000, date(2025, 8, 1), True),
    ]
    for name, txn_type, amount, on, deductible in entries:
        add_transaction(
            test_property,
            categories[name],
            txn_type,
            amount,
            on,
            is_tax_deductible=deductible,
        )
    # Capital improvement
    add_transaction(
        test_property,
        categories["Maintenance"],
        TransactionType.investment,
        10000,
        date(2024, 1, 15),
    )
    return test_property
