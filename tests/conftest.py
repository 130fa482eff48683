"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from smart_ledger.api.main import create_app
from smart_ledger.infrastructure.database.models import Base
from smart_ledger.infrastructure.database.repositories import SqlLedgerRepository
from smart_ledger.infrastructure.database.session import get_db
from smart_ledger.domain.models import (
    CreditCard,
    InitialPosition,
    PaymentMethod,
    Transaction,
    TransactionKind,
)
from smart_ledger.services.ledger_service import LedgerService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER = "owner_test"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app, headers={"X-Owner-Id": OWNER})


@pytest.fixture
def service(db: Session) -> LedgerService:
    """LedgerService over the test database"""
    return LedgerService(SqlLedgerRepository(db))


@pytest.fixture
def visa() -> CreditCard:
    return CreditCard(id="card_visa", name="Visa", closing_day=25, payment_day=5)


@pytest.fixture
def sample_transactions(visa: CreditCard) -> list[Transaction]:
    """A month of salary, cash spending and card spending"""
    return [
        Transaction(
            id="salary",
            amount=Decimal("5000"),
            kind=TransactionKind.INCOME,
            category="Salary",
            date=date(2024, 3, 1),
        ),
        Transaction(
            id="groceries",
            amount=Decimal("3000"),
            kind=TransactionKind.EXPENSE,
            category="Food",
            date=date(2024, 3, 4),
        ),
        Transaction(
            id="flight",
            amount=Decimal("500"),
            kind=TransactionKind.EXPENSE,
            category="Transport",
            date=date(2024, 3, 10),
            payment_method=PaymentMethod.CREDIT_CARD,
            credit_card_id=visa.id,
        ),
    ]


@pytest.fixture
def opening_position() -> InitialPosition:
    return InitialPosition(starting_cash_balance=Decimal("10000"))
