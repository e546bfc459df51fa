"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from wallet_gateway.api.main import create_app
from wallet_gateway.infrastructure.database.models import Base
from wallet_gateway.infrastructure.database.session import get_db
from wallet_gateway.domain.models import Account, AccountState, RegistryEntry
from helpers import make_account


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    return TestClient(app)


@pytest.fixture
def sample_accounts() -> List[Account]:
    """Registry snapshot in the order the registry returns it"""
    return [
        make_account("200000.00", account_id="acc_savings", name="Main savings"),
        make_account("40000.00", account_id="acc_checking", name="Daily checking"),
        make_account("75000.00", account_id="acc_payroll", name="Payroll"),
        make_account("40000.00", AccountState.INACTIVE, account_id="acc_old", name="Old joint account"),
        make_account("0.00", account_id="acc_empty", name="Digital wallet"),
    ]


@pytest.fixture
def sample_categories() -> List[RegistryEntry]:
    return [
        RegistryEntry(entry_id="cat_salary", label="Salary"),
        RegistryEntry(entry_id="cat_groceries", label="Groceries"),
    ]


@pytest.fixture
def sample_movement_types() -> List[RegistryEntry]:
    return [
        RegistryEntry(entry_id="income", label="Income"),
        RegistryEntry(entry_id="expense", label="Expense"),
    ]
