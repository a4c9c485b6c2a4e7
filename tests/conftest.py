"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fintcs_records.api.main import create_app
from fintcs_records.api.dependencies import get_today
from fintcs_records.infrastructure.database.models import Base
from fintcs_records.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Business date pinned so loan and voucher numbers carry the "26" year prefix
TODAY = date(2026, 3, 15)


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
    """Create FastAPI test client with test database and a fixed business date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def society_id(client: TestClient) -> str:
    """A persisted society to scope records to"""
    response = client.post(
        "/v1/societies",
        json={"name": "Employees Cooperative Credit Society", "registration_number": "REG-114"},
    )
    return response.json()["id"]


@pytest.fixture
def loan_payload(society_id: str) -> dict:
    return {
        "loan_type": "general",
        "loan_date": "2026-03-15",
        "edp_no": "EDP204511",
        "member_name": "R. Sharma",
        "loan_amount": "50000.00",
        "previous_loan": "12000.00",
        "number_of_installments": 36,
        "payment_mode": "cheque",
        "bank_name": "State Bank",
        "cheque_no": "004512",
        "society_id": society_id,
    }


@pytest.fixture
def voucher_payload(society_id: str) -> dict:
    return {
        "voucher_type": "payment",
        "voucher_date": "2026-03-15",
        "entries": [
            {"particulars": "Loan disbursed to R. Sharma", "debit": "38000.00", "credit": "0"},
            {"particulars": "Bank", "debit": "0", "credit": "38000.00"},
        ],
        "narration": "Disbursement of general loan",
        "society_id": society_id,
    }
