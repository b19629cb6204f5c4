"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient
from paydash.api.main import create_app
from paydash.domain.models import Merchant, Payment


def make_payment(
    payment_code: str = "P1",
    mcht_code: str = "M1",
    amount: str = "100",
    status: str = "SUCCESS",
    payment_at: str = "2024-01-01T10:00:00",
    pay_type: str = "ONLINE",
    mcht_name: str | None = None,
    currency: str = "KRW",
) -> Payment:
    """Payment with sensible defaults for tests"""
    return Payment(
        payment_code=payment_code,
        mcht_code=mcht_code,
        amount=amount,
        currency=currency,
        pay_type=pay_type,
        status=status,
        payment_at=payment_at,
        mcht_name=mcht_name,
    )


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sample_payments() -> list[Payment]:
    """Two merchants, mixed statuses and methods, spread over three days"""
    return [
        make_payment("P1", "M1", "1000", "SUCCESS", "2024-03-01T09:00:00", "ONLINE", "Cafe One"),
        make_payment("P2", "M1", "500", "FAILED", "2024-03-01T11:30:00", "DEVICE", "Cafe One"),
        make_payment("P3", "M2", "3000", "SUCCESS", "2024-03-02T08:15:00", "MOBILE", "Book Store"),
        make_payment("P4", "M2", "200", "CANCELLED", "2024-03-02T19:45:00", "ONLINE", "Book Store"),
        make_payment("P5", "M1", "700", "SUCCESS", "2024-03-03T12:00:00", "ONLINE", "Cafe One"),
        make_payment("P6", "M3", "50", "PENDING", "2024-03-03T23:59:00", "VACT", None),
    ]


@pytest.fixture
def sample_merchants() -> list[Merchant]:
    return [
        Merchant(mcht_code="M1", mcht_name="Cafe One", status="ACTIVE", biz_type="Food"),
        Merchant(mcht_code="M2", mcht_name="Book Store", status="ACTIVE", biz_type="Retail"),
        Merchant(mcht_code="M3", mcht_name="Gym Club", status="READY", biz_type="Fitness"),
        Merchant(mcht_code="M4", mcht_name="Closed Shop", status="CLOSED", biz_type="Retail"),
    ]


@pytest.fixture
def payment_factory():
    """Expose make_payment to tests"""
    return make_payment
