"""
Pytest configuration and fixtures for vietqr tests.
"""

import os

import pytest

os.environ.setdefault("VIETQR_API_KEY", "test-api-key")
os.environ.setdefault("VIETQR_LOGGING__JSON_LOGS", "false")

from vietqr.vietqr_encoder import VietQROptions  # noqa: E402

DYNAMIC_PAYLOAD = (
    "000201"
    "010212"
    "38540010A00000072701240006970436011012345678900208QRIBFTTA"
    "5303704"
    "540525000"
    "5802VN"
    "5908My Store"
    "62230819Thanh toan don hang"
    "6304E9D5"
)

STATIC_PAYLOAD = (
    "000201"
    "010211"
    "38540010A00000072701240006970415011009876543210208QRIBFTTA"
    "5303704"
    "5802VN"
    "5912Nguyen Van A"
    "6304FF48"
)


@pytest.fixture
def dynamic_options() -> VietQROptions:
    return VietQROptions(
        bank_bin="970436",
        account_number="1234567890",
        amount=25000,
        purpose="Thanh toan don hang",
        merchant_name="My Store",
    )


@pytest.fixture
def static_options() -> VietQROptions:
    return VietQROptions(
        bank_bin="970415",
        account_number="0987654321",
        merchant_name="Nguyen Van A",
    )


@pytest.fixture
def api_headers():
    from vietqr.config import settings

    return {"X-API-Key": settings.api_key}


@pytest.fixture
def test_client():
    from fastapi.testclient import TestClient

    from vietqr.api import app

    return TestClient(app)
