"""Pytest fixtures for testing"""

import base64
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from corppay_gateway.api.dependencies import build_settlement_service, get_clock
from corppay_gateway.api.main import create_app
from corppay_gateway.config import Settings
from corppay_gateway.domain.models import AccountSnapshot, Credential
from corppay_gateway.domain.settlement import SettlementService
from corppay_gateway.utils.time_utils import IST

# 11:00 IST, before the NEFT cutoff
MORNING_IST = datetime(2026, 3, 2, 11, 0, tzinfo=IST)
# 17:30 IST, after the NEFT cutoff
EVENING_IST = datetime(2026, 3, 2, 17, 30, tzinfo=IST)


def basic_auth(username: str, password: str) -> str:
    """Authorization header value for a username/password pair"""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


FINANCE_AUTH = basic_auth("Finance", "Fin@2023")  # TMW04
TEST_AUTH = basic_auth("Test", "Welcome@123")  # TMW01
ADMIN_AUTH = basic_auth("Admin", "Admin@123")  # TMW02


def payment_payload(
    tran_id: str = "TXN0001",
    corp_id: str = "TMW04",
    debit_acct_no: str = "123456789012",
    amount: Any = "1000",
    mode: str = "FT",
    ben_ifsc: str = "HDFC0001234",
    envelope: str = "Single_Payment_Corp_Req",
    **header_overrides: Any,
) -> Dict[str, Any]:
    """Single payment request envelope with sensible defaults"""
    header = {
        "TranID": tran_id,
        "Corp_ID": corp_id,
        "Maker_ID": "MAKER01",
        "Checker_ID": "CHECKER01",
        "Approver_ID": "APPROVER01",
    }
    header.update(header_overrides)
    return {
        envelope: {
            "Header": header,
            "Body": {
                "Debit_Acct_No": debit_acct_no,
                "Amount": amount,
                "Mode_of_Pay": mode,
                "Ben_IFSC": ben_ifsc,
            },
        }
    }


def inquiry_payload(envelope: str, tran_id: str = "INQ0001", corp_id: str = "TMW04") -> Dict[str, Any]:
    """Header-only request envelope for account listing and status inquiry"""
    return {
        envelope: {
            "Header": {
                "TranID": tran_id,
                "Corp_ID": corp_id,
                "Maker_ID": "MAKER01",
                "Checker_ID": "CHECKER01",
                "Approver_ID": "APPROVER01",
            },
            "Body": {},
        }
    }


@pytest.fixture
def credentials() -> List[Credential]:
    return [
        Credential("Test", "Welcome@123", "TMW01"),
        Credential("Admin", "Admin@123", "TMW02"),
        Credential("User1", "Password1", "TMW03"),
        Credential("Finance", "Fin@2023", "TMW04"),
    ]


@pytest.fixture
def accounts() -> List[AccountSnapshot]:
    return [
        AccountSnapshot("654321987654", Decimal("300000.00"), "TMW01", "CUR"),
        AccountSnapshot("111122223333", Decimal("500"), "TMW01", "SAV"),
        AccountSnapshot("456789123456", Decimal("750000.00"), "TMW02", "CUR"),
        AccountSnapshot("987654321098", Decimal("100000.00"), "TMW03", "CUR"),
        AccountSnapshot("123456789012", Decimal("500000.00"), "TMW04", "CUR"),
    ]


@pytest.fixture
def service(credentials: List[Credential], accounts: List[AccountSnapshot]) -> SettlementService:
    """Settlement engine over the test seed, clock fixed before the cutoff"""
    engine = build_settlement_service(Settings(), credentials, accounts)
    engine.clock = lambda: MORNING_IST
    return engine


@pytest.fixture
def app(credentials: List[Credential], accounts: List[AccountSnapshot]):
    app = create_app(Settings(), credentials, accounts)
    app.dependency_overrides[get_clock] = lambda: (lambda: MORNING_IST)
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client over the test seed"""
    return TestClient(app)
