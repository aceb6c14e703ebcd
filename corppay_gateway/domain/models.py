"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from corppay_gateway.domain.exceptions import ErrorCode

HEADER_FIELDS = ("TranID", "Corp_ID", "Maker_ID", "Checker_ID", "Approver_ID")


@dataclass(frozen=True)
class Credential:
    """Registered gateway user"""

    username: str
    password: str
    corp_id: str


@dataclass(frozen=True)
class AccountSnapshot:
    """Point-in-time copy of a ledger account"""

    acct_number: str
    balance: Decimal
    owner_corp_id: str
    acct_type: str = "SAV"
    currency: str = "INR"


@dataclass(frozen=True)
class PaymentHeader:
    """Validated request Header block"""

    tran_id: str
    corp_id: str
    maker_id: str
    checker_id: str
    approver_id: str

    def echo(self) -> Dict[str, str]:
        return {
            "TranID": self.tran_id,
            "Corp_ID": self.corp_id,
            "Maker_ID": self.maker_id,
            "Checker_ID": self.checker_id,
            "Approver_ID": self.approver_id,
        }


@dataclass(frozen=True)
class PaymentBody:
    """Validated request Body block"""

    debit_acct_no: str
    amount: Decimal
    mode_of_pay: str
    ben_ifsc: str = ""


@dataclass(frozen=True)
class PaymentRequest:
    header: PaymentHeader
    body: PaymentBody


class OutcomeStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    HELD = "HELD"


@dataclass(frozen=True)
class Settlement:
    """Details of a debited payment"""

    ref_no: str
    utr_no: str
    po_num: str
    debit_acct_no: str
    amount: Decimal
    remaining_balance: Decimal
    ben_ifsc: str
    mode_of_pay: str
    settled_at: datetime


@dataclass(frozen=True)
class TransactionOutcome:
    """Terminal result of one pass through the settlement pipeline"""

    status: OutcomeStatus
    header: Dict[str, str]
    stage: str
    error_code: Optional[ErrorCode] = None
    error_desc: str = ""
    settlement: Optional[Settlement] = None

    @classmethod
    def success(cls, header: PaymentHeader, settlement: Settlement, stage: str) -> "TransactionOutcome":
        return cls(OutcomeStatus.SUCCESS, header.echo(), stage, settlement=settlement)

    @classmethod
    def failure(cls, header: Dict[str, str], stage: str, error_code: ErrorCode, error_desc: str) -> "TransactionOutcome":
        return cls(OutcomeStatus.FAILED, header, stage, error_code, error_desc)

    @classmethod
    def held(cls, header: PaymentHeader, stage: str, reason: str) -> "TransactionOutcome":
        return cls(OutcomeStatus.HELD, header.echo(), stage, ErrorCode.CUTOFF_HOLD, reason)


@dataclass(frozen=True)
class SettlementRecord:
    """Journal entry kept for status inquiries"""

    tran_id: str
    corp_id: str
    status: OutcomeStatus
    recorded_at: datetime
    settlement: Optional[Settlement] = None
    request: Optional[PaymentRequest] = field(default=None, compare=False)


@dataclass(frozen=True)
class AccountListing:
    header: PaymentHeader
    accounts: List[AccountSnapshot]


@dataclass(frozen=True)
class StatusInquiry:
    header: PaymentHeader
    record: SettlementRecord


def request_envelope(operation: str) -> str:
    return f"{operation}_Req"


def response_envelope(operation: str) -> str:
    return f"{operation}_Res"
