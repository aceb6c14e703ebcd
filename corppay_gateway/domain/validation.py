"""Request schema validation - pydantic models for the request envelope, mapped onto domain errors"""

from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from corppay_gateway.domain.exceptions import (
    InvalidAmountError,
    InvalidFieldError,
    InvalidModeError,
    MissingEnvelopeError,
    SchemaError,
    UnknownAccountError,
)
from corppay_gateway.domain.ledger import AccountLedger
from corppay_gateway.domain.models import (
    HEADER_FIELDS,
    PaymentBody,
    PaymentHeader,
    PaymentRequest,
)

HEADER_FIELD_PATTERN = r"^[A-Za-z0-9]{1,16}$"
AMOUNT_MESSAGE = "Amount must be a positive number greater than zero."


class RequestHeader(BaseModel):
    """Header block shared by the payment, status and account-listing requests"""

    model_config = ConfigDict(populate_by_name=True)

    tran_id: str = Field(..., alias="TranID", strict=True, pattern=HEADER_FIELD_PATTERN)
    corp_id: str = Field(..., alias="Corp_ID", strict=True, pattern=HEADER_FIELD_PATTERN)
    maker_id: str = Field(..., alias="Maker_ID", strict=True, pattern=HEADER_FIELD_PATTERN)
    checker_id: str = Field(..., alias="Checker_ID", strict=True, pattern=HEADER_FIELD_PATTERN)
    approver_id: str = Field(..., alias="Approver_ID", strict=True, pattern=HEADER_FIELD_PATTERN)

    def to_domain(self) -> PaymentHeader:
        return PaymentHeader(
            tran_id=self.tran_id,
            corp_id=self.corp_id,
            maker_id=self.maker_id,
            checker_id=self.checker_id,
            approver_id=self.approver_id,
        )


class PaymentRequestBody(BaseModel):
    """
    Body of a single payment request.

    The account directory and the mode set are supplied through the validation
    context as `ledger` and `modes`.
    """

    model_config = ConfigDict(populate_by_name=True)

    debit_acct_no: str = Field(..., alias="Debit_Acct_No", strict=True)
    amount: Decimal = Field(..., alias="Amount", gt=0, decimal_places=2, allow_inf_nan=False)
    mode_of_pay: str = Field(..., alias="Mode_of_Pay", strict=True)
    ben_ifsc: str = Field("", alias="Ben_IFSC")

    @field_validator("debit_acct_no")
    @classmethod
    def registered_account(cls, value: str, info: ValidationInfo) -> str:
        ledger = (info.context or {}).get("ledger")
        if ledger is not None and not ledger.contains(value):
            raise ValueError("account is not registered")
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def numeric_amount(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("boolean is not an amount")
        # floats go through str() so 199999.99 stays 199999.99
        if isinstance(value, float):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("mode_of_pay")
    @classmethod
    def configured_mode(cls, value: str, info: ValidationInfo) -> str:
        modes = (info.context or {}).get("modes")
        if modes is not None and value not in modes:
            raise ValueError("mode is not configured")
        return value

    @field_validator("ben_ifsc", mode="before")
    @classmethod
    def passthrough_ifsc(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class PaymentEnvelope(BaseModel):
    header: RequestHeader = Field(..., alias="Header")
    body: PaymentRequestBody = Field(..., alias="Body")


class InquiryEnvelope(BaseModel):
    header: RequestHeader = Field(..., alias="Header")


def extract_envelope(payload: Any, envelope_name: str) -> Dict[str, Any]:
    """Return the named request wrapper or raise MissingEnvelopeError"""
    envelope = payload.get(envelope_name) if isinstance(payload, dict) else None
    if not isinstance(envelope, dict):
        raise MissingEnvelopeError(f"'{envelope_name}' tag missing in Request Body")
    return envelope


def header_echo(payload: Any, envelope_name: str) -> Dict[str, str]:
    """
    Best-effort copy of the request header fields for FAILED responses.

    Fields that are absent or not strings are echoed as empty strings.
    """
    envelope = payload.get(envelope_name) if isinstance(payload, dict) else None
    header = envelope.get("Header") if isinstance(envelope, dict) else None
    if not isinstance(header, dict):
        header = {}
    return {name: header[name] if isinstance(header.get(name), str) else "" for name in HEADER_FIELDS}


def claimed_corp_id(payload: Any, envelope_name: str) -> Optional[str]:
    """Corp_ID as sent by the caller, before any validation"""
    corp_id = header_echo(payload, envelope_name)["Corp_ID"]
    return corp_id or None


def to_schema_error(exc: ValidationError, modes: Iterable[str] = ()) -> SchemaError:
    """Translate the first pydantic error into the matching domain error"""
    loc = exc.errors()[0]["loc"]
    block = loc[0]
    field_name = str(loc[1]) if len(loc) > 1 else None

    if block == "Header":
        return InvalidFieldError(field_name or HEADER_FIELDS[0])
    if field_name == "Amount":
        return InvalidAmountError(AMOUNT_MESSAGE, "Amount must be finite with at most 2 decimal places")
    if field_name == "Mode_of_Pay":
        return InvalidModeError("Invalid or missing Mode_of_Pay.", f"Valid options are {', '.join(modes)}")
    return UnknownAccountError("Invalid or unregistered Debit_Acct_No.")


class SchemaValidator:
    """Validates request envelopes against the field rules and the account directory"""

    def __init__(self, ledger: AccountLedger, modes: Iterable[str]):
        self.ledger = ledger
        self.modes = tuple(modes)

    def validate_header(self, envelope: Dict[str, Any]) -> PaymentHeader:
        """Check the five header fields in order; first failure wins"""
        try:
            parsed = InquiryEnvelope.model_validate(envelope)
        except ValidationError as e:
            raise to_schema_error(e, self.modes) from e
        return parsed.header.to_domain()

    def validate(self, payload: Any, envelope_name: str) -> PaymentRequest:
        """
        Validate a payment request payload.

        Check order: envelope, header fields, Debit_Acct_No, Amount, Mode_of_Pay.

        Raises:
            MissingEnvelopeError, InvalidFieldError, UnknownAccountError,
            InvalidAmountError, InvalidModeError
        """
        envelope = extract_envelope(payload, envelope_name)
        try:
            parsed = PaymentEnvelope.model_validate(
                envelope, context={"ledger": self.ledger, "modes": self.modes}
            )
        except ValidationError as e:
            raise to_schema_error(e, self.modes) from e

        body = parsed.body
        return PaymentRequest(
            header=parsed.header.to_domain(),
            body=PaymentBody(
                debit_acct_no=body.debit_acct_no,
                amount=body.amount,
                mode_of_pay=body.mode_of_pay,
                ben_ifsc=body.ben_ifsc,
            ),
        )
