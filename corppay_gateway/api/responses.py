"""Response assembly for the transport and domain channels"""

from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from corppay_gateway.api.v1.schemas import (
    AccountBalance,
    AccountInfo,
    AccountListBody,
    PaymentResponseBody,
    PaymentStatusBody,
    ResponseHeader,
    SignatureBlock,
    TransportErrorResponse,
)
from corppay_gateway.domain.exceptions import (
    AuthError,
    BadEncodingAuthError,
    DomainException,
    MissingEnvelopeError,
    NotFoundError,
)
from corppay_gateway.domain.models import (
    AccountListing,
    OutcomeStatus,
    StatusInquiry,
    TransactionOutcome,
    response_envelope,
)
from corppay_gateway.utils.time_utils import format_txn_time


class TransportError(Exception):
    """Request could not be interpreted as a domain transaction"""

    def __init__(self, status_code: int, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


def to_transport_error(exc: DomainException) -> TransportError:
    """Map a domain exception that escaped the pipeline onto an HTTP status"""
    if isinstance(exc, (BadEncodingAuthError, MissingEnvelopeError)):
        return TransportError(400, exc.message, exc.details)
    if isinstance(exc, AuthError):
        return TransportError(401, exc.message, exc.details)
    if isinstance(exc, NotFoundError):
        return TransportError(404, exc.message, exc.details)
    return TransportError(500, "An unexpected error occurred")


def _header(echo: Dict[str, str], status: str, error_code: str = "", error_desc: str = "") -> ResponseHeader:
    return ResponseHeader(
        tran_id=echo.get("TranID", ""),
        corp_id=echo.get("Corp_ID", ""),
        maker_id=echo.get("Maker_ID", ""),
        checker_id=echo.get("Checker_ID", ""),
        approver_id=echo.get("Approver_ID", ""),
        status=status,
        error_cde=error_code,
        error_desc=error_desc,
    )


class ResponseBuilder:
    """Builds JSON responses for both failure channels and all three operations"""

    def __init__(self, signature: str = "Signature"):
        self.signature = signature

    def _envelope(self, operation: str, header: ResponseHeader, body: Any = None) -> Dict[str, Any]:
        content: Dict[str, Any] = {"Header": header.model_dump(mode="json", by_alias=True)}
        if body is not None:
            content["Body"] = body.model_dump(mode="json", by_alias=True)
        content["Signature"] = SignatureBlock(signature=self.signature).model_dump(by_alias=True)
        return {response_envelope(operation): content}

    def transport_error(self, error: TransportError) -> JSONResponse:
        body = TransportErrorResponse(
            httpCode=str(error.status_code),
            httpMessage=HTTPStatus(error.status_code).phrase,
            moreInformation=error.message,
            moreDetails=error.details,
        )
        return JSONResponse(status_code=error.status_code, content=body.model_dump(exclude_none=True))

    def outcome(self, operation: str, outcome: TransactionOutcome) -> JSONResponse:
        """SUCCESS envelope with Body, or FAILED/HELD envelope without one"""
        if outcome.status != OutcomeStatus.SUCCESS:
            header = _header(
                outcome.header,
                outcome.status.value,
                outcome.error_code.value if outcome.error_code else "",
                outcome.error_desc,
            )
            return JSONResponse(status_code=200, content=self._envelope(operation, header))

        settlement = outcome.settlement
        body = PaymentResponseBody(
            ref_no=settlement.ref_no,
            utr_no=settlement.utr_no,
            po_num=settlement.po_num,
            debit_acct_no=settlement.debit_acct_no,
            amount=settlement.amount,
            remaining_balance=settlement.remaining_balance,
            ben_ifsc=settlement.ben_ifsc,
            txn_time=format_txn_time(settlement.settled_at),
            mode_of_pay=settlement.mode_of_pay,
        )
        header = _header(outcome.header, OutcomeStatus.SUCCESS.value)
        return JSONResponse(status_code=200, content=self._envelope(operation, header, body))

    def account_listing(self, operation: str, listing: AccountListing) -> JSONResponse:
        body = AccountListBody(
            cif_info=[
                AccountInfo(
                    acct_balance=AccountBalance(amount_value=account.balance, currency_code=account.currency),
                    acct_curr_code=account.currency,
                    acct_number=account.acct_number,
                    acct_type=account.acct_type,
                )
                for account in listing.accounts
            ]
        )
        header = _header(listing.header.echo(), OutcomeStatus.SUCCESS.value)
        return JSONResponse(status_code=200, content=self._envelope(operation, header, body))

    def status_inquiry(self, operation: str, inquiry: StatusInquiry) -> JSONResponse:
        record = inquiry.record
        request = record.request
        settlement = record.settlement
        body = PaymentStatusBody(
            tran_id=record.tran_id,
            txn_status=record.status.value,
            ref_no=settlement.ref_no if settlement else None,
            utr_no=settlement.utr_no if settlement else None,
            po_num=settlement.po_num if settlement else None,
            debit_acct_no=request.body.debit_acct_no,
            amount=request.body.amount,
            ben_ifsc=request.body.ben_ifsc,
            txn_time=format_txn_time(record.recorded_at),
            mode_of_pay=request.body.mode_of_pay,
        )
        header = _header(inquiry.header.echo(), OutcomeStatus.SUCCESS.value)
        return JSONResponse(status_code=200, content=self._envelope(operation, header, body))

