"""POST /v1/payments and /v1/payments/status - single payment initiation and status inquiry"""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool

from corppay_gateway.api.dependencies import (
    get_clock,
    get_json_payload,
    get_request_id,
    get_response_builder,
    get_settlement_service,
)
from corppay_gateway.api.responses import ResponseBuilder, TransportError, to_transport_error
from corppay_gateway.domain.exceptions import DomainException
from corppay_gateway.domain.models import OutcomeStatus, TransactionOutcome
from corppay_gateway.domain.settlement import SettlementService
from corppay_gateway.infrastructure.observability.logging import log_settlement
from corppay_gateway.infrastructure.observability.metrics import (
    inquiry_counter,
    record_settlement,
    settlement_latency_histogram,
)

router = APIRouter()


@router.post("/payments")
async def initiate_payment(
    request: Request,
    payload: Any = Depends(get_json_payload),
    authorization: Optional[str] = Header(None),
    service: SettlementService = Depends(get_settlement_service),
    responses: ResponseBuilder = Depends(get_response_builder),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Validate and mock-settle a single corporate payment.

    Flow:
    1. Authenticate the Basic credential
    2. Validate header and body fields
    3. Apply payment-mode rules (NEFT after cutoff is held)
    4. Claim the TranID and debit the account
    5. Return SUCCESS, FAILED or HELD envelope (HTTP 200)
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        with settlement_latency_histogram.time():
            outcome: TransactionOutcome = await run_in_threadpool(service.settle, authorization, payload, clock())

    except DomainException as e:
        logging.warning(
            f"Payment request rejected: {e.message}",
            extra={"request_id": request_id, "error_code": e.error_code.value},
        )
        raise to_transport_error(e) from e

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise TransportError(500, "An unexpected error occurred") from e

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    error_code = outcome.error_code.value if outcome.error_code else None
    settled_amount = outcome.settlement.amount if outcome.status == OutcomeStatus.SUCCESS else None
    record_settlement(outcome.status.value, error_code, settled_amount)
    log_settlement(
        request_id,
        outcome.header.get("TranID", ""),
        outcome.header.get("Corp_ID", ""),
        outcome.status.value,
        outcome.stage,
        error_code,
        duration_ms,
    )

    return responses.outcome(service.payment_operation, outcome)


@router.post("/payments/status")
async def payment_status(
    request: Request,
    payload: Any = Depends(get_json_payload),
    authorization: Optional[str] = Header(None),
    service: SettlementService = Depends(get_settlement_service),
    responses: ResponseBuilder = Depends(get_response_builder),
):
    """
    Look up an earlier payment by TranID.

    Returns:
        SUCCESS envelope whose Body carries Txn_Status (SUCCESS or HELD);
        404 when the TranID is unknown for the caller's corp
    """
    request_id = get_request_id(request)

    try:
        result = await run_in_threadpool(service.payment_status, authorization, payload)

    except DomainException as e:
        inquiry_counter.labels(operation="status", outcome="rejected").inc()
        logging.warning(f"Status inquiry rejected: {e.message}", extra={"request_id": request_id})
        raise to_transport_error(e) from e

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise TransportError(500, "An unexpected error occurred") from e

    if isinstance(result, TransactionOutcome):
        inquiry_counter.labels(operation="status", outcome=result.status.value).inc()
        return responses.outcome(service.status_operation, result)

    inquiry_counter.labels(operation="status", outcome=OutcomeStatus.SUCCESS.value).inc()
    return responses.status_inquiry(service.status_operation, result)
