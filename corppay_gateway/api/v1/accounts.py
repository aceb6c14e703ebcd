"""POST /v1/accounts - list the caller's corporate accounts"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool

from corppay_gateway.api.dependencies import (
    get_json_payload,
    get_request_id,
    get_response_builder,
    get_settlement_service,
)
from corppay_gateway.api.responses import ResponseBuilder, TransportError, to_transport_error
from corppay_gateway.domain.exceptions import DomainException
from corppay_gateway.domain.models import OutcomeStatus, TransactionOutcome
from corppay_gateway.domain.settlement import SettlementService
from corppay_gateway.infrastructure.observability.metrics import inquiry_counter

router = APIRouter()


@router.post("/accounts")
async def list_accounts(
    request: Request,
    payload: Any = Depends(get_json_payload),
    authorization: Optional[str] = Header(None),
    service: SettlementService = Depends(get_settlement_service),
    responses: ResponseBuilder = Depends(get_response_builder),
):
    """
    Retrieve balances of every account owned by the header Corp_ID.

    Returns:
        cifInfo list in ledger order; 404 when the corp owns no accounts
    """
    request_id = get_request_id(request)

    try:
        result = await run_in_threadpool(service.list_accounts, authorization, payload)

    except DomainException as e:
        inquiry_counter.labels(operation="accounts", outcome="rejected").inc()
        logging.warning(f"Account listing rejected: {e.message}", extra={"request_id": request_id})
        raise to_transport_error(e) from e

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise TransportError(500, "An unexpected error occurred") from e

    if isinstance(result, TransactionOutcome):
        inquiry_counter.labels(operation="accounts", outcome=result.status.value).inc()
        return responses.outcome(service.accounts_operation, result)

    inquiry_counter.labels(operation="accounts", outcome=OutcomeStatus.SUCCESS.value).inc()
    return responses.account_listing(service.accounts_operation, result)
