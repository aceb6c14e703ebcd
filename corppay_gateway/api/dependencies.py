"""Dependency injection for FastAPI endpoints"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from fastapi import Request

from corppay_gateway.api.responses import ResponseBuilder, TransportError
from corppay_gateway.config import Settings
from corppay_gateway.domain.auth import Authenticator, CredentialStore
from corppay_gateway.domain.ledger import AccountLedger, IdempotencyTracker, SettlementJournal
from corppay_gateway.domain.models import AccountSnapshot, Credential
from corppay_gateway.domain.rules import BusinessRuleEngine, build_mode_rules
from corppay_gateway.domain.settlement import SettlementService
from corppay_gateway.domain.validation import SchemaValidator
from corppay_gateway.infrastructure.seed.loader import load_accounts, load_credentials
from corppay_gateway.utils.time_utils import now_ist


def build_settlement_service(
    app_settings: Settings,
    credentials: Optional[Iterable[Credential]] = None,
    accounts: Optional[Iterable[AccountSnapshot]] = None,
) -> SettlementService:
    """Wire the pipeline from settings; seed data defaults to the configured files"""
    if credentials is None:
        credentials = load_credentials(app_settings.seed_dir)
    if accounts is None:
        accounts = load_accounts(app_settings.seed_dir)

    ledger = AccountLedger(accounts)
    rules = build_mode_rules(
        high_value_threshold=app_settings.high_value_threshold,
        neft_min=app_settings.neft_min_amount,
        neft_max=app_settings.neft_max_amount,
        neft_cutoff=app_settings.neft_cutoff,
    )
    unruled = [mode for mode in app_settings.enabled_modes if mode not in rules]
    if unruled:
        raise ValueError(f"No business rule configured for payment modes: {', '.join(unruled)}")

    return SettlementService(
        authenticator=Authenticator(CredentialStore(credentials)),
        validator=SchemaValidator(ledger, app_settings.enabled_modes),
        rules=BusinessRuleEngine(rules),
        ledger=ledger,
        tracker=IdempotencyTracker(),
        journal=SettlementJournal(),
        payment_operation=app_settings.payment_operation,
        status_operation=app_settings.status_operation,
        accounts_operation=app_settings.accounts_operation,
    )


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settlement_service(request: Request) -> SettlementService:
    """Provide the process-wide settlement engine"""
    return request.app.state.settlement_service


def get_response_builder(request: Request) -> ResponseBuilder:
    return request.app.state.response_builder


def get_clock() -> Callable[[], datetime]:
    """Wall clock used for cutoff checks and timestamps"""
    return now_ist


async def get_json_payload(request: Request) -> Any:
    """
    Read and parse the JSON request body.

    Numbers with a fraction are parsed as Decimal so amounts keep their exact value.

    Raises:
        TransportError: 415 for a non-JSON content type, 400 for an empty or malformed body
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != "application/json":
        raise TransportError(415, "Content-Type must be application/json")

    raw = await request.body()
    if not raw.strip():
        raise TransportError(400, "Request Body is missing or empty")

    try:
        return json.loads(raw, parse_float=Decimal)
    except ValueError as e:
        raise TransportError(400, "Invalid JSON format in Request Body", str(e)) from e
