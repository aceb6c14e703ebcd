"""Settlement service - orchestrates authentication, validation, rules, claim and debit"""

from datetime import datetime
from typing import Any, Callable, Optional, Union

from corppay_gateway.domain import pipeline
from corppay_gateway.domain.auth import Authenticator
from corppay_gateway.domain.exceptions import (
    AccountOwnershipError,
    CorpMismatchError,
    CutoffExceededHold,
    DomainException,
    ErrorCode,
    InsufficientFundsError,
    MissingEnvelopeError,
    NoAccountsFoundError,
    RuleError,
    SchemaError,
    TransactionNotFoundError,
)
from corppay_gateway.domain.ledger import AccountLedger, IdempotencyTracker, SettlementJournal
from corppay_gateway.domain.models import (
    AccountListing,
    OutcomeStatus,
    PaymentHeader,
    PaymentRequest,
    Settlement,
    SettlementRecord,
    StatusInquiry,
    TransactionOutcome,
    request_envelope,
)
from corppay_gateway.domain.rules import BusinessRuleEngine
from corppay_gateway.domain.validation import (
    SchemaValidator,
    claimed_corp_id,
    extract_envelope,
    header_echo,
)
from corppay_gateway.utils.identifiers import generate_po_num, generate_ref_no, generate_utr_no
from corppay_gateway.utils.time_utils import now_ist, to_ist

# Failures answered with a FAILED envelope; other domain errors go back as HTTP errors
DOMAIN_CHANNEL_ERRORS = (CorpMismatchError, AccountOwnershipError, SchemaError, RuleError)


class SettlementService:
    """
    Single engine behind payment initiation, account listing and status inquiry.

    Payment flow:
    1. Authenticate the Basic credential against the Corp_ID in the header
    2. Validate the request schema and confirm the debit account's owner
    3. Apply the mode rule table (NEFT after cutoff is HELD, not FAILED)
    4. Claim the TranID
    5. Debit the ledger; on insufficient funds the claim is released
    6. Journal the settlement and return the outcome
    """

    def __init__(
        self,
        authenticator: Authenticator,
        validator: SchemaValidator,
        rules: BusinessRuleEngine,
        ledger: AccountLedger,
        tracker: IdempotencyTracker,
        journal: SettlementJournal,
        payment_operation: str = "Single_Payment_Corp",
        status_operation: str = "get_Single_Payment_Status_Corp",
        accounts_operation: str = "getListofAccountsfromCorpID",
        clock: Callable[[], datetime] = now_ist,
    ):
        self.authenticator = authenticator
        self.validator = validator
        self.rules = rules
        self.ledger = ledger
        self.tracker = tracker
        self.journal = journal
        self.payment_operation = payment_operation
        self.status_operation = status_operation
        self.accounts_operation = accounts_operation
        self.clock = clock

    def settle(self, authorization: Optional[str], payload: Any, now: Optional[datetime] = None) -> TransactionOutcome:
        """
        Run one payment request through the pipeline.

        Returns the SUCCESS, FAILED or HELD outcome. Errors that mean the request
        could not be read as a transaction at all (missing envelope, no usable
        credential) are raised instead.
        """
        envelope_name = request_envelope(self.payment_operation)
        echo = header_echo(payload, envelope_name)
        run = pipeline.PipelineRun()
        now = now or self.clock()

        try:
            corp_id = self.authenticator.authenticate(authorization, claimed_corp_id(payload, envelope_name))
            run.advance(pipeline.AUTHENTICATED)

            request = self.validator.validate(payload, envelope_name)
            self._confirm_ownership(request.body.debit_acct_no, corp_id)
            run.advance(pipeline.SCHEMA_VALID)

            self.rules.evaluate(request.body.mode_of_pay, request.body.amount, now)
            run.advance(pipeline.RULE_VALID)

        except CutoffExceededHold as e:
            if self.tracker.is_claimed(request.header.tran_id):
                return self._duplicate(run, request)
            run.advance(pipeline.RULE_VALID)
            run.advance(pipeline.HELD)
            self.journal.record(
                SettlementRecord(
                    tran_id=request.header.tran_id,
                    corp_id=corp_id,
                    status=OutcomeStatus.HELD,
                    recorded_at=to_ist(now),
                    request=request,
                )
            )
            return TransactionOutcome.held(request.header, pipeline.RULE_VALID, e.message)

        except MissingEnvelopeError:
            run.fail()
            raise

        except DOMAIN_CHANNEL_ERRORS as e:
            return TransactionOutcome.failure(echo, run.fail(), e.error_code, e.message)

        except DomainException:
            run.fail()
            raise

        return self._claim_and_debit(run, request, corp_id, now)

    def _claim_and_debit(
        self, run: pipeline.PipelineRun, request: PaymentRequest, corp_id: str, now: datetime
    ) -> TransactionOutcome:
        header = request.header
        body = request.body

        if not self.tracker.try_claim(header.tran_id):
            return self._duplicate(run, request)
        run.advance(pipeline.CLAIMED)

        try:
            remaining = self.ledger.debit(body.debit_acct_no, body.amount)
        except InsufficientFundsError as e:
            self.tracker.release(header.tran_id)
            return TransactionOutcome.failure(header.echo(), run.fail(), e.error_code, e.message)
        except Exception:
            self.tracker.release(header.tran_id)
            raise
        run.advance(pipeline.DEBITED)

        settlement = Settlement(
            ref_no=generate_ref_no(),
            utr_no=generate_utr_no(),
            po_num=generate_po_num(),
            debit_acct_no=body.debit_acct_no,
            amount=body.amount,
            remaining_balance=remaining,
            ben_ifsc=body.ben_ifsc,
            mode_of_pay=body.mode_of_pay,
            settled_at=to_ist(now),
        )
        self.journal.record(
            SettlementRecord(
                tran_id=header.tran_id,
                corp_id=corp_id,
                status=OutcomeStatus.SUCCESS,
                recorded_at=settlement.settled_at,
                settlement=settlement,
                request=request,
            )
        )
        run.advance(pipeline.RESPONDED)
        return TransactionOutcome.success(header, settlement, pipeline.DEBITED)

    @staticmethod
    def _duplicate(run: pipeline.PipelineRun, request: PaymentRequest) -> TransactionOutcome:
        return TransactionOutcome.failure(
            request.header.echo(), run.fail(), ErrorCode.DUPLICATE_TRANSACTION, "Duplicate Transaction ID"
        )

    def _confirm_ownership(self, acct_no: str, corp_id: str) -> None:
        if self.ledger.owner_of(acct_no) != corp_id:
            raise AccountOwnershipError(
                "Debit account does not belong to Corp_ID",
                f"Account {acct_no} is not owned by {corp_id}",
            )

    def _authenticated_header(
        self, authorization: Optional[str], payload: Any, operation: str
    ) -> Union[PaymentHeader, TransactionOutcome]:
        """Shared front half of the inquiry pipelines: auth, envelope, header"""
        envelope_name = request_envelope(operation)
        echo = header_echo(payload, envelope_name)
        try:
            self.authenticator.authenticate(authorization, claimed_corp_id(payload, envelope_name))
            envelope = extract_envelope(payload, envelope_name)
            return self.validator.validate_header(envelope)
        except MissingEnvelopeError:
            raise
        except DOMAIN_CHANNEL_ERRORS as e:
            return TransactionOutcome.failure(echo, pipeline.RECEIVED, e.error_code, e.message)

    def list_accounts(self, authorization: Optional[str], payload: Any) -> Union[AccountListing, TransactionOutcome]:
        """
        Account listing for the caller's corp.

        Raises:
            NoAccountsFoundError: the corp owns no accounts
        """
        header = self._authenticated_header(authorization, payload, self.accounts_operation)
        if isinstance(header, TransactionOutcome):
            return header

        accounts = self.ledger.list_by_corp(header.corp_id)
        if not accounts:
            raise NoAccountsFoundError("No accounts found for the provided Corp_ID")
        return AccountListing(header=header, accounts=accounts)

    def payment_status(self, authorization: Optional[str], payload: Any) -> Union[StatusInquiry, TransactionOutcome]:
        """
        Status of an earlier payment identified by the header TranID.

        Raises:
            TransactionNotFoundError: no SUCCESS or HELD record for this corp
        """
        header = self._authenticated_header(authorization, payload, self.status_operation)
        if isinstance(header, TransactionOutcome):
            return header

        record = self.journal.find(header.tran_id, header.corp_id)
        if record is None:
            raise TransactionNotFoundError("No transaction found for the provided TranID")
        return StatusInquiry(header=header, record=record)
