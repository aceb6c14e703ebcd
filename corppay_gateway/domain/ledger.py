"""In-memory mock ledger, idempotency claims and settlement journal"""

import threading
from dataclasses import replace
from decimal import Decimal, Inexact, localcontext
from typing import Dict, Iterable, List, Optional, Set, Tuple

from corppay_gateway.domain.exceptions import AccountNotFoundError, InsufficientFundsError
from corppay_gateway.domain.models import AccountSnapshot, OutcomeStatus, SettlementRecord

# Significant digits available to balance arithmetic; results that need more raise Inexact
LEDGER_PRECISION = 38


class _AccountEntry:
    __slots__ = ("snapshot", "lock")

    def __init__(self, snapshot: AccountSnapshot):
        self.snapshot = snapshot
        self.lock = threading.Lock()


class AccountLedger:
    """
    Mock account balances keyed by account number.

    Each account carries its own lock so the balance check and the subtraction
    in debit() form one critical section per account while debits against
    different accounts proceed in parallel.
    """

    def __init__(self, accounts: Iterable[AccountSnapshot]):
        self._accounts: Dict[str, _AccountEntry] = {}
        for account in accounts:
            if account.acct_number in self._accounts:
                raise ValueError(f"Duplicate account number: {account.acct_number}")
            if account.balance < 0:
                raise ValueError(f"Negative opening balance for account {account.acct_number}")
            self._accounts[account.acct_number] = _AccountEntry(account)

    def _entry(self, acct_no: str) -> _AccountEntry:
        try:
            return self._accounts[acct_no]
        except KeyError:
            raise AccountNotFoundError(f"Account {acct_no} not found") from None

    def contains(self, acct_no: str) -> bool:
        return acct_no in self._accounts

    def balance(self, acct_no: str) -> Decimal:
        entry = self._entry(acct_no)
        with entry.lock:
            return entry.snapshot.balance

    def owner_of(self, acct_no: str) -> str:
        return self._entry(acct_no).snapshot.owner_corp_id

    def debit(self, acct_no: str, amount: Decimal) -> Decimal:
        """
        Subtract amount from the account and return the remaining balance.

        Raises:
            AccountNotFoundError: unknown account
            InsufficientFundsError: balance < amount; balance left unchanged
            decimal.Inexact: the difference cannot be represented exactly
        """
        entry = self._entry(acct_no)
        with entry.lock, localcontext() as ctx:
            ctx.prec = LEDGER_PRECISION
            ctx.traps[Inexact] = True
            current = entry.snapshot.balance
            if current < amount:
                raise InsufficientFundsError(
                    "Insufficient balance in the Debit Account.",
                    f"Available balance {current} is less than requested amount {amount}",
                )
            remaining = current - amount
            entry.snapshot = replace(entry.snapshot, balance=remaining)
            return remaining

    def list_by_corp(self, corp_id: str) -> List[AccountSnapshot]:
        """Accounts owned by corp_id, in seed order"""
        result = []
        for entry in self._accounts.values():
            with entry.lock:
                snapshot = entry.snapshot
            if snapshot.owner_corp_id == corp_id:
                result.append(snapshot)
        return result


class IdempotencyTracker:
    """Set of TranIDs already claimed for settlement"""

    def __init__(self) -> None:
        self._claimed: Set[str] = set()
        self._lock = threading.Lock()

    def try_claim(self, tran_id: str) -> bool:
        """Claim tran_id; False if it was already claimed (no state change)"""
        with self._lock:
            if tran_id in self._claimed:
                return False
            self._claimed.add(tran_id)
            return True

    def release(self, tran_id: str) -> None:
        """Undo a claim whose debit did not go through"""
        with self._lock:
            self._claimed.discard(tran_id)

    def is_claimed(self, tran_id: str) -> bool:
        with self._lock:
            return tran_id in self._claimed

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)


class SettlementJournal:
    """Settled and held transactions, looked up by status inquiries"""

    def __init__(self) -> None:
        # keyed by (corp_id, tran_id)
        self._records: Dict[Tuple[str, str], SettlementRecord] = {}
        self._lock = threading.Lock()

    def record(self, entry: SettlementRecord) -> None:
        """Store entry; a SUCCESS record is never replaced by a HELD one"""
        key = (entry.corp_id, entry.tran_id)
        with self._lock:
            existing = self._records.get(key)
            if existing is not None and existing.status == OutcomeStatus.SUCCESS:
                return
            self._records[key] = entry

    def find(self, tran_id: str, corp_id: str) -> Optional[SettlementRecord]:
        """Look up a record, scoped to the corp that submitted it"""
        with self._lock:
            return self._records.get((corp_id, tran_id))

    def held(self) -> List[SettlementRecord]:
        """Transactions waiting for next-day reprocessing"""
        with self._lock:
            return [r for r in self._records.values() if r.status == OutcomeStatus.HELD]
