"""
JournalEntryService -- Validates and persists journal entries.

Responsibility:
    Runs the pure journal validator, then the checks that need the
    database (currency known, every line account postable), then writes
    one JournalEntry row with one JournalLine per request line.

Architecture position:
    Kernel > Services -- imperative shell.
    Pure validation lives in domain/journal_validator.py; account lookups
    go through LedgerAccountService.

Invariants enforced:
    - Nothing is written unless the request validates and every line
      account resolves.
    - All account failures are reported together, one ParameterError per
      offending line, in a single JournalValidationError.
    - Flush only; the caller owns the transaction.

Failure modes:
    - JournalValidationError: request invalid or any line account not
      postable.
    - InvalidCurrencyError: currency is not a known ISO 4217 code.

Audit relevance:
    Every posted entry logs ``journal_entry_posted`` with its transaction
    id, sums and balance status.
"""

import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import uuid4

from sqlalchemy.orm import Session

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.domain.dtos import (
    BalanceStatus,
    ErrorKind,
    JournalEntryRequest,
    ParameterError,
    ValidatedEntry,
    ValidatedLine,
)
from ledger_kernel.domain.journal_validator import (
    DEFAULT_LIMITS,
    JournalValidationLimits,
    validate_journal_entry,
)
from ledger_kernel.domain.validation import parameter_error
from ledger_kernel.exceptions import AccountError, JournalValidationError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.journal import JournalEntry, JournalLine
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.ledger_account_service import LedgerAccountService

logger = get_logger("services.journal_entry")

MANUAL_TRANSACTION_PREFIX = "M"
SYSTEM_TRANSACTION_PREFIX = "S"


@dataclass(frozen=True)
class PostedJournalEntry:
    """Summary of a persisted journal entry."""

    entry_id: int
    transaction_id: str
    office_id: int
    transaction_date: date
    currency_code: str
    debit_sum: Decimal
    credit_sum: Decimal
    balance_status: BalanceStatus
    line_count: int


class JournalEntryService(BaseService[JournalEntry]):
    """
    Service for posting journal entries.

    Contract:
        ``post()`` either returns a PostedJournalEntry (rows flushed) or
        raises without having added anything to the session.

    Usage:
        service = JournalEntryService(session)
        request = JournalEntryRequest.from_command(payload)
        posted = service.post(request, actor_id=7)
    """

    def __init__(
        self,
        session: Session,
        accounts: LedgerAccountService | None = None,
        limits: JournalValidationLimits = DEFAULT_LIMITS,
    ):
        super().__init__(session)
        self._accounts = accounts or LedgerAccountService(session)
        self._limits = limits

    def post(
        self,
        request: JournalEntryRequest,
        actor_id: int,
        *,
        manual_entry: bool = True,
    ) -> PostedJournalEntry:
        """
        Validate and persist a journal entry.

        Args:
            request: The proposed entry.
            actor_id: Who is posting.
            manual_entry: True for user-entered journal entries, which
                honour each account's manual-entries-allowed flag.  System
                postings (collection sheets) pass False.

        Raises:
            JournalValidationError: Aggregate of every validation and
                account-resolution failure.
            InvalidCurrencyError: Unknown currency code.
        """
        t0 = time.monotonic()
        entry = validate_journal_entry(request, self._limits).unwrap()
        CurrencyRegistry.validate(entry.currency_code)

        account_errors = self._resolve_accounts(entry, manual_entry)
        if account_errors:
            logger.warning(
                "journal_entry_accounts_rejected",
                extra={
                    "error_count": len(account_errors),
                    "parameters": [e.parameter for e in account_errors],
                },
            )
            raise JournalValidationError(account_errors)

        prefix = MANUAL_TRANSACTION_PREFIX if manual_entry else SYSTEM_TRANSACTION_PREFIX
        row = self._persist(entry, actor_id, f"{prefix}{uuid4().hex}")

        with LogContext.bind(entry_id=row.id):
            logger.info(
                "journal_entry_posted",
                extra={
                    "transaction_id": row.transaction_id,
                    "office_id": row.office_id,
                    "currency": row.currency_code,
                    "line_count": len(entry.lines),
                    "debit_sum": entry.debit_sum,
                    "credit_sum": entry.credit_sum,
                    "balance_status": entry.balance_status.value,
                    "manual_entry": manual_entry,
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                },
            )

        return PostedJournalEntry(
            entry_id=row.id,
            transaction_id=row.transaction_id,
            office_id=entry.office_id,
            transaction_date=entry.transaction_date,
            currency_code=entry.currency_code,
            debit_sum=entry.debit_sum,
            credit_sum=entry.credit_sum,
            balance_status=entry.balance_status,
            line_count=len(entry.lines),
        )

    def _resolve_accounts(
        self,
        entry: ValidatedEntry,
        manual_entry: bool,
    ) -> list[ParameterError]:
        """One error per line whose account cannot be posted to."""
        errors: list[ParameterError] = []
        for side, lines in (("credits", entry.credits), ("debits", entry.debits)):
            for line in lines:
                try:
                    self._accounts.resolve_postable(
                        line.gl_account_id,
                        currency_code=entry.currency_code,
                        manual_entry=manual_entry,
                    )
                except AccountError as exc:
                    errors.append(self._account_error(side, line, exc))
        return errors

    def _account_error(
        self,
        side: str,
        line: ValidatedLine,
        exc: AccountError,
    ) -> ParameterError:
        reason = exc.code.lower().replace("_", ".")
        return parameter_error(
            self._limits.resource,
            f"{side}[{line.line_seq}].glAccountId",
            ErrorKind.INVALID_REFERENCE,
            reason,
            str(exc),
            value=line.gl_account_id,
            details={"error_code": exc.code},
        )

    def _persist(
        self,
        entry: ValidatedEntry,
        actor_id: int,
        transaction_id: str,
    ) -> JournalEntry:
        row = JournalEntry(
            transaction_id=transaction_id,
            office_id=entry.office_id,
            transaction_date=entry.transaction_date,
            currency_code=entry.currency_code,
            comments=entry.comments,
            reference_number=entry.reference_number,
            accounting_rule_id=entry.accounting_rule_id,
            payment_type_id=entry.payment_type_id,
            is_opening_balance=entry.is_opening_balance,
            is_unidentified_entry=entry.is_unidentified_entry,
            balance_status=entry.balance_status.value,
            created_by_id=actor_id,
        )
        for seq, line in enumerate(entry.lines):
            row.lines.append(
                JournalLine(
                    account_id=line.gl_account_id,
                    side=line.side.value,
                    amount=line.amount,
                    currency_code=entry.currency_code,
                    line_seq=seq,
                    comments=line.comments,
                    created_by_id=actor_id,
                )
            )
        self.session.add(row)
        self.session.flush()
        return row
