"""
CollectionSheetService -- Bulk posting of mandatory savings deposits.

Responsibility:
    Turns each mandatory savings deposit collected on a group's collection
    sheet into a balanced journal entry (debit the fund source account,
    credit the savings control account) and reports the outcome of every
    line.

Architecture position:
    Kernel > Services -- imperative shell.
    Delegates each posting to JournalEntryService.

Invariants enforced:
    - Deposits are independent: a failing deposit does not stop the rest.
    - Every deposit appears in the result, POSTED or FAILED, in sheet order.
    - A failed deposit writes nothing (JournalEntryService checks before it
      adds rows to the session).

Failure modes:
    - LedgerKernelError raised while posting one deposit is recorded on that
      deposit's outcome and logged.
    - Any other exception propagates; the caller's transaction should be
      rolled back.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy.orm import Session

from ledger_kernel.domain.dtos import JournalEntryRequest, JournalLineRequest, ParameterError
from ledger_kernel.domain.validation import parse_text
from ledger_kernel.exceptions import LedgerKernelError, ValidationFailedError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.services.journal_entry_service import JournalEntryService

logger = get_logger("services.collection_sheet")


class DepositStatus(str, Enum):
    POSTED = "posted"
    FAILED = "failed"


@dataclass(frozen=True)
class MandatorySavingsDeposit:
    """One mandatory savings deposit collected on the sheet."""

    savings_account_id: int
    amount: Any
    fund_source_account_id: int
    savings_control_account_id: int
    payment_type_id: int | None = None

    @classmethod
    def from_command(cls, payload: Mapping[str, Any]) -> "MandatorySavingsDeposit":
        return cls(
            savings_account_id=payload.get("savingsId"),
            amount=payload.get("transactionAmount"),
            fund_source_account_id=payload.get("fundSourceAccountId"),
            savings_control_account_id=payload.get("savingsControlAccountId"),
            payment_type_id=payload.get("paymentTypeId"),
        )


@dataclass(frozen=True)
class CollectionSheetCommand:
    """A submitted collection sheet, reduced to its savings deposits."""

    office_id: Any
    transaction_date: Any
    currency_code: Any
    deposits: Sequence[MandatorySavingsDeposit] = field(default_factory=tuple)
    note: str | None = None
    group_id: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "deposits", tuple(self.deposits))

    @classmethod
    def from_command(cls, payload: Mapping[str, Any]) -> "CollectionSheetCommand":
        return cls(
            office_id=payload.get("officeId"),
            transaction_date=payload.get("transactionDate"),
            currency_code=payload.get("currencyCode"),
            deposits=tuple(
                MandatorySavingsDeposit.from_command(item)
                for item in payload.get("bulkSavingsDueTransactions") or ()
            ),
            note=payload.get("note"),
            group_id=payload.get("groupId"),
        )


@dataclass(frozen=True)
class DepositOutcome:
    """What happened to one deposit line."""

    index: int
    savings_account_id: int
    amount: Any
    status: DepositStatus
    transaction_id: str | None = None
    entry_id: int | None = None
    error_code: str | None = None
    error_message: str | None = None
    errors: tuple[ParameterError, ...] = ()

    @property
    def is_posted(self) -> bool:
        return self.status is DepositStatus.POSTED


@dataclass(frozen=True)
class CollectionSheetResult:
    """
    Per-line report for a processed collection sheet.

    ``changes`` mirrors the command-processing summary: the note when one
    was supplied, plus the savings account id and amount of the last
    posted deposit.
    """

    outcomes: tuple[DepositOutcome, ...]
    changes: Mapping[str, Any]

    @property
    def posted(self) -> tuple[DepositOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status is DepositStatus.POSTED)

    @property
    def failed(self) -> tuple[DepositOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status is DepositStatus.FAILED)

    @property
    def has_failures(self) -> bool:
        return any(o.status is DepositStatus.FAILED for o in self.outcomes)


class CollectionSheetService:
    """
    Service for collection sheet savings deposits.

    Usage:
        service = CollectionSheetService(session)
        result = service.process_mandatory_savings_deposits(sheet, actor_id=3)
        for outcome in result.failed:
            print(outcome.savings_account_id, outcome.error_code)
    """

    def __init__(
        self,
        session: Session,
        journal: JournalEntryService | None = None,
    ):
        self._session = session
        self._journal = journal or JournalEntryService(session)

    def process_mandatory_savings_deposits(
        self,
        sheet: CollectionSheetCommand,
        actor_id: int,
    ) -> CollectionSheetResult:
        changes: dict[str, Any] = {}
        note = parse_text(sheet.note)
        if note:
            changes["note"] = note

        outcomes: list[DepositOutcome] = []
        with LogContext.bind(actor_id=actor_id, office_id=sheet.office_id):
            logger.info(
                "collection_sheet_started",
                extra={"group_id": sheet.group_id, "deposit_count": len(sheet.deposits)},
            )
            for index, deposit in enumerate(sheet.deposits):
                outcome = self._post_deposit(index, deposit, sheet, actor_id)
                outcomes.append(outcome)
                if outcome.is_posted:
                    changes["savingsAccountId"] = deposit.savings_account_id
                    changes["transactionAmount"] = deposit.amount

            result = CollectionSheetResult(outcomes=tuple(outcomes), changes=changes)
            logger.info(
                "collection_sheet_processed",
                extra={
                    "group_id": sheet.group_id,
                    "posted_count": len(result.posted),
                    "failed_count": len(result.failed),
                },
            )
        return result

    def _post_deposit(
        self,
        index: int,
        deposit: MandatorySavingsDeposit,
        sheet: CollectionSheetCommand,
        actor_id: int,
    ) -> DepositOutcome:
        request = JournalEntryRequest(
            office_id=sheet.office_id,
            transaction_date=sheet.transaction_date,
            currency_code=sheet.currency_code,
            debits=(
                JournalLineRequest(
                    gl_account_id=deposit.fund_source_account_id, amount=deposit.amount,
                ),
            ),
            credits=(
                JournalLineRequest(
                    gl_account_id=deposit.savings_control_account_id, amount=deposit.amount,
                ),
            ),
            comments=f"Mandatory savings deposit to savings account {deposit.savings_account_id}",
            payment_type_id=deposit.payment_type_id,
        )
        try:
            posted = self._journal.post(request, actor_id, manual_entry=False)
        except LedgerKernelError as exc:
            errors = exc.errors if isinstance(exc, ValidationFailedError) else ()
            logger.warning(
                "mandatory_savings_deposit_failed",
                extra={
                    "index": index,
                    "savings_account_id": deposit.savings_account_id,
                    "error_code": exc.code,
                    "parameters": [e.parameter for e in errors],
                },
            )
            return DepositOutcome(
                index=index,
                savings_account_id=deposit.savings_account_id,
                amount=deposit.amount,
                status=DepositStatus.FAILED,
                error_code=exc.code,
                error_message=str(exc),
                errors=errors,
            )

        logger.info(
            "mandatory_savings_deposit_posted",
            extra={
                "index": index,
                "savings_account_id": deposit.savings_account_id,
                "transaction_id": posted.transaction_id,
                "amount": posted.debit_sum,
            },
        )
        return DepositOutcome(
            index=index,
            savings_account_id=deposit.savings_account_id,
            amount=deposit.amount,
            status=DepositStatus.POSTED,
            transaction_id=posted.transaction_id,
            entry_id=posted.entry_id,
        )
