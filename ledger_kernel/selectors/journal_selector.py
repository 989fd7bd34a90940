"""
Module: ledger_kernel.selectors.journal_selector
Responsibility: Read-only queries over posted journal entries and lines.
Architecture position: Kernel > Selectors.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ledger_kernel.models.journal import JournalEntry, JournalLine, LineSide
from ledger_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class JournalLineDTO:
    """Data transfer object for a journal line."""

    id: int
    account_id: int
    side: LineSide
    amount: Decimal
    currency_code: str
    line_seq: int
    comments: str | None


@dataclass(frozen=True)
class JournalEntryDTO:
    """Data transfer object for a journal entry."""

    id: int
    transaction_id: str
    office_id: int
    transaction_date: date
    currency_code: str
    balance_status: str
    is_opening_balance: bool
    is_unidentified_entry: bool
    comments: str | None
    reference_number: str | None
    lines: tuple[JournalLineDTO, ...]

    @property
    def total_debits(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.side == LineSide.DEBIT),
            Decimal("0"),
        )

    @property
    def total_credits(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.side == LineSide.CREDIT),
            Decimal("0"),
        )


class JournalSelector(BaseSelector[JournalEntry]):
    """Selector for journal entry queries."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get_entry(self, entry_id: int) -> JournalEntryDTO | None:
        entry = self.session.scalars(
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .where(JournalEntry.id == entry_id)
        ).first()
        return self._to_dto(entry) if entry else None

    def get_by_transaction_id(self, transaction_id: str) -> JournalEntryDTO | None:
        entry = self.session.scalars(
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .where(JournalEntry.transaction_id == transaction_id)
        ).first()
        return self._to_dto(entry) if entry else None

    def count_entries(self) -> int:
        return self.session.scalar(select(func.count(JournalEntry.id))) or 0

    def lines_for_account(self, account_id: int) -> list[JournalLineDTO]:
        rows = self.session.scalars(
            select(JournalLine)
            .where(JournalLine.account_id == account_id)
            .order_by(JournalLine.journal_entry_id, JournalLine.line_seq)
        )
        return [self._line_to_dto(row) for row in rows]

    def account_balance(self, account_id: int) -> Decimal:
        """Debits minus credits posted to an account."""
        total = Decimal("0")
        for line in self.lines_for_account(account_id):
            total += line.amount if line.side == LineSide.DEBIT else -line.amount
        return total

    @staticmethod
    def _line_to_dto(line: JournalLine) -> JournalLineDTO:
        return JournalLineDTO(
            id=line.id,
            account_id=line.account_id,
            side=LineSide(line.side),
            amount=line.amount,
            currency_code=line.currency_code,
            line_seq=line.line_seq,
            comments=line.comments,
        )

    def _to_dto(self, entry: JournalEntry) -> JournalEntryDTO:
        return JournalEntryDTO(
            id=entry.id,
            transaction_id=entry.transaction_id,
            office_id=entry.office_id,
            transaction_date=entry.transaction_date,
            currency_code=entry.currency_code,
            balance_status=entry.balance_status,
            is_opening_balance=entry.is_opening_balance,
            is_unidentified_entry=entry.is_unidentified_entry,
            comments=entry.comments,
            reference_number=entry.reference_number,
            lines=tuple(self._line_to_dto(line) for line in entry.lines),
        )
