"""
Module: ledger_kernel.models.journal
Responsibility: ORM persistence for posted journal entries and their lines.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - Debits == Credits for every non-exempt entry (checked by the journal
      validator before JournalEntryService writes any row; is_balanced is a
      read-side convenience).
    - transaction_id is unique (uq_journal_transaction_id).
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from ledger_kernel.models.account import LedgerAccount


class LineSide(str, Enum):
    """Which side of the entry this line is on."""

    DEBIT = "debit"
    CREDIT = "credit"


class BalanceStatus(str, Enum):
    """How the journal validator classified the entry's balance."""

    BALANCED = "balanced"
    UNBALANCED = "unbalanced"
    EXEMPT = "exempt"


class JournalEntry(TrackedBase):
    """
    Journal entry header -- a set of debit and credit lines posted on a
    transaction date for one office and currency.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        UniqueConstraint("transaction_id", name="uq_journal_transaction_id"),
        Index("idx_journal_office_date", "office_id", "transaction_date"),
    )

    transaction_id: Mapped[str] = mapped_column(String(50), nullable=False)

    office_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)

    currency_code: Mapped[str] = mapped_column(String(3), nullable=False)

    comments: Mapped[str | None] = mapped_column(String(500), nullable=True)

    reference_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    accounting_rule_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    payment_type_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    is_opening_balance: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    is_unidentified_entry: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    balance_status: Mapped[BalanceStatus] = mapped_column(String(20), nullable=False)

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        order_by="JournalLine.line_seq",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.transaction_id} office={self.office_id}>"

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

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


class JournalLine(TrackedBase):
    """A single debit or credit against one ledger account."""

    __tablename__ = "journal_lines"

    __table_args__ = (
        Index("idx_journal_line_entry", "journal_entry_id"),
        Index("idx_journal_line_account", "account_id"),
    )

    journal_entry_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    account_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("ledger_accounts.id"),
        nullable=False,
    )

    side: Mapped[LineSide] = mapped_column(String(10), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(19, 6), nullable=False)

    currency_code: Mapped[str] = mapped_column(String(3), nullable=False)

    line_seq: Mapped[int] = mapped_column(Integer, nullable=False)

    comments: Mapped[str | None] = mapped_column(String(500), nullable=True)

    entry: Mapped[JournalEntry] = relationship(back_populates="lines")

    account: Mapped["LedgerAccount"] = relationship(back_populates="journal_lines")

    def __repr__(self) -> str:
        return f"<JournalLine {self.side} {self.amount} {self.currency_code} -> {self.account_id}>"
