"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for the chart of accounts -- the target of
    every journal line.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - gl_code is unique (uq_ledger_account_gl_code).
    - hierarchy is the dot-delimited ancestor id chain (".", ".5.", ".5.7.");
      it is recomputed by LedgerAccountService whenever parent_id changes.
    - A HEADER account is never the target of a posting line (enforced by
      LedgerAccountService.resolve_postable, not by this model).

Audit relevance:
    Account rows define the structure of the general ledger.  The hierarchy
    column lets subtree queries run as a single prefix match.
"""

from enum import IntEnum
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase

if TYPE_CHECKING:
    from ledger_kernel.models.journal import JournalLine


class AccountClassification(IntEnum):
    """Financial statement classification of an account."""

    ASSET = 1
    LIABILITY = 2
    EQUITY = 3
    INCOME = 4
    EXPENSE = 5


class AccountUsage(IntEnum):
    """Whether an account is postable (DETAIL) or aggregation-only (HEADER)."""

    DETAIL = 1
    HEADER = 2


ROOT_HIERARCHY = "."


class LedgerAccount(TrackedBase):
    """
    Chart of accounts entry -- a single node in the general ledger tree.

    Contract:
        The parent is held as an id (parent_id); children are found by
        querying parent_id, never embedded.  The hierarchy path is derived
        from the parent's path plus this account's id.

    Guarantees:
        - gl_code is unique and non-null.
        - classification is an AccountClassification value.
        - usage is an AccountUsage value.
    """

    __tablename__ = "ledger_accounts"

    __table_args__ = (
        UniqueConstraint("gl_code", name="uq_ledger_account_gl_code"),
        Index("idx_ledger_account_parent", "parent_id"),
        Index("idx_ledger_account_hierarchy", "hierarchy"),
    )

    name: Mapped[str] = mapped_column(String(45), nullable=False)

    gl_code: Mapped[str] = mapped_column(String(100), nullable=False)

    parent_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("ledger_accounts.id"),
        nullable=True,
    )

    hierarchy: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Currency restriction (null = any currency)
    currency_code: Mapped[str | None] = mapped_column(String(3), nullable=True)

    classification: Mapped[int] = mapped_column(Integer, nullable=False)

    usage: Mapped[int] = mapped_column(Integer, nullable=False)

    disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    manual_entries_allowed: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    tag_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    affects_loan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    journal_lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="account",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.gl_code}: {self.name}>"

    @property
    def is_header_account(self) -> bool:
        return self.usage == AccountUsage.HEADER

    @property
    def is_detail_account(self) -> bool:
        return self.usage == AccountUsage.DETAIL
