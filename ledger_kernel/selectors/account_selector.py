"""
Module: ledger_kernel.selectors.account_selector
Responsibility: Read-only queries over the chart of accounts.
Architecture position: Kernel > Selectors.

Subtree queries use the hierarchy path column as a prefix match.  Every
top-level account shares the root path ``"."``, so the subtree of a
top-level account is assembled from the subtrees of its direct children.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.domain.dtos import LedgerAccountInfo
from ledger_kernel.models.account import ROOT_HIERARCHY, LedgerAccount
from ledger_kernel.selectors.base import BaseSelector


class AccountSelector(BaseSelector[LedgerAccount]):
    """Selector for ledger account queries."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get(self, account_id: int) -> LedgerAccountInfo | None:
        account = self.session.get(LedgerAccount, account_id)
        return LedgerAccountInfo.from_model(account) if account else None

    def get_by_gl_code(self, gl_code: str) -> LedgerAccountInfo | None:
        account = self.session.scalars(
            select(LedgerAccount).where(LedgerAccount.gl_code == gl_code)
        ).first()
        return LedgerAccountInfo.from_model(account) if account else None

    def children_of(self, account_id: int) -> list[LedgerAccountInfo]:
        """Direct children, in id order."""
        rows = self.session.scalars(
            select(LedgerAccount)
            .where(LedgerAccount.parent_id == account_id)
            .order_by(LedgerAccount.id)
        )
        return [LedgerAccountInfo.from_model(row) for row in rows]

    def subtree_of(self, account_id: int) -> list[LedgerAccountInfo]:
        """
        All descendants of an account (the account itself excluded),
        ordered by hierarchy path then id.

        Returns an empty list for an unknown account.
        """
        account = self.session.get(LedgerAccount, account_id)
        if account is None or account.hierarchy is None:
            return []

        if account.hierarchy != ROOT_HIERARCHY:
            prefixes = [account.hierarchy]
        else:
            children = self.children_of(account_id)
            if not children:
                return []
            prefixes = [child.hierarchy for child in children if child.hierarchy]

        found: dict[int, LedgerAccount] = {}
        for prefix in prefixes:
            rows = self.session.scalars(
                select(LedgerAccount).where(
                    LedgerAccount.hierarchy.startswith(prefix, autoescape=True),
                    LedgerAccount.id != account_id,
                )
            )
            for row in rows:
                found[row.id] = row

        ordered = sorted(found.values(), key=lambda row: (row.hierarchy or "", row.id))
        return [LedgerAccountInfo.from_model(row) for row in ordered]

    def top_level(self) -> list[LedgerAccountInfo]:
        rows = self.session.scalars(
            select(LedgerAccount)
            .where(LedgerAccount.parent_id.is_(None))
            .order_by(LedgerAccount.id)
        )
        return [LedgerAccountInfo.from_model(row) for row in rows]
