"""ORM models for the ledger kernel."""

from ledger_kernel.models.account import (
    ROOT_HIERARCHY,
    AccountClassification,
    AccountUsage,
    LedgerAccount,
)
from ledger_kernel.models.journal import BalanceStatus, JournalEntry, JournalLine, LineSide

__all__ = [
    "LedgerAccount",
    "AccountClassification",
    "AccountUsage",
    "ROOT_HIERARCHY",
    "JournalEntry",
    "JournalLine",
    "LineSide",
    "BalanceStatus",
]
