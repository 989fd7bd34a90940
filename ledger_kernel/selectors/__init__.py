"""Selectors for the ledger kernel (read side)."""

from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.journal_selector import (
    JournalEntryDTO,
    JournalLineDTO,
    JournalSelector,
)

__all__ = [
    "AccountSelector",
    "JournalEntryDTO",
    "JournalLineDTO",
    "JournalSelector",
]
