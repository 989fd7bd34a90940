"""Services for the ledger kernel (write side)."""

from ledger_kernel.services.collection_sheet_service import (
    CollectionSheetCommand,
    CollectionSheetResult,
    CollectionSheetService,
    DepositOutcome,
    DepositStatus,
    MandatorySavingsDeposit,
)
from ledger_kernel.services.journal_entry_service import (
    JournalEntryService,
    PostedJournalEntry,
)
from ledger_kernel.services.ledger_account_service import LedgerAccountService

__all__ = [
    "CollectionSheetCommand",
    "CollectionSheetResult",
    "CollectionSheetService",
    "DepositOutcome",
    "DepositStatus",
    "JournalEntryService",
    "LedgerAccountService",
    "MandatorySavingsDeposit",
    "PostedJournalEntry",
]
