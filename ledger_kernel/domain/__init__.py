"""
Pure domain layer.

This package contains immutable data transfer objects and domain logic
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Configuration
- I/O other than logging
"""

from ledger_kernel.domain.change_tracker import (
    GL_ACCOUNT_FIELDS,
    AccountField,
    ChangeSet,
    FieldDescriptor,
    track_changes,
)
from ledger_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from ledger_kernel.domain.dtos import (
    BalanceStatus,
    ErrorKind,
    JournalEntryRequest,
    JournalLineRequest,
    LedgerAccountInfo,
    LineSide,
    ParameterError,
    ValidatedEntry,
    ValidatedLine,
)
from ledger_kernel.domain.hierarchy import (
    ROOT_HIERARCHY,
    compute_hierarchy,
    recompute_subtree,
)
from ledger_kernel.domain.journal_validator import (
    DEFAULT_LIMITS,
    JournalValidationLimits,
    JournalValidationResult,
    validate_journal_entry,
)

__all__ = [
    "AccountField",
    "BalanceStatus",
    "ChangeSet",
    "CurrencyInfo",
    "CurrencyRegistry",
    "DEFAULT_LIMITS",
    "ErrorKind",
    "FieldDescriptor",
    "GL_ACCOUNT_FIELDS",
    "JournalEntryRequest",
    "JournalLineRequest",
    "JournalValidationLimits",
    "JournalValidationResult",
    "LedgerAccountInfo",
    "LineSide",
    "ParameterError",
    "ROOT_HIERARCHY",
    "ValidatedEntry",
    "ValidatedLine",
    "compute_hierarchy",
    "recompute_subtree",
    "track_changes",
    "validate_journal_entry",
]
