"""
Typed Exception Hierarchy for the Ledger Kernel.

Every error has a typed class (catch by type, never by message), a
class-level ``code`` (machine-readable, API-safe) and structured attributes
(not just a message string).

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- ValidationFailedError
    |   +-- JournalValidationError
    |   +-- AccountCommandValidationError
    |
    +-- AccountError
    |   +-- AccountNotFoundError
    |   +-- AccountDisabledError
    |   +-- HeaderAccountPostingError
    |   +-- ManualEntriesNotAllowedError
    |   +-- AccountCurrencyMismatchError
    |   +-- AccountHierarchyCycleError
    |   +-- InvalidParentAccountError
    |   +-- DuplicateGLCodeError
    |   +-- AccountInUseError
    |
    +-- CurrencyError
        +-- InvalidCurrencyError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                          | When Raised
-------------|-------------------------------|-----------------------------------
Validation   | VALIDATION_ERRORS_EXIST       | One or more parameter errors
             | ACCOUNT_COMMAND_INVALID       | GL account command is malformed
-------------|-------------------------------|-----------------------------------
Account      | ACCOUNT_NOT_FOUND             | Account id doesn't exist
             | ACCOUNT_DISABLED              | Posting to a disabled account
             | HEADER_ACCOUNT_POSTING        | Posting to a HEADER account
             | MANUAL_ENTRIES_NOT_ALLOWED    | Account refuses manual entries
             | ACCOUNT_CURRENCY_MISMATCH     | Entry currency != account currency
             | ACCOUNT_HIERARCHY_CYCLE       | Account would become own ancestor
             | INVALID_PARENT_ACCOUNT        | Parent is not a HEADER account
             | DUPLICATE_GL_CODE             | GL code already in use
             | ACCOUNT_IN_USE                | Usage change or delete of a used account
-------------|-------------------------------|-----------------------------------
Currency     | INVALID_CURRENCY              | Not a known ISO 4217 code

Pure layers (domain/) never raise these for business-rule violations; they
return result objects.  Services raise them.  The only signal surfaced for
request validation is the aggregate ``JournalValidationError`` carrying the
complete error list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ledger_kernel.domain.dtos import ParameterError


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must define a ``code`` class attribute.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Validation exceptions


class ValidationFailedError(LedgerKernelError):
    """Base exception for aggregated parameter validation failures."""

    code: str = "VALIDATION_FAILED"
    global_message_code: str = "validation.msg.validation.errors.exist"

    def __init__(self, errors: tuple[ParameterError, ...] | list[ParameterError]):
        self.errors = tuple(errors)
        super().__init__(
            f"Validation errors exist: {len(self.errors)} error(s) "
            f"[{', '.join(e.parameter for e in self.errors)}]"
        )

    @property
    def parameters(self) -> tuple[str, ...]:
        """Parameter paths of all errors, in report order."""
        return tuple(e.parameter for e in self.errors)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{errorCode, errors[]}`` API shape."""
        return {
            "code": self.code,
            "globalMessageCode": self.global_message_code,
            "defaultUserMessage": "Validation errors exist.",
            "errors": [e.to_dict() for e in self.errors],
        }


class JournalValidationError(ValidationFailedError):
    """A journal entry request failed validation (aggregate of all errors)."""

    code: str = "VALIDATION_ERRORS_EXIST"


class AccountCommandValidationError(ValidationFailedError):
    """A GL account create/update command failed validation."""

    code: str = "ACCOUNT_COMMAND_INVALID"


# Account exceptions


class AccountError(LedgerKernelError):
    """Base exception for ledger account errors."""

    code: str = "ACCOUNT_ERROR"


class AccountNotFoundError(AccountError):
    """Ledger account with given id was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Ledger account not found: {account_id}")


class AccountDisabledError(AccountError):
    """Posting targeted a disabled account."""

    code: str = "ACCOUNT_DISABLED"

    def __init__(self, account_id: int, gl_code: str):
        self.account_id = account_id
        self.gl_code = gl_code
        super().__init__(f"Ledger account {gl_code} ({account_id}) is disabled")


class HeaderAccountPostingError(AccountError):
    """Posting targeted a HEADER (aggregation-only) account."""

    code: str = "HEADER_ACCOUNT_POSTING"

    def __init__(self, account_id: int, gl_code: str):
        self.account_id = account_id
        self.gl_code = gl_code
        super().__init__(
            f"Ledger account {gl_code} ({account_id}) is a header account "
            "and cannot be posted to"
        )


class ManualEntriesNotAllowedError(AccountError):
    """Manual journal entries are not allowed on the account."""

    code: str = "MANUAL_ENTRIES_NOT_ALLOWED"

    def __init__(self, account_id: int, gl_code: str):
        self.account_id = account_id
        self.gl_code = gl_code
        super().__init__(
            f"Manual journal entries are not allowed on account {gl_code} ({account_id})"
        )


class AccountCurrencyMismatchError(AccountError):
    """Entry currency differs from the account's currency restriction."""

    code: str = "ACCOUNT_CURRENCY_MISMATCH"

    def __init__(self, account_id: int, account_currency: str, entry_currency: str):
        self.account_id = account_id
        self.account_currency = account_currency
        self.entry_currency = entry_currency
        super().__init__(
            f"Account {account_id} is restricted to {account_currency}, "
            f"entry is in {entry_currency}"
        )


class AccountHierarchyCycleError(AccountError):
    """Re-parenting would make an account its own ancestor."""

    code: str = "ACCOUNT_HIERARCHY_CYCLE"

    def __init__(self, account_id: int, parent_id: int):
        self.account_id = account_id
        self.parent_id = parent_id
        super().__init__(
            f"Account {account_id} cannot be placed under {parent_id}: "
            "it would become its own ancestor"
        )


class InvalidParentAccountError(AccountError):
    """The proposed parent cannot hold children."""

    code: str = "INVALID_PARENT_ACCOUNT"

    def __init__(self, parent_id: int, reason: str):
        self.parent_id = parent_id
        self.reason = reason
        super().__init__(f"Invalid parent account {parent_id}: {reason}")


class DuplicateGLCodeError(AccountError):
    """GL code is already used by another account."""

    code: str = "DUPLICATE_GL_CODE"

    def __init__(self, gl_code: str):
        self.gl_code = gl_code
        super().__init__(f"GL code already in use: {gl_code}")


class AccountInUseError(AccountError):
    """The account has children or journal lines that forbid the change."""

    code: str = "ACCOUNT_IN_USE"

    def __init__(self, account_id: int, reason: str):
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Ledger account {account_id} is in use: {reason}")


# Currency exceptions


class CurrencyError(LedgerKernelError):
    """Base exception for currency errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency code is not a known ISO 4217 code."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: {currency!r}")
