"""
JournalValidator -- Pure journal entry validation and balancing.

Responsibility:
    Validates a JournalEntryRequest field by field and line by line,
    accumulates every violation, and classifies the entry's balance as
    BALANCED, UNBALANCED or EXEMPT.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Called by JournalEntryService before any account lookup.

Invariants enforced:
    - A non-opening entry carries at least one debit and one credit line.
    - Line amounts are non-negative (zero permitted) and fit the stored
      amount precision, so sums are exact.
    - Debit sum equals credit sum (exact Decimal equality) unless exempt.
    - All checks run; the error list is complete, never first-error-only.

Failure modes:
    - Never raises for bad input; returns JournalValidationResult.failure().
    - ``unwrap()`` converts a failure into one JournalValidationError.

Audit relevance:
    Every failed run logs one ``journal_validation_failed`` record with the
    offending parameter paths.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal, Inexact, localcontext

from ledger_kernel.domain.dtos import (
    BalanceStatus,
    ErrorKind,
    JournalEntryRequest,
    JournalLineRequest,
    LineSide,
    ParameterError,
    ValidatedEntry,
    ValidatedLine,
)
from ledger_kernel.domain.validation import (
    check_date,
    check_non_negative_amount,
    check_positive_int,
    check_text,
    parameter_error,
    parse_date,
    parse_decimal,
    parse_int,
    parse_text,
)
from ledger_kernel.exceptions import JournalValidationError
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.journal_validator")

JOURNAL_ENTRY_RESOURCE = "GLJournalEntry"

# 19 significant digits per amount leaves room for billions of lines.
_SUM_PRECISION = 38

# Stands in for an empty side so that emptiness is reported on the
# side's first account id.
_PLACEHOLDER_LINE = JournalLineRequest(gl_account_id=None, amount=Decimal("0"))


@dataclass(frozen=True)
class JournalValidationLimits:
    """
    Length and amount limits plus the error-code resource name.

    The amount limits match the NUMERIC(19, 6) journal line column: an
    amount that passes is stored without rounding.
    """

    comments_max_length: int = 500
    reference_number_max_length: int = 100
    amount_max_integer_digits: int = 13
    amount_max_decimal_places: int = 6
    resource: str = JOURNAL_ENTRY_RESOURCE


DEFAULT_LIMITS = JournalValidationLimits()


@dataclass(frozen=True)
class JournalValidationResult:
    """
    Outcome of validate_journal_entry().

    Contract:
        Exactly one of ``entry`` / ``errors`` is populated.

    Guarantees:
        - ``errors`` is always a tuple (never None), in check order.
        - bool(result) == result.is_valid for convenience.
    """

    entry: ValidatedEntry | None = None
    errors: tuple[ParameterError, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, entry: ValidatedEntry) -> JournalValidationResult:
        return cls(entry=entry, errors=())

    @classmethod
    def failure(cls, *errors: ParameterError) -> JournalValidationResult:
        return cls(entry=None, errors=tuple(errors))

    @property
    def is_valid(self) -> bool:
        return self.entry is not None and not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def unwrap(self) -> ValidatedEntry:
        """Return the validated entry or raise the aggregate error."""
        if self.entry is None:
            raise JournalValidationError(self.errors)
        return self.entry


def validate_journal_entry(
    request: JournalEntryRequest,
    limits: JournalValidationLimits = DEFAULT_LIMITS,
) -> JournalValidationResult:
    """Validate a journal entry request and classify its balance."""
    resource = limits.resource

    logger.debug(
        "journal_validation_started",
        extra={
            "debit_line_count": len(request.debits),
            "credit_line_count": len(request.credits),
            "is_opening_balance": request.is_opening_balance,
            "is_unidentified_entry": request.is_unidentified_entry,
        },
    )

    errors: list[ParameterError] = []
    errors.extend(validate_entry_fields(request, limits))

    credit_errors = validate_lines(
        "credits", request.credits, request.is_opening_balance, limits,
    )
    errors.extend(credit_errors)

    debit_errors = validate_lines(
        "debits", request.debits, request.is_opening_balance, limits,
    )
    errors.extend(debit_errors)

    if errors:
        return _fail(errors)

    debits = _typed_lines(LineSide.DEBIT, request.debits)
    credits = _typed_lines(LineSide.CREDIT, request.credits)
    debit_sum, credit_sum = compute_sums(debits, credits)
    status = classify_balance(debit_sum, credit_sum, request)

    if status is BalanceStatus.UNBALANCED:
        return _fail([_unbalanced_error(resource, debit_sum, credit_sum)])

    entry = ValidatedEntry(
        office_id=parse_int(request.office_id),
        transaction_date=parse_date(request.transaction_date),
        currency_code=parse_text(request.currency_code).upper(),
        debits=debits,
        credits=credits,
        debit_sum=debit_sum,
        credit_sum=credit_sum,
        balance_status=status,
        comments=parse_text(request.comments),
        reference_number=parse_text(request.reference_number),
        accounting_rule_id=parse_int(request.accounting_rule_id),
        payment_type_id=parse_int(request.payment_type_id),
        amount=parse_decimal(request.amount),
        is_opening_balance=request.is_opening_balance,
        is_unidentified_entry=request.is_unidentified_entry,
    )

    logger.info(
        "journal_validation_passed",
        extra={
            "office_id": entry.office_id,
            "currency": entry.currency_code,
            "line_count": len(entry.lines),
            "debit_sum": debit_sum,
            "credit_sum": credit_sum,
            "balance_status": status.value,
        },
    )
    return JournalValidationResult.ok(entry)


def validate_entry_fields(
    request: JournalEntryRequest,
    limits: JournalValidationLimits,
) -> list[ParameterError]:
    """Header-level checks, in report order."""
    resource = limits.resource
    errors: list[ParameterError] = []
    errors.extend(check_date(resource, "transactionDate", request.transaction_date))
    errors.extend(check_positive_int(resource, "officeId", request.office_id))
    errors.extend(
        check_text(resource, "currencyCode", request.currency_code, required=True)
    )
    errors.extend(
        check_text(
            resource, "comments", request.comments,
            max_length=limits.comments_max_length,
        )
    )
    errors.extend(
        check_text(
            resource, "referenceNumber", request.reference_number,
            max_length=limits.reference_number_max_length,
        )
    )
    errors.extend(
        check_positive_int(
            resource, "accountingRule", request.accounting_rule_id, required=False,
        )
    )
    errors.extend(
        check_positive_int(
            resource, "paymentTypeId", request.payment_type_id, required=False,
        )
    )
    errors.extend(
        check_non_negative_amount(
            resource, "amount", request.amount,
            required=False,
            max_integer_digits=limits.amount_max_integer_digits,
            max_decimal_places=limits.amount_max_decimal_places,
        )
    )
    return errors


def validate_lines(
    side: str,
    lines: Sequence[JournalLineRequest],
    is_opening_balance: bool,
    limits: JournalValidationLimits = DEFAULT_LIMITS,
) -> list[ParameterError]:
    """
    Check every line of one side.

    An empty side on a non-opening entry is checked as a single placeholder
    line, which reports ``<side>[0].glAccountId`` as missing.
    """
    if not lines:
        if is_opening_balance:
            return []
        lines = (_PLACEHOLDER_LINE,)

    resource = limits.resource
    errors: list[ParameterError] = []
    for index, line in enumerate(lines):
        prefix = f"{side}[{index}]"
        errors.extend(
            check_positive_int(resource, f"{prefix}.glAccountId", line.gl_account_id)
        )
        errors.extend(
            check_non_negative_amount(
                resource, f"{prefix}.amount", line.amount,
                max_integer_digits=limits.amount_max_integer_digits,
                max_decimal_places=limits.amount_max_decimal_places,
            )
        )
    return errors


def compute_sums(
    debits: Sequence[ValidatedLine],
    credits: Sequence[ValidatedLine],
) -> tuple[Decimal, Decimal]:
    """
    Exact Decimal sums of each side.

    Amounts are bounded by the validation limits, so the sums fit the
    working precision; any rounding raises Inexact instead of passing
    silently.
    """
    with localcontext() as ctx:
        ctx.prec = _SUM_PRECISION
        ctx.traps[Inexact] = True
        debit_sum = sum((line.amount for line in debits), Decimal("0"))
        credit_sum = sum((line.amount for line in credits), Decimal("0"))
    return debit_sum, credit_sum


def classify_balance(
    debit_sum: Decimal,
    credit_sum: Decimal,
    request: JournalEntryRequest,
) -> BalanceStatus:
    """
    Equal sums are BALANCED.  Unequal sums are EXEMPT for unidentified
    entries and for opening entries without lines; otherwise UNBALANCED.
    """
    if debit_sum == credit_sum:
        return BalanceStatus.BALANCED
    if request.is_unidentified_entry:
        return BalanceStatus.EXEMPT
    if request.is_opening_balance and not request.has_lines:
        return BalanceStatus.EXEMPT
    return BalanceStatus.UNBALANCED


def _typed_lines(
    side: LineSide,
    lines: Sequence[JournalLineRequest],
) -> tuple[ValidatedLine, ...]:
    return tuple(
        ValidatedLine(
            side=side,
            gl_account_id=parse_int(line.gl_account_id),
            amount=parse_decimal(line.amount),
            line_seq=index,
            comments=parse_text(line.comments),
        )
        for index, line in enumerate(lines)
    )


def _unbalanced_error(
    resource: str,
    debit_sum: Decimal,
    credit_sum: Decimal,
) -> ParameterError:
    return parameter_error(
        resource,
        "debits",
        ErrorKind.UNBALANCED_ENTRY,
        "sum.not.equal.to.credits.sum",
        f"Sum of debits ({debit_sum}) does not equal sum of credits ({credit_sum}).",
        details={"debit_sum": debit_sum, "credit_sum": credit_sum},
    )


def _fail(errors: list[ParameterError]) -> JournalValidationResult:
    logger.warning(
        "journal_validation_failed",
        extra={
            "error_count": len(errors),
            "parameters": [e.parameter for e in errors],
            "error_kinds": sorted({e.kind.value for e in errors}),
        },
    )
    return JournalValidationResult.failure(*errors)
