"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that flow through journal
    validation and posting: JournalLineRequest / JournalEntryRequest (raw
    input), ValidatedLine / ValidatedEntry (engine output), ParameterError
    (one violated constraint) and LedgerAccountInfo (account snapshot).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods are boundary converters invoked only from
    the service and selector layers.

Invariants enforced:
    - Requests are deep-immutable: line sequences are stored as tuples.
    - Request fields keep the raw values supplied by the caller so that the
      validator can report format errors instead of the constructor raising.
    - ValidatedEntry amounts are always Decimal (never float).

Data flow:
    command mapping -> JournalEntryRequest -> ValidatedEntry -> JournalEntry rows
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ledger_kernel.models.account import LedgerAccount


class LineSide(str, Enum):
    """Which side of the entry a line is on."""

    DEBIT = "debit"
    CREDIT = "credit"


class BalanceStatus(str, Enum):
    """
    Balance classification of a validated entry.

    BALANCED   -- debit sum equals credit sum.
    UNBALANCED -- sums differ and the entry is not exempt (never accepted).
    EXEMPT     -- sums differ but the entry is an unidentified entry or an
                  opening entry without lines.
    """

    BALANCED = "balanced"
    UNBALANCED = "unbalanced"
    EXEMPT = "exempt"


class ErrorKind(str, Enum):
    """
    Taxonomy of parameter-level validation failures.

    INVALID_REFERENCE is never produced by the journal validator; the
    posting service uses it for line accounts that cannot be posted to.
    """

    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_FORMAT = "invalid_format"
    OUT_OF_RANGE = "out_of_range"
    UNBALANCED_ENTRY = "unbalanced_entry"
    INVALID_REFERENCE = "invalid_reference"


@dataclass(frozen=True)
class ParameterError:
    """
    A single violated constraint.

    Contract:
        ``parameter`` is the path of the offending value (``officeId``,
        ``credits[2].amount``); ``kind`` is the taxonomy bucket;
        ``error_code`` is the machine-readable reason
        (``validation.msg.GLJournalEntry.credits[2].amount.not.zero.or.greater``).

    Non-goals:
        - Does NOT raise -- it IS the error representation.
    """

    parameter: str
    kind: ErrorKind
    error_code: str
    message: str
    value: Any = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{parameter, errorCode, message}`` API shape."""
        data: dict[str, Any] = {
            "parameter": self.parameter,
            "errorCode": self.error_code,
            "message": self.message,
            "kind": self.kind.value,
        }
        if self.value is not None:
            data["value"] = self.value
        if self.details:
            data["details"] = dict(self.details)
        return data


def _flag(value: Any) -> bool:
    """Only an explicit true value sets a flag; absent or null means false."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _lines_from_command(raw: Any) -> tuple[JournalLineRequest, ...]:
    """
    A side's lines.  A lone object is one line; any other non-list value
    becomes a single empty line so that the side is reported as malformed.
    """
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        return (JournalLineRequest.from_command(raw),)
    if not isinstance(raw, (list, tuple)):
        return (JournalLineRequest(),)
    return tuple(
        JournalLineRequest.from_command(item if isinstance(item, Mapping) else {})
        for item in raw
    )


@dataclass(frozen=True)
class JournalLineRequest:
    """
    One proposed debit or credit line, as supplied by the caller.

    ``gl_account_id`` and ``amount`` are kept raw (int / str / Decimal / None)
    and are checked by the journal validator.
    """

    gl_account_id: Any = None
    amount: Any = None
    comments: str | None = None

    @classmethod
    def from_command(cls, payload: Mapping[str, Any]) -> JournalLineRequest:
        return cls(
            gl_account_id=payload.get("glAccountId"),
            amount=payload.get("amount"),
            comments=payload.get("comments"),
        )


@dataclass(frozen=True)
class JournalEntryRequest:
    """
    Proposed journal entry.

    Contract:
        Constructed once from external input, validated once, then either
        rejected or handed to the posting service.  Immutable: ``debits``
        and ``credits`` are converted to tuples on construction.

    Guarantees:
        - Constructing a request never raises for bad field values.
        - ``is_opening_balance`` / ``is_unidentified_entry`` are plain bools.

    Non-goals:
        - The payment-detail strings (account/check/receipt/bank number,
          routing code) are carried through, not validated.
    """

    office_id: Any = None
    transaction_date: Any = None
    currency_code: Any = None
    debits: Sequence[JournalLineRequest] = field(default_factory=tuple)
    credits: Sequence[JournalLineRequest] = field(default_factory=tuple)
    comments: Any = None
    reference_number: Any = None
    accounting_rule_id: Any = None
    payment_type_id: Any = None
    amount: Any = None
    is_opening_balance: bool = False
    is_unidentified_entry: bool = False
    account_number: str | None = None
    check_number: str | None = None
    receipt_number: str | None = None
    bank_number: str | None = None
    routing_code: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "debits", tuple(self.debits or ()))
        object.__setattr__(self, "credits", tuple(self.credits or ()))
        object.__setattr__(self, "is_opening_balance", bool(self.is_opening_balance))
        object.__setattr__(self, "is_unidentified_entry", bool(self.is_unidentified_entry))

    @property
    def has_lines(self) -> bool:
        return bool(self.debits or self.credits)

    @classmethod
    def from_command(cls, payload: Mapping[str, Any]) -> JournalEntryRequest:
        """
        Build a request from a JSON-like command.

        The mapping uses the API parameter names (``officeId``,
        ``transactionDate``, ``accountingRule``, ``opening``, ...).  JSON
        should be parsed with ``parse_float=Decimal``; float amounts are
        reported as format errors by the validator.
        """
        return cls(
            office_id=payload.get("officeId"),
            transaction_date=payload.get("transactionDate"),
            currency_code=payload.get("currencyCode"),
            debits=_lines_from_command(payload.get("debits")),
            credits=_lines_from_command(payload.get("credits")),
            comments=payload.get("comments"),
            reference_number=payload.get("referenceNumber"),
            accounting_rule_id=payload.get("accountingRule"),
            payment_type_id=payload.get("paymentTypeId"),
            amount=payload.get("amount"),
            is_opening_balance=_flag(payload.get("opening")),
            is_unidentified_entry=_flag(payload.get("unidentifiedEntry")),
            account_number=payload.get("accountNumber"),
            check_number=payload.get("checkNumber"),
            receipt_number=payload.get("receiptNumber"),
            bank_number=payload.get("bankNumber"),
            routing_code=payload.get("routingCode"),
        )


@dataclass(frozen=True)
class ValidatedLine:
    """A line whose account id and amount passed validation."""

    side: LineSide
    gl_account_id: int
    amount: Decimal
    line_seq: int
    comments: str | None = None


@dataclass(frozen=True)
class ValidatedEntry:
    """
    Typed, accepted form of a JournalEntryRequest.

    Contract:
        Produced only by the journal validator.  Ready for the posting
        service, which still has to resolve the referenced accounts.

    Guarantees:
        - ``debit_sum`` / ``credit_sum`` are exact Decimal sums of the lines.
        - ``balance_status`` is BALANCED or EXEMPT, never UNBALANCED.
    """

    office_id: int
    transaction_date: date
    currency_code: str
    debits: tuple[ValidatedLine, ...]
    credits: tuple[ValidatedLine, ...]
    debit_sum: Decimal
    credit_sum: Decimal
    balance_status: BalanceStatus
    comments: str | None = None
    reference_number: str | None = None
    accounting_rule_id: int | None = None
    payment_type_id: int | None = None
    amount: Decimal | None = None
    is_opening_balance: bool = False
    is_unidentified_entry: bool = False

    @property
    def balance(self) -> Decimal:
        """Net balance (debits - credits); zero for a balanced entry."""
        return self.debit_sum - self.credit_sum

    @property
    def lines(self) -> tuple[ValidatedLine, ...]:
        """Debits then credits, in request order."""
        return self.debits + self.credits

    @property
    def account_ids(self) -> frozenset[int]:
        return frozenset(line.gl_account_id for line in self.lines)


@dataclass(frozen=True)
class LedgerAccountInfo:
    """
    Pure domain representation of a ledger account.

    Contract:
        Immutable snapshot of account state; selectors return this instead
        of ORM rows.
    """

    id: int
    name: str
    gl_code: str
    classification: int
    usage: int
    disabled: bool
    manual_entries_allowed: bool
    parent_id: int | None = None
    hierarchy: str | None = None
    currency_code: str | None = None
    description: str | None = None
    tag_id: int | None = None
    affects_loan: bool = False

    @classmethod
    def from_model(cls, model: LedgerAccount) -> LedgerAccountInfo:
        return cls(
            id=model.id,
            name=model.name,
            gl_code=model.gl_code,
            classification=model.classification,
            usage=model.usage,
            disabled=model.disabled,
            manual_entries_allowed=model.manual_entries_allowed,
            parent_id=model.parent_id,
            hierarchy=model.hierarchy,
            currency_code=model.currency_code,
            description=model.description,
            tag_id=model.tag_id,
            affects_loan=model.affects_loan,
        )
