"""
Tests for JournalEntryService.

Posting runs the pure validator, then the database-backed checks
(currency known, every line account postable), and only then writes.
"""

from decimal import Decimal

import pytest

from ledger_kernel.domain.dtos import BalanceStatus, ErrorKind, JournalEntryRequest
from ledger_kernel.exceptions import InvalidCurrencyError, JournalValidationError
from ledger_kernel.models.journal import LineSide
from tests.conftest import make_request


class TestPostBalancedEntry:

    def test_persists_one_entry_with_all_lines(
        self, journal_service, journal_selector, standard_accounts, test_actor_id,
    ):
        cash = standard_accounts["cash"]
        loans = standard_accounts["loans"]
        savings = standard_accounts["savings"]
        request = make_request(
            debits=[(cash.id, "60.00"), (loans.id, "40.00")],
            credits=[(savings.id, "100.00")],
            comments="Opening float",
        )

        posted = journal_service.post(request, test_actor_id)

        assert posted.balance_status is BalanceStatus.BALANCED
        assert posted.debit_sum == posted.credit_sum == Decimal("100.00")
        assert posted.line_count == 3
        assert posted.transaction_id.startswith("M")

        entry = journal_selector.get_entry(posted.entry_id)
        assert entry is not None
        assert entry.transaction_id == posted.transaction_id
        assert entry.comments == "Opening float"
        assert [line.side for line in entry.lines] == [
            LineSide.DEBIT, LineSide.DEBIT, LineSide.CREDIT,
        ]
        assert [line.line_seq for line in entry.lines] == [0, 1, 2]
        assert entry.total_debits == entry.total_credits == Decimal("100")
        assert journal_selector.count_entries() == 1

    def test_system_postings_use_system_prefix(self, journal_service, standard_accounts, test_actor_id):
        request = make_request(
            debits=[(standard_accounts["cash"].id, "5")],
            credits=[(standard_accounts["savings"].id, "5")],
        )

        posted = journal_service.post(request, test_actor_id, manual_entry=False)

        assert posted.transaction_id.startswith("S")

    def test_from_command_payload(self, journal_service, journal_selector, standard_accounts, test_actor_id):
        payload = {
            "officeId": 1,
            "transactionDate": "2024-01-10",
            "currencyCode": "usd",
            "debits": [{"glAccountId": standard_accounts["cash"].id, "amount": "100.00"}],
            "credits": [{"glAccountId": standard_accounts["savings"].id, "amount": "100.00"}],
            "referenceNumber": "RCPT-001",
        }

        posted = journal_service.post(JournalEntryRequest.from_command(payload), test_actor_id)

        entry = journal_selector.get_by_transaction_id(posted.transaction_id)
        assert entry.currency_code == "USD"
        assert entry.reference_number == "RCPT-001"

    def test_posting_logged(self, journal_service, standard_accounts, test_actor_id, captured_logs):
        request = make_request(
            debits=[(standard_accounts["cash"].id, "1")],
            credits=[(standard_accounts["savings"].id, "1")],
        )

        posted = journal_service.post(request, test_actor_id)

        records = [r for r in captured_logs() if r["message"] == "journal_entry_posted"]
        assert len(records) == 1
        assert records[0]["transaction_id"] == posted.transaction_id
        assert records[0]["entry_id"] == str(posted.entry_id)
        assert records[0]["balance_status"] == "balanced"


class TestRejectedEntries:

    def test_unbalanced_entry_raises_with_sums(self, journal_service, journal_selector, standard_accounts, test_actor_id):
        request = make_request(
            debits=[(standard_accounts["cash"].id, "100.00")],
            credits=[(standard_accounts["savings"].id, "90.00")],
        )

        with pytest.raises(JournalValidationError) as exc_info:
            journal_service.post(request, test_actor_id)

        (error,) = exc_info.value.errors
        assert error.kind is ErrorKind.UNBALANCED_ENTRY
        assert error.details == {"debit_sum": Decimal("100.00"), "credit_sum": Decimal("90.00")}
        assert journal_selector.count_entries() == 0

    def test_amounts_finer_than_storage_rejected(
        self, journal_service, journal_selector, standard_accounts, test_actor_id,
    ):
        cash, loans = standard_accounts["cash"].id, standard_accounts["loans"].id
        request = make_request(
            debits=[(cash, "0.0000004"), (loans, "0.0000004")],
            credits=[(standard_accounts["savings"].id, "0.0000008")],
        )

        with pytest.raises(JournalValidationError) as exc_info:
            journal_service.post(request, test_actor_id)

        errors = exc_info.value.errors
        assert [e.parameter for e in errors] == [
            "credits[0].amount", "debits[0].amount", "debits[1].amount",
        ]
        assert all(e.kind is ErrorKind.OUT_OF_RANGE for e in errors)
        assert journal_selector.count_entries() == 0

    def test_six_place_amounts_stored_exactly(
        self, journal_service, journal_selector, standard_accounts, test_actor_id,
    ):
        cash = standard_accounts["cash"].id
        request = make_request(
            debits=[(cash, "0.000004"), (cash, "0.000004")],
            credits=[(standard_accounts["savings"].id, "0.000008")],
        )

        journal_service.post(request, test_actor_id)

        assert journal_selector.account_balance(cash) == Decimal("0.000008")

    def test_every_bad_account_reported_and_nothing_written(
        self, journal_service, journal_selector, create_account, standard_accounts, test_actor_id,
    ):
        disabled = create_account("1900", "Dormant", disabled=True)
        request = make_request(
            debits=[(standard_accounts["assets"].id, "30"), (disabled.id, "20")],
            credits=[(9999, "50")],
        )

        with pytest.raises(JournalValidationError) as exc_info:
            journal_service.post(request, test_actor_id)

        errors = exc_info.value.errors
        assert [e.parameter for e in errors] == [
            "credits[0].glAccountId",
            "debits[0].glAccountId",
            "debits[1].glAccountId",
        ]
        assert all(e.kind is ErrorKind.INVALID_REFERENCE for e in errors)
        assert [e.details["error_code"] for e in errors] == [
            "ACCOUNT_NOT_FOUND",
            "HEADER_ACCOUNT_POSTING",
            "ACCOUNT_DISABLED",
        ]
        assert errors[0].error_code == (
            "validation.msg.GLJournalEntry.credits[0].glAccountId.account.not.found"
        )
        assert journal_selector.count_entries() == 0

    def test_unknown_currency(self, journal_service, standard_accounts, test_actor_id):
        request = make_request(
            debits=[(standard_accounts["cash"].id, "1")],
            credits=[(standard_accounts["savings"].id, "1")],
            currency_code="XYZ",
        )

        with pytest.raises(InvalidCurrencyError) as exc_info:
            journal_service.post(request, test_actor_id)
        assert exc_info.value.currency == "XYZ"

    def test_manual_entry_refused_by_account(self, journal_service, create_account, standard_accounts, test_actor_id):
        suspense = create_account("1910", "Suspense", manualEntriesAllowed=False)
        request = make_request(
            debits=[(suspense.id, "5")],
            credits=[(standard_accounts["savings"].id, "5")],
        )

        with pytest.raises(JournalValidationError) as exc_info:
            journal_service.post(request, test_actor_id)
        assert exc_info.value.errors[0].details["error_code"] == "MANUAL_ENTRIES_NOT_ALLOWED"

        posted = journal_service.post(request, test_actor_id, manual_entry=False)
        assert posted.line_count == 2

    def test_currency_restricted_account(self, journal_service, create_account, standard_accounts, test_actor_id):
        float_account = create_account("1920", "Shilling Float", currencyCode="KES")
        request = make_request(
            debits=[(float_account.id, "5")],
            credits=[(standard_accounts["savings"].id, "5")],
        )

        with pytest.raises(JournalValidationError) as exc_info:
            journal_service.post(request, test_actor_id)
        assert exc_info.value.errors[0].details["error_code"] == "ACCOUNT_CURRENCY_MISMATCH"

    def test_rejection_serializes_to_api_shape(self, journal_service, test_actor_id):
        with pytest.raises(JournalValidationError) as exc_info:
            journal_service.post(make_request(), test_actor_id)

        body = exc_info.value.to_dict()
        assert body["code"] == "VALIDATION_ERRORS_EXIST"
        assert [e["parameter"] for e in body["errors"]] == [
            "credits[0].glAccountId",
            "debits[0].glAccountId",
        ]


class TestExemptEntries:

    def test_unidentified_unbalanced_entry_is_posted_exempt(
        self, journal_service, journal_selector, standard_accounts, test_actor_id,
    ):
        request = make_request(
            debits=[(standard_accounts["cash"].id, "75")],
            credits=[(standard_accounts["savings"].id, "70")],
            is_unidentified_entry=True,
        )

        posted = journal_service.post(request, test_actor_id)

        assert posted.balance_status is BalanceStatus.EXEMPT
        entry = journal_selector.get_entry(posted.entry_id)
        assert entry.balance_status == "exempt"
        assert entry.is_unidentified_entry is True
        assert journal_selector.account_balance(standard_accounts["cash"].id) == Decimal("75")
