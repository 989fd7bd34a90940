"""
Tests for LedgerAccountService.

Chart used throughout (see conftest.standard_accounts):

    Assets (HEADER, ".")
      Cash (DETAIL)
      Loan Portfolio (DETAIL)
    Liabilities (HEADER, ".")
      Savings Control (DETAIL)
"""

import pytest

from ledger_kernel.exceptions import (
    AccountCommandValidationError,
    AccountCurrencyMismatchError,
    AccountDisabledError,
    AccountHierarchyCycleError,
    AccountInUseError,
    AccountNotFoundError,
    DuplicateGLCodeError,
    HeaderAccountPostingError,
    InvalidParentAccountError,
    ManualEntriesNotAllowedError,
)
from ledger_kernel.models.account import AccountClassification, AccountUsage
from tests.conftest import make_request


class TestCreateAccount:

    def test_top_level_account_gets_root_path(self, standard_accounts):
        assert standard_accounts["assets"].hierarchy == "."
        assert standard_accounts["assets"].parent_id is None

    def test_child_path_uses_own_id(self, standard_accounts):
        cash = standard_accounts["cash"]
        assert cash.parent_id == standard_accounts["assets"].id
        assert cash.hierarchy == f".{cash.id}."

    def test_grandchild_path_extends_parent(self, create_account, standard_accounts):
        receivables = create_account(
            "1300", "Receivables", usage=AccountUsage.HEADER,
            parent_id=standard_accounts["assets"].id,
        )
        interest = create_account("1310", "Interest Receivable", parent_id=receivables.id)

        assert interest.hierarchy == f".{receivables.id}.{interest.id}."

    def test_defaults_and_normalisation(self, create_account):
        account = create_account("1400", "Mobile Money", currencyCode="kes")

        assert account.currency_code == "KES"
        assert account.disabled is False
        assert account.manual_entries_allowed is True
        assert account.affects_loan is False
        assert account.classification == AccountClassification.ASSET

    def test_parent_must_be_header(self, create_account, standard_accounts):
        with pytest.raises(InvalidParentAccountError) as exc_info:
            create_account("1110", "Petty Cash", parent_id=standard_accounts["cash"].id)
        assert exc_info.value.parent_id == standard_accounts["cash"].id

    def test_missing_parent(self, create_account):
        with pytest.raises(AccountNotFoundError):
            create_account("1110", "Petty Cash", parent_id=999)

    def test_duplicate_gl_code(self, create_account, standard_accounts):
        with pytest.raises(DuplicateGLCodeError) as exc_info:
            create_account("1100", "Second Cash")
        assert exc_info.value.gl_code == "1100"

    def test_invalid_command_lists_every_error(self, account_service, test_actor_id):
        with pytest.raises(AccountCommandValidationError) as exc_info:
            account_service.create_account({"type": 9}, test_actor_id)

        assert exc_info.value.parameters == ("name", "glCode", "type", "usage")

    def test_creation_logged(self, create_account, captured_logs):
        account = create_account("1500", "Fixed Assets", usage=AccountUsage.HEADER)

        records = [r for r in captured_logs() if r["message"] == "ledger_account_created"]
        assert records[-1]["account_id"] == account.id
        assert records[-1]["hierarchy"] == "."


class TestUpdateAccount:

    def test_returns_only_changed_parameters(self, account_service, standard_accounts, test_actor_id):
        cash = standard_accounts["cash"]

        changes = account_service.update_account(
            cash.id, {"name": "Cash", "disabled": True}, test_actor_id,
        )

        assert changes.as_dict() == {"disabled": True}
        assert account_service.get_account(cash.id).disabled is True

    def test_unchanged_update_is_empty(self, account_service, standard_accounts, test_actor_id):
        cash = standard_accounts["cash"]
        changes = account_service.update_account(cash.id, {"glCode": "1100"}, test_actor_id)
        assert not changes

    def test_reparent_recomputes_descendants(
        self, account_service, create_account, standard_accounts, test_actor_id,
    ):
        group = create_account(
            "1300", "Receivables", usage=AccountUsage.HEADER,
            parent_id=standard_accounts["assets"].id,
        )
        leaf = create_account("1310", "Interest Receivable", parent_id=group.id)
        target = create_account(
            "2200", "Other Liabilities",
            classification=AccountClassification.LIABILITY,
            usage=AccountUsage.HEADER,
            parent_id=standard_accounts["liabilities"].id,
        )

        changes = account_service.update_account(group.id, {"parentId": target.id}, test_actor_id)

        assert changes.as_dict() == {"parentId": target.id}
        moved = account_service.get_account(group.id)
        assert moved.hierarchy == f".{target.id}.{group.id}."
        assert account_service.get_account(leaf.id).hierarchy == (
            f".{target.id}.{group.id}.{leaf.id}."
        )

    def test_move_to_top_level(self, account_service, create_account, standard_accounts, test_actor_id):
        group = create_account(
            "1300", "Receivables", usage=AccountUsage.HEADER,
            parent_id=standard_accounts["assets"].id,
        )
        leaf = create_account("1310", "Interest Receivable", parent_id=group.id)

        account_service.update_account(group.id, {"parentId": None}, test_actor_id)

        assert account_service.get_account(group.id).hierarchy == "."
        assert account_service.get_account(leaf.id).hierarchy == f".{leaf.id}."

    def test_cycle_rejected(self, account_service, create_account, standard_accounts, test_actor_id):
        assets = standard_accounts["assets"]
        group = create_account("1300", "Receivables", usage=AccountUsage.HEADER, parent_id=assets.id)

        with pytest.raises(AccountHierarchyCycleError):
            account_service.update_account(assets.id, {"parentId": group.id}, test_actor_id)

    def test_self_parent_rejected(self, account_service, standard_accounts, test_actor_id):
        assets = standard_accounts["assets"]
        with pytest.raises(AccountHierarchyCycleError):
            account_service.update_account(assets.id, {"parentId": assets.id}, test_actor_id)

    def test_new_parent_must_be_header(self, account_service, standard_accounts, test_actor_id):
        with pytest.raises(InvalidParentAccountError):
            account_service.update_account(
                standard_accounts["loans"].id,
                {"parentId": standard_accounts["cash"].id},
                test_actor_id,
            )

    def test_duplicate_gl_code_on_update(self, account_service, standard_accounts, test_actor_id):
        with pytest.raises(DuplicateGLCodeError):
            account_service.update_account(
                standard_accounts["cash"].id, {"glCode": "1200"}, test_actor_id,
            )

    def test_cannot_clear_name(self, account_service, standard_accounts, test_actor_id):
        with pytest.raises(AccountCommandValidationError) as exc_info:
            account_service.update_account(standard_accounts["cash"].id, {"name": None}, test_actor_id)
        assert exc_info.value.parameters == ("name",)

    def test_header_with_children_keeps_usage(self, account_service, standard_accounts, test_actor_id):
        with pytest.raises(AccountInUseError):
            account_service.update_account(
                standard_accounts["assets"].id, {"usage": int(AccountUsage.DETAIL)}, test_actor_id,
            )

    def test_detail_with_lines_keeps_usage(
        self, account_service, journal_service, standard_accounts, test_actor_id,
    ):
        cash, savings = standard_accounts["cash"], standard_accounts["savings"]
        journal_service.post(
            make_request(debits=[(cash.id, "50")], credits=[(savings.id, "50")]), test_actor_id,
        )

        with pytest.raises(AccountInUseError):
            account_service.update_account(cash.id, {"usage": int(AccountUsage.HEADER)}, test_actor_id)

    def test_unused_detail_can_become_header(self, account_service, standard_accounts, test_actor_id):
        loans = standard_accounts["loans"]

        changes = account_service.update_account(
            loans.id, {"usage": int(AccountUsage.HEADER)}, test_actor_id,
        )

        assert changes.get("usage") == AccountUsage.HEADER

    def test_unknown_account(self, account_service, test_actor_id):
        with pytest.raises(AccountNotFoundError):
            account_service.update_account(404, {"disabled": True}, test_actor_id)


class TestDeleteAccount:

    def test_delete_unused_leaf(self, account_service, standard_accounts, account_selector):
        loans = standard_accounts["loans"]

        account_service.delete_account(loans.id)

        assert account_selector.get(loans.id) is None

    def test_header_with_children_cannot_be_deleted(self, account_service, standard_accounts):
        with pytest.raises(AccountInUseError) as exc_info:
            account_service.delete_account(standard_accounts["assets"].id)
        assert "child" in exc_info.value.reason

    def test_account_with_lines_cannot_be_deleted(
        self, account_service, journal_service, standard_accounts, test_actor_id,
    ):
        cash, savings = standard_accounts["cash"], standard_accounts["savings"]
        journal_service.post(
            make_request(debits=[(cash.id, "10")], credits=[(savings.id, "10")]), test_actor_id,
        )

        with pytest.raises(AccountInUseError):
            account_service.delete_account(cash.id)


class TestResolvePostable:

    def test_detail_account_resolves(self, account_service, standard_accounts):
        info = account_service.resolve_postable(standard_accounts["cash"].id)
        assert info.gl_code == "1100"

    def test_unknown_account(self, account_service):
        with pytest.raises(AccountNotFoundError) as exc_info:
            account_service.resolve_postable(12345)
        assert exc_info.value.account_id == 12345

    def test_header_account(self, account_service, standard_accounts):
        with pytest.raises(HeaderAccountPostingError):
            account_service.resolve_postable(standard_accounts["assets"].id)

    def test_disabled_account(self, account_service, create_account):
        account = create_account("1900", "Closed Branch Cash", disabled=True)
        with pytest.raises(AccountDisabledError):
            account_service.resolve_postable(account.id)

    def test_manual_entries_flag(self, account_service, create_account):
        account = create_account("1910", "Suspense", manualEntriesAllowed=False)

        with pytest.raises(ManualEntriesNotAllowedError):
            account_service.resolve_postable(account.id)
        assert account_service.resolve_postable(account.id, manual_entry=False).id == account.id

    def test_currency_restriction(self, account_service, create_account):
        account = create_account("1920", "Shilling Float", currencyCode="KES")

        with pytest.raises(AccountCurrencyMismatchError) as exc_info:
            account_service.resolve_postable(account.id, currency_code="USD")
        assert exc_info.value.account_currency == "KES"
        assert account_service.resolve_postable(account.id, currency_code="KES").id == account.id
