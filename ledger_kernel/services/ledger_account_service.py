"""
LedgerAccountService -- Chart of accounts maintenance and posting lookup.

Responsibility:
    Creates, updates, re-parents and deletes GL accounts, keeps their
    hierarchy paths consistent, and resolves line accounts for posting.

Architecture position:
    Kernel > Services -- imperative shell.
    Validation and path computation are delegated to the pure domain
    (account_command, change_tracker, hierarchy); this service owns the
    database reads and writes.

Invariants enforced:
    - A parent account must exist and be a HEADER account.
    - An account can never become its own ancestor.
    - After a re-parent, the account and every descendant carry paths
      derived from the new parent.
    - A HEADER account, a disabled account, and (for manual entries) an
      account refusing manual entries are never resolved as postable.

Failure modes:
    - AccountCommandValidationError: malformed create/update command.
    - AccountNotFoundError / InvalidParentAccountError /
      AccountHierarchyCycleError / DuplicateGLCodeError / AccountInUseError.
    - AccountDisabledError / HeaderAccountPostingError /
      ManualEntriesNotAllowedError / AccountCurrencyMismatchError from
      resolve_postable().
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.account_command import validate_account_command
from ledger_kernel.domain.change_tracker import (
    GL_ACCOUNT_FIELDS,
    AccountField,
    ChangeSet,
    track_changes,
)
from ledger_kernel.domain.dtos import LedgerAccountInfo
from ledger_kernel.domain.hierarchy import compute_hierarchy, recompute_subtree
from ledger_kernel.domain.validation import parse_bool, parse_int, parse_text
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
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import (
    AccountClassification,
    AccountUsage,
    LedgerAccount,
)
from ledger_kernel.models.journal import JournalLine
from ledger_kernel.services.base import BaseService

logger = get_logger("services.ledger_account")

_CLASSIFICATIONS = [c.value for c in AccountClassification]
_USAGES = [u.value for u in AccountUsage]


class LedgerAccountService(BaseService[LedgerAccount]):
    """
    Service for GL account lifecycle and lookup.

    Usage:
        service = LedgerAccountService(session)
        cash = service.create_account(
            {"name": "Cash", "glCode": "1100", "type": 1, "usage": 1},
            actor_id=1,
        )
        changes = service.update_account(cash.id, {"disabled": True}, actor_id=1)
    """

    def __init__(self, session: Session):
        super().__init__(session)

    # Lookup

    def get_account(self, account_id: int) -> LedgerAccountInfo:
        return LedgerAccountInfo.from_model(self._load(account_id))

    def resolve_postable(
        self,
        account_id: int,
        *,
        currency_code: str | None = None,
        manual_entry: bool = True,
    ) -> LedgerAccountInfo:
        """
        Return the account if a journal line may be posted to it.

        Raises:
            AccountNotFoundError: Unknown id.
            AccountDisabledError: Account is disabled.
            HeaderAccountPostingError: Account is a HEADER account.
            ManualEntriesNotAllowedError: Manual entry on an account that
                refuses them.
            AccountCurrencyMismatchError: Account is restricted to another
                currency.
        """
        account = self._load(account_id)
        if account.disabled:
            raise AccountDisabledError(account.id, account.gl_code)
        if account.is_header_account:
            raise HeaderAccountPostingError(account.id, account.gl_code)
        if manual_entry and not account.manual_entries_allowed:
            raise ManualEntriesNotAllowedError(account.id, account.gl_code)
        if (
            currency_code is not None
            and account.currency_code is not None
            and account.currency_code != currency_code
        ):
            raise AccountCurrencyMismatchError(
                account.id, account.currency_code, currency_code,
            )
        return LedgerAccountInfo.from_model(account)

    # Commands

    def create_account(
        self,
        command: Mapping[str, Any],
        actor_id: int,
    ) -> LedgerAccountInfo:
        """
        Create an account from an API command and assign its hierarchy path.

        The path needs the generated id, so the row is flushed first and
        the path written in a second flush.
        """
        errors = validate_account_command(
            command, allowed_types=_CLASSIFICATIONS, allowed_usages=_USAGES,
        )
        if errors:
            raise AccountCommandValidationError(errors)

        gl_code = parse_text(command["glCode"])
        self._assert_gl_code_free(gl_code)

        parent_id = parse_int(command.get("parentId"))
        parent = self._load_parent(parent_id) if parent_id is not None else None

        account = LedgerAccount(
            name=parse_text(command["name"]),
            gl_code=gl_code,
            parent_id=parent_id,
            currency_code=_upper(parse_text(command.get("currencyCode"))),
            classification=parse_int(command["type"]),
            usage=parse_int(command["usage"]),
            disabled=_flag(command, "disabled", default=False),
            manual_entries_allowed=_flag(command, "manualEntriesAllowed", default=True),
            affects_loan=_flag(command, "affectsLoan", default=False),
            description=parse_text(command.get("description")),
            tag_id=parse_int(command.get("tagId")),
            created_by_id=actor_id,
        )
        self.session.add(account)
        self.session.flush()

        arena = {account.id: account}
        if parent is not None:
            arena[parent.id] = parent
        account.hierarchy = compute_hierarchy(account, arena)
        self.session.flush()

        logger.info(
            "ledger_account_created",
            extra={
                "account_id": account.id,
                "gl_code": account.gl_code,
                "parent_id": account.parent_id,
                "hierarchy": account.hierarchy,
                "usage": account.usage,
            },
        )
        return LedgerAccountInfo.from_model(account)

    def update_account(
        self,
        account_id: int,
        command: Mapping[str, Any],
        actor_id: int,
    ) -> ChangeSet:
        """
        Apply an update command; return the parameters that changed.

        When ``parentId`` changes the account is re-parented and the
        hierarchy paths of its whole subtree are recomputed.
        """
        account = self._load(account_id)

        errors = validate_account_command(
            command,
            allowed_types=_CLASSIFICATIONS,
            allowed_usages=_USAGES,
            for_update=True,
        )
        if errors:
            raise AccountCommandValidationError(errors)

        if AccountField.GL_CODE.value in command:
            gl_code = parse_text(command[AccountField.GL_CODE.value])
            if gl_code != account.gl_code:
                self._assert_gl_code_free(gl_code)

        if AccountField.PARENT_ID.value in command:
            new_parent_id = parse_int(command[AccountField.PARENT_ID.value])
            if new_parent_id is not None and new_parent_id != account.parent_id:
                self._assert_no_cycle(account.id, new_parent_id)
                self._load_parent(new_parent_id)

        if AccountField.USAGE.value in command:
            new_usage = parse_int(command[AccountField.USAGE.value])
            if new_usage != account.usage:
                self._assert_usage_change_allowed(account, new_usage)

        changes = track_changes(account, command, GL_ACCOUNT_FIELDS)
        if not changes:
            logger.debug("ledger_account_unchanged", extra={"account_id": account.id})
            return changes

        account.updated_by_id = actor_id
        if AccountField.PARENT_ID in changes:
            self._rehome_subtree(account)
        self.session.flush()

        logger.info(
            "ledger_account_updated",
            extra={
                "account_id": account.id,
                "changed_fields": list(changes),
            },
        )
        return changes

    def delete_account(self, account_id: int) -> None:
        """Delete an account that has neither children nor journal lines."""
        account = self._load(account_id)
        if self._has_children(account.id):
            raise AccountInUseError(account.id, "account has child accounts")
        if self._has_journal_lines(account.id):
            raise AccountInUseError(account.id, "account has journal lines")

        self.session.delete(account)
        self.session.flush()
        logger.info(
            "ledger_account_deleted",
            extra={"account_id": account_id, "gl_code": account.gl_code},
        )

    # Internals

    def _load(self, account_id: int) -> LedgerAccount:
        account = self.session.get(LedgerAccount, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def _load_parent(self, parent_id: int) -> LedgerAccount:
        parent = self._load(parent_id)
        if not parent.is_header_account:
            raise InvalidParentAccountError(
                parent_id, "parent account must be a HEADER account",
            )
        return parent

    def _assert_gl_code_free(self, gl_code: str) -> None:
        taken = self.session.scalar(
            select(exists().where(LedgerAccount.gl_code == gl_code))
        )
        if taken:
            raise DuplicateGLCodeError(gl_code)

    def _assert_no_cycle(self, account_id: int, new_parent_id: int) -> None:
        """Walk up from the proposed parent; meeting the account is a cycle."""
        seen: set[int] = set()
        current: int | None = new_parent_id
        while current is not None and current not in seen:
            if current == account_id:
                logger.warning(
                    "account_hierarchy_cycle_rejected",
                    extra={"account_id": account_id, "parent_id": new_parent_id},
                )
                raise AccountHierarchyCycleError(account_id, new_parent_id)
            seen.add(current)
            node = self.session.get(LedgerAccount, current)
            current = node.parent_id if node is not None else None

    def _assert_usage_change_allowed(self, account: LedgerAccount, new_usage: int) -> None:
        if account.is_header_account and self._has_children(account.id):
            raise AccountInUseError(
                account.id, "a HEADER account with children cannot change usage",
            )
        if account.is_detail_account and self._has_journal_lines(account.id):
            raise AccountInUseError(
                account.id, "a DETAIL account with journal lines cannot change usage",
            )

    def _has_children(self, account_id: int) -> bool:
        return bool(
            self.session.scalar(
                select(exists().where(LedgerAccount.parent_id == account_id))
            )
        )

    def _has_journal_lines(self, account_id: int) -> bool:
        return bool(
            self.session.scalar(
                select(exists().where(JournalLine.account_id == account_id))
            )
        )

    def _rehome_subtree(self, account: LedgerAccount) -> None:
        """Recompute the paths of ``account`` and all of its descendants."""
        arena: dict[int, LedgerAccount] = {account.id: account}
        if account.parent_id is not None:
            parent = self._load(account.parent_id)
            arena[parent.id] = parent

        frontier = [account.id]
        while frontier:
            rows = self.session.scalars(
                select(LedgerAccount).where(LedgerAccount.parent_id.in_(frontier))
            ).all()
            frontier = [row.id for row in rows if row.id not in arena]
            arena.update({row.id: row for row in rows})

        updated = 0
        for node_id, path in recompute_subtree(account.id, arena):
            arena[node_id].hierarchy = path
            updated += 1

        logger.info(
            "account_subtree_rehomed",
            extra={
                "account_id": account.id,
                "parent_id": account.parent_id,
                "hierarchy": account.hierarchy,
                "accounts_updated": updated,
            },
        )


def _flag(command: Mapping[str, Any], name: str, *, default: bool) -> bool:
    value = command.get(name)
    if value is None:
        return default
    return parse_bool(value)


def _upper(value: str | None) -> str | None:
    return value.upper() if value else None
