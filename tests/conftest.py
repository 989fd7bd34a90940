"""
Pytest fixtures for the ledger kernel test suite.

Provides:
- In-memory SQLite database sessions (fresh schema per test)
- Structured log capture
- Chart-of-accounts and journal request factories
"""

import json
import logging
from collections.abc import Generator
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest
from sqlalchemy.orm import Session

from ledger_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.dtos import JournalEntryRequest, JournalLineRequest
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ledger_kernel.models.account import (
    AccountClassification,
    AccountUsage,
    LedgerAccount,
)
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.journal_selector import JournalSelector
from ledger_kernel.services.collection_sheet_service import CollectionSheetService
from ledger_kernel.services.journal_entry_service import JournalEntryService
from ledger_kernel.services.ledger_account_service import LedgerAccountService

# Test actor ID for all test operations
TEST_ACTOR_ID = 1


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            validate_journal_entry(request)
            logs = captured_logs()
            assert any(r["message"] == "journal_validation_failed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def db_engine():
    """A fresh in-memory SQLite database with all tables created."""
    eng = init_engine_from_url("sqlite://")
    create_tables()
    yield eng
    drop_tables()
    reset_engine()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    """Session on the per-test database; rolled back at teardown."""
    sess = get_session()
    yield sess
    try:
        sess.rollback()
    finally:
        sess.close()


@pytest.fixture
def test_actor_id() -> int:
    return TEST_ACTOR_ID


# =============================================================================
# Services and selectors
# =============================================================================


@pytest.fixture
def account_service(session: Session) -> LedgerAccountService:
    return LedgerAccountService(session)


@pytest.fixture
def journal_service(session: Session, account_service) -> JournalEntryService:
    return JournalEntryService(session, account_service)


@pytest.fixture
def collection_sheet_service(session: Session, journal_service) -> CollectionSheetService:
    return CollectionSheetService(session, journal_service)


@pytest.fixture
def account_selector(session: Session) -> AccountSelector:
    return AccountSelector(session)


@pytest.fixture
def journal_selector(session: Session) -> JournalSelector:
    return JournalSelector(session)


# =============================================================================
# Test data generators
# =============================================================================


@pytest.fixture
def create_account(account_service: LedgerAccountService, test_actor_id: int):
    """Factory fixture to create accounts through the service (paths assigned)."""

    def _create_account(
        gl_code: str,
        name: str | None = None,
        classification: AccountClassification = AccountClassification.ASSET,
        usage: AccountUsage = AccountUsage.DETAIL,
        parent_id: int | None = None,
        **extra,
    ):
        command = {
            "name": name or f"Account {gl_code}",
            "glCode": gl_code,
            "type": int(classification),
            "usage": int(usage),
            "parentId": parent_id,
            **extra,
        }
        return account_service.create_account(command, test_actor_id)

    return _create_account


@pytest.fixture
def standard_accounts(create_account) -> dict:
    """
    A small microfinance chart:

        Assets (HEADER)
          Cash (DETAIL)
          Loan Portfolio (DETAIL)
        Liabilities (HEADER)
          Savings Control (DETAIL)
    """
    assets = create_account("1000", "Assets", usage=AccountUsage.HEADER)
    cash = create_account("1100", "Cash", parent_id=assets.id)
    loans = create_account("1200", "Loan Portfolio", parent_id=assets.id)
    liabilities = create_account(
        "2000",
        "Liabilities",
        classification=AccountClassification.LIABILITY,
        usage=AccountUsage.HEADER,
    )
    savings = create_account(
        "2100",
        "Savings Control",
        classification=AccountClassification.LIABILITY,
        parent_id=liabilities.id,
    )
    return {
        "assets": assets,
        "cash": cash,
        "loans": loans,
        "liabilities": liabilities,
        "savings": savings,
    }


@pytest.fixture
def orm_account(session: Session):
    """Fetch the ORM row behind an account DTO."""

    def _get(account_id: int) -> LedgerAccount:
        return session.get(LedgerAccount, account_id)

    return _get


def make_request(
    debits: list[tuple[int, str]] | None = None,
    credits: list[tuple[int, str]] | None = None,
    **fields,
) -> JournalEntryRequest:
    """Build a request; lines are (gl_account_id, amount-string) pairs."""
    base = {
        "office_id": 1,
        "transaction_date": date(2024, 1, 10),
        "currency_code": "USD",
    }
    base.update(fields)
    return JournalEntryRequest(
        debits=tuple(
            JournalLineRequest(gl_account_id=acc, amount=Decimal(amt))
            for acc, amt in (debits or [])
        ),
        credits=tuple(
            JournalLineRequest(gl_account_id=acc, amount=Decimal(amt))
            for acc, amt in (credits or [])
        ),
        **base,
    )


@pytest.fixture
def request_factory():
    """Factory fixture wrapping make_request."""
    return make_request
