"""
Config -> Kernel Bridges.

Functions that convert a LedgerConfiguration into kernel-compatible
inputs.  They live in ledger_config (the producer) because the kernel must
NEVER import ledger_config.

Usage:
    from ledger_config import get_active_config
    from ledger_config.bridges import build_validation_limits, init_engine

    config = get_active_config()
    init_engine(config)
    service = JournalEntryService(session, limits=build_validation_limits(config))
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from ledger_config.schema import LedgerConfiguration
from ledger_kernel.db.engine import init_engine_from_url
from ledger_kernel.domain.journal_validator import JournalValidationLimits
from ledger_kernel.logging_config import configure_logging


def build_validation_limits(config: LedgerConfiguration) -> JournalValidationLimits:
    """Journal validator limits from the configuration's validation section."""
    return JournalValidationLimits(
        comments_max_length=config.validation.comments_max_length,
        reference_number_max_length=config.validation.reference_number_max_length,
        amount_max_integer_digits=config.validation.amount_max_integer_digits,
        amount_max_decimal_places=config.validation.amount_max_decimal_places,
        resource=config.validation.resource,
    )


def init_engine(config: LedgerConfiguration) -> Engine:
    """Initialize the kernel's engine from the configuration's database section."""
    db = config.database
    return init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
    )


def configure_kernel_logging(config: LedgerConfiguration) -> None:
    """Configure the ledger_kernel logger hierarchy at the configured level."""
    configure_logging(level=logging.getLevelName(config.logging.level))
