"""
Configuration schema (``ledger_config.schema``).

Frozen dataclasses that mirror the YAML configuration sets under
``ledger_config/sets/``.  They are produced by ``ledger_config.loader`` and
consumed through ``ledger_config.get_active_config()``; kernel inputs are
derived from them by ``ledger_config.bridges``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationLimitsDef:
    """Journal entry validation limits."""

    comments_max_length: int = 500
    reference_number_max_length: int = 100
    amount_max_integer_digits: int = 13
    amount_max_decimal_places: int = 6
    resource: str = "GLJournalEntry"

    def __post_init__(self) -> None:
        if self.comments_max_length <= 0:
            raise ValueError("comments_max_length must be positive")
        if self.reference_number_max_length <= 0:
            raise ValueError("reference_number_max_length must be positive")
        # Amounts are stored as NUMERIC(19, 6); limits may only narrow it.
        if not 0 < self.amount_max_integer_digits <= 13:
            raise ValueError("amount_max_integer_digits must be between 1 and 13")
        if not 0 <= self.amount_max_decimal_places <= 6:
            raise ValueError("amount_max_decimal_places must be between 0 and 6")


@dataclass(frozen=True)
class DatabaseDef:
    """Connection settings handed to ``init_engine_from_url``."""

    url: str = "sqlite://"
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


@dataclass(frozen=True)
class LoggingDef:
    """Level of the ``ledger_kernel`` logger hierarchy."""

    level: str = "INFO"


@dataclass(frozen=True)
class LedgerConfiguration:
    """
    One assembled configuration set.

    ``checksum`` is the SHA-256 of the canonical JSON form of the source
    YAML and identifies the exact configuration in log traces.
    """

    config_id: str
    version: int
    description: str = ""
    validation: ValidationLimitsDef = field(default_factory=ValidationLimitsDef)
    database: DatabaseDef = field(default_factory=DatabaseDef)
    logging: LoggingDef = field(default_factory=LoggingDef)
    checksum: str = ""
