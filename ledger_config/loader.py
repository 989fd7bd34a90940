"""
Configuration Loader (``ledger_config.loader``).

Loads a configuration set's ``root.yaml`` and parses it into the frozen
dataclasses of ``ledger_config.schema``.  Build/test tooling: runtime
callers go through ``ledger_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Out-of-range values  -> ``ValueError`` from the schema dataclasses.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import (
    DatabaseDef,
    LedgerConfiguration,
    LoggingDef,
    ValidationLimitsDef,
)

_VALID_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_validation_limits(data: dict[str, Any]) -> ValidationLimitsDef:
    return ValidationLimitsDef(
        comments_max_length=int(data.get("comments_max_length", 500)),
        reference_number_max_length=int(data.get("reference_number_max_length", 100)),
        amount_max_integer_digits=int(data.get("amount_max_integer_digits", 13)),
        amount_max_decimal_places=int(data.get("amount_max_decimal_places", 6)),
        resource=str(data.get("resource", "GLJournalEntry")),
    )


def parse_database(data: dict[str, Any]) -> DatabaseDef:
    return DatabaseDef(
        url=str(data.get("url", "sqlite://")),
        echo=bool(data.get("echo", False)),
        pool_size=int(data.get("pool_size", 5)),
        max_overflow=int(data.get("max_overflow", 10)),
        pool_timeout=int(data.get("pool_timeout", 30)),
        pool_recycle=int(data.get("pool_recycle", 1800)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingDef:
    level = str(data.get("level", "INFO")).upper()
    if level not in _VALID_LEVELS:
        raise ValueError(f"Unknown logging level: {level!r}")
    return LoggingDef(level=level)


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization (deterministic)."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def load_configuration(config_dir: Path) -> LedgerConfiguration:
    """Parse ``<config_dir>/root.yaml`` into a LedgerConfiguration."""
    data = load_yaml_file(config_dir / "root.yaml")
    return LedgerConfiguration(
        config_id=data["config_id"],
        version=int(data["version"]),
        description=data.get("description", ""),
        validation=parse_validation_limits(data.get("validation") or {}),
        database=parse_database(data.get("database") or {}),
        logging=parse_logging(data.get("logging") or {}),
        checksum=compute_checksum(data),
    )
