"""
ledger_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    directly.  YAML loading is internal tooling.

Architecture position:
    Configuration sits above ``ledger_kernel``.  The kernel MUST NEVER
    import from ``ledger_config``; ``ledger_config.bridges`` translates the
    configuration into kernel inputs.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration set does not exist.
    - ``KeyError`` / ``ValueError`` -- malformed configuration.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``LEDGER_CONFIG_TRACE`` log entry with the config id, version and
    checksum.
"""

from __future__ import annotations

from pathlib import Path

from ledger_config.loader import load_configuration
from ledger_config.schema import LedgerConfiguration
from ledger_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_CONFIG_ID = "default"


def get_active_config(
    config_id: str = DEFAULT_CONFIG_ID,
    config_dir: Path | None = None,
) -> LedgerConfiguration:
    """The ONLY public configuration entrypoint.

    Args:
        config_id: Name of the configuration set directory.
        config_dir: Override path to the configuration sets directory.
            Defaults to ledger_config/sets/.

    Raises:
        FileNotFoundError: If the configuration set does not exist.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    set_dir = sets_dir / config_id
    if not (set_dir / "root.yaml").is_file():
        raise FileNotFoundError(f"Configuration set not found: {set_dir}")

    config = load_configuration(set_dir)

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "trace_type": "LEDGER_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
        },
    )
    return config


__all__ = ["DEFAULT_CONFIG_ID", "LedgerConfiguration", "get_active_config"]
