"""AccountCommand -- Pure validation of GL account create/update commands."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ledger_kernel.domain.change_tracker import AccountField
from ledger_kernel.domain.dtos import ErrorKind, ParameterError
from ledger_kernel.domain.validation import (
    check_boolean,
    check_one_of,
    check_positive_int,
    check_text,
    parameter_error,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.account_command")

GL_ACCOUNT_RESOURCE = "GLAccount"

NAME_MAX_LENGTH = 45
GL_CODE_MAX_LENGTH = 100
CURRENCY_CODE_MAX_LENGTH = 3
DESCRIPTION_MAX_LENGTH = 500

# On update these may be omitted but never cleared.
_NOT_NULLABLE = (
    AccountField.NAME,
    AccountField.GL_CODE,
    AccountField.TYPE,
    AccountField.USAGE,
    AccountField.DISABLED,
    AccountField.MANUAL_ENTRIES_ALLOWED,
    AccountField.AFFECTS_LOAN,
)


def validate_account_command(
    command: Mapping[str, Any],
    *,
    allowed_types: Iterable[int],
    allowed_usages: Iterable[int],
    for_update: bool = False,
) -> list[ParameterError]:
    """
    Check a GL account command.

    On create ``name``, ``glCode``, ``type`` and ``usage`` are mandatory.
    On update every parameter is optional, but a present parameter must be
    valid and the non-nullable ones cannot be set to null.
    """
    resource = GL_ACCOUNT_RESOURCE
    required = not for_update
    errors: list[ParameterError] = []

    if for_update:
        for account_field in _NOT_NULLABLE:
            if account_field.value in command and command[account_field.value] is None:
                errors.append(
                    parameter_error(
                        resource,
                        account_field.value,
                        ErrorKind.MISSING_REQUIRED_FIELD,
                        "cannot.be.blank",
                        f"The parameter {account_field.value} cannot be cleared.",
                    )
                )
    flagged = {e.parameter for e in errors}

    def present(name: str) -> bool:
        return name not in flagged and (not for_update or name in command)

    if present("name"):
        errors.extend(
            check_text(
                resource, "name", command.get("name"),
                max_length=NAME_MAX_LENGTH, required=required or "name" in command,
            )
        )
    if present("glCode"):
        errors.extend(
            check_text(
                resource, "glCode", command.get("glCode"),
                max_length=GL_CODE_MAX_LENGTH, required=required or "glCode" in command,
            )
        )
    if present("type"):
        errors.extend(check_one_of(resource, "type", command.get("type"), allowed_types))
    if present("usage"):
        errors.extend(check_one_of(resource, "usage", command.get("usage"), allowed_usages))
    if present("currencyCode"):
        errors.extend(
            check_text(
                resource, "currencyCode", command.get("currencyCode"),
                max_length=CURRENCY_CODE_MAX_LENGTH,
            )
        )
    if present("description"):
        errors.extend(
            check_text(
                resource, "description", command.get("description"),
                max_length=DESCRIPTION_MAX_LENGTH,
            )
        )
    if present("parentId"):
        errors.extend(
            check_positive_int(resource, "parentId", command.get("parentId"), required=False)
        )
    if present("tagId"):
        errors.extend(
            check_positive_int(resource, "tagId", command.get("tagId"), required=False)
        )
    for flag in ("disabled", "manualEntriesAllowed", "affectsLoan"):
        if present(flag):
            errors.extend(check_boolean(resource, flag, command.get(flag)))

    if errors:
        logger.warning(
            "account_command_invalid",
            extra={
                "for_update": for_update,
                "error_count": len(errors),
                "parameters": [e.parameter for e in errors],
            },
        )
    return errors
