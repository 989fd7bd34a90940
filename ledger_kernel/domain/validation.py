"""
Lightweight domain validation helpers.

Pure per-parameter checks with no I/O, shared by the journal entry
validator and the GL account command validator.  Each ``check_*`` returns a
list of ParameterError (empty when the value is acceptable); each
``parse_*`` converts an already-checked raw value to its typed form and
returns None when it cannot.

Error codes follow ``validation.msg.<resource>.<parameter>.<reason>``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from ledger_kernel.domain.dtos import ErrorKind, ParameterError

# Ids are stored as BIGINT; longer digit strings are not ids.
_MAX_INTEGER_DIGITS = 18
_INTEGER_PATTERN = re.compile(rf"[+-]?\d{{1,{_MAX_INTEGER_DIGITS}}}")


def error_code(resource: str, parameter: str, reason: str) -> str:
    return f"validation.msg.{resource}.{parameter}.{reason}"


def parameter_error(
    resource: str,
    parameter: str,
    kind: ErrorKind,
    reason: str,
    message: str,
    value: Any = None,
    details: dict[str, Any] | None = None,
) -> ParameterError:
    return ParameterError(
        parameter=parameter,
        kind=kind,
        error_code=error_code(resource, parameter, reason),
        message=message,
        value=value,
        details=details,
    )


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


# Parsers


def parse_int(value: Any) -> int | None:
    """Integer from an int or a digit string; bools and floats are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    if (
        isinstance(value, Decimal)
        and value.is_finite()
        and value.adjusted() < _MAX_INTEGER_DIGITS
        and value == value.to_integral_value()
    ):
        return int(value)
    return None


def parse_decimal(value: Any) -> Decimal | None:
    """Exact Decimal from a Decimal, int or numeric string; floats are rejected."""
    if isinstance(value, (bool, float)):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def decimal_digits(value: Decimal) -> tuple[int, int]:
    """
    ``(integer_digits, decimal_places)`` of a finite Decimal.

    Trailing fractional zeros do not count, so ``Decimal("1.500000000")``
    has one decimal place.  Computed from the digit tuple, never through
    context arithmetic, so no rounding is involved.
    """
    _, digits, exponent = value.as_tuple()
    if not any(digits):
        return 0, 0
    digits = list(digits)
    while exponent < 0 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    return max(len(digits) + exponent, 0), max(-exponent, 0)


def parse_date(value: Any) -> date | None:
    """Calendar date from a date, datetime or ISO-8601 string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def parse_text(value: Any) -> str | None:
    """Stripped text; blank becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# Checks


def check_required(resource: str, parameter: str, value: Any) -> list[ParameterError]:
    if is_blank(value):
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.MISSING_REQUIRED_FIELD,
                "cannot.be.blank",
                f"The parameter {parameter} is mandatory.",
            )
        ]
    return []


def check_positive_int(
    resource: str,
    parameter: str,
    value: Any,
    *,
    required: bool = True,
) -> list[ParameterError]:
    """Value must be an integer greater than zero."""
    if is_blank(value):
        return check_required(resource, parameter, value) if required else []

    parsed = parse_int(value)
    if parsed is None:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.INVALID_FORMAT,
                "not.a.number",
                f"The parameter {parameter} must be a whole number.",
                value=value,
            )
        ]
    if parsed <= 0:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.OUT_OF_RANGE,
                "not.greater.than.zero",
                f"The parameter {parameter} must be greater than 0.",
                value=parsed,
            )
        ]
    return []


def check_date(
    resource: str,
    parameter: str,
    value: Any,
    *,
    required: bool = True,
) -> list[ParameterError]:
    if is_blank(value):
        return check_required(resource, parameter, value) if required else []

    if parse_date(value) is None:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.INVALID_FORMAT,
                "invalid.date.format",
                f"The parameter {parameter} must be a calendar date (YYYY-MM-DD).",
                value=value,
            )
        ]
    return []


def check_text(
    resource: str,
    parameter: str,
    value: Any,
    *,
    max_length: int | None = None,
    required: bool = False,
) -> list[ParameterError]:
    """Optional (or required) text, bounded by ``max_length`` characters."""
    if is_blank(value):
        return check_required(resource, parameter, value) if required else []

    if not isinstance(value, str):
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.INVALID_FORMAT,
                "not.a.string",
                f"The parameter {parameter} must be text.",
                value=value,
            )
        ]
    if max_length is not None and len(value) > max_length:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.OUT_OF_RANGE,
                "exceeds.max.length",
                f"The parameter {parameter} exceeds max length of {max_length}.",
                details={"max_length": max_length, "actual_length": len(value)},
            )
        ]
    return []


def check_non_negative_amount(
    resource: str,
    parameter: str,
    value: Any,
    *,
    required: bool = True,
    max_integer_digits: int | None = None,
    max_decimal_places: int | None = None,
) -> list[ParameterError]:
    """
    Value must be a decimal amount that is zero or greater and, when limits
    are given, fit ``max_integer_digits`` digits before and
    ``max_decimal_places`` after the decimal point.
    """
    if is_blank(value):
        return check_required(resource, parameter, value) if required else []

    parsed = parse_decimal(value)
    if parsed is None:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.INVALID_FORMAT,
                "invalid.decimal.format",
                f"The parameter {parameter} must be a decimal amount.",
                value=str(value),
            )
        ]
    if parsed < 0:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.OUT_OF_RANGE,
                "not.zero.or.greater",
                f"The parameter {parameter} must be greater than or equal to 0.",
                value=parsed,
            )
        ]
    integer_digits, decimal_places = decimal_digits(parsed)
    if max_integer_digits is not None and integer_digits > max_integer_digits:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.OUT_OF_RANGE,
                "exceeds.max.integer.digits",
                f"The parameter {parameter} allows at most {max_integer_digits} "
                "digits before the decimal point.",
                value=str(value),
                details={
                    "max_integer_digits": max_integer_digits,
                    "integer_digits": integer_digits,
                },
            )
        ]
    if max_decimal_places is not None and decimal_places > max_decimal_places:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.OUT_OF_RANGE,
                "exceeds.max.decimal.places",
                f"The parameter {parameter} allows at most {max_decimal_places} "
                "decimal places.",
                value=str(value),
                details={
                    "max_decimal_places": max_decimal_places,
                    "decimal_places": decimal_places,
                },
            )
        ]
    return []


def check_boolean(resource: str, parameter: str, value: Any) -> list[ParameterError]:
    """Optional true/false flag."""
    if value is None or parse_bool(value) is not None:
        return []
    return [
        parameter_error(
            resource,
            parameter,
            ErrorKind.INVALID_FORMAT,
            "must.be.true.or.false",
            f"The parameter {parameter} must be set as true or false.",
            value=value,
        )
    ]


def check_one_of(
    resource: str,
    parameter: str,
    value: Any,
    allowed: Iterable[int],
    *,
    required: bool = True,
) -> list[ParameterError]:
    """Integer-coded enumeration value."""
    if is_blank(value):
        return check_required(resource, parameter, value) if required else []

    allowed_values = sorted(allowed)
    parsed = parse_int(value)
    if parsed is None or parsed not in allowed_values:
        return [
            parameter_error(
                resource,
                parameter,
                ErrorKind.OUT_OF_RANGE,
                "is.not.one.of.expected.enumerations",
                f"The parameter {parameter} must be one of {allowed_values}.",
                value=value,
                details={"allowed": allowed_values},
            )
        ]
    return []
