"""Tests for GL account command validation."""

import pytest

from ledger_kernel.domain.account_command import (
    GL_ACCOUNT_RESOURCE,
    NAME_MAX_LENGTH,
    validate_account_command,
)
from ledger_kernel.domain.dtos import ErrorKind

TYPES = [1, 2, 3, 4, 5]
USAGES = [1, 2]


def _validate(command, **kwargs):
    return validate_account_command(
        command, allowed_types=TYPES, allowed_usages=USAGES, **kwargs
    )


def _valid_create(**overrides):
    command = {"name": "Cash", "glCode": "1100", "type": 1, "usage": 1}
    command.update(overrides)
    return command


class TestCreate:

    def test_minimal_command_is_valid(self):
        assert _validate(_valid_create()) == []

    def test_all_optional_fields_valid(self):
        command = _valid_create(
            currencyCode="KES",
            description="Cash in vault",
            parentId=4,
            tagId="12",
            disabled="false",
            manualEntriesAllowed=True,
            affectsLoan=False,
        )
        assert _validate(command) == []

    def test_empty_command_reports_mandatory_fields_in_order(self):
        errors = _validate({})

        assert [e.parameter for e in errors] == ["name", "glCode", "type", "usage"]
        assert all(e.kind is ErrorKind.MISSING_REQUIRED_FIELD for e in errors)
        assert errors[0].error_code == f"validation.msg.{GL_ACCOUNT_RESOURCE}.name.cannot.be.blank"

    def test_name_too_long(self):
        errors = _validate(_valid_create(name="x" * (NAME_MAX_LENGTH + 1)))

        assert len(errors) == 1
        assert errors[0].kind is ErrorKind.OUT_OF_RANGE
        assert errors[0].error_code.endswith("name.exceeds.max.length")

    @pytest.mark.parametrize("value", [0, 6, "asset", True])
    def test_type_outside_enumeration(self, value):
        errors = _validate(_valid_create(type=value))

        assert [e.parameter for e in errors] == ["type"]
        assert errors[0].error_code.endswith("is.not.one.of.expected.enumerations")

    def test_bad_flag(self):
        errors = _validate(_valid_create(disabled="maybe"))

        assert [e.parameter for e in errors] == ["disabled"]
        assert errors[0].error_code.endswith("must.be.true.or.false")

    def test_non_positive_parent(self):
        errors = _validate(_valid_create(parentId=0))
        assert [e.parameter for e in errors] == ["parentId"]
        assert errors[0].kind is ErrorKind.OUT_OF_RANGE

    def test_currency_code_longer_than_three(self):
        errors = _validate(_valid_create(currencyCode="USDD"))
        assert [e.parameter for e in errors] == ["currencyCode"]


class TestUpdate:

    def test_empty_update_is_valid(self):
        assert _validate({}, for_update=True) == []

    def test_partial_update_checks_only_present_fields(self):
        assert _validate({"disabled": True}, for_update=True) == []

    def test_present_field_still_validated(self):
        errors = _validate({"usage": 9}, for_update=True)
        assert [e.parameter for e in errors] == ["usage"]

    def test_non_nullable_field_cannot_be_cleared(self):
        errors = _validate({"name": None, "glCode": "1101"}, for_update=True)

        assert len(errors) == 1
        assert errors[0].parameter == "name"
        assert errors[0].kind is ErrorKind.MISSING_REQUIRED_FIELD

    def test_blank_name_rejected(self):
        errors = _validate({"name": "   "}, for_update=True)
        assert [e.parameter for e in errors] == ["name"]

    def test_nullable_fields_can_be_cleared(self):
        command = {"parentId": None, "description": None, "currencyCode": None, "tagId": None}
        assert _validate(command, for_update=True) == []


class TestLogging:

    def test_invalid_command_logged(self, captured_logs):
        _validate({})

        records = [r for r in captured_logs() if r["message"] == "account_command_invalid"]
        assert len(records) == 1
        assert records[0]["parameters"] == ["name", "glCode", "type", "usage"]
        assert records[0]["for_update"] is False
