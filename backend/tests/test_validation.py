from datetime import date

import pytest

from fitstudio.errors import ValidationError
from fitstudio.services.validation import (
    require_date,
    require_not_past,
    require_time,
    validate_client_fields,
    validate_email,
    validate_name,
    validate_phone,
)


@pytest.mark.parametrize("email", ["anna@example.com", " a.b+c@studio.it "])
def test_valid_emails(email):
    assert validate_email(email)


@pytest.mark.parametrize("email", ["", "anna", "anna@example", "an na@example.com", "@example.com"])
def test_invalid_emails(email):
    assert not validate_email(email)


@pytest.mark.parametrize("phone", ["+39 333 1234567", "(02) 555-0199", "3331234567"])
def test_valid_phones(phone):
    assert validate_phone(phone)


@pytest.mark.parametrize("phone", ["", "12345", "+39 333 abc 4567", "1" * 25])
def test_invalid_phones(phone):
    assert not validate_phone(phone)


def test_name_length_is_trimmed():
    assert validate_name(" Al ")
    assert not validate_name("  A  ")
    assert not validate_name("x" * 101)


def test_client_fields_report_every_problem():
    errors = validate_client_fields("A", "nope", "12")

    assert set(errors) == {"clientName", "clientEmail", "clientPhone"}
    assert validate_client_fields("Anna", "anna@example.com", "+39 333 1234567") == {}


@pytest.mark.parametrize("value", ["2030-1-7", "07/01/2030", "2030-02-30", "", None])
def test_require_date_rejects_malformed(value):
    with pytest.raises(ValidationError):
        require_date(value)


def test_require_date_parses():
    assert require_date("2030-01-07") == date(2030, 1, 7)


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon"])
def test_require_time_rejects_malformed(value):
    with pytest.raises(ValidationError):
        require_time(value)


def test_require_not_past():
    require_not_past(date(2030, 1, 7), date(2030, 1, 7))
    with pytest.raises(ValidationError):
        require_not_past(date(2030, 1, 6), date(2030, 1, 7))
