"""
Tests for the registration form record, its reducers and the
pre-submit validation order.
"""

import random

import pytest

from directory import city_options
from forms import (
    MSG_FIELDS_MISSING,
    MSG_PASSWORD_WEAK,
    MSG_PASSWORDS_MISMATCH,
    RegistrationFormState,
    all_fields_filled_except_password,
    change_city,
    change_country,
    change_industry,
    change_phone,
    clear_form,
    is_password_strong,
    passwords_match,
    update_field,
    validate_for_submit,
)


class FirstChoice:
    """Deterministic stand-in for the random module."""

    def choice(self, seq):
        return seq[0]


def test_new_form_is_empty():
    form = clear_form()
    assert form.is_empty()
    assert form.to_payload() == {
        "companyName": "",
        "contactPersonFullName": "",
        "country": "",
        "city": "",
        "phoneNumber": "",
        "industry": "",
        "email": "",
        "password": "",
        "reWritePassword": "",
    }


def test_payload_round_trip_keeps_every_field(filled_form):
    assert RegistrationFormState.from_payload(filled_form.to_payload()) == filled_form
    assert RegistrationFormState.from_payload(None) == clear_form()


def test_update_field_accepts_payload_and_attribute_names():
    form = update_field(clear_form(), "companyName", "Acme")
    form = update_field(form, "contact_person_full_name", "Jane Doe")
    assert form.company_name == "Acme"
    assert form.contact_person_full_name == "Jane Doe"


def test_update_field_returns_new_record():
    form = clear_form()
    updated = update_field(form, "email", "a@b.c")
    assert form.email == ""
    assert updated.email == "a@b.c"


def test_update_field_unknown_name():
    with pytest.raises(KeyError):
        update_field(clear_form(), "nickname", "x")


def test_update_field_does_not_validate():
    form = update_field(clear_form(), "password", "weak")
    assert form.password == "weak"


def test_change_country_picks_city_of_that_country():
    form = change_country(clear_form(), "France", rng=random.Random(7))
    assert form.country == "France"
    assert form.city in city_options("France")


def test_change_country_uses_injected_rng():
    form = change_country(clear_form(), "Germany", rng=FirstChoice())
    assert form.city == city_options("Germany")[0]


def test_change_country_replaces_city_from_previous_country(filled_form):
    assert filled_form.city == "Lyon"
    form = change_country(filled_form, "Japan")
    assert form.city != "Lyon"
    assert form.city in city_options("Japan")


def test_change_country_without_cities_leaves_city_empty(filled_form):
    form = change_country(filled_form, "Vatican City")
    assert form.country == "Vatican City"
    assert form.city == ""


def test_change_country_keeps_phone_when_country_set(filled_form):
    form = change_country(filled_form, "Spain")
    assert form.phone_number == filled_form.phone_number


@pytest.mark.parametrize("cleared", [None, ""])
def test_clearing_country_clears_city_and_phone(filled_form, cleared):
    form = change_country(filled_form, cleared)
    assert form.country == ""
    assert form.city == ""
    assert form.phone_number == ""
    assert form.company_name == filled_form.company_name


def test_direct_setters(filled_form):
    assert change_city(filled_form, "Paris").city == "Paris"
    assert change_city(filled_form, None).city == ""
    assert change_industry(filled_form, "Retail").industry == "Retail"
    assert change_industry(filled_form, None).industry == ""
    assert change_phone(filled_form, "+33100000000").phone_number == "+33100000000"
    assert change_phone(filled_form, None).phone_number == ""


def test_passwords_match_is_exact_equality():
    form = RegistrationFormState(password="Abc!1234", re_write_password="Abc!1234")
    assert passwords_match(form)
    assert not passwords_match(update_field(form, "reWritePassword", "abc!1234"))
    assert not passwords_match(update_field(form, "reWritePassword", "Abc!1234 "))
    assert passwords_match(clear_form())


@pytest.mark.parametrize("password", [
    "Str0ng!Pass",
    "Aa1#aaaa",
    "Zz9-zzzzzzzzzz",
    "P@ssw0rd",
    "Ab1?xxxx",
    "Ab1^ Ab1^",
])
def test_strong_passwords_accepted(password):
    assert is_password_strong(password)


@pytest.mark.parametrize("password", [
    "",
    "Aa1#aaa",          # 7 characters
    "aa1#aaaa",         # no uppercase
    "AA1#AAAA",         # no lowercase
    "Aab#aaaa",         # no digit
    "Aa1aaaaa",         # no symbol
    "Aa1_aaaa",         # symbol outside the allowed set
    "Aa1(aaaa",
    "Aa1#aaa\n",        # newline does not count as a character
])
def test_weak_passwords_rejected(password):
    assert not is_password_strong(password)


def test_required_fields_ignore_passwords(filled_form):
    form = update_field(update_field(filled_form, "password", ""), "reWritePassword", "")
    assert all_fields_filled_except_password(form)


@pytest.mark.parametrize("field", [
    "companyName", "contactPersonFullName", "country", "city",
    "phoneNumber", "industry", "email",
])
def test_each_required_field_is_checked(filled_form, field):
    assert not all_fields_filled_except_password(update_field(filled_form, field, ""))


def test_validate_for_submit_accepts_complete_form(filled_form):
    assert validate_for_submit(filled_form) is None


def test_validate_for_submit_order():
    # Every check fails: the mismatch is reported first
    form = RegistrationFormState(password="weak", re_write_password="other")
    assert validate_for_submit(form) == MSG_PASSWORDS_MISMATCH

    form = RegistrationFormState(password="weak", re_write_password="weak")
    assert validate_for_submit(form) == MSG_PASSWORD_WEAK

    form = RegistrationFormState(password="Str0ng!Pass", re_write_password="Str0ng!Pass")
    assert validate_for_submit(form) == MSG_FIELDS_MISSING
