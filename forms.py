"""
Company registration form state.

The form is an immutable record; every change goes through one of the
reducers below and returns a new record. Handlers keep the current record in
FSM storage as its JSON payload.
"""
import random
import re
from dataclasses import dataclass, fields, replace
from typing import Optional

from directory import city_options

# Payload key (as the registration endpoint expects it) → attribute name
PAYLOAD_KEYS = {
    "companyName": "company_name",
    "contactPersonFullName": "contact_person_full_name",
    "country": "country",
    "city": "city",
    "phoneNumber": "phone_number",
    "industry": "industry",
    "email": "email",
    "password": "password",
    "reWritePassword": "re_write_password",
}

PASSWORD_FIELDS = ("password", "re_write_password")

PASSWORD_SYMBOLS = "#?!@$%^&*-"
PASSWORD_PATTERN = re.compile(r"(?=.*?[A-Z])(?=.*?[a-z])(?=.*?[0-9])(?=.*?[#?!@$%^&*-]).{8,}")

MSG_PASSWORDS_MISMATCH = "Passwords do not match"
MSG_PASSWORD_WEAK = (
    "Password should be at least 8 characters long and include at least one number, "
    "one letter (uppercase and lowercase), and one symbol"
)
MSG_FIELDS_MISSING = "Make sure that all fields are filled!"


@dataclass(frozen=True)
class RegistrationFormState:
    company_name: str = ""
    contact_person_full_name: str = ""
    country: str = ""
    city: str = ""
    phone_number: str = ""
    industry: str = ""
    email: str = ""
    password: str = ""
    re_write_password: str = ""

    def to_payload(self) -> dict:
        """JSON body for the registration endpoint (camelCase keys)."""
        return {key: getattr(self, attr) for key, attr in PAYLOAD_KEYS.items()}

    @classmethod
    def from_payload(cls, payload: Optional[dict]) -> "RegistrationFormState":
        if not payload:
            return cls()
        return cls(**{attr: payload.get(key) or "" for key, attr in PAYLOAD_KEYS.items()})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) == "" for f in fields(self))


def _attr_name(name: str) -> str:
    if name in PAYLOAD_KEYS:
        return PAYLOAD_KEYS[name]
    if name in PAYLOAD_KEYS.values():
        return name
    raise KeyError(f"Unknown registration field: {name}")


# ── Reducers ──────────────────────────────────────────────────────────────

def clear_form() -> RegistrationFormState:
    return RegistrationFormState()


def update_field(state: RegistrationFormState, name: str, value: str) -> RegistrationFormState:
    """Replace a single field. Accepts payload or attribute names; no validation."""
    return replace(state, **{_attr_name(name): value})


def change_country(state: RegistrationFormState, country: Optional[str],
                   rng: Optional[random.Random] = None) -> RegistrationFormState:
    """
    Set the country and pick a default city from that country's list,
    using `rng` (the module-level random generator by default).
    Clearing the country also clears the city and the phone number.
    """
    country = country or ""
    cities = city_options(country)
    default_city = (rng or random).choice(cities) if cities else ""

    return replace(
        state,
        country=country,
        city=default_city,
        phone_number=state.phone_number if country else "",
    )


def change_city(state: RegistrationFormState, city: Optional[str]) -> RegistrationFormState:
    return replace(state, city=city or "")


def change_industry(state: RegistrationFormState, industry: Optional[str]) -> RegistrationFormState:
    return replace(state, industry=industry or "")


def change_phone(state: RegistrationFormState, phone_number: Optional[str]) -> RegistrationFormState:
    return replace(state, phone_number=phone_number or "")


# ── Validation ────────────────────────────────────────────────────────────

def passwords_match(state: RegistrationFormState) -> bool:
    return state.password == state.re_write_password


def is_password_strong(password: str) -> bool:
    return PASSWORD_PATTERN.fullmatch(password) is not None


def all_fields_filled_except_password(state: RegistrationFormState) -> bool:
    return all(
        getattr(state, f.name) != ""
        for f in fields(state)
        if f.name not in PASSWORD_FIELDS
    )


def validate_for_submit(state: RegistrationFormState) -> Optional[str]:
    """
    Run the pre-submit checks in order (match → strength → required).
    Returns the message for the first failing check, or None if the form
    can be sent.
    """
    if not passwords_match(state):
        return MSG_PASSWORDS_MISMATCH
    if not is_password_strong(state.password):
        return MSG_PASSWORD_WEAK
    if not all_fields_filled_except_password(state):
        return MSG_FIELDS_MISSING
    return None
