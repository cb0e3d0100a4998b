import re
from typing import Optional

_SEPARATORS = re.compile(r"[\s\-().]")
_DIGITS = re.compile(r"\d{7,15}")


def normalize_phone(raw: str, dial_code: str = "", international: bool = False) -> Optional[str]:
    """
    Normalise a typed or shared phone number to "+<digits>".

    Typed numbers without a leading "+" or "00" are local to the selected
    country: the trunk "0" is dropped and the dial code is prepended.
    `international` marks numbers that always carry their country code
    (Telegram contacts), which are only given the "+".
    Returns None if the input is not a phone number.
    """
    if not raw:
        return None

    cleaned = _SEPARATORS.sub("", raw.strip())
    if cleaned.startswith("+"):
        digits = cleaned[1:]
    elif cleaned.startswith("00"):
        digits = cleaned[2:]
    elif international:
        digits = cleaned
    else:
        digits = dial_code + cleaned.lstrip("0")

    if not _DIGITS.fullmatch(digits):
        return None
    return f"+{digits}"
