import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


class Country(NamedTuple):
    text: str
    value: str  # ISO 3166-1 alpha-2
    dial_code: str


class City(NamedTuple):
    name: str
    country: str  # owning country's ISO code


class Industry(NamedTuple):
    label: str


def _load(filename: str) -> list:
    path = DATA_DIR / filename
    with open(path, encoding="utf-8") as f:
        rows = json.load(f)
    logger.info(f"📚 Loaded {len(rows)} entries from {path.name}")
    return rows


# ── Static Directory ──────────────────────────────────────────────────────

@lru_cache(maxsize=None)
def get_all_countries() -> tuple:
    return tuple(
        Country(row["text"], row["value"], str(row.get("dialCode", "")))
        for row in _load("countries.json")
    )


@lru_cache(maxsize=None)
def get_all_cities() -> tuple:
    return tuple(City(row["name"], row["country"]) for row in _load("cities.json"))


@lru_cache(maxsize=None)
def get_all_industries() -> tuple:
    return tuple(Industry(row["label"]) for row in _load("industries.json"))


def find_country(country_name: str):
    """Look up a country by its display text. Returns None if unknown."""
    for country in get_all_countries():
        if country.text == country_name:
            return country
    return None


# ── Derived Lookups ───────────────────────────────────────────────────────

def country_options() -> list[str]:
    return [country.text for country in get_all_countries()]


def industry_options() -> list[str]:
    return [industry.label for industry in get_all_industries()]


def city_options(country_name: str) -> list[str]:
    """
    Names of the cities that belong to the given country, sorted ascending.
    An unknown or empty country yields an empty list.
    """
    country = find_country(country_name)
    if country is None:
        return []

    names = [city.name for city in get_all_cities() if city.country == country.value]
    names.sort(key=lambda name: (name.casefold(), name))
    return names


def country_code(country_name: str) -> str:
    """Lowercase ISO code used to seed the phone input's region."""
    country = find_country(country_name)
    return country.value.lower() if country else ""


def dial_code(country_name: str) -> str:
    country = find_country(country_name)
    return country.dial_code if country else ""
