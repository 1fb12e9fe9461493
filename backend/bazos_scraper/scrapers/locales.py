"""
Per-country vocabulary for the Bazos domains.

Everything that differs between bazos.sk and bazos.cz lives in LOCALES, so a
new domain is a new entry here rather than new branches in the scraper.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Pattern, Tuple

from bazos_scraper.models.listing import Country


@dataclass(frozen=True)
class Locale:
    domain: str
    submit_label: str
    free_tokens: Tuple[str, ...]
    name_label: str
    today_token: str
    yesterday_token: str
    hours_ago: Pattern[str]
    days_ago: Pattern[str]

    @property
    def base_url(self) -> str:
        return f"https://www.{self.domain}"


LOCALES: Dict[Country, Locale] = {
    Country.SK: Locale(
        domain="bazos.sk",
        submit_label="Hľadať",
        free_tokens=("zadarmo",),
        name_label="Meno:",
        today_token="dnes",
        yesterday_token="včera",
        hours_ago=re.compile(r"pred\s+(\d+)\s+hodinami"),
        days_ago=re.compile(r"pred\s+(\d+)\s+dňami"),
    ),
    Country.CZ: Locale(
        domain="bazos.cz",
        submit_label="Hledat",
        free_tokens=("zdarma",),
        name_label="Jméno:",
        today_token="dnes",
        yesterday_token="včera",
        hours_ago=re.compile(r"p[řr]ed\s+(\d+)\s+hodinami"),
        days_ago=re.compile(r"před\s+(\d+)\s+dny"),
    ),
}

# Free-item spellings from every domain; sellers don't stick to their own
FREE_TOKENS: Tuple[str, ...] = tuple(t for loc in LOCALES.values() for t in loc.free_tokens)


def get_locale(country) -> Locale:
    return LOCALES[Country(country)]


def locales_for(country) -> List[Locale]:
    """The active country's locale first, then the rest in table order."""
    active = get_locale(country)
    return [active] + [loc for loc in LOCALES.values() if loc is not active]
